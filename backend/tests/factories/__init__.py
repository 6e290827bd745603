"""Factory Boy base wired to the per-test Flask-SQLAlchemy session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holder for the session the ``session`` fixture hands to factories."""

    _session = None

    @classmethod
    def set(cls, session):
        cls._session = session

    @classmethod
    def get(cls):
        """
        Return the bound session.

        :raises RuntimeError: When a factory runs in a test that did not
            request the ``session`` fixture.
        """
        if cls._session is None:
            raise RuntimeError("No session bound for factories; request the 'session' fixture.")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """
    Flush-persisting factory base.

    Rows are flushed, not committed, so tests decide when to commit and
    unique-constraint failures surface on the factory call itself.
    """

    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
