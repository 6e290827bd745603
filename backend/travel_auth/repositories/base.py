"""Generic repository base for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Session resolution (injected session or the Flask-scoped one).
- Flushing and integrity-error translation hooks.
- UTC normalization of timestamps read back from the database.
- No business logic, no commit/rollback. The transaction manager owns them.

Design decisions
----------------
* Repositories MUST remain thin and persistence-focused:
  - They never implement use cases or domain policies.
  - They never call commit/rollback.
* Repositories return domain entities, never ORM rows, so nothing outside
  this package holds a live session object.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Delete
from sqlalchemy.engine import CursorResult
from sqlalchemy.orm import Session

from travel_auth.core.extensions import db

M = TypeVar("M")  # SQLAlchemy mapped model type


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    SQLite hands back naive values even for ``DateTime(timezone=True)``
    columns; those were written in UTC and are labelled as such.

    :param value: Datetime read from or about to be written to the database.
    :returns: Aware datetime in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class BaseRepository(Generic[M]):
    """Generic, persistence-only repository for a single table.

    Subclasses MUST define:

    * ``model``: the SQLAlchemy mapped class.

    This class NEVER:

    * opens/commits/rolls back transactions,
    * implements business rules or cross-aggregate coordination.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[M]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        When no explicit session is provided the repository falls back to the
        Flask-scoped session exposed by ``travel_auth.core.extensions``.

        :param session: Session shared across the transaction scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    # ------------------------------ Session access ---------------------------

    @property
    def session(self) -> Session:
        """Return the active SQLAlchemy session.

        Prefers the injected session when provided; otherwise uses the
        Flask-scoped session managed by the extension.

        :returns: Active session bound to the current transaction.
        :rtype: :class:`sqlalchemy.orm.Session`
        """
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # --------------------------------- Writes --------------------------------

    def add(self, instance: M) -> M:
        """Stage a new row and flush so constraint violations surface here.

        :param instance: New mapped instance.
        :type instance: M
        :returns: The same instance after ``flush()``.
        :rtype: M
        :raises sqlalchemy.exc.IntegrityError: On a constraint violation.
        """
        self.session.add(instance)
        self.flush()
        return instance

    def flush(self) -> None:
        """Flush pending changes to the database without committing."""
        self.session.flush()

    def _delete_rows(self, stmt: Delete) -> int:
        """Execute a bulk ``DELETE`` and return the number of rows removed.

        :param stmt: ``DELETE`` statement with its ``WHERE`` clause.
        :returns: Affected row count reported by the driver.
        """
        result = cast(
            CursorResult[Any],
            self.session.execute(stmt.execution_options(synchronize_session=False)),
        )
        return int(result.rowcount or 0)
