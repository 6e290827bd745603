"""
SQLAlchemy transaction manager for the Flask-scoped session.
"""

from __future__ import annotations

from collections.abc import Callable
from contextvars import ContextVar
from typing import TypeVar

from sqlalchemy.orm import Session

from travel_auth.core.extensions import db

T = TypeVar("T")


class SQLAlchemyTransactionManager:
    """
    :class:`~travel_auth.services._shared.ports.TransactionManager` over the
    Flask-scoped session.

    Repositories built without an explicit session resolve ``db.session``, so
    every store call made inside ``work`` joins this transaction. Nested
    ``run_in_tx`` calls run ``work`` directly and leave commit or rollback
    to the outermost call.

    .. note::
       Requires an active Flask app context.
    """

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        self._session_factory = session_factory or (lambda: db.session)
        self._active: ContextVar[bool] = ContextVar(f"sqla_tx_{id(self)}", default=False)

    def run_in_tx(self, work: Callable[[], T]) -> T:
        if self._active.get():
            return work()

        session = self._session_factory()
        marker = self._active.set(True)
        try:
            result = work()
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            self._active.reset(marker)
        return result
