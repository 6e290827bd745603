# travel_auth/services/_shared/base.py
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from travel_auth.services._shared.errors import (
    ErrorKind,
    InternalError,
    ServiceError,
    ValidationError,
    is_kind,
)

T = TypeVar("T")


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Let domain errors (:class:`ServiceError`) through untouched.
    * Wrap every other collaborator failure as :class:`InternalError`,
      chained to the original and logged with its traceback.
    * Offer shared input guards.

    Notes
    -----
    - Services never touch the database session; stores and the transaction
      manager are injected.
    - Clients only ever see the generic ``InternalError`` message.
    """

    log: logging.Logger = logging.getLogger(__name__)

    # -------------------------- Error handling ------------------------------

    def internal_error(self, event: str, exc: BaseException) -> InternalError:
        """
        Log ``exc`` under ``event`` and return the generic error to raise.

        :param event: Dotted event name used as the log message.
        :param exc: Unexpected collaborator failure.
        :returns: Error to raise with ``from exc``.
        """
        self.log.error(event, exc_info=exc, extra={"event": event})
        return InternalError()

    def guarded(self, event: str, fn: Callable[..., T], *args: Any) -> T:
        """
        Call ``fn(*args)``, translating unexpected failures.

        :param event: Event name logged when ``fn`` fails unexpectedly.
        :param fn: Collaborator call.
        :returns: Whatever ``fn`` returns.
        :raises ServiceError: Domain errors unchanged; anything else as
            :class:`InternalError`.
        """
        try:
            return fn(*args)
        except ServiceError:
            raise
        except Exception as exc:
            raise self.internal_error(event, exc) from exc

    @staticmethod
    def find_or_none(lookup: Callable[[str], T], key: str) -> T | None:
        """
        Run a store lookup where "not found" is an expected outcome.

        :returns: The entity, or ``None`` when the store reports NOT_FOUND.
        :raises ServiceError: Any other kind, unchanged.
        """
        try:
            return lookup(key)
        except ServiceError as exc:
            if is_kind(exc, ErrorKind.NOT_FOUND):
                return None
            raise

    # ----------------------- Validation utilities ---------------------------

    @staticmethod
    def require(**values: str) -> None:
        """
        Reject empty or non-string inputs.

        :raises ValidationError: Naming every offending argument.
        """
        missing = [
            name for name, value in values.items() if not isinstance(value, str) or not value
        ]
        if missing:
            raise ValidationError(f"Missing required value: {', '.join(missing)}")
