"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. They serve as stable contracts between stores,
domain entities and application services.

Every error carries an :class:`ErrorKind`. Callers branch on the kind through
:func:`is_kind`, never on exception identity, so an error keeps matching after
it has been wrapped with extra context (``raise ... from exc``).

The translation to HTTP responses (RFC 7807) is handled by
``travel_auth/core/errors.py``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from sqlalchemy.exc import IntegrityError


class ErrorKind(str, Enum):
    """Stable classification of service failures."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


def violates(exc: IntegrityError, constraint_name: str, *columns: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL includes the constraint name in the message; SQLite only
    reports ``table.column``, which is matched through ``columns``.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').
    columns : str
        Optional ``table.column`` fallbacks (e.g., 'users.email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else str(exc).lower()
    if constraint_name.lower() in message:
        return True
    return any(col.lower() in message for col in columns)


def is_kind(exc: BaseException | None, kind: ErrorKind) -> bool:
    """
    Return ``True`` if ``exc`` or any exception it wraps has the given kind.

    Follows ``__cause__`` first, then ``__context__``, guarding against cycles.

    :param exc: Exception to inspect (``None`` is allowed and never matches).
    :param kind: Kind to look for.
    """
    seen: set[int] = set()
    current = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, ServiceError) and current.kind is kind:
            return True
        current = current.__cause__ or current.__context__
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from stores or domain logic.
    - ``message`` is safe to show to clients; detail belongs in the cause.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL

    def __init__(self, message: str = "Service error") -> None:
        super().__init__(message)
        self.message = message


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(eq=False)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in a store.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str
    """

    entity: str
    key: str

    kind: ClassVar[ErrorKind] = ErrorKind.NOT_FOUND

    def __post_init__(self) -> None:
        ServiceError.__init__(self, f"{self.entity} not found")

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(eq=False)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param field: Offending field, so callers can give a precise message.
    :type field: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    field: str
    detail: str

    kind: ClassVar[ErrorKind] = ErrorKind.CONFLICT

    def __post_init__(self) -> None:
        ServiceError.__init__(self, self.detail)

    def __str__(self) -> str:
        return f"Conflict on {self.entity}.{self.field}: {self.detail}"


class InvalidCredentialsError(ServiceError):
    """
    Raised for any authentication failure.

    Unknown email, wrong password, and unknown, expired, consumed or reused
    refresh tokens all collapse into this single outward error.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class InvalidTokenError(ServiceError):
    """Raised when an access token fails signature, expiry or claim checks."""

    kind: ClassVar[ErrorKind] = ErrorKind.INVALID_TOKEN

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class ValidationError(ServiceError):
    """Raised when input reaches the service in a malformed state."""

    kind: ClassVar[ErrorKind] = ErrorKind.VALIDATION


class InternalError(ServiceError):
    """Wraps unexpected collaborator failures (store, crypto, signing)."""

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL

    def __init__(self, message: str = "Internal error") -> None:
        super().__init__(message)
