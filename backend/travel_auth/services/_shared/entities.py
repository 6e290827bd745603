"""
Identity and session entities shared by the auth service and its stores.

Entities are immutable snapshots. Stores persist and return them; the service
derives new snapshots instead of mutating existing ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

# --------------------------------------------------------------------------- #
# Identifiers
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class _OpaqueId:
    """Value object wrapping a non-empty identifier string."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value:
            raise ValueError(f"{type(self).__name__} requires a non-empty string.")

    def __str__(self) -> str:
        return self.value


class UserID(_OpaqueId):
    """Identifier of a :class:`User`."""

    __slots__ = ()


class RefreshTokenID(_OpaqueId):
    """Identifier of an active :class:`RefreshToken` row."""

    __slots__ = ()


class RevokedTokenID(_OpaqueId):
    """Identifier of a :class:`RevokedToken` tombstone."""

    __slots__ = ()


# --------------------------------------------------------------------------- #
# Entities
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class User:
    """
    Registered identity.

    :ivar id: Immutable user id.
    :ivar username: Unique public handle.
    :ivar email: Unique login email.
    :ivar password_hash: Salted one-way hash of the password.
    :ivar created_at: Registration time (UTC).
    :ivar updated_at: Last profile change (UTC).
    """

    id: UserID
    username: str
    email: str
    password_hash: str = field(repr=False)
    created_at: datetime
    updated_at: datetime

    def __eq__(self, other: object) -> bool:
        return isinstance(other, User) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True, slots=True)
class RefreshToken:
    """
    Active session credential.

    ``token_value`` is the opaque string handed to the client and the only
    lookup key; it is never logged.
    """

    id: RefreshTokenID
    user_id: UserID
    token_value: str = field(repr=False)
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Return ``True`` once ``now`` has reached ``expires_at``."""
        return self.expires_at <= now

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RefreshToken) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True, slots=True)
class RevokedToken:
    """
    Tombstone for a spent refresh token.

    Its presence for a ``token_value`` means the token was already rotated;
    any later presentation is treated as reuse. ``expires_at`` keeps the
    original expiry so tombstones can be pruned afterwards.
    """

    id: RevokedTokenID
    user_id: UserID
    token_value: str = field(repr=False)
    expires_at: datetime
    revoked_at: datetime

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RevokedToken) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
