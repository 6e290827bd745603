from __future__ import annotations

from datetime import datetime
from typing import Protocol

from travel_auth.services._shared.entities import RefreshToken, RefreshTokenID, UserID


class RefreshTokenStore(Protocol):
    """
    Persistence port for active refresh tokens.

    The store enforces uniqueness of ``token_value`` and is the serialization
    point of rotation: concurrent ``delete_by_id`` calls on the same row must
    be mutually exclusive, and exactly one of them may report ``1``.
    """

    def create(self, token: RefreshToken) -> None: ...

    def find_by_token_value(self, token_value: str) -> RefreshToken:
        """Return the active row for ``token_value`` or raise ``NotFoundError``."""
        ...

    def delete_by_id(self, token_id: RefreshTokenID) -> int:
        """Delete one row. :returns: Number of rows actually removed (0 or 1)."""
        ...

    def delete_all_by_user(self, user_id: UserID) -> int:
        """Delete every active row of ``user_id``. :returns: Rows removed."""
        ...

    def delete_expired(self, now: datetime) -> int:
        """Housekeeping: delete rows whose ``expires_at <= now``."""
        ...
