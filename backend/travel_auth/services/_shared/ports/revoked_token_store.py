from __future__ import annotations

from datetime import datetime
from typing import Protocol

from travel_auth.services._shared.entities import RevokedToken


class RevokedTokenStore(Protocol):
    """
    Persistence port for refresh-token tombstones.

    Tombstones are write-once. ``create`` raises ``ConflictError`` when a
    tombstone for the same ``token_value`` already exists.
    """

    def create(self, tombstone: RevokedToken) -> None: ...

    def find_by_token_value(self, token_value: str) -> RevokedToken:
        """Return the tombstone for ``token_value`` or raise ``NotFoundError``."""
        ...

    def delete_expired(self, now: datetime) -> int:
        """Housekeeping: prune tombstones whose original expiry has passed."""
        ...
