"""Tombstone repository implementing the ``RevokedTokenStore`` port."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from travel_auth.models.revoked_token import RevokedTokenModel
from travel_auth.repositories.base import BaseRepository, as_utc
from travel_auth.services._shared.entities import RevokedToken, RevokedTokenID, UserID
from travel_auth.services._shared.errors import ConflictError, NotFoundError, violates


class RevokedTokenRepository(BaseRepository[RevokedTokenModel]):
    """Persistence-only repository for refresh-token tombstones."""

    model = RevokedTokenModel

    def create(self, tombstone: RevokedToken) -> None:
        """Insert a tombstone.

        :raises ConflictError: When the token value was already tombstoned,
            i.e. a concurrent rotation consumed it first.
        """
        row = RevokedTokenModel(
            id=str(tombstone.id),
            user_id=str(tombstone.user_id),
            token_value=tombstone.token_value,
            expires_at=as_utc(tombstone.expires_at),
            revoked_at=as_utc(tombstone.revoked_at),
        )
        try:
            self.add(row)
        except IntegrityError as exc:
            if violates(exc, "uq_revoked_tokens_token_value", "revoked_tokens.token_value"):
                raise ConflictError(
                    "RevokedToken", "token_value", "token already revoked"
                ) from exc
            raise

    def find_by_token_value(self, token_value: str) -> RevokedToken:
        stmt = select(RevokedTokenModel).where(RevokedTokenModel.token_value == token_value)
        row = self.session.execute(stmt).scalars().first()
        if row is None:
            raise NotFoundError("RevokedToken", "<redacted>")
        return RevokedToken(
            id=RevokedTokenID(row.id),
            user_id=UserID(row.user_id),
            token_value=row.token_value,
            expires_at=as_utc(row.expires_at),
            revoked_at=as_utc(row.revoked_at),
        )

    def delete_expired(self, now: datetime) -> int:
        return self._delete_rows(
            delete(RevokedTokenModel).where(RevokedTokenModel.expires_at <= as_utc(now))
        )
