"""Refresh-token repository implementing the ``RefreshTokenStore`` port."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from travel_auth.models.refresh_token import RefreshTokenModel
from travel_auth.repositories.base import BaseRepository, as_utc
from travel_auth.services._shared.entities import RefreshToken, RefreshTokenID, UserID
from travel_auth.services._shared.errors import ConflictError, NotFoundError, violates


class RefreshTokenRepository(BaseRepository[RefreshTokenModel]):
    """Persistence-only repository for active refresh tokens.

    ``delete_by_id`` issues a single ``DELETE ... WHERE id = :id`` and reports
    the driver's row count. Under concurrent rotation only one transaction
    can remove the row, so only one caller observes ``1``.
    """

    model = RefreshTokenModel

    def create(self, token: RefreshToken) -> None:
        row = RefreshTokenModel(
            id=str(token.id),
            user_id=str(token.user_id),
            token_value=token.token_value,
            expires_at=as_utc(token.expires_at),
            created_at=as_utc(token.created_at),
        )
        try:
            self.add(row)
        except IntegrityError as exc:
            if violates(exc, "uq_refresh_tokens_token_value", "refresh_tokens.token_value"):
                raise ConflictError(
                    "RefreshToken", "token_value", "token already exists"
                ) from exc
            raise

    def find_by_token_value(self, token_value: str) -> RefreshToken:
        stmt = select(RefreshTokenModel).where(RefreshTokenModel.token_value == token_value)
        row = self.session.execute(stmt).scalars().first()
        if row is None:
            # Token values are credentials; keep them out of error text.
            raise NotFoundError("RefreshToken", "<redacted>")
        return RefreshToken(
            id=RefreshTokenID(row.id),
            user_id=UserID(row.user_id),
            token_value=row.token_value,
            expires_at=as_utc(row.expires_at),
            created_at=as_utc(row.created_at),
        )

    def delete_by_id(self, token_id: RefreshTokenID) -> int:
        return self._delete_rows(
            delete(RefreshTokenModel).where(RefreshTokenModel.id == str(token_id))
        )

    def delete_all_by_user(self, user_id: UserID) -> int:
        return self._delete_rows(
            delete(RefreshTokenModel).where(RefreshTokenModel.user_id == str(user_id))
        )

    def delete_expired(self, now: datetime) -> int:
        return self._delete_rows(
            delete(RefreshTokenModel).where(RefreshTokenModel.expires_at <= as_utc(now))
        )
