"""Active refresh-token rows."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from travel_auth.core.extensions import db

from .base import ReprMixin, StringPKMixin


class RefreshTokenModel(StringPKMixin, ReprMixin, db.Model):
    """
    One active session credential.

    ``token_value`` is the opaque string held by the client. Deleting the row
    by primary key is the serialization point of rotation.
    """

    __tablename__ = "refresh_tokens"
    __repr_attrs__ = ("id", "user_id", "expires_at")

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    token_value: Mapped[str] = mapped_column(String(255), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("token_value", name="uq_refresh_tokens_token_value"),
        Index("ix_refresh_tokens_user_id", "user_id"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )
