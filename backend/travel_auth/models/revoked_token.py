"""Tombstones for spent refresh tokens."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from travel_auth.core.extensions import db

from .base import ReprMixin, StringPKMixin


class RevokedTokenModel(StringPKMixin, ReprMixin, db.Model):
    """
    Write-once record that a refresh token value was already rotated.

    ``user_id`` carries no foreign key: a tombstone outlives the active row it
    replaced and must still name the owner for family revocation.
    """

    __tablename__ = "revoked_tokens"
    __repr_attrs__ = ("id", "user_id", "revoked_at")

    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    token_value: Mapped[str] = mapped_column(String(255), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("token_value", name="uq_revoked_tokens_token_value"),
        Index("ix_revoked_tokens_expires_at", "expires_at"),
    )
