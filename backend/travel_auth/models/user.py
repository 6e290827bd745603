"""User model definition for the auth service."""

from __future__ import annotations

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from travel_auth.core.extensions import db

from .base import ReprMixin, StringPKMixin, TimestampMixin


class UserModel(StringPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Registered identity row.

    Fields
    ------
    username : str
        Public handle. Unique per system.
    email : str
        Login email. Unique per system.
    password_hash : str
        Salted one-way hash; the raw password is never stored.
    created_at : datetime
        Creation timestamp (from mixin).
    updated_at : datetime
        Update timestamp (from mixin).
    """

    __tablename__ = "users"
    __repr_attrs__ = ("id", "username")

    username: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Constraint names are matched by the repository to report the field
    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("email", name="uq_users_email"),
    )
