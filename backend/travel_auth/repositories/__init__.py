"""Repository package exposing SQLAlchemy implementations of the store ports."""

from __future__ import annotations

from travel_auth.repositories.base import BaseRepository, as_utc
from travel_auth.repositories.refresh_token import RefreshTokenRepository
from travel_auth.repositories.revoked_token import RevokedTokenRepository
from travel_auth.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "RefreshTokenRepository",
    "RevokedTokenRepository",
    "UserRepository",
    "as_utc",
]
