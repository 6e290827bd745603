"""
travel_auth.services._shared.ports
==================================

Collection of *ports* (hexagonal interfaces) that the auth service depends on.

Modules
-------
- :mod:`clock`: :class:`~.Clock` plus system and fixed implementations.
- :mod:`id_generator`: :class:`~.IdGenerator` plus UUID and sequential ones.
- :mod:`password_hasher`: :class:`~.PasswordHasher`.
- :mod:`token_issuer`: :class:`~.TokenIssuer`, :class:`~.AccessTokenClaims`
  and a deterministic :class:`~.StubTokenIssuer`.
- :mod:`user_store`, :mod:`refresh_token_store`, :mod:`revoked_token_store`:
  persistence contracts.
- :mod:`transaction_manager`: :class:`~.TransactionManager`.

Design Notes
------------
Concrete adapters (SQLAlchemy, in-memory, flask-jwt-extended, werkzeug) live
under ``travel_auth.repositories``, ``travel_auth.uow`` and
``travel_auth.infra``.
"""

from __future__ import annotations

from .clock import Clock, FixedClock, SystemClock
from .id_generator import IdGenerator, SequentialIdGenerator, UUIDGenerator
from .password_hasher import PasswordHasher
from .refresh_token_store import RefreshTokenStore
from .revoked_token_store import RevokedTokenStore
from .token_issuer import AccessTokenClaims, StubTokenIssuer, TokenIssuer
from .transaction_manager import TransactionManager
from .user_store import UserStore

__all__ = [
    "AccessTokenClaims",
    "Clock",
    "FixedClock",
    "IdGenerator",
    "PasswordHasher",
    "RefreshTokenStore",
    "RevokedTokenStore",
    "SequentialIdGenerator",
    "StubTokenIssuer",
    "SystemClock",
    "TokenIssuer",
    "TransactionManager",
    "UUIDGenerator",
    "UserStore",
]
