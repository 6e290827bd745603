"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`travel_auth.services` without knowing internal
structure.

Re-exports
----------
- Base primitives (from ``travel_auth.services._shared.base``)
    * :class:`BaseService`

- Auth service (from ``travel_auth.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`TokenPair`, :class:`PruneResult`, :class:`AuthTokenConfig`
"""

from __future__ import annotations

from ._shared.base import BaseService
from .auth.dto import AuthTokenConfig, PruneResult, TokenPair
from .auth.service import AuthService

__all__ = [
    "AuthService",
    "AuthTokenConfig",
    "BaseService",
    "PruneResult",
    "TokenPair",
]
