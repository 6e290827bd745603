from .stores import (
    InMemoryDatabase,
    InMemoryRefreshTokenStore,
    InMemoryRevokedTokenStore,
    InMemoryTransactionManager,
    InMemoryUserStore,
)

__all__ = [
    "InMemoryDatabase",
    "InMemoryRefreshTokenStore",
    "InMemoryRevokedTokenStore",
    "InMemoryTransactionManager",
    "InMemoryUserStore",
]
