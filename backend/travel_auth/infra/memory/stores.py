"""
In-memory stores and transaction manager sharing one lock-protected state.

Used by unit tests and local experiments. All tables live in a single
:class:`InMemoryDatabase` so the transaction manager can snapshot and restore
them together; every store call takes the database's re-entrant lock, and a
running transaction holds it until commit or rollback.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime
from typing import TypeVar

from travel_auth.services._shared.entities import (
    RefreshToken,
    RefreshTokenID,
    RevokedToken,
    RevokedTokenID,
    User,
    UserID,
)
from travel_auth.services._shared.errors import ConflictError, NotFoundError

T = TypeVar("T")


@dataclass
class _Tables:
    users: dict[UserID, User] = field(default_factory=dict)
    refresh_tokens: dict[RefreshTokenID, RefreshToken] = field(default_factory=dict)
    revoked_tokens: dict[RevokedTokenID, RevokedToken] = field(default_factory=dict)


class InMemoryDatabase:
    """Shared state for the in-memory stores."""

    def __init__(self) -> None:
        self.tables = _Tables()
        self.lock = threading.RLock()

    def snapshot(self) -> _Tables:
        # Entities are frozen, so copying the dicts is enough.
        return _Tables(
            users=dict(self.tables.users),
            refresh_tokens=dict(self.tables.refresh_tokens),
            revoked_tokens=dict(self.tables.revoked_tokens),
        )

    def restore(self, snap: _Tables) -> None:
        self.tables = snap


class InMemoryUserStore:
    """:class:`~travel_auth.services._shared.ports.UserStore` over dicts."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    def create(self, user: User) -> None:
        with self.database.lock:
            users = self.database.tables.users
            # Username wins when both collide, matching the SQL repository.
            if any(existing.username == user.username for existing in users.values()):
                raise ConflictError("User", "username", "username already exists")
            if any(existing.email == user.email for existing in users.values()):
                raise ConflictError("User", "email", "email already exists")
            users[user.id] = user

    def find_by_id(self, user_id: UserID) -> User:
        with self.database.lock:
            user = self.database.tables.users.get(user_id)
        if user is None:
            raise NotFoundError("User", str(user_id))
        return user

    def find_by_username(self, username: str) -> User:
        return self._find(lambda u: u.username == username, username)

    def find_by_email(self, email: str) -> User:
        return self._find(lambda u: u.email == email, email)

    def _find(self, predicate: Callable[[User], bool], key: str) -> User:
        with self.database.lock:
            for user in self.database.tables.users.values():
                if predicate(user):
                    return user
        raise NotFoundError("User", key)


class InMemoryRefreshTokenStore:
    """:class:`~travel_auth.services._shared.ports.RefreshTokenStore` over dicts."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    def create(self, token: RefreshToken) -> None:
        with self.database.lock:
            rows = self.database.tables.refresh_tokens
            if token.id in rows or any(
                r.token_value == token.token_value for r in rows.values()
            ):
                raise ConflictError("RefreshToken", "token_value", "token already exists")
            rows[token.id] = token

    def find_by_token_value(self, token_value: str) -> RefreshToken:
        with self.database.lock:
            for row in self.database.tables.refresh_tokens.values():
                if row.token_value == token_value:
                    return row
        raise NotFoundError("RefreshToken", "<redacted>")

    def delete_by_id(self, token_id: RefreshTokenID) -> int:
        with self.database.lock:
            removed = self.database.tables.refresh_tokens.pop(token_id, None)
        return 0 if removed is None else 1

    def delete_all_by_user(self, user_id: UserID) -> int:
        with self.database.lock:
            rows = self.database.tables.refresh_tokens
            doomed = [k for k, r in rows.items() if r.user_id == user_id]
            for key in doomed:
                del rows[key]
        return len(doomed)

    def delete_expired(self, now: datetime) -> int:
        with self.database.lock:
            rows = self.database.tables.refresh_tokens
            doomed = [k for k, r in rows.items() if r.is_expired(now)]
            for key in doomed:
                del rows[key]
        return len(doomed)

    def list_by_user(self, user_id: UserID) -> list[RefreshToken]:
        """Return the user's active rows (test inspection helper)."""
        with self.database.lock:
            return [r for r in self.database.tables.refresh_tokens.values() if r.user_id == user_id]


class InMemoryRevokedTokenStore:
    """:class:`~travel_auth.services._shared.ports.RevokedTokenStore` over dicts."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    def create(self, tombstone: RevokedToken) -> None:
        with self.database.lock:
            rows = self.database.tables.revoked_tokens
            if any(r.token_value == tombstone.token_value for r in rows.values()):
                raise ConflictError("RevokedToken", "token_value", "token already revoked")
            rows[tombstone.id] = tombstone

    def find_by_token_value(self, token_value: str) -> RevokedToken:
        with self.database.lock:
            for row in self.database.tables.revoked_tokens.values():
                if row.token_value == token_value:
                    return row
        raise NotFoundError("RevokedToken", "<redacted>")

    def delete_expired(self, now: datetime) -> int:
        with self.database.lock:
            rows = self.database.tables.revoked_tokens
            doomed = [k for k, r in rows.items() if r.expires_at <= now]
            for key in doomed:
                del rows[key]
        return len(doomed)

    def count(self) -> int:
        with self.database.lock:
            return len(self.database.tables.revoked_tokens)


class InMemoryTransactionManager:
    """
    :class:`~travel_auth.services._shared.ports.TransactionManager` for the
    in-memory stores.

    The outermost ``run_in_tx`` holds the database lock for the whole unit of
    work and restores the pre-transaction snapshot when ``work`` raises.
    """

    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database
        self._active: ContextVar[bool] = ContextVar(f"inmem_tx_{id(self)}", default=False)

    def run_in_tx(self, work: Callable[[], T]) -> T:
        if self._active.get():
            return work()

        with self.database.lock:
            snap = self.database.snapshot()
            marker = self._active.set(True)
            try:
                result = work()
            except BaseException:
                self.database.restore(snap)
                raise
            finally:
                self._active.reset(marker)
        return result
