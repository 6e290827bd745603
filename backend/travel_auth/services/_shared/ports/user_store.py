from __future__ import annotations

from typing import Protocol

from travel_auth.services._shared.entities import User, UserID


class UserStore(Protocol):
    """
    Persistence port for :class:`User`.

    Lookups raise :class:`~travel_auth.services._shared.errors.NotFoundError`
    when nothing matches; ``create`` raises
    :class:`~travel_auth.services._shared.errors.ConflictError` (with
    ``field`` set to ``"username"`` or ``"email"``) on a unique violation.
    """

    def create(self, user: User) -> None: ...

    def find_by_id(self, user_id: UserID) -> User: ...

    def find_by_username(self, username: str) -> User: ...

    def find_by_email(self, email: str) -> User: ...
