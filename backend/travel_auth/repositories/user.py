"""User repository implementing the ``UserStore`` port."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from travel_auth.models.user import UserModel
from travel_auth.repositories.base import BaseRepository, as_utc
from travel_auth.services._shared.entities import User, UserID
from travel_auth.services._shared.errors import ConflictError, NotFoundError, violates


class UserRepository(BaseRepository[UserModel]):
    """Persistence-only repository for users.

    It NEVER hashes or verifies passwords; it stores the hash it is given.
    """

    model = UserModel

    def create(self, user: User) -> None:
        """Insert ``user``.

        :raises ConflictError: With ``field`` set to ``"username"`` or
            ``"email"`` when the matching unique constraint fires.
        """
        row = UserModel(
            id=str(user.id),
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            created_at=as_utc(user.created_at),
            updated_at=as_utc(user.updated_at),
        )
        try:
            self.add(row)
        except IntegrityError as exc:
            if violates(exc, "uq_users_username", "users.username"):
                raise ConflictError("User", "username", "username already exists") from exc
            if violates(exc, "uq_users_email", "users.email"):
                raise ConflictError("User", "email", "email already exists") from exc
            raise

    def find_by_id(self, user_id: UserID) -> User:
        return self._find_one(UserModel.id == str(user_id), key=str(user_id))

    def find_by_username(self, username: str) -> User:
        return self._find_one(UserModel.username == username, key=username)

    def find_by_email(self, email: str) -> User:
        return self._find_one(UserModel.email == email, key=email)

    # ---------------------------- Internals ----------------------------

    def _find_one(self, clause: Any, *, key: str) -> User:
        row = self.session.execute(select(UserModel).where(clause)).scalars().first()
        if row is None:
            raise NotFoundError("User", key)
        return _to_entity(row)


def _to_entity(row: UserModel) -> User:
    return User(
        id=UserID(row.id),
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )
