"""Unit tests for UserRepository."""

from datetime import UTC, datetime

import pytest
from travel_auth.repositories.user import UserRepository
from travel_auth.services._shared.entities import User, UserID
from travel_auth.services._shared.errors import ConflictError, NotFoundError

from tests.factories.user import UserModelFactory


def _user(**overrides) -> User:
    now = datetime(2024, 1, 1, tzinfo=UTC)
    data = {
        "id": UserID("u-1"),
        "username": "alice",
        "email": "alice@example.com",
        "password_hash": "hash",
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return User(**data)


class TestUserRepository:
    """Ensure ``UserRepository`` fulfils the user store contract."""

    @pytest.fixture()
    def repo(self, session):
        return UserRepository()

    def test_create_and_find_user(self, repo, session):
        """Create a user and fetch it back by every lookup key."""
        repo.create(_user())
        session.commit()

        by_id = repo.find_by_id(UserID("u-1"))
        assert by_id.username == "alice"
        assert repo.find_by_username("alice") == by_id
        assert repo.find_by_email("alice@example.com") == by_id

    def test_timestamps_come_back_as_utc(self, repo, session):
        """SQLite drops tzinfo; the repository labels values as UTC."""
        repo.create(_user())
        session.commit()
        session.expire_all()

        fetched = repo.find_by_id(UserID("u-1"))
        assert fetched.created_at == datetime(2024, 1, 1, tzinfo=UTC)
        assert fetched.created_at.tzinfo is not None

    def test_factory_rows_are_visible(self, repo, session):
        """Rows inserted outside the repository map onto entities."""
        row = UserModelFactory(username="bob", email="bob@example.com")

        fetched = repo.find_by_email("bob@example.com")
        assert fetched.id == UserID(row.id)
        assert fetched.password_hash == row.password_hash

    def test_duplicate_username_reports_field(self, repo, session):
        """The unique constraint on username maps to a field-level conflict."""
        UserModelFactory(username="alice")

        with pytest.raises(ConflictError) as exc_info:
            repo.create(_user())

        assert exc_info.value.field == "username"
        session.rollback()

    def test_duplicate_email_reports_field(self, repo, session):
        """The unique constraint on email maps to a field-level conflict."""
        UserModelFactory(email="alice@example.com")

        with pytest.raises(ConflictError) as exc_info:
            repo.create(_user())

        assert exc_info.value.field == "email"
        session.rollback()

    def test_missing_user_raises_not_found(self, repo, session):
        """❌ Unknown keys raise instead of returning ``None``."""
        with pytest.raises(NotFoundError):
            repo.find_by_id(UserID("nope"))
        with pytest.raises(NotFoundError):
            repo.find_by_username("nope")
        with pytest.raises(NotFoundError):
            repo.find_by_email("nope@example.com")
