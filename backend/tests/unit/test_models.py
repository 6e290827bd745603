"""Unit tests for the ORM models."""

from __future__ import annotations

from travel_auth.models import RefreshTokenModel, RevokedTokenModel, UserModel

from tests.factories.user import (
    RefreshTokenModelFactory,
    RevokedTokenModelFactory,
    UserModelFactory,
)


def test_repr_hides_credentials(session) -> None:
    user = UserModelFactory(username="alice")
    token = RefreshTokenModelFactory(user_id=user.id, token_value="live-secret")
    tombstone = RevokedTokenModelFactory(token_value="spent-secret")

    assert "alice" in repr(user)
    assert user.password_hash not in repr(user)
    assert "live-secret" not in repr(token)
    assert user.id in repr(token)
    assert "spent-secret" not in repr(tombstone)


def test_constraint_names_follow_convention() -> None:
    def names(model) -> set[str]:
        return {c.name for c in model.__table__.constraints if c.name}

    assert {"uq_users_username", "uq_users_email"} <= names(UserModel)
    assert "uq_refresh_tokens_token_value" in names(RefreshTokenModel)
    assert "uq_revoked_tokens_token_value" in names(RevokedTokenModel)
