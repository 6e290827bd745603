"""Unit tests for the flask-jwt-extended token issuer adapter."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

import jwt
import pytest
from flask_jwt_extended import create_refresh_token
from freezegun import freeze_time
from travel_auth.infra.jwt.flask_jwt_token_issuer import FlaskJWTTokenIssuer
from travel_auth.services._shared.entities import UserID
from travel_auth.services._shared.errors import InvalidTokenError

REFRESH_ALPHABET = re.compile(r"^[A-Za-z0-9_-]+$")


@pytest.fixture()
def issuer(app) -> FlaskJWTTokenIssuer:
    return FlaskJWTTokenIssuer()


def _forge(app, *, key: str | None = None, **overrides) -> str:
    """Sign a hand-built access payload, overriding individual claims."""
    now = datetime.now(UTC)
    payload = {
        "sub": "user-1",
        "type": "access",
        "jti": "forged-jti",
        "fresh": False,
        "iat": now,
        "nbf": now,
        "exp": now + timedelta(minutes=5),
        "iss": app.config["JWT_ENCODE_ISSUER"],
        "aud": app.config["JWT_ENCODE_AUDIENCE"],
    }
    payload.update(overrides)
    payload = {k: v for k, v in payload.items() if v is not None}
    return jwt.encode(payload, key or app.config["JWT_SECRET_KEY"], algorithm="HS256")


def test_issue_then_parse_round_trips_claims(issuer, app):
    token = issuer.issue_access_token(UserID("user-1"))

    claims = issuer.parse_access_token(token)

    assert claims.user_id == UserID("user-1")
    assert claims.token_id
    assert claims.expires_at - claims.issued_at == app.config["JWT_ACCESS_TOKEN_EXPIRES"]
    assert claims.issued_at.tzinfo is not None


def test_issued_tokens_carry_issuer_and_audience(issuer, app):
    token = issuer.issue_access_token(UserID("user-1"))

    unverified = jwt.decode(token, options={"verify_signature": False})

    assert unverified["iss"] == app.config["JWT_ENCODE_ISSUER"]
    assert unverified["aud"] == app.config["JWT_ENCODE_AUDIENCE"]
    assert unverified["sub"] == "user-1"


def test_expired_token_is_rejected(issuer):
    with freeze_time("2020-01-01 00:00:00"):
        token = issuer.issue_access_token(UserID("user-1"))

    with pytest.raises(InvalidTokenError) as exc_info:
        issuer.parse_access_token(token)

    assert isinstance(exc_info.value.__cause__, jwt.ExpiredSignatureError)


def test_token_signed_with_other_key_is_rejected(issuer, app):
    token = _forge(app, key="another-secret-that-is-long-enough-for-hs256")

    with pytest.raises(InvalidTokenError):
        issuer.parse_access_token(token)


@pytest.mark.parametrize(
    "claim",
    [{"aud": "someone-else"}, {"iss": "another-issuer"}],
)
def test_wrong_audience_or_issuer_is_rejected(issuer, app, claim):
    with pytest.raises(InvalidTokenError):
        issuer.parse_access_token(_forge(app, **claim))


def test_forged_token_with_matching_claims_is_accepted(issuer, app):
    claims = issuer.parse_access_token(_forge(app))

    assert claims.user_id == UserID("user-1")
    assert claims.token_id == "forged-jti"


@pytest.mark.parametrize(
    "overrides",
    [{"type": "refresh"}, {"jti": None}, {"sub": ""}],
)
def test_wrong_claim_shape_is_rejected(issuer, app, overrides):
    with pytest.raises(InvalidTokenError):
        issuer.parse_access_token(_forge(app, **overrides))


def test_flask_refresh_jwt_is_not_an_access_token(issuer):
    token = create_refresh_token(identity="user-1")

    with pytest.raises(InvalidTokenError):
        issuer.parse_access_token(token)


@pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b", "a.b.c", "a.b.c.d"])
def test_garbage_is_rejected(issuer, garbage):
    with pytest.raises(InvalidTokenError):
        issuer.parse_access_token(garbage)


def test_refresh_tokens_are_urlsafe_and_unpadded(issuer):
    values = {issuer.generate_refresh_token() for _ in range(50)}

    assert len(values) == 50
    for value in values:
        assert len(value) == 43
        assert REFRESH_ALPHABET.match(value)


def test_refresh_token_length_follows_entropy(app):
    assert len(FlaskJWTTokenIssuer(refresh_token_bytes=16).generate_refresh_token()) == 22
