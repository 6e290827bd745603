"""Unit tests for the werkzeug-backed password hasher."""

from __future__ import annotations

import pytest
from travel_auth.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher

FAST = "pbkdf2:sha256:1000"


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method=FAST)


def test_hash_is_salted_and_verifiable(hasher):
    first = hasher.hash("correct horse")
    second = hasher.hash("correct horse")

    assert first != second
    assert "correct horse" not in first
    assert first.startswith("pbkdf2:sha256:1000$")
    assert hasher.verify("correct horse", first)
    assert hasher.verify("correct horse", second)


def test_wrong_password_does_not_verify(hasher):
    assert not hasher.verify("wrong", hasher.hash("right"))


def test_empty_hash_never_verifies(hasher):
    assert not hasher.verify("anything", "")


def test_empty_password_is_rejected(hasher):
    with pytest.raises(ValueError):
        hasher.hash("")


def test_default_method_is_scrypt():
    assert WerkzeugPasswordHasher().hash("pw").startswith("scrypt:")
