"""AuthService behaviour when collaborators fail or race."""

from __future__ import annotations

import logging
import threading

import pytest
from travel_auth.services._shared.errors import (
    ConflictError,
    ErrorKind,
    InternalError,
    InvalidCredentialsError,
    is_kind,
)
from travel_auth.services.auth.dto import TokenPair


def _boom(*_args, **_kwargs):
    raise RuntimeError("store unavailable")


class _BrokenHasher:
    def hash(self, password):
        raise RuntimeError("hashing backend down")

    def verify(self, password, password_hash):
        raise RuntimeError("hashing backend down")


@pytest.fixture()
def session_pair(service) -> TokenPair:
    service.register("alice", "a@x.com", "pw")
    return service.login("a@x.com", "pw")


# ------------------------------- Rotation --------------------------------- #


def test_zero_rows_deleted_aborts_rotation(service, session_pair, refresh_store, revoked_store,
                                           monkeypatch):
    """Another request consumed the row between lookup and delete."""
    monkeypatch.setattr(refresh_store, "delete_by_id", lambda token_id: 0)

    with pytest.raises(InvalidCredentialsError):
        service.refresh_session(session_pair.refresh_token)

    assert revoked_store.count() == 0
    owner = refresh_store.find_by_token_value(session_pair.refresh_token).user_id
    rows = refresh_store.list_by_user(owner)
    assert [row.token_value for row in rows] == [session_pair.refresh_token]


def test_tombstone_conflict_is_treated_as_consumed(service, session_pair, refresh_store,
                                                   revoked_store, monkeypatch):
    def conflict(tombstone):
        raise ConflictError("RevokedToken", "token_value", "token already revoked")

    monkeypatch.setattr(revoked_store, "create", conflict)

    with pytest.raises(InvalidCredentialsError) as exc_info:
        service.refresh_session(session_pair.refresh_token)

    assert is_kind(exc_info.value, ErrorKind.CONFLICT)
    assert refresh_store.find_by_token_value(session_pair.refresh_token)


def test_failure_creating_new_row_rolls_back_rotation(service, session_pair, refresh_store,
                                                      revoked_store, monkeypatch):
    monkeypatch.setattr(refresh_store, "create", _boom)

    with pytest.raises(InternalError) as exc_info:
        service.refresh_session(session_pair.refresh_token)

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert revoked_store.count() == 0
    assert refresh_store.find_by_token_value(session_pair.refresh_token)

    monkeypatch.undo()
    assert service.refresh_session(session_pair.refresh_token).refresh_token


def test_concurrent_refresh_of_same_token_has_one_winner(service, session_pair):
    barrier = threading.Barrier(2)
    outcomes: list[object] = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            result: object = service.refresh_session(session_pair.refresh_token)
        except InvalidCredentialsError as exc:
            result = exc
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    winners = [o for o in outcomes if isinstance(o, TokenPair)]
    losers = [o for o in outcomes if isinstance(o, InvalidCredentialsError)]
    assert len(winners) == 1
    assert len(losers) == 1


# ---------------------------- Reuse detection ----------------------------- #


def test_family_revocation_failure_keeps_invalid_credentials(
    service, session_pair, refresh_store, monkeypatch, caplog
):
    service.refresh_session(session_pair.refresh_token)
    monkeypatch.setattr(refresh_store, "delete_all_by_user", _boom)
    caplog.set_level(logging.INFO, logger="travel_auth")

    with pytest.raises(InvalidCredentialsError):
        service.refresh_session(session_pair.refresh_token)

    messages = [record.getMessage() for record in caplog.records]
    assert "auth.refresh.reuse_detected" in messages
    failed = [
        r for r in caplog.records if r.getMessage() == "auth.refresh.family_revocation_failed"
    ]
    assert failed and failed[0].levelno == logging.ERROR
    assert failed[0].exc_info is not None


def test_reuse_is_logged_without_token_values(service, session_pair, caplog):
    service.refresh_session(session_pair.refresh_token)
    caplog.set_level(logging.INFO, logger="travel_auth")

    with pytest.raises(InvalidCredentialsError):
        service.refresh_session(session_pair.refresh_token)

    assert "auth.refresh.family_revoked" in caplog.messages
    for record in caplog.records:
        assert session_pair.refresh_token not in record.getMessage()
        assert session_pair.refresh_token not in str(record.__dict__)


# --------------------------- Internal wrapping ---------------------------- #


def test_store_failure_on_login_surfaces_as_internal(service, users, monkeypatch, caplog):
    monkeypatch.setattr(users, "find_by_email", _boom)
    caplog.set_level(logging.ERROR, logger="travel_auth")

    with pytest.raises(InternalError) as exc_info:
        service.login("a@x.com", "pw")

    err = exc_info.value
    assert str(err) == "Internal error"
    assert is_kind(err, ErrorKind.INTERNAL)
    assert isinstance(err.__cause__, RuntimeError)
    assert any(r.getMessage() == "auth.login.failed" and r.exc_info for r in caplog.records)


def test_issuer_failure_on_login_leaves_no_session(service, issuer, refresh_store, monkeypatch):
    user_id = service.register("alice", "a@x.com", "pw")
    monkeypatch.setattr(issuer, "generate_refresh_token", _boom)

    with pytest.raises(InternalError):
        service.login("a@x.com", "pw")

    assert refresh_store.list_by_user(user_id) == []


def test_hasher_failure_on_register_surfaces_as_internal(service, users, monkeypatch):
    monkeypatch.setattr(service, "hasher", _BrokenHasher())

    with pytest.raises(InternalError) as exc_info:
        service.register("alice", "a@x.com", "pw")

    assert "hashing backend down" in str(exc_info.value.__cause__)
    assert "hashing backend down" not in str(exc_info.value)


def test_store_failure_on_revoke_surfaces_as_internal(service, session_pair, refresh_store,
                                                      monkeypatch):
    monkeypatch.setattr(refresh_store, "delete_by_id", _boom)

    with pytest.raises(InternalError):
        service.revoke_session(session_pair.refresh_token)


def test_lookup_failure_during_register_is_internal(service, users, monkeypatch):
    monkeypatch.setattr(users, "find_by_username", _boom)

    with pytest.raises(InternalError):
        service.register("alice", "a@x.com", "pw")
