"""Pytest fixtures for the Flask app, the database and the in-memory service.

Each test that needs the database gets a fresh app bound to its own
in-memory SQLite database, with tables created on entry and dropped on exit.
Service unit tests use the in-memory stores and never touch Flask.
"""

from __future__ import annotations

import pytest
from travel_auth.core.config import TestingConfig
from travel_auth.core.extensions import db as _db
from travel_auth.factory import create_app
from travel_auth.infra.memory import (
    InMemoryDatabase,
    InMemoryRefreshTokenStore,
    InMemoryRevokedTokenStore,
    InMemoryTransactionManager,
    InMemoryUserStore,
)
from travel_auth.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from travel_auth.services._shared.ports import FixedClock, SequentialIdGenerator, StubTokenIssuer
from travel_auth.services.auth.dto import AuthTokenConfig
from travel_auth.services.auth.service import AuthService

# Cheap hashing keeps the suite fast; production uses scrypt.
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


@pytest.fixture()
def app():
    """Create a Flask application configured for testing.

    Yields
    ------
    flask.Flask
        Application with :class:`TestingConfig` applied and an active app
        context whose database tables exist.
    """
    app = create_app(TestingConfig, instance_relative_config=False)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app):
    """Return the database extension bound to the testing application."""
    return _db


@pytest.fixture()
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture()
def session(db):
    """Provide the Flask-scoped session and wire Factory Boy to it."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(db.session)
    yield db.session
    SQLAlchemySession.set(None)


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- In-memory service wiring ---------------------------------------------------


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def memory_db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture()
def users(memory_db) -> InMemoryUserStore:
    return InMemoryUserStore(memory_db)


@pytest.fixture()
def refresh_store(memory_db) -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore(memory_db)


@pytest.fixture()
def revoked_store(memory_db) -> InMemoryRevokedTokenStore:
    return InMemoryRevokedTokenStore(memory_db)


@pytest.fixture()
def tx(memory_db) -> InMemoryTransactionManager:
    return InMemoryTransactionManager(memory_db)


@pytest.fixture()
def issuer(clock) -> StubTokenIssuer:
    return StubTokenIssuer(clock)


@pytest.fixture()
def service(users, refresh_store, revoked_store, tx, issuer, clock) -> AuthService:
    """Build an AuthService wired to in-memory doubles and a fixed clock."""
    return AuthService(
        users=users,
        refresh_tokens=refresh_store,
        revoked_tokens=revoked_store,
        tx=tx,
        password_hasher=WerkzeugPasswordHasher(method=FAST_HASH_METHOD),
        token_issuer=issuer,
        clock=clock,
        id_generator=SequentialIdGenerator(),
        token_cfg=AuthTokenConfig(),
    )
