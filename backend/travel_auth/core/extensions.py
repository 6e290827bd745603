"""Flask extension singletons shared by the auth service."""

from __future__ import annotations

from flask import Flask
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Constraint names follow this convention; repositories match on
# ``uq_<table>_<column>`` to report which field collided.
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

db: SQLAlchemy = SQLAlchemy(
    session_options={"autoflush": False},
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()
# Storage, enablement and headers come from ``RATELIMIT_*`` config keys.
limiter = Limiter(key_func=get_remote_address)


def init_app(app: Flask) -> None:
    """
    Bind the extensions to ``app``.

    Importing :mod:`travel_auth.models` registers the tables on ``db.metadata``
    so ``flask db migrate`` and ``create_all`` see them.
    """
    db.init_app(app)

    from travel_auth import models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)
