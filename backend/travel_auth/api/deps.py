"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Flask, Response, current_app, g, jsonify, request

from travel_auth.core.errors import Unauthorized
from travel_auth.infra.jwt.flask_jwt_token_issuer import FlaskJWTTokenIssuer
from travel_auth.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from travel_auth.repositories import (
    RefreshTokenRepository,
    RevokedTokenRepository,
    UserRepository,
)
from travel_auth.services._shared.entities import UserID
from travel_auth.services.auth.dto import AuthTokenConfig
from travel_auth.services.auth.service import AuthService
from travel_auth.uow import SQLAlchemyTransactionManager

F = TypeVar("F", bound=Callable[..., Any])

AUTH_SERVICE_KEY = "auth_service"


def build_auth_service(app: Flask) -> AuthService:
    """Wire :class:`AuthService` to the SQL stores and configured adapters."""

    config = app.config
    return AuthService(
        users=UserRepository(),
        refresh_tokens=RefreshTokenRepository(),
        revoked_tokens=RevokedTokenRepository(),
        tx=SQLAlchemyTransactionManager(),
        password_hasher=WerkzeugPasswordHasher(method=config["PASSWORD_HASH_METHOD"]),
        token_issuer=FlaskJWTTokenIssuer(refresh_token_bytes=config["REFRESH_TOKEN_BYTES"]),
        token_cfg=AuthTokenConfig(refresh_expires=config["REFRESH_TOKEN_TTL"]),
    )


def get_auth_service() -> AuthService:
    """Return the app-wide service, building it on first use.

    Stores resolve the Flask-scoped session per call, so one instance serves
    every request. Tests may pre-seed ``app.extensions["auth_service"]``.
    """

    extensions = current_app.extensions
    if AUTH_SERVICE_KEY not in extensions:
        extensions[AUTH_SERVICE_KEY] = build_auth_service(current_app)
    return cast(AuthService, extensions[AUTH_SERVICE_KEY])


def current_user_id() -> UserID:
    """Return the subject verified by :func:`require_auth`."""

    return cast(UserID, g.current_user_id)


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Missing bearer token", code="invalid_token")
    return token.strip()


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token.

    Verification goes through the service's token issuer; any failure raises
    ``InvalidTokenError`` and renders as 401.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        claims = get_auth_service().issuer.parse_access_token(_bearer_token())
        g.current_user_id = claims.user_id
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
