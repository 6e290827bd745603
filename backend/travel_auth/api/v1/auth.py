"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, Response, current_app, request

from travel_auth.api.deps import (
    current_user_id,
    get_auth_service,
    json_response,
    require_auth,
    timing,
)
from travel_auth.core.extensions import limiter
from travel_auth.schemas import (
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    TokenResponseSchema,
    UserIdSchema,
)

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
token_schema = TokenResponseSchema()
user_id_schema = UserIdSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/register")
@timing
def register():
    """Register a new user and return its identifier."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    user_id = get_auth_service().register(
        payload["username"], payload["email"], payload["password"]
    )
    body = {"data": user_id_schema.dump({"user_id": str(user_id)})}
    return json_response(body, status=201)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    pair = get_auth_service().login(data["email"], data["password"])
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token and issue a new token pair."""

    data = refresh_token_schema.load(request.get_json(silent=True) or {})
    pair = get_auth_service().refresh_session(data["refresh_token"])
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/logout")
@timing
def logout():
    """Revoke the session behind a refresh token (idempotent)."""

    data = refresh_token_schema.load(request.get_json(silent=True) or {})
    get_auth_service().revoke_session(data["refresh_token"])
    return Response(status=204)


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the identity carried by the access token."""

    body = {"data": user_id_schema.dump({"user_id": str(current_user_id())})}
    return json_response(body)
