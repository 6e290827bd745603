"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, pre_load, validate


def _strip(data: Any, *, lower: tuple[str, ...] = (), keys: tuple[str, ...] = ()) -> Any:
    """Trim (and optionally lowercase) string fields before validation runs."""
    if not isinstance(data, dict):
        return data
    data = dict(data)
    for key in (*keys, *lower):
        value = data.get(key)
        if isinstance(value, str):
            value = value.strip()
            data[key] = value.lower() if key in lower else value
    return data


class RegisterSchema(Schema):
    """Input payload for account registration."""

    username = fields.String(required=True, validate=validate.Length(min=3, max=50))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(
        required=True, load_only=True, validate=validate.Length(min=8, max=128)
    )

    @pre_load
    def normalize(self, data: Any, **_: Any) -> Any:
        return _strip(data, keys=("username",), lower=("email",))


class LoginSchema(Schema):
    """Input payload for authenticating a user.

    Only presence is checked on the password so a short guess gets the same
    401 as any other wrong one.
    """

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(
        required=True, load_only=True, validate=validate.Length(min=1, max=128)
    )

    @pre_load
    def normalize(self, data: Any, **_: Any) -> Any:
        return _strip(data, lower=("email",))


class RefreshTokenSchema(Schema):
    """Input payload carrying an opaque refresh token (refresh and logout)."""

    refresh_token = fields.String(
        required=True, load_only=True, validate=validate.Length(min=1, max=512)
    )


class TokenResponseSchema(Schema):
    """Response payload containing an access/refresh token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(dump_default="bearer")


class UserIdSchema(Schema):
    """Response payload exposing the identifier of a user."""

    user_id = fields.String(required=True)
