# travel_auth/infra/jwt/flask_jwt_token_issuer.py
from __future__ import annotations

import base64
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, cast

from jwt.exceptions import PyJWTError

from travel_auth.services._shared.entities import UserID
from travel_auth.services._shared.errors import InvalidTokenError
from travel_auth.services._shared.ports import AccessTokenClaims, TokenIssuer

ACCESS_TOKEN_TYPE = "access"


@dataclass(slots=True)
class FlaskJWTTokenIssuer(TokenIssuer):
    """
    Adapter for Flask-JWT-Extended.

    Signing key, algorithm, issuer, audience and lifetime come from the Flask
    config (``JWT_SECRET_KEY`` / ``JWT_PRIVATE_KEY``, ``JWT_ALGORITHM``,
    ``JWT_ENCODE_ISSUER``, ``JWT_ENCODE_AUDIENCE``,
    ``JWT_ACCESS_TOKEN_EXPIRES``), so keys stay outside the service.

    .. note::
       Requires an active Flask app context.

    :param refresh_token_bytes: Entropy behind each opaque refresh token.
    """

    refresh_token_bytes: int = 32

    def issue_access_token(self, user_id: UserID) -> str:
        from flask_jwt_extended import create_access_token

        # 'sub' must be a string for PyJWT >= 2.10
        return cast(str, create_access_token(identity=str(user_id), fresh=False))

    def parse_access_token(self, token: str) -> AccessTokenClaims:
        """
        Verify signature, expiry, issuer, audience and claim shape.

        Every failure collapses into :class:`InvalidTokenError`; nothing is
        partially trusted.
        """
        from flask_jwt_extended import decode_token
        from flask_jwt_extended.exceptions import JWTExtendedException

        if not isinstance(token, str) or token.count(".") != 2:
            raise InvalidTokenError()
        try:
            payload = cast(dict[str, Any], decode_token(token))
        except (PyJWTError, JWTExtendedException) as exc:
            raise InvalidTokenError() from exc

        return self._claims_from_payload(payload)

    def generate_refresh_token(self) -> str:
        raw = secrets.token_bytes(self.refresh_token_bytes)
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _claims_from_payload(payload: dict[str, Any]) -> AccessTokenClaims:
        if payload.get("type") != ACCESS_TOKEN_TYPE:
            raise InvalidTokenError()
        sub = payload.get("sub")
        jti = payload.get("jti")
        iat = payload.get("iat")
        exp = payload.get("exp")
        if not isinstance(sub, str) or not sub or not isinstance(jti, str):
            raise InvalidTokenError()
        if not isinstance(iat, int | float) or not isinstance(exp, int | float):
            raise InvalidTokenError()
        return AccessTokenClaims(
            user_id=UserID(sub),
            token_id=jti,
            issued_at=datetime.fromtimestamp(iat, tz=UTC),
            expires_at=datetime.fromtimestamp(exp, tz=UTC),
        )
