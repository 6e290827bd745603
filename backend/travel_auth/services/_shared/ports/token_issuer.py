from __future__ import annotations

import itertools
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from travel_auth.services._shared.entities import UserID
from travel_auth.services._shared.errors import InvalidTokenError
from travel_auth.services._shared.ports.clock import Clock


@dataclass(frozen=True, slots=True)
class AccessTokenClaims:
    """
    Verified content of an access token.

    :ivar user_id: Subject the token was issued to.
    :ivar token_id: ``jti`` claim.
    :ivar issued_at: ``iat`` claim (UTC).
    :ivar expires_at: ``exp`` claim (UTC).
    """

    user_id: UserID
    token_id: str
    issued_at: datetime
    expires_at: datetime


class TokenIssuer(Protocol):
    """
    Port for issuing and parsing credentials.

    Access tokens are signed, short-lived claims. Refresh tokens are opaque
    random strings; the server-side store decides whether they are valid.
    """

    def issue_access_token(self, user_id: UserID) -> str: ...

    def parse_access_token(self, token: str) -> AccessTokenClaims:
        """Verify ``token`` or raise :class:`InvalidTokenError` (fail closed)."""
        ...

    def generate_refresh_token(self) -> str: ...


class StubTokenIssuer(TokenIssuer):
    """Deterministic, unsigned token issuer used in unit tests."""

    def __init__(self, clock: Clock, *, access_ttl: timedelta = timedelta(minutes=15)) -> None:
        self.clock = clock
        self.access_ttl = access_ttl
        self._seq = itertools.count(1)
        self._issued: dict[str, AccessTokenClaims] = {}

    def issue_access_token(self, user_id: UserID) -> str:
        n = next(self._seq)
        now = self.clock.now()
        token = f"access.{user_id}.{n}"
        self._issued[token] = AccessTokenClaims(
            user_id=user_id,
            token_id=f"jti-{n}",
            issued_at=now,
            expires_at=now + self.access_ttl,
        )
        return token

    def parse_access_token(self, token: str) -> AccessTokenClaims:
        claims = self._issued.get(token)
        if claims is None or claims.expires_at <= self.clock.now():
            raise InvalidTokenError()
        return claims

    def generate_refresh_token(self) -> str:
        # Random suffix keeps values unique across issuer instances.
        return f"refresh.{next(self._seq)}.{secrets.token_hex(4)}"
