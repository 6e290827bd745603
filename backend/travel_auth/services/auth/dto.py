# travel_auth/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPair:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Signed, short-lived access token.
    :type access_token: str
    :param refresh_token: Opaque refresh token value.
    :type refresh_token: str
    """

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    token_type: str = "bearer"


@dataclass(frozen=True, slots=True)
class PruneResult:
    """
    Rows removed by a housekeeping pass.

    :param refresh_tokens: Expired active refresh tokens deleted.
    :param revoked_tokens: Expired tombstones deleted.
    """

    refresh_tokens: int
    revoked_tokens: int


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    Access token lifetime belongs to the token issuer; the service only
    stamps refresh rows.

    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    refresh_expires: timedelta = timedelta(days=7)

    def __post_init__(self) -> None:
        if self.refresh_expires <= timedelta(0):
            raise ValueError("refresh_expires must be positive.")
