from travel_auth.models.refresh_token import RefreshTokenModel
from travel_auth.models.revoked_token import RevokedTokenModel
from travel_auth.models.user import UserModel

__all__ = [
    "RefreshTokenModel",
    "RevokedTokenModel",
    "UserModel",
]
