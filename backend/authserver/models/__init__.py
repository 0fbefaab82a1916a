from authserver.models.client import ClientDetails
from authserver.models.token import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    OAuth2Details,
    OAuth2Token,
    utcnow,
)
from authserver.models.user import UserDetails

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "ClientDetails",
    "OAuth2Details",
    "OAuth2Token",
    "UserDetails",
    "utcnow",
]
