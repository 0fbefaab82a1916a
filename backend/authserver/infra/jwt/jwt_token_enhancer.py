# authserver/infra/jwt/jwt_token_enhancer.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import jwt
from marshmallow import ValidationError

from authserver.models.token import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    OAuth2Details,
    OAuth2Token,
)
from authserver.schemas.records import OAuth2DetailsSchema
from authserver.services._shared.errors import EnhancementError
from authserver.services._shared.ports import TokenEnhancer

_details_schema = OAuth2DetailsSchema()


def _to_ts(dt: datetime | None) -> int | None:
    return int(dt.timestamp()) if dt is not None else None


def _from_ts(ts: Any) -> datetime | None:
    return datetime.fromtimestamp(int(ts), tz=UTC) if ts is not None else None


def _to_seconds(dt: datetime | None) -> datetime | None:
    return dt.replace(microsecond=0) if dt is not None else None


@dataclass(slots=True)
class JWTTokenEnhancer(TokenEnhancer):
    """
    Signed-JWT token enhancer (PyJWT).

    The minted value becomes the ``jti`` claim and the binding is embedded
    without client secret or password hash. Access tokens also carry their
    paired refresh token so :meth:`extract` restores the full structure.

    .. note::
       ``exp`` has second precision, so the returned token carries its
       expiry (and its refresh token's) truncated to whole seconds; this is
       exactly what :meth:`extract` yields back.
    """

    secret: str
    algorithm: str = "HS256"
    issuer: str = "authserver"

    def enhance(self, token: OAuth2Token, details: OAuth2Details) -> OAuth2Token:
        claims: dict[str, Any] = {
            "jti": token.value,
            "typ": token.token_type,
            "iss": self.issuer,
            **_details_schema.dump(details),
        }
        exp = _to_ts(token.expires_at)
        if exp is not None:
            claims["exp"] = exp
        if token.token_type == ACCESS_TOKEN_TYPE and token.refresh_token is not None:
            claims["refresh"] = {
                "value": token.refresh_token.value,
                "exp": _to_ts(token.refresh_token.expires_at),
            }

        try:
            encoded = jwt.encode(claims, self.secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise EnhancementError(f"unable to encode token: {exc}") from exc

        refresh_token = token.refresh_token
        if refresh_token is not None:
            refresh_token = OAuth2Token(
                value=refresh_token.value,
                token_type=refresh_token.token_type,
                expires_at=_to_seconds(refresh_token.expires_at),
            )

        return OAuth2Token(
            value=encoded,
            token_type=token.token_type,
            expires_at=_to_seconds(token.expires_at),
            refresh_token=refresh_token,
        )

    def extract(self, value: str) -> tuple[OAuth2Token, OAuth2Details]:
        # Expiry is judged by the token service, not by the decoder.
        try:
            claims = jwt.decode(
                value,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"verify_exp": False, "require": ["jti", "typ", "iss"]},
            )
            details = _details_schema.load(
                {"client": claims.get("client"), "user": claims.get("user")}
            )
        except jwt.PyJWTError as exc:
            raise EnhancementError(f"unable to decode token: {exc}") from exc
        except ValidationError as exc:
            raise EnhancementError(f"malformed token binding: {exc.messages}") from exc

        refresh_token = None
        refresh = claims.get("refresh")
        if isinstance(refresh, dict) and refresh.get("value"):
            refresh_token = OAuth2Token(
                value=str(refresh["value"]),
                token_type=REFRESH_TOKEN_TYPE,
                expires_at=_from_ts(refresh.get("exp")),
            )

        token = OAuth2Token(
            value=value,
            token_type=str(claims["typ"]),
            expires_at=_from_ts(claims.get("exp")),
            refresh_token=refresh_token,
        )
        return token, details
