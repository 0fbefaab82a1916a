"""OAuth2 endpoint request/response schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, validate

from authserver.models.token import OAuth2Token

from .records import OAuth2DetailsSchema


class TokenRequestSchema(Schema):
    """Query parameters of ``POST /oauth/token``."""

    class Meta:
        unknown = EXCLUDE

    grant_type = fields.String(required=True, validate=validate.Length(min=1))


class CheckTokenRequestSchema(Schema):
    """Query parameters of ``POST /oauth/check_token``."""

    class Meta:
        unknown = EXCLUDE

    token = fields.String(required=True, validate=validate.Length(min=1))


class TokenResponseSchema(Schema):
    """Access token response (RFC 6749 section 5.1 shape)."""

    access_token = fields.String(attribute="value")
    token_type = fields.Constant("bearer")
    expires_in = fields.Method("get_expires_in")
    refresh_token = fields.Method("get_refresh_token")

    def get_expires_in(self, token: OAuth2Token) -> int | None:
        return token.expires_in()

    def get_refresh_token(self, token: OAuth2Token) -> str | None:
        return token.refresh_token.value if token.refresh_token else None


class CheckTokenResponseSchema(OAuth2DetailsSchema):
    """Introspection result: the binding of a live access token."""

    active = fields.Constant(True, dump_only=True)


def dump_token(token: OAuth2Token) -> dict[str, Any]:
    return TokenResponseSchema().dump(token)
