"""Convenience exports for application schemas."""

from __future__ import annotations

from .common import StringSet
from .oauth import (
    CheckTokenRequestSchema,
    CheckTokenResponseSchema,
    TokenRequestSchema,
    TokenResponseSchema,
    dump_token,
)
from .records import ClientRecordSchema, OAuth2DetailsSchema, UserRecordSchema

__all__ = [
    "CheckTokenRequestSchema",
    "CheckTokenResponseSchema",
    "ClientRecordSchema",
    "OAuth2DetailsSchema",
    "StringSet",
    "TokenRequestSchema",
    "TokenResponseSchema",
    "UserRecordSchema",
    "dump_token",
]
