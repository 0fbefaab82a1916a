"""
Snapshot schemas for client/user records and identity bindings.

Used wherever a binding leaves the process (Redis store, JWT claims, API
responses). Credentials are never part of a snapshot: loading yields
records with an empty secret / password hash.
"""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load

from authserver.models.client import ClientDetails
from authserver.models.token import OAuth2Details
from authserver.models.user import UserDetails

from .common import StringSet


class ClientRecordSchema(Schema):
    """Public view of a :class:`ClientDetails`."""

    class Meta:
        unknown = EXCLUDE

    client_id = fields.String(required=True)
    access_token_validity_seconds = fields.Integer(required=True)
    refresh_token_validity_seconds = fields.Integer(required=True)
    registered_redirect_uri = fields.String(allow_none=True, load_default=None)
    authorized_grant_types = StringSet(load_default=frozenset)

    @post_load
    def make_client(self, data: dict[str, Any], **_: Any) -> ClientDetails:
        return ClientDetails(client_secret="", **data)


class UserRecordSchema(Schema):
    """Public view of a :class:`UserDetails`."""

    class Meta:
        unknown = EXCLUDE

    username = fields.String(required=True)
    user_id = fields.Integer(required=True)
    authorities = StringSet(load_default=frozenset)

    @post_load
    def make_user(self, data: dict[str, Any], **_: Any) -> UserDetails:
        return UserDetails(password_hash="", **data)


class OAuth2DetailsSchema(Schema):
    """Identity binding snapshot (client + user)."""

    class Meta:
        unknown = EXCLUDE

    client = fields.Nested(ClientRecordSchema, required=True)
    user = fields.Nested(UserRecordSchema, required=True)

    @post_load
    def make_details(self, data: dict[str, Any], **_: Any) -> OAuth2Details:
        return OAuth2Details(client=data["client"], user=data["user"])
