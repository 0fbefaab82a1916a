"""OAuth2 token endpoint and token introspection."""

from __future__ import annotations

from flask import Blueprint, request

from authserver.api.deps import authenticate_client, json_response, no_store, services, timing
from authserver.schemas import (
    CheckTokenRequestSchema,
    CheckTokenResponseSchema,
    TokenRequestSchema,
    dump_token,
)

bp = Blueprint("oauth", __name__, url_prefix="/oauth")

token_request_schema = TokenRequestSchema()
check_token_request_schema = CheckTokenRequestSchema()
check_token_response_schema = CheckTokenResponseSchema()


@bp.post("/token")
@timing
def token():
    """Exchange grant credentials for an access token.

    The grant type and its credentials (``username``/``password`` or
    ``refresh_token``) are read from the query string or a form body.
    """

    client = authenticate_client()
    data = token_request_schema.load(request.values)
    issued = services().granter.grant(data["grant_type"], client, request.values)
    return no_store(json_response(dump_token(issued)))


@bp.post("/check_token")
@timing
def check_token():
    """Return the binding of a live access token."""

    authenticate_client()
    data = check_token_request_schema.load(request.values)
    details = services().token_service.get_oauth2_details_by_access_token(data["token"])
    return json_response(check_token_response_schema.dump(details))
