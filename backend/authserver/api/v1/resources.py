"""Protected sample resources."""

from __future__ import annotations

from flask import Blueprint

from authserver.api.deps import (
    current_details,
    json_response,
    require_authority,
    require_token,
    services,
    timing,
)
from authserver.services.resources.service import ADMIN_AUTHORITY

bp = Blueprint("resources", __name__)


@bp.get("/simple")
@timing
@require_token
def simple():
    """Available to any valid access token."""

    username = current_details().user.username
    return json_response({"data": services().resources.simple_data(username)})


@bp.get("/admin")
@timing
@require_authority(ADMIN_AUTHORITY)
def admin():
    username = current_details().user.username
    return json_response({"data": services().resources.admin_data(username)})
