"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from authserver.api.deps import json_response, services, timing
from authserver.core.extensions import get_redis

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application and token store health information."""

    store_kind = str(current_app.config.get("TOKEN_STORE", "memory")).lower()
    store_status = "ok"
    if store_kind == "redis":
        try:
            get_redis().ping()
        except RedisError:
            current_app.logger.exception("healthcheck.redis_error")
            store_status = "fail"
    status = "ok" if services().resources.health_check() and store_status == "ok" else "fail"
    version = current_app.config.get("APP_VERSION", "dev")
    payload = {"status": status, "token_store": store_kind, "store": store_status, "version": version}
    return json_response(payload, status=200 if status == "ok" else 503)
