"""Prometheus scrape endpoint, mounted outside the versioned API."""

from __future__ import annotations

from flask import Blueprint, Response

from authserver.core.metrics import render_latest

bp = Blueprint("metrics", __name__)


@bp.get("/metrics")
def prometheus_metrics() -> Response:
    payload, content_type = render_latest()
    return Response(payload, content_type=content_type)
