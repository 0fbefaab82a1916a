"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .health import bp as health_bp  # noqa: E402
from .oauth import bp as oauth_bp  # noqa: E402
from .resources import bp as resources_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1
    (oauth_bp, "/oauth"),  # -> /api/v1/oauth
    (resources_bp, ""),  # -> /api/v1/simple, /api/v1/admin
]
