"""Demo client and user fixtures for the in-memory directories."""

from __future__ import annotations

import logging
from typing import Any

from authserver.models.client import ClientDetails
from authserver.models.user import UserDetails
from authserver.services._shared.ports import (
    InMemoryClientDetailsService,
    InMemoryUserDetailsService,
)

LOGGER = logging.getLogger(__name__)

CLIENT_FIXTURES: list[dict[str, Any]] = [
    {
        "client_id": "clientId",
        "client_secret": "clientSecret",
        "access_token_validity_seconds": 1800,
        "refresh_token_validity_seconds": 18000,
        "registered_redirect_uri": "http://127.0.0.1",
        "authorized_grant_types": ("password", "refresh_token"),
    },
]

USER_FIXTURES: list[dict[str, Any]] = [
    {"username": "simple", "password": "123456", "user_id": 1, "authorities": ("Simple",)},
    {"username": "admin", "password": "123456", "user_id": 2, "authorities": ("Admin",)},
]


def build_clients() -> list[ClientDetails]:
    """Materialize :data:`CLIENT_FIXTURES` as client records."""
    clients = []
    for fixture in CLIENT_FIXTURES:
        data = dict(fixture)
        clients.append(ClientDetails.create(data.pop("client_id"), data.pop("client_secret"), **data))
    return clients


def build_users() -> list[UserDetails]:
    """Materialize :data:`USER_FIXTURES`; passwords are hashed on creation."""
    users = []
    for fixture in USER_FIXTURES:
        data = dict(fixture)
        users.append(UserDetails.create(data.pop("username"), data.pop("password"), **data))
    return users


def build_directories(
    *, load_defaults: bool = True
) -> tuple[InMemoryClientDetailsService, InMemoryUserDetailsService]:
    """
    Return the client and user directories.

    :param load_defaults: When ``False`` both directories start empty.
    """
    if not load_defaults:
        return InMemoryClientDetailsService(), InMemoryUserDetailsService()
    clients = build_clients()
    users = build_users()
    LOGGER.info("seed.directory clients=%d users=%d", len(clients), len(users))
    return InMemoryClientDetailsService(clients), InMemoryUserDetailsService(users)
