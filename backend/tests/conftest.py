"""Pytest fixtures for the token lifecycle engine and its Flask API.

Services are wired to the in-memory adapters unless a test asks for the
Redis store explicitly (``fake_redis`` fixture backed by fakeredis).
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable, Generator
from typing import Any

import fakeredis
import pytest
from authserver import create_app
from authserver.core.config import TestingConfig
from authserver.models.client import ClientDetails
from authserver.models.token import OAuth2Details
from authserver.models.user import UserDetails
from authserver.services._shared.ports import (
    InMemoryClientDetailsService,
    InMemoryTokenStore,
    InMemoryUserDetailsService,
)
from authserver.services.grants.service import ComposeTokenGranter, build_token_granter
from authserver.services.tokens.service import TokenService
from flask import Flask

from tests.factories import ClientDetailsFactory, UserDetailsFactory


@pytest.fixture()
def app() -> Generator[Flask, None, None]:
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied, the demo
        directory loaded and a fresh in-memory token store.
    """
    application = create_app(TestingConfig)
    application.logger.setLevel("WARNING")
    with application.app_context():
        yield application


@pytest.fixture()
def client(app: Flask) -> Any:
    """Return a Flask test client."""

    return app.test_client()


@pytest.fixture()
def basic_auth() -> Callable[[str, str], dict[str, str]]:
    """Factory building an HTTP Basic ``Authorization`` header."""

    def _factory(client_id: str = "clientId", secret: str = "clientSecret") -> dict[str, str]:
        raw = base64.b64encode(f"{client_id}:{secret}".encode()).decode()
        return {"Authorization": f"Basic {raw}"}

    return _factory


# -- Service layer wiring -----------------------------------------------------


@pytest.fixture()
def oauth_client() -> ClientDetails:
    return ClientDetailsFactory(client_id="clientId", client_secret="clientSecret")


@pytest.fixture()
def user() -> UserDetails:
    return UserDetailsFactory(username="simple", authorities=frozenset({"Simple"}))


@pytest.fixture()
def details(oauth_client: ClientDetails, user: UserDetails) -> OAuth2Details:
    return OAuth2Details(client=oauth_client, user=user)


@pytest.fixture()
def token_store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture()
def token_service(token_store: InMemoryTokenStore) -> TokenService:
    """Token service without enhancer: raw minted values are handed out."""
    return TokenService(token_store=token_store, logger=logging.getLogger("tests.tokens"))


@pytest.fixture()
def users(user: UserDetails) -> InMemoryUserDetailsService:
    return InMemoryUserDetailsService([user])


@pytest.fixture()
def clients(oauth_client: ClientDetails) -> InMemoryClientDetailsService:
    return InMemoryClientDetailsService([oauth_client])


@pytest.fixture()
def granter(users: InMemoryUserDetailsService, token_service: TokenService) -> ComposeTokenGranter:
    return build_token_granter(user_details_service=users, token_service=token_service)


@pytest.fixture()
def fake_redis() -> fakeredis.FakeRedis:
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-01") as frozen:
    ...         frozen.tick(60)
    """

    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2024-01-01 12:00:00")

    return _factory
