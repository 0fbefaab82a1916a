"""Integration tests for the ``flask oauth`` command group."""

from __future__ import annotations

import json

from authserver.core.extensions import get_services
from authserver.models.token import OAuth2Details


def test_clients_lists_demo_client(app) -> None:
    result = app.test_cli_runner().invoke(args=["oauth", "clients"])

    assert result.exit_code == 0
    assert "clientId" in result.output
    assert "password,refresh_token" in result.output
    assert "clientSecret" not in result.output


def test_check_token_prints_binding(app) -> None:
    services = get_services(app)
    client = services.clients.get_client_details_by_client_id("clientId", "clientSecret")
    user = services.users.get_user_details_by_username("admin", "123456")
    token = services.token_service.create_access_token(OAuth2Details(client=client, user=user))

    result = app.test_cli_runner().invoke(args=["oauth", "check-token", token.value])

    assert result.exit_code == 0
    body = json.loads(result.output)
    assert body["user"]["username"] == "admin"
    assert body["user"]["authorities"] == ["Admin"]


def test_check_token_unknown(app) -> None:
    result = app.test_cli_runner().invoke(args=["oauth", "check-token", "nope"])

    assert result.exit_code == 1
    assert "token not found" in result.output
