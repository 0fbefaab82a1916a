"""Unit tests for the in-memory client and user directories."""

from __future__ import annotations

import pytest
from authserver.seeds.directory import build_directories
from authserver.services._shared.errors import (
    ClientNotFoundError,
    InvalidClientSecretError,
    InvalidPasswordError,
    UserNotFoundError,
)


class TestClientDirectory:
    def test_valid_credentials(self, clients, oauth_client):
        assert clients.get_client_details_by_client_id("clientId", "clientSecret") == oauth_client

    def test_unknown_client(self, clients):
        with pytest.raises(ClientNotFoundError):
            clients.get_client_details_by_client_id("nope", "clientSecret")

    def test_wrong_secret(self, clients):
        with pytest.raises(InvalidClientSecretError):
            clients.get_client_details_by_client_id("clientId", "wrong")


class TestUserDirectory:
    def test_valid_credentials(self, users, user):
        assert users.get_user_details_by_username("simple", "123456") == user

    def test_unknown_user(self, users):
        with pytest.raises(UserNotFoundError):
            users.get_user_details_by_username("ghost", "123456")

    def test_wrong_password(self, users):
        with pytest.raises(InvalidPasswordError):
            users.get_user_details_by_username("simple", "000000")


class TestDefaultDirectory:
    def test_demo_fixture(self):
        clients, users = build_directories()

        client = clients.get_client_details_by_client_id("clientId", "clientSecret")
        assert client.access_token_validity_seconds == 1800
        assert client.refresh_token_validity_seconds == 18000
        assert client.registered_redirect_uri == "http://127.0.0.1"
        assert client.authorized_grant_types == frozenset({"password", "refresh_token"})

        assert users.get_user_details_by_username("simple", "123456").has_authority("Simple")
        assert users.get_user_details_by_username("admin", "123456").has_authority("Admin")

    def test_empty_directories(self):
        clients, users = build_directories(load_defaults=False)
        assert clients.list_clients() == []
        with pytest.raises(UserNotFoundError):
            users.get_user_details_by_username("simple", "123456")
