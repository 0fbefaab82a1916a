"""Unit tests for token value types and identity bindings."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from authserver.models.token import ACCESS_TOKEN_TYPE, OAuth2Details, OAuth2Token

from tests.factories import ClientDetailsFactory, UserDetailsFactory

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


class TestOAuth2Token:
    def test_defaults_to_non_expiring_access_token(self):
        token = OAuth2Token(value="abc")
        assert token.token_type == ACCESS_TOKEN_TYPE
        assert token.is_expired(NOW) is False
        assert token.expires_in(NOW) is None

    def test_is_expired_once_now_reaches_expiry(self):
        token = OAuth2Token(value="abc", expires_at=NOW)
        assert token.is_expired(NOW - timedelta(microseconds=1)) is False
        assert token.is_expired(NOW) is True
        assert token.is_expired(NOW + timedelta(seconds=1)) is True

    def test_expires_in_rounds_up_and_never_goes_negative(self):
        token = OAuth2Token(value="abc", expires_at=NOW + timedelta(seconds=10))
        assert token.expires_in(NOW) == 10
        assert token.expires_in(NOW + timedelta(milliseconds=500)) == 10
        assert token.expires_in(NOW + timedelta(seconds=30)) == 0


class TestOAuth2Details:
    def test_equality_uses_client_id_and_username_only(self):
        client = ClientDetailsFactory(client_id="c1")
        user = UserDetailsFactory(username="u1")
        live = OAuth2Details(client=client, user=user)
        snapshot = live.public()

        assert snapshot.client.client_secret == ""
        assert snapshot.user.password_hash == ""
        assert snapshot == live
        assert hash(snapshot) == hash(live)
        assert live.key == "c1:u1"

    def test_different_users_are_different_bindings(self):
        client = ClientDetailsFactory()
        a = OAuth2Details(client=client, user=UserDetailsFactory(username="a"))
        b = OAuth2Details(client=client, user=UserDetailsFactory(username="b"))
        assert a != b
        assert len({a, b}) == 2


class TestDirectoryRecords:
    def test_user_password_is_hashed(self):
        user = UserDetailsFactory(username="simple", password="123456")
        assert user.password_hash != "123456"
        assert user.verify_password("123456")
        assert not user.verify_password("654321")

    def test_client_grant_types_accept_any_iterable(self):
        client = ClientDetailsFactory(authorized_grant_types=["password"])
        assert isinstance(client.authorized_grant_types, frozenset)
        assert client.supports_grant_type("password")
        assert not client.supports_grant_type("refresh_token")
