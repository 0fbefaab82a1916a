"""Unit tests for the PyJWT based token enhancer."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest
from authserver.infra.jwt.jwt_token_enhancer import JWTTokenEnhancer
from authserver.models.token import REFRESH_TOKEN_TYPE, OAuth2Token
from authserver.services._shared.errors import EnhancementError

SECRET = "unit-test-jwt-secret-key-with-32-bytes"


@pytest.fixture()
def enhancer() -> JWTTokenEnhancer:
    return JWTTokenEnhancer(secret=SECRET, issuer="tests")


def _token() -> OAuth2Token:
    now = datetime.now(UTC).replace(microsecond=0)
    refresh = OAuth2Token(value="rt", token_type=REFRESH_TOKEN_TYPE, expires_at=now + timedelta(hours=5))
    return OAuth2Token(value="at", expires_at=now + timedelta(minutes=30), refresh_token=refresh)


def test_enhance_keeps_type_expiry_and_refresh(enhancer, details):
    token = _token()
    enhanced = enhancer.enhance(token, details)

    assert enhanced.value != token.value
    assert enhanced.token_type == token.token_type
    assert enhanced.expires_at == token.expires_at
    assert enhanced.refresh_token == token.refresh_token


def test_enhance_is_idempotent(enhancer, details):
    token = _token()
    assert enhancer.enhance(token, details) == enhancer.enhance(token, details)


def test_claims_carry_binding_without_credentials(enhancer, details):
    enhanced = enhancer.enhance(_token(), details)
    claims = jwt.decode(enhanced.value, SECRET, algorithms=["HS256"], issuer="tests")

    assert claims["jti"] == "at"
    assert claims["typ"] == "access"
    assert claims["client"]["client_id"] == details.client.client_id
    assert "client_secret" not in claims["client"]
    assert "password_hash" not in claims["user"]
    assert claims["refresh"]["value"] == "rt"


def test_extract_round_trip(enhancer, details):
    token = _token()
    enhanced = enhancer.enhance(token, details)

    decoded, binding = enhancer.extract(enhanced.value)

    assert decoded.value == enhanced.value
    assert decoded.expires_at == token.expires_at
    assert decoded.refresh_token == token.refresh_token
    assert binding == details


def test_extract_ignores_expiry(enhancer, details):
    past = datetime.now(UTC).replace(microsecond=0) - timedelta(hours=1)
    enhanced = enhancer.enhance(OAuth2Token(value="old", expires_at=past), details)

    decoded, _ = enhancer.extract(enhanced.value)
    assert decoded.is_expired()


def test_non_expiring_token_has_no_exp_claim(enhancer, details):
    enhanced = enhancer.enhance(OAuth2Token(value="forever"), details)
    claims = jwt.decode(enhanced.value, SECRET, algorithms=["HS256"], issuer="tests")
    assert "exp" not in claims


@pytest.mark.parametrize(
    "value",
    [
        "not-a-jwt",
        jwt.encode({"jti": "x", "typ": "access", "iss": "tests"}, "other-secret-with-at-least-32-bytes!", algorithm="HS256"),
        jwt.encode({"jti": "x", "typ": "access", "iss": "elsewhere"}, SECRET, algorithm="HS256"),
        jwt.encode({"jti": "x", "typ": "access", "iss": "tests"}, SECRET, algorithm="HS256"),
    ],
    ids=["garbage", "bad-signature", "bad-issuer", "no-binding"],
)
def test_extract_failures(enhancer, value):
    with pytest.raises(EnhancementError):
        enhancer.extract(value)


def test_sub_second_expiry_survives_round_trip(enhancer, details):
    now = datetime.now(UTC).replace(microsecond=654321)
    refresh = OAuth2Token(value="rt", token_type=REFRESH_TOKEN_TYPE, expires_at=now + timedelta(hours=5))
    token = OAuth2Token(value="at", expires_at=now + timedelta(minutes=30), refresh_token=refresh)

    enhanced = enhancer.enhance(token, details)
    decoded, _ = enhancer.extract(enhanced.value)

    assert enhanced.expires_at.microsecond == 0
    assert enhanced.refresh_token.expires_at.microsecond == 0
    assert decoded == enhanced
