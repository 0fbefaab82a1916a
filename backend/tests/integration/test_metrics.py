"""Integration tests for the Prometheus scrape endpoint and token counters."""

from __future__ import annotations

from authserver.core.metrics import REGISTRY

TOKEN_URL = "/api/v1/oauth/token"


def _sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels or None) or 0.0


def _grant(client, headers, **params):
    return client.post(TOKEN_URL, query_string=params, headers=headers)


def test_metrics_endpoint_exposes_token_counters(client) -> None:
    resp = client.get("/metrics")

    assert resp.status_code == 200
    assert resp.content_type.startswith("text/plain")
    body = resp.get_data(as_text=True)
    for name in (
        "authserver_tokens_minted_total",
        "authserver_tokens_reused_total",
        "authserver_tokens_rotated_total",
        "authserver_grants_rejected_total",
    ):
        assert name in body


def test_lifecycle_events_move_the_counters(client, basic_auth) -> None:
    minted = _sample("authserver_tokens_minted_total")
    reused = _sample("authserver_tokens_reused_total")
    rotated = _sample("authserver_tokens_rotated_total")
    password = {"grant_type": "password", "username": "simple", "password": "123456"}

    first = _grant(client, basic_auth(), **password).get_json()
    _grant(client, basic_auth(), **password)
    _grant(client, basic_auth(), grant_type="refresh_token", refresh_token=first["refresh_token"])

    assert _sample("authserver_tokens_minted_total") == minted + 1
    assert _sample("authserver_tokens_reused_total") == reused + 1
    assert _sample("authserver_tokens_rotated_total") == rotated + 1


def test_rejected_grant_is_counted_by_reason(client, basic_auth) -> None:
    before = _sample("authserver_grants_rejected_total", reason="unsupported_grant_type")

    resp = _grant(client, basic_auth(), grant_type="client_credentials")

    assert resp.status_code == 400
    assert _sample("authserver_grants_rejected_total", reason="unsupported_grant_type") == before + 1
