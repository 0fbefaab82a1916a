"""Prometheus counters for the token lifecycle."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, generate_latest

# Private registry so repeated app creation in tests never re-registers collectors
REGISTRY = CollectorRegistry()

tokens_minted_total = Counter(
    "authserver_tokens_minted_total",
    "Access tokens minted for a binding without a live token",
    registry=REGISTRY,
)

tokens_reused_total = Counter(
    "authserver_tokens_reused_total",
    "Live access tokens handed out again to the same binding",
    registry=REGISTRY,
)

tokens_rotated_total = Counter(
    "authserver_tokens_rotated_total",
    "Refresh tokens consumed and replaced by a new pair",
    registry=REGISTRY,
)

grants_rejected_total = Counter(
    "authserver_grants_rejected_total",
    "Grant requests rejected before reaching a granter",
    ["reason"],
    registry=REGISTRY,
)


def render_latest() -> tuple[bytes, str]:
    """Return the exposition payload and its content type."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST


__all__ = [
    "REGISTRY",
    "grants_rejected_total",
    "render_latest",
    "tokens_minted_total",
    "tokens_reused_total",
    "tokens_rotated_total",
]
