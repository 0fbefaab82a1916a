"""Service graph and external clients attached to the Flask app."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from authserver.infra.jwt.jwt_token_enhancer import JWTTokenEnhancer
from authserver.infra.redis.redis_token_store import RedisTokenStore
from authserver.seeds.directory import build_directories
from authserver.services._shared.ports import (
    ClientDetailsService,
    InMemoryTokenStore,
    TokenEnhancer,
    TokenStore,
    UserDetailsService,
)
from authserver.services.grants.service import ComposeTokenGranter, build_token_granter
from authserver.services.resources.service import CommonService
from authserver.services.tokens.service import TokenService

EXTENSION_KEY = "oauth"

redis_client: redis.Redis | None = None


@dataclass(slots=True)
class OAuthServices:
    """Process-wide collaborators shared by every request."""

    clients: ClientDetailsService
    users: UserDetailsService
    token_store: TokenStore
    token_service: TokenService
    granter: ComposeTokenGranter
    resources: CommonService


def _build_redis(app: Flask) -> redis.Redis:
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        raise RuntimeError("REDIS_URL is required when TOKEN_STORE is 'redis'")
    client = redis.Redis.from_url(redis_url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    return client


def _build_token_store(app: Flask) -> TokenStore:
    global redis_client
    kind = str(app.config.get("TOKEN_STORE", "memory")).lower()
    if kind == "memory":
        redis_client = None
        app.extensions.pop("redis_client", None)
        return InMemoryTokenStore()
    if kind == "redis":
        redis_client = _build_redis(app)
        app.extensions["redis_client"] = redis_client
        return RedisTokenStore(r=redis_client)
    raise RuntimeError(f"Unknown TOKEN_STORE {kind!r}")


def _build_token_enhancer(app: Flask) -> TokenEnhancer | None:
    kind = str(app.config.get("TOKEN_ENHANCER", "jwt")).lower()
    if kind == "none":
        return None
    if kind == "jwt":
        return JWTTokenEnhancer(
            secret=app.config["JWT_SECRET_KEY"],
            algorithm=app.config.get("JWT_ALGORITHM", "HS256"),
            issuer=app.config.get("JWT_ISSUER", "authserver"),
        )
    raise RuntimeError(f"Unknown TOKEN_ENHANCER {kind!r}")


def init_app(app: Flask) -> None:
    """Build the token lifecycle services once and register them on ``app``.

    Parameters
    ----------
    app: flask.Flask
        Application whose configuration selects the token store, the token
        enhancer and whether the demo directory is loaded.
    """
    logger = logging.getLogger("authserver.services")
    clients, users = build_directories(
        load_defaults=bool(app.config.get("LOAD_DEFAULT_DIRECTORY", True))
    )
    token_store = _build_token_store(app)
    token_service = TokenService(
        token_store=token_store,
        token_enhancer=_build_token_enhancer(app),
        logger=logger,
    )
    granter = build_token_granter(
        user_details_service=users,
        token_service=token_service,
        enforce_client_grant_types=bool(app.config.get("ENFORCE_CLIENT_GRANT_TYPES", True)),
        logger=logger,
    )
    app.extensions[EXTENSION_KEY] = OAuthServices(
        clients=clients,
        users=users,
        token_store=token_store,
        token_service=token_service,
        granter=granter,
        resources=CommonService(logger=logger),
    )


def get_services(app: Flask | None = None) -> OAuthServices:
    """Return the service graph of ``app`` (the current app by default)."""
    target = app or current_app
    services = target.extensions.get(EXTENSION_KEY)
    if services is None:
        raise RuntimeError("OAuth services are not initialized. Call init_app() first.")
    return services


def get_redis() -> redis.Redis:
    """Return the initialized Redis client."""
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return redis_client
