"""Shared API helpers for request authentication and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from authserver.core.errors import Unauthorized
from authserver.core.extensions import OAuthServices, get_services
from authserver.models.client import ClientDetails
from authserver.models.token import OAuth2Details

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "bearer "


def services() -> OAuthServices:
    """Return the service graph bound to the current application."""

    return get_services()


def authenticate_client() -> ClientDetails:
    """Verify HTTP Basic client credentials against the client directory.

    Returns
    -------
    ClientDetails
        The authenticated client, also stored on ``g.oauth_client``.

    Raises
    ------
    Unauthorized
        When the ``Authorization`` header carries no Basic credentials.
    ClientNotFoundError, InvalidClientSecretError
        Propagated from the directory and rendered as ``invalid_client``.
    """

    auth = request.authorization
    if auth is None or auth.type != "basic" or not auth.username:
        raise Unauthorized("Client authentication required", code="invalid_client")
    client = services().clients.get_client_details_by_client_id(
        auth.username, auth.password or ""
    )
    g.oauth_client = client
    return client


def bearer_token() -> str:
    """Return the access token from ``Authorization``.

    Accepts ``Bearer <token>`` as well as a bare token value.
    """

    header = (request.headers.get("Authorization") or "").strip()
    if header.lower().startswith(BEARER_PREFIX):
        header = header[len(BEARER_PREFIX) :].strip()
    if not header:
        raise Unauthorized("Missing access token", code="invalid_token")
    return header


def require_token(func: F) -> F:
    """Resolve the bearer token into ``g.oauth_details`` before the handler."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.oauth_details = services().token_service.get_oauth2_details_by_access_token(
            bearer_token()
        )
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_authority(authority: str) -> Callable[[F], F]:
    """Ensure the token's user carries ``authority``."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            services().resources.ensure_authority(current_details(), authority)
            return func(*args, **kwargs)

        return require_token(wrapper)  # type: ignore[return-value]

    return decorator


def current_details() -> OAuth2Details:
    """Return the binding resolved by :func:`require_token`."""

    return g.oauth_details  # type: ignore[no-any-return]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def no_store(response: Response) -> Response:
    """Mark a token response as non-cacheable."""

    response.headers["Cache-Control"] = "no-store"
    response.headers["Pragma"] = "no-cache"
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
