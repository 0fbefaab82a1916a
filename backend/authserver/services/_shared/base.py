# authserver/services/_shared/base.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from authserver.core import errors as api_errors
from authserver.models.token import utcnow
from authserver.services._shared.errors import (
    BindingLockError,
    ClientNotFoundError,
    CredentialsError,
    EnhancementError,
    ExpiredTokenError,
    InsufficientAuthorityError,
    InvalidClientSecretError,
    InvalidRequestError,
    NotFoundError,
    ServiceError,
    TokenNotFoundError,
    UnauthorizedGrantTypeError,
    UnsupportedGrantTypeError,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (client, request ids, etc.).

    :param request_id: Correlation id for logging/tracing.
    :param client_id: Authenticated client, when known.
    """

    request_id: str | None = None
    client_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Hold the explicit collaborators every service needs (logger, context).
    * Centralize error translation and logging.
    * Keep services thin, orchestration-only, no web leakage.

    Notes
    -----
    - The logger is injected at construction; services never configure
      logging themselves.
    """

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context (client, tracing).
        :type ctx: ServiceContext | None
        :param logger: Logger used for lifecycle events.
        :type logger: logging.Logger | None
        """
        self.ctx = ctx or ServiceContext()
        self.log = logger or logging.getLogger(type(self).__module__)

    @staticmethod
    def now_utc() -> datetime:
        return utcnow()

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        return translate_exception(exc)


def translate_exception(exc: Exception) -> Exception:
    """
    Map a domain error to its :class:`~authserver.core.errors.APIError`.

    Each error kind gets a stable OAuth-style ``code``; anything that is not
    a :class:`ServiceError` is returned untouched.
    """
    if isinstance(exc, UnsupportedGrantTypeError):
        return api_errors.OAuthError(str(exc), code="unsupported_grant_type")

    if isinstance(exc, UnauthorizedGrantTypeError):
        return api_errors.OAuthError(str(exc), code="unauthorized_client")

    if isinstance(exc, InvalidRequestError):
        return api_errors.OAuthError(str(exc), code="invalid_request")

    # Client authentication failures → 401 invalid_client
    if isinstance(exc, ClientNotFoundError | InvalidClientSecretError):
        return api_errors.Unauthorized(str(exc), code="invalid_client")

    # Resource owner credentials → 400 invalid_grant
    if isinstance(exc, CredentialsError) or (
        isinstance(exc, NotFoundError) and exc.entity == "User"
    ):
        return api_errors.OAuthError(str(exc), code="invalid_grant")

    if isinstance(exc, TokenNotFoundError | ExpiredTokenError | EnhancementError):
        return api_errors.Unauthorized(str(exc), code="invalid_token")

    # Store contention: the caller may retry shortly
    if isinstance(exc, BindingLockError):
        return api_errors.ServiceUnavailable(str(exc))

    if isinstance(exc, InsufficientAuthorityError):
        return api_errors.Forbidden(str(exc))

    if isinstance(exc, NotFoundError):
        return api_errors.NotFound(str(exc))

    # Any other ServiceError subclass → 400 Bad Request
    if isinstance(exc, ServiceError):
        return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

    # Fallback: return untouched (will bubble up to Flask handler)
    return exc
