"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. They serve as stable contracts between stores,
directories, grant strategies, and the token service.

The translation to HTTP responses (RFC 7807) is handled by
``authserver/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - None of them are retried inside the service layer.
    - The API layer or BaseService will later translate them to APIError.
    """

    pass


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in a store or directory.

    :param entity: Entity name (e.g., "Client").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found: {self.key}"


class CredentialsError(ServiceError):
    """Base for credentials that were found but did not verify."""


class InvalidRequestError(ServiceError):
    """Base for requests missing a required credential field."""


# --------------------------------------------------------------------------- #
# Directory errors
# --------------------------------------------------------------------------- #


class ClientNotFoundError(NotFoundError):
    def __init__(self, client_id: str) -> None:
        NotFoundError.__init__(self, "Client", client_id)


class InvalidClientSecretError(CredentialsError):
    def __init__(self, message: str = "invalid client secret") -> None:
        super().__init__(message)


class UserNotFoundError(NotFoundError):
    def __init__(self, username: str) -> None:
        NotFoundError.__init__(self, "User", username)


class InvalidPasswordError(CredentialsError):
    def __init__(self, message: str = "invalid password") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Grant errors
# --------------------------------------------------------------------------- #


class UnsupportedGrantTypeError(ServiceError):
    """Raised when no strategy handles the requested grant type."""

    def __init__(self, grant_type: str) -> None:
        super().__init__(f"grant type is not supported: {grant_type!r}")
        self.grant_type = grant_type


class UnauthorizedGrantTypeError(ServiceError):
    """Raised when a client requests a grant type it is not registered for."""

    def __init__(self, client_id: str, grant_type: str) -> None:
        super().__init__(f"client {client_id!r} is not authorized for grant type {grant_type!r}")
        self.client_id = client_id
        self.grant_type = grant_type


class InvalidCredentialRequestError(InvalidRequestError):
    def __init__(self, message: str = "invalid username, password") -> None:
        super().__init__(message)


class InvalidTokenRequestError(InvalidRequestError):
    def __init__(self, message: str = "invalid token request") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Token errors
# --------------------------------------------------------------------------- #


class TokenNotFoundError(NotFoundError):
    def __init__(self, value: str) -> None:
        NotFoundError.__init__(self, "Token", value)

    def __str__(self) -> str:  # pragma: no cover
        # Never echo the token value back.
        return "token not found"


class ExpiredTokenError(ServiceError):
    def __init__(self, message: str = "token is expired") -> None:
        super().__init__(message)


class EnhancementError(ServiceError):
    """Encode/decode failure at the token enhancer boundary."""


class InsufficientAuthorityError(ServiceError):
    """Raised when a user lacks the authority a resource requires."""

    def __init__(self, authority: str) -> None:
        super().__init__(f"missing authority: {authority}")
        self.authority = authority


# --------------------------------------------------------------------------- #
# Store errors
# --------------------------------------------------------------------------- #


class BindingLockError(ServiceError):
    """Raised when the per-binding lock cannot be taken or was lost mid-operation."""

    def __init__(self, binding: str, message: str = "binding lock unavailable") -> None:
        super().__init__(message)
        self.binding = binding
