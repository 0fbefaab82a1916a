"""Client application record for the authorization server."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ClientDetails:
    """
    Registered client application.

    Fields
    ------
    client_id : str
        Public client identifier.
    client_secret : str
        Shared secret presented with HTTP Basic authentication.
    access_token_validity_seconds : int
        Lifetime of access tokens minted for this client.
    refresh_token_validity_seconds : int
        Lifetime of refresh tokens minted for this client.
    registered_redirect_uri : str | None
        Redirect target for authorization-code flows (unused by the
        password and refresh grants).
    authorized_grant_types : frozenset[str]
        Grant types this client may request.
    """

    client_id: str
    client_secret: str
    access_token_validity_seconds: int
    refresh_token_validity_seconds: int
    registered_redirect_uri: str | None = None
    authorized_grant_types: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.authorized_grant_types, frozenset):
            # Accept any iterable from callers but keep the record hashable.
            object.__setattr__(
                self, "authorized_grant_types", frozenset(self.authorized_grant_types)
            )

    def supports_grant_type(self, grant_type: str) -> bool:
        """Return ``True`` when ``grant_type`` is authorized for this client."""
        return grant_type in self.authorized_grant_types

    def without_secret(self) -> ClientDetails:
        """Return a copy safe to persist or embed in a token."""
        return ClientDetails(
            client_id=self.client_id,
            client_secret="",
            access_token_validity_seconds=self.access_token_validity_seconds,
            refresh_token_validity_seconds=self.refresh_token_validity_seconds,
            registered_redirect_uri=self.registered_redirect_uri,
            authorized_grant_types=self.authorized_grant_types,
        )

    @classmethod
    def create(
        cls,
        client_id: str,
        client_secret: str,
        *,
        access_token_validity_seconds: int,
        refresh_token_validity_seconds: int,
        registered_redirect_uri: str | None = None,
        authorized_grant_types: Iterable[str] = (),
    ) -> ClientDetails:
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            access_token_validity_seconds=int(access_token_validity_seconds),
            refresh_token_validity_seconds=int(refresh_token_validity_seconds),
            registered_redirect_uri=registered_redirect_uri,
            authorized_grant_types=frozenset(authorized_grant_types),
        )
