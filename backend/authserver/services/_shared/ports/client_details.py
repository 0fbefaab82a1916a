from __future__ import annotations

import hmac
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Protocol

from authserver.models.client import ClientDetails
from authserver.services._shared.errors import ClientNotFoundError, InvalidClientSecretError


class ClientDetailsService(Protocol):
    """Look up a client and verify its secret. Side-effect free."""

    def get_client_details_by_client_id(self, client_id: str, client_secret: str) -> ClientDetails:
        """
        :raises ClientNotFoundError: When the client id is unknown.
        :raises InvalidClientSecretError: When the secret does not match.
        """
        ...


class InMemoryClientDetailsService(ClientDetailsService):
    """Client directory built from a fixed list of records."""

    def __init__(self, clients: Iterable[ClientDetails] = ()) -> None:
        self._clients: Mapping[str, ClientDetails] = MappingProxyType(
            {c.client_id: c for c in clients}
        )

    def get_client_details_by_client_id(self, client_id: str, client_secret: str) -> ClientDetails:
        client = self._clients.get(client_id)
        if client is None:
            raise ClientNotFoundError(client_id)
        if not hmac.compare_digest(client.client_secret.encode(), client_secret.encode()):
            raise InvalidClientSecretError()
        return client

    def list_clients(self) -> list[ClientDetails]:
        return sorted(self._clients.values(), key=lambda c: c.client_id)
