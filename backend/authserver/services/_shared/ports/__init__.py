"""
authserver.services._shared.ports
=================================

Collection of *ports* (hexagonal interfaces) that define the contracts the
token lifecycle engine depends on.

Modules
-------
- :mod:`token_store`:
    Defines :class:`~.TokenStore` and the reference :class:`~.InMemoryTokenStore`.

- :mod:`token_enhancer`:
    Defines :class:`~.TokenEnhancer`, the pluggable encode/decode of token values.

- :mod:`client_details` / :mod:`user_details`:
    Client and user directories (lookup + credential verification), with
    in-memory adapters.

Design Notes
------------
Concrete adapters for external systems (Redis, JWT) live under
``authserver.infra`` and implement these interfaces.
"""

from __future__ import annotations

from .client_details import ClientDetailsService, InMemoryClientDetailsService
from .token_enhancer import TokenEnhancer
from .token_store import InMemoryTokenStore, TokenStore
from .user_details import InMemoryUserDetailsService, UserDetailsService

__all__ = [
    "ClientDetailsService",
    "InMemoryClientDetailsService",
    "InMemoryTokenStore",
    "InMemoryUserDetailsService",
    "TokenEnhancer",
    "TokenStore",
    "UserDetailsService",
]
