"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`authserver.services` without knowing internal
structure.

Re-exports
----------
- Base primitives (from ``authserver.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Token service (from ``authserver.services.tokens``)
    * :class:`TokenService`

- Grant strategies (from ``authserver.services.grants``)
    * :class:`ComposeTokenGranter`, :class:`PasswordTokenGranter`,
      :class:`RefreshTokenGranter`, :func:`build_token_granter`

- Resource service (from ``authserver.services.resources``)
    * :class:`CommonService`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext

# Grant dispatch + strategies
from .grants.service import (
    ComposeTokenGranter,
    PasswordTokenGranter,
    RefreshTokenGranter,
    TokenGranter,
    build_token_granter,
)

# Protected resources
from .resources.service import CommonService

# Token lifecycle
from .tokens.service import TokenService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Tokens
    "TokenService",
    # Grants
    "TokenGranter",
    "ComposeTokenGranter",
    "PasswordTokenGranter",
    "RefreshTokenGranter",
    "build_token_granter",
    # Resources
    "CommonService",
]
