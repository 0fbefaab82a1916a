from __future__ import annotations

from typing import Protocol

from authserver.models.token import OAuth2Details, OAuth2Token


class TokenEnhancer(Protocol):
    """
    Port turning a minted token into its distributable representation.

    ``enhance`` must be deterministic for a given input and ``extract`` must
    invert it for any value ``enhance`` produced. Both raise
    :class:`~authserver.services._shared.errors.EnhancementError` on failure.
    """

    def enhance(self, token: OAuth2Token, details: OAuth2Details) -> OAuth2Token: ...

    def extract(self, value: str) -> tuple[OAuth2Token, OAuth2Details]: ...
