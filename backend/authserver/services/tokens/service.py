# authserver/services/tokens/service.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from uuid import uuid4

from authserver.core import metrics
from authserver.models.token import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    OAuth2Details,
    OAuth2Token,
)
from authserver.services._shared.base import BaseService, ServiceContext
from authserver.services._shared.errors import ExpiredTokenError, TokenNotFoundError
from authserver.services._shared.ports.token_enhancer import TokenEnhancer
from authserver.services._shared.ports.token_store import TokenStore


class TokenService(BaseService):
    """
    Token lifecycle service (create / reuse / expire / refresh / introspect).

    Every read-decide-write sequence for a binding runs inside the store's
    :meth:`~authserver.services._shared.ports.TokenStore.binding_lock`, so at
    most one live access token exists per (client, user) pair even under
    concurrent callers.

    State of a token value::

        absent -> live -> (reused) -> expired -> absent   (cleanup on create)
        live -> rotated away -> absent                    (refresh)
    """

    def __init__(
        self,
        *,
        token_store: TokenStore,
        token_enhancer: TokenEnhancer | None = None,
        ctx: ServiceContext | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_store: Bookkeeping of tokens and bindings.
        :param token_enhancer: Optional transform to the distributable form.
            When ``None`` the raw minted token is handed out.
        """
        super().__init__(ctx=ctx, logger=logger)
        self.store = token_store
        self.enhancer = token_enhancer

    # ------------------------------------------------------------------ #
    # Create (get-or-create)
    # ------------------------------------------------------------------ #

    def create_access_token(self, details: OAuth2Details) -> OAuth2Token:
        """
        Return the live access token of ``details`` or mint a new pair.

        :param details: Identity binding the token is scoped to.
        :returns: Access token carrying its paired refresh token.
        :raises EnhancementError: If the enhancer fails to encode a new token.
        """
        with self.store.binding_lock(details):
            now = self.now_utc()
            refresh_token: OAuth2Token | None = None

            existing = self._find_access_token(details)
            if existing is not None:
                if not existing.is_expired(now):
                    # reuse path: re-store to refresh index bookkeeping
                    self.store.store_access_token(existing, details)
                    self.log.debug("token.reused", extra={"binding": details.key})
                    metrics.tokens_reused_total.inc()
                    return existing

                self.store.remove_access_token(existing.value)
                if existing.refresh_token is not None:
                    refresh_token = existing.refresh_token
                    self.store.remove_refresh_token(refresh_token.value)
                self.log.info("token.expired_cleanup", extra={"binding": details.key})

            if refresh_token is None or refresh_token.is_expired(now):
                refresh_token = self._mint_refresh_token(details, now)

            access_token = self._mint_access_token(refresh_token, details, now)
            self.store.store_access_token(access_token, details)
            self.store.store_refresh_token(refresh_token, details)
            self.log.info("token.minted", extra={"binding": details.key})
            metrics.tokens_minted_total.inc()
            return access_token

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh_access_token(self, refresh_value: str, *, client_id: str | None = None) -> OAuth2Token:
        """
        Consume a refresh token and emit a new access/refresh pair.

        Security
        --------
        - A refresh token is single-use: it is removed before the new pair
          is minted (rotation).
        - An expired refresh token is rejected without touching the store.
        - When ``client_id`` is given, a refresh token issued to another
          client is reported as not found.

        :param refresh_value: Refresh token value presented by the caller.
        :param client_id: Authenticated client requesting the refresh.
        :returns: New access token.
        :raises TokenNotFoundError: Unknown or already consumed refresh token.
        :raises ExpiredTokenError: Refresh token past its expiry.
        """
        self._read_live_refresh_token(refresh_value)
        details = self.store.read_details_for_refresh_token(refresh_value)
        if client_id is not None and details.client.client_id != client_id:
            self.log.warning("token.refresh_client_mismatch", extra={"client_id": client_id})
            raise TokenNotFoundError(refresh_value)

        with self.store.binding_lock(details):
            # a concurrent rotation may have consumed it while we waited
            now = self._read_live_refresh_token(refresh_value)

            existing = self._find_access_token(details)
            if existing is not None:
                self.store.remove_access_token(existing.value)
            self.store.remove_refresh_token(refresh_value)

            refresh_token = self._mint_refresh_token(details, now)
            access_token = self._mint_access_token(refresh_token, details, now)
            self.store.store_access_token(access_token, details)
            self.store.store_refresh_token(refresh_token, details)
            self.log.info("token.rotated", extra={"binding": details.key})
            metrics.tokens_rotated_total.inc()
            return access_token

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def get_oauth2_details_by_access_token(self, value: str) -> OAuth2Details:
        """
        Resolve the binding of a live access token.

        Pure read: an expired token is reported, not cleaned up.

        :raises TokenNotFoundError: Unknown token value.
        :raises ExpiredTokenError: Token present but expired.
        """
        token = self.store.read_access_token(value)
        if token.is_expired(self.now_utc()):
            raise ExpiredTokenError()
        return self.store.read_details_for_access_token(value)

    def get_access_token(self, details: OAuth2Details) -> OAuth2Token:
        return self.store.get_access_token(details)

    def read_access_token(self, value: str) -> OAuth2Token:
        return self.store.read_access_token(value)

    # ------------------------------------------------------------------ #
    # Minting helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def new_token_value() -> str:
        """Generate a new random, unique token value."""
        return str(uuid4())

    @staticmethod
    def _expiry(now: datetime, validity_seconds: int) -> datetime | None:
        # non-positive validity means the token never expires
        if validity_seconds <= 0:
            return None
        return now + timedelta(seconds=validity_seconds)

    def _mint_refresh_token(self, details: OAuth2Details, now: datetime) -> OAuth2Token:
        token = OAuth2Token(
            value=self.new_token_value(),
            token_type=REFRESH_TOKEN_TYPE,
            expires_at=self._expiry(now, details.client.refresh_token_validity_seconds),
        )
        return self._enhance(token, details)

    def _mint_access_token(
        self, refresh_token: OAuth2Token, details: OAuth2Details, now: datetime
    ) -> OAuth2Token:
        token = OAuth2Token(
            value=self.new_token_value(),
            token_type=ACCESS_TOKEN_TYPE,
            expires_at=self._expiry(now, details.client.access_token_validity_seconds),
            refresh_token=refresh_token,
        )
        return self._enhance(token, details)

    def _enhance(self, token: OAuth2Token, details: OAuth2Details) -> OAuth2Token:
        if self.enhancer is None:
            return token
        return self.enhancer.enhance(token, details)

    def _find_access_token(self, details: OAuth2Details) -> OAuth2Token | None:
        try:
            return self.store.get_access_token(details)
        except TokenNotFoundError:
            return None

    def _read_live_refresh_token(self, refresh_value: str) -> datetime:
        """Check ``refresh_value`` is stored and unexpired; return the check time."""
        now = self.now_utc()
        refresh_token = self.store.read_refresh_token(refresh_value)
        if refresh_token.is_expired(now):
            raise ExpiredTokenError()
        return now
