# authserver/services/grants/service.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Protocol

from authserver.core import metrics
from authserver.models.client import ClientDetails
from authserver.models.token import OAuth2Details, OAuth2Token
from authserver.services._shared.base import BaseService, ServiceContext
from authserver.services._shared.errors import (
    InvalidCredentialRequestError,
    InvalidTokenRequestError,
    UnauthorizedGrantTypeError,
    UnsupportedGrantTypeError,
)
from authserver.services._shared.ports.user_details import UserDetailsService
from authserver.services.tokens.service import TokenService

PASSWORD_GRANT_TYPE = "password"
REFRESH_TOKEN_GRANT_TYPE = "refresh_token"

# Credential carrier field names
USERNAME_FIELD = "username"
PASSWORD_FIELD = "password"
REFRESH_TOKEN_FIELD = "refresh_token"

CredentialCarrier = Mapping[str, str]


class TokenGranter(Protocol):
    """Exchange credentials for an access token for one (or more) grant types."""

    def grant(
        self, grant_type: str, client: ClientDetails, carrier: CredentialCarrier
    ) -> OAuth2Token: ...


class ComposeTokenGranter(BaseService):
    """
    Dispatch a grant request to the strategy registered for its grant type.

    The registry is frozen at construction; new grant types are added by
    registering another strategy, never by branching here.
    """

    def __init__(
        self,
        granters: Mapping[str, TokenGranter],
        *,
        enforce_client_grant_types: bool = True,
        ctx: ServiceContext | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        :param granters: Mapping of grant-type name to strategy.
        :param enforce_client_grant_types: Reject grant types missing from the
            client's ``authorized_grant_types`` before delegating.
        """
        super().__init__(ctx=ctx, logger=logger)
        self.granters: Mapping[str, TokenGranter] = MappingProxyType(dict(granters))
        self.enforce_client_grant_types = enforce_client_grant_types

    def grant(self, grant_type: str, client: ClientDetails, carrier: CredentialCarrier) -> OAuth2Token:
        """
        :raises UnsupportedGrantTypeError: No strategy registered for ``grant_type``.
        :raises UnauthorizedGrantTypeError: Client not registered for ``grant_type``.
        """
        granter = self.granters.get(grant_type)
        if granter is None:
            self.log.warning(
                "grant.unsupported",
                extra={"grant_type": grant_type, "client_id": client.client_id},
            )
            metrics.grants_rejected_total.labels(reason="unsupported_grant_type").inc()
            raise UnsupportedGrantTypeError(grant_type)
        if self.enforce_client_grant_types and not client.supports_grant_type(grant_type):
            self.log.warning(
                "grant.unauthorized_client",
                extra={"grant_type": grant_type, "client_id": client.client_id},
            )
            metrics.grants_rejected_total.labels(reason="unauthorized_client").inc()
            raise UnauthorizedGrantTypeError(client.client_id, grant_type)
        return granter.grant(grant_type, client, carrier)


class PasswordTokenGranter(BaseService):
    """Resource owner password credentials grant."""

    def __init__(
        self,
        *,
        user_details_service: UserDetailsService,
        token_service: TokenService,
        supported_grant_type: str = PASSWORD_GRANT_TYPE,
        ctx: ServiceContext | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(ctx=ctx, logger=logger)
        self.users = user_details_service
        self.tokens = token_service
        self.supported_grant_type = supported_grant_type

    def grant(self, grant_type: str, client: ClientDetails, carrier: CredentialCarrier) -> OAuth2Token:
        """
        Verify username/password and issue a token for (client, user).

        :raises InvalidCredentialRequestError: Username or password missing.
        :raises UserNotFoundError: Unknown username.
        :raises InvalidPasswordError: Password does not verify.
        """
        if grant_type != self.supported_grant_type:
            raise UnsupportedGrantTypeError(grant_type)

        username = carrier.get(USERNAME_FIELD) or ""
        password = carrier.get(PASSWORD_FIELD) or ""
        if not username or not password:
            raise InvalidCredentialRequestError()

        user = self.users.get_user_details_by_username(username, password)
        return self.tokens.create_access_token(OAuth2Details(client=client, user=user))


class RefreshTokenGranter(BaseService):
    """Refresh token grant: rotate a refresh token into a new pair."""

    def __init__(
        self,
        *,
        token_service: TokenService,
        supported_grant_type: str = REFRESH_TOKEN_GRANT_TYPE,
        ctx: ServiceContext | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(ctx=ctx, logger=logger)
        self.tokens = token_service
        self.supported_grant_type = supported_grant_type

    def grant(self, grant_type: str, client: ClientDetails, carrier: CredentialCarrier) -> OAuth2Token:
        """
        :raises InvalidTokenRequestError: No ``refresh_token`` in the carrier.
        """
        if grant_type != self.supported_grant_type:
            raise UnsupportedGrantTypeError(grant_type)

        refresh_value = carrier.get(REFRESH_TOKEN_FIELD)
        if not refresh_value:
            raise InvalidTokenRequestError()
        return self.tokens.refresh_access_token(refresh_value, client_id=client.client_id)


def build_token_granter(
    *,
    user_details_service: UserDetailsService,
    token_service: TokenService,
    enforce_client_grant_types: bool = True,
    logger: logging.Logger | None = None,
) -> ComposeTokenGranter:
    """Assemble the dispatcher with the password and refresh strategies."""
    return ComposeTokenGranter(
        {
            PASSWORD_GRANT_TYPE: PasswordTokenGranter(
                user_details_service=user_details_service,
                token_service=token_service,
                logger=logger,
            ),
            REFRESH_TOKEN_GRANT_TYPE: RefreshTokenGranter(
                token_service=token_service,
                logger=logger,
            ),
        },
        enforce_client_grant_types=enforce_client_grant_types,
        logger=logger,
    )
