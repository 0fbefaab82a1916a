"""Token value types and the identity binding they protect."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime

from .client import ClientDetails
from .user import UserDetails

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def utcnow() -> datetime:
    """Return the current timezone-aware UTC time."""
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class OAuth2Token:
    """
    Bearer token minted by the token service.

    Fields
    ------
    value : str
        Opaque, unique token value (or its enhanced representation).
    token_type : str
        ``"access"`` or ``"refresh"``.
    expires_at : datetime | None
        Absolute expiry (UTC). ``None`` means the token never expires.
    refresh_token : OAuth2Token | None
        Paired refresh token; only set on access tokens.
    """

    value: str
    token_type: str = ACCESS_TOKEN_TYPE
    expires_at: datetime | None = None
    refresh_token: OAuth2Token | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """
        Return ``True`` once ``now`` is no longer strictly before the expiry.

        :param now: Reference time, defaults to the current UTC time.
        :rtype: bool
        """
        if self.expires_at is None:
            return False
        return not (now or utcnow()) < self.expires_at

    def expires_in(self, now: datetime | None = None) -> int | None:
        """Seconds left before expiry (never negative), ``None`` if non-expiring."""
        if self.expires_at is None:
            return None
        remaining = (self.expires_at - (now or utcnow())).total_seconds()
        return max(0, math.ceil(remaining))


@dataclass(frozen=True, slots=True, eq=False)
class OAuth2Details:
    """
    Identity binding: the (client, user) pair a token is scoped to.

    Two bindings are equal iff the client id and the username match, so
    snapshots read back from a store compare equal to the live records.
    """

    client: ClientDetails
    user: UserDetails

    @property
    def key(self) -> str:
        """Stable string form used by external stores."""
        return f"{self.client.client_id}:{self.user.username}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OAuth2Details):
            return NotImplemented
        return (
            self.client.client_id == other.client.client_id
            and self.user.username == other.user.username
        )

    def __hash__(self) -> int:
        return hash((self.client.client_id, self.user.username))

    def public(self) -> OAuth2Details:
        """Return a copy without client secret or password hash."""
        return OAuth2Details(client=self.client.without_secret(), user=self.user.without_password())
