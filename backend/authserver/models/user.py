"""Resource owner record verified by the password grant."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from werkzeug.security import check_password_hash, generate_password_hash


@dataclass(frozen=True, slots=True)
class UserDetails:
    """
    Authenticated user identity.

    Fields
    ------
    username : str
        Login name. Unique per directory.
    password_hash : str
        Salted hash of the password (write-only via :meth:`create`).
        Empty on snapshots read back from stores or tokens.
    user_id : int
        Numeric identifier.
    authorities : frozenset[str]
        Coarse permission labels checked by resource endpoints.
    """

    username: str
    password_hash: str
    user_id: int
    authorities: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.authorities, frozenset):
            object.__setattr__(self, "authorities", frozenset(self.authorities))

    # -------------------- Password API --------------------
    @classmethod
    def create(
        cls,
        username: str,
        password: str,
        *,
        user_id: int,
        authorities: Iterable[str] = (),
    ) -> UserDetails:
        """
        Build a user record from a raw password.

        :param username: Login name.
        :param password: Plain text password, hashed before storage.
        :param user_id: Numeric identifier.
        :param authorities: Permission labels.
        :returns: New user record.
        :rtype: UserDetails
        """
        return cls(
            username=username,
            password_hash=generate_password_hash(password),
            user_id=int(user_id),
            authorities=frozenset(authorities),
        )

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :returns: ``True`` if the password matches.
        :rtype: bool
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    def has_authority(self, authority: str) -> bool:
        return authority in self.authorities

    def without_password(self) -> UserDetails:
        """Return a copy safe to persist or embed in a token."""
        return UserDetails(
            username=self.username,
            password_hash="",
            user_id=self.user_id,
            authorities=self.authorities,
        )
