from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Protocol

from authserver.models.user import UserDetails
from authserver.services._shared.errors import InvalidPasswordError, UserNotFoundError


class UserDetailsService(Protocol):
    """Look up a user and verify its password. Side-effect free."""

    def get_user_details_by_username(self, username: str, password: str) -> UserDetails:
        """
        :raises UserNotFoundError: When the username is unknown.
        :raises InvalidPasswordError: When the password does not verify.
        """
        ...


class InMemoryUserDetailsService(UserDetailsService):
    """User directory built from a fixed list of records (hashed passwords)."""

    def __init__(self, users: Iterable[UserDetails] = ()) -> None:
        self._users: Mapping[str, UserDetails] = MappingProxyType({u.username: u for u in users})

    def get_user_details_by_username(self, username: str, password: str) -> UserDetails:
        user = self._users.get(username)
        if user is None:
            raise UserNotFoundError(username)
        if not user.verify_password(password):
            raise InvalidPasswordError()
        return user
