from __future__ import annotations

import threading
import weakref
from contextlib import AbstractContextManager
from typing import Protocol

from authserver.models.token import OAuth2Details, OAuth2Token
from authserver.services._shared.errors import TokenNotFoundError


class TokenStore(Protocol):
    """
    Bookkeeping of access/refresh tokens and the bindings they belong to.

    Individual operations are atomic; sequences of them are not. Callers that
    read, decide and write for a binding MUST hold :meth:`binding_lock`
    across the whole sequence.
    """

    def binding_lock(self, details: OAuth2Details) -> AbstractContextManager[object]:
        """
        Return a mutual-exclusion scope dedicated to ``details``.

        :raises BindingLockError: When a shared store cannot grant the lock.
        """
        ...

    def store_access_token(self, token: OAuth2Token, details: OAuth2Details) -> None:
        """Upsert ``token`` and point the binding's reverse index at it."""

    def read_access_token(self, value: str) -> OAuth2Token:
        """:raises TokenNotFoundError: When ``value`` is unknown."""
        ...

    def read_details_for_access_token(self, value: str) -> OAuth2Details:
        """:raises TokenNotFoundError: When ``value`` is unknown."""
        ...

    def get_access_token(self, details: OAuth2Details) -> OAuth2Token:
        """
        Reverse lookup: the current access token of a binding.

        :raises TokenNotFoundError: When the binding has no access token.
        """
        ...

    def remove_access_token(self, value: str) -> None:
        """Drop forward and reverse entries; no-op when absent."""

    def store_refresh_token(self, token: OAuth2Token, details: OAuth2Details) -> None: ...

    def read_refresh_token(self, value: str) -> OAuth2Token: ...

    def read_details_for_refresh_token(self, value: str) -> OAuth2Details: ...

    def remove_refresh_token(self, value: str) -> None: ...


class _BindingLocks:
    """
    Lazily created ``threading.Lock`` per binding.

    Entries are weak: a lock lives only while some caller holds a reference
    to it, so idle bindings do not accumulate.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[OAuth2Details, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._guard = threading.Lock()

    def get(self, details: OAuth2Details) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(details)
            if lock is None:
                lock = threading.Lock()
                self._locks[details] = lock
            return lock

    def __len__(self) -> int:
        return len(self._locks)


class InMemoryTokenStore(TokenStore):
    """
    Process-local token store backed by dictionaries.

    .. note::
       One coarse lock keeps each operation atomic; per-binding locks from
       :meth:`binding_lock` serialize the service's get-or-create sequences.
    """

    def __init__(self) -> None:
        self._access: dict[str, OAuth2Token] = {}
        self._access_details: dict[str, OAuth2Details] = {}
        self._access_by_binding: dict[OAuth2Details, str] = {}
        self._refresh: dict[str, OAuth2Token] = {}
        self._refresh_details: dict[str, OAuth2Details] = {}
        self._lock = threading.Lock()
        self._binding_locks = _BindingLocks()

    # -------------------------- API ----------------------------

    def binding_lock(self, details: OAuth2Details) -> threading.Lock:
        return self._binding_locks.get(details)

    def store_access_token(self, token: OAuth2Token, details: OAuth2Details) -> None:
        with self._lock:
            self._access[token.value] = token
            self._access_details[token.value] = details
            self._access_by_binding[details] = token.value

    def read_access_token(self, value: str) -> OAuth2Token:
        token = self._access.get(value)
        if token is None:
            raise TokenNotFoundError(value)
        return token

    def read_details_for_access_token(self, value: str) -> OAuth2Details:
        details = self._access_details.get(value)
        if details is None:
            raise TokenNotFoundError(value)
        return details

    def get_access_token(self, details: OAuth2Details) -> OAuth2Token:
        with self._lock:
            value = self._access_by_binding.get(details)
            token = self._access.get(value) if value is not None else None
        if token is None:
            raise TokenNotFoundError(details.key)
        return token

    def remove_access_token(self, value: str) -> None:
        with self._lock:
            self._access.pop(value, None)
            details = self._access_details.pop(value, None)
            # only unlink the binding if it still points at this value
            if details is not None and self._access_by_binding.get(details) == value:
                del self._access_by_binding[details]

    def store_refresh_token(self, token: OAuth2Token, details: OAuth2Details) -> None:
        with self._lock:
            self._refresh[token.value] = token
            self._refresh_details[token.value] = details

    def read_refresh_token(self, value: str) -> OAuth2Token:
        token = self._refresh.get(value)
        if token is None:
            raise TokenNotFoundError(value)
        return token

    def read_details_for_refresh_token(self, value: str) -> OAuth2Details:
        details = self._refresh_details.get(value)
        if details is None:
            raise TokenNotFoundError(value)
        return details

    def remove_refresh_token(self, value: str) -> None:
        with self._lock:
            self._refresh.pop(value, None)
            self._refresh_details.pop(value, None)
