# authserver/infra/redis/redis_token_store.py
from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import redis  # type: ignore[import-untyped]
from redis.exceptions import LockError  # type: ignore[import-untyped]

from authserver.models.token import REFRESH_TOKEN_TYPE, OAuth2Details, OAuth2Token
from authserver.schemas.records import OAuth2DetailsSchema
from authserver.services._shared.errors import BindingLockError, TokenNotFoundError
from authserver.services._shared.ports import TokenStore

_details_schema = OAuth2DetailsSchema()


def _s(v: Any, default: str = "") -> str:
    """Normalize a Redis reply (bytes or str) to ``str``."""
    if v is None:
        return default
    return v.decode() if isinstance(v, bytes | bytearray) else str(v)


@dataclass(slots=True)
class RedisTokenStore(TokenStore):
    """
    Redis-backed token store.

    Layout
    ------
    - ``at:{value}``   hash: access token fields + binding snapshot.
    - ``at:b:{key}``   string: current access token value of a binding.
    - ``rt:{value}``   hash: refresh token fields + binding snapshot.
    - ``lock:b:{key}`` :class:`redis.lock.Lock` guarding a binding.

    Keys outlive the token expiry by ``expired_retention_seconds`` so an
    expired token is still reported as expired (not missing) for a while.
    Binding snapshots never contain the client secret or password hash.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis
    expired_retention_seconds: int = 3600
    non_expiring_ttl_seconds: int | None = None
    lock_timeout_seconds: float = 10.0
    lock_blocking_timeout_seconds: float = 5.0

    # -------------------- helpers --------------------

    @staticmethod
    def _k_at(value: str) -> str:
        return f"at:{value}"

    @staticmethod
    def _k_binding(details: OAuth2Details) -> str:
        return f"at:b:{details.key}"

    @staticmethod
    def _k_rt(value: str) -> str:
        return f"rt:{value}"

    @staticmethod
    def _k_lock(details: OAuth2Details) -> str:
        return f"lock:b:{details.key}"

    @staticmethod
    def _dt(dt: datetime | None) -> str:
        return dt.isoformat() if dt is not None else ""

    @staticmethod
    def _parse_dt(raw: str) -> datetime | None:
        if not raw:
            return None
        dt = datetime.fromisoformat(raw)
        return dt if dt.tzinfo else dt.replace(tzinfo=UTC)

    def _ttl(self, expires_at: datetime | None) -> int | None:
        if expires_at is None:
            return self.non_expiring_ttl_seconds
        remaining = int(expires_at.timestamp() - datetime.now(UTC).timestamp())
        return max(1, remaining + self.expired_retention_seconds)

    @staticmethod
    def _dump_details(details: OAuth2Details) -> str:
        return json.dumps(_details_schema.dump(details), sort_keys=True)

    @staticmethod
    def _load_details(raw: str) -> OAuth2Details:
        return _details_schema.load(json.loads(raw))

    def _hgetall(self, key: str) -> dict[str, str]:
        return {_s(k): _s(v) for k, v in self.r.hgetall(key).items()}

    # -------------------- API ------------------------

    @contextmanager
    def binding_lock(self, details: OAuth2Details) -> Iterator[None]:
        """
        Hold the distributed lock of ``details`` for the ``with`` body.

        :raises BindingLockError: The lock was not acquired within
            ``lock_blocking_timeout_seconds``, or it expired before release
            (``LockNotOwnedError`` is a ``LockError``).
        """
        lock = self.r.lock(
            self._k_lock(details),
            timeout=self.lock_timeout_seconds,
            blocking_timeout=self.lock_blocking_timeout_seconds,
        )
        try:
            acquired = lock.acquire()
        except LockError as exc:
            raise BindingLockError(details.key) from exc
        if not acquired:
            raise BindingLockError(details.key)
        try:
            yield
        finally:
            try:
                lock.release()
            except LockError as exc:
                raise BindingLockError(details.key, "binding lock expired before release") from exc

    def store_access_token(self, token: OAuth2Token, details: OAuth2Details) -> None:
        key = self._k_at(token.value)
        refresh = token.refresh_token
        ttl = self._ttl(token.expires_at)

        pipe = self.r.pipeline(transaction=True)
        pipe.delete(key)
        pipe.hset(
            key,
            mapping={
                "type": token.token_type,
                "expires_at": self._dt(token.expires_at),
                "refresh_value": refresh.value if refresh else "",
                "refresh_expires_at": self._dt(refresh.expires_at) if refresh else "",
                "details": self._dump_details(details),
            },
        )
        pipe.set(self._k_binding(details), token.value)
        if ttl is not None:
            pipe.expire(key, ttl)
            pipe.expire(self._k_binding(details), ttl)
        pipe.execute()

    def read_access_token(self, value: str) -> OAuth2Token:
        h = self._hgetall(self._k_at(value))
        if not h:
            raise TokenNotFoundError(value)
        refresh_token = None
        if h.get("refresh_value"):
            refresh_token = OAuth2Token(
                value=h["refresh_value"],
                token_type=REFRESH_TOKEN_TYPE,
                expires_at=self._parse_dt(h.get("refresh_expires_at", "")),
            )
        return OAuth2Token(
            value=value,
            token_type=h.get("type", ""),
            expires_at=self._parse_dt(h.get("expires_at", "")),
            refresh_token=refresh_token,
        )

    def read_details_for_access_token(self, value: str) -> OAuth2Details:
        raw = self.r.hget(self._k_at(value), "details")
        if not raw:
            raise TokenNotFoundError(value)
        return self._load_details(_s(raw))

    def get_access_token(self, details: OAuth2Details) -> OAuth2Token:
        value = self.r.get(self._k_binding(details))
        if not value:
            raise TokenNotFoundError(details.key)
        return self.read_access_token(_s(value))

    def remove_access_token(self, value: str) -> None:
        key = self._k_at(value)
        raw = self.r.hget(key, "details")
        if not raw:
            # No token -> nothing to remove (drop a stale hash, if any)
            self.r.delete(key)
            return
        k_binding = self._k_binding(self._load_details(_s(raw)))

        # Optimistic locking: only unlink the binding if it still points here
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(k_binding)
                    current = _s(p.get(k_binding))
                    p.multi()
                    p.delete(key)
                    if current == value:
                        p.delete(k_binding)
                    p.execute()
                return
            except redis.WatchError:
                # Concurrent modification detected; retry loop
                continue

    def store_refresh_token(self, token: OAuth2Token, details: OAuth2Details) -> None:
        key = self._k_rt(token.value)
        ttl = self._ttl(token.expires_at)

        pipe = self.r.pipeline(transaction=True)
        pipe.delete(key)
        pipe.hset(
            key,
            mapping={
                "type": token.token_type,
                "expires_at": self._dt(token.expires_at),
                "details": self._dump_details(details),
            },
        )
        if ttl is not None:
            pipe.expire(key, ttl)
        pipe.execute()

    def read_refresh_token(self, value: str) -> OAuth2Token:
        h = self._hgetall(self._k_rt(value))
        if not h:
            raise TokenNotFoundError(value)
        return OAuth2Token(
            value=value,
            token_type=h.get("type", REFRESH_TOKEN_TYPE),
            expires_at=self._parse_dt(h.get("expires_at", "")),
        )

    def read_details_for_refresh_token(self, value: str) -> OAuth2Details:
        raw = self.r.hget(self._k_rt(value), "details")
        if not raw:
            raise TokenNotFoundError(value)
        return self._load_details(_s(raw))

    def remove_refresh_token(self, value: str) -> None:
        self.r.delete(self._k_rt(value))
