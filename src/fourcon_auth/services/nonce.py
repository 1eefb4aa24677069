"""Single-use authentication nonces.

The authority mints random tokens with an absolute expiry and consumes each
token at most once. Consumption removes the token before the expiry check,
so an expired token can never be retried either.
"""

from __future__ import annotations

import logging
import secrets
import time
from collections.abc import Callable
from threading import Lock
from typing import Any, Final, Protocol

import redis

from fourcon_auth.core.settings import settings

logger = logging.getLogger(__name__)

NONCE_NUM_BYTES: Final[int] = 16  # 32 hex characters
REDIS_KEY_PREFIX: Final[str] = "nonce:"

Clock = Callable[[], int]


def now_ms() -> int:
    """Return the current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class NonceStore(Protocol):
    """Storage for issued nonces keyed by token."""

    def put(self, token: str, expires_at_ms: int) -> None:
        """Record `token` with its absolute expiry."""
        ...

    def pop(self, token: str) -> int | None:
        """Atomically remove `token`, returning its expiry if it was present."""
        ...

    def __len__(self) -> int: ...


class InMemoryNonceStore:
    """Process-local nonce store guarded by a lock.

    The store holds at most `max_entries` tokens. When full, expired entries
    are swept first and the oldest live entries are evicted after that.
    """

    def __init__(self, max_entries: int | None = None, clock: Clock = now_ms) -> None:
        self._entries: dict[str, int] = {}
        self._lock = Lock()
        self._max_entries = max_entries or settings.nonce_store_max_entries
        self._clock = clock

    def put(self, token: str, expires_at_ms: int) -> None:
        with self._lock:
            if token not in self._entries and len(self._entries) >= self._max_entries:
                self._make_room()
            self._entries[token] = expires_at_ms

    def pop(self, token: str) -> int | None:
        with self._lock:
            return self._entries.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _make_room(self) -> None:
        # Caller holds the lock.
        now = self._clock()
        expired = [token for token, expiry in self._entries.items() if now > expiry]
        for token in expired:
            del self._entries[token]
        if expired:
            logger.debug("Swept %d expired nonces", len(expired))

        # Dicts keep insertion order, so the first keys are the oldest.
        overflow = len(self._entries) - self._max_entries + 1
        if overflow > 0:
            for token in list(self._entries)[:overflow]:
                del self._entries[token]
            logger.warning("Nonce store full; evicted %d unexpired nonces", overflow)


class RedisNonceStore:
    """Nonce store shared between processes through Redis.

    Keys carry a millisecond TTL so abandoned nonces expire server-side, and
    `pop` uses GETDEL so removal is a single atomic command.
    """

    def __init__(self, client: Any | None = None, clock: Clock = now_ms) -> None:
        self._redis = client if client is not None else redis.from_url(settings.redis_url)
        self._clock = clock

    @staticmethod
    def _key(token: str) -> str:
        return f"{REDIS_KEY_PREFIX}{token}"

    def put(self, token: str, expires_at_ms: int) -> None:
        ttl_ms = max(expires_at_ms - self._clock(), 1)
        self._redis.set(self._key(token), str(expires_at_ms), px=ttl_ms)

    def pop(self, token: str) -> int | None:
        value = self._redis.getdel(self._key(token))
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("Discarding malformed nonce record for key %s", self._key(token))
            return None

    def __len__(self) -> int:
        return sum(1 for _ in self._redis.scan_iter(match=f"{REDIS_KEY_PREFIX}*"))


class NonceAuthority:
    """Issues and consumes single-use, time-bounded nonces."""

    def __init__(
        self,
        store: NonceStore | None = None,
        *,
        ttl_ms: int | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self._store: NonceStore = store if store is not None else InMemoryNonceStore(clock=clock)
        self._ttl_ms = ttl_ms if ttl_ms is not None else settings.nonce_ttl_ms
        self._clock = clock

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    @property
    def store(self) -> NonceStore:
        return self._store

    def issue(self) -> str:
        """Mint a new nonce.

        Returns:
            32 lowercase hex characters drawn from the OS CSPRNG.
        """
        token = secrets.token_hex(NONCE_NUM_BYTES)
        self._store.put(token, self._clock() + self._ttl_ms)
        return token

    def consume(self, token: str) -> bool:
        """Consume `token`, returning True only for a live, never-used nonce.

        The token is removed on every call that finds it, expired or not.
        """
        expires_at = self._store.pop(token)
        if expires_at is None:
            return False
        if self._clock() > expires_at:
            logger.debug("Rejected expired nonce")
            return False
        return True


def build_nonce_store() -> NonceStore:
    """Return the nonce store selected by configuration."""
    if settings.nonce_backend == "redis":
        logger.info("Using Redis nonce store at %s", settings.redis_url)
        return RedisNonceStore()
    return InMemoryNonceStore()


_AUTHORITY: NonceAuthority | None = None
_AUTHORITY_LOCK = Lock()


def get_nonce_authority() -> NonceAuthority:
    """Return the process-wide nonce authority, creating it on first use."""
    global _AUTHORITY
    if _AUTHORITY is None:
        with _AUTHORITY_LOCK:
            if _AUTHORITY is None:
                _AUTHORITY = NonceAuthority(build_nonce_store())
    return _AUTHORITY


def reset_nonce_authority() -> None:
    """Drop the process-wide authority so the next call builds a fresh one."""
    global _AUTHORITY
    with _AUTHORITY_LOCK:
        _AUTHORITY = None
