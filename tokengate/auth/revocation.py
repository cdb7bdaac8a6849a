"""Negative (reverse) revocation store.

Only logged-out tokens are recorded. Each revoked token identifier is
stored under ``token:<jti>`` with a TTL equal to the token's remaining
lifetime, so entries disappear once the token would have expired anyway
and the store never accumulates stale keys.

Usage::

    store = RedisRevocationStore.from_settings(get_settings())
    await store.set_with_ttl(revocation_key(jti), 1800)
    assert await store.exists(revocation_key(jti))
"""

import asyncio
import logging
import time
from typing import Protocol, runtime_checkable

from redis.asyncio import Redis

from tokengate.config import Settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "token:"


def revocation_key(token_id: str) -> str:
    """Store key marking *token_id* as revoked."""
    return f"{KEY_PREFIX}{token_id}"


@runtime_checkable
class RevocationStore(Protocol):
    """TTL-bounded set of revoked keys. Only existence matters."""

    async def exists(self, key: str) -> bool: ...

    async def set_with_ttl(self, key: str, ttl: int) -> None: ...

    async def close(self) -> None: ...


class RedisRevocationStore:
    """Redis-backed revocation store.

    A non-positive TTL is a no-op: the token is already past its natural
    expiry and will be rejected without a marker.
    """

    def __init__(self, redis: Redis):
        self.redis = redis

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisRevocationStore":
        return cls(Redis.from_url(str(settings.redis_url), decode_responses=True))

    async def exists(self, key: str) -> bool:
        return await self.redis.exists(key) > 0

    async def set_with_ttl(self, key: str, ttl: int) -> None:
        if ttl > 0:
            await self.redis.setex(key, ttl, "1")
        else:
            logger.debug("Skipping revocation marker %s with ttl=%s", key, ttl)

    async def close(self) -> None:
        await self.redis.aclose()


class MemoryRevocationStore:
    """In-process revocation store for tests and single-instance deployments.

    State is lost on restart and is not shared between processes.
    Expired entries are evicted lazily on access.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        # key -> monotonic deadline
        self._entries: dict[str, float] = {}

    async def exists(self, key: str) -> bool:
        async with self._lock:
            deadline = self._entries.get(key)
            if deadline is None:
                return False
            if deadline <= time.monotonic():
                del self._entries[key]
                return False
            return True

    async def set_with_ttl(self, key: str, ttl: int) -> None:
        if ttl <= 0:
            return
        async with self._lock:
            self._evict_expired()
            self._entries[key] = time.monotonic() + ttl

    async def close(self) -> None:
        async with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _evict_expired(self) -> None:
        now = time.monotonic()
        for key in [k for k, deadline in self._entries.items() if deadline <= now]:
            del self._entries[key]
