"""
Cache Stores
============

Key-value stores with expiry holding rendered card bytes.
``fetch`` writes only when the compute function returns.
"""

from typing import Awaitable, Callable, Dict, Optional, Protocol, Tuple, Union
from datetime import timedelta
import time

import redis.asyncio as redis  # type: ignore[import-untyped]

from socialcards.config.logging import get_logger

logger = get_logger(__name__)

TTL = Union[timedelta, int, float]
Compute = Callable[[], Awaitable[bytes]]


class CacheStoreError(Exception):
    """Exception raised when a cache store is unusable."""

    pass


def ttl_seconds(ttl: TTL) -> int:
    """Normalize a TTL to whole seconds, at least one."""
    if isinstance(ttl, timedelta):
        seconds = ttl.total_seconds()
    else:
        seconds = float(ttl)
    return max(1, int(seconds))


class CacheStore(Protocol):
    """Interface the cache guard relies on."""

    async def fetch(self, key: str, ttl: TTL, compute: Compute) -> bytes: ...

    async def write(self, key: str, data: bytes, ttl: TTL) -> None: ...

    async def read(self, key: str) -> Optional[bytes]: ...

    async def exists(self, key: str) -> bool: ...

    async def delete(self, key: str) -> None: ...

    async def close(self) -> None: ...


class BaseCacheStore:
    """Fetch-or-compute on top of read/write."""

    async def fetch(self, key: str, ttl: TTL, compute: Compute) -> bytes:
        cached = await self.read(key)
        if cached is not None:
            logger.debug("Cache hit", key=key, size=len(cached))
            return cached

        logger.debug("Cache miss", key=key)
        # An exception here propagates and leaves the key untouched
        data = await compute()
        await self.write(key, data, ttl)
        return data

    async def read(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    async def write(self, key: str, data: bytes, ttl: TTL) -> None:
        raise NotImplementedError


class RedisCacheStore(BaseCacheStore):
    """Redis-backed store using ``SET ... EX``."""

    def __init__(self, client: "redis.Redis", prefix: str = "social_cards:") -> None:  # type: ignore[type-arg]
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(
        cls, url: str, prefix: str = "social_cards:", max_connections: int = 20
    ) -> "RedisCacheStore":
        client = redis.Redis.from_url(  # type: ignore[attr-defined]
            url,
            max_connections=max_connections,
            retry_on_timeout=True,
            decode_responses=False,
        )
        return cls(client, prefix)

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def read(self, key: str) -> Optional[bytes]:
        return await self.client.get(self._key(key))  # type: ignore[no-any-return]

    async def write(self, key: str, data: bytes, ttl: TTL) -> None:
        await self.client.set(self._key(key), data, ex=ttl_seconds(ttl))

    async def exists(self, key: str) -> bool:
        return bool(await self.client.exists(self._key(key)))

    async def delete(self, key: str) -> None:
        await self.client.delete(self._key(key))

    async def ping(self) -> bool:
        return bool(await self.client.ping())

    async def close(self) -> None:
        await self.client.aclose()  # type: ignore[attr-defined]


class MemoryCacheStore(BaseCacheStore):
    """In-process store with monotonic expiry, for development and tests."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._data: Dict[str, Tuple[bytes, float]] = {}
        self._clock = clock

    async def read(self, key: str) -> Optional[bytes]:
        entry = self._data.get(key)
        if entry is None:
            return None
        data, expires_at = entry
        if self._clock() >= expires_at:
            del self._data[key]
            return None
        return data

    async def write(self, key: str, data: bytes, ttl: TTL) -> None:
        self._data[key] = (data, self._clock() + ttl_seconds(ttl))

    async def exists(self, key: str) -> bool:
        return await self.read(key) is not None

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._data.clear()
