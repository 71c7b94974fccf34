"""
Cache Configuration
===================

Cache store connection management.
Builds the configured store once per process and exposes health checks.
"""

from typing import Optional, Dict, Union

from socialcards.core.cache.store import CacheStoreError, MemoryCacheStore, RedisCacheStore

from .settings import get_settings
from .logging import get_logger

logger = get_logger(__name__)

AnyStore = Union[RedisCacheStore, MemoryCacheStore]


class CacheManager:
    """Connection manager for the card cache store."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self._store: Optional[AnyStore] = None

    async def initialize(self) -> None:
        """Initialize the configured cache store."""
        if self.settings.cache_backend == "memory":
            self._store = MemoryCacheStore()
            logger.info("In-memory cache store initialized")
            return

        try:
            store = RedisCacheStore.from_url(
                self.settings.redis_url,
                prefix=self.settings.cache_key_prefix,
                max_connections=self.settings.redis_max_connections,
            )
            # Test connection
            await store.ping()
            self._store = store
            logger.info("Redis connection established", url=self.settings.redis_url)
        except Exception as e:
            logger.error("Failed to connect to Redis", error=str(e))
            raise

    async def close(self) -> None:
        """Close the cache store."""
        if self._store is not None:
            await self._store.close()
            self._store = None
            logger.info("Cache store closed")

    def get_store(self) -> AnyStore:
        """Get the cache store instance."""
        if self._store is None:
            raise CacheStoreError("Cache store not initialized")
        return self._store


# Global cache manager instance
cache_manager = CacheManager()


def get_cache_store() -> AnyStore:
    """Get the process-wide cache store."""
    return cache_manager.get_store()


async def initialize_cache() -> None:
    """Initialize the cache store."""
    await cache_manager.initialize()


async def close_cache() -> None:
    """Close the cache store."""
    await cache_manager.close()


async def check_cache_health() -> Dict[str, bool]:
    """Check cache store health."""
    try:
        healthy = await cache_manager.get_store().ping()
    except Exception as e:
        logger.error("Cache health check failed", error=str(e))
        healthy = False
    return {"cache": healthy}
