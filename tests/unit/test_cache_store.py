"""
Unit Tests for Cache Stores
===========================

Memory and Redis stores, expiry and fetch-or-compute.
"""

from datetime import timedelta

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from socialcards.core.cache.store import MemoryCacheStore, RedisCacheStore, ttl_seconds


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestTtlSeconds:
    """Test TTL normalization."""

    def test_timedelta(self):
        assert ttl_seconds(timedelta(days=7)) == 604800

    def test_numbers(self):
        assert ttl_seconds(3600) == 3600
        assert ttl_seconds(1.9) == 1

    def test_minimum_is_one_second(self):
        assert ttl_seconds(0) == 1
        assert ttl_seconds(timedelta(milliseconds=10)) == 1


class TestMemoryCacheStore:
    """Test the in-process store."""

    @pytest.mark.asyncio
    async def test_write_and_read(self, memory_store):
        await memory_store.write("key", b"data", 60)

        assert await memory_store.read("key") == b"data"
        assert await memory_store.exists("key") is True

    @pytest.mark.asyncio
    async def test_entries_expire(self):
        clock = FakeClock()
        store = MemoryCacheStore(clock=clock)
        await store.write("key", b"data", timedelta(seconds=10))

        clock.now += 9.5
        assert await store.read("key") == b"data"

        clock.now += 0.5
        assert await store.read("key") is None
        assert await store.exists("key") is False

    @pytest.mark.asyncio
    async def test_delete(self, memory_store):
        await memory_store.write("key", b"data", 60)
        await memory_store.delete("key")
        await memory_store.delete("never-written")

        assert await memory_store.read("key") is None

    @pytest.mark.asyncio
    async def test_fetch_computes_once(self, memory_store):
        compute = AsyncMock(return_value=b"png")

        first = await memory_store.fetch("key", 60, compute)
        second = await memory_store.fetch("key", 60, compute)

        assert first == second == b"png"
        compute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_fetch_failure_leaves_key_empty(self, memory_store):
        compute = AsyncMock(side_effect=RuntimeError("capture failed"))

        with pytest.raises(RuntimeError):
            await memory_store.fetch("key", 60, compute)

        assert await memory_store.exists("key") is False

    @pytest.mark.asyncio
    async def test_fetch_recomputes_after_expiry(self):
        clock = FakeClock()
        store = MemoryCacheStore(clock=clock)
        compute = AsyncMock(side_effect=[b"one", b"two"])

        assert await store.fetch("key", 5, compute) == b"one"
        clock.now += 5
        assert await store.fetch("key", 5, compute) == b"two"

    @pytest.mark.asyncio
    async def test_close_clears(self, memory_store):
        await memory_store.write("key", b"data", 60)
        await memory_store.close()
        assert await memory_store.read("key") is None


class TestRedisCacheStore:
    """Test the Redis store against a mocked client."""

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=None)
        client.set = AsyncMock(return_value=True)
        client.exists = AsyncMock(return_value=1)
        client.delete = AsyncMock(return_value=1)
        client.ping = AsyncMock(return_value=True)
        client.aclose = AsyncMock()
        return client

    @pytest.mark.asyncio
    async def test_keys_are_prefixed(self, client):
        store = RedisCacheStore(client, prefix="cards:")

        await store.read("article-42")
        await store.write("article-42", b"png", timedelta(days=7))

        client.get.assert_awaited_once_with("cards:article-42")
        client.set.assert_awaited_once_with("cards:article-42", b"png", ex=604800)

    @pytest.mark.asyncio
    async def test_fetch_hit_skips_compute(self, client):
        client.get.return_value = b"cached"
        compute = AsyncMock()

        data = await RedisCacheStore(client).fetch("key", 60, compute)

        assert data == b"cached"
        compute.assert_not_awaited()
        client.set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fetch_miss_writes_with_expiry(self, client):
        compute = AsyncMock(return_value=b"fresh")

        data = await RedisCacheStore(client).fetch("key", timedelta(hours=1), compute)

        assert data == b"fresh"
        client.set.assert_awaited_once_with("social_cards:key", b"fresh", ex=3600)

    @pytest.mark.asyncio
    async def test_exists_delete_ping_close(self, client):
        store = RedisCacheStore(client)

        assert await store.exists("key") is True
        await store.delete("key")
        assert await store.ping() is True
        await store.close()

        client.delete.assert_awaited_once_with("social_cards:key")
        client.aclose.assert_awaited_once()

    def test_from_url_keeps_bytes(self):
        with patch("socialcards.core.cache.store.redis.Redis.from_url") as from_url:
            store = RedisCacheStore.from_url("redis://cache:6379/1", prefix="p:", max_connections=5)

        from_url.assert_called_once()
        assert from_url.call_args.args == ("redis://cache:6379/1",)
        assert from_url.call_args.kwargs["decode_responses"] is False
        assert from_url.call_args.kwargs["max_connections"] == 5
        assert store.prefix == "p:"
