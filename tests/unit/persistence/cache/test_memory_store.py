"""Unit tests for InMemoryCacheStore."""

import asyncio

import pytest


class TestRemember:
    """Tests for remember and remember_forever."""

    @pytest.mark.asyncio
    async def test_concurrent_misses_compute_once(self, cache_store):
        """Concurrent misses on one key should trigger a single compute."""
        # Arrange
        calls = 0

        async def compute():
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return "value"

        # Act
        results = await asyncio.gather(
            *(cache_store.remember("k", 60, compute) for _ in range(5))
        )

        # Assert
        assert results == ["value"] * 5
        assert calls == 1

    @pytest.mark.asyncio
    async def test_expired_entry_is_recomputed(self, cache_store, clock):
        values = iter(["first", "second"])

        async def compute():
            return next(values)

        assert await cache_store.remember("k", 10, compute) == "first"
        clock.advance(9)
        assert await cache_store.remember("k", 10, compute) == "first"
        clock.advance(1)
        assert await cache_store.remember("k", 10, compute) == "second"

    @pytest.mark.asyncio
    async def test_failed_compute_stores_nothing(self, cache_store):
        async def fail():
            raise RuntimeError("boom")

        async def succeed():
            return "ok"

        with pytest.raises(RuntimeError):
            await cache_store.remember("k", 60, fail)

        assert await cache_store.remember("k", 60, succeed) == "ok"

    @pytest.mark.asyncio
    async def test_none_kept_with_ttl_but_not_forever(self, cache_store):
        calls = 0

        async def compute():
            nonlocal calls
            calls += 1
            return None

        await cache_store.remember("a", 60, compute)
        await cache_store.remember("a", 60, compute)
        await cache_store.remember_forever("b", compute)
        await cache_store.remember_forever("b", compute)

        assert calls == 3


class TestHousekeeping:
    """Tests for lock and entry cleanup."""

    @pytest.mark.asyncio
    async def test_locks_released_after_fill(self, cache_store):
        """Distinct keys should not leave a lock behind."""

        # Arrange
        async def compute():
            await asyncio.sleep(0)
            return "value"

        # Act
        await asyncio.gather(
            *(cache_store.remember("k", 60, compute) for _ in range(3))
        )
        for i in range(50):
            await cache_store.remember(f"k{i}", 1, compute)
            await cache_store.forget(f"k{i}")

        # Assert
        assert cache_store._locks == {}
        assert cache_store._waiting == {}

    @pytest.mark.asyncio
    async def test_expired_entries_swept_on_store(self, cache_store, clock):
        async def compute():
            return "value"

        for i in range(10):
            await cache_store.remember(f"old{i}", 1, compute)
        await cache_store.remember_forever("kept", compute)
        clock.advance(2)

        await cache_store.remember("new", 60, compute)

        assert set(cache_store._entries) == {"kept", "new"}


class TestForget:
    """Tests for forget and flush."""

    @pytest.mark.asyncio
    async def test_forget_reports_removal(self, cache_store):
        async def compute():
            return 1

        await cache_store.remember_forever("k", compute)

        assert await cache_store.forget("k") is True
        assert await cache_store.forget("k") is False

    @pytest.mark.asyncio
    async def test_flush(self, cache_store):
        async def compute():
            return 1

        await cache_store.remember("a", 60, compute)
        await cache_store.remember_forever("b", compute)

        await cache_store.flush()

        assert await cache_store.forget("a") is False
        assert await cache_store.forget("b") is False
