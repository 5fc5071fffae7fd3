"""Tests for the response cache."""

import pytest

from shared.llm.cache import ResponseCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResponseCache(ttl_seconds=60, similarity_threshold=0.92, max_entries=5, trim_count=2, clock=clock)


class TestExactLookup:
    """Tests for hash lookups."""

    @pytest.mark.asyncio
    async def test_hit_returns_identical_response(self, cache):
        await cache.set("abc", [1.0, 0.0], '{"ok": true}')

        assert await cache.get_exact("abc") == '{"ok": true}'

    @pytest.mark.asyncio
    async def test_miss_returns_none(self, cache):
        await cache.set("abc", [1.0, 0.0], "response")

        assert await cache.get_exact("other") is None

    @pytest.mark.asyncio
    async def test_expired_entries_are_purged(self, cache, clock):
        await cache.set("abc", [1.0, 0.0], "response")
        clock.now += 61

        assert await cache.get_exact("abc") is None
        assert await cache.size() == 0


class TestSemanticLookup:
    """Tests for similarity lookups."""

    @pytest.mark.asyncio
    async def test_similarity_above_threshold_hits(self, cache):
        await cache.set("a", [1.0, 0.0], "cached")

        assert await cache.get_semantic([0.95, (1 - 0.95**2) ** 0.5]) == "cached"

    @pytest.mark.asyncio
    async def test_similarity_below_threshold_misses(self, cache):
        await cache.set("a", [1.0, 0.0], "cached")

        assert await cache.get_semantic([0.91, (1 - 0.91**2) ** 0.5]) is None

    @pytest.mark.asyncio
    async def test_returns_most_similar_entry(self, cache):
        await cache.set("a", [1.0, 0.0, 0.0], "first")
        await cache.set("b", [0.99, 0.14, 0.0], "second")

        assert await cache.get_semantic([0.99, 0.14, 0.0]) == "second"

    @pytest.mark.asyncio
    async def test_empty_embedding_never_hits(self, cache):
        await cache.set("a", [], "cached")

        assert await cache.get_semantic([]) is None
        assert await cache.get_semantic([1.0, 0.0]) is None


class TestEviction:
    """Tests for capacity handling."""

    @pytest.mark.asyncio
    async def test_full_cache_keeps_newest_entries(self, cache, clock):
        for index in range(5):
            clock.now += 1
            await cache.set(f"key-{index}", [], f"value-{index}")

        clock.now += 1
        await cache.set("key-5", [], "value-5")

        assert await cache.size() == 4
        assert await cache.get_exact("key-0") is None
        assert await cache.get_exact("key-1") is None
        assert await cache.get_exact("key-2") == "value-2"
        assert await cache.get_exact("key-5") == "value-5"
