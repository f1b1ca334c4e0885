"""Tests for the extraction result cache."""

import threading

import pytest

from reasoning_lens.models.enums import Confidence, ExtractionMethod
from reasoning_lens.models.types import ExtractionResult
from reasoning_lens.services.cache import ReasoningCache, simple_hash


def make_result(content: str = "cached reasoning") -> ExtractionResult:
    return ExtractionResult(
        content=content,
        original_length=len(content),
        extraction_method=ExtractionMethod.EXPLICIT,
        confidence=Confidence.HIGH,
    )


class TestSimpleHash:
    """Tests for simple_hash()."""

    def test_empty(self):
        assert simple_hash("") == "0"

    def test_base36(self):
        # ord("a") == 97 == 2 * 36 + 25
        assert simple_hash("a") == "2p"

    def test_order_sensitive(self):
        assert simple_hash("ab") != simple_hash("ba")

    def test_stable_for_long_text(self):
        text = "reasoning " * 1000
        assert simple_hash(text) == simple_hash(text)
        assert simple_hash(text).isalnum()


class TestMakeKey:
    """Tests for ReasoningCache.make_key()."""

    def test_format(self, cache):
        assert cache.make_key("hello") == f"reasoning_{simple_hash('hello')}_5"

    def test_only_prefix_is_hashed(self, cache):
        """Texts sharing the first 500 characters and their length share a key."""
        prefix = "p" * 500
        assert cache.make_key(prefix + "abc") == cache.make_key(prefix + "xyz")
        assert cache.make_key(prefix + "abc") != cache.make_key(prefix + "abcd")


class TestGetSet:
    """Tests for get() and set()."""

    def test_miss_when_absent(self, cache):
        assert cache.get("missing", "text") is None
        assert cache.stats().misses == 1

    def test_hit_returns_stored_result(self, cache):
        result = make_result()
        cache.set("k", result, "source")

        assert cache.get("k", "source") is result
        stats = cache.stats()
        assert stats.hits == 1
        assert stats.total_access == 2

    def test_colliding_key_is_a_miss(self, cache):
        """A key reused for different source text must not return the old result."""
        prefix = "p" * 500
        text_a, text_b = prefix + "abc", prefix + "xyz"
        key = cache.make_key(text_a)
        cache.set(key, make_result(), text_a)

        assert cache.get(cache.make_key(text_b), text_b) is None
        assert key not in cache

    def test_expired_entry_is_a_miss(self, cache, clock):
        cache.set("k", make_result(), "source")
        clock.advance(30 * 60 + 1)

        assert cache.get("k", "source") is None
        assert len(cache) == 0

    def test_hit_refreshes_timestamp(self, cache, clock):
        cache.set("k", make_result(), "source")
        clock.advance(1000)
        assert cache.get("k", "source") is not None

        clock.advance(1000)
        assert cache.get("k", "source") is not None

    def test_set_overwrites(self, cache):
        cache.set("k", make_result("old"), "source")
        cache.set("k", make_result("new"), "source")

        assert cache.get("k", "source").content == "new"
        assert len(cache) == 1


class TestCleanup:
    """Tests for expiry and least-used eviction."""

    def test_drops_expired(self, cache, clock):
        cache.set("a", make_result(), "a")
        clock.advance(1000)
        cache.set("b", make_result(), "b")
        clock.advance(900)

        assert cache.cleanup() == 1
        assert "a" not in cache
        assert "b" in cache

    def test_evicts_least_used(self, clock):
        cache = ReasoningCache(max_entries=10, eviction_ratio=0.2, clock=clock)
        for i in range(11):
            cache.set(f"k{i}", make_result(), f"text {i}")
            clock.advance(1)

        # Everything but k0 and k1 gets a second access
        for i in range(2, 11):
            assert cache.get(f"k{i}", f"text {i}") is not None

        cache.set("k11", make_result(), "text 11")

        assert "k0" not in cache
        assert "k1" not in cache
        assert len(cache) == 10
        assert cache.stats().evictions == 2

    def test_within_capacity_keeps_everything(self, cache):
        for i in range(100):
            cache.set(f"k{i}", make_result(), f"text {i}")
        assert len(cache) == 100
        assert cache.stats().evictions == 0


class TestStats:
    """Tests for stats() and clear()."""

    def test_empty(self, cache):
        stats = cache.stats()
        assert stats.size == 0
        assert stats.hit_rate == 0.0
        assert stats.average_age_seconds == 0.0

    def test_hit_rate_and_age(self, cache, clock):
        cache.set("k", make_result(), "source")
        cache.get("k", "source")
        cache.get("other", "source")
        clock.advance(10)

        stats = cache.stats()
        assert stats.hit_rate == pytest.approx(0.5)
        assert stats.average_age_seconds == pytest.approx(10)
        assert stats.to_dict()["size"] == 1

    def test_clear(self, cache):
        cache.set("k", make_result(), "source")
        cache.get("k", "source")

        cache.clear()

        stats = cache.stats()
        assert stats.size == 0
        assert stats.hits == 0
        assert stats.misses == 0


class TestThreadSafety:
    """Concurrent use from a threadpool."""

    def test_concurrent_set_and_get(self):
        cache = ReasoningCache(max_entries=50)
        errors: list[Exception] = []

        def worker(offset: int) -> None:
            try:
                for i in range(200):
                    text = f"text {offset}-{i}"
                    key = cache.make_key(text)
                    cache.set(key, make_result(), text)
                    cache.get(key, text)
            except Exception as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(cache) <= 51
