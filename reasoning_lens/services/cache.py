"""Bounded, time-boxed cache for extraction results.

Entries are keyed by a fast fingerprint of the source text prefix plus the
full text length, and carry a fingerprint of the whole text so a reused key
whose source changed reads as a miss.

Key features:
- O(1) lookup by key
- TTL expiry checked on read and on every insert
- Least-used eviction of a fixed share of entries when over capacity
- One lock around every read and write, so a threaded host can share it
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from loguru import logger

from reasoning_lens.models.types import CacheEntry, CacheStats, ExtractionResult

DEFAULT_TTL_SECONDS = 30 * 60
DEFAULT_MAX_ENTRIES = 100
DEFAULT_EVICTION_RATIO = 0.2
DEFAULT_KEY_PREFIX_CHARS = 500

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def simple_hash(text: str) -> str:
    """Fast non-cryptographic fingerprint of ``text``.

    31-multiplier rolling hash wrapped to a signed 32-bit integer; the
    magnitude is rendered in base 36.
    """
    h = 0
    for ch in text:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 1 << 32
    return _to_base36(abs(h))


class ReasoningCache:
    """Memoises ExtractionResults for recently seen source texts.

    Attributes:
        ttl_seconds: Age after which an entry is treated as absent
        max_entries: Size above which eviction runs on insert
        eviction_ratio: Share of entries dropped by one eviction pass
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        eviction_ratio: float = DEFAULT_EVICTION_RATIO,
        key_prefix_chars: int = DEFAULT_KEY_PREFIX_CHARS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.eviction_ratio = eviction_ratio
        self.key_prefix_chars = key_prefix_chars
        self._clock = clock

        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def make_key(self, text: str) -> str:
        """Derive the cache key for a source text.

        Only the first ``key_prefix_chars`` characters are hashed, so two
        texts sharing that prefix and their length collide on the key. The
        full-text fingerprint stored with the entry turns such a collision
        into a miss.
        """
        return f"reasoning_{simple_hash(text[: self.key_prefix_chars])}_{len(text)}"

    def get(self, key: str, source_text: str) -> ExtractionResult | None:
        """Look up ``key``, validating it against ``source_text``.

        Returns:
            The cached result, or None when absent, expired, or stored for
            a different source text.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            now = self._clock()
            if now - entry.timestamp > self.ttl_seconds:
                del self._entries[key]
                self._misses += 1
                logger.debug(f"Reasoning cache entry expired: {key}")
                return None

            if entry.content_hash != simple_hash(source_text):
                del self._entries[key]
                self._misses += 1
                logger.debug(f"Reasoning cache key reused for different text: {key}")
                return None

            entry.access_count += 1
            entry.timestamp = now
            self._hits += 1
            return entry.result

    def set(self, key: str, result: ExtractionResult, source_text: str) -> None:
        """Store ``result`` under ``key`` after running cleanup."""
        content_hash = simple_hash(source_text)
        with self._lock:
            self._cleanup_locked()
            self._entries[key] = CacheEntry(
                result=result,
                timestamp=self._clock(),
                content_hash=content_hash,
            )

    def cleanup(self) -> int:
        """Drop expired entries, then evict least-used ones if over capacity.

        Returns:
            Number of entries removed
        """
        with self._lock:
            return self._cleanup_locked()

    def _cleanup_locked(self) -> int:
        now = self._clock()
        expired = [k for k, e in self._entries.items() if now - e.timestamp > self.ttl_seconds]
        for key in expired:
            del self._entries[key]

        evicted = 0
        if len(self._entries) > self.max_entries:
            ranked = sorted(
                self._entries.items(),
                key=lambda item: (item[1].access_count, item[1].timestamp),
            )
            evicted = int(len(ranked) * self.eviction_ratio)
            for key, _entry in ranked[:evicted]:
                del self._entries[key]
            self._evictions += evicted
            logger.debug(
                f"Reasoning cache over capacity: evicted {evicted}, "
                f"{len(self._entries)} entries remain"
            )

        return len(expired) + evicted

    def clear(self) -> None:
        """Remove every entry and reset the hit/miss counters."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> CacheStats:
        """Current size, access totals, mean entry age and hit rate."""
        with self._lock:
            now = self._clock()
            entries = list(self._entries.values())
            lookups = self._hits + self._misses
            return CacheStats(
                size=len(entries),
                total_access=sum(e.access_count for e in entries),
                average_age_seconds=(
                    sum(now - e.timestamp for e in entries) / len(entries) if entries else 0.0
                ),
                hit_rate=self._hits / lookups if lookups else 0.0,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
