"""Domain types for the reasoning extraction engine.

These types flow between the pattern library, the batch and streaming
extractors, the result cache and analytics. They are plain dataclasses;
the HTTP layer converts them to pydantic DTOs (see ``models.dto``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from reasoning_lens.models.enums import (
    Confidence,
    ExtractionMethod,
    PatternType,
    StreamPhase,
)

# -- Pattern analysis ----------------------------------------------------------


@dataclass(frozen=True)
class Span:
    """Half-open character range into the analysed text."""

    start: int
    end: int


@dataclass(frozen=True)
class PatternMatch:
    """A single recognised reasoning cue."""

    type: PatternType
    content: str
    confidence: float
    position: Span
    keywords: frozenset[str] = frozenset()

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "content": self.content,
            "confidence": self.confidence,
            "position": {"start": self.position.start, "end": self.position.end},
            "keywords": sorted(self.keywords),
        }


# -- Extraction results --------------------------------------------------------


def reconcile_confidence(method: ExtractionMethod, confidence: Confidence) -> Confidence:
    """Keep method and confidence consistent.

    ``explicit`` never reports ``low`` and ``fallback`` never reports ``high``.
    """
    if method is ExtractionMethod.EXPLICIT and confidence is Confidence.LOW:
        return Confidence.MEDIUM
    if method is ExtractionMethod.FALLBACK and confidence is Confidence.HIGH:
        return Confidence.MEDIUM
    return confidence


@dataclass(frozen=True)
class ExtractionResult:
    """Output of a successful reasoning extraction.

    Frozen so the cache can hand the same instance to every caller.
    """

    content: str
    original_length: int
    extraction_method: ExtractionMethod
    confidence: Confidence
    patterns: tuple[PatternMatch, ...] = ()
    cache_key: str | None = None
    streaming_chunks: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        reconciled = reconcile_confidence(self.extraction_method, self.confidence)
        if reconciled is not self.confidence:
            object.__setattr__(self, "confidence", reconciled)

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "original_length": self.original_length,
            "extraction_method": self.extraction_method.value,
            "confidence": self.confidence.value,
            "patterns": [p.to_dict() for p in self.patterns],
            "cache_key": self.cache_key,
            "streaming_chunks": (
                list(self.streaming_chunks) if self.streaming_chunks is not None else None
            ),
        }


# -- Cache ---------------------------------------------------------------------


@dataclass
class CacheEntry:
    """Memoised extraction plus its bookkeeping."""

    result: ExtractionResult
    timestamp: float
    content_hash: str
    access_count: int = 1


@dataclass
class CacheStats:
    """Snapshot of result cache usage."""

    size: int = 0
    total_access: int = 0
    average_age_seconds: float = 0.0
    hit_rate: float = 0.0
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "total_access": self.total_access,
            "average_age_seconds": self.average_age_seconds,
            "hit_rate": self.hit_rate,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
        }


# -- Streaming -----------------------------------------------------------------


@dataclass
class StreamingState:
    """Per-message state of the streaming extractor."""

    buffer: str = ""
    extracted_chunks: list[str] = field(default_factory=list)
    current_pattern: str | None = None
    confidence: float = 0.0
    phase: StreamPhase = StreamPhase.SEARCHING
    marker_ever_seen: bool = False

    @property
    def is_complete(self) -> bool:
        return self.phase is StreamPhase.COMPLETE

    @property
    def accumulated(self) -> str:
        return "".join(self.extracted_chunks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "buffer": self.buffer,
            "extracted_chunks": list(self.extracted_chunks),
            "current_pattern": self.current_pattern,
            "confidence": self.confidence,
            "phase": self.phase.value,
            "is_complete": self.is_complete,
            "marker_ever_seen": self.marker_ever_seen,
        }


# -- Analytics -----------------------------------------------------------------


@dataclass
class AnalyticsMetrics:
    """Aggregate quality metrics over a reasoning span."""

    total_patterns: int = 0
    average_confidence: float = 0.0
    dominant_type: str = "none"
    complexity_score: float = 0.0
    readability_score: float = 0.0


@dataclass
class ReasoningAnalytics:
    """Pattern statistics, metrics and improvement suggestions."""

    patterns: list[PatternMatch] = field(default_factory=list)
    metrics: AnalyticsMetrics = field(default_factory=AnalyticsMetrics)
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "patterns": [p.to_dict() for p in self.patterns],
            "metrics": {
                "total_patterns": self.metrics.total_patterns,
                "average_confidence": self.metrics.average_confidence,
                "dominant_type": self.metrics.dominant_type,
                "complexity_score": self.metrics.complexity_score,
                "readability_score": self.metrics.readability_score,
            },
            "suggestions": list(self.suggestions),
        }
