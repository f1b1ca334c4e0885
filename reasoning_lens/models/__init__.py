"""Domain enums and types for reasoning extraction."""

from reasoning_lens.models.enums import (
    Confidence,
    ExtractionMethod,
    PatternType,
    StreamPhase,
)
from reasoning_lens.models.types import (
    AnalyticsMetrics,
    CacheEntry,
    CacheStats,
    ExtractionResult,
    PatternMatch,
    ReasoningAnalytics,
    Span,
    StreamingState,
    reconcile_confidence,
)

__all__ = [
    "AnalyticsMetrics",
    "CacheEntry",
    "CacheStats",
    "Confidence",
    "ExtractionMethod",
    "ExtractionResult",
    "PatternMatch",
    "PatternType",
    "ReasoningAnalytics",
    "Span",
    "StreamPhase",
    "StreamingState",
    "reconcile_confidence",
]
