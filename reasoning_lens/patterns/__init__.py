"""Pattern library and heuristic scoring for reasoning detection."""

from reasoning_lens.patterns.library import (
    LEADING_FAMILIES,
    MARKER_FAMILIES,
    PATTERN_RULES,
    STRUCTURAL_PATTERNS,
    TRUNCATION_MARKER,
    MarkerFamily,
    PatternRule,
)
from reasoning_lens.patterns.scorer import (
    RunningConfidence,
    analyze_patterns,
    context_confidence,
    extract_keywords,
    is_likely_reasoning,
    streaming_confidence,
)

__all__ = [
    "LEADING_FAMILIES",
    "MARKER_FAMILIES",
    "PATTERN_RULES",
    "STRUCTURAL_PATTERNS",
    "TRUNCATION_MARKER",
    "MarkerFamily",
    "PatternRule",
    "RunningConfidence",
    "analyze_patterns",
    "context_confidence",
    "extract_keywords",
    "is_likely_reasoning",
    "streaming_confidence",
]
