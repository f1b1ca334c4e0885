"""Diagnostic quality metrics for a reasoning span."""

from __future__ import annotations

import re
from collections import Counter

from reasoning_lens.models.enums import PatternType
from reasoning_lens.models.types import AnalyticsMetrics, ReasoningAnalytics
from reasoning_lens.patterns.library import (
    ANALYTICS_LOW_CONFIDENCE,
    ANALYTICS_LOW_READABILITY,
    ANALYTICS_MIN_DISTINCT_TYPES,
    ANALYTICS_MIN_SENTENCE_CHARS,
    ANALYTICS_READABILITY_SPREAD,
    ANALYTICS_READABLE_SENTENCE_CHARS,
    PATTERN_TYPE_COUNT,
)
from reasoning_lens.patterns.scorer import analyze_patterns

_SENTENCE_SPLIT = re.compile(r"[.!?]+")

SUGGEST_CONNECTIVES = "Make the reasoning more explicit with logical connectives."
SUGGEST_DIVERSIFY = "Diversify the kinds of reasoning (questions, analysis, steps)."
SUGGEST_SHORTER_SENTENCES = "Shorten sentences to improve readability."
SUGGEST_CONCLUSION = "Add a clear conclusion to the reasoning."


def readability_score(text: str) -> float:
    """Score in [0, 1] that drops once sentences average over 100 characters."""
    sentences = [
        s for s in _SENTENCE_SPLIT.split(text) if len(s.strip()) > ANALYTICS_MIN_SENTENCE_CHARS
    ]
    if not sentences:
        return 1.0
    average = sum(len(s) for s in sentences) / len(sentences)
    score = 1 - (average - ANALYTICS_READABLE_SENTENCE_CHARS) / ANALYTICS_READABILITY_SPREAD
    return max(0.0, min(1.0, score))


def get_reasoning_analytics(content: str) -> ReasoningAnalytics:
    """Analyse reasoning patterns and suggest improvements.

    Never affects extraction; use it to grade or debug a reasoning span.
    """
    patterns = analyze_patterns(content)
    type_counts = Counter(p.type for p in patterns)

    average_confidence = (
        sum(p.confidence for p in patterns) / len(patterns) if patterns else 0.0
    )
    dominant = type_counts.most_common(1)[0][0].value if type_counts else "none"
    distinct = len(type_counts)

    metrics = AnalyticsMetrics(
        total_patterns=len(patterns),
        average_confidence=average_confidence,
        dominant_type=dominant,
        complexity_score=min(1.0, distinct / PATTERN_TYPE_COUNT),
        readability_score=readability_score(content),
    )

    suggestions: list[str] = []
    if average_confidence < ANALYTICS_LOW_CONFIDENCE:
        suggestions.append(SUGGEST_CONNECTIVES)
    if distinct < ANALYTICS_MIN_DISTINCT_TYPES:
        suggestions.append(SUGGEST_DIVERSIFY)
    if metrics.readability_score < ANALYTICS_LOW_READABILITY:
        suggestions.append(SUGGEST_SHORTER_SENTENCES)
    if PatternType.CONCLUSION not in type_counts:
        suggestions.append(SUGGEST_CONCLUSION)

    return ReasoningAnalytics(patterns=patterns, metrics=metrics, suggestions=suggestions)
