"""Heuristic scoring over arbitrary text spans."""

from __future__ import annotations

import re

from reasoning_lens.models.types import PatternMatch, Span
from reasoning_lens.patterns.library import (
    CONNECTIVE_FAMILIES,
    CONTEXT_BASE_CONFIDENCE,
    CONTEXT_CODE_HINTS,
    CONTEXT_CODE_PENALTY,
    CONTEXT_FAMILY_BONUS,
    CONTEXT_LENGTH_BONUS,
    CONTEXT_LENGTH_STEPS,
    CONTEXT_RADIUS,
    KEYWORD_TOKEN,
    LIKELY_REASONING_INDICATORS,
    MIN_INDICATORS_SHORT_TEXT,
    MIN_REASONING_WORDS,
    PATTERN_RULES,
    SINGLE_INDICATOR_MIN_CHARS,
    STOP_WORDS,
    STREAM_BASE_CONFIDENCE,
    STREAM_CODE_HINTS,
    STREAM_CODE_PENALTY,
    STREAM_INDICATOR_BONUS,
    STREAM_LENGTH_BONUS,
    STREAM_LENGTH_STEPS,
    STREAM_QUESTION_BONUS,
    STREAM_RESCAN_CHARS,
)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def is_likely_reasoning(text: str) -> bool:
    """Decide whether a span of text reads like deliberation.

    Needs at least ten words, plus either two distinct indicator rules or a
    single one in text longer than 100 characters. Short strings that merely
    contain one reasoning-flavoured word do not qualify.
    """
    if not text:
        return False

    if len(text.split()) < MIN_REASONING_WORDS:
        return False

    matched = sum(1 for indicator in LIKELY_REASONING_INDICATORS if indicator.search(text))
    if matched >= MIN_INDICATORS_SHORT_TEXT:
        return True
    return matched >= 1 and len(text) > SINGLE_INDICATOR_MIN_CHARS


def context_confidence(text: str, start: int, end: int) -> float:
    """Score a match at ``text[start:end]`` by its surrounding window.

    Args:
        text: The full analysed text
        start: Match start offset
        end: Match end offset

    Returns:
        Confidence in [0, 1]
    """
    window = text[max(0, start - CONTEXT_RADIUS) : min(len(text), end + CONTEXT_RADIUS)]

    confidence = CONTEXT_BASE_CONFIDENCE
    for family in CONNECTIVE_FAMILIES:
        if family.search(window):
            confidence += CONTEXT_FAMILY_BONUS

    for step in CONTEXT_LENGTH_STEPS:
        if len(window) > step:
            confidence += CONTEXT_LENGTH_BONUS

    if CONTEXT_CODE_HINTS.search(window):
        confidence -= CONTEXT_CODE_PENALTY

    return _clamp(confidence)


def streaming_confidence(text: str) -> float:
    """Running confidence estimate for content accumulated while streaming.

    Unlike context_confidence, every connective occurrence counts.
    """
    confidence = STREAM_BASE_CONFIDENCE

    for family in CONNECTIVE_FAMILIES:
        confidence += len(family.findall(text)) * STREAM_INDICATOR_BONUS

    if "?" in text:
        confidence += STREAM_QUESTION_BONUS
    for step in STREAM_LENGTH_STEPS:
        if len(text) > step:
            confidence += STREAM_LENGTH_BONUS

    if STREAM_CODE_HINTS.search(text):
        confidence -= STREAM_CODE_PENALTY

    return _clamp(confidence)


class _TailCount:
    """Non-overlapping match count of ``pattern`` over append-only text.

    A match starting more than STREAM_RESCAN_CHARS before the end can no
    longer change, so it is counted once and never scanned again.
    """

    def __init__(self, pattern: re.Pattern[str]) -> None:
        self.pattern = pattern
        self._settled = 0
        self._resume = 0

    def update(self, text: str) -> int:
        settle_before = len(text) - STREAM_RESCAN_CHARS
        pending = 0
        for match in self.pattern.finditer(text, self._resume):
            if match.start() < settle_before:
                self._settled += 1
                self._resume = match.end()
            else:
                pending += 1
        self._resume = max(self._resume, settle_before)
        return self._settled + pending


class RunningConfidence:
    """streaming_confidence for text that only grows, in time linear in its length.

    Each update scans the appended text plus a short tail, and returns the
    same value streaming_confidence would for the full text.
    """

    def __init__(self) -> None:
        self._connectives = [_TailCount(family) for family in CONNECTIVE_FAMILIES]
        self._code_hints = _TailCount(STREAM_CODE_HINTS)
        self._question = False
        self._checked = 0

    def update(self, text: str) -> float:
        confidence = STREAM_BASE_CONFIDENCE

        for counter in self._connectives:
            confidence += counter.update(text) * STREAM_INDICATOR_BONUS

        if not self._question:
            self._question = "?" in text[self._checked :]
            self._checked = len(text)
        if self._question:
            confidence += STREAM_QUESTION_BONUS
        for step in STREAM_LENGTH_STEPS:
            if len(text) > step:
                confidence += STREAM_LENGTH_BONUS

        if self._code_hints.update(text):
            confidence -= STREAM_CODE_PENALTY

        return _clamp(confidence)


def extract_keywords(text: str) -> frozenset[str]:
    """Lowercased content words of three or more letters, stop-words removed."""
    words = KEYWORD_TOKEN.findall(text.lower())
    return frozenset(word for word in words if word not in STOP_WORDS)


def analyze_patterns(text: str) -> list[PatternMatch]:
    """Run every classification rule over ``text``.

    Each hit is weighted by its rule and by the context around it.

    Returns:
        Matches sorted by confidence, highest first.
    """
    if not text:
        return []

    matches: list[PatternMatch] = []
    for rule in PATTERN_RULES:
        for matcher in rule.matchers:
            for match in matcher.finditer(text):
                start, end = match.span()
                matches.append(
                    PatternMatch(
                        type=rule.type,
                        content=match.group(0).strip(),
                        confidence=rule.weight * context_confidence(text, start, end),
                        position=Span(start=start, end=end),
                        keywords=extract_keywords(match.group(0)),
                    )
                )

    matches.sort(key=lambda m: m.confidence, reverse=True)
    return matches
