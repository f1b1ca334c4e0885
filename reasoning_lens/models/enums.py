"""Consolidated domain enums for reasoning extraction."""

from enum import StrEnum


class ExtractionMethod(StrEnum):
    """Strategy of the extraction cascade that produced a result.

    Ordered by decreasing certainty.
    """

    EXPLICIT = "explicit"  # Dedicated open/close markers
    PATTERN = "pattern"  # Reasoning-titled headings or labels
    HEURISTIC = "heuristic"  # Line scan with quality indicators
    FALLBACK = "fallback"  # Paragraphs that independently look like reasoning


class Confidence(StrEnum):
    """Coarse confidence label attached to an extraction."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    def bumped(self) -> "Confidence":
        """Return the next level up (HIGH stays HIGH)."""
        if self is Confidence.LOW:
            return Confidence.MEDIUM
        return Confidence.HIGH

    @classmethod
    def from_score(cls, score: float) -> "Confidence":
        """Bucket a numeric estimate: >0.7 high, >0.4 medium, else low."""
        if score > 0.7:
            return cls.HIGH
        if score > 0.4:
            return cls.MEDIUM
        return cls.LOW


class PatternType(StrEnum):
    """Lexical reasoning cue categories of the pattern library."""

    QUESTION = "question"
    ANALYSIS = "analysis"
    DECISION = "decision"
    STEP = "step"
    CONSIDERATION = "consideration"
    CONCLUSION = "conclusion"


class StreamPhase(StrEnum):
    """States of the streaming extractor.

    - SEARCHING: no opening marker seen yet
    - ACCUMULATING: inside a detected reasoning span
    - COMPLETE: closing marker observed, further chunks are ignored
    """

    SEARCHING = "searching"
    ACCUMULATING = "accumulating"
    COMPLETE = "complete"
