"""Batch reasoning extraction.

Runs an ordered cascade of strategies over a complete model response and
keeps the first that yields content:

1. Explicit markers anywhere (<thinking>, <think>, [REASONING], ...)
2. A leading marker, including one whose closing tag never arrived
3. Reasoning-titled headings and labels (**Thinking**, ## Analysis, ...)
4. A line scan that stops at the first final-answer opener
5. Paragraphs that each independently read like reasoning

The winning text goes through the content enhancer, is analysed for
reasoning patterns, and is memoised in the extractor's cache.

Usage:
    extractor = ReasoningExtractor()
    result = extractor.extract(model_output)
    if result:
        print(result.extraction_method, result.confidence, result.content)
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from loguru import logger

from reasoning_lens.config import ReasoningSettings, get_settings
from reasoning_lens.models.enums import Confidence, ExtractionMethod
from reasoning_lens.models.types import CacheStats, ExtractionResult
from reasoning_lens.patterns.library import (
    ANSWER_LABEL,
    CAUSAL_CLAUSE,
    CODE_FENCE,
    FALLBACK_MAX_CHARS,
    FALLBACK_MAX_PARAGRAPHS,
    FALLBACK_MEDIUM_CHARS,
    FALLBACK_MEDIUM_PARAGRAPHS,
    FALLBACK_STOP,
    HEURISTIC_CAUSAL_MIN_CHARS,
    HEURISTIC_HIGH_SCORE,
    HEURISTIC_LONG_BLOCK_LINES,
    HEURISTIC_MAX_LINES,
    HEURISTIC_MEDIUM_SCORE,
    HEURISTIC_MIN_CONNECTIVES,
    HEURISTIC_MIN_LINES,
    HEURISTIC_MIN_LINES_UNSCORED,
    HEURISTIC_QUESTION_MIN_CHARS,
    HEURISTIC_STRUCTURED_STOP_AFTER,
    LEADING_FAMILIES,
    LIST_ITEM,
    LOGICAL_CONNECTIVES,
    MARKER_FAMILIES,
    QUALITY_INDICATORS,
    STRUCTURAL_PATTERNS,
    TRAILING_QUESTION,
)
from reasoning_lens.patterns.scorer import analyze_patterns, is_likely_reasoning
from reasoning_lens.services.cache import ReasoningCache
from reasoning_lens.services.enhancer import enhance_reasoning_content, truncate_reasoning

DEFAULT_MAX_LENGTH = 10000


@dataclass(frozen=True)
class _Draft:
    """Raw output of one cascade strategy, before enhancement."""

    content: str
    method: ExtractionMethod
    confidence: Confidence


def extract_explicit(content: str) -> _Draft | None:
    """Join every block of the first marker family present in ``content``."""
    for family in MARKER_FAMILIES:
        blocks = family.block.findall(content)
        if not blocks:
            continue
        joined = "\n\n".join(blocks).strip()
        if joined:
            return _Draft(joined, ExtractionMethod.EXPLICIT, Confidence.HIGH)
    return None


def extract_leading(content: str) -> _Draft | None:
    """Take the block the trimmed text opens with.

    A leading marker without its closing tag (generation cut short) claims
    everything after it.
    """
    stripped = content.strip()
    for family in LEADING_FAMILIES:
        opening = family.open.match(stripped)
        if not opening:
            continue
        closing = family.close.search(stripped, opening.end())
        body = stripped[opening.end() : closing.start() if closing else len(stripped)].strip()
        if body:
            return _Draft(body, ExtractionMethod.EXPLICIT, Confidence.HIGH)
    return None


def extract_structural(content: str) -> _Draft | None:
    """Collect sections under reasoning-titled headings or labels."""
    for pattern in STRUCTURAL_PATTERNS:
        sections = pattern.findall(content)
        if not sections:
            continue
        joined = "\n\n".join(sections).strip()
        if joined:
            return _Draft(joined, ExtractionMethod.PATTERN, Confidence.MEDIUM)
    return None


def _is_structured_line(line: str) -> bool:
    return line.startswith(CODE_FENCE) or line.startswith("##") or bool(LIST_ITEM.match(line))


def _score_line(line: str) -> int:
    score = 0
    if any(indicator.search(line) for indicator in QUALITY_INDICATORS):
        score += 1
    if TRAILING_QUESTION.search(line) and len(line) > HEURISTIC_QUESTION_MIN_CHARS:
        score += 1
    if len(line) > HEURISTIC_CAUSAL_MIN_CHARS and CAUSAL_CLAUSE.search(line):
        score += 1
    connectives = len(LOGICAL_CONNECTIVES.findall(line))
    if connectives >= HEURISTIC_MIN_CONNECTIVES:
        score += connectives
    return score


def extract_heuristic(content: str) -> _Draft | None:
    """Scan lines from the top until the final answer starts.

    Stops at an answer label (``Answer:``, ``Here's:``...), or at code
    fences, lists and headings once more than ten reasoning lines were
    collected; structured lines before any reasoning are skipped.
    """
    collected: list[str] = []
    non_blank = 0
    score = 0

    for line in content.split("\n"):
        if len(collected) >= HEURISTIC_MAX_LINES:
            break

        stripped = line.strip()
        if not stripped:
            if non_blank:
                collected.append(line)
            continue

        if ANSWER_LABEL.match(stripped):
            break

        if _is_structured_line(stripped):
            if not non_blank:
                continue
            if len(collected) > HEURISTIC_STRUCTURED_STOP_AFTER:
                break

        score += _score_line(stripped)
        collected.append(line)
        non_blank += 1

    if non_blank < HEURISTIC_MIN_LINES:
        return None

    block = "\n".join(collected).strip()
    if score == 0 and (non_blank < HEURISTIC_MIN_LINES_UNSCORED or not is_likely_reasoning(block)):
        return None

    if score >= HEURISTIC_HIGH_SCORE:
        confidence = Confidence.HIGH
    elif score >= HEURISTIC_MEDIUM_SCORE:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    if non_blank > HEURISTIC_LONG_BLOCK_LINES:
        confidence = confidence.bumped()

    return _Draft(block, ExtractionMethod.HEURISTIC, confidence)


def extract_smart_fallback(content: str) -> _Draft | None:
    """Keep leading paragraphs that each look like reasoning on their own."""
    kept: list[str] = []
    total_chars = 0
    paragraph: list[str] = []

    def flush() -> bool:
        """Judge the pending paragraph; True once the caps are reached."""
        nonlocal total_chars
        if not paragraph:
            return False
        text = "\n".join(paragraph)
        paragraph.clear()
        if is_likely_reasoning(text):
            kept.append(text)
            total_chars += len(text)
        return len(kept) >= FALLBACK_MAX_PARAGRAPHS or total_chars > FALLBACK_MAX_CHARS

    for line in content.split("\n"):
        stripped = line.strip()
        if not stripped:
            if flush():
                break
            continue
        if stripped.startswith(CODE_FENCE) or FALLBACK_STOP.match(stripped):
            break
        paragraph.append(line)

    if len(kept) < FALLBACK_MAX_PARAGRAPHS and total_chars <= FALLBACK_MAX_CHARS:
        flush()

    if not kept:
        return None

    if len(kept) >= FALLBACK_MEDIUM_PARAGRAPHS or total_chars > FALLBACK_MEDIUM_CHARS:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW
    return _Draft("\n\n".join(kept).strip(), ExtractionMethod.FALLBACK, confidence)


class ReasoningExtractor:
    """Extract reasoning from complete model responses.

    Holds the result cache it reads from and writes to, so tests and hosts
    can inject an isolated or shared instance.

    Example:
        >>> extractor = ReasoningExtractor()
        >>> result = extractor.extract("<thinking>Because X, therefore Y.</thinking>Y.")
        >>> result.content
        'Because X, therefore Y.'
        >>> result.extraction_method, result.confidence
        (<ExtractionMethod.EXPLICIT: 'explicit'>, <Confidence.HIGH: 'high'>)
    """

    def __init__(
        self,
        cache: ReasoningCache | None = None,
        default_max_length: int = DEFAULT_MAX_LENGTH,
    ) -> None:
        self.cache = cache if cache is not None else ReasoningCache()
        self.default_max_length = default_max_length

    @classmethod
    def from_settings(cls, settings: ReasoningSettings) -> ReasoningExtractor:
        cache = ReasoningCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
            eviction_ratio=settings.cache_eviction_ratio,
            key_prefix_chars=settings.cache_key_prefix_chars,
        )
        return cls(cache=cache, default_max_length=settings.default_max_length)

    def extract(
        self,
        content: str,
        max_length: int | None = None,
        use_cache: bool = True,
    ) -> ExtractionResult | None:
        """Extract the reasoning part of ``content``.

        Args:
            content: Full model response
            max_length: Truncation limit (defaults to the configured limit)
            use_cache: Read from and write to the cache. Only extractions
                       at the default limit are cached.

        Returns:
            ExtractionResult, or None for blank input or when no strategy
            finds reasoning.
        """
        if not content or not content.strip():
            return None

        limit = self.default_max_length if max_length is None else max_length
        cacheable = use_cache and limit == self.default_max_length
        cache_key = self.cache.make_key(content)

        if cacheable:
            cached = self.cache.get(cache_key, content)
            if cached is not None:
                logger.debug(f"Reasoning cache hit: {cache_key}")
                return cached

        draft = self._run_cascade(content)
        if draft is None:
            return None

        text = truncate_reasoning(enhance_reasoning_content(draft.content), limit)
        if not text:
            return None

        result = ExtractionResult(
            content=text,
            original_length=len(content),
            extraction_method=draft.method,
            confidence=draft.confidence,
            patterns=tuple(analyze_patterns(text)),
            cache_key=cache_key,
        )

        if cacheable:
            self.cache.set(cache_key, result, content)
        return result

    def _run_cascade(self, content: str) -> _Draft | None:
        for strategy in (extract_explicit, extract_leading, extract_structural, extract_heuristic):
            draft = strategy(content)
            if draft is not None:
                logger.debug(f"Reasoning extracted by {strategy.__name__} ({draft.confidence})")
                return draft

        if is_likely_reasoning(content):
            draft = extract_smart_fallback(content)
            if draft is not None:
                logger.debug(f"Reasoning extracted by paragraph fallback ({draft.confidence})")
                return draft

        return None


@lru_cache(maxsize=1)
def get_reasoning_extractor() -> ReasoningExtractor:
    """Get the process-wide extractor built from settings."""
    return ReasoningExtractor.from_settings(get_settings())


def reset_reasoning_extractor() -> None:
    """Drop the process-wide extractor (and its cache)."""
    get_reasoning_extractor.cache_clear()


def extract_reasoning(
    content: str,
    max_length: int | None = None,
    use_cache: bool = True,
) -> ExtractionResult | None:
    """Extract reasoning with the process-wide extractor.

    ``max_length=None`` uses the configured default, the only limit whose
    results are cached.
    """
    return get_reasoning_extractor().extract(content, max_length=max_length, use_cache=use_cache)


def clear_reasoning_cache() -> None:
    """Empty the process-wide result cache."""
    get_reasoning_extractor().cache.clear()


def get_cache_stats() -> CacheStats:
    """Usage statistics of the process-wide result cache."""
    return get_reasoning_extractor().cache.stats()
