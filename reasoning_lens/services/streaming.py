"""Incremental reasoning extraction for responses still being generated.

One StreamingExtractor per in-flight message. It moves through three
phases:

    SEARCHING     no opening marker seen yet
    ACCUMULATING  inside a marker block, collecting chunks
    COMPLETE      matching closing marker seen; later chunks are ignored

When several marker families appear, the stream follows whichever opens
first in the text. Batch extraction instead prefers the family listed
first in MARKER_FAMILIES, so the two can disagree on such mixed responses.

Usage:
    stream = create_streaming_extractor()
    for chunk in model_stream:
        partial = stream.process_chunk(chunk)
        if partial:
            show_thinking(partial.content)
    final = stream.finalize()
"""

from __future__ import annotations

import copy

from loguru import logger

from reasoning_lens.models.enums import Confidence, ExtractionMethod, StreamPhase
from reasoning_lens.models.types import ExtractionResult, StreamingState
from reasoning_lens.patterns.library import (
    MARKER_FAMILIES,
    STREAM_MIN_CHARS_FOR_CONFIDENCE,
    STREAM_MIN_CHARS_FOR_PARTIAL,
    STREAM_RESCAN_CHARS,
    MarkerFamily,
)
from reasoning_lens.patterns.scorer import (
    RunningConfidence,
    analyze_patterns,
    streaming_confidence,
)
from reasoning_lens.services.enhancer import enhance_reasoning_content, truncate_reasoning
from reasoning_lens.services.extractor import ReasoningExtractor, get_reasoning_extractor


class StreamingExtractor:
    """State machine classifying reasoning chunk by chunk.

    Marker searches resume near the end of the buffer and the running
    confidence is kept incrementally, so the scanning done per chunk does
    not grow with the stream. Pattern analysis waits for the closing
    marker or finalize(), so partial results carry no patterns.

    Not thread-safe; a single message owns each instance.
    """

    def __init__(self, extractor: ReasoningExtractor | None = None) -> None:
        self._extractor = extractor
        self._state = StreamingState()
        self._family: MarkerFamily | None = None
        self._content_start = 0
        self._accumulated = ""
        self._confidence = RunningConfidence()

    @property
    def extractor(self) -> ReasoningExtractor:
        if self._extractor is None:
            self._extractor = get_reasoning_extractor()
        return self._extractor

    def process_chunk(self, chunk: str) -> ExtractionResult | None:
        """Feed the next chunk of the response.

        Returns:
            A partial result once more than 200 characters of reasoning
            have accumulated, or when the closing marker arrives; None
            otherwise and for every call after completion.
        """
        state = self._state
        if state.is_complete:
            return None

        state.buffer += chunk
        rescan_from = max(0, len(state.buffer) - len(chunk) - STREAM_RESCAN_CHARS)

        if state.phase is StreamPhase.SEARCHING:
            self._search(rescan_from)
        else:
            self._accumulate(chunk, rescan_from)

        accumulated = self._accumulated
        if len(accumulated) > STREAM_MIN_CHARS_FOR_CONFIDENCE:
            state.confidence = (
                streaming_confidence(accumulated)
                if state.is_complete
                else self._confidence.update(accumulated)
            )

        if accumulated and (len(accumulated) > STREAM_MIN_CHARS_FOR_PARTIAL or state.is_complete):
            method = (
                ExtractionMethod.EXPLICIT if state.current_pattern else ExtractionMethod.PATTERN
            )
            return self._build_result(
                accumulated.strip(), method, with_patterns=state.is_complete
            )
        return None

    def get_state(self) -> StreamingState:
        """Snapshot of the current state; mutating it does not affect the stream."""
        return copy.deepcopy(self._state)

    def finalize(self) -> ExtractionResult | None:
        """Produce the best result for everything received so far.

        Accumulated marker content is enhanced and truncated the same way
        as batch extraction. Without any, the whole buffer goes through the
        batch cascade, uncached.
        """
        state = self._state
        accumulated = self._accumulated.strip()
        if not accumulated:
            logger.debug("Stream finalized without marker content; running batch extraction")
            return self.extractor.extract(state.buffer, use_cache=False)

        content = truncate_reasoning(
            enhance_reasoning_content(accumulated), self.extractor.default_max_length
        )
        if not content:
            return None

        method = ExtractionMethod.EXPLICIT if state.marker_ever_seen else ExtractionMethod.HEURISTIC
        return self._build_result(content, method)

    def _search(self, rescan_from: int) -> None:
        # Earliest opening in the text wins, whatever its family's table rank
        state = self._state
        earliest = None
        for family in MARKER_FAMILIES:
            opening = family.open.search(state.buffer, rescan_from)
            if opening and (earliest is None or opening.start() < earliest[1].start()):
                earliest = (family, opening)

        if earliest is None:
            return

        family, opening = earliest
        self._family = family
        self._content_start = opening.end()
        state.current_pattern = opening.group(0)
        state.marker_ever_seen = True
        state.phase = StreamPhase.ACCUMULATING
        logger.debug(f"Stream reasoning marker found: {state.current_pattern}")

        if not self._close(self._content_start):
            after = state.buffer[self._content_start :]
            if after.strip():
                self._append(after)

    def _accumulate(self, chunk: str, rescan_from: int) -> None:
        if not self._close(rescan_from):
            self._append(chunk)

    def _append(self, piece: str) -> None:
        self._state.extracted_chunks.append(piece)
        self._accumulated += piece

    def _close(self, rescan_from: int) -> bool:
        state = self._state
        if self._family is None:
            return False
        closing = self._family.close.search(state.buffer, max(self._content_start, rescan_from))
        if closing is None:
            return False

        final = state.buffer[self._content_start : closing.start()].strip()
        state.extracted_chunks = [final] if final else []
        self._accumulated = final
        state.phase = StreamPhase.COMPLETE
        logger.debug(f"Stream reasoning block closed after {len(state.buffer)} chars")
        return True

    def _build_result(
        self, content: str, method: ExtractionMethod, with_patterns: bool = True
    ) -> ExtractionResult:
        state = self._state
        return ExtractionResult(
            content=content,
            original_length=len(state.buffer),
            extraction_method=method,
            confidence=Confidence.from_score(state.confidence),
            patterns=tuple(analyze_patterns(content)) if with_patterns else (),
            streaming_chunks=tuple(state.extracted_chunks),
        )


def create_streaming_extractor(extractor: ReasoningExtractor | None = None) -> StreamingExtractor:
    """Start a streaming session for one message."""
    return StreamingExtractor(extractor)
