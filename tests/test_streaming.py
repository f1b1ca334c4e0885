"""Tests for the streaming extractor state machine."""

import time

import pytest

from reasoning_lens.models.enums import Confidence, ExtractionMethod, StreamPhase
from reasoning_lens.patterns.scorer import streaming_confidence
from reasoning_lens.services.streaming import StreamingExtractor, create_streaming_extractor

EXPLICIT_TEXT = (
    "<thinking>First, I need to consider the cache size. "
    "Therefore the eviction ratio matters more than the TTL.</thinking>\n\n"
    "The answer is 100 entries."
)

LONG_REASONING = "Then we consider the next shard and therefore its memory. " * 5


@pytest.fixture
def stream(extractor) -> StreamingExtractor:
    return create_streaming_extractor(extractor)


class TestPhases:
    """Transitions between SEARCHING, ACCUMULATING and COMPLETE."""

    def test_starts_searching(self, stream):
        state = stream.get_state()
        assert state.phase is StreamPhase.SEARCHING
        assert state.buffer == ""
        assert state.current_pattern is None

    def test_no_marker_stays_searching(self, stream):
        assert stream.process_chunk("Just an answer without markers.") is None
        assert stream.get_state().phase is StreamPhase.SEARCHING
        assert stream.get_state().extracted_chunks == []

    def test_opening_marker_starts_accumulating(self, stream):
        assert stream.process_chunk("<thinking>Let me see") is None

        state = stream.get_state()
        assert state.phase is StreamPhase.ACCUMULATING
        assert state.current_pattern == "<thinking>"
        assert state.extracted_chunks == ["Let me see"]
        assert state.marker_ever_seen is True

    def test_marker_split_across_chunks(self, stream):
        stream.process_chunk("<thin")
        assert stream.get_state().phase is StreamPhase.SEARCHING

        stream.process_chunk("king>Hmm")
        assert stream.get_state().phase is StreamPhase.ACCUMULATING

    def test_closing_marker_completes(self, stream):
        stream.process_chunk("<reasoning>Because X, ")

        result = stream.process_chunk("therefore Y.</reasoning> Done.")

        assert result is not None
        assert result.content == "Because X, therefore Y."
        assert result.extraction_method is ExtractionMethod.EXPLICIT
        assert result.streaming_chunks == ("Because X, therefore Y.",)
        assert stream.get_state().is_complete

    def test_open_and_close_in_one_chunk(self, stream):
        result = stream.process_chunk("<think>quick</think> done")

        assert result.content == "quick"
        assert stream.get_state().phase is StreamPhase.COMPLETE

    def test_chunks_after_complete_are_ignored(self, stream):
        stream.process_chunk("<think>quick</think>")
        buffer = stream.get_state().buffer

        assert stream.process_chunk("more text") is None
        assert stream.get_state().buffer == buffer

    def test_earliest_marker_wins(self, stream):
        stream.process_chunk("[REASONING] a <thinking> b")
        assert stream.get_state().current_pattern == "[REASONING]"

    def test_close_must_match_family(self, stream):
        stream.process_chunk("<thinking>text</reasoning> more")
        assert stream.get_state().phase is StreamPhase.ACCUMULATING

    def test_mixed_families_follow_first_opening(self, stream, extractor):
        text = (
            "<reasoning>Alpha reasoning here.</reasoning> "
            "<thinking>Beta thinking here.</thinking>"
        )

        streamed = stream.process_chunk(text)
        batch = extractor.extract(text, use_cache=False)

        assert streamed.content == "Alpha reasoning here."
        assert batch.content == "Beta thinking here."

    def test_close_without_family_is_not_complete(self, stream):
        assert stream._close(0) is False
        assert stream.get_state().phase is StreamPhase.SEARCHING


class TestPartialResults:
    """Partial results and the running confidence."""

    def test_short_content_has_no_confidence(self, stream):
        stream.process_chunk("<thinking>short")
        assert stream.get_state().confidence == 0.0

    def test_confidence_updates_past_fifty_chars(self, stream):
        stream.process_chunk("<thinking>" + "therefore we go on " * 3)
        assert stream.get_state().confidence > 0.3

    def test_partial_past_two_hundred_chars(self, stream):
        stream.process_chunk("<reasoning>")

        result = stream.process_chunk(LONG_REASONING)

        assert result is not None
        assert result.content == LONG_REASONING.strip()
        assert result.extraction_method is ExtractionMethod.EXPLICIT
        assert result.confidence is Confidence.HIGH
        assert result.streaming_chunks == (LONG_REASONING,)
        assert result.original_length == len("<reasoning>") + len(LONG_REASONING)

    def test_patterns_only_once_complete(self, stream):
        stream.process_chunk("<reasoning>")

        partial = stream.process_chunk(LONG_REASONING)
        final = stream.process_chunk("</reasoning>")

        assert partial.patterns == ()
        assert final.patterns != ()


class TestFinalize:
    """Tests for finalize()."""

    def test_nothing_received(self, stream):
        assert stream.finalize() is None

    def test_streamed_equals_batch_char_by_char(self, stream, extractor):
        for ch in EXPLICIT_TEXT:
            stream.process_chunk(ch)

        streamed = stream.finalize()
        batch = extractor.extract(EXPLICIT_TEXT, use_cache=False)

        assert streamed.content == batch.content
        assert streamed.extraction_method is ExtractionMethod.EXPLICIT

    @pytest.mark.parametrize("size", [1, 3, 7, 64])
    def test_chunk_size_does_not_matter(self, extractor, size):
        stream = create_streaming_extractor(extractor)
        for start in range(0, len(EXPLICIT_TEXT), size):
            stream.process_chunk(EXPLICIT_TEXT[start : start + size])

        assert stream.finalize().content == extractor.extract(EXPLICIT_TEXT).content

    def test_unclosed_block(self, stream):
        stream.process_chunk("<thinking>I am still weighing ")
        stream.process_chunk("both designs")

        result = stream.finalize()

        assert result.content == "I am still weighing both designs"
        assert result.extraction_method is ExtractionMethod.EXPLICIT

    def test_falls_back_to_batch_without_markers(self, stream, extractor):
        text = (
            "I need to consider how the cache behaves under load.\n"
            "However, the eviction policy matters more than the size.\n"
            "Answer: keep 100 entries."
        )
        stream.process_chunk(text[:40])
        stream.process_chunk(text[40:])

        result = stream.finalize()

        assert result.extraction_method is ExtractionMethod.HEURISTIC
        assert len(extractor.cache) == 0


class TestLongStreams:
    """Per-chunk work stays bounded as the reasoning grows."""

    def test_thousands_of_small_chunks(self, stream):
        started = time.perf_counter()

        stream.process_chunk("<thinking>")
        for _ in range(3000):
            stream.process_chunk("therefore we ")
        for _ in range(1000):
            stream.process_chunk("x")

        assert time.perf_counter() - started < 3.0
        state = stream.get_state()
        assert state.phase is StreamPhase.ACCUMULATING
        assert len(state.extracted_chunks) == 4000

    def test_running_confidence_matches_full_scan(self, stream):
        text = (
            "First the cache? " + "we look at the memory layout of each shard " * 4 + "then firstly"
        )
        stream.process_chunk("<analysis>")
        for start in range(0, len(text), 5):
            stream.process_chunk(text[start : start + 5])

        assert stream.get_state().confidence == pytest.approx(streaming_confidence(text))
        assert stream.get_state().confidence == pytest.approx(0.7)


class TestGetState:
    """get_state() never exposes live state."""

    def test_snapshot_is_a_copy(self, stream):
        stream.process_chunk("<thinking>abc")

        snapshot = stream.get_state()
        snapshot.buffer = "tampered"
        snapshot.extracted_chunks.append("tampered")

        state = stream.get_state()
        assert state.buffer == "<thinking>abc"
        assert state.extracted_chunks == ["abc"]

    def test_to_dict(self, stream):
        stream.process_chunk("<think>x</think>")
        data = stream.get_state().to_dict()
        assert data["phase"] == "complete"
        assert data["is_complete"] is True
