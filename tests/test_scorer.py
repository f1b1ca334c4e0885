"""Tests for the heuristic scorer."""

import pytest

from reasoning_lens.models.enums import PatternType
from reasoning_lens.patterns.scorer import (
    RunningConfidence,
    analyze_patterns,
    context_confidence,
    extract_keywords,
    is_likely_reasoning,
    streaming_confidence,
)

GROWING_TEXT = (
    "We look at the shard layout of the cache. " * 6
    + "However the const table differs? Then we weigh it next. " * 2
)


class TestIsLikelyReasoning:
    """Tests for is_likely_reasoning()."""

    def test_empty_text(self):
        assert is_likely_reasoning("") is False

    def test_too_few_words(self):
        """Indicator words alone do not make short text reasoning."""
        assert is_likely_reasoning("Therefore I analyse the problem.") is False

    def test_two_indicators(self):
        text = (
            "The user is asking about caching, so I need to analyze the problem "
            "carefully before answering."
        )
        assert is_likely_reasoning(text) is True

    def test_single_indicator_short_text(self):
        text = "We picked the blue one because it matched the rest of the problem set."
        assert len(text) <= 100
        assert is_likely_reasoning(text) is False

    def test_single_indicator_long_text(self):
        text = (
            "We picked the blue one because it matched the rest of the problem set "
            "and the colours of the existing rooms in the house."
        )
        assert len(text) > 100
        assert is_likely_reasoning(text) is True

    def test_plain_statement(self):
        text = "Paris is the capital of France and has many museums to visit."
        assert is_likely_reasoning(text) is False


class TestContextConfidence:
    """Tests for context_confidence()."""

    def test_base_confidence(self):
        assert context_confidence("plain words here", 0, 5) == pytest.approx(0.5)

    def test_connective_families_raise_confidence(self):
        text = "First I consider it, therefore done."
        assert context_confidence(text, 0, 5) == pytest.approx(0.8)

    def test_code_lowers_confidence(self):
        text = "```python\nx = 1\n```"
        assert context_confidence(text, 0, 3) == pytest.approx(0.3)

    def test_window_is_bounded(self):
        """Only +-100 characters around the match are inspected."""
        text = "therefore " + "x" * 300 + " plain"
        end = len(text)
        assert context_confidence(text, end - 5, end) == pytest.approx(0.5)

    def test_long_window_bonus(self):
        text = "a" * 500
        assert context_confidence(text, 0, 1) == pytest.approx(0.5)
        assert context_confidence(text, 250, 251) == pytest.approx(0.6)
        assert context_confidence(text, 100, 400) == pytest.approx(0.7)


class TestStreamingConfidence:
    """Tests for streaming_confidence()."""

    def test_base(self):
        assert streaming_confidence("") == pytest.approx(0.3)

    def test_every_occurrence_counts(self):
        assert streaming_confidence("therefore therefore") == pytest.approx(0.5)

    def test_question_bonus(self):
        assert streaming_confidence("why?") == pytest.approx(0.4)

    def test_code_penalty(self):
        assert streaming_confidence("function") == pytest.approx(0.1)

    def test_clamped(self):
        assert streaming_confidence("therefore " * 20) == 1.0


class TestRunningConfidence:
    """RunningConfidence agrees with streaming_confidence on growing text."""

    @pytest.mark.parametrize("size", [1, 4, 13, 100])
    def test_matches_full_scan(self, size):
        running = RunningConfidence()
        for end in range(size, len(GROWING_TEXT) + size, size):
            text = GROWING_TEXT[:end]
            assert running.update(text) == pytest.approx(streaming_confidence(text))

        assert running.update(GROWING_TEXT) == pytest.approx(0.8)

    def test_tail_match_can_disappear(self):
        running = RunningConfidence()

        assert running.update("therefore first") == pytest.approx(0.5)
        assert running.update("therefore firsthand") == pytest.approx(0.4)


class TestExtractKeywords:
    """Tests for extract_keywords()."""

    def test_drops_stop_words_and_short_tokens(self):
        keywords = extract_keywords("The Reasoning and the analysis of caching")
        assert keywords == frozenset({"reasoning", "analysis", "caching"})

    def test_french_stop_words(self):
        assert extract_keywords("les données dans une table") == frozenset({"données", "table"})


class TestAnalyzePatterns:
    """Tests for analyze_patterns()."""

    def test_empty(self):
        assert analyze_patterns("") == []

    def test_decision_matches(self):
        matches = analyze_patterns("We should decide which cache to choose.")

        assert {m.type for m in matches} == {PatternType.DECISION}
        assert len(matches) == 2
        assert matches[0].confidence == pytest.approx(0.85 * 0.5)
        assert matches[0].keywords in (frozenset({"decide"}), frozenset({"choose"}))

    def test_sorted_by_confidence(self):
        text = (
            "First, we analyze the problem. Then we decide which approach to choose? "
            "Therefore, the conclusion is clear."
        )
        matches = analyze_patterns(text)

        assert len(matches) > 3
        confidences = [m.confidence for m in matches]
        assert confidences == sorted(confidences, reverse=True)
        assert all(0.0 <= c <= 1.0 for c in confidences)

    def test_positions_point_into_text(self):
        text = "Let me consider the factor of cost."
        for match in analyze_patterns(text):
            assert text[match.position.start : match.position.end].strip() == match.content
