"""Post-processing for extracted reasoning.

Cleans whitespace and markup noise, re-sections long unstructured blocks
under synthesized labels, and truncates at a sentence boundary.
"""

from __future__ import annotations

import re

from reasoning_lens.patterns.library import (
    OPTION_CUES,
    SECTIONING_LONG_FORM_PARAGRAPHS,
    SECTIONING_MIN_CHARS,
    SECTIONING_MIN_PARAGRAPH_CHARS,
    STEP_CUES,
    TRUNCATE_NEWLINE_WINDOW,
    TRUNCATE_SENTENCE_WINDOW,
    TRUNCATION_MARKER,
)

_BULLET = re.compile(r"^[ \t]*[-*][ \t]+", re.MULTILINE)
_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_UNDERSCORE_RUN = re.compile(r"_{2,}")
_EMPHASIS_RUN = re.compile(r"\*{3,}")
_REPEATED_MARKS = re.compile(r"([!?])\1+")
_SPACE_BEFORE_MARK = re.compile(r"[ \t]+([.!?])")
_MISSING_SPACE = re.compile(r"([.!?])([A-Z])")
_SENTENCE_END = ".!?"

# Section labels
LABEL_PROBLEM = "**🎯 Understanding the problem**"
LABEL_OPTIONS = "**⚖️ Weighing the options**"
LABEL_APPROACH = "**📋 Approach**"
LABEL_DEEP_ANALYSIS = "**🔍 In-depth analysis**"
LABEL_STEP = "**⚙️ Step {n}**"
LABEL_REFLECTION = "**💭 Reflection {n}**"
LABEL_DECISION = "**✅ Final decision**"
LABEL_ANALYSIS = "**🔍 Analysis**"
LABEL_EVALUATION = "**❓ Evaluation**"
LABEL_CONCLUSION = "**✅ Conclusion**"
LABEL_FURTHER = "**💡 Further consideration**"


def clean_reasoning_content(text: str) -> str:
    """Normalise bullets, tabs, blank lines, punctuation and emphasis runs."""
    cleaned = _BULLET.sub("", text)
    cleaned = cleaned.replace("\t", "  ")
    cleaned = _EXCESS_NEWLINES.sub("\n\n", cleaned)
    cleaned = _UNDERSCORE_RUN.sub("", cleaned)
    cleaned = _EMPHASIS_RUN.sub("**", cleaned)
    cleaned = _REPEATED_MARKS.sub(r"\1", cleaned)
    cleaned = _SPACE_BEFORE_MARK.sub(r"\1", cleaned)
    return cleaned.strip()


def add_sections(text: str) -> str:
    """Split a long unstructured block into labelled sections.

    Only applies to text over 300 characters without existing ``##`` or
    ``**`` structure and with at least two substantial paragraphs. Labels
    follow problem framing, analysis, intermediate steps, then the decision,
    picked from question, step and option cues.
    """
    if len(text) <= SECTIONING_MIN_CHARS or "##" in text or "**" in text:
        return text

    paragraphs = [
        p.strip()
        for p in text.split("\n\n")
        if p.strip() and len(p) > SECTIONING_MIN_PARAGRAPH_CHARS
    ]
    if len(paragraphs) < 2:
        return text

    has_questions = "?" in text
    has_steps = STEP_CUES.search(text) is not None
    has_options = OPTION_CUES.search(text) is not None

    sections: list[str] = []
    if len(paragraphs) >= SECTIONING_LONG_FORM_PARAGRAPHS:
        sections.append(f"{LABEL_PROBLEM}\n{paragraphs[0]}")

        if has_options:
            second = LABEL_OPTIONS
        elif has_steps:
            second = LABEL_APPROACH
        else:
            second = LABEL_DEEP_ANALYSIS
        sections.append(f"{second}\n{paragraphs[1]}")

        for n, paragraph in enumerate(paragraphs[2:-1], start=1):
            title = (LABEL_STEP if has_steps else LABEL_REFLECTION).format(n=n)
            sections.append(f"{title}\n{paragraph}")

        sections.append(f"{LABEL_DECISION}\n{paragraphs[-1]}")
    else:
        sections.append(f"{LABEL_ANALYSIS}\n{paragraphs[0]}")
        second = LABEL_EVALUATION if has_questions else LABEL_CONCLUSION
        sections.append(f"{second}\n{paragraphs[1]}")
        for paragraph in paragraphs[2:]:
            sections.append(f"{LABEL_FURTHER}\n{paragraph}")

    return "\n\n".join(sections)


def enhance_reasoning_content(text: str) -> str:
    """Clean, re-section and tidy extracted reasoning."""
    enhanced = add_sections(clean_reasoning_content(text))
    enhanced = _MISSING_SPACE.sub(r"\1 \2", enhanced)
    enhanced = _EXCESS_NEWLINES.sub("\n\n", enhanced)
    return enhanced.strip()


def find_truncation_point(text: str, max_length: int) -> int:
    """Index to cut ``text`` at so the kept part fits ``max_length``.

    Preference order: the last sentence end within the final 30% of the
    window, the last line break within the final 20%, the last word break
    within the final 20%, then a hard cut.
    """
    limit = max(0, min(max_length, len(text)))

    sentence_floor = int(max_length * (1 - TRUNCATE_SENTENCE_WINDOW))
    for i in range(limit - 1, max(sentence_floor, 0) - 1, -1):
        if text[i] in _SENTENCE_END and (i + 1 >= len(text) or text[i + 1].isspace()):
            return i + 1

    break_floor = int(max_length * (1 - TRUNCATE_NEWLINE_WINDOW))
    newline = text.rfind("\n", break_floor, limit)
    if newline > 0:
        return newline

    space = text.rfind(" ", break_floor, limit)
    if space > 0:
        return space

    return limit


def truncate_reasoning(text: str, max_length: int) -> str:
    """Shorten ``text`` to ``max_length`` plus the truncation marker."""
    if len(text) <= max_length:
        return text
    cut = find_truncation_point(text, max_length)
    return text[:cut].rstrip() + TRUNCATION_MARKER


_SECTION_LABEL_LINE = re.compile(
    "|".join(
        "^" + re.escape(label).replace(re.escape("{n}"), r"\d+") + "$"
        for label in (
            LABEL_PROBLEM,
            LABEL_OPTIONS,
            LABEL_APPROACH,
            LABEL_DEEP_ANALYSIS,
            LABEL_STEP,
            LABEL_REFLECTION,
            LABEL_DECISION,
            LABEL_ANALYSIS,
            LABEL_EVALUATION,
            LABEL_CONCLUSION,
            LABEL_FURTHER,
        )
    ),
    re.MULTILINE,
)


def strip_enhancements(text: str) -> str:
    """Undo the visible additions of the enhancer: section labels and the truncation marker."""
    plain = text.replace(TRUNCATION_MARKER, "").replace(TRUNCATION_MARKER.strip(), "")
    return _SECTION_LABEL_LINE.sub("", plain).strip()
