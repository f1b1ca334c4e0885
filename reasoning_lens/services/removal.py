"""Strip reasoning from a model response, leaving the final answer.

Usage:
    result = extract_reasoning(output)
    answer = remove_reasoning_from_content(output, result.content if result else None)
"""

from __future__ import annotations

import re

from reasoning_lens.patterns.library import (
    ANSWER_LABEL,
    ANSWER_LEAD_IN,
    CODE_FENCE,
    LIST_ITEM,
    MARKDOWN_HEADING,
    MARKER_FAMILIES,
    REMOVAL_MAX_REASONING_LINES,
    REMOVAL_MIN_LINE_CHARS,
    REMOVAL_MIN_REASONING_CHARS,
    STRUCTURAL_PATTERNS,
)
from reasoning_lens.services.enhancer import strip_enhancements

_BLANK_RUN = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)+")


def _remove_markers_once(text: str) -> str:
    # Balanced blocks
    for family in MARKER_FAMILIES:
        text = family.block.sub("", text)

    # Unclosed opening markers claim the rest of the text
    for family in MARKER_FAMILIES:
        opening = family.open.search(text)
        if opening:
            text = text[: opening.start()]

    # Orphan closing markers: what precedes them was reasoning
    for family in MARKER_FAMILIES:
        last = None
        for last in family.close.finditer(text):
            pass
        if last is not None:
            text = text[last.end() :]

    return text


def remove_explicit_markers(text: str) -> str:
    """Remove every explicit reasoning block and stray marker from ``text``.

    Repeats until stable, since removing one block can join the halves of
    another marker.
    """
    previous = None
    while previous != text:
        previous = text
        text = _remove_markers_once(text)
    return text


def remove_structural_sections(text: str) -> str:
    """Remove sections under reasoning-titled headings and labels."""
    for pattern in STRUCTURAL_PATTERNS:
        text = pattern.sub("", text)
    return text


def remove_reasoning_lines(text: str, extracted_reasoning: str) -> str:
    """Remove the opening lines of an already extracted reasoning block."""
    reasoning = strip_enhancements(extracted_reasoning)
    if len(reasoning) <= REMOVAL_MIN_REASONING_CHARS:
        return text

    lines = [
        line.strip()
        for line in reasoning.split("\n")
        if len(line.strip()) > REMOVAL_MIN_LINE_CHARS
    ]
    for line in lines[:REMOVAL_MAX_REASONING_LINES]:
        text = re.sub(re.escape(line), "", text, flags=re.IGNORECASE)
    return text


def _is_answer_start(line: str) -> bool:
    return bool(
        ANSWER_LABEL.match(line)
        or ANSWER_LEAD_IN.match(line)
        or line.startswith(CODE_FENCE)
        or LIST_ITEM.match(line)
        or MARKDOWN_HEADING.match(line)
    )


def drop_leading_reasoning(text: str) -> str:
    """Drop lines before the first line that opens the final answer."""
    lines = text.split("\n")
    for index, line in enumerate(lines):
        if _is_answer_start(line.strip()):
            if index > 0:
                return "\n".join(lines[index:])
            break
    return text


def remove_reasoning_from_content(content: str, extracted_reasoning: str | None = None) -> str:
    """Return ``content`` with its reasoning removed.

    Args:
        content: Full model response
        extracted_reasoning: Reasoning previously extracted from ``content``;
                             its first lines are removed verbatim when given

    Returns:
        The answer text, blank-line runs collapsed and trimmed. Blank input
        is returned unchanged.
    """
    if not content or not content.strip():
        return content

    cleaned = remove_explicit_markers(content)
    cleaned = remove_structural_sections(cleaned)

    if extracted_reasoning and extracted_reasoning.strip():
        cleaned = remove_reasoning_lines(cleaned, extracted_reasoning)

    cleaned = drop_leading_reasoning(cleaned)
    cleaned = _BLANK_RUN.sub("\n\n", cleaned)
    # Line removal can splice marker fragments back together
    return remove_explicit_markers(cleaned).strip()
