"""Declarative pattern library for reasoning detection.

Everything the extractors match against lives here: explicit marker
families, structural heading patterns, answer openers, the weighted
classification rules and the quality indicators used by the heuristic
scans. Thresholds are named constants so they can be tuned in one place.

Vocabulary is bilingual (English/French): the chat models this engine
serves answer in both.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from reasoning_lens.models.enums import PatternType

_I = re.IGNORECASE
_IM = re.IGNORECASE | re.MULTILINE

# -- Thresholds ----------------------------------------------------------------

# is_likely_reasoning
MIN_REASONING_WORDS = 10
MIN_INDICATORS_SHORT_TEXT = 2
SINGLE_INDICATOR_MIN_CHARS = 100

# context_confidence
CONTEXT_RADIUS = 100
CONTEXT_BASE_CONFIDENCE = 0.5
CONTEXT_FAMILY_BONUS = 0.1
CONTEXT_LENGTH_STEPS = (200, 400)
CONTEXT_LENGTH_BONUS = 0.1
CONTEXT_CODE_PENALTY = 0.2

# streaming_confidence
STREAM_BASE_CONFIDENCE = 0.3
STREAM_INDICATOR_BONUS = 0.1
STREAM_QUESTION_BONUS = 0.1
STREAM_LENGTH_STEPS = (100, 300)
STREAM_LENGTH_BONUS = 0.1
STREAM_CODE_PENALTY = 0.2
STREAM_MIN_CHARS_FOR_CONFIDENCE = 50
STREAM_MIN_CHARS_FOR_PARTIAL = 200
# Tail rescanned on each chunk; longer than any marker or connective
STREAM_RESCAN_CHARS = 64

# Heuristic line scan
HEURISTIC_MAX_LINES = 200
HEURISTIC_MIN_LINES = 2
HEURISTIC_MIN_LINES_UNSCORED = 5
HEURISTIC_STRUCTURED_STOP_AFTER = 10
HEURISTIC_MEDIUM_SCORE = 2
HEURISTIC_HIGH_SCORE = 3
HEURISTIC_LONG_BLOCK_LINES = 15
HEURISTIC_QUESTION_MIN_CHARS = 10
HEURISTIC_CAUSAL_MIN_CHARS = 80
HEURISTIC_MIN_CONNECTIVES = 2

# Smart paragraph fallback
FALLBACK_MAX_PARAGRAPHS = 15
FALLBACK_MAX_CHARS = 8000
FALLBACK_MEDIUM_PARAGRAPHS = 2
FALLBACK_MEDIUM_CHARS = 500

# Content enhancer
SECTIONING_MIN_CHARS = 300
SECTIONING_MIN_PARAGRAPH_CHARS = 20
SECTIONING_LONG_FORM_PARAGRAPHS = 4
TRUNCATE_SENTENCE_WINDOW = 0.3
TRUNCATE_NEWLINE_WINDOW = 0.2
TRUNCATION_MARKER = "\n\n[Reasoning truncated for readability...]"

# Reasoning removal
REMOVAL_MIN_REASONING_CHARS = 50
REMOVAL_MAX_REASONING_LINES = 5
REMOVAL_MIN_LINE_CHARS = 10

# Analytics
ANALYTICS_MIN_SENTENCE_CHARS = 10
ANALYTICS_READABLE_SENTENCE_CHARS = 100
ANALYTICS_READABILITY_SPREAD = 200
ANALYTICS_LOW_CONFIDENCE = 0.5
ANALYTICS_MIN_DISTINCT_TYPES = 3
ANALYTICS_LOW_READABILITY = 0.6

# -- Explicit markers ----------------------------------------------------------


@dataclass(frozen=True)
class MarkerFamily:
    """One family of paired reasoning delimiters."""

    name: str
    open: re.Pattern[str]
    close: re.Pattern[str]
    block: re.Pattern[str]
    leading: bool = True

    @classmethod
    def xml(cls, tag: str, leading: bool = True) -> MarkerFamily:
        open_src = rf"<{tag}(?:\s[^>]*)?>"
        close_src = rf"</{tag}\s*>"
        return cls(
            name=tag,
            open=re.compile(open_src, _I),
            close=re.compile(close_src, _I),
            block=re.compile(rf"{open_src}([\s\S]*?){close_src}", _I),
            leading=leading,
        )

    @classmethod
    def bracket(cls, tag: str, leading: bool = False) -> MarkerFamily:
        open_src = rf"\[{tag}\]"
        close_src = rf"\[/{tag}\]"
        return cls(
            name=tag,
            open=re.compile(open_src, _I),
            close=re.compile(close_src, _I),
            block=re.compile(rf"{open_src}([\s\S]*?){close_src}", _I),
            leading=leading,
        )


# Search order matters: the first family with any match wins.
MARKER_FAMILIES: tuple[MarkerFamily, ...] = (
    MarkerFamily.xml("thinking"),
    MarkerFamily.xml("think"),
    MarkerFamily.xml("thought", leading=False),
    MarkerFamily.xml("reasoning"),
    MarkerFamily.xml("analyse"),
    MarkerFamily.xml("analysis"),
    MarkerFamily.xml("reflection"),
    MarkerFamily.bracket("THINKING"),
    MarkerFamily.bracket("REASONING"),
    MarkerFamily.bracket("ANALYSE"),
)

LEADING_FAMILIES: tuple[MarkerFamily, ...] = tuple(f for f in MARKER_FAMILIES if f.leading)

# -- Structural headings -------------------------------------------------------

_BOLD_LABELS = (
    "Thinking|Reasoning|Raisonnement|Analysis|Analyse|Réflexion|Reflection|Approach|Approche"
)
_COLON_LABELS = "Thinking|Reasoning|Raisonnement|Analysis|Analyse"
_ANSWER_LABELS = "Response|Réponse|Answer|Solution|Résultat|Result|Implementation|Implémentation"
_HEADING_LABELS = "Analyse|Analysis|Raisonnement|Reasoning|Thinking"

# Each pattern captures the section body in group 1. A bold label section
# runs until the next bold label or a capitalised paragraph.
STRUCTURAL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        rf"\*\*(?:{_BOLD_LABELS})\*\*:?([\s\S]*?)(?=\n\n\*\*|\n\n(?-i:[A-Z])|\Z)",
        _I,
    ),
    re.compile(
        rf"^[ \t]*(?:{_COLON_LABELS}):([\s\S]*?)(?=\n\n(?:{_ANSWER_LABELS}):|\Z)",
        _IM,
    ),
    re.compile(
        rf"^#{{1,2}} (?:{_HEADING_LABELS})\b([\s\S]*?)(?=\n\n#|\Z)",
        _IM,
    ),
)

# -- Line classifiers ----------------------------------------------------------

# Leading words that introduce the final answer.
ANSWER_LABEL = re.compile(
    r"^(?:Réponse|Response|Answer|Final answer|Solution|Conclusion|Résultat|Result|"
    r"Implémentation|Implementation|Code|Voici|Here['’]s|Here is):",
    _I,
)
ANSWER_LEAD_IN = re.compile(r"^(?:Maintenant|Now|Pour|To|Afin de|In order to)\b", _I)
FALLBACK_STOP = re.compile(
    r"^(?:Voici|Here['’]s|Here is|Solution|Résultat|Implémentation|Code)\b"
)

LIST_ITEM = re.compile(r"^(?:\d+\.|[a-z]\)|-\s|\*\s)")
MARKDOWN_HEADING = re.compile(r"^#{1,6}\s")
CODE_FENCE = "```"

# -- Indicators ----------------------------------------------------------------

# Per-line quality indicators for the heuristic scan; a line scores at most once.
QUALITY_INDICATORS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\b(?:analyser?|considérer|examiner|évaluer|réfléchir|penser|"
        r"analy[sz]e|consider|examine|evaluate|reflect)\b",
        _I,
    ),
    re.compile(
        r"\b(?:donc|ainsi|par conséquent|en effet|cependant|néanmoins|toutefois|"
        r"therefore|thus|hence|however|nevertheless|indeed)\b",
        _I,
    ),
    re.compile(
        r"\b(?:premièrement|deuxièmement|d'abord|ensuite|enfin|finalement|"
        r"firstly|secondly|first of all|afterwards)\b",
        _I,
    ),
    re.compile(
        r"\b(?:il faut|je dois|nous devons|il convient|il est important|"
        r"I need to|I must|we need to|I should|it is important)\b",
        _I,
    ),
    re.compile(
        r"\b(?:problème|défi|enjeu|difficulté|solution|approche|stratégie|"
        r"problem|challenge|approach|strategy)\b",
        _I,
    ),
    re.compile(r"\b(?:thinking|reasoning|analysis|consideration)\b", _I),
    re.compile(
        r"(?:\bL'utilisateur|\bThe user|\bLa demande|\bThe request|\bL'objectif|\bThe goal)\b",
        _I,
    ),
)

TRAILING_QUESTION = re.compile(r"\?\s*$")
CAUSAL_CLAUSE = re.compile(
    r"\b(?:parce que|car|puisque|étant donné|considering|because|since|given that)\b",
    _I,
)
LOGICAL_CONNECTIVES = re.compile(
    r"\b(?:donc|ainsi|par conséquent|cependant|néanmoins|toutefois|"
    r"moreover|however|therefore|thus)\b",
    _I,
)

# Text-level indicators for is_likely_reasoning; each counts once.
LIKELY_REASONING_INDICATORS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\b(?:analyser?|considérer|examiner|évaluer|réfléchir|penser|comprendre|déterminer)\b",
        _I,
    ),
    re.compile(
        r"\b(?:donc|ainsi|par conséquent|en effet|cependant|néanmoins|toutefois|d'ailleurs)\b",
        _I,
    ),
    re.compile(
        r"\b(?:premièrement|deuxièmement|d'abord|ensuite|enfin|finalement|en premier lieu)\b",
        _I,
    ),
    re.compile(
        r"\b(?:thinking|reasoning|analysis|consideration|examining|evaluating|determining)\b",
        _I,
    ),
    re.compile(
        r"<(?:thinking|think|reasoning|analyse)(?:\s[^>]*)?>|\[(?:THINKING|REASONING|ANALYSE)\]",
        _I,
    ),
    re.compile(r"^\s*<(?:thinking|think|reasoning|analyse)", _I),
    re.compile(
        r"L'utilisateur demande|Je dois analyser|Les options sont|La meilleure approche|"
        r"Il faut considérer",
        _I,
    ),
    re.compile(
        r"The user is asking|I need to analy[sz]e|The options are|The best approach|"
        r"We should consider",
        _I,
    ),
    re.compile(r"\b(?:Comment|Pourquoi|Que|Quel|How|Why|What|Which)\b.{10,}\?", _I),
    re.compile(r"\b(?:problème|défi|enjeu|difficulté|challenge|issue|problem)\b", _I),
    re.compile(r"\b(?:solution|approche|stratégie|méthode|approach|strategy|method)\b", _I),
    re.compile(r"\b(?:objectif|goal|aim|purpose|intention)\b", _I),
)

# Connective families scored by context_confidence and streaming_confidence.
CONNECTIVE_FAMILIES: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\b(?:analyser?|considérer|examiner|évaluer|analy[sz]e|consider|examine|evaluate)\b",
        _I,
    ),
    re.compile(
        r"\b(?:donc|ainsi|par conséquent|cependant|therefore|thus|hence|however)\b",
        _I,
    ),
    re.compile(
        r"\b(?:premièrement|deuxièmement|d'abord|ensuite|firstly|secondly|first|next)\b",
        _I,
    ),
)

CONTEXT_CODE_HINTS = re.compile(r"```|\bcode\b|\bfunction\b|\bclass\b", _I)
STREAM_CODE_HINTS = re.compile(r"```|\bfunction\b|\bclass\b|\bconst\b", _I)

# Cues that pick section labels when the enhancer re-sections a long block.
STEP_CUES = re.compile(
    r"\b(?:étape|step|d'abord|ensuite|puis|enfin|premièrement|deuxièmement|"
    r"first|then|next|finally)\b",
    _I,
)
OPTION_CUES = re.compile(r"\b(?:option|alternative|possibilité|choix|choice)\b", _I)

# -- Classification rules ------------------------------------------------------


@dataclass(frozen=True)
class PatternRule:
    """A labelled classification rule: every matcher hit is a PatternMatch."""

    type: PatternType
    weight: float
    matchers: tuple[re.Pattern[str], ...]


PATTERN_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        PatternType.QUESTION,
        0.8,
        (
            re.compile(r"\b(?:comment|pourquoi|que|quel|how|why|what|which)\b.{10,}\?", _I),
            re.compile(r"\?.{0,20}$", _IM),
        ),
    ),
    PatternRule(
        PatternType.ANALYSIS,
        0.9,
        (
            re.compile(
                r"\b(?:analyser?|examiner|évaluer|considérer|analysis|analy[sz]e|examine|"
                r"evaluate|consider)\b",
                _I,
            ),
        ),
    ),
    PatternRule(
        PatternType.DECISION,
        0.85,
        (
            re.compile(
                r"\b(?:décider|choisir|opter|sélectionner|decide|choose|select|opt)\b",
                _I,
            ),
        ),
    ),
    PatternRule(
        PatternType.STEP,
        0.7,
        (
            re.compile(
                r"\b(?:étape|d'abord|ensuite|puis|enfin|step|first|then|next|finally)\b",
                _I,
            ),
        ),
    ),
    PatternRule(
        PatternType.CONSIDERATION,
        0.6,
        (
            re.compile(
                r"\b(?:considération|aspect|facteur|élément|consideration|factor|element)\b",
                _I,
            ),
        ),
    ),
    PatternRule(
        PatternType.CONCLUSION,
        0.8,
        (
            re.compile(
                r"\b(?:conclusion|résultat|donc|ainsi|par conséquent|result|therefore|thus)\b",
                _I,
            ),
        ),
    ),
)

PATTERN_TYPE_COUNT = len(PatternType)

# -- Keywords ------------------------------------------------------------------

KEYWORD_TOKEN = re.compile(r"\b\w{3,}\b")

STOP_WORDS: frozenset[str] = frozenset(
    {
        # English
        "the", "and", "but", "for", "with", "from", "that", "this", "these", "those",
        "are", "was", "were", "has", "have", "had", "not", "you", "your", "its",
        "into", "onto", "than", "then", "there", "their", "which", "what", "who",
        "how", "why", "can", "will", "would", "should", "could", "also", "such",
        # French
        "les", "des", "une", "dans", "sur", "pour", "avec", "par", "mais", "est",
        "sont", "qui", "que", "quel", "quelle", "aux", "ces", "cet", "cette", "son",
        "ses", "leur", "leurs", "nous", "vous", "ils", "elles", "pas", "plus", "comme",
    }
)
