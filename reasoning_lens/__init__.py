"""Reasoning Lens - separate model reasoning from final answers."""

__version__ = "0.3.0"

from reasoning_lens.models import (  # noqa: E402
    Confidence,
    ExtractionMethod,
    ExtractionResult,
    PatternMatch,
    PatternType,
    ReasoningAnalytics,
    StreamingState,
)
from reasoning_lens.patterns import is_likely_reasoning  # noqa: E402
from reasoning_lens.services import (  # noqa: E402
    ReasoningCache,
    ReasoningExtractor,
    StreamingExtractor,
    clear_reasoning_cache,
    create_streaming_extractor,
    extract_reasoning,
    get_cache_stats,
    get_reasoning_analytics,
    remove_reasoning_from_content,
)

__all__ = [
    "Confidence",
    "ExtractionMethod",
    "ExtractionResult",
    "PatternMatch",
    "PatternType",
    "ReasoningAnalytics",
    "ReasoningCache",
    "ReasoningExtractor",
    "StreamingExtractor",
    "StreamingState",
    "__version__",
    "clear_reasoning_cache",
    "create_streaming_extractor",
    "extract_reasoning",
    "get_cache_stats",
    "get_reasoning_analytics",
    "is_likely_reasoning",
    "remove_reasoning_from_content",
]
