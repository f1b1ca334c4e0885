"""Reasoning extraction services."""

from reasoning_lens.services.analytics import get_reasoning_analytics
from reasoning_lens.services.cache import ReasoningCache, simple_hash
from reasoning_lens.services.enhancer import (
    enhance_reasoning_content,
    find_truncation_point,
    truncate_reasoning,
)
from reasoning_lens.services.extractor import (
    ReasoningExtractor,
    clear_reasoning_cache,
    extract_reasoning,
    get_cache_stats,
    get_reasoning_extractor,
    reset_reasoning_extractor,
)
from reasoning_lens.services.removal import remove_reasoning_from_content
from reasoning_lens.services.streaming import StreamingExtractor, create_streaming_extractor

__all__ = [
    "ReasoningCache",
    "ReasoningExtractor",
    "StreamingExtractor",
    "clear_reasoning_cache",
    "create_streaming_extractor",
    "enhance_reasoning_content",
    "extract_reasoning",
    "find_truncation_point",
    "get_cache_stats",
    "get_reasoning_analytics",
    "get_reasoning_extractor",
    "remove_reasoning_from_content",
    "reset_reasoning_extractor",
    "simple_hash",
    "truncate_reasoning",
]
