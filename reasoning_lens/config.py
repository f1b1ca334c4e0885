"""Reasoning Lens configuration.

Environment Variables:
    REASONING_LENS_CACHE_TTL_SECONDS: Lifetime of a cached extraction (default: 1800)
    REASONING_LENS_CACHE_MAX_ENTRIES: Entries kept before eviction runs (default: 100)
    REASONING_LENS_CACHE_EVICTION_RATIO: Share of entries evicted when full (default: 0.2)
    REASONING_LENS_DEFAULT_MAX_LENGTH: Truncation limit for extracted reasoning (default: 10000)
    REASONING_LENS_MAX_CONTENT_CHARS: Largest response the API accepts (default: 1000000)
    REASONING_LENS_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
    REASONING_LENS_LOG_DIR: Log directory path (default: logs/)
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PORT = 10250


class ReasoningSettings(BaseSettings):
    """Reasoning extraction settings.

    All settings can be configured via environment variables with the
    REASONING_LENS_ prefix. For example, REASONING_LENS_CACHE_MAX_ENTRIES=500.

    Logging is configured separately via REASONING_LENS_LOG_LEVEL and
    REASONING_LENS_LOG_DIR (see logging_config.py).
    """

    model_config = SettingsConfigDict(
        env_prefix="REASONING_LENS_",
        env_file=".env",
        extra="ignore",
    )

    # Result cache
    cache_ttl_seconds: float = Field(
        default=30 * 60,
        gt=0,
        description="Seconds before a cached extraction expires",
    )
    cache_max_entries: int = Field(
        default=100,
        ge=1,
        description="Number of entries kept before least-used eviction runs",
    )
    cache_eviction_ratio: float = Field(
        default=0.2,
        gt=0,
        le=1,
        description="Share of entries dropped by one eviction pass",
    )
    cache_key_prefix_chars: int = Field(
        default=500,
        ge=1,
        description="Leading characters of the source text hashed into the cache key",
    )

    # Extraction
    default_max_length: int = Field(
        default=10000,
        ge=100,
        description="Maximum length of extracted reasoning before truncation",
    )

    # HTTP server
    max_content_chars: int = Field(
        default=1_000_000,
        ge=1,
        description="Largest model response the API accepts for analysis",
    )
    host: str = Field(default="127.0.0.1", description="Host to bind the API server to")
    port: int = Field(default=DEFAULT_PORT, description="Port to bind the API server to")


@lru_cache
def get_settings() -> ReasoningSettings:
    """Get cached settings instance."""
    return ReasoningSettings()
