"""Request and response models of the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from reasoning_lens.models.enums import Confidence, ExtractionMethod, PatternType, StreamPhase


class SpanModel(BaseModel):
    start: int
    end: int


class PatternMatchModel(BaseModel):
    """A recognised reasoning cue."""

    type: PatternType
    content: str
    confidence: float
    position: SpanModel
    keywords: list[str] = Field(default_factory=list)


class ExtractionResultModel(BaseModel):
    """Extracted reasoning with its provenance."""

    content: str
    original_length: int
    extraction_method: ExtractionMethod
    confidence: Confidence
    patterns: list[PatternMatchModel] = Field(default_factory=list)
    cache_key: str | None = None
    streaming_chunks: list[str] | None = None


class ExtractRequest(BaseModel):
    content: str = Field(description="Full model response")
    max_length: int | None = Field(
        default=None,
        ge=1,
        description="Truncation limit; the configured default when omitted",
    )
    use_cache: bool = Field(default=True, description="Read and write the result cache")


class ExtractResponse(BaseModel):
    result: ExtractionResultModel | None = Field(
        default=None,
        description="Null when the response holds no detectable reasoning",
    )


class StripRequest(BaseModel):
    content: str = Field(description="Full model response")
    extracted_reasoning: str | None = Field(
        default=None,
        description="Reasoning previously extracted from the same response",
    )


class StripResponse(BaseModel):
    content: str


class AnalyticsRequest(BaseModel):
    content: str


class AnalyticsMetricsModel(BaseModel):
    total_patterns: int
    average_confidence: float
    dominant_type: str
    complexity_score: float
    readability_score: float


class AnalyticsResponse(BaseModel):
    patterns: list[PatternMatchModel]
    metrics: AnalyticsMetricsModel
    suggestions: list[str]


class StreamRequest(BaseModel):
    chunks: list[str] = Field(description="Response chunks in arrival order")


class StreamingStateModel(BaseModel):
    buffer: str
    extracted_chunks: list[str]
    current_pattern: str | None
    confidence: float
    phase: StreamPhase
    is_complete: bool
    marker_ever_seen: bool


class StreamResponse(BaseModel):
    """Replay of a chunk sequence through one streaming session."""

    partials: list[ExtractionResultModel] = Field(
        default_factory=list,
        description="Partial results in the order they were produced",
    )
    final: ExtractionResultModel | None = None
    state: StreamingStateModel


class CacheStatsResponse(BaseModel):
    size: int
    total_access: int
    average_age_seconds: float
    hit_rate: float
    hits: int
    misses: int
    evictions: int
