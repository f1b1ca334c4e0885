"""Reasoning extraction API router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from reasoning_lens.api.errors import ContentTooLargeError
from reasoning_lens.config import get_settings
from reasoning_lens.models.dto import (
    AnalyticsRequest,
    AnalyticsResponse,
    CacheStatsResponse,
    ExtractionResultModel,
    ExtractRequest,
    ExtractResponse,
    StreamingStateModel,
    StreamRequest,
    StreamResponse,
    StripRequest,
    StripResponse,
)
from reasoning_lens.services.analytics import get_reasoning_analytics
from reasoning_lens.services.extractor import ReasoningExtractor, get_reasoning_extractor
from reasoning_lens.services.removal import remove_reasoning_from_content
from reasoning_lens.services.streaming import create_streaming_extractor

router = APIRouter(prefix="/v1/reasoning", tags=["reasoning"])


def get_extractor() -> ReasoningExtractor:
    """Dependency returning the process-wide extractor."""
    return get_reasoning_extractor()


Extractor = Annotated[ReasoningExtractor, Depends(get_extractor)]


def _check_size(*texts: str | None) -> None:
    length = sum(len(text) for text in texts if text)
    max_chars = get_settings().max_content_chars
    if length > max_chars:
        raise ContentTooLargeError(length, max_chars)


@router.post("/extract", response_model=ExtractResponse)
def extract(body: ExtractRequest, extractor: Extractor):
    """Extract the reasoning part of a model response."""
    _check_size(body.content)
    result = extractor.extract(body.content, max_length=body.max_length, use_cache=body.use_cache)
    if result is None:
        return ExtractResponse(result=None)
    return ExtractResponse(result=ExtractionResultModel.model_validate(result.to_dict()))


@router.post("/strip", response_model=StripResponse)
def strip(body: StripRequest):
    """Remove reasoning from a model response, keeping the answer."""
    _check_size(body.content, body.extracted_reasoning)
    return StripResponse(
        content=remove_reasoning_from_content(body.content, body.extracted_reasoning)
    )


@router.post("/analytics", response_model=AnalyticsResponse)
def analytics(body: AnalyticsRequest):
    """Pattern statistics and improvement suggestions for a reasoning span."""
    _check_size(body.content)
    return AnalyticsResponse.model_validate(get_reasoning_analytics(body.content).to_dict())


@router.post("/stream", response_model=StreamResponse)
def stream(body: StreamRequest, extractor: Extractor):
    """Replay a chunk sequence through one streaming session."""
    _check_size(*body.chunks)
    session = create_streaming_extractor(extractor)

    partials: list[ExtractionResultModel] = []
    for chunk in body.chunks:
        partial = session.process_chunk(chunk)
        if partial is not None:
            partials.append(ExtractionResultModel.model_validate(partial.to_dict()))

    final = session.finalize()
    return StreamResponse(
        partials=partials,
        final=ExtractionResultModel.model_validate(final.to_dict()) if final else None,
        state=StreamingStateModel.model_validate(session.get_state().to_dict()),
    )


@router.get("/cache/stats", response_model=CacheStatsResponse)
def cache_stats(extractor: Extractor):
    """Usage statistics of the result cache."""
    return CacheStatsResponse.model_validate(extractor.cache.stats().to_dict())


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
def clear_cache(extractor: Extractor):
    """Empty the result cache."""
    extractor.cache.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
