"""Pytest fixtures for reasoning-lens tests."""

import os

import pytest

# Pin the log level before app modules read it at import
os.environ.setdefault("REASONING_LENS_LOG_LEVEL", "INFO")

from reasoning_lens.config import get_settings
from reasoning_lens.services.cache import ReasoningCache
from reasoning_lens.services.extractor import ReasoningExtractor, reset_reasoning_extractor


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ReasoningCache:
    """Isolated result cache driven by the fake clock."""
    return ReasoningCache(clock=clock)


@pytest.fixture
def extractor(cache: ReasoningCache) -> ReasoningExtractor:
    """Extractor bound to the isolated cache."""
    return ReasoningExtractor(cache=cache)


@pytest.fixture(autouse=True)
def _fresh_default_extractor():
    """Give every test its own process-wide extractor and settings."""
    get_settings.cache_clear()
    reset_reasoning_extractor()
    yield
    reset_reasoning_extractor()
    get_settings.cache_clear()
