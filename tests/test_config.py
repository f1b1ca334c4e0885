"""Tests for config module."""

import pytest
from pydantic import ValidationError

from reasoning_lens.config import DEFAULT_PORT, ReasoningSettings, get_settings
from reasoning_lens.services.extractor import ReasoningExtractor


class TestReasoningSettings:
    """Tests for ReasoningSettings."""

    def test_defaults(self):
        settings = ReasoningSettings()

        assert settings.cache_ttl_seconds == 1800
        assert settings.cache_max_entries == 100
        assert settings.cache_eviction_ratio == 0.2
        assert settings.cache_key_prefix_chars == 500
        assert settings.default_max_length == 10000
        assert settings.max_content_chars == 1_000_000
        assert settings.port == DEFAULT_PORT

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("REASONING_LENS_CACHE_TTL_SECONDS", "60")
        monkeypatch.setenv("REASONING_LENS_DEFAULT_MAX_LENGTH", "2000")

        settings = ReasoningSettings()

        assert settings.cache_ttl_seconds == 60
        assert settings.default_max_length == 2000

    @pytest.mark.parametrize("ratio", ["0", "1.5"])
    def test_invalid_eviction_ratio(self, monkeypatch, ratio):
        monkeypatch.setenv("REASONING_LENS_CACHE_EVICTION_RATIO", ratio)

        with pytest.raises(ValidationError):
            ReasoningSettings()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


def test_extractor_from_settings():
    settings = ReasoningSettings(
        cache_ttl_seconds=5,
        cache_max_entries=3,
        cache_eviction_ratio=0.5,
        cache_key_prefix_chars=50,
        default_max_length=300,
    )

    extractor = ReasoningExtractor.from_settings(settings)

    assert extractor.default_max_length == 300
    assert extractor.cache.ttl_seconds == 5
    assert extractor.cache.max_entries == 3
    assert extractor.cache.eviction_ratio == 0.5
    assert extractor.cache.key_prefix_chars == 50
