"""HTTP API for reasoning extraction."""

from reasoning_lens.api.main import create_app

__all__ = ["create_app"]
