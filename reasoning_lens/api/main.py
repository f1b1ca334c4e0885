"""Reasoning Lens - FastAPI Application."""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from loguru import logger

from reasoning_lens import __version__
from reasoning_lens.api.errors import register_error_handlers
from reasoning_lens.api.routes import router
from reasoning_lens.config import get_settings
from reasoning_lens.logging_config import intercept_standard_logging, setup_logging

__all__ = ["create_app"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    intercept_standard_logging()

    settings = get_settings()
    logger.info(
        f"Reasoning Lens {__version__} ready "
        f"(cache: {settings.cache_max_entries} entries, ttl {settings.cache_ttl_seconds}s)"
    )

    yield

    logger.info("Reasoning Lens shutting down")


def create_app(standalone: bool = True) -> FastAPI:
    """Create the Reasoning Lens FastAPI application.

    Args:
        standalone: Install the lifespan handler that configures logging.
                    Pass False when mounting into a host app that owns
                    logging.

    Returns:
        FastAPI application instance
    """
    app_instance = FastAPI(
        title="Reasoning Lens",
        description="Separate model reasoning from final answers",
        version=__version__,
        lifespan=lifespan if standalone else None,
    )

    register_error_handlers(app_instance)
    app_instance.include_router(router)

    @app_instance.get("/health")
    async def health() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app_instance
