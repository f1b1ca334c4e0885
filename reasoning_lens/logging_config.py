"""Loguru-based logging configuration.

Provides:
- Colourised console output
- Separate log files for the extraction library and the HTTP API
- Configurable log levels via environment variables
- Intercept handler for standard logging compatibility

Environment Variables:
- REASONING_LENS_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
- REASONING_LENS_LOG_DIR: Log directory path. Default: logs/
"""

import logging
import os
import sys
from pathlib import Path

from loguru import logger

LOG_LEVEL = os.environ.get("REASONING_LENS_LOG_LEVEL", "INFO").upper()
LOG_DIR = Path(os.environ.get("REASONING_LENS_LOG_DIR", "logs"))

LIBRARY_LOG = "reasoning-lens.log"
API_LOG = "reasoning-api.log"

# Records from these loggers belong in the API log
_API_LOGGERS = ("reasoning_lens.api", "uvicorn", "fastapi", "starlette")

_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

_logging_configured = False


def is_api_record(record: dict) -> bool:
    """True for records emitted by the HTTP layer or its server."""
    return (record["name"] or "").startswith(_API_LOGGERS)


def setup_logging(log_file: bool = True, level: str | None = None) -> None:
    """Configure Loguru sinks once per process.

    Sets up:
    - Console output (stderr)
    - reasoning-lens.log for extraction, cache and streaming events
    - reasoning-api.log for requests, errors and server lifecycle

    Log files rotate at 10 MB and are kept for 7 days.

    Args:
        log_file: Also write the log files under LOG_DIR. The CLI turns this
                  off for one-shot commands.
        level: Overrides REASONING_LENS_LOG_LEVEL, e.g. "DEBUG" for --verbose.
    """
    global _logging_configured
    if _logging_configured:
        return
    _logging_configured = True

    level = (level or LOG_LEVEL).upper()

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if not log_file:
        return

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger.add(
        LOG_DIR / LIBRARY_LOG,
        level=level,
        format=_FILE_FORMAT,
        rotation="10 MB",
        retention="7 days",
        filter=lambda record: not is_api_record(record),
    )
    logger.add(
        LOG_DIR / API_LOG,
        level=level,
        format=_FILE_FORMAT,
        rotation="10 MB",
        retention="7 days",
        filter=is_api_record,
    )


class InterceptHandler(logging.Handler):
    """Forward standard logging records (uvicorn, fastapi) to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)

        # Skip logging's own frames so the record points at the real caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def intercept_standard_logging() -> None:
    """Route the root stdlib logger through Loguru and quiet access logs."""
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)
