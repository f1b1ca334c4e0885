"""Tests for logging_config module."""

import logging
import sys
from unittest.mock import MagicMock, patch

import pytest
from loguru import logger

from reasoning_lens import logging_config


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    """Point the file sink at a temp dir and reset the configured flag."""
    target = tmp_path / "logs"
    monkeypatch.setattr(logging_config, "LOG_DIR", target)
    monkeypatch.setattr(logging_config, "_logging_configured", False)
    yield target
    logger.remove()
    logger.add(sys.stderr)


def make_record(level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="uvicorn.error",
        level=level,
        pathname="server.py",
        lineno=1,
        msg="server started",
        args=(),
        exc_info=None,
    )


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_library_and_api_files(self, log_dir):
        logging_config.setup_logging()

        logger.info("extraction finished")
        logger.patch(lambda r: r.update(name="reasoning_lens.api.routes")).info("request served")
        logger.remove()

        library = (log_dir / logging_config.LIBRARY_LOG).read_text()
        api = (log_dir / logging_config.API_LOG).read_text()
        assert "extraction finished" in library
        assert "request served" not in library
        assert "request served" in api
        assert "extraction finished" not in api

    def test_console_only(self, log_dir):
        logging_config.setup_logging(log_file=False)

        assert logging_config._logging_configured is True
        assert not log_dir.exists()

    def test_level_override(self, log_dir):
        with patch.object(logger, "add") as mock_add:
            logging_config.setup_logging(log_file=False, level="debug")

        assert mock_add.call_args.kwargs["level"] == "DEBUG"

    def test_idempotent(self, log_dir):
        with patch.object(logger, "add", wraps=logger.add) as mock_add:
            logging_config.setup_logging()
            logging_config.setup_logging()

        # stderr plus the two file sinks, added once
        assert mock_add.call_count == 3


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("reasoning_lens.api.errors", True),
        ("uvicorn.error", True),
        ("reasoning_lens.services.cache", False),
        (None, False),
    ],
)
def test_is_api_record(name, expected):
    assert logging_config.is_api_record({"name": name}) is expected


class TestInterceptHandler:
    """Tests for InterceptHandler class."""

    def test_forwards_to_loguru(self):
        handler = logging_config.InterceptHandler()

        with patch.object(logger, "opt") as mock_opt:
            handler.emit(make_record())

        mock_opt.return_value.log.assert_called_once_with("INFO", "server started")

    def test_unknown_level_uses_levelno(self):
        handler = logging_config.InterceptHandler()
        record = make_record(level=99)
        record.levelname = "NOT_A_LOGURU_LEVEL"

        with patch.object(logger, "opt") as mock_opt:
            mock_opt.return_value = MagicMock()
            handler.emit(record)

        assert mock_opt.return_value.log.call_args[0][0] == "99"


class TestInterceptStandardLogging:
    """Tests for intercept_standard_logging function."""

    def test_installs_handler(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        try:
            logging_config.intercept_standard_logging()

            assert any(isinstance(h, logging_config.InterceptHandler) for h in root.handlers)
            assert logging.getLogger("uvicorn.access").level == logging.WARNING
        finally:
            root.handlers = handlers
            root.setLevel(level)
