"""
Tests for logging utilities.
"""
import logging
from unittest.mock import patch

import pytest

from sprite_preloader.config import settings
from sprite_preloader.utils.errors import ErrorCodes, FetchError
from sprite_preloader.utils.logging import configure_logging, log_fetch_call, trace_calls


def test_trace_calls_disabled_returns_function():
    """Test that trace_calls is a no-op when TRACE_CALLS is off."""

    def sample(x):
        return x * 2

    with patch.object(settings, "TRACE_CALLS", False):
        assert trace_calls(sample) is sample


def test_trace_calls_enabled_logs_sync(caplog):
    """Test that sync calls log ENTER/EXIT with redacted secrets."""
    with patch.object(settings, "TRACE_CALLS", True):

        @trace_calls
        def sample(path, payload, api_key=None):
            return path

        with caplog.at_level(logging.DEBUG, logger="sprite_preloader"):
            assert sample("a.png", b"1234", api_key="hunter2") == "a.png"

    messages = [record.getMessage() for record in caplog.records]
    enter = [msg for msg in messages if "[TRACE] ENTER" in msg]
    assert len(enter) == 1
    assert "arg0=a.png" in enter[0]
    assert "arg1=<bytes:4>" in enter[0]
    assert "api_key=<REDACTED>" in enter[0]
    assert "hunter2" not in enter[0]
    assert any("[TRACE] EXIT" in msg and "durationMs=" in msg for msg in messages)


@pytest.mark.asyncio
async def test_trace_calls_enabled_logs_async_error(caplog):
    """Test that async calls log the error type on EXIT and re-raise."""
    with patch.object(settings, "TRACE_CALLS", True):

        @trace_calls
        async def failing():
            raise RuntimeError("boom")

        with caplog.at_level(logging.DEBUG, logger="sprite_preloader"):
            with pytest.raises(RuntimeError):
                await failing()

    assert any("error=RuntimeError" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_log_fetch_call_logs_failure_and_reraises(caplog):
    """Test that a failed fetch is logged with its error code and re-raised."""

    async def call():
        raise FetchError(ErrorCodes.NOT_FOUND, "gone", path="a.png")

    with caplog.at_level(logging.INFO, logger="sprite_preloader"):
        with pytest.raises(FetchError):
            await log_fetch_call("TEST", "test://a.png", "a.png", call)

    error_logs = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(error_logs) == 1
    assert "status=NOT_FOUND" in error_logs[0].getMessage()
    assert error_logs[0].exc_info is not None


def test_configure_logging_installs_handlers(tmp_path):
    """Test that configure_logging replaces root handlers and adds a file handler."""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    log_file = tmp_path / "logs" / "sprites.log"

    try:
        configure_logging(level="debug", log_file=str(log_file))

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 2
        assert any(isinstance(h, logging.FileHandler) for h in root_logger.handlers)
        assert log_file.parent.exists()
    finally:
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers[:] = saved_handlers
        root_logger.setLevel(saved_level)
