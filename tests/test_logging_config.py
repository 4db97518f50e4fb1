"""Tests for structured logging configuration."""

import io
import json
import logging

import pytest

from require_detective.constants import LOGGER_NAME
from require_detective.logging_config import (
    DetectiveLogFormatter,
    configure_logging,
)


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo the handler changes configure_logging makes."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestDetectiveLogFormatter:
    """Test the JSON formatter."""

    def test_basic_fields(self):
        """Every entry carries timestamp, level, logger and message."""
        record = logging.LogRecord(
            "require_detective.cli", logging.INFO, __file__, 1, "Scanned %s", ("x.js",), None
        )
        entry = json.loads(DetectiveLogFormatter().format(record))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "require_detective.cli"
        assert entry["message"] == "Scanned x.js"
        assert "timestamp" in entry

    def test_extra_fields(self):
        """Known extras are copied into the entry."""
        record = logging.LogRecord(
            "require_detective.cli", logging.INFO, __file__, 1, "Scanned source", (), None
        )
        record.path = "x.js"
        record.strings = 3
        record.unrelated = "dropped"
        entry = json.loads(DetectiveLogFormatter().format(record))
        assert entry["path"] == "x.js"
        assert entry["strings"] == 3
        assert "unrelated" not in entry


class TestConfigureLogging:
    """Test logger configuration."""

    def test_writes_to_stream(self):
        """Package loggers write JSON lines to the configured stream."""
        stream = io.StringIO()
        configure_logging("DEBUG", stream=stream)
        logging.getLogger("require_detective.detective").debug("hello", extra={"word": "load"})
        entry = json.loads(stream.getvalue().strip())
        assert entry["message"] == "hello"
        assert entry["word"] == "load"

    def test_level_filters(self):
        """Records below the configured level are dropped."""
        stream = io.StringIO()
        logger = configure_logging("warning", stream=stream)
        logger.info("quiet")
        assert stream.getvalue() == ""

    def test_reconfigure_replaces_handler(self):
        """Configuring twice does not duplicate output."""
        configure_logging("INFO", stream=io.StringIO())
        logger = configure_logging("INFO", stream=io.StringIO())
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_unknown_level(self):
        """An unknown level name is rejected."""
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("LOUD")
