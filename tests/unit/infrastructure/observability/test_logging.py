"""Tests for structured logging."""

import json
import logging
import sys

from soundbridge.infrastructure.observability.logging import (
    CompactExceptionFormatter,
    CorrelationIdFilter,
    CustomJsonFormatter,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)


class TestCorrelationId:
    """Test correlation ID functionality."""

    def test_set_and_get_correlation_id(self):
        """Test setting and getting correlation ID."""
        result = set_correlation_id("test-123-abc")
        assert result == "test-123-abc"
        assert get_correlation_id() == "test-123-abc"

    def test_set_correlation_id_generates_uuid_when_none(self):
        """Test that setting None generates a UUID."""
        result = set_correlation_id(None)
        assert len(result) == 36
        assert get_correlation_id() == result

    def test_filter_attaches_correlation_id(self):
        """Test that the filter copies the context value onto records."""
        set_correlation_id("filter-id")
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "filter-id"


class TestLoggingConfiguration:
    """Test logging configuration."""

    def test_configure_logging_debug_level(self):
        """Test configuring logging with DEBUG level."""
        configure_logging(log_level="DEBUG", json_format=False, app_name="test-app")
        assert logging.getLogger("test").getEffectiveLevel() <= logging.DEBUG

    def test_configure_logging_replaces_handlers(self):
        """Calling twice must not stack handlers."""
        configure_logging(log_level="INFO", json_format=False)
        configure_logging(log_level="INFO", json_format=True)

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, CustomJsonFormatter)

    def test_configure_logging_quiets_httpx(self):
        """httpx logs request URLs - keep it at WARNING."""
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING


class TestFormatters:
    """Test the two output formats."""

    def test_json_formatter_includes_correlation_id(self):
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        record = logging.LogRecord("soundbridge.test", logging.INFO, __file__, 10, "hello", None, None)
        record.correlation_id = "corr-1"

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "soundbridge.test"
        assert payload["correlation_id"] == "corr-1"

    def test_compact_formatter_shows_exception_chain(self):
        formatter = CompactExceptionFormatter()
        try:
            try:
                raise OSError("connection refused")
            except OSError as e:
                raise RuntimeError("database down") from e
        except RuntimeError:
            formatted = formatter.formatException(sys.exc_info())

        lines = formatted.splitlines()
        assert lines[0] == "╰─► OSError: connection refused"
        assert "╰─► RuntimeError: database down" in lines
