"""Tests for rpcwire log formatting and setup."""

import json
import logging
import sys
from io import StringIO

import pytest
from opentelemetry.sdk.trace import TracerProvider

from rpcwire.config import LoggingConfig
from rpcwire.logging import (
    ROOT_LOGGER,
    ColoredLogFormatter,
    StructuredLogFormatter,
    configure_logging,
    get_logger,
)
from rpcwire.logging.colors import RED, RESET, YELLOW
from rpcwire.types import LogFormat, LogLevel


def _record(msg="Test message", level=logging.INFO, name="rpcwire.client", exc_info=None):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


@pytest.fixture(autouse=True)
def reset_rpcwire_logger():
    """Remove handlers installed by configure_logging."""
    root = logging.getLogger(ROOT_LOGGER)
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    root.handlers = saved_handlers
    root.setLevel(saved_level)


class TestStructuredLogFormatter:
    """Tests for StructuredLogFormatter."""

    def test_formats_as_json(self):
        """Test log record is formatted as JSON."""
        data = json.loads(StructuredLogFormatter().format(_record()))
        assert data["message"] == "Test message"
        assert data["level"] == "INFO"
        assert data["component"] == "rpcwire.client"
        assert "timestamp" in data

    def test_includes_extra_fields(self):
        """Test fields passed through extra are included."""
        record = _record()
        record.method = "sum"
        record.request_id = 3
        data = json.loads(StructuredLogFormatter().format(record))
        assert data["method"] == "sum"
        assert data["request_id"] == 3

    def test_no_trace_context_outside_span(self):
        """Test trace ids are omitted when no span is active."""
        data = json.loads(StructuredLogFormatter().format(_record()))
        assert "trace_id" not in data
        assert "span_id" not in data

    def test_trace_context_inside_span(self):
        """Test trace and span ids are injected from the active span."""
        tracer = TracerProvider().get_tracer("test")
        with tracer.start_as_current_span("op") as span:
            data = json.loads(StructuredLogFormatter().format(_record()))
            ctx = span.get_span_context()

        assert data["trace_id"] == format(ctx.trace_id, "032x")
        assert data["span_id"] == format(ctx.span_id, "016x")

    def test_exception(self):
        """Test exception text is included."""
        try:
            raise RuntimeError("kaput")
        except RuntimeError:
            record = _record(level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(StructuredLogFormatter().format(record))
        assert "RuntimeError: kaput" in data["exception"]


class TestColoredLogFormatter:
    """Tests for ColoredLogFormatter."""

    def test_layout(self):
        """Test level, logger name and message appear in order."""
        output = ColoredLogFormatter().format(_record(level=logging.WARNING))
        assert output.startswith(f"{YELLOW}[WARNING]{RESET}")
        assert "rpcwire.client" in output
        assert output.endswith(": Test message")

    def test_error_color(self):
        """Test errors are rendered in red."""
        output = ColoredLogFormatter().format(_record(level=logging.ERROR))
        assert output.startswith(RED)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output(self):
        """Test JSON format writes one object per line at the configured level."""
        stream = StringIO()
        configure_logging(LoggingConfig(level=LogLevel.DEBUG, format=LogFormat.JSON), stream)

        get_logger("client").debug("sent")

        data = json.loads(stream.getvalue().strip())
        assert data["message"] == "sent"
        assert data["component"] == "rpcwire.client"

    def test_level_filters(self):
        """Test records below the configured level are dropped."""
        stream = StringIO()
        configure_logging(LoggingConfig(level=LogLevel.WARN), stream)

        logger = get_logger("client")
        logger.info("quiet")
        logger.warning("loud")

        output = stream.getvalue()
        assert "quiet" not in output
        assert "loud" in output

    def test_reconfigure_replaces_handler(self):
        """Test calling twice leaves a single rpcwire handler."""
        first = configure_logging(stream=StringIO())
        second = configure_logging(stream=StringIO())

        handlers = logging.getLogger(ROOT_LOGGER).handlers
        assert second in handlers
        assert first not in handlers

    def test_library_modules_propagate(self):
        """Test records from library modules reach the configured handler."""
        stream = StringIO()
        configure_logging(LoggingConfig(level=LogLevel.DEBUG, format=LogFormat.JSON), stream)

        logging.getLogger("rpcwire.client.client").debug("from module")
        assert "from module" in stream.getvalue()


class TestGetLogger:
    """Tests for get_logger."""

    def test_prefixes_namespace(self):
        """Test component names are placed under rpcwire."""
        assert get_logger("config").name == "rpcwire.config"

    def test_keeps_qualified_names(self):
        """Test already qualified names are not prefixed twice."""
        assert get_logger("rpcwire.protocol").name == "rpcwire.protocol"
        assert get_logger("rpcwire").name == "rpcwire"
