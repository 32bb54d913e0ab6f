"""
Test Logging Module
===================

Unit tests for formatters, context and audit events.
"""

import json
import logging
import pytest
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.logging import (
    JSONFormatter, ColoredFormatter, ContextFilter,
    get_logger, audit, set_log_context, clear_log_context,
)


def make_record(msg="hello", **extra_data):
    record = logging.LogRecord("mediai.test", logging.INFO, __file__, 10, msg, None, None)
    if extra_data:
        record.extra_data = extra_data
    return record


@pytest.fixture(autouse=True)
def clean_context():
    yield
    clear_log_context()


class TestFormatters:
    """Tests for JSONFormatter and ColoredFormatter."""

    def test_json_formatter(self):
        output = json.loads(JSONFormatter().format(make_record(rule="cardiology")))

        assert output["level"] == "INFO"
        assert output["logger"] == "mediai.test"
        assert output["message"] == "hello"
        assert output["data"] == {"rule": "cardiology"}

    def test_json_formatter_without_data(self):
        output = json.loads(JSONFormatter().format(make_record()))
        assert "data" not in output

    def test_colored_formatter_appends_fields(self):
        output = ColoredFormatter().format(make_record(id="rec_1"))
        assert "hello" in output
        assert "id=rec_1" in output


class TestContext:
    """Tests for thread-local logging context."""

    def test_context_merged_into_record(self):
        set_log_context(request_id="abc123")
        record = make_record(rule="neurology")

        ContextFilter().filter(record)

        assert record.extra_data == {"request_id": "abc123", "rule": "neurology"}

    def test_record_values_win(self):
        set_log_context(rule="context")
        record = make_record(rule="record")

        ContextFilter().filter(record)

        assert record.extra_data["rule"] == "record"

    def test_clear(self):
        set_log_context(request_id="abc123")
        clear_log_context()
        record = make_record()

        ContextFilter().filter(record)

        assert not hasattr(record, "extra_data")


class TestLoggers:
    """Tests for get_logger and audit."""

    def test_namespaced(self):
        assert get_logger("web.routes").logger.name == "mediai.web.routes"
        assert get_logger("mediai.audit").logger.name == "mediai.audit"

    def test_bound_and_call_extras(self, caplog):
        logger = get_logger("test.adapter", component="chat")
        with caplog.at_level(logging.INFO, logger="mediai.test.adapter"):
            logger.info("answered", extra={"rule": "cardiology"})

        record = caplog.records[-1]
        assert record.extra_data == {"component": "chat", "rule": "cardiology"}

    def test_audit(self, caplog):
        with caplog.at_level(logging.INFO, logger="mediai.audit"):
            audit("recording.deleted", id="rec_1")

        record = caplog.records[-1]
        assert record.name == "mediai.audit"
        assert record.getMessage() == "recording.deleted"
        assert record.extra_data["id"] == "rec_1"
        assert "timestamp" in record.extra_data
