"""Tests for structured logging and request context."""

import json
import logging

from agency_os.observability import (
    HumanFormatter,
    JSONFormatter,
    RequestContext,
    bind_operator,
    configure_logging,
    get_operator,
    get_request_id,
)


def _record(msg="Task 4 deployed", **extra):
    record = logging.LogRecord("agency_os.transitions.tasks", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRequestContext:
    def test_binds_and_resets(self):
        assert get_request_id() is None
        with RequestContext(request_id="req-abc123") as ctx:
            assert ctx.request_id == "req-abc123"
            assert get_request_id() == "req-abc123"
            bind_operator("ceo")
            assert get_operator() == "ceo"
        assert get_request_id() is None
        assert get_operator() is None

    def test_generates_id(self):
        with RequestContext() as ctx:
            assert ctx.request_id.startswith("req-")


class TestJSONFormatter:
    def test_fields_and_extras(self):
        with RequestContext(request_id="req-xyz"):
            bind_operator("team")
            line = JSONFormatter().format(_record(task_id=4))
        doc = json.loads(line)
        assert doc["level"] == "INFO"
        assert doc["logger"] == "agency_os.transitions.tasks"
        assert doc["message"] == "Task 4 deployed"
        assert doc["request_id"] == "req-xyz"
        assert doc["operator"] == "team"
        assert doc["task_id"] == 4
        assert doc["timestamp"].endswith("Z")

    def test_no_context_fields_outside_request(self):
        doc = json.loads(JSONFormatter().format(_record()))
        assert "request_id" not in doc
        assert "operator" not in doc


class TestHumanFormatter:
    def test_line_shape(self):
        with RequestContext(request_id="req-0123456789abcdef"):
            line = HumanFormatter().format(_record())
        assert "[INFO] agency_os.transitions.tasks: [req-01234567] Task 4 deployed" in line


class TestConfigureLogging:
    def test_single_handler_with_formatter(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("debug", json_format=True)
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
