"""Structured Logging — JSON formatter fields and handler installation."""

import json
import logging

from ledger_gateway.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "ledger_gateway.test", logging.WARNING, __file__, 1,
        "GatewayError: %s", ("missing",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_line_carries_ledger_coordinates():
    line = json.loads(JSONFormatter().format(_record(
        subject_id="J1", sn=0, error_code="NOT_FOUND", path="/api/subjects/J1",
    )))
    assert line["message"] == "GatewayError: missing"
    assert line["level"] == "WARNING"
    assert line["subject_id"] == "J1"
    assert line["sn"] == 0
    assert line["error_code"] == "NOT_FOUND"


def test_absent_extras_are_omitted():
    line = json.loads(JSONFormatter().format(_record(request_id=None)))
    assert "request_id" not in line
    assert "origin" not in line


def test_setup_logging_replaces_its_own_handler():
    first = setup_logging("DEBUG", "json")
    second = setup_logging("INFO", "text")
    try:
        assert first not in logging.root.handlers
        assert second in logging.root.handlers
        assert logging.root.level == logging.INFO
    finally:
        logging.root.removeHandler(second)
