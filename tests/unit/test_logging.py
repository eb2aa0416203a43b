"""
Unit tests for structured logging utilities.
"""

import json
import logging
from io import StringIO

import pytest

from telemetry_client.utils.logging import (
    JSONFormatter,
    get_logger,
    log_delivery,
    log_error_with_context,
    log_flush,
    log_state_transition,
    setup_logging,
)


@pytest.fixture
def captured():
    """Logger adapter writing JSON into a buffer."""
    logger = get_logger("test_telemetry_logging")
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.logger.addHandler(handler)
    logger.logger.setLevel(logging.DEBUG)
    
    yield logger, stream
    
    logger.logger.removeHandler(handler)


def read_entries(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


def test_json_formatter(captured):
    """Test JSON formatter produces valid JSON output."""
    logger, stream = captured
    
    logger.info("Test message", extra={"state": "flushing", "reason": "scheduled", "bytes": 10})
    
    log_data = read_entries(stream)[0]
    assert "timestamp" in log_data
    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test_telemetry_logging"
    assert log_data["message"] == "Test message"
    assert log_data["state"] == "flushing"
    assert log_data["reason"] == "scheduled"
    assert log_data["context"]["bytes"] == 10
    assert "source" in log_data


def test_get_logger_with_context():
    """Test getting logger with context."""
    logger = get_logger("test_module", reason="scheduled")
    
    assert logger.extra["reason"] == "scheduled"


def test_with_context_does_not_mutate_original():
    logger = get_logger("test_module", reason="scheduled")
    
    child = logger.with_context(state="collecting")
    
    assert child.extra == {"reason": "scheduled", "state": "collecting"}
    assert "state" not in logger.extra


def test_with_context_scopes_fields_to_child(captured):
    logger, stream = captured
    
    logger.with_context(reason="fatal_error").info("inside")
    logger.info("outside")
    
    inside, outside = read_entries(stream)
    assert inside["reason"] == "fatal_error"
    assert "reason" not in outside


def test_log_state_transition(captured):
    logger, stream = captured
    
    log_state_transition(logger, "idle", "collecting", "cycle_start")
    
    log_data = read_entries(stream)[0]
    assert log_data["level"] == "DEBUG"
    assert log_data["state"] == "collecting"
    assert log_data["context"]["previous_state"] == "idle"
    assert log_data["context"]["trigger"] == "cycle_start"


def test_log_flush(captured):
    logger, stream = captured
    
    log_flush(logger, "threshold_breach", error_count=3, payload_bytes=512)
    
    log_data = read_entries(stream)[0]
    assert log_data["message"] == "Flushing telemetry (threshold_breach)"
    assert log_data["reason"] == "threshold_breach"
    assert log_data["context"]["error_count"] == 3


def test_log_delivery_success_and_failure(captured):
    logger, stream = captured
    
    log_delivery(logger, "https://collector.test", status_code=200, duration_ms=12.345)
    log_delivery(logger, "https://collector.test", error="HTTP 502")
    
    ok, failed = read_entries(stream)
    assert ok["level"] == "INFO"
    assert ok["context"]["duration_ms"] == 12.35
    assert failed["level"] == "ERROR"
    assert failed["context"]["error"] == "HTTP 502"


def test_log_error_with_context(captured):
    logger, stream = captured
    
    try:
        raise RuntimeError("cycle not started")
    except RuntimeError as e:
        log_error_with_context(logger, "Usage error", e, hook="atexit")
    
    log_data = read_entries(stream)[0]
    assert log_data["level"] == "ERROR"
    assert log_data["error"]["type"] == "RuntimeError"
    assert log_data["context"]["hook"] == "atexit"
    assert log_data["context"]["error_type"] == "RuntimeError"


def test_setup_logging_configures_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug")
        
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
