"""Unit tests for ErrorLog."""

from datetime import datetime

import pytest

from telemetry_client.models.error import ErrorContext, ErrorRecord, OriginatingComponent
from telemetry_client.models.severity import ComponentKind, Severity
from telemetry_client.services.error_log import ErrorLog


def make_record(index: int) -> ErrorRecord:
    return ErrorRecord(
        severity=Severity.USER_ERROR,
        message=f"error {index}",
        source_file="wp-includes/load.php",
        line=index,
        timestamp=datetime(2024, 1, 1, 12, 0, 0),
        originating_component=OriginatingComponent(kind=ComponentKind.CORE, identifier="wordpress"),
        context=ErrorContext(),
    )


def test_append_preserves_order():
    log = ErrorLog()
    records = [make_record(i) for i in range(5)]
    
    for record in records:
        log.append(record)
    
    assert list(log) == records
    assert len(log) == 5


def test_no_deduplication():
    log = ErrorLog()
    record = make_record(1)
    
    log.append(record)
    log.append(record)
    
    assert len(log) == 2


@pytest.mark.parametrize("size,n", [(0, 50), (3, 50), (50, 50), (120, 50), (10, 1), (10, 10)])
def test_recent_returns_last_entries_in_order(size, n):
    log = ErrorLog()
    records = [make_record(i) for i in range(size)]
    for record in records:
        log.append(record)
    
    recent = log.recent(n)
    
    assert recent == records[-n:]
    assert len(recent) == min(n, size)


def test_recent_does_not_truncate_log():
    log = ErrorLog()
    for i in range(60):
        log.append(make_record(i))
    
    log.recent(50)
    
    assert len(log) == 60
    assert list(log)[0].line == 0


def test_recent_with_non_positive_n():
    log = ErrorLog()
    log.append(make_record(1))
    
    assert log.recent(0) == []
    assert log.recent(-3) == []


def test_clear():
    log = ErrorLog()
    log.append(make_record(1))
    
    log.clear()
    
    assert len(log) == 0
