"""
Unit tests for timing and metric helpers.
"""

import pytest

from telemetry_client.utils.metrics import emit_metric, timed


def test_timed_records_duration():
    """Test timing a block."""
    with timed() as timer:
        sum(range(1000))
    
    assert timer.duration_ms >= 0


def test_timed_records_duration_when_block_raises():
    """Test timing survives an exception in the block."""
    with pytest.raises(RuntimeError):
        with timed() as timer:
            raise RuntimeError("boom")
    
    assert timer.duration_ms >= 0


def test_emit_metric():
    """Test emitting a metric."""
    # This should not raise an exception
    emit_metric("telemetry.flush", 1, reason="scheduled", success=True)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
