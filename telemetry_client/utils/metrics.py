"""
Timing and metric emission helpers.

This module provides:
- timed() context manager measuring a block in milliseconds
- emit_metric() for logging a named metric with tags
"""

import time
from contextlib import contextmanager
from typing import Any, Iterator

from telemetry_client.utils.logging import get_logger

logger = get_logger(__name__)


class Timer:
    """Elapsed time of a timed() block, filled in when the block exits."""

    def __init__(self) -> None:
        self.start: float = time.perf_counter()
        self.duration_ms: float = 0.0


@contextmanager
def timed() -> Iterator[Timer]:
    """
    Context manager to time a block.
    
    Usage:
        with timed() as timer:
            response = client.post(url, content=body)
        logger.info(f"took {timer.duration_ms}ms")
    
    Yields:
        Timer whose duration_ms is set on exit, including when the block raises
    """
    timer = Timer()
    try:
        yield timer
    finally:
        timer.duration_ms = (time.perf_counter() - timer.start) * 1000


def emit_metric(metric_name: str, value: float, **tags: Any) -> None:
    """
    Emit a metric about the client itself.
    
    Args:
        metric_name: Metric name
        value: Metric value
        **tags: Metric tags/labels
    """
    logger.debug(
        f"Metric: {metric_name}",
        extra={
            "metric_name": metric_name,
            "metric_value": value,
            "metric_tags": tags,
        }
    )
