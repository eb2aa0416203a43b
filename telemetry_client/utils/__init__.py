"""
Utility modules for the telemetry client.
"""

from telemetry_client.utils.logging import (
    get_logger,
    setup_logging,
    log_state_transition,
    log_flush,
    log_delivery,
    log_error_with_context,
)
from telemetry_client.utils.metrics import (
    timed,
    emit_metric,
)
from telemetry_client.utils.resilience import (
    ReentrancyGuard,
    call_safely,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "log_state_transition",
    "log_flush",
    "log_delivery",
    "log_error_with_context",
    "timed",
    "emit_metric",
    "ReentrancyGuard",
    "call_safely",
]
