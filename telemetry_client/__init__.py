"""
Telemetry client.

Collects runtime errors and per-cycle performance metrics from a host
application and reports them to a remote collection endpoint.
"""

from telemetry_client.services.aggregator import (
    AggregatorState,
    TelemetryAggregator,
    create_telemetry_aggregator,
)

__version__ = "0.1.0"

__all__ = [
    "AggregatorState",
    "TelemetryAggregator",
    "create_telemetry_aggregator",
]
