"""Telemetry collection and delivery services."""

from telemetry_client.services.aggregator import (
    AggregatorState,
    TelemetryAggregator,
    create_telemetry_aggregator
)
from telemetry_client.services.environment import (
    EnvironmentProvider,
    StaticEnvironmentProvider
)
from telemetry_client.services.error_classifier import ErrorClassifier
from telemetry_client.services.error_log import ErrorLog
from telemetry_client.services.performance_tracker import PerformanceTracker
from telemetry_client.services.probes import (
    CallCounter,
    Clock,
    MemoryProbe,
    ProcessMemoryProbe,
    ResourceCounter,
    SystemClock,
    TracemallocMemoryProbe
)
from telemetry_client.services.scheduler import FlushScheduler
from telemetry_client.services.transport import HttpTransport, Transport

__all__ = [
    'AggregatorState',
    'TelemetryAggregator',
    'create_telemetry_aggregator',
    'EnvironmentProvider',
    'StaticEnvironmentProvider',
    'ErrorClassifier',
    'ErrorLog',
    'PerformanceTracker',
    'CallCounter',
    'Clock',
    'MemoryProbe',
    'ProcessMemoryProbe',
    'ResourceCounter',
    'SystemClock',
    'TracemallocMemoryProbe',
    'FlushScheduler',
    'HttpTransport',
    'Transport'
]
