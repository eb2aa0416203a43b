"""Data models for the telemetry client."""

from .environment import ComponentInfo, EnvironmentFacts
from .error import ErrorContext, ErrorRecord, OriginatingComponent, RequestContext
from .payload import DeliveryResult, FlushReason, TelemetryPayload
from .performance import PerformanceMetrics, PerformanceSnapshot, ThresholdSet
from .severity import (
    FATAL_SEVERITIES,
    SEVERITY_ALL,
    ComponentKind,
    Severity,
    SeverityCode,
    is_fatal,
    resolve_severity,
    severity_label,
)

__all__ = [
    # Severity models
    "Severity",
    "SeverityCode",
    "SEVERITY_ALL",
    "FATAL_SEVERITIES",
    "ComponentKind",
    "resolve_severity",
    "severity_label",
    "is_fatal",
    # Error models
    "ErrorRecord",
    "ErrorContext",
    "OriginatingComponent",
    "RequestContext",
    # Performance models
    "ThresholdSet",
    "PerformanceMetrics",
    "PerformanceSnapshot",
    # Environment models
    "ComponentInfo",
    "EnvironmentFacts",
    # Payload models
    "FlushReason",
    "TelemetryPayload",
    "DeliveryResult",
]
