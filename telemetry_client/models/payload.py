"""Outbound telemetry payload models."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .environment import ComponentInfo, EnvironmentFacts
from .error import ErrorRecord
from .performance import PerformanceSnapshot


class FlushReason(str, Enum):
    """Why a payload is being sent."""

    FATAL_ERROR = "fatal_error"
    THRESHOLD_BREACH = "threshold_breach"
    SCHEDULED = "scheduled"
    MANUAL = "manual"


class TelemetryPayload(BaseModel):
    """Envelope posted to the collection endpoint."""

    site_url: str
    platform_version: str
    runtime_version: str
    is_multisite: bool
    locale: str
    plugins: List[ComponentInfo] = []
    themes: List[ComponentInfo] = []
    performance_metrics: Dict[str, Any] = {}
    error_logs: List[ErrorRecord] = []

    @classmethod
    def build(
        cls,
        facts: EnvironmentFacts,
        snapshot: PerformanceSnapshot,
        errors: List[ErrorRecord],
    ) -> "TelemetryPayload":
        """
        Assemble a payload from environment facts, a snapshot and an error view.
        
        Args:
            facts: Host environment facts
            snapshot: Current performance snapshot (finalized or not)
            errors: Already-bounded error log view
            
        Returns:
            New TelemetryPayload
        """
        return cls(
            **facts.model_dump(),
            performance_metrics=snapshot.to_payload(),
            error_logs=list(errors),
        )

    def to_bytes(self) -> bytes:
        """Serialize to compact JSON bytes."""
        return self.model_dump_json().encode("utf-8")


class DeliveryResult(BaseModel):
    """Outcome of a single transport send."""

    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
    duration_ms: Optional[float] = None
