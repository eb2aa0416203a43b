"""Performance tracking data models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from telemetry_client.exceptions import CycleNotFinalizedError


class ThresholdSet(BaseModel):
    """Per-cycle limits; a delta strictly above its limit is a breach."""

    model_config = ConfigDict(frozen=True)

    execution_time: float = 1.0  # seconds
    memory_usage: int = 32 * 1024 * 1024  # bytes
    resource_count: int = 100

    def exceeded_by(self, execution_time: float, memory_usage: int, resource_count: int) -> List[str]:
        """
        Names of the thresholds breached by a cycle's deltas.
        
        Args:
            execution_time: Elapsed seconds
            memory_usage: Memory delta in bytes
            resource_count: Resource counter delta
            
        Returns:
            Threshold names in declaration order
        """
        deltas = {
            "execution_time": execution_time,
            "memory_usage": memory_usage,
            "resource_count": resource_count,
        }
        return [name for name, delta in deltas.items() if delta > getattr(self, name)]


class PerformanceMetrics(BaseModel):
    """Final metrics of a cycle, computed once at cycle end."""

    execution_time: float
    memory_usage: int
    resource_count: int
    peak_memory_usage: int
    exceeded_thresholds: List[str] = []


class PerformanceSnapshot(BaseModel):
    """Baseline of a cycle plus, once finalized, its metrics."""

    start_time: Optional[float] = None
    start_memory: Optional[int] = None
    start_resource_count: Optional[int] = None
    final_metrics: Optional[PerformanceMetrics] = None
    custom_metrics: Dict[str, Any] = {}

    @property
    def started(self) -> bool:
        return self.start_time is not None

    @property
    def finalized(self) -> bool:
        return self.final_metrics is not None

    @property
    def metrics(self) -> PerformanceMetrics:
        """
        Final metrics of the cycle.
        
        Raises:
            CycleNotFinalizedError: If the cycle has not ended yet
        """
        if self.final_metrics is None:
            raise CycleNotFinalizedError("Performance metrics are not available before the cycle ends")
        return self.final_metrics

    def to_payload(self) -> Dict[str, Any]:
        """Wire view: baseline, final metrics when present, custom metrics."""
        data: Dict[str, Any] = {
            "start_time": self.start_time,
            "start_memory": self.start_memory,
            "start_resource_count": self.start_resource_count,
        }
        if self.final_metrics is not None:
            data["metrics"] = self.final_metrics.model_dump()
        if self.custom_metrics:
            data["custom_metrics"] = dict(self.custom_metrics)
        return data
