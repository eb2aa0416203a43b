"""
Performance Tracker component.

Captures a cycle's baseline (time, memory, resource counter) at start and,
at the end, computes deltas, reads peak memory and evaluates thresholds.
"""

from typing import Any, Optional

from telemetry_client.config import Settings, settings as default_settings
from telemetry_client.exceptions import CycleAlreadyFinalizedError, CycleNotStartedError
from telemetry_client.models.performance import (
    PerformanceMetrics,
    PerformanceSnapshot,
    ThresholdSet,
)
from telemetry_client.services.probes import (
    CallCounter,
    Clock,
    MemoryProbe,
    ProcessMemoryProbe,
    ResourceCounter,
    SystemClock,
)
from telemetry_client.utils.logging import get_logger

logger = get_logger(__name__)

EXECUTION_TIME_PRECISION = 4


def thresholds_from_settings(settings: Settings) -> ThresholdSet:
    """Build the threshold set configured in settings."""
    return ThresholdSet(
        execution_time=settings.execution_time_threshold,
        memory_usage=settings.memory_usage_threshold,
        resource_count=settings.resource_count_threshold,
    )


class PerformanceTracker:
    """
    Tracks the performance envelope of one cycle at a time.
    
    A snapshot is mutated exactly twice: at begin_cycle() and at end_cycle().
    Custom metrics may be attached any number of times in between.
    """
    
    def __init__(
        self,
        thresholds: Optional[ThresholdSet] = None,
        clock: Optional[Clock] = None,
        memory: Optional[MemoryProbe] = None,
        resource_counter: Optional[ResourceCounter] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the tracker.
        
        Args:
            thresholds: Per-cycle limits (defaults to the configured ones)
            clock: Time source
            memory: Memory source
            resource_counter: Resource operation counter
            settings: Settings used when thresholds are not given
        """
        self.thresholds = thresholds or thresholds_from_settings(settings or default_settings)
        self.clock = clock or SystemClock()
        self.memory = memory or ProcessMemoryProbe()
        self.resource_counter = resource_counter or CallCounter()
        self.snapshot = PerformanceSnapshot()
    
    @property
    def cycle_open(self) -> bool:
        """Whether a cycle has begun and not yet ended."""
        return self.snapshot.started and not self.snapshot.finalized
    
    def begin_cycle(self) -> PerformanceSnapshot:
        """
        Capture the cycle baseline.
        
        A finalized snapshot from the previous cycle is replaced by a fresh
        one; custom metrics attached before the first begin are kept.
        
        Returns:
            The snapshot now being tracked
        """
        if self.snapshot.finalized:
            self.snapshot = PerformanceSnapshot()
        elif self.snapshot.started:
            logger.warning("Cycle restarted before it ended; discarding previous baseline")
        
        self.snapshot.start_time = self.clock.now()
        self.snapshot.start_memory = self.memory.current_memory()
        self.snapshot.start_resource_count = self.resource_counter.count()
        return self.snapshot
    
    def end_cycle(self) -> PerformanceMetrics:
        """
        Finalize the cycle.
        
        Returns:
            Final PerformanceMetrics, including breached threshold names
            
        Raises:
            CycleNotStartedError: If begin_cycle() was not called
            CycleAlreadyFinalizedError: If the cycle already ended
        """
        if not self.snapshot.started:
            raise CycleNotStartedError("end_cycle() called before begin_cycle()")
        if self.snapshot.finalized:
            raise CycleAlreadyFinalizedError("end_cycle() called twice for the same cycle")
        
        execution_time = self.clock.now() - self.snapshot.start_time
        memory_usage = self.memory.current_memory() - self.snapshot.start_memory
        resource_count = self.resource_counter.count() - self.snapshot.start_resource_count
        
        metrics = PerformanceMetrics(
            execution_time=round(execution_time, EXECUTION_TIME_PRECISION),
            memory_usage=memory_usage,
            resource_count=resource_count,
            peak_memory_usage=self.memory.peak_memory(),
            exceeded_thresholds=self.thresholds.exceeded_by(
                execution_time, memory_usage, resource_count
            ),
        )
        self.snapshot.final_metrics = metrics
        
        logger.debug(
            "Cycle finalized",
            extra={
                "execution_time": metrics.execution_time,
                "memory_usage": metrics.memory_usage,
                "resource_count": metrics.resource_count,
                "exceeded_thresholds": metrics.exceeded_thresholds,
            }
        )
        return metrics
    
    def add_custom_metric(self, key: str, value: Any) -> None:
        """
        Attach a caller-defined metric to the current cycle. Last write wins.
        
        Raises:
            CycleAlreadyFinalizedError: If the cycle already ended
        """
        if self.snapshot.finalized:
            raise CycleAlreadyFinalizedError(f"Cannot add metric '{key}' after the cycle ended")
        self.snapshot.custom_metrics[key] = value
