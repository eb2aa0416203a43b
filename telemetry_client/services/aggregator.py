"""
Telemetry Aggregator component.

Central state machine for one collection cycle. It owns the cycle's
performance tracker and error log, reacts to host lifecycle signals, decides
when a flush is warranted and hands the payload to the transport.

States:
- IDLE: no cycle in progress
- COLLECTING: a cycle is open; errors are classified and buffered
- FLUSHING: a payload is being built and sent
"""

from enum import Enum
from typing import Any, Optional

from telemetry_client.config import Settings, settings as default_settings
from telemetry_client.models.error import ErrorRecord, RequestContext
from telemetry_client.models.payload import DeliveryResult, FlushReason, TelemetryPayload
from telemetry_client.models.performance import PerformanceMetrics
from telemetry_client.models.severity import is_fatal, resolve_severity, severity_label
from telemetry_client.services.environment import EnvironmentProvider, StaticEnvironmentProvider
from telemetry_client.services.error_classifier import ErrorClassifier
from telemetry_client.services.error_log import ErrorLog
from telemetry_client.services.performance_tracker import PerformanceTracker
from telemetry_client.services.probes import Clock, MemoryProbe, ResourceCounter, SystemClock
from telemetry_client.services.transport import HttpTransport, Transport
from telemetry_client.utils.logging import get_logger, log_flush, log_state_transition
from telemetry_client.utils.metrics import emit_metric
from telemetry_client.utils.resilience import ReentrancyGuard, call_safely

logger = get_logger(__name__)


class AggregatorState(str, Enum):
    """Aggregator lifecycle states."""

    IDLE = "idle"
    COLLECTING = "collecting"
    FLUSHING = "flushing"


class TelemetryAggregator:
    """
    Collects errors and performance metrics and decides when to report them.

    Flushes happen:
    - eagerly when a fatal-tier error is recorded
    - at cycle end when any performance threshold was exceeded
    - on every scheduled tick, regardless of thresholds

    Delivery is fire-and-forget: the result is observed and logged, failures
    are never retried or raised.
    """

    def __init__(
        self,
        transport: Transport,
        environment: EnvironmentProvider,
        classifier: Optional[ErrorClassifier] = None,
        tracker: Optional[PerformanceTracker] = None,
        error_log: Optional[ErrorLog] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the aggregator.

        Args:
            transport: Payload delivery collaborator
            environment: Environment facts provider
            classifier: Error classifier (built from settings if omitted)
            tracker: Performance tracker (built from settings if omitted)
            error_log: Error buffer
            settings: Telemetry settings
            clock: Time source for the default classifier and tracker
        """
        self.settings = settings or default_settings
        self.transport = transport
        self.environment = environment
        self.request_context = RequestContext()
        self.classifier = classifier or ErrorClassifier(
            settings=self.settings,
            clock=clock,
            context_provider=self._current_request_context,
        )
        self.tracker = tracker or PerformanceTracker(clock=clock, settings=self.settings)
        self.error_log = error_log if error_log is not None else ErrorLog()

        self.state = AggregatorState.IDLE
        self.flush_count = 0
        self.last_delivery: Optional[DeliveryResult] = None
        self._flush_guard = ReentrancyGuard("flush")

    def _current_request_context(self) -> RequestContext:
        return self.request_context

    def _transition(self, state: AggregatorState, trigger: str) -> None:
        previous = self.state
        self.state = state
        log_state_transition(logger, previous.value, state.value, trigger)

    def _settle(self, trigger: str) -> None:
        """Leave FLUSHING: back to COLLECTING while a cycle is open, else IDLE."""
        if self.tracker.cycle_open:
            self._transition(AggregatorState.COLLECTING, trigger)
        else:
            self._transition(AggregatorState.IDLE, trigger)

    # Host lifecycle signals

    def on_cycle_start(self, request_context: Optional[RequestContext] = None) -> None:
        """
        Start a collection cycle.

        State left over from a finished cycle (error log, snapshot) is
        discarded. Errors recorded before the first cycle starts are kept.

        Args:
            request_context: Actor and request path for this cycle
        """
        if self.tracker.snapshot.finalized:
            self.error_log.clear()

        self.request_context = request_context or RequestContext()
        self.tracker.begin_cycle()
        self._transition(AggregatorState.COLLECTING, "cycle_start")

    def on_error(self, severity_code: int, message: str, file_path: str, line: int) -> Optional[ErrorRecord]:
        """
        Record an error raised by the host.

        Errors outside the configured reporting level are ignored entirely.
        A fatal-tier error triggers an eager flush, unless it was raised
        while a flush is already running.

        Args:
            severity_code: Raw severity code
            message: Error message
            file_path: File the error was raised in
            line: Line number

        Returns:
            The recorded ErrorRecord, or None if the error was filtered out
        """
        if not self.classifier.should_report(severity_code):
            return None

        record = self.classifier.classify(severity_code, message, file_path, line)
        self.error_log.append(record)

        if is_fatal(record.severity):
            if self._flush_guard.active:
                logger.warning(
                    "Fatal error raised during flush; not starting a nested flush",
                    extra={"severity": severity_label(record.severity), "source_file": record.source_file}
                )
            else:
                self.flush(FlushReason.FATAL_ERROR)

        return record

    def on_cycle_end(self) -> PerformanceMetrics:
        """
        End the current cycle and flush if any threshold was exceeded.

        Returns:
            Final metrics of the cycle

        Raises:
            CycleNotStartedError: If no cycle was started
            CycleAlreadyFinalizedError: If the cycle already ended
        """
        metrics = self.tracker.end_cycle()

        if metrics.exceeded_thresholds:
            logger.warning(
                f"Performance thresholds exceeded: {', '.join(metrics.exceeded_thresholds)}",
                extra={"exceeded_thresholds": metrics.exceeded_thresholds}
            )
            self.flush(FlushReason.THRESHOLD_BREACH)

        if self.state != AggregatorState.IDLE:
            self._transition(AggregatorState.IDLE, "cycle_end")
        return metrics

    def on_abnormal_termination(
        self,
        severity_code: Optional[int] = None,
        message: str = "",
        file_path: str = "",
        line: int = 0,
    ) -> Optional[PerformanceMetrics]:
        """
        Handle the host terminating abnormally.

        The last error, when it is fatal-tier, goes through on_error(); then
        the open cycle (if any) is ended through on_cycle_end(). Safe to call
        after a normal cycle end.

        Args:
            severity_code: Severity of the last error, if one is known
            message: Message of the last error
            file_path: File of the last error
            line: Line of the last error

        Returns:
            Final metrics if this call ended the cycle, else None
        """
        if severity_code is not None and is_fatal(resolve_severity(severity_code)):
            self.on_error(severity_code, message, file_path, line)

        if self.tracker.cycle_open:
            return self.on_cycle_end()
        return None

    def on_scheduled_tick(self) -> DeliveryResult:
        """Flush on the reporting schedule, regardless of thresholds."""
        return self.flush(FlushReason.SCHEDULED)

    # Metrics

    def add_custom_metric(self, key: str, value: Any) -> None:
        """Attach a caller-defined metric to the current cycle. Last write wins."""
        self.tracker.add_custom_metric(key, value)

    # Delivery

    def build_payload(self) -> TelemetryPayload:
        """
        Build the outbound payload from the current state.

        Does not mutate the aggregator; two builds from the same state
        serialize identically.
        """
        return TelemetryPayload.build(
            facts=self.environment.get_facts(),
            snapshot=self.tracker.snapshot,
            errors=self.error_log.recent(self.settings.max_exported_errors),
        )

    def flush(self, reason: FlushReason = FlushReason.MANUAL) -> DeliveryResult:
        """
        Build and send a payload.

        Any failure, whether reported by the transport or raised by it, is
        logged and returned as an unsuccessful DeliveryResult.

        Args:
            reason: Why the flush happens

        Returns:
            DeliveryResult of the send
        """
        self._transition(AggregatorState.FLUSHING, reason.value)
        self.flush_count += 1
        flush_logger = logger.with_context(reason=reason.value)

        with self._flush_guard:
            try:
                payload = self.build_payload()
                body = payload.to_bytes()
                log_flush(flush_logger, reason.value, len(payload.error_logs), len(body))

                result = call_safely(
                    self.transport.send,
                    body,
                    fallback=None,
                    operation="telemetry_send",
                    context={"reason": reason.value},
                )
                if result is None:
                    result = DeliveryResult(success=False, error="Transport raised an exception")

            except Exception as e:
                flush_logger.error(f"Failed to build telemetry payload: {e}", exc_info=True)
                result = DeliveryResult(success=False, error=f"{type(e).__name__}: {e}")

        if not result.success:
            flush_logger.warning(f"Telemetry flush failed ({reason.value}): {result.error}")
        emit_metric("telemetry.flush", 1, reason=reason.value, success=result.success)

        self.last_delivery = result
        self._settle("flush_complete")
        return result

    def close(self) -> None:
        """Release the transport."""
        self.transport.close()


def create_telemetry_aggregator(
    settings: Optional[Settings] = None,
    transport: Optional[Transport] = None,
    environment: Optional[EnvironmentProvider] = None,
    clock: Optional[Clock] = None,
    memory: Optional[MemoryProbe] = None,
    resource_counter: Optional[ResourceCounter] = None,
) -> TelemetryAggregator:
    """
    Create an aggregator wired with default collaborators.

    Args:
        settings: Telemetry settings (module settings if omitted)
        transport: Delivery collaborator (HttpTransport if omitted)
        environment: Environment provider (StaticEnvironmentProvider if omitted)
        clock: Time source shared by the classifier and the tracker
        memory: Memory probe
        resource_counter: Resource operation counter

    Returns:
        Configured TelemetryAggregator
    """
    settings = settings or default_settings
    clock = clock or SystemClock()

    return TelemetryAggregator(
        transport=transport or HttpTransport(settings=settings),
        environment=environment or StaticEnvironmentProvider(settings=settings),
        tracker=PerformanceTracker(
            clock=clock,
            memory=memory,
            resource_counter=resource_counter,
            settings=settings,
        ),
        settings=settings,
        clock=clock,
    )
