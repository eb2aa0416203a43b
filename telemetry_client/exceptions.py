"""Exceptions raised by the telemetry client."""


class TelemetryError(Exception):
    """Base exception for telemetry client errors."""
    pass


class TelemetryUsageError(TelemetryError):
    """The client was driven out of its lifecycle contract (programming error)."""
    pass


class CycleNotStartedError(TelemetryUsageError):
    """A cycle was ended before it was started."""
    pass


class CycleAlreadyFinalizedError(TelemetryUsageError):
    """The current cycle's snapshot has already been finalized."""
    pass


class CycleNotFinalizedError(TelemetryUsageError):
    """Final metrics were read before the cycle ended."""
    pass
