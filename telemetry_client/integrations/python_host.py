"""
Python process host binding.

Wires an aggregator into a running Python process:
- logging records and warnings become error signals
- an uncaught exception becomes the abnormal-termination signal
- interpreter exit becomes the cycle-end signal

Usage:
    aggregator = create_telemetry_aggregator()
    binding = install_python_host(aggregator)
    aggregator.on_cycle_start()
    ...
    binding.uninstall()
"""

import atexit
import logging
import sys
import traceback
import warnings
from typing import Optional

from telemetry_client.exceptions import TelemetryUsageError
from telemetry_client.models.severity import Severity
from telemetry_client.utils.logging import get_logger, log_error_with_context

logger = get_logger(__name__)

# Records from these loggers are never reported, so a failing flush cannot feed itself
INTERNAL_LOGGER_PREFIX = "telemetry_client"


def severity_for_level(levelno: int) -> Optional[Severity]:
    """
    Map a logging level to a severity.

    Returns:
        Matching Severity, or None for levels below INFO
    """
    if levelno >= logging.CRITICAL:
        return Severity.ERROR
    if levelno >= logging.ERROR:
        return Severity.USER_ERROR
    if levelno >= logging.WARNING:
        return Severity.USER_WARNING
    if levelno >= logging.INFO:
        return Severity.USER_NOTICE
    return None


def severity_for_warning(category: type) -> Severity:
    """Map a warning category to a severity."""
    if issubclass(category, (DeprecationWarning, PendingDeprecationWarning)):
        return Severity.DEPRECATED
    return Severity.WARNING


class TelemetryLogHandler(logging.Handler):
    """Logging handler that reports log records to an aggregator as errors."""

    def __init__(self, aggregator, level: int = logging.INFO):
        super().__init__(level)
        self.aggregator = aggregator

    def emit(self, record: logging.LogRecord) -> None:
        if record.name.startswith(INTERNAL_LOGGER_PREFIX):
            return

        severity = severity_for_level(record.levelno)
        if severity is None:
            return

        try:
            self.aggregator.on_error(severity, record.getMessage(), record.pathname, record.lineno)
        except Exception:
            self.handleError(record)


class PythonHostBinding:
    """Hooks an aggregator into the current interpreter; see install_python_host()."""

    def __init__(self, aggregator, logger_name: Optional[str] = None, level: int = logging.INFO):
        self.aggregator = aggregator
        self.handler = TelemetryLogHandler(aggregator, level=level)
        self._target_logger = logging.getLogger(logger_name)
        self._previous_excepthook = None
        self._previous_showwarning = None
        self.installed = False

    def install(self) -> "PythonHostBinding":
        if self.installed:
            return self

        self._target_logger.addHandler(self.handler)

        self._previous_excepthook = sys.excepthook
        sys.excepthook = self._excepthook

        self._previous_showwarning = warnings.showwarning
        warnings.showwarning = self._showwarning

        atexit.register(self.shutdown)
        self.installed = True
        logger.debug("Python host binding installed")
        return self

    def uninstall(self) -> None:
        """Restore the hooks replaced by install()."""
        if not self.installed:
            return

        self._target_logger.removeHandler(self.handler)
        if sys.excepthook == self._excepthook:
            sys.excepthook = self._previous_excepthook
        if warnings.showwarning == self._showwarning:
            warnings.showwarning = self._previous_showwarning
        atexit.unregister(self.shutdown)
        self.installed = False
        logger.debug("Python host binding uninstalled")

    def _excepthook(self, exc_type, exc_value, exc_tb) -> None:
        file_path, line = "", 0
        frames = traceback.extract_tb(exc_tb) if exc_tb is not None else []
        if frames:
            file_path, line = frames[-1].filename, frames[-1].lineno

        try:
            self.aggregator.on_abnormal_termination(
                Severity.ERROR,
                f"Uncaught {exc_type.__name__}: {exc_value}",
                file_path,
                line,
            )
        except TelemetryUsageError as e:
            log_error_with_context(logger, "Telemetry cycle could not be closed on abnormal termination", e)
        finally:
            self._previous_excepthook(exc_type, exc_value, exc_tb)

    def _showwarning(self, message, category, filename, lineno, file=None, line=None) -> None:
        self.aggregator.on_error(severity_for_warning(category), str(message), filename, lineno)
        self._previous_showwarning(message, category, filename, lineno, file, line)

    def shutdown(self) -> None:
        """Interpreter exit: end the open cycle, if any, and release the transport."""
        try:
            if self.aggregator.tracker.cycle_open:
                self.aggregator.on_cycle_end()
        except TelemetryUsageError as e:
            log_error_with_context(logger, "Telemetry cycle could not be closed at exit", e)
        finally:
            self.aggregator.close()


def install_python_host(aggregator, logger_name: Optional[str] = None, level: int = logging.INFO) -> PythonHostBinding:
    """
    Install an aggregator into the current Python process.

    Args:
        aggregator: TelemetryAggregator receiving the signals
        logger_name: Logger to attach the handler to (root logger if None)
        level: Minimum logging level reported

    Returns:
        Installed PythonHostBinding
    """
    return PythonHostBinding(aggregator, logger_name=logger_name, level=level).install()
