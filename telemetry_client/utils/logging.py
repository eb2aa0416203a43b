"""
Structured logging utilities with JSON formatting and context injection.

This module provides structured logging capabilities with:
- JSON formatted log output for machine-readable logs
- Context injection (state, reason) via LoggerAdapter
- Standardized log fields across the aggregator, transport and host binding
- Integration with Python's standard logging module
"""

import logging
import json
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional, MutableMapping
from logging import LogRecord

from telemetry_client.config import settings as default_settings


# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_ATTRS = frozenset([
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info", "taskName",
])

_PROMOTED_FIELDS = ("state", "reason")


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    
    Outputs log records as JSON with standard fields:
    - timestamp: ISO 8601 formatted timestamp
    - level: Log level (INFO, WARNING, ERROR, etc.)
    - logger: Logger name
    - message: Log message
    - state / reason: promoted telemetry context
    - context: Any other extra fields
    - error: Error details when exception info is attached
    """
    
    def format(self, record: LogRecord) -> str:
        """
        Format log record as JSON.
        
        Args:
            record: Log record to format
            
        Returns:
            JSON formatted log string
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        
        for field in _PROMOTED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)
        
        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and key not in _PROMOTED_FIELDS
        }
        if extra_fields:
            log_data["context"] = extra_fields
        
        if record.exc_info:
            log_data["error"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "stack_trace": "".join(traceback.format_exception(*record.exc_info))
            }
        
        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName
        }
        
        return json.dumps(log_data, default=str)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that injects context fields into all log records.
    """
    
    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})
    
    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        """
        Process log message and inject context.
        
        Call-site extra wins over adapter context for the same key.
        """
        extra = dict(self.extra)
        extra.update(kwargs.get("extra", {}))
        kwargs["extra"] = extra
        return msg, kwargs
    
    def with_context(self, **context: Any) -> "ContextLoggerAdapter":
        """
        Create a new logger adapter with additional context.
        
        Args:
            **context: Additional context fields
            
        Returns:
            New logger adapter with merged context
        """
        new_extra = self.extra.copy()
        new_extra.update(context)
        return ContextLoggerAdapter(self.logger, new_extra)


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Configure structured logging for a host process.
    
    Sets up:
    - JSON formatter for all handlers
    - Console handler with appropriate log level
    - Root logger configuration
    
    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            defaults to the configured log_level
    """
    log_level = (log_level or default_settings.log_level).upper()
    
    formatter = JSONFormatter()
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)
    
    # Reduce noise from the HTTP stack
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """
    Get a context-aware logger for a module.
    
    Args:
        name: Logger name (typically __name__)
        **context: Initial context fields
        
    Returns:
        Context logger adapter
        
    Example:
        logger = get_logger(__name__, reason="scheduled")
        logger.info("Flushing")  # Will include reason
    """
    base_logger = logging.getLogger(name)
    return ContextLoggerAdapter(base_logger, context)


def log_state_transition(
    logger: logging.LoggerAdapter,
    previous: str,
    current: str,
    trigger: str
) -> None:
    """
    Log an aggregator state transition.
    
    Args:
        logger: Logger to use
        previous: State before the transition
        current: State after the transition
        trigger: Lifecycle signal that caused it (e.g. 'cycle_start')
    """
    logger.debug(
        f"Aggregator state {previous} -> {current} on {trigger}",
        extra={
            "state": current,
            "previous_state": previous,
            "trigger": trigger,
        }
    )


def log_flush(
    logger: logging.LoggerAdapter,
    reason: str,
    error_count: int,
    payload_bytes: int
) -> None:
    """
    Log the start of a telemetry flush.
    
    Args:
        logger: Logger to use
        reason: Flush reason (e.g. 'fatal_error', 'scheduled')
        error_count: Number of error records in the payload
        payload_bytes: Serialized payload size
    """
    logger.info(
        f"Flushing telemetry ({reason})",
        extra={
            "reason": reason,
            "error_count": error_count,
            "payload_bytes": payload_bytes,
        }
    )


def log_delivery(
    logger: logging.LoggerAdapter,
    endpoint: str,
    status_code: Optional[int] = None,
    duration_ms: Optional[float] = None,
    error: Optional[str] = None
) -> None:
    """
    Log a payload delivery attempt with response details.
    
    Args:
        logger: Logger to use
        endpoint: Collection endpoint URL
        status_code: Response status code (if available)
        duration_ms: Request duration in milliseconds (if available)
        error: Error message (if delivery failed)
    """
    extra: Dict[str, Any] = {
        "endpoint": endpoint,
        "method": "POST",
    }
    
    if status_code is not None:
        extra["status_code"] = status_code
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)
    if error is not None:
        extra["error"] = error
    
    if error:
        logger.error(f"Telemetry delivery failed: POST {endpoint}", extra=extra)
    else:
        logger.info(f"Telemetry delivered: POST {endpoint}", extra=extra)


def log_error_with_context(
    logger: logging.LoggerAdapter,
    message: str,
    error: Exception,
    **context: Any
) -> None:
    """
    Log error with full stack trace and context.
    
    Args:
        logger: Logger to use
        message: Error message
        error: Exception object
        **context: Additional context fields
    """
    context.setdefault("error_type", type(error).__name__)
    logger.error(
        message,
        extra=context,
        exc_info=(type(error), error, error.__traceback__)
    )
