"""
Resilience utilities for fire-and-forget delivery.

This module provides:
- ReentrancyGuard to stop a flush from starting another flush
- call_safely() to run a collaborator without letting its failure escape
"""

import logging
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ReentrancyGuard:
    """
    Flag-based guard for a non-reentrant section.
    
    The aggregator holds the guard while flushing. Errors reported by the
    transport (or by anything it calls) while the guard is held are still
    recorded, but cannot trigger a nested flush.
    
    Example:
        guard = ReentrancyGuard("flush")
        
        if guard.active:
            return
        with guard:
            transport.send(body)
    """
    
    def __init__(self, name: str):
        self.name = name
        self._depth = 0
    
    @property
    def active(self) -> bool:
        """Whether the guarded section is currently running."""
        return self._depth > 0
    
    def __enter__(self) -> "ReentrancyGuard":
        self._depth += 1
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._depth -= 1


def call_safely(
    func: Callable[..., T],
    *args: Any,
    fallback: Optional[T] = None,
    operation: str = "",
    context: Optional[dict] = None,
    **kwargs: Any
) -> Optional[T]:
    """
    Call a collaborator and log, rather than raise, any failure.
    
    Args:
        func: Callable to run
        *args: Positional arguments for func
        fallback: Value returned when func raises
        operation: Operation name for the log entry
        context: Context information for logging
        **kwargs: Keyword arguments for func
    
    Returns:
        func's result, or fallback if it raised
    """
    try:
        return func(*args, **kwargs)
    
    except Exception as e:
        logger.error(
            f"{operation or getattr(func, '__name__', 'call')} failed: {e}",
            extra={
                "operation": operation,
                "context": context or {},
                "error_type": type(e).__name__,
                "error_message": str(e)
            },
            exc_info=True
        )
        return fallback
