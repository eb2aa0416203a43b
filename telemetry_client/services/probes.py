"""
Runtime probes read by the performance tracker and the classifier.

Each probe is a narrow interface so hosts (and tests) can substitute their
own source of time, memory and resource-usage figures.
"""

import time
import tracemalloc
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

import psutil


class Clock(ABC):
    """Source of time."""
    
    @abstractmethod
    def now(self) -> float:
        """Return the current time as epoch seconds."""
        pass
    
    def wall_time(self) -> datetime:
        """Return the current local time, used to timestamp error records."""
        return datetime.fromtimestamp(self.now())


class MemoryProbe(ABC):
    """Source of memory usage figures."""
    
    @abstractmethod
    def current_memory(self) -> int:
        """Return bytes currently allocated."""
        pass
    
    @abstractmethod
    def peak_memory(self) -> int:
        """Return the high-water mark of allocated bytes."""
        pass


class ResourceCounter(ABC):
    """Monotonic counter of resource operations (e.g. storage queries)."""
    
    @abstractmethod
    def count(self) -> int:
        """Return the number of operations performed so far."""
        pass


class SystemClock(Clock):
    """Clock backed by time.time()."""
    
    def now(self) -> float:
        return time.time()


class ProcessMemoryProbe(MemoryProbe):
    """
    Memory probe backed by the process resident set size (psutil).
    
    Peak memory is the OS high-water mark where the platform reports one
    (peak_wset on Windows), otherwise the highest RSS observed by this probe.
    """
    
    def __init__(self, process: Optional[psutil.Process] = None):
        self._process = process or psutil.Process()
        self._observed_peak = 0
    
    def current_memory(self) -> int:
        rss = self._process.memory_info().rss
        self._observed_peak = max(self._observed_peak, rss)
        return rss
    
    def peak_memory(self) -> int:
        mem_info = self._process.memory_info()
        peak = getattr(mem_info, "peak_wset", None)
        if peak is not None:
            return peak
        self._observed_peak = max(self._observed_peak, mem_info.rss)
        return self._observed_peak


class TracemallocMemoryProbe(MemoryProbe):
    """
    Memory probe backed by tracemalloc, for hosts that already trace.
    
    Figures only cover allocations made while tracing is on. Tracing is
    started only when asked for explicitly.
    """
    
    def __init__(self, start: bool = False):
        if start and not tracemalloc.is_tracing():
            tracemalloc.start()
    
    def current_memory(self) -> int:
        current, _ = tracemalloc.get_traced_memory()
        return current
    
    def peak_memory(self) -> int:
        _, peak = tracemalloc.get_traced_memory()
        return peak


class CallCounter(ResourceCounter):
    """
    Counter the host increments on every tracked operation.
    
    Example:
        queries = CallCounter()
        
        def execute(sql):
            queries.increment()
            return cursor.execute(sql)
    """
    
    def __init__(self, initial: int = 0):
        self._count = initial
    
    def increment(self, amount: int = 1) -> int:
        self._count += amount
        return self._count
    
    def count(self) -> int:
        return self._count
