"""
Scheduled flush component.

Guarantees a minimum reporting cadence: once scheduled, the aggregator
receives a scheduled-tick signal every interval, whether or not anything
anomalous happened. The host drives it by calling run_pending() from its own
loop (a worker poll, a cron request, a timer).
"""

from typing import Dict, Optional, Union

from telemetry_client.config import Settings, settings as default_settings
from telemetry_client.services.probes import Clock, SystemClock
from telemetry_client.utils.logging import get_logger

logger = get_logger(__name__)

# Named recurrences, in seconds
INTERVALS: Dict[str, int] = {
    "hourly": 60 * 60,
    "twicedaily": 12 * 60 * 60,
    "daily": 24 * 60 * 60,
}


def resolve_interval(interval: Union[int, float, str]) -> float:
    """
    Convert an interval name or number of seconds to seconds.
    
    Raises:
        ValueError: If the interval is unknown or not positive
    """
    if isinstance(interval, str):
        if interval in INTERVALS:
            return float(INTERVALS[interval])
        try:
            seconds = float(interval)
        except ValueError:
            raise ValueError(
                f"Unknown flush interval '{interval}'. Expected one of {sorted(INTERVALS)} or seconds"
            )
    else:
        seconds = float(interval)
    
    if seconds <= 0:
        raise ValueError(f"Flush interval must be positive, got {interval!r}")
    return seconds


class FlushScheduler:
    """Emits scheduled-tick signals to an aggregator at a fixed interval."""
    
    def __init__(
        self,
        aggregator,
        interval: Union[int, float, str, None] = None,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the scheduler.
        
        Args:
            aggregator: Receiver of on_scheduled_tick()
            interval: Interval name ('hourly', 'twicedaily', 'daily') or seconds;
                defaults to the configured flush_interval
            clock: Time source
            settings: Settings used when interval is not given
        """
        self.aggregator = aggregator
        if interval is None:
            interval = (settings or default_settings).flush_interval
        self.interval = resolve_interval(interval)
        self.clock = clock or SystemClock()
        self.next_run: Optional[float] = None
    
    @property
    def is_scheduled(self) -> bool:
        return self.next_run is not None
    
    def schedule(self) -> bool:
        """
        Schedule the recurring flush, starting now.
        
        Returns:
            True if a schedule was created, False if one already existed
        """
        if self.is_scheduled:
            return False
        
        self.next_run = self.clock.now()
        logger.info(f"Scheduled telemetry flush every {self.interval:.0f}s")
        return True
    
    def unschedule(self) -> None:
        self.next_run = None
    
    def run_pending(self) -> bool:
        """
        Emit a scheduled tick if one is due.
        
        Missed runs are not replayed: at most one tick is emitted per call and
        the next run is moved past the current time.
        
        Returns:
            True if a tick was emitted
        """
        if self.next_run is None:
            return False
        
        now = self.clock.now()
        if now < self.next_run:
            return False
        
        while self.next_run <= now:
            self.next_run += self.interval
        
        self.aggregator.on_scheduled_tick()
        return True
