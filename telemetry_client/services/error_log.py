"""Insertion-ordered buffer of classified error records."""

from typing import Iterator, List

from telemetry_client.models.error import ErrorRecord


class ErrorLog:
    """
    Error records of the current cycle.
    
    The buffer is never truncated in memory; bounding happens only when a
    view is taken for export via recent().
    """
    
    def __init__(self):
        self._records: List[ErrorRecord] = []
    
    def append(self, record: ErrorRecord) -> None:
        """Append a record. No deduplication."""
        self._records.append(record)
    
    def recent(self, n: int) -> List[ErrorRecord]:
        """
        Return the last n records in insertion order.
        
        Args:
            n: Maximum number of records
            
        Returns:
            New list with min(n, len(self)) records
        """
        if n <= 0:
            return []
        return self._records[-n:]
    
    def clear(self) -> None:
        self._records = []
    
    def __len__(self) -> int:
        return len(self._records)
    
    def __iter__(self) -> Iterator[ErrorRecord]:
        return iter(list(self._records))
