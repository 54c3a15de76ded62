"""
Bounded calculation history, newest entry first.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, Iterator, Tuple

from .config import HISTORY_LIMIT

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class HistoryEntry:
    """A completed calculation."""
    expression: str
    result: float
    timestamp: datetime = field(default_factory=_utcnow)


class CalculationHistory:
    """Keeps the most recent calculations, evicting the oldest past the limit."""

    def __init__(self, limit: int = HISTORY_LIMIT):
        """
        Initialize an empty history.

        Args:
            limit: Maximum number of entries kept
        """
        if limit < 1:
            raise ValueError(f"History limit must be positive, got {limit}")
        self.limit = limit
        self._entries: Deque[HistoryEntry] = deque(maxlen=limit)

    def record(self, expression: str, result: float) -> HistoryEntry:
        """
        Insert a calculation at the front of the history.

        Args:
            expression: Formatted expression, e.g. "1,200 + 34"
            result: Numeric result

        Returns:
            The created HistoryEntry
        """
        entry = HistoryEntry(expression=expression, result=result)
        # appendleft on a full deque drops the rightmost (oldest) entry
        self._entries.appendleft(entry)
        logger.debug(f"Recorded {expression} = {result} ({len(self._entries)}/{self.limit})")
        return entry

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()
        logger.debug("Cleared calculation history")

    def entries(self) -> Tuple[HistoryEntry, ...]:
        """Read-only snapshot, newest first."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self.entries())
