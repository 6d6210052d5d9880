"""
Accumulator for detected opportunities between log flushes.
"""

import logging
from collections.abc import Iterable, Iterator

from arbwatch.core.types import Opportunity


logger = logging.getLogger(__name__)


class OpportunityBuffer:
    """
    Ordered buffer of opportunities awaiting the next log flush.

    Appends are never reordered or deduplicated: the same route seen on
    two ticks is two observations.

    When a flush falls due with nothing buffered, the flush clock still
    advances by default. With `advance_when_empty=False` the clock only
    moves when something is actually flushed, so an empty due check
    repeats on every tick.
    """

    __slots__ = ("_items", "_last_flush_time", "_advance_when_empty")

    def __init__(self, start_time: float, advance_when_empty: bool = True) -> None:
        """
        Initialize buffer.

        Args:
            start_time: Clock reading treated as the last flush.
            advance_when_empty: Advance the flush clock on empty due checks.
        """
        self._items: list[Opportunity] = []
        self._last_flush_time = start_time
        self._advance_when_empty = advance_when_empty

    def append(self, opportunities: Iterable[Opportunity]) -> None:
        """Add opportunities in arrival order."""
        self._items.extend(opportunities)

    def is_due(self, now: float, interval: float) -> bool:
        """Check whether a flush interval has elapsed."""
        return now - self._last_flush_time >= interval

    def flush_if_due(self, now: float, interval: float) -> list[Opportunity]:
        """
        Drain the buffer if the flush interval has elapsed.

        Args:
            now: Current clock reading (same clock as start_time).
            interval: Flush interval in seconds.

        Returns:
            The drained opportunities, or an empty list when not due or
            nothing was buffered.
        """
        if not self.is_due(now, interval):
            return []

        if not self._items:
            if self._advance_when_empty:
                self._last_flush_time = now
            return []

        drained = self.drain()
        self._last_flush_time = now
        logger.debug(f"Flushed {len(drained)} opportunities")
        return drained

    def drain(self) -> list[Opportunity]:
        """Remove and return everything, ignoring the interval."""
        drained, self._items = self._items, []
        return drained

    def restore(self, opportunities: Iterable[Opportunity]) -> None:
        """Put drained opportunities back ahead of anything appended since."""
        self._items[:0] = opportunities

    @property
    def last_flush_time(self) -> float:
        """Clock reading of the last flush."""
        return self._last_flush_time

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Opportunity]:
        return iter(list(self._items))
