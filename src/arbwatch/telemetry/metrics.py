"""
Session counters for the monitor.

Collects what the end-of-session summary reports: how many ticks ran,
how pair evaluations ended, what was found and logged, and how long a
tick takes.
"""

import time
from collections import deque
from dataclasses import dataclass
from decimal import Decimal


@dataclass(slots=True, frozen=True)
class TickDurations:
    """Tick duration percentiles over the recent window, in microseconds."""

    count: int = 0
    mean_us: float = 0.0
    median_us: int = 0
    worst_us: int = 0


@dataclass
class MonitorStats:
    """Running totals since the monitor started."""

    ticks: int = 0
    pairs_evaluated: int = 0
    pairs_skipped: int = 0
    evaluation_errors: int = 0
    tick_errors: int = 0
    opportunities_found: int = 0
    log_flushes: int = 0
    opportunities_logged: int = 0
    best_profit_rate: Decimal | None = None

    @property
    def total_errors(self) -> int:
        return self.evaluation_errors + self.tick_errors


class MetricsCollector:
    """
    Collects monitor statistics.

    Tick durations are kept in a bounded window; everything else is a
    plain running total.
    """

    def __init__(self, window: int = 600) -> None:
        """
        Initialize collector.

        Args:
            window: Number of recent tick durations kept.
        """
        self._durations: deque[int] = deque(maxlen=window)
        self._stats = MonitorStats()
        self._started = time.monotonic()

    def record_tick(
        self,
        evaluated: int,
        skipped: int,
        errors: int,
        duration_us: int | None = None,
    ) -> None:
        """Record the outcome of one tick."""
        self._stats.ticks += 1
        self._stats.pairs_evaluated += evaluated
        self._stats.pairs_skipped += skipped
        self._stats.evaluation_errors += errors
        if duration_us is not None:
            self._durations.append(duration_us)

    def record_tick_error(self) -> None:
        """Record a tick that failed outside pair evaluation."""
        self._stats.tick_errors += 1

    def record_opportunity(self, profit_rate: Decimal) -> None:
        """Count an opportunity and track the best rate seen."""
        self._stats.opportunities_found += 1

        best = self._stats.best_profit_rate
        if best is None or profit_rate > best:
            self._stats.best_profit_rate = profit_rate

    def record_flush(self, count: int) -> None:
        """Record one written opportunity log file."""
        self._stats.log_flushes += 1
        self._stats.opportunities_logged += count

    def tick_durations(self) -> TickDurations:
        """Summarize recent tick durations."""
        if not self._durations:
            return TickDurations()

        ordered = sorted(self._durations)
        return TickDurations(
            count=len(ordered),
            mean_us=sum(ordered) / len(ordered),
            median_us=ordered[len(ordered) // 2],
            worst_us=ordered[-1],
        )

    @property
    def stats(self) -> MonitorStats:
        return self._stats

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self._started
