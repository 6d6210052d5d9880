"""
Clock helpers.

Results and log rows carry local wall-clock time; scheduling and tick
durations use monotonic clocks so that system clock jumps cannot
trigger or suppress a log flush.
"""

import time
from datetime import datetime


def now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()


def monotonic() -> float:
    """Monotonic clock reading in seconds, used for flush scheduling."""
    return time.monotonic()


def format_timestamp(ts: datetime, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
    """
    Format a datetime for the display and the opportunity log.

    Example:
        >>> format_timestamp(datetime(2024, 1, 1, 12, 0, 5))
        '2024-01-01 12:00:05'
    """
    return ts.strftime(fmt)


class Stopwatch:
    """
    Measures the wall time of a block in microseconds.

    Example:
        >>> with Stopwatch() as sw:
        ...     evaluate_all_pairs()
        >>> print(format_elapsed_us(sw.elapsed_us))
    """

    __slots__ = ("_started_ns", "elapsed_us")

    def __init__(self) -> None:
        self._started_ns = 0
        self.elapsed_us = 0

    def __enter__(self) -> "Stopwatch":
        self._started_ns = time.perf_counter_ns()
        return self

    def __exit__(self, *args: object) -> None:
        self.elapsed_us = (time.perf_counter_ns() - self._started_ns) // 1000


def format_elapsed_us(elapsed_us: int) -> str:
    """
    Human-readable duration.

    Examples:
        >>> format_elapsed_us(850)
        '850μs'
        >>> format_elapsed_us(42_300)
        '42.3ms'
        >>> format_elapsed_us(2_500_000)
        '2.50s'
    """
    if elapsed_us < 1000:
        return f"{elapsed_us}μs"
    if elapsed_us < 1_000_000:
        return f"{elapsed_us / 1000:.1f}ms"
    return f"{elapsed_us / 1_000_000:.2f}s"
