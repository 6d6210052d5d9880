"""Utility functions for the arbitrage monitor."""

from arbwatch.utils.time import (
    Stopwatch,
    format_elapsed_us,
    format_timestamp,
    monotonic,
    now,
)


__all__ = [
    "Stopwatch",
    "format_elapsed_us",
    "format_timestamp",
    "monotonic",
    "now",
]
