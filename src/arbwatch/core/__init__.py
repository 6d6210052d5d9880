"""Core module containing the monitor loop and type definitions."""

from arbwatch.core.types import (
    CurrencyPair,
    ExchangeId,
    FeeSchedule,
    Opportunity,
    OrderBookSnapshot,
    PairResult,
    Quote,
    Route,
    RouteRate,
)


__all__ = [
    "CurrencyPair",
    "ExchangeId",
    "FeeSchedule",
    "Opportunity",
    "OrderBookSnapshot",
    "PairResult",
    "Quote",
    "Route",
    "RouteRate",
]
