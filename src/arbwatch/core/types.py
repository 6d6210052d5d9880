"""
Type definitions for the arbitrage monitor.

This module contains all dataclasses, enums and Protocol definitions used
throughout the application. Prices, fees and rates are Decimal so that
rounded profit rates are exact.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Protocol


# =============================================================================
# Enums
# =============================================================================


class ExchangeId(str, Enum):
    """Monitored exchanges. Values are the display names."""

    COINCHECK = "Coincheck"
    BITFLYER = "bitFlyer"
    BITBANK = "bitbank"


# =============================================================================
# Configuration Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class CurrencyPair:
    """
    A currency pair listed on every monitored exchange.

    Each exchange names the same market differently, so the pair carries
    one identifier per exchange.
    """

    symbol: str
    identifiers: Mapping[ExchangeId, str] = field(hash=False)

    @classmethod
    def of(cls, symbol: str, coincheck: str, bitflyer: str, bitbank: str) -> "CurrencyPair":
        """Build a pair from the three exchange identifiers."""
        return cls(
            symbol=symbol.upper(),
            identifiers={
                ExchangeId.COINCHECK: coincheck,
                ExchangeId.BITFLYER: bitflyer,
                ExchangeId.BITBANK: bitbank,
            },
        )

    def identifier(self, exchange: ExchangeId) -> str:
        """Get the exchange-specific identifier for this pair."""
        try:
            return self.identifiers[exchange]
        except KeyError:
            raise KeyError(f"{self.symbol} has no identifier for {exchange.value}") from None


@dataclass(slots=True, frozen=True)
class FeeSchedule:
    """
    Fee percentages used by the profit calculation.

    All values are percentages (0.1 means 0.1%).
    """

    maker: Mapping[ExchangeId, Decimal] = field(hash=False)
    taker: Mapping[ExchangeId, Decimal] = field(hash=False)
    transfer: Decimal = Decimal("0")

    @classmethod
    def flat(
        cls,
        exchanges: Sequence[ExchangeId],
        maker: Decimal = Decimal("0"),
        taker: Decimal = Decimal("0"),
        transfer: Decimal = Decimal("0"),
    ) -> "FeeSchedule":
        """Same maker/taker fee on every exchange."""
        return cls(
            maker={ex: maker for ex in exchanges},
            taker={ex: taker for ex in exchanges},
            transfer=transfer,
        )

    def maker_fee(self, exchange: ExchangeId) -> Decimal:
        """Maker fee (%) charged when selling on an exchange."""
        return self.maker[exchange]

    def taker_fee(self, exchange: ExchangeId) -> Decimal:
        """Taker fee (%) charged when buying on an exchange."""
        return self.taker[exchange]


# =============================================================================
# Market Data Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class Quote:
    """Best bid and ask of one exchange."""

    exchange: ExchangeId
    bid: Decimal
    ask: Decimal


@dataclass(slots=True, frozen=True)
class OrderBookSnapshot:
    """
    Normalized top of book for one exchange and pair.

    Created fresh on each poll and never reused across ticks.
    """

    exchange: ExchangeId
    pair_symbol: str
    best_bid: Decimal
    best_ask: Decimal
    fetched_at: datetime

    def __post_init__(self) -> None:
        if self.best_bid < 0:
            raise ValueError(f"Negative bid from {self.exchange.value}: {self.best_bid}")
        if self.best_ask <= 0:
            raise ValueError(f"Non-positive ask from {self.exchange.value}: {self.best_ask}")

    @property
    def quote(self) -> Quote:
        """Bid/ask without the fetch metadata."""
        return Quote(self.exchange, self.best_bid, self.best_ask)


# =============================================================================
# Route Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class Route:
    """Directed route: buy on one exchange, sell on another."""

    buy: ExchangeId
    sell: ExchangeId

    def __post_init__(self) -> None:
        if self.buy == self.sell:
            raise ValueError(f"Route needs two exchanges, got {self.buy.value} twice")

    def __str__(self) -> str:
        return f"{self.buy.value} → {self.sell.value}"


@dataclass(slots=True, frozen=True)
class RouteRate:
    """Profit rate (%) of one route."""

    route: Route
    rate: Decimal

    @property
    def is_profitable(self) -> bool:
        """A zero-margin route is not worth the execution risk."""
        return self.rate > 0


# =============================================================================
# Evaluation Results
# =============================================================================


@dataclass(slots=True, frozen=True)
class PairResult:
    """
    Evaluation of one currency pair at one tick.

    Holds the quotes of every exchange and the rate of every route.
    """

    timestamp: datetime
    symbol: str
    quotes: tuple[Quote, ...]
    rates: tuple[RouteRate, ...]

    def quote(self, exchange: ExchangeId) -> Quote:
        """Get the quote of an exchange."""
        for q in self.quotes:
            if q.exchange == exchange:
                return q
        raise KeyError(exchange)

    def rate(self, buy: ExchangeId, sell: ExchangeId) -> Decimal:
        """Get the rate of the route buy -> sell."""
        for r in self.rates:
            if r.route.buy == buy and r.route.sell == sell:
                return r.rate
        raise KeyError((buy, sell))

    @property
    def best_rate(self) -> Decimal:
        """Highest rate across all routes."""
        return max(r.rate for r in self.rates)


@dataclass(slots=True, frozen=True)
class Opportunity:
    """
    Route with a strictly positive profit rate.

    Keeps the quotes it was computed from for the opportunity log.
    """

    timestamp: datetime
    symbol: str
    from_exchange: ExchangeId
    to_exchange: ExchangeId
    profit_rate: Decimal
    quotes: tuple[Quote, ...]

    @property
    def route(self) -> Route:
        return Route(self.from_exchange, self.to_exchange)


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class ExchangeAdapter(Protocol):
    """Fetches and normalizes one exchange's order book."""

    exchange: ExchangeId

    async def fetch(self, pair: CurrencyPair) -> OrderBookSnapshot:
        """Fetch the best bid/ask, raising FetchFailure on any failure."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


class DisplaySink(Protocol):
    """Receives the results of every tick."""

    def display(
        self,
        results: Sequence[PairResult],
        updated_at: datetime,
        pending_count: int,
    ) -> None:
        """Render one tick."""
        ...


class LogSink(Protocol):
    """Persists drained opportunities."""

    def write(self, opportunities: Sequence[Opportunity]) -> Path | None:
        """Write opportunities, returning the file written (if any)."""
        ...
