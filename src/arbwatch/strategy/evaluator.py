"""
Cross-exchange evaluation of one currency pair.

Fetches every exchange's book concurrently, computes the rate of every
directed route and extracts the profitable ones.
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from itertools import combinations

from arbwatch.core.types import (
    CurrencyPair,
    ExchangeAdapter,
    ExchangeId,
    Opportunity,
    OrderBookSnapshot,
    PairResult,
    Route,
)
from arbwatch.exchange.client import FetchFailure
from arbwatch.strategy.calculator import ProfitCalculator
from arbwatch.utils.time import now


logger = logging.getLogger(__name__)


def build_routes(exchanges: Sequence[ExchangeId]) -> tuple[Route, ...]:
    """
    Generate every directed route between the given exchanges.

    Each unordered pair (X, Y) yields X -> Y followed by Y -> X, in
    exchange order. Three exchanges give six routes:
    A->B, B->A, A->C, C->A, B->C, C->B.
    """
    routes: list[Route] = []
    for first, second in combinations(exchanges, 2):
        routes.append(Route(buy=first, sell=second))
        routes.append(Route(buy=second, sell=first))
    return tuple(routes)


class ArbitrageEvaluator:
    """
    Evaluates currency pairs across all exchanges.

    A pair is only evaluated from a complete set of snapshots taken in the
    same tick; if any exchange fails, the pair is skipped.
    """

    def __init__(
        self,
        adapters: Mapping[ExchangeId, ExchangeAdapter],
        calculator: ProfitCalculator,
        exchanges: Sequence[ExchangeId] | None = None,
    ) -> None:
        """
        Initialize evaluator.

        Args:
            adapters: One adapter per exchange.
            calculator: Profit calculator with the fee schedule.
            exchanges: Exchange order (defaults to adapter order).
        """
        self._exchanges = tuple(exchanges) if exchanges else tuple(adapters)

        missing = [ex.value for ex in self._exchanges if ex not in adapters]
        if missing:
            raise ValueError(f"No adapter for {', '.join(missing)}")
        if len(self._exchanges) < 2:
            raise ValueError("At least two exchanges are needed for arbitrage")

        self._adapters = adapters
        self._calculator = calculator
        self._routes = build_routes(self._exchanges)

    async def _fetch_all(self, pair: CurrencyPair) -> dict[ExchangeId, OrderBookSnapshot] | None:
        """Fetch every exchange concurrently; None if any fetch failed."""
        results = await asyncio.gather(
            *(self._adapters[ex].fetch(pair) for ex in self._exchanges),
            return_exceptions=True,
        )

        snapshots: dict[ExchangeId, OrderBookSnapshot] = {}
        failed = False
        for exchange, result in zip(self._exchanges, results, strict=True):
            if isinstance(result, FetchFailure):
                logger.warning(f"Order book fetch failed for {pair.symbol}: {result}")
                failed = True
            elif isinstance(result, BaseException):
                raise result
            else:
                snapshots[exchange] = result

        return None if failed else snapshots

    async def evaluate(self, pair: CurrencyPair) -> PairResult | None:
        """
        Evaluate a currency pair.

        Args:
            pair: Pair to evaluate.

        Returns:
            PairResult, or None when any exchange could not be fetched.

        Raises:
            Exception: Unexpected errors propagate to the caller.
        """
        timestamp = now()

        snapshots = await self._fetch_all(pair)
        if snapshots is None:
            return None

        rates = tuple(
            self._calculator.route_rate(route, snapshots[route.buy], snapshots[route.sell])
            for route in self._routes
        )

        return PairResult(
            timestamp=timestamp,
            symbol=pair.symbol,
            quotes=tuple(snapshots[ex].quote for ex in self._exchanges),
            rates=rates,
        )

    @staticmethod
    def extract_opportunities(result: PairResult) -> list[Opportunity]:
        """
        Turn every strictly profitable route into an Opportunity.

        Order follows the route order of the result; no sorting by rate.
        """
        return [
            Opportunity(
                timestamp=result.timestamp,
                symbol=result.symbol,
                from_exchange=route_rate.route.buy,
                to_exchange=route_rate.route.sell,
                profit_rate=route_rate.rate,
                quotes=result.quotes,
            )
            for route_rate in result.rates
            if route_rate.is_profitable
        ]

    @property
    def routes(self) -> tuple[Route, ...]:
        """Get the evaluated routes in order."""
        return self._routes

    @property
    def exchanges(self) -> tuple[ExchangeId, ...]:
        """Get the exchange order."""
        return self._exchanges
