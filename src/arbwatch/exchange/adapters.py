"""
Order book adapters for the monitored exchanges.

Each adapter fetches one exchange's public order book and normalizes its
response shape into an OrderBookSnapshot. Anything short of a complete,
positive top of book raises FetchFailure.
"""

import logging
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ValidationError

from arbwatch.config.constants import (
    BITBANK_PUBLIC_URL,
    BITBANK_SUCCESS,
    BITFLYER_REST_URL,
    COINCHECK_REST_URL,
    DEFAULT_FETCH_TIMEOUT,
    ENDPOINT_BITBANK_DEPTH,
    ENDPOINT_BITFLYER_BOARD,
    ENDPOINT_COINCHECK_ORDER_BOOKS,
)
from arbwatch.core.types import CurrencyPair, ExchangeId, OrderBookSnapshot
from arbwatch.exchange.client import FetchFailure, PublicRestClient
from arbwatch.exchange.models import (
    BitbankDepth,
    BitbankDepthData,
    BitflyerBoard,
    CoincheckOrderBook,
)
from arbwatch.exchange.rate_limiter import RateLimiter
from arbwatch.utils.time import now


logger = logging.getLogger(__name__)


def build_snapshot(
    exchange: ExchangeId,
    symbol: str,
    bid_prices: Sequence[Decimal],
    ask_prices: Sequence[Decimal],
) -> OrderBookSnapshot:
    """
    Reduce both sides of a book to the best bid and best ask.

    Uses the highest bid and the lowest ask regardless of the order the
    exchange lists them in.

    Raises:
        FetchFailure: If a side is empty or a price is out of range.
    """
    if not bid_prices:
        raise FetchFailure(exchange, f"Empty bid side for {symbol}")
    if not ask_prices:
        raise FetchFailure(exchange, f"Empty ask side for {symbol}")

    best_bid = max(bid_prices)
    best_ask = min(ask_prices)

    if best_ask <= 0:
        raise FetchFailure(exchange, f"Non-positive ask {best_ask} for {symbol}")
    if best_bid < 0:
        raise FetchFailure(exchange, f"Negative bid {best_bid} for {symbol}")

    return OrderBookSnapshot(
        exchange=exchange,
        pair_symbol=symbol,
        best_bid=best_bid,
        best_ask=best_ask,
        fetched_at=now(),
    )


class OrderBookAdapter:
    """
    Base adapter: request, validate, normalize.

    Subclasses define the endpoint and how to read their response model.
    """

    exchange: ExchangeId
    base_url: str

    def __init__(
        self,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        rate_limiter: RateLimiter | None = None,
        client: PublicRestClient | None = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            timeout: Total request timeout in seconds.
            rate_limiter: Optional per-exchange rate limiter.
            client: Optional pre-built REST client (used by tests).
        """
        self._client = client or PublicRestClient(
            exchange=self.exchange,
            base_url=self.base_url,
            timeout=timeout,
            rate_limiter=rate_limiter,
        )

    def _request(self, pair_id: str) -> tuple[str, dict[str, str] | None]:
        """Path and query parameters for a pair."""
        raise NotImplementedError

    def parse(self, data: Any, symbol: str) -> OrderBookSnapshot:
        """Normalize a decoded response body."""
        raise NotImplementedError

    def _validate(self, model: type[BaseModel], data: Any) -> Any:
        """Validate raw data against a response model."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise FetchFailure(
                self.exchange,
                f"Malformed order book ({e.error_count()} errors)",
            ) from e

    async def fetch(self, pair: CurrencyPair) -> OrderBookSnapshot:
        """
        Fetch the best bid/ask for a pair.

        Raises:
            FetchFailure: On any transport, status, format or content problem.
        """
        pair_id = pair.identifier(self.exchange)
        path, params = self._request(pair_id)

        data = await self._client.get_json(path, params)
        snapshot = self.parse(data, pair.symbol)

        logger.debug(
            f"{self.exchange.value} {pair.symbol}: "
            f"bid={snapshot.best_bid} ask={snapshot.best_ask}"
        )
        return snapshot

    async def close(self) -> None:
        """Close the underlying client."""
        await self._client.close()

    async def __aenter__(self) -> "OrderBookAdapter":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


class CoincheckAdapter(OrderBookAdapter):
    """Coincheck: `{"asks": [[price, amount]], "bids": [...]}`."""

    exchange = ExchangeId.COINCHECK
    base_url = COINCHECK_REST_URL

    def _request(self, pair_id: str) -> tuple[str, dict[str, str] | None]:
        return ENDPOINT_COINCHECK_ORDER_BOOKS, {"pair": pair_id}

    def parse(self, data: Any, symbol: str) -> OrderBookSnapshot:
        book: CoincheckOrderBook = self._validate(CoincheckOrderBook, data)
        return build_snapshot(self.exchange, symbol, book.bid_prices, book.ask_prices)


class BitflyerAdapter(OrderBookAdapter):
    """bitFlyer: `{"bids": [{"price": p, "size": s}], "asks": [...]}`."""

    exchange = ExchangeId.BITFLYER
    base_url = BITFLYER_REST_URL

    def _request(self, pair_id: str) -> tuple[str, dict[str, str] | None]:
        return ENDPOINT_BITFLYER_BOARD, {"product_code": pair_id}

    def parse(self, data: Any, symbol: str) -> OrderBookSnapshot:
        board: BitflyerBoard = self._validate(BitflyerBoard, data)
        return build_snapshot(self.exchange, symbol, board.bid_prices, board.ask_prices)


class BitbankAdapter(OrderBookAdapter):
    """bitbank: `{"success": 1, "data": {"asks": [[p, a]], "bids": [...]}}`."""

    exchange = ExchangeId.BITBANK
    base_url = BITBANK_PUBLIC_URL

    def _request(self, pair_id: str) -> tuple[str, dict[str, str] | None]:
        return ENDPOINT_BITBANK_DEPTH.format(pair=pair_id), None

    def parse(self, data: Any, symbol: str) -> OrderBookSnapshot:
        envelope: BitbankDepth = self._validate(BitbankDepth, data)

        if envelope.success != BITBANK_SUCCESS:
            code = getattr(envelope.data, "code", None)
            raise FetchFailure(self.exchange, f"Request unsuccessful (code={code})")

        if not isinstance(envelope.data, BitbankDepthData):
            raise FetchFailure(self.exchange, "Successful response without depth data")

        depth = envelope.data
        return build_snapshot(self.exchange, symbol, depth.bid_prices, depth.ask_prices)


def create_adapters(
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    requests_per_second: float | None = None,
) -> dict[ExchangeId, OrderBookAdapter]:
    """
    Create one adapter per exchange, each with its own rate limiter.

    Args:
        timeout: Total request timeout in seconds.
        requests_per_second: Request budget per exchange (None disables).

    Returns:
        Adapters keyed by exchange, in exchange order.
    """
    adapters: dict[ExchangeId, OrderBookAdapter] = {}
    for adapter_cls in (CoincheckAdapter, BitflyerAdapter, BitbankAdapter):
        limiter = RateLimiter(requests_per_second) if requests_per_second else None
        adapters[adapter_cls.exchange] = adapter_cls(timeout=timeout, rate_limiter=limiter)
    return adapters
