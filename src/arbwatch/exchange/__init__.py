"""Exchange integration module for the public order book APIs."""

from arbwatch.exchange.adapters import (
    BitbankAdapter,
    BitflyerAdapter,
    CoincheckAdapter,
    OrderBookAdapter,
    create_adapters,
)
from arbwatch.exchange.client import ExchangeClientError, FetchFailure, PublicRestClient
from arbwatch.exchange.rate_limiter import RateLimiter


__all__ = [
    "BitbankAdapter",
    "BitflyerAdapter",
    "CoincheckAdapter",
    "ExchangeClientError",
    "FetchFailure",
    "OrderBookAdapter",
    "PublicRestClient",
    "RateLimiter",
    "create_adapters",
]
