"""
Market data factories for testing.

Build snapshots and opportunities from string prices.
"""

from datetime import datetime
from decimal import Decimal

from arbwatch.core.types import ExchangeId, Opportunity, OrderBookSnapshot, Quote


CC = ExchangeId.COINCHECK
BF = ExchangeId.BITFLYER
BB = ExchangeId.BITBANK


def make_snapshot(
    exchange: ExchangeId,
    bid: str,
    ask: str,
    symbol: str = "BTC",
) -> OrderBookSnapshot:
    """Build a snapshot from string prices."""
    return OrderBookSnapshot(
        exchange=exchange,
        pair_symbol=symbol,
        best_bid=Decimal(bid),
        best_ask=Decimal(ask),
        fetched_at=datetime(2024, 1, 1, 12, 0, 0),
    )


def make_opportunity(
    symbol: str = "BTC",
    from_exchange: ExchangeId = CC,
    to_exchange: ExchangeId = BF,
    rate: str = "0.5",
    timestamp: datetime | None = None,
) -> Opportunity:
    """Build an opportunity with fixed quotes."""
    return Opportunity(
        timestamp=timestamp or datetime(2024, 1, 1, 12, 0, 0),
        symbol=symbol,
        from_exchange=from_exchange,
        to_exchange=to_exchange,
        profit_rate=Decimal(rate),
        quotes=(
            Quote(CC, Decimal("9999000"), Decimal("10000000")),
            Quote(BF, Decimal("10050000"), Decimal("10060000")),
            Quote(BB, Decimal("9998000"), Decimal("10001000")),
        ),
    )
