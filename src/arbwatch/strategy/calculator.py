"""
Arbitrage profit calculation.

Computes the fee-adjusted profit rate of buying on one exchange and
selling on another.
"""

from decimal import ROUND_HALF_UP, Decimal

from arbwatch.config.constants import PROFIT_RATE_PLACES
from arbwatch.core.types import FeeSchedule, OrderBookSnapshot, Route, RouteRate


_HUNDRED = Decimal(100)
_ONE = Decimal(1)
_RATE_QUANTUM = Decimal(1).scaleb(-PROFIT_RATE_PLACES)


def profit_rate(
    buy_price: Decimal,
    buy_fee_pct: Decimal,
    sell_price: Decimal,
    sell_fee_pct: Decimal,
    transfer_fee_pct: Decimal,
) -> Decimal:
    """
    Calculate the profit rate (%) of one buy/sell round trip.

    The buy fee is added to the purchase price; the sell fee and the
    transfer fee are both taken off the sale price. The result is
    relative to the raw buy price and rounded half away from zero to
    three decimal places.

    Args:
        buy_price: Price paid on the buying exchange. Must be non-zero.
        buy_fee_pct: Fee (%) on the buy leg.
        sell_price: Price received on the selling exchange.
        sell_fee_pct: Fee (%) on the sell leg.
        transfer_fee_pct: Fee (%) for moving the asset between exchanges.

    Returns:
        Profit rate in percent.

    Example:
        >>> profit_rate(Decimal("100"), Decimal("0.1"), Decimal("100.5"),
        ...             Decimal("0"), Decimal("0.1"))
        Decimal('0.300')
    """
    actual_buy = buy_price * (_ONE + buy_fee_pct / _HUNDRED)
    actual_sell = sell_price * (_ONE - sell_fee_pct / _HUNDRED - transfer_fee_pct / _HUNDRED)

    profit = actual_sell - actual_buy
    return (profit / buy_price * _HUNDRED).quantize(_RATE_QUANTUM, rounding=ROUND_HALF_UP)


class ProfitCalculator:
    """
    Applies a fee schedule to directed routes.

    Buying crosses the ask and pays the taker fee; selling rests at the
    bid and pays the maker fee; the transfer fee is charged once.
    """

    __slots__ = ("_fees",)

    def __init__(self, fees: FeeSchedule) -> None:
        """
        Initialize calculator.

        Args:
            fees: Maker/taker fees per exchange and the transfer fee.
        """
        self._fees = fees

    def route_rate(
        self,
        route: Route,
        buy_snapshot: OrderBookSnapshot,
        sell_snapshot: OrderBookSnapshot,
    ) -> RouteRate:
        """
        Calculate the rate of buying at one exchange's ask and selling at
        another's bid.

        Args:
            route: Route being evaluated.
            buy_snapshot: Snapshot of the buying exchange.
            sell_snapshot: Snapshot of the selling exchange.

        Returns:
            RouteRate for the route.
        """
        if buy_snapshot.exchange != route.buy or sell_snapshot.exchange != route.sell:
            raise ValueError(
                f"Snapshots {buy_snapshot.exchange.value}/{sell_snapshot.exchange.value} "
                f"do not match route {route}"
            )

        rate = profit_rate(
            buy_price=buy_snapshot.best_ask,
            buy_fee_pct=self._fees.taker_fee(route.buy),
            sell_price=sell_snapshot.best_bid,
            sell_fee_pct=self._fees.maker_fee(route.sell),
            transfer_fee_pct=self._fees.transfer,
        )
        return RouteRate(route=route, rate=rate)

    @property
    def fees(self) -> FeeSchedule:
        """Get the fee schedule."""
        return self._fees
