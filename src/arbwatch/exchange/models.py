"""
Pydantic models for raw order book responses.

Each exchange returns a different shape. These models validate the raw
payload and expose plain price lists for normalization.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class CoincheckOrderBook(BaseModel):
    """
    Coincheck `/api/order_books` response.

    Levels are `[price, amount]` string pairs.
    """

    asks: list[tuple[Decimal, Decimal]]
    bids: list[tuple[Decimal, Decimal]]

    @property
    def ask_prices(self) -> list[Decimal]:
        return [price for price, _ in self.asks]

    @property
    def bid_prices(self) -> list[Decimal]:
        return [price for price, _ in self.bids]


class BitflyerLevel(BaseModel):
    """Single price level of a bitFlyer board."""

    price: Decimal
    size: Decimal


class BitflyerBoard(BaseModel):
    """bitFlyer `/v1/board` response (levels are objects)."""

    mid_price: Decimal | None = None
    bids: list[BitflyerLevel]
    asks: list[BitflyerLevel]

    @property
    def ask_prices(self) -> list[Decimal]:
        return [level.price for level in self.asks]

    @property
    def bid_prices(self) -> list[Decimal]:
        return [level.price for level in self.bids]


class BitbankDepthData(BaseModel):
    """Depth payload inside the bitbank envelope."""

    asks: list[tuple[Decimal, Decimal]]
    bids: list[tuple[Decimal, Decimal]]
    timestamp: int | None = None

    @property
    def ask_prices(self) -> list[Decimal]:
        return [price for price, _ in self.asks]

    @property
    def bid_prices(self) -> list[Decimal]:
        return [price for price, _ in self.bids]


class BitbankError(BaseModel):
    """Error payload of a failed bitbank response."""

    code: int | None = None


class BitbankDepth(BaseModel):
    """
    bitbank `/{pair}/depth` response.

    `success` is 1 when `data` holds the depth, 0 on error.
    """

    success: int
    data: BitbankDepthData | BitbankError | None = Field(default=None, union_mode="left_to_right")
