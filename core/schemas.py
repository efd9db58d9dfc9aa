"""
Normalized Data Schemas

This module defines Pydantic models for the data the exchange core inspects
or hands back to the strategy layer. Venue adapters translate their wire
formats into these schemas.

Models:
    - TradingPair: (tradeable, currency), serialized as "TRADEABLE_CURRENCY"
    - TransferFee: fixed amount or percentage-of-amount transfer fee
    - OrderbookEntry: one price level
    - Orderbook: bid and ask levels for a pair at a point in time
    - Ticker: best bid/ask snapshot for a pair
    - OrderType: buy or sell
"""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Union
from pydantic import BaseModel, Field, field_validator, ConfigDict

from core.utils.time import to_utc_datetime, current_utc_datetime


# Stored percentage fees are applied as raw multipliers: "2%" on 10 coins
# yields a fee of 20. Set to 0.01 to treat them as true percentages.
PERCENT_FEE_SCALE = 1


# ============================================
# Trading Pair
# ============================================

class TradingPair(BaseModel):
    """
    Ordered (tradeable, currency) pair.

    Externally a pair travels as "<TRADEABLE>_<CURRENCY>", e.g. "LTC_BTC"
    means LTC traded against BTC. Pairs are immutable and hashable so they
    can be collected in sets.

    Example:
        >>> pair = TradingPair.parse("LTC_BTC")
        >>> pair.tradeable, pair.currency
        ('LTC', 'BTC')
        >>> str(pair)
        'LTC_BTC'
    """

    tradeable: str = Field(..., min_length=1, description="Base asset symbol", examples=["LTC"])
    currency: str = Field(..., min_length=1, description="Quote asset symbol", examples=["BTC"])

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, value: Union[str, "TradingPair"]) -> "TradingPair":
        """
        Parse the wire form, splitting on the first "_".

        Raises:
            ValueError: If the separator is missing or a component is empty
        """
        if isinstance(value, TradingPair):
            return value
        tradeable, sep, currency = value.partition("_")
        if not sep or not tradeable or not currency:
            raise ValueError(f"Invalid trading pair: '{value}'. Expected TRADEABLE_CURRENCY")
        return cls(tradeable=tradeable, currency=currency)

    def __str__(self) -> str:
        return f"{self.tradeable}_{self.currency}"


# ============================================
# Transfer Fee
# ============================================

class TransferFee(BaseModel):
    """
    Transfer (withdrawal) fee of one asset on one venue.

    Either a fixed quantity denominated in the asset, or a percentage marker.
    Venues usually report them as numbers or strings such as "0.001" and "2%";
    use TransferFee.parse() to accept both.

    Attributes:
        kind: "fixed" or "percent"
        value: Fixed fee amount, or the stored percentage number

    Example:
        >>> TransferFee.parse("0.001").fee_for(10)
        0.001
        >>> TransferFee.parse("2%").fee_for(10)
        20.0
    """

    kind: Literal["fixed", "percent"]
    value: float = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, raw: Union[str, float, int, "TransferFee"]) -> "TransferFee":
        if isinstance(raw, TransferFee):
            return raw
        if isinstance(raw, str):
            raw = raw.strip()
            if raw.endswith("%"):
                return cls(kind="percent", value=float(raw[:-1]))
        return cls(kind="fixed", value=float(raw))

    @property
    def is_percentage(self) -> bool:
        return self.kind == "percent"

    def fee_for(self, amount: float) -> float:
        """Fee charged for transferring `amount`; fixed fees ignore the amount."""
        if self.is_percentage:
            return amount * self.value * PERCENT_FEE_SCALE
        return self.value


# ============================================
# Orderbook
# ============================================

class OrderbookEntry(BaseModel):
    """Single price level of an orderbook."""

    price: float = Field(..., description="Level price in the quote currency")
    amount: float = Field(..., description="Quantity of the tradeable at this price")


class Orderbook(BaseModel):
    """
    Orderbook snapshot for a trading pair.

    The core only inspects the best levels; ordering, sign and staleness of
    the levels are the venue adapter's concern.

    Attributes:
        tradeable: Base asset symbol
        currency: Quote asset symbol
        bids: Buy levels (at least one)
        asks: Sell levels (at least one)
        timestamp: Snapshot time in UTC (seconds or milliseconds are accepted)

    Example:
        >>> book = Orderbook(
        ...     tradeable="LTC",
        ...     currency="BTC",
        ...     bids=[OrderbookEntry(price=0.0099, amount=4)],
        ...     asks=[OrderbookEntry(price=0.0100, amount=2)],
        ... )
        >>> book.best_bid().price, book.best_ask().price
        (0.0099, 0.01)
    """

    tradeable: str
    currency: str
    bids: List[OrderbookEntry] = Field(..., min_length=1)
    asks: List[OrderbookEntry] = Field(..., min_length=1)
    timestamp: datetime = Field(default_factory=current_utc_datetime)

    @field_validator("timestamp", mode="before")
    @classmethod
    def normalize_timestamp(cls, v):
        """Accept epoch seconds/milliseconds as well as datetimes"""
        if isinstance(v, (int, float)):
            return to_utc_datetime(v)
        return v

    def best_bid(self) -> OrderbookEntry:
        """Highest-priced bid level"""
        return max(self.bids, key=lambda entry: entry.price)

    def best_ask(self) -> OrderbookEntry:
        """Lowest-priced ask level"""
        return min(self.asks, key=lambda entry: entry.price)

    @property
    def pair(self) -> TradingPair:
        return TradingPair(tradeable=self.tradeable, currency=self.currency)


# ============================================
# Ticker & Orders
# ============================================

class Ticker(BaseModel):
    """Best bid/ask snapshot for a pair, as returned by get_tickers()."""

    tradeable: str
    currency: str
    bid: float
    ask: float

    @property
    def pair(self) -> TradingPair:
        return TradingPair(tradeable=self.tradeable, currency=self.currency)


class OrderType(str, Enum):
    """Side of an order."""

    BUY = "buy"
    SELL = "sell"
