"""
Tradeable-Pair Filter

Derives the set of pairs a venue may trade from its raw pair universe,
its Rate/Fee Table and two global thresholds:

    max_tx_fee         - fixed transfer fee x average rate must stay below it
    max_conf_time      - confirmation time must stay below it

Per raw pair (tradeable, currency):
    1. look up the average rate of `tradeable` from the price reference
    2. exclude if a FIXED transfer fee exists and fee * rate >= max_tx_fee
    3. exclude if a confirmation time exists and time >= max_conf_time
    4. include otherwise

Percentage fees never exclude a pair, and missing fee or confirmation data
never excludes a pair either.
"""

from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, Iterable, Optional

from core.logging import get_logger
from core.reference_data import ReferenceData
from core.schemas import TradingPair


logger = get_logger(__name__)


# ============================================
# Price Reference Collaborator
# ============================================

class PriceReference(ABC):
    """
    Source of average exchange rates, used to convert fixed transfer fees
    into the unit `max_tx_fee_allowed` is expressed in.
    """

    @abstractmethod
    def get_average_rate(self, symbol: str) -> Optional[float]:
        """Average rate of `symbol`, or None when the rate is unknown."""
        ...


class StaticPriceReference(PriceReference):
    """
    PriceReference backed by a fixed mapping.

    Unknown symbols resolve to `default` (0.0 unless given), which never
    triggers fee-based exclusion.

    Example:
        >>> prices = StaticPriceReference({"LTC": 0.01, "ETH": 0.05})
        >>> prices.get_average_rate("LTC")
        0.01
    """

    def __init__(self, rates: Optional[Dict[str, float]] = None, default: float = 0.0):
        self.rates = dict(rates or {})
        self.default = default

    def get_average_rate(self, symbol: str) -> Optional[float]:
        return self.rates.get(symbol, self.default)


# ============================================
# Filter
# ============================================

class TradeablePairFilter:
    """
    Applies the admission thresholds to a venue's raw pairs.

    Args:
        price_reference: Source of average rates
        max_tx_fee: Exclusive upper bound for fixed fee * average rate
        max_conf_time: Exclusive upper bound for confirmation time

    Example:
        >>> pair_filter = TradeablePairFilter(StaticPriceReference({"LTC": 0.01}), 0.005, 30)
        >>> data = ReferenceData(transfer_fees={"LTC": 1}, confirmation_times={"LTC": 5})
        >>> pair_filter.compute(["LTC_BTC"], data)
        frozenset()
    """

    def __init__(self, price_reference: PriceReference, max_tx_fee: float, max_conf_time: float):
        self.price_reference = price_reference
        self.max_tx_fee = max_tx_fee
        self.max_conf_time = max_conf_time

    @classmethod
    def from_settings(cls, price_reference: PriceReference, config) -> "TradeablePairFilter":
        """Build a filter from Settings.max_tx_fee_allowed / max_confirmations_allowed"""
        return cls(price_reference, config.max_tx_fee_allowed, config.max_confirmations_allowed)

    def is_tradeable(self, pair: TradingPair, reference_data: ReferenceData) -> bool:
        tradeable = pair.tradeable
        average_rate = self.price_reference.get_average_rate(tradeable) or 0.0

        fee = reference_data.transfer_fee_entry(tradeable)
        if fee is not None and not fee.is_percentage and fee.value * average_rate >= self.max_tx_fee:
            logger.debug(f"Excluding {pair}: transfer fee {fee.value} x rate {average_rate} >= {self.max_tx_fee}")
            return False

        conf_time = reference_data.confirmation_time(tradeable)
        if conf_time is not None and conf_time >= self.max_conf_time:
            logger.debug(f"Excluding {pair}: confirmation time {conf_time} >= {self.max_conf_time}")
            return False

        return True

    def compute(self, pairs: Iterable, reference_data: ReferenceData) -> FrozenSet[TradingPair]:
        """
        Compute the admissible subset of `pairs`.

        Args:
            pairs: Raw pairs, as TradingPair objects or "TRADEABLE_CURRENCY" strings
            reference_data: The venue's current Rate/Fee Table

        Returns:
            FrozenSet[TradingPair]: A fresh snapshot; never a superset of `pairs`
        """
        return frozenset(
            pair for pair in map(TradingPair.parse, pairs)
            if self.is_tradeable(pair, reference_data)
        )
