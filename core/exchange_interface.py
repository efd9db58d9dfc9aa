"""
Exchange Interface — Abstract Contract for All Venues

This module defines the capability surface every venue adapter exposes to the
strategy layer, and the cross-venue policy the core supplies for free.

Two kinds of methods live on ExchangeInterface:

    Shared (concrete, not meant to be overridden):
        get_tradeable_pairs, get_wallets, get_coin_name, get_transfer_fee,
        get_confirmation_time, get_orderbook, and the fee hooks
        add_fee_to_price / deduct_fee_from_amount_buy / deduct_fee_from_amount_sell
        (identity by default; a venue with a trading fee overrides them)

    Venue-specific (abstract, no default):
        get_tickers, withdraw, get_deposit_address, buy, sell, cancel_order,
        cancel_all_orders, get_filled_order_price, refresh_exchange_data,
        dump_wallets, refresh_wallets, detect_stuck_transfers,
        get_smallest_order_size, get_id, get_name, test_access,
        get_wallets_considering_pending_deposits, _fetch_orderbook

The shared methods hold no state themselves: they delegate to an embedded
ExchangePolicy (Rate/Fee Table, pair snapshot, wallet snapshot) and to the
injected ExchangeContext (nonces, public query client, pair filter).

Example:
    class PoloniexExchange(ExchangeInterface):

        def get_id(self):
            return 1

        def get_name(self):
            return "Poloniex"

        def refresh_exchange_data(self):
            currencies = self._query_public_json(CURRENCIES_URL)
            tickers = self._query_public_json(TICKER_URL)
            self.publish_exchange_data(
                pairs=list(tickers),
                transfer_fees={c: v["txFee"] for c, v in currencies.items()},
                confirmation_times={c: v["minConf"] for c, v in currencies.items()},
                names={c: v["name"] for c, v in currencies.items()},
            )
        ...
"""

import threading
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

from core.context import ExchangeContext, get_default_context
from core.exceptions import InvalidCredentials
from core.logging import get_exchange_logger
from core.orderbook_gate import OrderbookSanityGate
from core.pair_filter import TradeablePairFilter
from core.reference_data import ReferenceData
from core.schemas import Orderbook, OrderType, Ticker, TradingPair


# ============================================
# Shared Policy
# ============================================

class ExchangePolicy:
    """
    Cross-venue policy state of one venue instance.

    Holds the Rate/Fee Table, the raw pair universe, the derived tradeable
    pair snapshot and the wallet snapshot. Writers publish fully built
    replacements under a lock; readers just read the current reference, so
    they never observe a partially updated value.

    Args:
        pair_filter: Filter applied whenever exchange data is published
        log: Venue notice sink
    """

    def __init__(self, pair_filter: TradeablePairFilter, log):
        self.pair_filter = pair_filter
        self.log = log
        self.reference_data = ReferenceData()
        self.pairs: FrozenSet[TradingPair] = frozenset()
        self.tradeable_pairs: FrozenSet[TradingPair] = frozenset()
        self.wallets: Mapping[str, float] = MappingProxyType({})
        self._write_lock = threading.Lock()

    def publish_exchange_data(
        self,
        pairs: Iterable,
        transfer_fees: Optional[Mapping[str, Any]] = None,
        confirmation_times: Optional[Mapping[str, int]] = None,
        names: Optional[Mapping[str, str]] = None
    ) -> FrozenSet[TradingPair]:
        """
        Replace the raw pairs and the Rate/Fee Table, then recompute the
        tradeable pair set from scratch.

        Returns:
            FrozenSet[TradingPair]: The new tradeable pair snapshot
        """
        raw_pairs = frozenset(map(TradingPair.parse, pairs))
        reference_data = ReferenceData(
            transfer_fees=dict(transfer_fees or {}),
            confirmation_times=dict(confirmation_times or {}),
            names=dict(names or {})
        )
        tradeable = self.pair_filter.compute(raw_pairs, reference_data)

        with self._write_lock:
            self.pairs = raw_pairs
            self.reference_data = reference_data
            self.tradeable_pairs = tradeable

        self.log.info(f"{len(tradeable)} of {len(raw_pairs)} pairs are tradeable")
        return tradeable

    def recalculate_tradeable_pairs(self) -> FrozenSet[TradingPair]:
        """Recompute the tradeable set from the current raw pairs and table."""
        with self._write_lock:
            self.tradeable_pairs = self.pair_filter.compute(self.pairs, self.reference_data)
            return self.tradeable_pairs

    def publish_wallets(self, wallets: Mapping[str, float]) -> None:
        snapshot = MappingProxyType(dict(wallets))
        with self._write_lock:
            self.wallets = snapshot

    # ============================================
    # Reference Data Lookups
    # ============================================

    def coin_name(self, symbol: str) -> Optional[str]:
        name = self.reference_data.coin_name(symbol)
        if name is None:
            self.log.warning(
                f"Unknown coin name for {symbol}. There is a minimal risk that two different "
                f"coins with the same abbreviation exist. This cannot be automatically checked for {symbol}."
            )
        return name

    def transfer_fee(self, symbol: str, amount: float) -> Optional[float]:
        # Probed often; unknown fees are not logged
        return self.reference_data.transfer_fee(symbol, amount)

    def confirmation_time(self, symbol: str) -> Optional[int]:
        conf_time = self.reference_data.confirmation_time(symbol)
        if conf_time is None:
            self.log.warning(f"Unknown confirmation time for {symbol}. Calculations may be inaccurate!")
        return conf_time


# ============================================
# Exchange Interface
# ============================================

class ExchangeInterface(ABC):
    """
    Abstract Base Class for Venue Adapters

    Args:
        api_key: Venue API key (required)
        api_secret: Venue API secret (required)
        context: Shared ExchangeContext (get_default_context() if None)

    Raises:
        InvalidCredentials: If api_key or api_secret is None

    Notes:
        - get_id() and get_name() are called before any adapter state set after
          super().__init__() exists; they must not depend on it
        - Construction performs no network call; call refresh_exchange_data()
          and refresh_wallets() before trading
        - get_tradeable_pairs() is empty until the first refresh
    """

    def __init__(self, api_key: Optional[str], api_secret: Optional[str], context: Optional[ExchangeContext] = None):
        if api_key is None or api_secret is None:
            raise InvalidCredentials(
                f"{self._prefix()}Invalid API key or secret",
                context={"exchange": self.get_name()}
            )

        self._api_key = api_key
        self._api_secret = api_secret
        self.context = context or get_default_context()
        self.log = get_exchange_logger(self.get_name())
        self.policy = ExchangePolicy(self.context.pair_filter, self.log)
        self.orderbook_gate = OrderbookSanityGate(self._fetch_orderbook, self.log)

    # ============================================
    # Shared Methods
    # ============================================

    def get_tradeable_pairs(self) -> FrozenSet[TradingPair]:
        """Pairs admitted by the last refresh (empty before the first one)."""
        return self.policy.tradeable_pairs

    def get_wallets(self) -> Mapping[str, float]:
        """Last published wallet snapshot (read-only); staleness is the caller's concern."""
        return self.policy.wallets

    def add_fee_to_price(self, price: float) -> float:
        return price

    def deduct_fee_from_amount_buy(self, amount: float) -> float:
        return amount

    def deduct_fee_from_amount_sell(self, amount: float) -> float:
        return amount

    def get_coin_name(self, symbol: str) -> Optional[str]:
        """Display name of `symbol`; None (with a warning) when unknown."""
        return self.policy.coin_name(symbol)

    def get_transfer_fee(self, symbol: str, amount: float) -> Optional[float]:
        """
        Fee for withdrawing `amount` of `symbol`, or None when unknown.

        Fixed fees are returned as-is. Percentage entries are multiplied with
        `amount` as stored (see core.schemas.PERCENT_FEE_SCALE).
        """
        return self.policy.transfer_fee(symbol, amount)

    def get_confirmation_time(self, symbol: str) -> Optional[int]:
        """Expected confirmation time of `symbol`; None (with a warning) when unknown."""
        return self.policy.confirmation_time(symbol)

    def get_orderbook(self, tradeable: str, currency: str) -> Optional[Orderbook]:
        """Venue orderbook for the pair, or None if unavailable or drunk."""
        return self.orderbook_gate.get_orderbook(tradeable, currency)

    # ============================================
    # Helpers for Venue Implementations
    # ============================================

    def publish_exchange_data(
        self,
        pairs: Iterable,
        transfer_fees: Optional[Mapping[str, Any]] = None,
        confirmation_times: Optional[Mapping[str, int]] = None,
        names: Optional[Mapping[str, str]] = None
    ) -> FrozenSet[TradingPair]:
        """Called by refresh_exchange_data() once venue metadata is fetched."""
        return self.policy.publish_exchange_data(pairs, transfer_fees, confirmation_times, names)

    def publish_wallets(self, wallets: Mapping[str, float]) -> None:
        """Called by refresh_wallets() once balances are fetched."""
        self.policy.publish_wallets(wallets)

    def _prefix(self) -> str:
        return f"[{self.get_name()}] "

    def _nonce(self) -> int:
        return self.context.nonces.next_nonce(self.get_id(), self.get_name())

    def _query_public(self, url: str) -> str:
        return self.context.query_client.query(url, prefix=self._prefix())

    def _query_public_json(self, url: str) -> Any:
        return self.context.query_client.query_json(url, prefix=self._prefix())

    # ============================================
    # Venue-Specific Methods
    # ============================================

    @abstractmethod
    def get_tickers(self, currency: str) -> List[Ticker]:
        """Best bid/ask of every pair quoted in `currency`."""
        ...

    @abstractmethod
    def withdraw(self, coin: str, amount: float, address: str) -> bool:
        """Withdraw `amount` of `coin` to `address`; True if the venue accepted it."""
        ...

    @abstractmethod
    def get_deposit_address(self, coin: str) -> Optional[str]:
        ...

    @abstractmethod
    def buy(self, tradeable: str, currency: str, rate: float, amount: float) -> Optional[str]:
        """Place a limit buy order; returns the venue order id."""
        ...

    @abstractmethod
    def sell(self, tradeable: str, currency: str, rate: float, amount: float) -> Optional[str]:
        """Place a limit sell order; returns the venue order id."""
        ...

    @abstractmethod
    def cancel_order(self, order_id: str) -> bool:
        ...

    @abstractmethod
    def cancel_all_orders(self) -> None:
        ...

    @abstractmethod
    def get_filled_order_price(self, order_type: OrderType, tradeable: str, currency: str, order_id: str) -> Optional[float]:
        ...

    @abstractmethod
    def refresh_exchange_data(self) -> None:
        """Refetch pairs, transfer fees, confirmation times and names, then call publish_exchange_data()."""
        ...

    @abstractmethod
    def dump_wallets(self) -> None:
        ...

    @abstractmethod
    def refresh_wallets(self) -> None:
        """Refetch balances, then call publish_wallets()."""
        ...

    @abstractmethod
    def detect_stuck_transfers(self) -> None:
        ...

    @abstractmethod
    def get_smallest_order_size(self) -> float:
        ...

    @abstractmethod
    def get_id(self) -> int:
        """Stable venue identifier; keys nonce state."""
        ...

    @abstractmethod
    def get_name(self) -> str:
        """Human-readable venue name; prefixes every log line."""
        ...

    @abstractmethod
    def test_access(self) -> None:
        """Verify the credentials; raise if the venue rejects them."""
        ...

    @abstractmethod
    def get_wallets_considering_pending_deposits(self) -> Dict[str, float]:
        ...

    @abstractmethod
    def _fetch_orderbook(self, tradeable: str, currency: str) -> Optional[Orderbook]:
        """Raw orderbook fetch; callers go through get_orderbook()."""
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.get_id()!r}, name='{self.get_name()}')>"
