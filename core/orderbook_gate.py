"""
Orderbook Sanity Gate

Wraps a venue's raw orderbook fetch with the one consistency check the core
performs: a book whose best ask equals its best bid comes from a malfunctioning
("drunk") feed and is suppressed to None with a warning. Every other book,
including crossed or empty-priced ones, is returned unchanged.
"""

import logging
from typing import Callable, Optional, Union

from core.schemas import Orderbook


def is_drunk(orderbook: Orderbook) -> bool:
    """True if best ask price equals best bid price."""
    return orderbook.best_ask().price == orderbook.best_bid().price


class OrderbookSanityGate:
    """
    Args:
        fetch: Venue's raw fetch, called as fetch(tradeable, currency)
        log: Venue notice sink (logger or LoggerAdapter)

    Example:
        >>> gate = OrderbookSanityGate(exchange._fetch_orderbook, exchange.log)
        >>> book = gate.get_orderbook("LTC", "BTC")
    """

    def __init__(
        self,
        fetch: Callable[[str, str], Optional[Orderbook]],
        log: Union[logging.Logger, logging.LoggerAdapter]
    ):
        self.fetch = fetch
        self.log = log

    def get_orderbook(self, tradeable: str, currency: str) -> Optional[Orderbook]:
        orderbook = self.fetch(tradeable, currency)
        if orderbook is None:
            return None
        if is_drunk(orderbook):
            self.log.warning(f"Orderbook is drunk! ({tradeable}_{currency})")
            return None
        return orderbook
