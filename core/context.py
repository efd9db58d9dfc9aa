"""
Exchange Context

The process-wide collaborators every venue shares, bundled so they can be
injected instead of reached through globals:

- NonceRegistry: per-venue nonce state
- PublicQueryClient: pooled public HTTP transport
- TradeablePairFilter: global admission thresholds + price reference

Create one context per process and pass it to every venue constructor.
Venues and managers built without one share get_default_context().
"""

import threading
from typing import Optional

from core.config import Settings, settings
from core.nonce import NonceRegistry
from core.pair_filter import PriceReference, StaticPriceReference, TradeablePairFilter
from core.query_client import PublicQueryClient


class ExchangeContext:
    """
    Shared runtime for all venue instances.

    Example:
        >>> context = ExchangeContext.from_settings(StaticPriceReference({"LTC": 0.01}))
        >>> venue = PoloniexExchange(api_key, api_secret, context)
    """

    def __init__(
        self,
        nonces: NonceRegistry,
        query_client: PublicQueryClient,
        pair_filter: TradeablePairFilter,
        config: Settings = settings
    ):
        self.nonces = nonces
        self.query_client = query_client
        self.pair_filter = pair_filter
        self.config = config

    @classmethod
    def from_settings(
        cls,
        price_reference: Optional[PriceReference] = None,
        config: Settings = settings,
        query_client: Optional[PublicQueryClient] = None
    ) -> "ExchangeContext":
        """
        Build a context from configuration.

        Args:
            price_reference: Average-rate source (an empty StaticPriceReference if None)
            config: Settings providing thresholds and query parameters
            query_client: Pre-built client (e.g. with a mock transport)
        """
        if query_client is None:
            query_client = PublicQueryClient(
                max_attempts=config.query_max_attempts,
                connect_timeout=config.query_connect_timeout,
                timeout=config.query_timeout,
                verify_tls=config.query_verify_tls,
                user_agent=config.query_user_agent
            )
        return cls(
            nonces=NonceRegistry(),
            query_client=query_client,
            pair_filter=TradeablePairFilter.from_settings(price_reference or StaticPriceReference(), config),
            config=config
        )

    def close(self) -> None:
        self.query_client.close()


# ============================================
# Process-Wide Default Context
# ============================================

_default_context: Optional[ExchangeContext] = None
_default_context_lock = threading.Lock()


def get_default_context() -> ExchangeContext:
    """
    Get the process-wide ExchangeContext (singleton pattern).

    Returns:
        ExchangeContext: Built from the global settings on first call

    Notes:
        - Venue instances constructed without a context use this one, so two
          instances of the same venue never share a nonce
        - Its price reference is an empty StaticPriceReference; hosts that
          need real rates should build and inject their own context
    """
    global _default_context
    with _default_context_lock:
        if _default_context is None:
            _default_context = ExchangeContext.from_settings()
        return _default_context
