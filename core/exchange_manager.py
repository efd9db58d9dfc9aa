"""
Exchange Manager — Central Registry for Venue Instances

The manager owns the process-wide ExchangeContext, hands it to the venues
it builds, and runs bulk lifecycle operations across them.

Example Usage:
    manager = ExchangeManager(ExchangeContext.from_settings(price_reference))
    manager.register(PoloniexExchange(key, secret, manager.context))
    manager.register(BittrexExchange(key, secret, manager.context))

    manager.refresh_all()
    for exchange in manager:
        print(exchange.get_name(), len(exchange.get_tradeable_pairs()))

    manager.shutdown()
"""

from typing import Dict, Iterator, List, Optional, Union

from core.context import ExchangeContext, get_default_context
from core.exchange_interface import ExchangeInterface
from core.logging import logger


class ExchangeManager:
    """
    Registry of venue instances keyed by venue id.

    Attributes:
        context: Shared ExchangeContext injected into registered venues
        exchanges: Dictionary mapping venue ids to venue instances
    """

    def __init__(self, context: Optional[ExchangeContext] = None):
        self.context = context or get_default_context()
        self.exchanges: Dict[int, ExchangeInterface] = {}

    # ============================================
    # Registration & Retrieval
    # ============================================

    def register(self, exchange: ExchangeInterface) -> ExchangeInterface:
        """
        Add a venue to the registry.

        Raises:
            ValueError: If a venue with the same id is already registered
        """
        exchange_id = exchange.get_id()
        if exchange_id in self.exchanges:
            raise ValueError(
                f"Exchange id {exchange_id!r} is already registered "
                f"({self.exchanges[exchange_id].get_name()})"
            )
        if exchange.context is not self.context:
            logger.warning(f"{exchange.get_name()} does not share the manager's context; nonces are tracked separately")

        self.exchanges[exchange_id] = exchange
        logger.info(f"Registered exchange {exchange.get_name()} (id={exchange_id!r})")
        return exchange

    def get_exchange(self, key: Union[int, str]) -> ExchangeInterface:
        """
        Get a venue by id or by case-insensitive name.

        Raises:
            ValueError: If no registered venue matches
        """
        if key in self.exchanges:
            return self.exchanges[key]

        if isinstance(key, str):
            for exchange in self.exchanges.values():
                if exchange.get_name().lower() == key.lower():
                    return exchange

        available = ", ".join(self.list_exchanges())
        logger.error(f"Exchange '{key}' not found. Available: {available}")
        raise ValueError(f"Exchange '{key}' is not registered. Available exchanges: {available}")

    def has_exchange(self, key: Union[int, str]) -> bool:
        try:
            self.get_exchange(key)
        except ValueError:
            return False
        return True

    def list_exchanges(self) -> List[str]:
        """Names of all registered venues."""
        return [exchange.get_name() for exchange in self.exchanges.values()]

    # ============================================
    # Lifecycle Management
    # ============================================

    def refresh_all(self) -> Dict[str, bool]:
        """
        Run refresh_exchange_data() on every venue.

        A failing venue is logged and skipped; the others still refresh.

        Returns:
            Dict[str, bool]: Venue name -> whether the refresh succeeded
        """
        logger.info("Refreshing exchange data...")

        results = {}
        for exchange in self.exchanges.values():
            name = exchange.get_name()
            try:
                exchange.refresh_exchange_data()
                results[name] = True
                logger.info(f"✓ {name} refreshed: {len(exchange.get_tradeable_pairs())} tradeable pairs")
            except Exception as e:
                results[name] = False
                logger.error(f"✗ Failed to refresh {name}: {e}")

        return results

    def test_access_all(self) -> Dict[str, bool]:
        """
        Run test_access() on every venue.

        Returns:
            Dict[str, bool]: Venue name -> whether the credentials were accepted
        """
        results = {}
        for exchange in self.exchanges.values():
            name = exchange.get_name()
            try:
                exchange.test_access()
                results[name] = True
            except Exception as e:
                results[name] = False
                logger.error(f"Access test failed for {name}: {e}")
        return results

    def shutdown(self) -> None:
        """Release the shared public query client."""
        self.context.close()
        logger.info("Exchange manager shut down")

    # ============================================
    # Utility Methods
    # ============================================

    def __iter__(self) -> Iterator[ExchangeInterface]:
        return iter(list(self.exchanges.values()))

    def __len__(self) -> int:
        return len(self.exchanges)

    def __repr__(self) -> str:
        return f"<ExchangeManager(exchanges={self.list_exchanges()})>"
