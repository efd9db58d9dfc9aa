"""
Unified Logging Configuration

This module sets up a centralized logging system for the exchange core.
All modules should import and use the loggers from this module instead of
using print() statements.

Usage:
    from core.logging import get_logger, get_exchange_logger

    logger = get_logger(__name__)
    logger.debug("Detailed debugging information")

    venue_log = get_exchange_logger("Poloniex")
    venue_log.warning("Orderbook is drunk!")
    # 2024-01-01 12:00:00 [WARNING] coinbridge.exchange: [Poloniex] Orderbook is drunk!

Log Levels used by the core:
    DEBUG    - Nonce generation tracing, successful public queries
    INFO     - Configuration summary, venue registration and refresh
    WARNING  - Unknown coin names / confirmation times, drunk orderbooks,
               failed transport attempts
    ERROR    - Exhausted retry budget, failed venue refresh

Configuration:
    Log level is controlled by the LOG_LEVEL setting in the .env file.
"""

import logging
import sys
from typing import Optional

APP_LOGGER_NAME = "coinbridge"


def setup_logging(
    log_level: str = "INFO",
    log_format: Optional[str] = None,
    include_timestamp: bool = True,
    include_module: bool = True
) -> logging.Logger:
    """
    Configure and return the application logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Custom log format string (uses default if None)
        include_timestamp: Include timestamp in log messages
        include_module: Include logger name in log messages

    Returns:
        logging.Logger: Configured logger instance

    Example:
        >>> logger = setup_logging(log_level="DEBUG")
        >>> logger.info("Exchange core started")
        2024-01-01 12:00:00 [INFO] coinbridge: Exchange core started
    """
    if log_format is None:
        format_parts = []

        if include_timestamp:
            format_parts.append("%(asctime)s")

        format_parts.append("[%(levelname)s]")

        if include_module:
            format_parts.append("%(name)s:")

        format_parts.append("%(message)s")

        log_format = " ".join(format_parts)

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True
    )

    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    return logger


# ============================================
# Initialize Logger with Settings
# ============================================

try:
    from core.config import settings
    log_level = settings.log_level if hasattr(settings, 'log_level') else "INFO"
except ImportError:
    log_level = "INFO"

logger = setup_logging(log_level=log_level)


# ============================================
# Convenience Functions
# ============================================

def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module or component.

    Args:
        name: Name for the logger (typically __name__)

    Returns:
        logging.Logger: Child of the application logger

    Example:
        >>> get_logger("core.nonce").name
        'coinbridge.core.nonce'
    """
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


class ExchangeLoggerAdapter(logging.LoggerAdapter):
    """Prefix every message with the venue display name, e.g. "[Bittrex] "."""

    def process(self, msg, kwargs):
        return f"[{self.extra['exchange']}] {msg}", kwargs


def get_exchange_logger(exchange_name: str) -> ExchangeLoggerAdapter:
    """
    Get the notice sink for one venue.

    Args:
        exchange_name: Human-readable venue name used as the message prefix

    Returns:
        ExchangeLoggerAdapter: Adapter over the "coinbridge.exchange" logger
    """
    return ExchangeLoggerAdapter(get_logger("exchange"), {"exchange": exchange_name})


# ============================================
# Log Helper Functions
# ============================================

def log_public_query(url: str, attempt: int, max_attempts: int) -> None:
    """
    Log an outgoing public query with consistent formatting.

    Example:
        >>> log_public_query("https://poloniex.com/public?command=returnTicker", 1, 5)
        [DEBUG] Public query: https://poloniex.com/public?command=returnTicker | Attempt: 1/5
    """
    logger.debug(f"Public query: {url} | Attempt: {attempt}/{max_attempts}")


logger.debug("Logging system initialized")
