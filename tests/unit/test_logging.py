"""
Unit Tests for Logging Helpers

Run with:
    pytest tests/unit/test_logging.py -v
"""

import logging

from core.logging import APP_LOGGER_NAME, get_exchange_logger, get_logger


def test_get_logger_is_namespaced():
    assert get_logger("core.nonce").name == f"{APP_LOGGER_NAME}.core.nonce"


def test_exchange_logger_prefixes_venue_name(caplog):
    get_exchange_logger("Poloniex").warning("Orderbook is drunk!")
    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.getMessage() == "[Poloniex] Orderbook is drunk!"
    assert record.name == f"{APP_LOGGER_NAME}.exchange"
