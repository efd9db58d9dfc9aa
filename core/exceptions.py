"""
Exchange Core Exceptions

Only two conditions are hard failures in the exchange core:

- InvalidCredentials: raised while constructing a venue without an API key or secret
- NetworkExhausted: raised when a public query fails on every retry attempt

Everything else (unknown coin names, missing fee or confirmation data, drunk
orderbooks) degrades to a None result plus a logged warning so the trading
loop keeps running.
"""

from typing import Optional, Any, Dict


class ExchangeError(Exception):
    """Base exception for all exchange core errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class InvalidCredentials(ExchangeError):
    """Raised when a venue is constructed with a missing API key or secret."""
    pass


class NetworkExhausted(ExchangeError):
    """
    Raised when a public query failed on every attempt of its retry budget.

    The message is the last transport error observed; `context` holds the
    `url` and the number of `attempts` made.
    """
    pass
