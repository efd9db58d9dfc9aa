"""
Core Utilities Package

This package contains utility functions and helpers used throughout the exchange core.

Modules:
    - time: Timestamp normalization and the microsecond nonce clock
"""

from core.utils.time import to_utc_datetime, current_utc_datetime, current_utc_microseconds

__all__ = ["to_utc_datetime", "current_utc_datetime", "current_utc_microseconds"]
