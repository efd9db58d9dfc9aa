"""
Time Utilities

Helpers for the two clocks the exchange core cares about:

- Wall-clock UTC datetimes, used to stamp orderbook snapshots. Venues report
  timestamps as seconds or milliseconds since epoch; both are normalized here.
- A microsecond-resolution integer clock, used as the nonce candidate for
  authenticated requests.
"""

import time
from datetime import datetime, timezone
from typing import Union


def to_utc_datetime(timestamp: Union[int, float]) -> datetime:
    """
    Convert a timestamp (seconds or milliseconds) to UTC datetime.

    Detection Logic:
        - If timestamp > 1e12: assumed to be milliseconds
        - Otherwise: assumed to be seconds

    Args:
        timestamp: Unix timestamp in seconds or milliseconds

    Returns:
        datetime: Timezone-aware datetime object in UTC

    Raises:
        ValueError: If timestamp is negative or invalid

    Examples:
        >>> to_utc_datetime(1704110400000)
        datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)

        >>> to_utc_datetime(1704110400)
        datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)
    """
    if timestamp < 0:
        raise ValueError(f"Timestamp cannot be negative: {timestamp}")

    if timestamp > 1e12:
        timestamp = timestamp / 1000.0

    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OSError, OverflowError, ValueError) as e:
        raise ValueError(f"Invalid timestamp: {timestamp}. Error: {e}")


def current_utc_datetime() -> datetime:
    """Get current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def current_utc_microseconds() -> int:
    """
    Get the current Unix time in whole microseconds.

    Returns:
        int: floor(now * 1_000_000)

    Example:
        >>> current_utc_microseconds()
        1704110400123456

    Notes:
        Computed from time.time_ns() so no float rounding creeps in;
        the result is the nonce candidate used by NonceRegistry.
    """
    return time.time_ns() // 1000
