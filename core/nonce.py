"""
Nonce Registry

Authenticated venue APIs reject any request whose nonce is not strictly
greater than the last one they saw for the same credentials. The registry
hands out one strictly increasing integer sequence per venue identity:

    candidate = current time in microseconds
    if candidate <= last issued: candidate = last issued + 1

Each identity has its own lock, so two threads signing requests for the same
venue never receive the same nonce, while different venues never contend.

State lives for the lifetime of the registry (normally the process); nothing
is persisted, so a restart starts again from the clock.
"""

import threading
from typing import Callable, Dict, Hashable, Optional

from core.logging import get_logger
from core.utils.time import current_utc_microseconds


logger = get_logger(__name__)


class NonceRegistry:
    """
    Per-identity monotonic nonce source.

    Args:
        clock: Returns the current time in integer microseconds

    Example:
        >>> registry = NonceRegistry()
        >>> first = registry.next_nonce("poloniex")
        >>> registry.next_nonce("poloniex") > first
        True
    """

    def __init__(self, clock: Callable[[], int] = current_utc_microseconds):
        self._clock = clock
        self._last: Dict[Hashable, int] = {}
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, identity: Hashable) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(identity)
            if lock is None:
                lock = self._locks[identity] = threading.Lock()
            return lock

    def next_nonce(self, identity: Hashable, name: Optional[str] = None) -> int:
        """
        Issue the next nonce for `identity`.

        Args:
            identity: Stable venue identifier
            name: Venue display name, only used for tracing

        Returns:
            int: A value strictly greater than any previously issued for `identity`
        """
        with self._lock_for(identity):
            previous = self._last.get(identity, 0)
            nonce = int(self._clock())
            msg = f"Generating nonce for {name or identity}, previous nonce = {previous}, candidate = {nonce}"
            if nonce <= previous:
                nonce = previous + 1
                msg += f" ({nonce})"
            logger.debug(msg)

            self._last[identity] = nonce
            return nonce

    def last_nonce(self, identity: Hashable) -> Optional[int]:
        """Last nonce issued for `identity`, or None if none was issued yet."""
        with self._lock_for(identity):
            return self._last.get(identity)
