"""
Public Query Client

Blocking HTTP client for unauthenticated venue endpoints (tickers, orderbooks,
currency lists). It masks transient transport failures with a fixed,
immediate retry policy:

- up to `max_attempts` attempts (5 by default)
- a transport failure (DNS, connect, TLS, timeout, reset) is logged and the
  request is retried at once, without backoff
- any HTTP response, whatever its status, ends the loop and its body is returned
- each attempt has a connect timeout and an overall deadline covering the
  whole call, including a slowly trickling body
- if every attempt fails, NetworkExhausted carries the last transport error

The underlying httpx.Client is created lazily, shared by every venue in the
process and safe to use from several threads. The retry loop holds no lock.

Usage:
    with PublicQueryClient() as client:
        body = client.query("https://poloniex.com/public?command=returnTicker")
"""

import json
import threading
import time
from typing import Any, Optional, Tuple

import httpx

from core.config import settings
from core.exceptions import NetworkExhausted
from core.logging import get_logger, log_public_query


class PublicQueryClient:
    """
    Retrying client for public endpoints.

    Args:
        max_attempts: Retry budget (defaults to settings.query_max_attempts)
        connect_timeout: Connection-establishment timeout in seconds
        timeout: Deadline for one attempt, from request start to last body byte
        verify_tls: Verify TLS certificates (off by default for this channel)
        user_agent: User-Agent header value
        transport: Optional httpx transport (tests pass an httpx.MockTransport)

    Example:
        >>> client = PublicQueryClient(max_attempts=5)
        >>> tickers = client.query_json("https://poloniex.com/public?command=returnTicker")
        >>> client.close()
    """

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        connect_timeout: Optional[float] = None,
        timeout: Optional[float] = None,
        verify_tls: Optional[bool] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.max_attempts = max_attempts if max_attempts is not None else settings.query_max_attempts
        self.connect_timeout = connect_timeout if connect_timeout is not None else settings.query_connect_timeout
        self.timeout = timeout if timeout is not None else settings.query_timeout
        self.verify_tls = verify_tls if verify_tls is not None else settings.query_verify_tls
        self.user_agent = user_agent or settings.query_user_agent
        self.transport = transport
        self.logger = get_logger(__name__)

        self._client: Optional[httpx.Client] = None
        self._client_lock = threading.Lock()

    # ============================================
    # Session Management
    # ============================================

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialized, shared HTTP client"""
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(
                    timeout=httpx.Timeout(self.timeout, connect=self.connect_timeout),
                    verify=self.verify_tls,
                    headers={"User-Agent": self.user_agent},
                    transport=self.transport
                )
                self.logger.debug("PublicQueryClient session created")
            return self._client

    def close(self) -> None:
        """Close the HTTP client; a later query opens a new one."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None
                self.logger.debug("PublicQueryClient session closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ============================================
    # Queries
    # ============================================

    def _get(self, url: str) -> Tuple[int, str]:
        """
        Single GET attempt bounded by `timeout` from start to last byte.

        Raises:
            httpx.ReadTimeout: If the body is still arriving past the deadline
            httpx.TransportError: For any other transport failure
        """
        deadline = time.monotonic() + self.timeout
        with self.client.stream("GET", url) as response:
            chunks = []
            for chunk in response.iter_bytes():
                if time.monotonic() > deadline:
                    raise httpx.ReadTimeout(
                        f"Total timeout of {self.timeout}s exceeded",
                        request=response.request
                    )
                chunks.append(chunk)
            body = b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")
            return response.status_code, body

    def query(self, url: str, prefix: str = "") -> str:
        """
        GET `url` and return the raw response body.

        Args:
            url: Full request URL
            prefix: Venue log prefix, e.g. "[Poloniex] "

        Returns:
            str: Response body of the first attempt that reached the server

        Raises:
            NetworkExhausted: If every attempt failed at the transport level
        """
        error = None
        for attempt in range(1, self.max_attempts + 1):
            log_public_query(url, attempt, self.max_attempts)
            try:
                status, body = self._get(url)
            except httpx.TransportError as e:
                error = f"{prefix}Could not get reply: {e}"
                self.logger.warning(f"{error} (attempt {attempt}/{self.max_attempts})")
                continue

            self.logger.debug(f"GET {url} - HTTP {status} (attempt {attempt})")
            return body

        self.logger.error(f"{prefix}Giving up on {url} after {self.max_attempts} attempts")
        raise NetworkExhausted(
            error or f"{prefix}No attempt made for {url}",
            context={"url": url, "attempts": self.max_attempts}
        )

    def query_json(self, url: str, prefix: str = "") -> Any:
        """
        GET `url` and decode the body as JSON.

        Raises:
            NetworkExhausted: If every attempt failed at the transport level
            json.JSONDecodeError: If the body is not valid JSON
        """
        return json.loads(self.query(url, prefix=prefix))

    def __repr__(self) -> str:
        return f"<PublicQueryClient(max_attempts={self.max_attempts}, verify_tls={self.verify_tls})>"
