"""
Async HTTP client for public (unauthenticated) exchange endpoints.

One client per exchange, holding one pooled aiohttp session for the
lifetime of the monitor. Every way a request can go wrong surfaces as
FetchFailure so that callers handle a single exception type.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import aiohttp
import orjson

from arbwatch.core.types import ExchangeId
from arbwatch.exchange.rate_limiter import RateLimiter


class ExchangeClientError(Exception):
    """Base exception for exchange client errors."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class FetchFailure(ExchangeClientError):
    """
    An order book could not be turned into a snapshot.

    Covers network errors, timeouts, non-2xx status, malformed bodies,
    failure envelopes and empty books. The message is prefixed with the
    exchange name.
    """

    def __init__(self, exchange: ExchangeId, message: str, status: int | None = None) -> None:
        super().__init__(f"{exchange.value}: {message}", status=status)
        self.exchange = exchange


class PublicRestClient:
    """GET-only JSON client for one exchange's public REST API."""

    def __init__(
        self,
        exchange: ExchangeId,
        base_url: str,
        timeout: float = 5.0,
        rate_limiter: RateLimiter | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            exchange: Exchange this client talks to (used in errors).
            base_url: API origin, without trailing slash.
            timeout: Total time allowed per request in seconds.
            rate_limiter: Optional request budget.
            session: Optional session owned by the caller.
        """
        self._exchange = exchange
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._rate_limiter = rate_limiter
        self._session = session
        self._owns_session = session is None

    def _fail(self, message: str, status: int | None = None) -> FetchFailure:
        return FetchFailure(self._exchange, message, status=status)

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Create the pooled session on first use (or after close)."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(
                    limit=10,
                    keepalive_timeout=30,
                    enable_cleanup_closed=True,
                ),
                timeout=self._timeout,
                headers={"Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    @asynccontextmanager
    async def _transport_errors(self) -> AsyncIterator[aiohttp.ClientSession]:
        """Yield the session, turning transport errors into FetchFailure."""
        session = await self._ensure_session()
        try:
            yield session
        except aiohttp.ClientError as e:
            raise self._fail(f"Network error: {e}") from e
        except TimeoutError as e:
            raise self._fail("Request timed out") from e

    async def get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """
        GET `base_url + path` and decode the JSON body.

        Raises:
            FetchFailure: On network error, timeout, non-2xx status or
                a body that is not JSON.
        """
        if self._rate_limiter is not None:
            await self._rate_limiter.acquire()

        async with self._transport_errors() as session:
            async with session.get(f"{self._base_url}{path}", params=params or {}) as response:
                return await self._handle_response(response)

    async def _handle_response(self, response: aiohttp.ClientResponse) -> Any:
        """Check the status, then decode the body with orjson."""
        body = await response.read()

        if not 200 <= response.status < 300:
            reason = f" {response.reason}" if response.reason else ""
            raise self._fail(f"HTTP {response.status}{reason}", status=response.status)

        try:
            return orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise self._fail(f"Invalid JSON response: {e}") from e

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    @property
    def exchange(self) -> ExchangeId:
        return self._exchange

    async def __aenter__(self) -> "PublicRestClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
