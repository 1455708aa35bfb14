"""Base async HTTP client with rate limiting and connection pooling.

All API clients inherit from this base to ensure consistent behavior:
- Async/await for non-blocking I/O
- Connection pooling for performance
- Rate limiting to respect API quotas
- Errors mapped to APIProviderError and raised on the first failure

Failed requests are never retried here; callers decide what a failure means.

Subclasses add typed endpoint methods on top of ``post``; see BondsClient.
"""

import asyncio
import logging
from typing import Any, Protocol

import httpx

from bondcache.models import BondRecord


logger = logging.getLogger(__name__)


class BondTransport(Protocol):
    """Anything that can fetch bond data for a date and a list of ISINs.

    The cache only calls ``fetch`` with a non-empty ``isins`` list. Errors
    are opaque to the cache and propagate to its caller unchanged.
    """

    async def fetch(self, date: str, isins: list[str]) -> list[BondRecord]: ...


class RateLimiter:
    """Token bucket rate limiter for async operations.

    Ensures we don't exceed API rate limits using a token bucket algorithm.
    Safe to share between tasks on one event loop.

    Args:
        rate: Maximum requests per second
    """

    def __init__(self, rate: int) -> None:
        self.rate = rate
        self.tokens = rate
        self.updated_at: float = 0.0
        self._initialized: bool = False
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Acquire a token, waiting if necessary."""
        async with self._lock:
            loop = asyncio.get_running_loop()

            if not self._initialized:
                self.updated_at = loop.time()
                self._initialized = True

            while self.tokens < 1:
                now = loop.time()
                elapsed = now - self.updated_at
                self.tokens = min(self.rate, self.tokens + elapsed * self.rate)
                self.updated_at = now

                if self.tokens < 1:
                    wait_time = (1 - self.tokens) / self.rate
                    await asyncio.sleep(wait_time)

            self.tokens -= 1
            self.updated_at = loop.time()


class APIProviderError(Exception):
    """Base exception for API provider errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class BaseAsyncClient:
    """Base async HTTP client with rate limiting and connection pooling.

    Args:
        base_url: Base URL for all API requests
        headers: Default headers for all requests
        rate_limit: Maximum requests per second (default: 10)
        timeout: Request timeout in seconds (default: 30)
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        rate_limit: int = 10,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}
        self.timeout = timeout
        self._rate_limiter = RateLimiter(rate=rate_limit)
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BaseAsyncClient":
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def post(self, endpoint: str, json_data: Any = None) -> Any:
        """POST a JSON body and return the decoded JSON response.

        The request waits for a rate-limit token first and is sent exactly
        once; the first failure is raised to the caller.

        Args:
            endpoint: API endpoint path (relative to base_url)
            json_data: Any JSON-serialisable body (objects and arrays alike)

        Returns:
            Parsed JSON response

        Raises:
            RuntimeError: If used outside ``async with``
            APIProviderError: On HTTP status >= 400, invalid JSON, timeouts
                and network errors
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with context manager.")

        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"

        await self._rate_limiter.acquire()
        logger.debug("POST %s%s", self.base_url, endpoint)

        try:
            response = await self._client.post(endpoint, json=json_data)
        except httpx.TimeoutException as e:
            logger.error("Request timeout for %s: %s", endpoint, e)
            raise APIProviderError(f"Request timeout: {e}") from e
        except httpx.NetworkError as e:
            logger.error("Network error for %s: %s", endpoint, e)
            raise APIProviderError(f"Network error: {e}") from e

        logger.debug("Response: %d for %s", response.status_code, endpoint)

        if response.status_code >= 400:
            error_body = response.text[:500]
            logger.error("API error: %d %s - %s", response.status_code, endpoint, error_body)
            raise APIProviderError(
                message=f"API request failed: {response.status_code}",
                status_code=response.status_code,
                response_body=error_body,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error("Failed to parse JSON response from %s: %s", endpoint, e)
            raise APIProviderError(
                message=f"Invalid JSON response: {e}",
                status_code=response.status_code,
                response_body=response.text[:500],
            ) from e
