"""Tests for base async client: rate limiting and POST error mapping."""

import asyncio
import json

import httpx
import pytest

from bondcache.clients.base import APIProviderError, BaseAsyncClient, RateLimiter

BASE = "https://bonds.example.com/api"
ROUTE = f"{BASE}/bonds/20180120"


class TestRateLimiter:
    """Tests for token bucket rate limiter."""

    def test_init_without_event_loop(self):
        """RateLimiter can be created in synchronous context."""
        limiter = RateLimiter(rate=10)
        assert limiter.tokens == 10
        assert limiter._initialized is False

    @pytest.mark.asyncio
    async def test_third_token_waits_at_two_per_second(self):
        limiter = RateLimiter(rate=2)
        loop = asyncio.get_running_loop()

        start = loop.time()
        await limiter.acquire()
        await limiter.acquire()
        burst = loop.time() - start

        start = loop.time()
        await limiter.acquire()
        waited = loop.time() - start

        assert burst < 0.1
        assert waited > 0.3


class TestPost:
    """Tests for BaseAsyncClient.post."""

    @pytest.mark.asyncio
    async def test_posts_isin_array_and_closes(self, respx_mock):
        route = respx_mock.post(ROUTE).mock(
            return_value=httpx.Response(200, json=[{"isin": "A", "data": {}}])
        )

        async with BaseAsyncClient(base_url=BASE + "/") as client:
            result = await client.post("bonds/20180120", json_data=["A", "B"])

        assert result == [{"isin": "A", "data": {}}]
        assert json.loads(route.calls.last.request.content) == ["A", "B"]
        assert client._client is None

    @pytest.mark.asyncio
    async def test_raises_if_used_without_context_manager(self):
        client = BaseAsyncClient(base_url=BASE)

        with pytest.raises(RuntimeError, match="not initialized"):
            await client.post("/bonds/20180120", json_data=["A"])

    @pytest.mark.asyncio
    async def test_http_error_sent_once(self, respx_mock):
        """Error statuses raise on the first attempt, without retrying."""
        route = respx_mock.post(ROUTE).mock(
            return_value=httpx.Response(503, text="Service Unavailable")
        )

        async with BaseAsyncClient(base_url=BASE) as client:
            with pytest.raises(APIProviderError) as exc_info:
                await client.post("/bonds/20180120", json_data=["A"])

        assert exc_info.value.status_code == 503
        assert "Service Unavailable" in exc_info.value.response_body
        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_invalid_json(self, respx_mock):
        respx_mock.post(ROUTE).mock(return_value=httpx.Response(200, text="not json"))

        async with BaseAsyncClient(base_url=BASE) as client:
            with pytest.raises(APIProviderError, match="Invalid JSON"):
                await client.post("/bonds/20180120", json_data=["A"])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error,message", [
        (httpx.ReadTimeout("Connection timed out"), "Request timeout"),
        (httpx.ConnectError("Connection refused"), "Network error"),
    ])
    async def test_transport_errors_mapped(self, respx_mock, error, message):
        route = respx_mock.post(ROUTE)
        route.side_effect = error

        async with BaseAsyncClient(base_url=BASE) as client:
            with pytest.raises(APIProviderError, match=message):
                await client.post("/bonds/20180120", json_data=["A"])

        assert route.call_count == 1
