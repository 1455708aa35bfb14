"""Tests for bonds API client."""

import json

import httpx
import pytest

from bondcache.clients.base import APIProviderError
from bondcache.clients.bonds import BondsClient
from bondcache.models import BondRecord

BASE = "https://bonds.example.com/api"


class TestBondsClient:
    """Tests for bonds API client."""

    @pytest.mark.asyncio
    async def test_fetch_posts_isins(self, respx_mock):
        """Should POST the ISIN list to /bonds/{date} and parse records."""
        route = respx_mock.post(f"{BASE}/bonds/20180120").mock(
            return_value=httpx.Response(200, json=[
                {"isin": "XS0971721963", "data": {"prop": 101.5}},
                {"isin": "RU000A0JU4L3", "data": {"prop": 99.2}},
            ])
        )

        async with BondsClient(base_url=BASE) as client:
            result = await client.fetch("20180120", ["XS0971721963", "RU000A0JU4L3"])

        assert json.loads(route.calls.last.request.content) == ["XS0971721963", "RU000A0JU4L3"]
        assert result == [
            BondRecord(isin="XS0971721963", data={"prop": 101.5}),
            BondRecord(isin="RU000A0JU4L3", data={"prop": 99.2}),
        ]

    @pytest.mark.asyncio
    async def test_api_key_sent_as_bearer(self, respx_mock):
        route = respx_mock.post(f"{BASE}/bonds/20180120").mock(
            return_value=httpx.Response(200, json=[])
        )

        async with BondsClient(base_url=BASE, api_key="secret_token") as client:
            assert await client.fetch("20180120", ["A"]) == []

        assert route.calls.last.request.headers["Authorization"] == "Bearer secret_token"

    @pytest.mark.asyncio
    async def test_no_auth_header_without_key(self, respx_mock):
        route = respx_mock.post(f"{BASE}/bonds/20180120").mock(
            return_value=httpx.Response(200, json=[])
        )

        async with BondsClient(base_url=BASE) as client:
            await client.fetch("20180120", ["A"])

        assert "Authorization" not in route.calls.last.request.headers

    @pytest.mark.asyncio
    async def test_omitted_isins_are_absent(self, respx_mock):
        """The API may return fewer records than requested."""
        respx_mock.post(f"{BASE}/bonds/20180120").mock(
            return_value=httpx.Response(200, json=[{"isin": "A", "data": {}}])
        )

        async with BondsClient(base_url=BASE) as client:
            result = await client.fetch("20180120", ["A", "B"])

        assert [r.isin for r in result] == ["A"]

    @pytest.mark.asyncio
    async def test_non_array_response_rejected(self, respx_mock):
        respx_mock.post(f"{BASE}/bonds/20180120").mock(
            return_value=httpx.Response(200, json={"isin": "A", "data": {}})
        )

        async with BondsClient(base_url=BASE) as client:
            with pytest.raises(APIProviderError, match="JSON array"):
                await client.fetch("20180120", ["A"])

    @pytest.mark.asyncio
    async def test_malformed_record_rejected(self, respx_mock):
        respx_mock.post(f"{BASE}/bonds/20180120").mock(
            return_value=httpx.Response(200, json=[{"isin": "A"}])
        )

        async with BondsClient(base_url=BASE) as client:
            with pytest.raises(APIProviderError, match="Malformed bond record"):
                await client.fetch("20180120", ["A"])

    @pytest.mark.asyncio
    async def test_server_error_propagates(self, respx_mock):
        respx_mock.post(f"{BASE}/bonds/20180120").mock(
            return_value=httpx.Response(500, text="Internal Server Error")
        )

        async with BondsClient(base_url=BASE) as client:
            with pytest.raises(APIProviderError) as exc_info:
                await client.fetch("20180120", ["A"])

        assert exc_info.value.status_code == 500
