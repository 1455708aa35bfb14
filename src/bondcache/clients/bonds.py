"""Bonds API client.

Fetches per-instrument bond data for a quote date:
    POST /bonds/{date}   body: ["XS0971721963", "RU000A0JU4L3"]

Response is a JSON array of ``{"isin": ..., "data": {...}}`` records.

Usage:
    from bondcache.clients.bonds import BondsClient

    async with BondsClient(base_url="https://bonds.example.com/api") as client:
        records = await client.fetch("20180120", ["XS0971721963"])
"""

from urllib.parse import quote

from pydantic import ValidationError

from bondcache.clients.base import APIProviderError, BaseAsyncClient
from bondcache.models import BondRecord


class BondsClient(BaseAsyncClient):
    """Async client for the bonds API. Implements the BondTransport protocol.

    Args:
        base_url: Bonds API base URL
        api_key: Optional bearer token
        rate_limit: Max requests per second (default: 10)
        timeout: Request timeout in seconds (default: 30)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        rate_limit: int = 10,
        timeout: float = 30.0,
    ) -> None:
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        super().__init__(
            base_url=base_url,
            headers=headers,
            rate_limit=rate_limit,
            timeout=timeout,
        )

    async def fetch(self, date: str, isins: list[str]) -> list[BondRecord]:
        """Fetch bond data for the given ISINs at a quote date.

        Args:
            date: Quote date (e.g. "20180120")
            isins: ISINs to fetch

        Returns:
            Records in the order the API returned them. ISINs the API has no
            data for are simply absent.

        Raises:
            APIProviderError: On transport errors or a malformed response
        """
        result = await self.post(f"/bonds/{quote(date, safe='')}", json_data=list(isins))

        if not isinstance(result, list):
            raise APIProviderError(
                f"Expected a JSON array of bond records, got {type(result).__name__}"
            )

        try:
            return [BondRecord.model_validate(item) for item in result]
        except ValidationError as e:
            raise APIProviderError(f"Malformed bond record in response: {e}") from e
