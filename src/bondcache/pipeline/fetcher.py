"""Fetcher — read-through bond data lookup.

Serves what it can from the BondStore, fetches only the misses from the
transport, writes them back and returns hits followed by fetched records.

Concurrency: the only suspension point is the transport fetch. By default
two overlapping calls that miss on the same (date, ISIN) both fetch it and
both write it (last write wins). With ``coalesce=True`` a miss that is
already being fetched by another call waits for that fetch instead.
Cancelling one caller never aborts a fetch that other callers share.
"""

import asyncio
import logging

from bondcache.cache import BondStore
from bondcache.clients.base import BondTransport
from bondcache.config import settings
from bondcache.models import BondRecord, coerce_records
from bondcache.pipeline.resolver import resolve

logger = logging.getLogger(__name__)


class BondDataFetcher:
    """Read-through cache in front of a bond transport.

    Usage:
        async with BondsClient(base_url=settings.bonds_api_url) as client:
            fetcher = BondDataFetcher(client)
            records = await fetcher.get_bonds_data("20180120", ["XS0971721963"])

    Args:
        transport: Object with ``async fetch(date, isins)``
        store: Cache to read from and write to (default: a new empty store)
        coalesce: Share in-flight fetches between overlapping calls
            (default: from settings)
    """

    def __init__(
        self,
        transport: BondTransport,
        store: BondStore | None = None,
        coalesce: bool | None = None,
    ) -> None:
        self.transport = transport
        self.store = store if store is not None else BondStore()
        self.coalesce = settings.coalesce_inflight if coalesce is None else coalesce
        self._inflight: dict[tuple[str, str], asyncio.Task] = {}

    async def get_bonds_data(self, date: str, isins: list[str]) -> list[BondRecord]:
        """Get bond data for ``isins`` at ``date``, fetching only cache misses.

        Args:
            date: Quote date (non-empty string)
            isins: ISINs to look up

        Returns:
            Cached records first, then freshly fetched ones in transport
            response order. Returned records are copies of cached state.

        Raises:
            InvalidArgumentError: If ``date`` or ``isins`` is malformed
            Exception: Whatever the transport raises, unchanged. The cache
                is not modified in that case.
        """
        resolution = resolve(self.store, date, isins)

        fetched: list[BondRecord] = []
        if resolution.missing:
            if self.coalesce:
                fetched = await self._fetch_coalesced(date, resolution.missing)
            else:
                fetched = await self._fetch_missing(date, resolution.missing)

        logger.info(
            "%s: %d requested, %d from cache, %d fetched",
            date, len(isins), len(resolution.hits), len(fetched),
        )
        return resolution.hits + fetched

    async def _fetch_missing(self, date: str, missing: list[str]) -> list[BondRecord]:
        """Fetch ``missing`` from the transport and write the result to the store."""
        logger.debug("%s: fetching %s", date, ", ".join(missing))
        try:
            response = await self.transport.fetch(date, missing)
        except Exception as e:
            logger.warning("%s: fetch of %d ISINs failed: %s", date, len(missing), e)
            raise

        records = coerce_records(response)
        self.store.put(date, records)
        return records

    async def _fetch_coalesced(self, date: str, missing: list[str]) -> list[BondRecord]:
        """Fetch misses, joining fetches already in flight for the same keys."""
        own: list[str] = []
        joined: dict[asyncio.Task, list[str]] = {}
        for isin in dict.fromkeys(missing):
            task = self._inflight.get((date, isin))
            if task is None:
                own.append(isin)
            else:
                joined.setdefault(task, []).append(isin)

        fetched: list[BondRecord] = []
        if own:
            task = asyncio.ensure_future(self._fetch_missing(date, own))
            for isin in own:
                self._inflight[(date, isin)] = task
            try:
                fetched = list(await asyncio.shield(task))
            finally:
                for isin in own:
                    if self._inflight.get((date, isin)) is task:
                        del self._inflight[(date, isin)]

        for task, wanted in joined.items():
            logger.debug("%s: joining in-flight fetch for %s", date, ", ".join(wanted))
            by_isin = {record.isin: record for record in await asyncio.shield(task)}
            fetched.extend(
                by_isin[isin].model_copy(deep=True) for isin in wanted if isin in by_isin
            )

        return fetched
