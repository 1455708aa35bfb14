"""Resolver — split a batch request into cache hits and misses."""

from dataclasses import dataclass, field

from bondcache.cache import BondStore
from bondcache.models import BondRecord


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a request against the cache.

    Attributes:
        hits: Records served from the cache, in store enumeration order
        missing: Requested ISINs absent from the cache, in request order
    """

    hits: list[BondRecord] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


def resolve(store: BondStore, date: str, isins: list[str]) -> Resolution:
    """Partition ``isins`` into hits and misses for ``date``.

    ``missing`` is the exact complement of the hit keys, so hits and
    anything fetched for ``missing`` can never overlap.

    Raises:
        InvalidArgumentError: If ``date`` or ``isins`` is malformed
    """
    cached = store.find(date, isins)
    if cached is None:
        return Resolution(hits=[], missing=list(isins))

    return Resolution(
        hits=[BondRecord(isin=isin, data=data) for isin, data in cached.items()],
        missing=[isin for isin in isins if isin not in cached],
    )
