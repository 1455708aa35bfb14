"""Date-partitioned in-memory store for bond data.

Storage structure:
    {date: {isin: data}}

Example:
    {"20180120": {"XS0971721963": {"prop": 101.5}, "RU000A0JU4L3": {...}}}

Partitions are created lazily on the first non-empty write for a date and
are never removed. Everything going in or coming out is deep-copied, so
callers can never mutate cached state through a reference they hold.
"""

import copy
import logging
from typing import Any

from bondcache.models import InvalidArgumentError, coerce_records

logger = logging.getLogger(__name__)


def _check_date(date: Any) -> None:
    if not isinstance(date, str) or not date:
        raise InvalidArgumentError('Argument "date" must be a non-empty string')


def _check_isins(isins: Any) -> None:
    if not isinstance(isins, (list, tuple)):
        raise InvalidArgumentError(
            f'Argument "isins" must be a list, got {type(isins).__name__}'
        )
    for index, isin in enumerate(isins):
        if not isinstance(isin, str) or not isin:
            raise InvalidArgumentError(
                f'Item {index} of argument "isins" must be a non-empty string, got {isin!r}'
            )


class BondStore:
    """In-memory cache of bond data keyed by (date, ISIN).

    Keys are exact, case-sensitive strings. A later write for the same
    (date, ISIN) overwrites the earlier one. All arguments are validated
    before any mutation, so a rejected call leaves the store untouched.
    """

    def __init__(self) -> None:
        self._partitions: dict[str, dict[str, dict[str, Any]]] = {}

    def put(self, date: str, bonds: list) -> None:
        """Store bond data for a date.

        Args:
            date: Quote date (non-empty string, e.g. "20180120")
            bonds: List of BondRecord or ``{"isin": ..., "data": ...}`` mappings

        Raises:
            InvalidArgumentError: If ``date`` is empty, ``bonds`` is not a
                list, or any element lacks the record shape
        """
        _check_date(date)
        records = coerce_records(bonds)
        if not records:
            return

        partition = self._partitions.get(date)
        if partition is None:
            partition = self._partitions[date] = {}
            logger.debug("Created partition for %s", date)

        for record in records:
            partition[record.isin] = copy.deepcopy(record.data)

        logger.debug("%s: stored %d records (%d in partition)", date, len(records), len(partition))

    def find(self, date: str, isins: list[str]) -> dict[str, dict[str, Any]] | None:
        """Look up cached data for the given ISINs.

        Args:
            date: Quote date (non-empty string)
            isins: ISINs to look up (list of non-empty strings)

        Returns:
            None if nothing was ever stored for ``date`` or ``isins`` is empty.
            Otherwise a dict of copies for the ISINs present in the partition,
            which is empty when none of them matched.

        Raises:
            InvalidArgumentError: If ``date`` or any ISIN is malformed
        """
        _check_date(date)
        _check_isins(isins)

        partition = self._partitions.get(date)
        if partition is None or not isins:
            return None

        return {
            isin: copy.deepcopy(partition[isin])
            for isin in isins
            if isin in partition
        }

    def has_partition(self, date: str) -> bool:
        """Return True if anything was ever stored for ``date``."""
        return date in self._partitions

    def list_dates(self) -> list[str]:
        """List all populated dates (sorted ascending)."""
        return sorted(self._partitions)

    def list_isins(self, date: str) -> list[str]:
        """List ISINs cached for ``date`` in insertion order. Empty if none."""
        return list(self._partitions.get(date, {}))

    def get_cache_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics:
                - dates: Number of populated date partitions
                - entries: Total number of cached (date, ISIN) entries
                - date_range: (earliest_date, latest_date) or None
        """
        dates = self.list_dates()
        return {
            "dates": len(dates),
            "entries": sum(len(p) for p in self._partitions.values()),
            "date_range": (dates[0], dates[-1]) if dates else None,
        }
