"""bond-cache — client-side read-through cache for bond data.

Serves per-instrument bond data for a quote date, fetching from the remote
bonds API only the ISINs that are not cached yet.
"""

from bondcache.cache import BondStore
from bondcache.models import BondRecord, InvalidArgumentError
from bondcache.pipeline import BondDataFetcher

__version__ = "0.1.0"

__all__ = ["BondDataFetcher", "BondRecord", "BondStore", "InvalidArgumentError"]
