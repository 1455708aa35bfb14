"""In-memory bond data cache, partitioned by quote date then by ISIN."""

from bondcache.cache.memory_store import BondStore

__all__ = ["BondStore"]
