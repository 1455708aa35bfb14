"""Read-through lookup — Cache → Transport → Cache.

Components:
- resolve: splits a request into cache hits and misses
- BondDataFetcher: fetches the misses, updates the cache, merges results
"""

from bondcache.pipeline.fetcher import BondDataFetcher
from bondcache.pipeline.resolver import Resolution, resolve

__all__ = ["BondDataFetcher", "Resolution", "resolve"]
