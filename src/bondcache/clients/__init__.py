"""Transports for the bond data cache.

- BondsClient: async HTTP client for the remote bonds API
- SimulatedBondsTransport: delayed random responses for demos
"""

from bondcache.clients.base import APIProviderError, BaseAsyncClient, BondTransport, RateLimiter
from bondcache.clients.bonds import BondsClient
from bondcache.clients.simulated import SimulatedBondsTransport

__all__ = [
    "APIProviderError",
    "BaseAsyncClient",
    "BondTransport",
    "BondsClient",
    "RateLimiter",
    "SimulatedBondsTransport",
]
