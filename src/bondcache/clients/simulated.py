"""Simulated bonds transport for demos and local runs.

Answers every request after a fixed delay with a random ``prop`` value per
ISIN, like a remote API would. Keeps a log of the calls it received.
"""

import asyncio
import logging
import random

from bondcache.models import BondRecord

logger = logging.getLogger(__name__)


class SimulatedBondsTransport:
    """In-process stand-in for the bonds API.

    Args:
        delay: Seconds to wait before answering (default: 0.5)
        seed: Optional seed for reproducible payloads
    """

    def __init__(self, delay: float = 0.5, seed: int | None = None) -> None:
        self.delay = delay
        self.calls: list[tuple[str, list[str]]] = []
        self._random = random.Random(seed)

    async def fetch(self, date: str, isins: list[str]) -> list[BondRecord]:
        """Return one random record per requested ISIN, in request order."""
        self.calls.append((date, list(isins)))
        logger.debug("Simulated fetch %s: %s", date, ", ".join(isins))
        await asyncio.sleep(self.delay)
        return [
            BondRecord(isin=isin, data={"prop": 1000 * self._random.random()})
            for isin in isins
        ]
