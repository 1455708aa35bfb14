"""Tests for the simulated bonds transport."""

import pytest

from bondcache.clients.simulated import SimulatedBondsTransport


class TestSimulatedBondsTransport:

    @pytest.mark.asyncio
    async def test_returns_one_record_per_isin(self):
        transport = SimulatedBondsTransport(delay=0)

        result = await transport.fetch("20180120", ["A", "B"])

        assert [r.isin for r in result] == ["A", "B"]
        assert all(0 <= r.data["prop"] < 1000 for r in result)

    @pytest.mark.asyncio
    async def test_records_calls(self):
        transport = SimulatedBondsTransport(delay=0)

        await transport.fetch("20180120", ["A"])
        await transport.fetch("20180121", ["B", "C"])

        assert transport.calls == [("20180120", ["A"]), ("20180121", ["B", "C"])]

    @pytest.mark.asyncio
    async def test_seed_makes_payload_reproducible(self):
        first = await SimulatedBondsTransport(delay=0, seed=7).fetch("20180120", ["A"])
        second = await SimulatedBondsTransport(delay=0, seed=7).fetch("20180120", ["A"])

        assert first == second
