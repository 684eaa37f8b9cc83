"""
Unit tests for social.graze.skylink.resolve.flight
"""

import asyncio

import pytest

from social.graze.skylink.resolve.flight import InFlight


class TestInFlight:
    """Test suite for InFlight."""

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_one_lookup(self):
        release = asyncio.Event()
        calls = []
        in_flight: InFlight[str] = InFlight()

        async def lookup():
            calls.append(1)
            await release.wait()
            return "did:plc:abc"

        first = asyncio.ensure_future(in_flight.run("alice.example", lookup))
        second = asyncio.ensure_future(in_flight.run("alice.example", lookup))
        await asyncio.sleep(0)
        assert len(in_flight) == 1
        release.set()

        assert await asyncio.gather(first, second) == ["did:plc:abc", "did:plc:abc"]
        assert len(calls) == 1
        assert len(in_flight) == 0

    @pytest.mark.asyncio
    async def test_distinct_keys_run_separately(self):
        in_flight: InFlight[str] = InFlight()

        async def lookup(value):
            return value

        results = await asyncio.gather(
            in_flight.run("a", lambda: lookup("a")),
            in_flight.run("b", lambda: lookup("b")),
        )
        assert results == ["a", "b"]

    @pytest.mark.asyncio
    async def test_results_not_cached(self):
        """Test a finished lookup is started again on the next call."""
        calls = []
        in_flight: InFlight[int] = InFlight()

        async def lookup():
            calls.append(1)
            return len(calls)

        assert await in_flight.run("key", lookup) == 1
        assert await in_flight.run("key", lookup) == 2

    @pytest.mark.asyncio
    async def test_failure_propagates_and_is_forgotten(self):
        in_flight: InFlight[str] = InFlight()

        async def lookup():
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await in_flight.run("key", lookup)
        await asyncio.sleep(0)
        assert len(in_flight) == 0

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_lookup(self):
        release = asyncio.Event()
        in_flight: InFlight[str] = InFlight()

        async def lookup():
            await release.wait()
            return "done"

        first = asyncio.ensure_future(in_flight.run("key", lookup))
        second = asyncio.ensure_future(in_flight.run("key", lookup))
        await asyncio.sleep(0)
        first.cancel()
        await asyncio.sleep(0)
        release.set()

        assert await second == "done"
