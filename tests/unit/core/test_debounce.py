"""Tests for the Debouncer."""

import asyncio

import pytest

from livetex.core.debounce import Debouncer


class TestDebouncer:
    """Tests for Debouncer."""

    @pytest.mark.asyncio
    async def test_burst_emits_once(self):
        received: list[str] = []
        debouncer = Debouncer(0.05, received.append)

        for i in range(10):
            debouncer.push(f"v{i}")
        assert debouncer.pending

        await asyncio.sleep(0.2)

        assert received == ["v9"]
        assert debouncer.emitted_count == 1
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_quiet_period_restarts_on_each_event(self):
        received: list[str] = []
        debouncer = Debouncer(0.1, received.append)

        debouncer.push("a")
        await asyncio.sleep(0.01)
        debouncer.push("ab")
        await asyncio.sleep(0.05)
        assert received == []

        await asyncio.sleep(0.2)
        assert received == ["ab"]

    @pytest.mark.asyncio
    async def test_separate_bursts_emit_separately(self):
        received: list[str] = []
        debouncer = Debouncer(0.03, received.append)

        debouncer.push("first")
        await asyncio.sleep(0.1)
        debouncer.push("second")
        await asyncio.sleep(0.1)

        assert received == ["first", "second"]
        assert debouncer.emitted_count == 2

    @pytest.mark.asyncio
    async def test_duplicate_content_suppressed(self):
        received: list[str] = []
        debouncer = Debouncer(0.02, received.append)

        assert debouncer.push("a") is True
        await asyncio.sleep(0.08)
        assert debouncer.push("a") is False
        await asyncio.sleep(0.08)

        assert received == ["a"]
        assert debouncer.suppressed_count == 1

    @pytest.mark.asyncio
    async def test_duplicate_compared_with_last_accepted(self):
        received: list[str] = []
        debouncer = Debouncer(0.02, received.append)

        debouncer.push("a")
        debouncer.push("b")
        assert debouncer.push("a") is True
        await asyncio.sleep(0.08)

        assert received == ["a"]

    @pytest.mark.asyncio
    async def test_duplicates_allowed_when_disabled(self):
        received: list[str] = []
        debouncer = Debouncer(0.02, received.append, suppress_duplicates=False)

        debouncer.push("a")
        await asyncio.sleep(0.08)
        debouncer.push("a")
        await asyncio.sleep(0.08)

        assert received == ["a", "a"]

    @pytest.mark.asyncio
    async def test_prime_marks_content_seen(self):
        received: list[str] = []
        debouncer = Debouncer(0.02, received.append)

        debouncer.prime("loaded")

        assert debouncer.push("loaded") is False
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_flush_fires_immediately(self):
        received: list[str] = []
        debouncer = Debouncer(10.0, received.append)

        debouncer.push("x")
        assert debouncer.flush() is True

        assert received == ["x"]
        assert not debouncer.pending
        assert debouncer.flush() is False

    @pytest.mark.asyncio
    async def test_cancel_drops_pending(self):
        received: list[str] = []
        debouncer = Debouncer(0.02, received.append)

        debouncer.push("x")
        debouncer.cancel()
        await asyncio.sleep(0.08)

        assert received == []
        assert debouncer.emitted_count == 0

    @pytest.mark.asyncio
    async def test_callback_error_does_not_break_debouncer(self):
        received: list[str] = []

        def callback(content: str) -> None:
            if content == "bad":
                raise ValueError("boom")
            received.append(content)

        debouncer = Debouncer(0.02, callback)

        debouncer.push("bad")
        await asyncio.sleep(0.08)
        debouncer.push("good")
        await asyncio.sleep(0.08)

        assert received == ["good"]
        assert debouncer.emitted_count == 2
