"""
Tests for the disconnect countdown, run on logical time.
"""

import asyncio

from twentyone_client.timer import DisconnectTimer

from twentyone_client.tests.helpers import ManualClock


def make_timer(clock, ticks, expired, seconds=10):
    return DisconnectTimer(
        on_tick=ticks.append,
        on_expire=lambda: expired.append(True),
        seconds=seconds,
        sleep=clock.sleep,
    )


def test_counts_down_then_expires():
    """Test ten one-second ticks then a single expiry."""
    async def scenario():
        clock, ticks, expired = ManualClock(), [], []
        timer = make_timer(clock, ticks, expired)
        timer.start()
        await clock.advance(9)
        assert ticks == [9, 8, 7, 6, 5, 4, 3, 2, 1]
        assert not expired
        await clock.advance()
        assert ticks[-1] == 0
        assert expired == [True]
        assert clock.sleeps == 10
        assert not timer.active

    asyncio.run(scenario())


def test_cancel_prevents_expiry():
    """Test cancelling before the last tick stops everything."""
    async def scenario():
        clock, ticks, expired = ManualClock(), [], []
        timer = make_timer(clock, ticks, expired)
        timer.start()
        await clock.advance(4)
        assert timer.cancel()
        await clock.advance(10)
        assert ticks == [9, 8, 7, 6]
        assert not expired
        assert not timer.active

    asyncio.run(scenario())


def test_restart_replaces_running_countdown():
    """Test starting again replaces instead of stacking."""
    async def scenario():
        clock, ticks, expired = ManualClock(), [], []
        timer = make_timer(clock, ticks, expired, seconds=3)
        timer.start()
        await clock.advance(2)
        timer.start()
        await clock.advance(3)
        assert ticks == [2, 1, 2, 1, 0]
        assert expired == [True]

    asyncio.run(scenario())


def test_cancel_without_countdown():
    """Test cancel is a no-op when nothing runs."""
    timer = DisconnectTimer(on_tick=lambda remaining: None, on_expire=lambda: None)
    assert not timer.cancel()
    assert not timer.active
