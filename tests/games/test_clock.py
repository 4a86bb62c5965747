"""Tests for the real-time clock driver."""

import asyncio
from decimal import Decimal

import pytest

from casino.clock import run_realtime
from casino.config import SlotsConfig
from casino.games.slots import SlotsGame, SlotsState


@pytest.mark.asyncio
async def test_realtime_fires_timers(wallet):
    """Test that real elapsed time drives scheduled reveals."""
    game = SlotsGame(wallet, settings=SlotsConfig(spin_seconds=0.05))
    stop = asyncio.Event()
    task = asyncio.create_task(run_realtime(game, interval=0.01, stop_event=stop))

    game.spin(Decimal("10"))
    assert game.state == SlotsState.SPINNING
    await asyncio.sleep(0.3)

    stop.set()
    await asyncio.wait_for(task, timeout=1)

    assert game.state == SlotsState.SETTLED
    assert game.now >= 0.05


@pytest.mark.asyncio
async def test_realtime_can_be_cancelled(wallet):
    """Test that cancelling the task stops the clock."""
    game = SlotsGame(wallet)
    task = asyncio.create_task(run_realtime(game, interval=0.01))
    await asyncio.sleep(0.05)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    stopped_at = game.now
    await asyncio.sleep(0.05)
    assert game.now == stopped_at
