"""Real-time driver for a game's virtual clock."""

import asyncio
import logging
import time

from casino.games.base import GameEngine

logger = logging.getLogger(__name__)


async def run_realtime(
    game: GameEngine,
    interval: float = 0.05,
    stop_event: asyncio.Event | None = None,
) -> None:
    """
    Feed elapsed wall-clock time into ``game.advance`` until stopped.

    Args:
        game: Session whose timers should follow real time
        interval: Seconds between ticks
        stop_event: Set it to end the loop; otherwise cancel the task
    """
    stop_event = stop_event or asyncio.Event()
    last = time.monotonic()
    while not stop_event.is_set():
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            pass
        now = time.monotonic()
        game.advance(now - last)
        last = now
    logger.debug("Real-time clock stopped for %s", type(game).__name__)
