"""Virtual-clock scheduler for timer-driven phase transitions."""

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True)
class ScheduledEvent:
    """A callback due at a point on the scheduler's clock."""

    deadline: float
    seq: int
    name: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)
    generation: int = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        """Prevent this event from firing."""
        self.cancelled = True


class Scheduler:
    """
    Explicit event queue driven by ``advance``.

    Nothing fires on its own: the owning game feeds elapsed time in through
    its locked ``advance`` entry point, so timer events are consumed in the
    same order as player actions. ``cancel_all`` bumps the generation, which
    invalidates every event scheduled before it.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: list[ScheduledEvent] = []
        self._counter = itertools.count()
        self._generation = 0

    @property
    def now(self) -> float:
        """Current time on the virtual clock, in seconds."""
        return self._now

    @property
    def generation(self) -> int:
        return self._generation

    def schedule(self, delay: float, callback: Callable[[], None], name: str = "") -> ScheduledEvent:
        """
        Schedule a callback ``delay`` seconds from now.

        Args:
            delay: Seconds from the current clock time (>= 0)
            callback: Zero-argument callable
            name: Label used in reprs and pending()

        Returns:
            Handle that can be cancelled
        """
        if delay < 0:
            raise ValueError("delay must be non-negative")
        event = ScheduledEvent(
            deadline=self._now + delay,
            seq=next(self._counter),
            name=name,
            callback=callback,
            generation=self._generation,
        )
        heapq.heappush(self._queue, event)
        return event

    def cancel_all(self) -> None:
        """Drop every pending event."""
        self._generation += 1
        self._queue.clear()

    def pending(self) -> list[str]:
        """Names of live events in firing order."""
        return [e.name for e in sorted(self._queue) if self._is_live(e)]

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing every event that falls due.

        Events scheduled by callbacks during the advance fire too if their
        deadline is inside the window. The clock reads the event's deadline
        while its callback runs.

        Returns:
            Number of events fired
        """
        if seconds < 0:
            raise ValueError("Cannot move the clock backwards")
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0].deadline <= target:
            event = heapq.heappop(self._queue)
            if not self._is_live(event):
                continue
            self._now = max(self._now, event.deadline)
            event.callback()
            fired += 1
        self._now = target
        return fired

    def _is_live(self, event: ScheduledEvent) -> bool:
        return not event.cancelled and event.generation == self._generation
