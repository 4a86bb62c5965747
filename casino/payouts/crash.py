"""Crash point distribution and the running multiplier curve."""

import math
from decimal import Decimal
from random import Random

from casino.wallet import to_cents

GROWTH_RATE = 0.12
MIN_MULTIPLIER = Decimal("1.00")


def crash_point(r: float) -> Decimal:
    """
    Crash point for a uniform draw ``r`` in [0, 1).

    ``max(1.00, floor(100 * 0.99 / (1 - r)) / 100)``: long tailed, with
    roughly 1% of rounds ending at 1.00.
    """
    if not 0 <= r < 1:
        raise ValueError(f"r must be in [0, 1), got {r}")
    hundredths = math.floor(0.99 / (1 - r) * 100)
    return max(MIN_MULTIPLIER, Decimal(hundredths) / 100)


def draw_crash_point(rng: Random) -> Decimal:
    return crash_point(rng.random())


def running_multiplier(elapsed: float, growth_rate: float = GROWTH_RATE) -> Decimal:
    """Displayed multiplier ``elapsed`` seconds into the running phase."""
    growth = Decimal(math.exp(growth_rate * max(elapsed, 0.0)))
    return max(MIN_MULTIPLIER, to_cents(growth))
