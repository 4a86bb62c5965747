"""Mines multiplier table."""

from decimal import Decimal
from fractions import Fraction
from random import Random

BOARD_SIZE = 25
HOUSE_EDGE = Decimal("0.95")


def _validate(safe_revealed: int, mines: int) -> None:
    if not 1 <= mines < BOARD_SIZE:
        raise ValueError(f"mines must be between 1 and {BOARD_SIZE - 1}, got {mines}")
    if not 0 <= safe_revealed <= BOARD_SIZE - mines:
        raise ValueError(f"safe_revealed out of range: {safe_revealed}")


def fair_multiplier(safe_revealed: int, mines: int) -> Fraction:
    """
    Inverse probability of revealing ``safe_revealed`` safe tiles in a row.

    Product over i < k of (25 - i) / (25 - i - m).
    """
    _validate(safe_revealed, mines)
    result = Fraction(1)
    for i in range(safe_revealed):
        result *= Fraction(BOARD_SIZE - i, BOARD_SIZE - i - mines)
    return result


def multiplier(safe_revealed: int, mines: int, house_edge: Decimal = HOUSE_EDGE) -> Decimal:
    """
    Payout multiplier after ``safe_revealed`` safe picks.

    Exactly 1 before the first pick; otherwise the fair multiplier scaled
    by the house edge.
    """
    fair = fair_multiplier(safe_revealed, mines)
    if safe_revealed == 0:
        return Decimal(1)
    return Decimal(fair.numerator) / Decimal(fair.denominator) * house_edge


def next_multiplier(safe_revealed: int, mines: int, house_edge: Decimal = HOUSE_EDGE) -> Decimal | None:
    """Multiplier the next safe pick would reach, or None if the board is cleared."""
    _validate(safe_revealed, mines)
    if safe_revealed >= BOARD_SIZE - mines:
        return None
    return multiplier(safe_revealed + 1, mines, house_edge)


def place_mines(rng: Random, mines: int) -> frozenset[int]:
    """Pick mine positions uniformly at random."""
    _validate(0, mines)
    return frozenset(rng.sample(range(BOARD_SIZE), mines))
