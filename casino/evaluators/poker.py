"""
Five-card poker hand classification.

Used with exactly five cards by Video Poker and as best-five-of-seven by
Texas Hold'em. Ranks compare by category first, then by tiebreak values.
"""

from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from itertools import combinations
from typing import Sequence

from casino.cards import Card, Rank


class HandCategory(IntEnum):
    """Poker hand categories, weakest first."""

    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8

    @property
    def label(self) -> str:
        if self == HandCategory.ONE_PAIR:
            return "Pair"
        return self.name.replace("_", " ").title()


@dataclass(frozen=True, order=True)
class HandRank:
    """Comparable hand strength."""

    category: HandCategory
    tiebreak: tuple[int, ...]

    @property
    def value(self) -> int:
        """Single integer that orders hands like the dataclass does."""
        scalar = int(self.category)
        for i in range(5):
            scalar = scalar * 15 + (self.tiebreak[i] if i < len(self.tiebreak) else 0)
        return scalar

    @property
    def label(self) -> str:
        return self.category.label


def _straight_high(values: set[int]) -> int | None:
    """Highest card of a five-card straight among ``values``, wheel included."""
    for high in range(14, 5, -1):
        if all(v in values for v in range(high - 4, high + 1)):
            return high
    if {14, 2, 3, 4, 5} <= values:
        return 5
    return None


def evaluate_five(cards: Sequence[Card]) -> HandRank:
    """Classify exactly five cards."""
    if len(cards) != 5:
        raise ValueError(f"Expected 5 cards, got {len(cards)}")

    values = sorted((c.poker_value for c in cards), reverse=True)
    is_flush = len({c.suit for c in cards}) == 1
    straight_high = _straight_high(set(values)) if len(set(values)) == 5 else None

    if is_flush and straight_high is not None:
        return HandRank(HandCategory.STRAIGHT_FLUSH, (straight_high,))

    # Groups ordered by size, then by rank
    groups = sorted(Counter(values).items(), key=lambda kv: (kv[1], kv[0]), reverse=True)
    sizes = [size for _, size in groups]
    ranks = tuple(rank for rank, _ in groups)

    if sizes[0] == 4:
        return HandRank(HandCategory.FOUR_OF_A_KIND, ranks)
    if sizes[:2] == [3, 2]:
        return HandRank(HandCategory.FULL_HOUSE, ranks)
    if is_flush:
        return HandRank(HandCategory.FLUSH, tuple(values))
    if straight_high is not None:
        return HandRank(HandCategory.STRAIGHT, (straight_high,))
    if sizes[0] == 3:
        return HandRank(HandCategory.THREE_OF_A_KIND, ranks)
    if sizes[:2] == [2, 2]:
        return HandRank(HandCategory.TWO_PAIR, ranks)
    if sizes[0] == 2:
        return HandRank(HandCategory.ONE_PAIR, ranks)
    return HandRank(HandCategory.HIGH_CARD, tuple(values))


def evaluate_best(cards: Sequence[Card]) -> HandRank:
    """Best five-card hand out of five to seven cards."""
    if not 5 <= len(cards) <= 7:
        raise ValueError(f"Expected 5 to 7 cards, got {len(cards)}")
    return max(evaluate_five(combo) for combo in combinations(cards, 5))


@dataclass(frozen=True)
class PaytableEntry:
    """One row of the Jacks or Better paytable."""

    name: str
    multiplier: int


ROYAL_FLUSH = PaytableEntry("ROYAL FLUSH", 250)
STRAIGHT_FLUSH = PaytableEntry("STRAIGHT FLUSH", 50)
FOUR_OF_A_KIND = PaytableEntry("FOUR OF A KIND", 25)
FULL_HOUSE = PaytableEntry("FULL HOUSE", 9)
FLUSH = PaytableEntry("FLUSH", 6)
STRAIGHT = PaytableEntry("STRAIGHT", 4)
THREE_OF_A_KIND = PaytableEntry("THREE OF A KIND", 3)
TWO_PAIR = PaytableEntry("TWO PAIR", 2)
JACKS_OR_BETTER = PaytableEntry("JACKS OR BETTER", 1)

PAYTABLE: tuple[PaytableEntry, ...] = (
    ROYAL_FLUSH,
    STRAIGHT_FLUSH,
    FOUR_OF_A_KIND,
    FULL_HOUSE,
    FLUSH,
    STRAIGHT,
    THREE_OF_A_KIND,
    TWO_PAIR,
    JACKS_OR_BETTER,
)

_CATEGORY_ENTRIES = {
    HandCategory.FOUR_OF_A_KIND: FOUR_OF_A_KIND,
    HandCategory.FULL_HOUSE: FULL_HOUSE,
    HandCategory.FLUSH: FLUSH,
    HandCategory.STRAIGHT: STRAIGHT,
    HandCategory.THREE_OF_A_KIND: THREE_OF_A_KIND,
    HandCategory.TWO_PAIR: TWO_PAIR,
}


def score_video_poker(cards: Sequence[Card]) -> PaytableEntry | None:
    """
    Look up a final five-card hand in the Jacks or Better paytable.

    Returns:
        The paying entry, or None if the hand pays nothing
    """
    rank = evaluate_five(cards)
    if rank.category == HandCategory.STRAIGHT_FLUSH:
        return ROYAL_FLUSH if rank.tiebreak[0] == Rank.ACE.value else STRAIGHT_FLUSH
    if rank.category == HandCategory.ONE_PAIR:
        return JACKS_OR_BETTER if rank.tiebreak[0] >= Rank.JACK.value else None
    return _CATEGORY_ENTRIES.get(rank.category)
