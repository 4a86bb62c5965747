"""Slot themes, weighted reels and cluster pays."""

from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from random import Random

# Cumulative draw thresholds: wild ~5%, rarest symbol ~5%, next ~10%.
WILD_THRESHOLD = 0.95
TOP_SYMBOL_THRESHOLD = 0.90
SECOND_SYMBOL_THRESHOLD = 0.80

BIG_CLUSTER = 8
SMALL_CLUSTER = 5
WILD_BONUS_COUNT = 3
WILD_BONUS = Decimal("20")


@dataclass(frozen=True)
class SlotTheme:
    """Symbol set of one machine; symbols are ordered rarest first."""

    id: str
    name: str
    description: str
    symbols: tuple[str, ...]
    wild: str

    def rarity(self, symbol: str) -> int:
        """Rarity weight: the rarest symbol has the largest value."""
        return len(self.symbols) - self.symbols.index(symbol)


THEMES: dict[str, SlotTheme] = {
    theme.id: theme
    for theme in (
        SlotTheme(
            id="blasting",
            name="Blasting Wilds",
            description="Blast the fruit to multiply your winnings!",
            symbols=("💎", "7️⃣", "🔔", "🍉", "🍇", "🍋", "🍒"),
            wild="💣",
        ),
        SlotTheme(
            id="olympus",
            name="Gates of Gods",
            description="The fury of Zeus brings divine multipliers.",
            symbols=("👑", "⏳", "💍", "🏆", "🍷", "🟦", "🟩"),
            wild="⚡",
        ),
        SlotTheme(
            id="sweet",
            name="Sugar Rush",
            description="A sweet world of cascading wins.",
            symbols=("🍭", "🍬", "🍩", "🍪", "🍎", "🍇", "🍌"),
            wild="🧁",
        ),
    )
}

Grid = tuple[tuple[str, ...], ...]


def draw_symbol(theme: SlotTheme, rng: Random) -> str:
    """Weighted draw for one reel cell."""
    r = rng.random()
    if r > WILD_THRESHOLD:
        return theme.wild
    if r > TOP_SYMBOL_THRESHOLD:
        return theme.symbols[0]
    if r > SECOND_SYMBOL_THRESHOLD:
        return theme.symbols[1]
    return rng.choice(theme.symbols[2:])


def spin_grid(theme: SlotTheme, rng: Random, reels: int = 5, rows: int = 3) -> Grid:
    """Fill a fresh grid, one tuple of rows per reel."""
    return tuple(
        tuple(draw_symbol(theme, rng) for _ in range(rows))
        for _ in range(reels)
    )


@dataclass(frozen=True)
class SymbolWin:
    """A paying cluster."""

    symbol: str
    count: int
    multiplier: Decimal
    amount: Decimal


@dataclass(frozen=True)
class SpinPayout:
    wins: tuple[SymbolWin, ...]
    total: Decimal


def evaluate_grid(grid: Grid, theme: SlotTheme, stake: Decimal) -> SpinPayout:
    """
    Cluster pays: count every symbol across the whole grid.

    8+ of a symbol pays rarity x 2 x stake, 5-7 pays rarity x 0.5 x stake,
    and 3+ wilds add a flat 20 x stake bonus. Wins add up.
    """
    counts = Counter(symbol for reel in grid for symbol in reel)
    wins: list[SymbolWin] = []

    for symbol in theme.symbols:
        count = counts.get(symbol, 0)
        if count >= BIG_CLUSTER:
            mult = Decimal(theme.rarity(symbol) * 2)
        elif count >= SMALL_CLUSTER:
            mult = Decimal(theme.rarity(symbol)) * Decimal("0.5")
        else:
            continue
        wins.append(SymbolWin(symbol, count, mult, stake * mult))

    wild_count = counts.get(theme.wild, 0)
    if wild_count >= WILD_BONUS_COUNT:
        wins.append(SymbolWin(theme.wild, wild_count, WILD_BONUS, stake * WILD_BONUS))

    total = sum((w.amount for w in wins), Decimal("0"))
    return SpinPayout(tuple(wins), total)
