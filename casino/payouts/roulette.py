"""Single-zero roulette bets and payouts."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from random import Random

from casino.errors import InvalidBet

RED_NUMBERS = frozenset({1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36})
POCKETS = 37


class BetKind(Enum):
    """Supported roulette bets."""

    NUMBER = "number"
    COLOR = "color"
    PARITY = "parity"


class Color(Enum):
    RED = "red"
    BLACK = "black"
    GREEN = "green"


class Parity(Enum):
    EVEN = "even"
    ODD = "odd"


# Profit per unit staked; the stake itself is returned on top.
PAYOUT_RATIOS = {
    BetKind.NUMBER: 35,
    BetKind.COLOR: 1,
    BetKind.PARITY: 1,
}

Selection = int | Color | Parity


def number_color(number: int) -> Color:
    """Pocket color; 0 is green."""
    if number == 0:
        return Color.GREEN
    return Color.RED if number in RED_NUMBERS else Color.BLACK


def number_parity(number: int) -> Parity | None:
    """Pocket parity; 0 is neither even nor odd."""
    if number == 0:
        return None
    return Parity.EVEN if number % 2 == 0 else Parity.ODD


def parse_selection(kind: BetKind | str, selection: object) -> tuple[BetKind, Selection]:
    """
    Normalize a bet selection.

    Accepts enum members or their string values ('red', 'odd', ...).

    Raises:
        InvalidBet: if the selection does not fit the bet kind
    """
    try:
        kind = BetKind(kind) if not isinstance(kind, BetKind) else kind
    except ValueError:
        raise InvalidBet(f"Unknown bet kind: {kind!r}") from None

    if kind == BetKind.NUMBER:
        if isinstance(selection, bool) or not isinstance(selection, int):
            raise InvalidBet(f"Number bet needs an integer, got {selection!r}")
        if not 0 <= selection < POCKETS:
            raise InvalidBet(f"Number must be between 0 and 36, got {selection}")
        return kind, selection

    enum_type = Color if kind == BetKind.COLOR else Parity
    try:
        value = selection if isinstance(selection, enum_type) else enum_type(str(selection).lower())
    except ValueError:
        raise InvalidBet(f"Invalid {kind.value} selection: {selection!r}") from None
    if value == Color.GREEN:
        raise InvalidBet("Green is not a color bet")
    return kind, value


@dataclass(frozen=True)
class RouletteBet:
    """A stake on one selection."""

    kind: BetKind
    selection: Selection
    amount: Decimal

    def wins(self, number: int) -> bool:
        """Check this bet against a winning number."""
        if self.kind == BetKind.NUMBER:
            return self.selection == number
        if self.kind == BetKind.COLOR:
            return self.selection == number_color(number)
        return self.selection == number_parity(number)


def spin_number(rng: Random) -> int:
    """Uniform winning pocket 0-36."""
    return rng.randrange(POCKETS)


def bet_return(bet: RouletteBet, number: int) -> Decimal:
    """Total returned for a bet: stake plus profit on a win, else zero."""
    if not bet.wins(number):
        return Decimal("0")
    return bet.amount * (PAYOUT_RATIOS[bet.kind] + 1)


def settle(bets: list[RouletteBet], number: int) -> Decimal:
    """Total returned for independent bets resolved against one number."""
    return sum((bet_return(bet, number) for bet in bets), Decimal("0"))
