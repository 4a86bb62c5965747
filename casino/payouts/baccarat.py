"""Baccarat bet returns."""

from decimal import Decimal
from enum import Enum

from casino.evaluators.baccarat import Coup, Outcome


class BetKind(Enum):
    """Bets available on the baccarat layout."""

    PLAYER = "player"
    BANKER = "banker"
    TIE = "tie"
    WINNER_EVEN = "winner_even"


# Total returned per unit staked on a winning bet
RETURN_MULTIPLIERS = {
    BetKind.PLAYER: 2,
    BetKind.BANKER: 2,
    BetKind.TIE: 9,
    BetKind.WINNER_EVEN: 2,
}

_SIDE_OUTCOMES = {
    BetKind.PLAYER: Outcome.PLAYER,
    BetKind.BANKER: Outcome.BANKER,
    BetKind.TIE: Outcome.TIE,
}


def bet_wins(kind: BetKind, coup: Coup) -> bool:
    """
    Check a bet against a finished coup.

    The winner-even bet looks at the winning side's score, or the shared
    score on a tie.
    """
    if kind == BetKind.WINNER_EVEN:
        return coup.winning_score % 2 == 0
    return coup.outcome == _SIDE_OUTCOMES[kind]


def bet_return(kind: BetKind, amount: Decimal, coup: Coup) -> Decimal:
    """Total returned to the player for a bet; zero when it loses."""
    if not bet_wins(kind, coup):
        return Decimal("0")
    return amount * RETURN_MULTIPLIERS[kind]
