"""Baccarat scoring and the fixed third-card drawing rules."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from casino.cards import Card


class Outcome(Enum):
    """Possible outcomes of a Baccarat coup."""

    PLAYER = "player"
    BANKER = "banker"
    TIE = "tie"

    @property
    def marker(self) -> str:
        """Single-letter marker used on the scoreboard."""
        return {Outcome.PLAYER: "P", Outcome.BANKER: "B", Outcome.TIE: "T"}[self]


def score(cards: Sequence[Card]) -> int:
    """Hand score: sum of pip values mod 10."""
    return sum(card.baccarat_value for card in cards) % 10


def is_natural(cards: Sequence[Card]) -> bool:
    """Check for a two-card 8 or 9."""
    return len(cards) == 2 and score(cards) >= 8


def player_draws(player_score: int) -> bool:
    """
    Player drawing rule.

    - 0-5: Draw
    - 6-7: Stand
    """
    return player_score <= 5


def banker_draws(banker_score: int, player_third: int | None) -> bool:
    """
    Banker drawing rule.

    Args:
        banker_score: Banker's two-card score
        player_third: Pip value of the Player's third card, or None if
            the Player stood

    Returns:
        True if the Banker draws
    """
    if player_third is None:
        return banker_score <= 5
    if banker_score <= 2:
        return True
    if banker_score == 3:
        return player_third != 8
    if banker_score == 4:
        return 2 <= player_third <= 7
    if banker_score == 5:
        return 4 <= player_third <= 7
    if banker_score == 6:
        return 6 <= player_third <= 7
    return False


@dataclass(frozen=True)
class Coup:
    """Completed Baccarat deal."""

    player: tuple[Card, ...]
    banker: tuple[Card, ...]
    player_score: int
    banker_score: int
    natural: bool
    outcome: Outcome

    @property
    def winning_score(self) -> int:
        """Score of the winning side; on a tie both scores are equal."""
        if self.outcome == Outcome.BANKER:
            return self.banker_score
        return self.player_score


def play_coup(
    player: Sequence[Card],
    banker: Sequence[Card],
    draw: Callable[[], Card],
) -> Coup:
    """
    Apply the drawing rules to two initial hands.

    Args:
        player: Player's first two cards
        banker: Banker's first two cards
        draw: Supplies the next card from the deck

    Returns:
        The finished coup; each side receives at most one extra card
    """
    if len(player) != 2 or len(banker) != 2:
        raise ValueError("A coup starts with two cards per side")
    player_cards = list(player)
    banker_cards = list(banker)
    natural = is_natural(player_cards) or is_natural(banker_cards)

    if not natural:
        player_third: int | None = None
        if player_draws(score(player_cards)):
            card = draw()
            player_cards.append(card)
            player_third = card.baccarat_value
        if banker_draws(score(banker_cards), player_third):
            banker_cards.append(draw())

    player_score = score(player_cards)
    banker_score = score(banker_cards)
    if player_score > banker_score:
        outcome = Outcome.PLAYER
    elif banker_score > player_score:
        outcome = Outcome.BANKER
    else:
        outcome = Outcome.TIE

    return Coup(
        player=tuple(player_cards),
        banker=tuple(banker_cards),
        player_score=player_score,
        banker_score=banker_score,
        natural=natural,
        outcome=outcome,
    )
