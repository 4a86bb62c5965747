"""Heads-up Texas Hold'em against a dealer who always calls."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from random import Random

from casino.cards import Card, Deck
from casino.config import HoldemConfig, config
from casino.evaluators.poker import HandRank, evaluate_best
from casino.games.base import ActionResult, GameEngine, synchronized
from casino.games.events import EventType
from casino.wallet import Wallet

logger = logging.getLogger(__name__)

# Two hole cards each plus five community cards
CARDS_PER_HAND = 9

# Community cards dealt when leaving each street
_STREET_CARDS = {"preflop": 3, "flop": 1, "turn": 1, "river": 0}


class HoldemState(Enum):
    """
    Hold'em phases.

    Flow: START → PREFLOP → FLOP → TURN → RIVER → SHOWDOWN
    """

    START = auto()
    PREFLOP = auto()
    FLOP = auto()
    TURN = auto()
    RIVER = auto()
    SHOWDOWN = auto()

    def __str__(self) -> str:
        return self.name.title()


class HoldemOutcome(Enum):
    WIN = "win"
    LOSE = "lose"
    SPLIT = "split"
    FOLD = "fold"


@dataclass(frozen=True)
class HoldemSnapshot:
    state: HoldemState
    pot: Decimal
    player_cards: tuple[Card, ...]
    # Face down until showdown
    dealer_cards: tuple[Card, ...]
    community_cards: tuple[Card, ...]
    player_hand: str | None
    dealer_hand: str | None
    outcome: HoldemOutcome | None
    payout: Decimal
    balance: Decimal
    history: tuple[HoldemOutcome, ...]


class HoldemGame(GameEngine):
    """
    Simplified heads-up Hold'em.

    The dealer matches the opening bet and calls every raise, so the pot is
    always twice the player's contribution. The best five of seven cards
    wins the pot; an exact tie gives back half of it.
    """

    STATE = HoldemState
    INITIAL = "start"
    TRANSITIONS = [
        {"trigger": "deal_hole_cards", "source": ["start", "showdown"], "dest": "preflop"},
        {"trigger": "next_street", "source": "preflop", "dest": "flop"},
        {"trigger": "next_street", "source": "flop", "dest": "turn"},
        {"trigger": "next_street", "source": "turn", "dest": "river"},
        {"trigger": "next_street", "source": "river", "dest": "showdown"},
        {"trigger": "muck", "source": ["preflop", "flop", "turn", "river"], "dest": "start"},
    ]

    def __init__(
        self,
        wallet: Wallet,
        rng: Random | None = None,
        deck: Deck | None = None,
        settings: HoldemConfig | None = None,
    ) -> None:
        self.settings = settings or config.holdem
        super().__init__(wallet, rng, history_size=self.settings.history_size)
        self.deck = deck or Deck(rng=self.rng)
        if deck is None:
            self.deck.shuffle()
        self.player_cards: list[Card] = []
        self.dealer_cards: list[Card] = []
        self.community_cards: list[Card] = []
        self.pot = Decimal("0")
        self.outcome: HoldemOutcome | None = None
        self.payout = Decimal("0")
        self.player_rank: HandRank | None = None
        self.dealer_rank: HandRank | None = None

    @property
    def in_hand(self) -> bool:
        return self.state in (HoldemState.PREFLOP, HoldemState.FLOP, HoldemState.TURN, HoldemState.RIVER)

    @property
    def contribution(self) -> Decimal:
        """What the player has put into the pot."""
        return self.pot / 2

    def snapshot(self) -> HoldemSnapshot:
        showdown = self.state == HoldemState.SHOWDOWN
        return HoldemSnapshot(
            state=self.state,
            pot=self.pot,
            player_cards=tuple(self.player_cards),
            dealer_cards=tuple(self.dealer_cards) if showdown else (),
            community_cards=tuple(self.community_cards),
            player_hand=self.player_rank.label if showdown and self.player_rank else None,
            dealer_hand=self.dealer_rank.label if showdown and self.dealer_rank else None,
            outcome=self.outcome,
            payout=self.payout,
            balance=self.wallet.get_balance(),
            history=tuple(self.history),
        )

    @synchronized
    def deal(self, bet: int | Decimal | None = None) -> ActionResult:
        """
        Post the opening bet and deal two hole cards each.

        Args:
            bet: Opening bet (defaults to the table's default bet)
        """
        if self.state not in (HoldemState.START, HoldemState.SHOWDOWN):
            return self._invalid_state("deal")
        stake = self._validate_amount(self.settings.default_bet if bet is None else bet)
        if stake is None:
            return self._invalid_bet()
        rejection = self._debit(stake, "holdem ante")
        if rejection is not None:
            return rejection

        if self.deck.ensure(CARDS_PER_HAND):
            self.events.emit_new(EventType.DECK_SHUFFLED)

        self._clear_table()
        self.pot = stake * 2
        self.player_cards = [self.deck.draw(), self.deck.draw()]
        self.dealer_cards = [self.deck.draw(), self.deck.draw()]
        self.deal_hole_cards()
        for card in self.player_cards:
            self.events.emit_new(EventType.CARD_DEALT, card=str(card), hand="player")
        for _ in self.dealer_cards:
            self.events.emit_new(EventType.CARD_DEALT, card="??", hand="dealer")
        self.events.emit_new(EventType.ROUND_STARTED, bet=float(stake), pot=float(self.pot))
        return self._ok()

    @synchronized
    def check(self) -> ActionResult:
        """Move to the next street without betting."""
        if not self.in_hand:
            return self._invalid_state("check")
        self.events.emit_new(EventType.PLAYER_CHECK, street=str(self.state))
        self._advance_street()
        return self._ok()

    @synchronized
    def bet(self) -> ActionResult:
        """Raise by the fixed amount; the dealer calls, then the next street comes."""
        if not self.in_hand:
            return self._invalid_state("bet")
        raise_amount = Decimal(self.settings.raise_amount)
        rejection = self._debit(raise_amount, "holdem raise")
        if rejection is not None:
            return rejection
        self.pot += raise_amount * 2
        self.events.emit_new(EventType.PLAYER_RAISE, amount=float(raise_amount), pot=float(self.pot))
        self._advance_street()
        return self._ok()

    @synchronized
    def fold(self) -> ActionResult:
        """Give up the hand; the pot goes to the dealer."""
        if not self.in_hand:
            return self._invalid_state("fold")
        forfeited = self.contribution
        self.events.emit_new(EventType.PLAYER_FOLD, amount=float(forfeited))
        self.history.append(HoldemOutcome.FOLD)
        self.events.emit_new(EventType.BET_RESOLVED, amount=float(forfeited), returned=0.0)
        self.muck()
        self._clear_table()
        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=HoldemOutcome.FOLD.value,
            payout=0.0,
            balance=float(self.wallet.get_balance()),
        )
        return self._ok()

    def _advance_street(self) -> None:
        count = _STREET_CARDS[self._machine_state]
        for _ in range(count):
            card = self.deck.draw()
            self.community_cards.append(card)
            self.events.emit_new(EventType.CARD_DEALT, card=str(card), hand="community")
        self.next_street()
        if self.state == HoldemState.SHOWDOWN:
            self._showdown()

    def _showdown(self) -> None:
        self.player_rank = evaluate_best(self.player_cards + self.community_cards)
        self.dealer_rank = evaluate_best(self.dealer_cards + self.community_cards)

        if self.player_rank > self.dealer_rank:
            outcome, payout = HoldemOutcome.WIN, self.pot
            self.events.emit_new(EventType.PLAYER_WINS, amount=float(payout), hand=self.player_rank.label)
        elif self.player_rank < self.dealer_rank:
            outcome, payout = HoldemOutcome.LOSE, Decimal("0")
            self.events.emit_new(EventType.PLAYER_LOSES, amount=float(self.contribution), hand=self.dealer_rank.label)
        else:
            outcome, payout = HoldemOutcome.SPLIT, self.pot / 2
            self.events.emit_new(EventType.PUSH, amount=float(payout), hand=self.player_rank.label)

        self._credit(payout, f"holdem {outcome.value}")
        self.outcome = outcome
        self.payout = payout
        self.history.append(outcome)
        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=outcome.value,
            payout=float(payout),
            balance=float(self.wallet.get_balance()),
        )
        logger.debug(
            "Hold'em showdown: %s vs %s, %s",
            self.player_rank.label,
            self.dealer_rank.label,
            outcome.value,
        )

    def _clear_table(self) -> None:
        self.player_cards = []
        self.dealer_cards = []
        self.community_cards = []
        self.pot = Decimal("0")
        self.outcome = None
        self.payout = Decimal("0")
        self.player_rank = None
        self.dealer_rank = None

    def _abandon_round(self) -> Decimal:
        # Leaving mid-hand is a fold.
        if self.in_hand:
            self._forfeit(self.contribution, "holdem")
            self.history.append(HoldemOutcome.FOLD)
        self._clear_table()
        return Decimal("0")
