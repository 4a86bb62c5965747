"""Blackjack game engine with state machine."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from random import Random

from casino.cards import Card, Deck
from casino.config import BlackjackConfig, config
from casino.games.base import ActionResult, GameEngine, synchronized
from casino.games.events import EventType
from casino.hand import Hand, evaluate_hands
from casino.wallet import Wallet

logger = logging.getLogger(__name__)


class BlackjackState(Enum):
    """
    Blackjack phases.

    Flow: BETTING → PLAYING → DEALER_TURN → GAME_OVER
    """

    BETTING = auto()
    PLAYING = auto()
    DEALER_TURN = auto()
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class BlackjackOutcome(Enum):
    BLACKJACK = "blackjack"
    WIN = "win"
    PUSH = "push"
    LOSE = "lose"
    BUST = "bust"


@dataclass(frozen=True)
class BlackjackSnapshot:
    state: BlackjackState
    bet: Decimal
    player_cards: tuple[Card, ...]
    dealer_cards: tuple[Card, ...]
    player_value: int
    # Only the up card's value while the player is still acting
    dealer_value: int | None
    outcome: BlackjackOutcome | None
    payout: Decimal
    balance: Decimal
    history: tuple[BlackjackOutcome, ...]


class BlackjackGame(GameEngine):
    """
    Single-hand blackjack against a dealer who draws below 17.

    A natural on the player's first two cards pays 2.5x at once. Otherwise
    a win returns 2x, a push returns the stake and a loss returns nothing.
    """

    STATE = BlackjackState
    INITIAL = "betting"
    TRANSITIONS = [
        {"trigger": "begin_hand", "source": ["betting", "game_over"], "dest": "playing"},
        {"trigger": "dealer_acts", "source": "playing", "dest": "dealer_turn"},
        {"trigger": "finish_hand", "source": ["playing", "dealer_turn"], "dest": "game_over"},
        {"trigger": "back_to_betting", "source": "game_over", "dest": "betting"},
    ]

    def __init__(
        self,
        wallet: Wallet,
        rng: Random | None = None,
        deck: Deck | None = None,
        settings: BlackjackConfig | None = None,
    ) -> None:
        self.settings = settings or config.blackjack
        super().__init__(wallet, rng, history_size=self.settings.history_size)
        self.deck = deck or Deck(rng=self.rng)
        if deck is None:
            self.deck.shuffle()
        self.player_hand = Hand()
        self.dealer_hand = Hand()
        self.bet = Decimal("0")
        self.outcome: BlackjackOutcome | None = None
        self.payout = Decimal("0")

    def snapshot(self) -> BlackjackSnapshot:
        hidden = self.state == BlackjackState.PLAYING
        if hidden and self.dealer_hand.cards:
            dealer_value: int | None = self.dealer_hand.cards[0].blackjack_value
        elif self.dealer_hand.cards:
            dealer_value = self.dealer_hand.value
        else:
            dealer_value = None
        return BlackjackSnapshot(
            state=self.state,
            bet=self.bet,
            player_cards=tuple(self.player_hand.cards),
            dealer_cards=tuple(self.dealer_hand.cards),
            player_value=self.player_hand.value,
            dealer_value=dealer_value,
            outcome=self.outcome,
            payout=self.payout,
            balance=self.wallet.get_balance(),
            history=tuple(self.history),
        )

    @synchronized
    def deal(self, amount: int | Decimal | None = None) -> ActionResult:
        """
        Take the stake and deal two cards each.

        Args:
            amount: Stake (defaults to the table's default bet)
        """
        if self.state not in (BlackjackState.BETTING, BlackjackState.GAME_OVER):
            return self._invalid_state("deal")

        stake = self._validate_amount(self.settings.default_bet if amount is None else amount)
        if stake is None:
            return self._invalid_bet()
        rejection = self._debit(stake, "blackjack")
        if rejection is not None:
            return rejection

        if self.deck.ensure(self.settings.cards_per_round):
            self.events.emit_new(EventType.DECK_SHUFFLED)

        self.player_hand.clear()
        self.dealer_hand.clear()
        self.bet = stake
        self.outcome = None
        self.payout = Decimal("0")

        self.begin_hand()
        self._deal_card_to_hand(self.player_hand)
        self._deal_card_to_hand(self.dealer_hand)
        self._deal_card_to_hand(self.player_hand)
        self._deal_card_to_hand(self.dealer_hand, face_up=False)
        self.events.emit_new(EventType.ROUND_STARTED, bet=float(stake))

        if self.player_hand.is_blackjack:
            self.events.emit_new(EventType.PLAYER_BLACKJACK)
            self._settle(BlackjackOutcome.BLACKJACK)

        return self._ok()

    def _deal_card_to_hand(self, hand: Hand, face_up: bool = True) -> Card:
        """Deal a card to a hand."""
        card = self.deck.draw()
        hand.add_card(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            hand="dealer" if hand is self.dealer_hand else "player",
        )
        return card

    @synchronized
    def hit(self) -> ActionResult:
        """Player takes another card; a bust ends the hand immediately."""
        if self.state != BlackjackState.PLAYING:
            return self._invalid_state("hit")

        self._deal_card_to_hand(self.player_hand)
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=self.player_hand.value)

        if self.player_hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=self.player_hand.value)
            self._settle(BlackjackOutcome.BUST)

        return self._ok()

    @synchronized
    def stand(self) -> ActionResult:
        """Player stands; the dealer plays out the hand."""
        if self.state != BlackjackState.PLAYING:
            return self._invalid_state("stand")

        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.player_hand.value)
        self.dealer_acts()

        while self.dealer_hand.value < self.settings.dealer_stands_on:
            self._deal_card_to_hand(self.dealer_hand)
            self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer_hand.value)

        if self.dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)

        result = evaluate_hands(self.player_hand, self.dealer_hand)
        if result > 0:
            self._settle(BlackjackOutcome.WIN)
        elif result < 0:
            self._settle(BlackjackOutcome.LOSE)
        else:
            self._settle(BlackjackOutcome.PUSH)
        return self._ok()

    @synchronized
    def new_round(self) -> ActionResult:
        """Clear the table and return to betting."""
        if self.state != BlackjackState.GAME_OVER:
            return self._invalid_state("start a new round")
        self.player_hand.clear()
        self.dealer_hand.clear()
        self.bet = Decimal("0")
        self.outcome = None
        self.payout = Decimal("0")
        self.back_to_betting()
        return self._ok()

    def _settle(self, outcome: BlackjackOutcome) -> None:
        """Pay out the hand exactly once."""
        if outcome == BlackjackOutcome.BLACKJACK:
            payout = self.bet * self.settings.natural_return
        elif outcome == BlackjackOutcome.WIN:
            payout = self.bet * 2
        elif outcome == BlackjackOutcome.PUSH:
            payout = self.bet
        else:
            payout = Decimal("0")

        self._credit(payout, outcome.value)
        self.outcome = outcome
        self.payout = payout
        self.history.append(outcome)

        if outcome in (BlackjackOutcome.BLACKJACK, BlackjackOutcome.WIN):
            self.events.emit_new(EventType.PLAYER_WINS, amount=float(payout))
        elif outcome == BlackjackOutcome.PUSH:
            self.events.emit_new(EventType.PUSH, amount=float(payout))
        else:
            self.events.emit_new(EventType.PLAYER_LOSES, amount=float(self.bet))

        self.finish_hand()
        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=outcome.value,
            payout=float(payout),
            balance=float(self.wallet.get_balance()),
        )
        logger.debug("Blackjack hand settled: %s pays %s", outcome.value, payout)

    def _abandon_round(self) -> Decimal:
        # The cards are out, so walking away loses the hand.
        if self.state == BlackjackState.PLAYING:
            self._forfeit(self.bet, "blackjack")
            self.history.append(BlackjackOutcome.LOSE)
        self.player_hand.clear()
        self.dealer_hand.clear()
        self.bet = Decimal("0")
        self.outcome = None
        self.payout = Decimal("0")
        return Decimal("0")
