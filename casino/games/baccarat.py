"""Baccarat table with an auto-deal countdown."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from random import Random

from casino.cards import Card, Deck
from casino.config import BaccaratConfig, config
from casino.evaluators.baccarat import Coup, play_coup
from casino.games.base import ActionResult, GameEngine, synchronized
from casino.games.events import EventType
from casino.payouts.baccarat import BetKind, bet_return
from casino.timers import ScheduledEvent
from casino.wallet import Wallet

logger = logging.getLogger(__name__)

# Two initial cards per side plus at most one third card each
CARDS_PER_COUP = 6


class BaccaratState(Enum):
    """
    Baccarat phases.

    Flow: BETTING → DEALING → RESULT
    """

    BETTING = auto()
    DEALING = auto()
    RESULT = auto()


@dataclass(frozen=True)
class BaccaratBet:
    kind: BetKind
    amount: Decimal


@dataclass(frozen=True)
class BaccaratSnapshot:
    state: BaccaratState
    bet: BaccaratBet | None
    time_left: float
    # Cards stay hidden until the reveal delay has passed
    player_cards: tuple[Card, ...]
    banker_cards: tuple[Card, ...]
    player_score: int | None
    banker_score: int | None
    coup: Coup | None
    payout: Decimal
    balance: Decimal
    history: tuple[str, ...]


class BaccaratGame(GameEngine):
    """
    Punto banco for one player.

    The first chip starts a countdown; when it runs out the hand is dealt
    automatically. Further chips do not restart it. The coup and its payout
    are decided at deal time; the result is revealed after a short delay.
    """

    STATE = BaccaratState
    INITIAL = "betting"
    TRANSITIONS = [
        {"trigger": "start_dealing", "source": "betting", "dest": "dealing"},
        {"trigger": "reveal_result", "source": "dealing", "dest": "result"},
        {"trigger": "reopen_betting", "source": "result", "dest": "betting"},
    ]

    def __init__(
        self,
        wallet: Wallet,
        rng: Random | None = None,
        deck: Deck | None = None,
        settings: BaccaratConfig | None = None,
    ) -> None:
        self.settings = settings or config.baccarat
        super().__init__(wallet, rng, history_size=self.settings.history_size)
        self.deck = deck or Deck(rng=self.rng)
        if deck is None:
            self.deck.shuffle()
        self.bet: BaccaratBet | None = None
        self.coup: Coup | None = None
        self.payout = Decimal("0")
        self._deadline: float | None = None
        self._auto_deal: ScheduledEvent | None = None

    @property
    def time_left(self) -> float:
        """Seconds until the auto-deal; the full countdown while no bet is down."""
        if self._deadline is None:
            return self.settings.countdown_seconds
        return max(0.0, self._deadline - self.scheduler.now)

    def snapshot(self) -> BaccaratSnapshot:
        revealed = self.state == BaccaratState.RESULT and self.coup is not None
        coup = self.coup if revealed else None
        return BaccaratSnapshot(
            state=self.state,
            bet=self.bet,
            time_left=self.time_left,
            player_cards=coup.player if coup else (),
            banker_cards=coup.banker if coup else (),
            player_score=coup.player_score if coup else None,
            banker_score=coup.banker_score if coup else None,
            coup=coup,
            payout=self.payout,
            balance=self.wallet.get_balance(),
            history=tuple(self.history),
        )

    @synchronized
    def place_bet(self, kind: BetKind | str, amount: int | Decimal) -> ActionResult:
        """
        Add a chip to a bet.

        Chips on the bet already down stack up. Chips on a different kind
        move the bet: the old stake is refunded and only the new chip stays.
        """
        if self.state != BaccaratState.BETTING:
            return self._invalid_state("place a bet")
        try:
            kind = BetKind(kind)
        except ValueError:
            return self._invalid_bet(f"Unknown bet kind: {kind!r}")
        chip = self._validate_amount(amount)
        if chip is None:
            return self._invalid_bet()

        if self.bet is not None and self.bet.kind != kind:
            previous = self.bet
            available = self.wallet.get_balance()
            if available + previous.amount < chip:
                return self._insufficient(chip, available + previous.amount, "baccarat switch")
            self._credit(previous.amount, "baccarat switch refund")
            rejection = self._debit(chip, kind.value)
            if rejection is not None:
                # Balance moved underneath us; put the old stake back.
                self.wallet.debit(previous.amount, "baccarat switch rollback")
                return rejection
            self.bet = BaccaratBet(kind, chip)
        else:
            rejection = self._debit(chip, kind.value)
            if rejection is not None:
                return rejection
            current = self.bet.amount if self.bet else Decimal("0")
            self.bet = BaccaratBet(kind, current + chip)

        if self._deadline is None:
            self._start_countdown()
        return self._ok()

    @synchronized
    def clear_bet(self) -> ActionResult:
        """Take the bet back and stop the countdown."""
        if self.state != BaccaratState.BETTING or self.bet is None:
            return self._invalid_state("clear the bet")
        refund = self.bet.amount
        self._credit(refund, "baccarat clear")
        self.bet = None
        self._stop_countdown()
        self.events.emit_new(EventType.BET_CLEARED, amount=float(refund))
        return self._ok()

    @synchronized
    def deal(self) -> ActionResult:
        """Deal now instead of waiting for the countdown."""
        if self.state != BaccaratState.BETTING or self.bet is None:
            return self._invalid_state("deal")
        self._deal(self.bet)
        return self._ok()

    @synchronized
    def new_round(self) -> ActionResult:
        """Clear the table after a result."""
        if self.state != BaccaratState.RESULT:
            return self._invalid_state("start a new round")
        self.bet = None
        self.coup = None
        self.payout = Decimal("0")
        self.reopen_betting()
        return self._ok()

    def _start_countdown(self) -> None:
        self._deadline = self.scheduler.now + self.settings.countdown_seconds
        self._auto_deal = self.scheduler.schedule(
            self.settings.countdown_seconds, self._on_countdown_expired, name="baccarat-auto-deal"
        )

    def _stop_countdown(self) -> None:
        if self._auto_deal is not None:
            self._auto_deal.cancel()
        self._auto_deal = None
        self._deadline = None

    def _on_countdown_expired(self) -> None:
        self._auto_deal = None
        if self.state == BaccaratState.BETTING and self.bet is not None:
            self.events.emit_new(EventType.COUNTDOWN_TICK, time_left=0.0)
            self._deal(self.bet)

    def _deal(self, bet: BaccaratBet) -> None:
        self._stop_countdown()
        if self.deck.ensure(CARDS_PER_COUP):
            self.events.emit_new(EventType.DECK_SHUFFLED)

        self.start_dealing()
        player = [self.deck.draw()]
        banker = [self.deck.draw()]
        player.append(self.deck.draw())
        banker.append(self.deck.draw())
        self.events.emit_new(EventType.ROUND_STARTED, bet=bet.kind.value)

        coup = play_coup(player, banker, self.deck.draw)
        for card in coup.player:
            self.events.emit_new(EventType.CARD_DEALT, card=str(card), hand="player")
        for card in coup.banker:
            self.events.emit_new(EventType.CARD_DEALT, card=str(card), hand="banker")

        payout = bet_return(bet.kind, bet.amount, coup)
        self._credit(payout, f"baccarat {coup.outcome.value}")
        self.coup = coup
        self.payout = payout
        self.history.append(coup.outcome.marker)
        self.events.emit_new(
            EventType.PLAYER_WINS if payout > 0 else EventType.PLAYER_LOSES,
            outcome=coup.outcome.value,
            amount=float(payout if payout > 0 else bet.amount),
        )
        logger.debug(
            "Baccarat coup %s-%s (%s) pays %s",
            coup.player_score,
            coup.banker_score,
            coup.outcome.value,
            payout,
        )
        self.scheduler.schedule(self.settings.reveal_delay, self._reveal, name="baccarat-reveal")

    def _reveal(self) -> None:
        if self.state != BaccaratState.DEALING or self.coup is None:
            return
        self.reveal_result()
        self.events.emit_new(
            EventType.RESULT_REVEALED,
            outcome=self.coup.outcome.value,
            player_score=self.coup.player_score,
            banker_score=self.coup.banker_score,
        )
        self.events.emit_new(
            EventType.ROUND_ENDED,
            payout=float(self.payout),
            balance=float(self.wallet.get_balance()),
        )

    def _abandon_round(self) -> Decimal:
        refund = Decimal("0")
        if self.state == BaccaratState.BETTING and self.bet is not None:
            refund = self.bet.amount
            self._credit(refund, "abandoned")
        self.bet = None
        self.coup = None
        self.payout = Decimal("0")
        self._auto_deal = None
        self._deadline = None
        return refund
