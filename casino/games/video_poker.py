"""Jacks or Better video poker."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from random import Random

from casino.cards import Card, Deck
from casino.config import VideoPokerConfig, config
from casino.evaluators.poker import PaytableEntry, score_video_poker
from casino.games.base import ActionResult, GameEngine, Reason, synchronized
from casino.games.events import EventType
from casino.wallet import Wallet

logger = logging.getLogger(__name__)

HAND_SIZE = 5
# Five dealt plus up to five replacements
CARDS_PER_HAND = 10


class VideoPokerState(Enum):
    """
    Video poker phases.

    Flow: BETTING → HOLDING → RESULT
    """

    BETTING = auto()
    HOLDING = auto()
    RESULT = auto()


@dataclass(frozen=True)
class VideoPokerSnapshot:
    state: VideoPokerState
    bet: Decimal
    cards: tuple[Card, ...]
    held: frozenset[int]
    winning_hand: PaytableEntry | None
    payout: Decimal
    balance: Decimal
    history: tuple[str, ...]


class VideoPokerGame(GameEngine):
    """Five-card draw against the Jacks or Better paytable."""

    STATE = VideoPokerState
    INITIAL = "betting"
    TRANSITIONS = [
        {"trigger": "deal_cards", "source": ["betting", "result"], "dest": "holding"},
        {"trigger": "draw_cards", "source": "holding", "dest": "result"},
    ]

    def __init__(
        self,
        wallet: Wallet,
        rng: Random | None = None,
        deck: Deck | None = None,
        settings: VideoPokerConfig | None = None,
    ) -> None:
        self.settings = settings or config.video_poker
        super().__init__(wallet, rng, history_size=self.settings.history_size)
        self.deck = deck or Deck(rng=self.rng)
        if deck is None:
            self.deck.shuffle()
        self.bet = Decimal("0")
        self.cards: list[Card] = []
        self.held: set[int] = set()
        self.winning_hand: PaytableEntry | None = None
        self.payout = Decimal("0")

    def snapshot(self) -> VideoPokerSnapshot:
        return VideoPokerSnapshot(
            state=self.state,
            bet=self.bet,
            cards=tuple(self.cards),
            held=frozenset(self.held),
            winning_hand=self.winning_hand,
            payout=self.payout,
            balance=self.wallet.get_balance(),
            history=tuple(self.history),
        )

    @synchronized
    def deal(self, bet: int | Decimal | None = None) -> ActionResult:
        """Take the stake and deal five cards."""
        if self.state not in (VideoPokerState.BETTING, VideoPokerState.RESULT):
            return self._invalid_state("deal")
        stake = self._validate_amount(self.settings.default_bet if bet is None else bet)
        if stake is None:
            return self._invalid_bet()
        rejection = self._debit(stake, "video poker")
        if rejection is not None:
            return rejection

        if self.deck.ensure(CARDS_PER_HAND):
            self.events.emit_new(EventType.DECK_SHUFFLED)

        self.bet = stake
        self.cards = [self.deck.draw() for _ in range(HAND_SIZE)]
        self.held = set()
        self.winning_hand = None
        self.payout = Decimal("0")
        self.deal_cards()
        for card in self.cards:
            self.events.emit_new(EventType.CARD_DEALT, card=str(card), hand="player")
        self.events.emit_new(EventType.ROUND_STARTED, bet=float(stake))
        return self._ok()

    @synchronized
    def toggle_hold(self, index: int) -> ActionResult:
        """Hold or release the card at ``index`` (0-4)."""
        if self.state != VideoPokerState.HOLDING:
            return self._invalid_state("hold a card")
        if not isinstance(index, int) or not 0 <= index < HAND_SIZE:
            return self._reject(Reason.INVALID_INPUT, f"Card index must be between 0 and {HAND_SIZE - 1}")
        if index in self.held:
            self.held.remove(index)
            self.events.emit_new(EventType.CARD_RELEASED, index=index)
        else:
            self.held.add(index)
            self.events.emit_new(EventType.CARD_HELD, index=index, card=str(self.cards[index]))
        return self._ok()

    @synchronized
    def draw(self) -> ActionResult:
        """Replace every card not held, then score the final hand once."""
        if self.state != VideoPokerState.HOLDING:
            return self._invalid_state("draw")

        self.cards = [
            card if i in self.held else self.deck.draw()
            for i, card in enumerate(self.cards)
        ]
        self.draw_cards()

        entry = score_video_poker(self.cards)
        payout = self.bet * entry.multiplier if entry else Decimal("0")
        self._credit(payout, entry.name if entry else "no win")
        self.winning_hand = entry
        self.payout = payout
        self.history.append(entry.name if entry else "")

        if entry:
            self.events.emit_new(EventType.PLAYER_WINS, amount=float(payout), hand=entry.name)
        else:
            self.events.emit_new(EventType.PLAYER_LOSES, amount=float(self.bet))
        self.events.emit_new(
            EventType.ROUND_ENDED,
            payout=float(payout),
            balance=float(self.wallet.get_balance()),
        )
        logger.debug("Video poker hand %s pays %s", entry.name if entry else "nothing", payout)
        return self._ok()

    def _abandon_round(self) -> Decimal:
        if self.state == VideoPokerState.HOLDING:
            self._forfeit(self.bet, "video poker")
            self.history.append("")
        self.bet = Decimal("0")
        self.cards = []
        self.held = set()
        self.winning_hand = None
        self.payout = Decimal("0")
        return Decimal("0")
