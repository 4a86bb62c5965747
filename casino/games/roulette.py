"""Roulette table: stacked bets resolved against a single spin."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from random import Random

from casino.config import RouletteConfig, config
from casino.errors import InvalidBet
from casino.games.base import ActionResult, GameEngine, Reason, synchronized
from casino.games.events import EventType
from casino.payouts.roulette import (
    BetKind,
    Color,
    RouletteBet,
    bet_return,
    number_color,
    parse_selection,
    settle,
    spin_number,
)
from casino.wallet import Wallet

logger = logging.getLogger(__name__)


class RouletteState(Enum):
    """
    Roulette phases.

    Flow: IDLE → SPINNING → RESULT
    """

    IDLE = auto()
    SPINNING = auto()
    RESULT = auto()


@dataclass(frozen=True)
class RouletteSnapshot:
    state: RouletteState
    bets: tuple[RouletteBet, ...]
    total_bet: Decimal
    # None until the wheel stops
    number: int | None
    color: Color | None
    payout: Decimal
    balance: Decimal
    history: tuple[int, ...]


class RouletteGame(GameEngine):
    """
    Single-zero roulette.

    Chips are taken when placed. The winning number is drawn and every bet
    is settled the moment the wheel is spun; the number is shown once the
    spin animation time has passed.
    """

    STATE = RouletteState
    INITIAL = "idle"
    TRANSITIONS = [
        {"trigger": "release_ball", "source": "idle", "dest": "spinning"},
        {"trigger": "ball_lands", "source": "spinning", "dest": "result"},
        {"trigger": "clear_table", "source": "result", "dest": "idle"},
    ]

    def __init__(
        self,
        wallet: Wallet,
        rng: Random | None = None,
        settings: RouletteConfig | None = None,
    ) -> None:
        self.settings = settings or config.roulette
        super().__init__(wallet, rng, history_size=self.settings.history_size)
        self.bets: list[RouletteBet] = []
        self.last_bets: list[RouletteBet] = []
        self.number: int | None = None
        self.payout = Decimal("0")

    @property
    def total_bet(self) -> Decimal:
        return sum((bet.amount for bet in self.bets), Decimal("0"))

    def snapshot(self) -> RouletteSnapshot:
        shown = self.number if self.state == RouletteState.RESULT else None
        return RouletteSnapshot(
            state=self.state,
            bets=tuple(self.bets),
            total_bet=self.total_bet,
            number=shown,
            color=number_color(shown) if shown is not None else None,
            payout=self.payout if shown is not None else Decimal("0"),
            balance=self.wallet.get_balance(),
            history=tuple(self.history),
        )

    @synchronized
    def place_bet(
        self,
        kind: BetKind | str,
        selection: int | str | Color,
        amount: int | Decimal,
    ) -> ActionResult:
        """
        Put a chip on a number, a color or a parity.

        Chips on the same selection stack into one bet. Placing a chip after
        a result clears the finished round first.
        """
        if self.state == RouletteState.SPINNING:
            return self._invalid_state("place a bet")
        try:
            kind, value = parse_selection(kind, selection)
        except InvalidBet as exc:
            return self._invalid_bet(str(exc))
        chip = self._validate_amount(amount)
        if chip is None:
            return self._invalid_bet()

        rejection = self._debit(chip, f"roulette {kind.value}")
        if rejection is not None:
            return rejection

        if self.state == RouletteState.RESULT:
            self._clear_result()

        for i, bet in enumerate(self.bets):
            if bet.kind == kind and bet.selection == value:
                self.bets[i] = RouletteBet(kind, value, bet.amount + chip)
                break
        else:
            self.bets.append(RouletteBet(kind, value, chip))
        return self._ok()

    @synchronized
    def clear_bets(self) -> ActionResult:
        """Refund every chip on the table."""
        if self.state != RouletteState.IDLE or not self.bets:
            return self._invalid_state("clear bets")
        refund = self.total_bet
        self._credit(refund, "roulette clear")
        self.bets = []
        self.events.emit_new(EventType.BET_CLEARED, amount=float(refund))
        return self._ok()

    @synchronized
    def rebet(self) -> ActionResult:
        """Place the previous round's bets again."""
        if self.state != RouletteState.RESULT or not self.last_bets:
            return self._invalid_state("rebet")
        total = sum((bet.amount for bet in self.last_bets), Decimal("0"))
        rejection = self._debit(total, "roulette rebet")
        if rejection is not None:
            return rejection
        bets = list(self.last_bets)
        self._clear_result()
        self.bets = bets
        return self._ok()

    @synchronized
    def spin(self) -> ActionResult:
        """Spin the wheel: the winning number and all payouts are fixed now."""
        if self.state != RouletteState.IDLE:
            return self._invalid_state("spin")
        if not self.bets:
            return self._reject(Reason.INVALID_BET, "Place a bet first")

        self.number = spin_number(self.rng)
        self.payout = settle(self.bets, self.number)
        self._credit(self.payout, f"roulette {self.number}")
        self.release_ball()
        self.events.emit_new(EventType.ROUND_STARTED, total_bet=float(self.total_bet))
        logger.debug("Roulette spin %s pays %s", self.number, self.payout)
        self.scheduler.schedule(self.settings.spin_seconds, self._on_ball_landed, name="roulette-reveal")
        return self._ok()

    def _on_ball_landed(self) -> None:
        if self.state != RouletteState.SPINNING or self.number is None:
            return
        self.ball_lands()
        self.history.append(self.number)
        for bet in self.bets:
            self.events.emit_new(
                EventType.BET_RESOLVED,
                kind=bet.kind.value,
                amount=float(bet.amount),
                returned=float(bet_return(bet, self.number)),
            )
        self.events.emit_new(
            EventType.RESULT_REVEALED,
            number=self.number,
            color=number_color(self.number).value,
        )
        self.events.emit_new(
            EventType.ROUND_ENDED,
            payout=float(self.payout),
            balance=float(self.wallet.get_balance()),
        )
        self.last_bets = list(self.bets)

    def _clear_result(self) -> None:
        self.bets = []
        self.number = None
        self.payout = Decimal("0")
        self.clear_table()

    def _abandon_round(self) -> Decimal:
        refund = Decimal("0")
        if self.state == RouletteState.IDLE and self.bets:
            refund = self.total_bet
            self._credit(refund, "abandoned")
        self.bets = []
        self.last_bets = []
        self.number = None
        self.payout = Decimal("0")
        return refund
