"""Crash: a rising multiplier that ends at a hidden crash point."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from random import Random

from casino.config import CrashConfig, config
from casino.games.base import ActionResult, GameEngine, synchronized
from casino.games.events import EventType
from casino.payouts.crash import MIN_MULTIPLIER, draw_crash_point, running_multiplier
from casino.wallet import Wallet, to_cents

logger = logging.getLogger(__name__)


class CrashState(Enum):
    """
    Crash phases.

    Flow: IDLE → COUNTDOWN → RUNNING → CRASHED → COUNTDOWN → ...
    """

    IDLE = auto()
    COUNTDOWN = auto()
    RUNNING = auto()
    CRASHED = auto()


@dataclass(frozen=True)
class CrashSnapshot:
    state: CrashState
    countdown: int
    multiplier: Decimal
    # Only known to the player once the round has crashed
    crash_point: Decimal | None
    bet: Decimal | None
    cashed_out_at: Decimal | None
    payout: Decimal
    balance: Decimal
    history: tuple[Decimal, ...]


class CrashGame(GameEngine):
    """
    Continuous crash rounds.

    ``start`` begins the first countdown; after that every crash is followed
    by a cooldown and a new countdown. A bet can be placed while idle or
    during the countdown and cashed out once while the multiplier runs.
    """

    STATE = CrashState
    INITIAL = "idle"
    TRANSITIONS = [
        {"trigger": "open_countdown", "source": ["idle", "crashed"], "dest": "countdown"},
        {"trigger": "take_off", "source": "countdown", "dest": "running"},
        {"trigger": "blow_up", "source": "running", "dest": "crashed"},
    ]

    def __init__(
        self,
        wallet: Wallet,
        rng: Random | None = None,
        settings: CrashConfig | None = None,
    ) -> None:
        self.settings = settings or config.crash
        super().__init__(wallet, rng, history_size=self.settings.history_size)
        self.countdown = self.settings.countdown_seconds
        self.multiplier = MIN_MULTIPLIER
        self.crash_point = MIN_MULTIPLIER
        self.bet: Decimal | None = None
        self.cashed_out_at: Decimal | None = None
        self.payout = Decimal("0")
        self._started_at = 0.0

    def snapshot(self) -> CrashSnapshot:
        return CrashSnapshot(
            state=self.state,
            countdown=self.countdown,
            multiplier=self.multiplier,
            crash_point=self.crash_point if self.state == CrashState.CRASHED else None,
            bet=self.bet,
            cashed_out_at=self.cashed_out_at,
            payout=self.payout,
            balance=self.wallet.get_balance(),
            history=tuple(self.history),
        )

    @synchronized
    def start(self) -> ActionResult:
        """Begin the first countdown."""
        if self.state != CrashState.IDLE:
            return self._invalid_state("start")
        self._begin_cycle()
        return self._ok()

    @synchronized
    def place_bet(self, amount: int | Decimal | None = None) -> ActionResult:
        """Stake on the next round (default bet if ``amount`` is None). One bet per round."""
        if self.state not in (CrashState.IDLE, CrashState.COUNTDOWN):
            return self._invalid_state("place a bet")
        if self.bet is not None:
            return self._invalid_bet("A bet is already placed for this round")
        stake = self._validate_amount(self.settings.default_bet if amount is None else amount)
        if stake is None:
            return self._invalid_bet()
        rejection = self._debit(stake, "crash")
        if rejection is not None:
            return rejection
        self.bet = stake
        return self._ok()

    @synchronized
    def cancel_bet(self) -> ActionResult:
        """Take the stake back before the round starts."""
        if self.state not in (CrashState.IDLE, CrashState.COUNTDOWN):
            return self._invalid_state("cancel the bet")
        if self.bet is None:
            return self._invalid_bet("No bet to cancel")
        refund = self.bet
        self._credit(refund, "crash cancel")
        self.bet = None
        self.events.emit_new(EventType.BET_CANCELLED, amount=float(refund))
        return self._ok()

    @synchronized
    def cash_out(self) -> ActionResult:
        """
        Lock in the current multiplier.

        The multiplier is computed at the current clock time; if it has
        already reached the crash point the round crashes instead and the
        cash-out is rejected.
        """
        if self.state != CrashState.RUNNING:
            return self._invalid_state("cash out")
        if self.bet is None or self.cashed_out_at is not None:
            return self._invalid_bet("No active bet to cash out")

        current = running_multiplier(self.now - self._started_at, self.settings.growth_rate)
        if current >= self.crash_point:
            self._crash()
            return self._invalid_state("cash out")

        self.multiplier = current
        self.cashed_out_at = current
        self.payout = to_cents(self.bet * current)
        self._credit(self.payout, f"crash cash out at {current}x")
        self.events.emit_new(
            EventType.CASHED_OUT,
            multiplier=float(current),
            payout=float(self.payout),
        )
        return self._ok()

    # Timer callbacks

    def _begin_cycle(self) -> None:
        if self.state == CrashState.CRASHED:
            # The finished round's bet is settled; the next one starts clean
            self.bet = None
        self.cashed_out_at = None
        self.payout = Decimal("0")
        self.multiplier = MIN_MULTIPLIER
        self.crash_point = draw_crash_point(self.rng)
        self.countdown = self.settings.countdown_seconds
        self.open_countdown()
        self.events.emit_new(EventType.COUNTDOWN_TICK, seconds_left=self.countdown)
        self.scheduler.schedule(1.0, self._on_countdown_tick, name="crash-countdown")

    def _on_countdown_tick(self) -> None:
        if self.state != CrashState.COUNTDOWN:
            return
        self.countdown -= 1
        self.events.emit_new(EventType.COUNTDOWN_TICK, seconds_left=self.countdown)
        if self.countdown > 0:
            self.scheduler.schedule(1.0, self._on_countdown_tick, name="crash-countdown")
            return
        self._started_at = self.now
        self.take_off()
        self.events.emit_new(
            EventType.ROUND_STARTED,
            bet=float(self.bet) if self.bet is not None else None,
        )
        self.scheduler.schedule(self.settings.frame_interval, self._on_frame, name="crash-frame")

    def _on_frame(self) -> None:
        if self.state != CrashState.RUNNING:
            return
        current = running_multiplier(self.now - self._started_at, self.settings.growth_rate)
        if current >= self.crash_point:
            self._crash()
            return
        self.multiplier = current
        self.events.emit_new(EventType.MULTIPLIER_UPDATED, multiplier=float(current))
        self.scheduler.schedule(self.settings.frame_interval, self._on_frame, name="crash-frame")

    def _crash(self) -> None:
        self.multiplier = self.crash_point
        self.blow_up()
        self.history.append(self.crash_point)
        self.events.emit_new(EventType.CRASHED, crash_point=float(self.crash_point))
        if self.bet is not None:
            self.events.emit_new(
                EventType.BET_RESOLVED,
                amount=float(self.bet),
                returned=float(self.payout),
            )
            if self.cashed_out_at is None:
                self.events.emit_new(EventType.PLAYER_LOSES, amount=float(self.bet))
        self.events.emit_new(
            EventType.ROUND_ENDED,
            crash_point=float(self.crash_point),
            balance=float(self.wallet.get_balance()),
        )
        logger.debug("Crash round ended at %sx", self.crash_point)
        self.scheduler.schedule(self.settings.cooldown_seconds, self._begin_cycle, name="crash-cooldown")

    def _abandon_round(self) -> Decimal:
        refund = Decimal("0")
        if self.bet is not None and self.cashed_out_at is None:
            if self.state in (CrashState.IDLE, CrashState.COUNTDOWN):
                refund = self.bet
                self._credit(refund, "crash abandoned")
            elif self.state == CrashState.RUNNING:
                # The round is already in the air.
                self._forfeit(self.bet, "crash")
        self.bet = None
        self.cashed_out_at = None
        self.payout = Decimal("0")
        self.multiplier = MIN_MULTIPLIER
        self.countdown = self.settings.countdown_seconds
        return refund
