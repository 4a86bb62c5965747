"""Themed 5x3 cluster-pay slot machine."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from random import Random

from casino.config import SlotsConfig, config
from casino.games.base import ActionResult, GameEngine, Reason, synchronized
from casino.games.events import EventType
from casino.payouts.slots import THEMES, Grid, SlotTheme, SymbolWin, evaluate_grid, spin_grid
from casino.wallet import Wallet, to_cents

logger = logging.getLogger(__name__)


class SlotsState(Enum):
    """
    Slot machine phases.

    Flow: IDLE → SPINNING → SETTLED
    """

    IDLE = auto()
    SPINNING = auto()
    SETTLED = auto()


@dataclass(frozen=True)
class SlotsSnapshot:
    state: SlotsState
    theme: SlotTheme
    bet: Decimal
    # The new grid is shown once the reels stop
    grid: Grid | None
    wins: tuple[SymbolWin, ...]
    payout: Decimal
    balance: Decimal
    history: tuple[Decimal, ...]


class SlotsGame(GameEngine):
    """
    Slot machine with whole-grid cluster pays.

    The grid and its payout are fixed when the spin starts; the reels stop
    after the spin duration.
    """

    STATE = SlotsState
    INITIAL = "idle"
    TRANSITIONS = [
        {"trigger": "pull_lever", "source": ["idle", "settled"], "dest": "spinning"},
        {"trigger": "reels_stop", "source": "spinning", "dest": "settled"},
    ]

    def __init__(
        self,
        wallet: Wallet,
        rng: Random | None = None,
        settings: SlotsConfig | None = None,
    ) -> None:
        self.settings = settings or config.slots
        super().__init__(wallet, rng, history_size=self.settings.history_size)
        self.theme = THEMES[self.settings.default_theme]
        self.bet = Decimal("0")
        self.grid: Grid | None = None
        self.wins: tuple[SymbolWin, ...] = ()
        self.payout = Decimal("0")

    def snapshot(self) -> SlotsSnapshot:
        settled = self.state == SlotsState.SETTLED
        return SlotsSnapshot(
            state=self.state,
            theme=self.theme,
            bet=self.bet,
            grid=self.grid if settled else None,
            wins=self.wins if settled else (),
            payout=self.payout if settled else Decimal("0"),
            balance=self.wallet.get_balance(),
            history=tuple(self.history),
        )

    @synchronized
    def select_theme(self, theme_id: str) -> ActionResult:
        """Switch machines between spins."""
        if self.state == SlotsState.SPINNING:
            return self._invalid_state("change theme")
        theme = THEMES.get(theme_id)
        if theme is None:
            return self._reject(Reason.INVALID_INPUT, f"Unknown theme: {theme_id}")
        self.theme = theme
        return self._ok()

    @synchronized
    def spin(self, bet: int | Decimal | None = None) -> ActionResult:
        """Take the stake, fill the grid and settle it."""
        if self.state == SlotsState.SPINNING:
            return self._invalid_state("spin")
        stake = self._validate_amount(self.settings.default_bet if bet is None else bet)
        if stake is None:
            return self._invalid_bet()
        rejection = self._debit(stake, f"slots {self.theme.id}")
        if rejection is not None:
            return rejection

        self.bet = stake
        self.grid = spin_grid(self.theme, self.rng, self.settings.reels, self.settings.rows)
        result = evaluate_grid(self.grid, self.theme, stake)
        self.wins = result.wins
        self.payout = to_cents(result.total)
        self._credit(self.payout, f"slots {self.theme.id}")
        self.pull_lever()
        self.events.emit_new(EventType.ROUND_STARTED, bet=float(stake), theme=self.theme.id)
        logger.debug("Slots spin on %s pays %s", self.theme.id, self.payout)
        self.scheduler.schedule(self.settings.spin_seconds, self._on_reels_stopped, name="slots-reveal")
        return self._ok()

    def _on_reels_stopped(self) -> None:
        if self.state != SlotsState.SPINNING:
            return
        self.reels_stop()
        self.history.append(self.payout)
        self.events.emit_new(
            EventType.RESULT_REVEALED,
            grid=[list(reel) for reel in self.grid or ()],
            wins=[(w.symbol, w.count) for w in self.wins],
        )
        if self.payout > 0:
            self.events.emit_new(EventType.PLAYER_WINS, amount=float(self.payout))
        else:
            self.events.emit_new(EventType.PLAYER_LOSES, amount=float(self.bet))
        self.events.emit_new(
            EventType.ROUND_ENDED,
            payout=float(self.payout),
            balance=float(self.wallet.get_balance()),
        )

    def _abandon_round(self) -> Decimal:
        # The spin is settled the moment it starts; nothing to give back
        self.bet = Decimal("0")
        self.grid = None
        self.wins = ()
        self.payout = Decimal("0")
        return Decimal("0")
