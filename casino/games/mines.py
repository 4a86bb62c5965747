"""Mines: reveal safe tiles on a 5x5 board for a growing multiplier."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from random import Random

from casino.config import MinesConfig, config
from casino.games.base import ActionResult, GameEngine, Reason, synchronized
from casino.games.events import EventType
from casino.payouts.mines import BOARD_SIZE, multiplier, next_multiplier, place_mines
from casino.wallet import Wallet, to_cents

logger = logging.getLogger(__name__)


class MinesState(Enum):
    """
    Mines phases.

    Flow: IDLE → PLAYING → GAME_OVER | CASHED_OUT
    """

    IDLE = auto()
    PLAYING = auto()
    GAME_OVER = auto()
    CASHED_OUT = auto()


@dataclass(frozen=True)
class MinesSnapshot:
    state: MinesState
    bet: Decimal | None
    mine_count: int
    revealed: frozenset[int]
    # Mine positions are only exposed once the round is over
    mines: frozenset[int]
    current_multiplier: Decimal
    next_multiplier: Decimal | None
    payout: Decimal
    balance: Decimal
    history: tuple[Decimal, ...]


class MinesGame(GameEngine):
    """Single-player Mines on a 25 tile board."""

    STATE = MinesState
    INITIAL = "idle"
    TRANSITIONS = [
        {"trigger": "arm_board", "source": ["idle", "game_over", "cashed_out"], "dest": "playing"},
        {"trigger": "detonate", "source": "playing", "dest": "game_over"},
        {"trigger": "bank", "source": "playing", "dest": "cashed_out"},
    ]

    def __init__(
        self,
        wallet: Wallet,
        rng: Random | None = None,
        settings: MinesConfig | None = None,
    ) -> None:
        self.settings = settings or config.mines
        super().__init__(wallet, rng, history_size=self.settings.history_size)
        self.bet: Decimal | None = None
        self.mine_count = self.settings.default_mines
        self.mines: frozenset[int] = frozenset()
        self.revealed: set[int] = set()
        self.payout = Decimal("0")

    @property
    def safe_revealed(self) -> int:
        return len(self.revealed)

    @property
    def stake(self) -> Decimal:
        """The live round's bet."""
        if self.bet is None:
            raise RuntimeError("No mines round in progress")
        return self.bet

    @property
    def current_multiplier(self) -> Decimal:
        return multiplier(self.safe_revealed, self.mine_count, self.settings.house_edge)

    def snapshot(self) -> MinesSnapshot:
        playing = self.state == MinesState.PLAYING
        return MinesSnapshot(
            state=self.state,
            bet=self.bet,
            mine_count=self.mine_count,
            revealed=frozenset(self.revealed),
            mines=frozenset() if playing else self.mines,
            current_multiplier=self.current_multiplier,
            next_multiplier=(
                next_multiplier(self.safe_revealed, self.mine_count, self.settings.house_edge)
                if playing
                else None
            ),
            payout=self.payout,
            balance=self.wallet.get_balance(),
            history=tuple(self.history),
        )

    @synchronized
    def start(self, bet: int | Decimal | None = None, mines: int | None = None) -> ActionResult:
        """
        Stake ``bet`` and arm a fresh board.

        Args:
            bet: Stake amount (defaults to the board's default bet)
            mines: Number of mines, 1 to 24
        """
        if self.state == MinesState.PLAYING:
            return self._invalid_state("start")
        mines = self.settings.default_mines if mines is None else mines
        if isinstance(mines, bool) or not isinstance(mines, int) or not 1 <= mines < BOARD_SIZE:
            return self._reject(Reason.INVALID_INPUT, f"Mines must be between 1 and {BOARD_SIZE - 1}")
        stake = self._validate_amount(self.settings.default_bet if bet is None else bet)
        if stake is None:
            return self._invalid_bet()

        rejection = self._debit(stake, "mines")
        if rejection is not None:
            return rejection

        self.bet = stake
        self.mine_count = mines
        self.mines = place_mines(self.rng, mines)
        self.revealed = set()
        self.payout = Decimal("0")
        self.arm_board()
        self.events.emit_new(EventType.ROUND_STARTED, bet=float(stake), mines=mines)
        return self._ok()

    @synchronized
    def reveal(self, index: int) -> ActionResult:
        """Uncover tile ``index`` (0-24, row-major)."""
        if self.state != MinesState.PLAYING:
            return self._invalid_state("reveal a tile")
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < BOARD_SIZE:
            return self._reject(Reason.INVALID_INPUT, f"Tile must be between 0 and {BOARD_SIZE - 1}")
        if index in self.revealed:
            return self._reject(Reason.INVALID_INPUT, "Tile already revealed", tile=index)

        if index in self.mines:
            self.detonate()
            self.events.emit_new(EventType.MINE_HIT, tile=index)
            self._finish(Decimal("0"))
            return self._ok("Boom")

        self.revealed.add(index)
        self.events.emit_new(
            EventType.TILE_REVEALED,
            tile=index,
            multiplier=float(self.current_multiplier),
        )
        if self.safe_revealed == BOARD_SIZE - self.mine_count:
            return self._cash_out()
        return self._ok()

    @synchronized
    def cash_out(self) -> ActionResult:
        """Collect stake x current multiplier. Needs at least one safe tile."""
        if self.state != MinesState.PLAYING:
            return self._invalid_state("cash out")
        if not self.revealed:
            return self._reject(Reason.INVALID_STATE, "Reveal at least one tile before cashing out")
        return self._cash_out()

    def _cash_out(self) -> ActionResult:
        current = self.current_multiplier
        payout = to_cents(self.stake * current)
        self.bank()
        self._credit(payout, f"mines cash out at {current:.2f}x")
        self.events.emit_new(EventType.CASHED_OUT, multiplier=float(current), payout=float(payout))
        self._finish(payout)
        return self._ok()

    def _finish(self, payout: Decimal) -> None:
        self.payout = payout
        self.history.append(payout)
        self.events.emit_new(EventType.BET_RESOLVED, amount=float(self.stake), returned=float(payout))
        self.events.emit_new(
            EventType.ROUND_ENDED,
            safe_revealed=self.safe_revealed,
            payout=float(payout),
            balance=float(self.wallet.get_balance()),
        )
        logger.debug("Mines round over: %s safe tiles, paid %s", self.safe_revealed, payout)

    def _abandon_round(self) -> Decimal:
        refund = Decimal("0")
        if self.state == MinesState.PLAYING:
            # An untouched board gives nothing away; after a reveal it is a loss.
            if self.revealed:
                self._forfeit(self.stake, "mines")
                self.history.append(Decimal("0"))
            else:
                refund = self.stake
                self._credit(refund, "mines abandoned")
        self.bet = None
        self.mines = frozenset()
        self.revealed = set()
        self.payout = Decimal("0")
        return refund
