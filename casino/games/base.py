"""Shared engine plumbing: locking, wallet access, results and timers."""

import functools
import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from random import Random
from typing import Any, Callable, ClassVar, TypeVar

from transitions import Machine

from casino.errors import InsufficientFunds
from casino.games.events import EventEmitter, EventHandler, EventType
from casino.timers import Scheduler
from casino.wallet import Wallet, to_amount

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class Reason(Enum):
    """Why an action was rejected."""

    INSUFFICIENT_FUNDS = auto()
    INVALID_STATE = auto()
    INVALID_BET = auto()
    INVALID_INPUT = auto()


@dataclass(frozen=True)
class ActionResult:
    """
    Outcome of a public game operation.

    Truthy when the action was accepted, so callers can keep writing
    ``if game.hit(): ...``.
    """

    ok: bool
    snapshot: Any
    reason: Reason | None = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok


def synchronized(method: F) -> F:
    """Run a public operation under the session lock."""

    @functools.wraps(method)
    def wrapper(self: "GameEngine", *args: Any, **kwargs: Any) -> Any:
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class GameEngine(ABC):
    """
    Base class for a single-player game session.

    Subclasses declare ``STATE`` (an Enum whose lower-cased names are the
    machine states), ``TRANSITIONS`` and ``INITIAL`` for the ``transitions``
    state machine. Every public operation and every timer callback runs
    under one re-entrant lock, so events are consumed one at a time.
    """

    STATE: ClassVar[type[Enum]]
    TRANSITIONS: ClassVar[list[dict[str, Any]]]
    INITIAL: ClassVar[str]

    def __init__(
        self,
        wallet: Wallet,
        rng: Random | None = None,
        history_size: int = 10,
    ) -> None:
        """
        Initialize the engine.

        Args:
            wallet: Balance owner (debit/credit collaborator)
            rng: Random number generator for reproducible games
            history_size: Number of past round outcomes kept for display
        """
        self.wallet = wallet
        self.rng = rng or Random()
        self.events = EventEmitter()
        self.scheduler = Scheduler()
        self.history: deque[Any] = deque(maxlen=history_size)
        self._lock = threading.RLock()

        self.machine = Machine(
            model=self,
            states=[s.name.lower() for s in self.STATE],
            transitions=self.TRANSITIONS,
            initial=self.INITIAL,
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_on_phase_changed",
        )

    @property
    def state(self) -> Enum:
        """Get current game state as enum."""
        return self.STATE[self._machine_state.upper()]  # type: ignore[attr-defined]

    @property
    def balance(self) -> Decimal:
        return self.wallet.get_balance()

    @property
    def now(self) -> float:
        """Current time on the session clock."""
        return self.scheduler.now

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    @synchronized
    def advance(self, seconds: float) -> ActionResult:
        """Feed elapsed time to the session, firing due timer events."""
        self.scheduler.advance(seconds)
        return self._ok()

    @synchronized
    def reset(self) -> ActionResult:
        """
        Abandon the session.

        Cancels every pending timer and returns to the initial phase. A stake
        placed before anything was revealed is refunded; a hand already in
        play is forfeited.
        """
        self.scheduler.cancel_all()
        refunded = self._abandon_round()
        self.machine.set_state(self.INITIAL, model=self)
        self.events.emit_new(EventType.SESSION_RESET, refunded=float(refunded))
        return self._ok()

    @abstractmethod
    def snapshot(self) -> Any:
        """Return an immutable view of the session."""

    @abstractmethod
    def _abandon_round(self) -> Decimal:
        """Refund or forfeit the open stake and clear round data; return the refund."""

    # Wallet helpers

    def _validate_amount(self, amount: Any) -> Decimal | None:
        try:
            value = to_amount(amount)
        except (ArithmeticError, ValueError):
            return None
        if not value.is_finite() or value <= 0:
            return None
        return value

    def _debit(self, amount: Decimal, memo: str) -> ActionResult | None:
        """
        Take a stake from the wallet.

        Returns:
            None on success, otherwise the rejection to hand back
        """
        try:
            self.wallet.debit(amount, memo)
        except InsufficientFunds as exc:
            return self._insufficient(exc.required, exc.available, memo)
        self.events.emit_new(EventType.BET_PLACED, amount=float(amount), kind=memo)
        return None

    def _credit(self, amount: Decimal, memo: str) -> None:
        if amount > 0:
            self.wallet.credit(amount, memo)
            logger.debug("%s credited %s (%s)", type(self).__name__, amount, memo)

    def _forfeit(self, amount: Decimal, memo: str) -> None:
        """Settle an abandoned hand as a loss."""
        self.events.emit_new(EventType.BET_RESOLVED, amount=float(amount), returned=0.0)
        logger.info("%s forfeited %s on reset (%s)", type(self).__name__, amount, memo)

    # Result helpers

    def _ok(self, message: str = "") -> ActionResult:
        return ActionResult(True, self.snapshot(), None, message)

    def _reject(self, reason: Reason, message: str, **data: Any) -> ActionResult:
        logger.debug("%s rejected: %s (%s)", type(self).__name__, message, reason.name)
        self.events.emit_new(
            EventType.INVALID_ACTION,
            reason=reason.name,
            message=message,
            state=self.state.name,
            **data,
        )
        return ActionResult(False, self.snapshot(), reason, message)

    def _invalid_state(self, action: str) -> ActionResult:
        return self._reject(Reason.INVALID_STATE, f"Cannot {action} while {self.state.name}")

    def _invalid_bet(self, message: str = "Bet amount must be positive") -> ActionResult:
        return self._reject(Reason.INVALID_BET, message)

    def _insufficient(self, required: Decimal, available: Decimal, memo: str = "") -> ActionResult:
        self.events.emit_new(
            EventType.INSUFFICIENT_FUNDS,
            required=float(required),
            available=float(available),
        )
        logger.debug("%s: insufficient funds for %s", type(self).__name__, memo or "stake")
        return ActionResult(False, self.snapshot(), Reason.INSUFFICIENT_FUNDS, "Insufficient funds")

    def _on_phase_changed(self) -> None:
        self.events.emit_new(EventType.PHASE_CHANGED, state=self.state.name)
