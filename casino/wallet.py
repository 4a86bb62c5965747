"""Wallet collaborator: the only balance shared between games."""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum, auto
from typing import Protocol, runtime_checkable

from casino.config import config
from casino.errors import InsufficientFunds

CENTS = Decimal("0.01")


def to_amount(value: int | float | str | Decimal) -> Decimal:
    """Convert a chip value to a Decimal amount."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@runtime_checkable
class Wallet(Protocol):
    """Balance owner consumed by every game engine."""

    def get_balance(self) -> Decimal:
        """Return the current balance."""
        ...

    def credit(self, amount: Decimal, memo: str = "") -> None:
        """Increase the balance by a positive amount; ``memo`` labels the movement."""
        ...

    def debit(self, amount: Decimal, memo: str = "") -> None:
        """Decrease the balance, raising InsufficientFunds if it cannot cover it."""
        ...


class TransactionKind(Enum):
    """Direction of a wallet movement."""

    DEBIT = auto()
    CREDIT = auto()


@dataclass(frozen=True)
class Transaction:
    """One recorded wallet movement."""

    kind: TransactionKind
    amount: Decimal
    balance_after: Decimal
    memo: str = ""
    timestamp: datetime = field(default_factory=datetime.now)


class InMemoryWallet:
    """
    Thread-safe in-memory wallet with a transaction ledger.

    Stands in for the persisted balance of the surrounding application.
    """

    def __init__(self, balance: Decimal | int | str | None = None) -> None:
        balance = config.starting_balance if balance is None else to_amount(balance)
        if balance < 0:
            raise ValueError("Starting balance cannot be negative")
        self._balance = balance
        self._lock = threading.Lock()
        self._ledger: list[Transaction] = []

    def get_balance(self) -> Decimal:
        with self._lock:
            return self._balance

    def credit(self, amount: Decimal, memo: str = "") -> None:
        amount = to_amount(amount)
        if amount <= 0:
            raise ValueError(f"Credit amount must be positive, got {amount}")
        with self._lock:
            self._balance += amount
            self._ledger.append(
                Transaction(TransactionKind.CREDIT, amount, self._balance, memo)
            )

    def debit(self, amount: Decimal, memo: str = "") -> None:
        amount = to_amount(amount)
        if amount <= 0:
            raise ValueError(f"Debit amount must be positive, got {amount}")
        with self._lock:
            # Validate against the balance as it is right now.
            if amount > self._balance:
                raise InsufficientFunds(required=amount, available=self._balance)
            self._balance -= amount
            self._ledger.append(
                Transaction(TransactionKind.DEBIT, amount, self._balance, memo)
            )

    @property
    def ledger(self) -> list[Transaction]:
        """Return a copy of the transaction ledger."""
        with self._lock:
            return self._ledger.copy()

    def total(self, kind: TransactionKind) -> Decimal:
        """Sum of all movements of one kind."""
        return sum((t.amount for t in self.ledger if t.kind == kind), Decimal("0"))


def to_cents(value: Decimal) -> Decimal:
    """Round a payout to whole cents, half up."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)
