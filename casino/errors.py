"""Error taxonomy shared by every game."""

from decimal import Decimal


class CasinoError(Exception):
    """Base class for casino engine errors."""


class InsufficientFunds(CasinoError):
    """Raised when a stake exceeds the available balance."""

    def __init__(self, required: Decimal, available: Decimal) -> None:
        self.required = required
        self.available = available
        super().__init__(f"Insufficient funds: required {required}, available {available}")


class InvalidBet(CasinoError, ValueError):
    """A bet or game input is malformed."""


class EmptyDeck(CasinoError, IndexError):
    """Raised when drawing from a deck with no cards left."""
