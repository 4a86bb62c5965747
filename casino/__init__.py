"""Casino game engines - UI-agnostic wagering mini-games."""

from casino.cards import Card, Deck, Rank, Suit, new_shuffled_deck
from casino.hand import Hand
from casino.wallet import InMemoryWallet, Wallet

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "new_shuffled_deck",
    "Hand",
    "InMemoryWallet",
    "Wallet",
]
