"""Card and Deck classes - immutable card representations."""

from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Iterable, Iterator

from casino.errors import EmptyDeck

# A deck with fewer cards than this is replaced before the next round.
RESHUFFLE_THRESHOLD = 10


class Suit(Enum):
    """Card suits."""

    HEARTS = auto()
    DIAMONDS = auto()
    CLUBS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
        }
        return symbols[self]

    @property
    def is_red(self) -> bool:
        """Hearts and diamonds are red."""
        return self in (Suit.HEARTS, Suit.DIAMONDS)


class Rank(Enum):
    """Card ranks ordered for poker (Ace high)."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self.value <= 10:
            return self.value
        if self == Rank.ACE:
            return 11
        return 10

    @property
    def baccarat_value(self) -> int:
        """Return the baccarat pip value (Ace = 1, tens and faces = 0)."""
        if self == Rank.ACE:
            return 1
        if self.value >= 10:
            return 0
        return self.value

    @property
    def poker_value(self) -> int:
        """Return the poker ordering value (2-14, Ace high)."""
        return self.value

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def blackjack_value(self) -> int:
        return self.rank.blackjack_value

    @property
    def baccarat_value(self) -> int:
        return self.rank.baccarat_value

    @property
    def poker_value(self) -> int:
        return self.rank.poker_value

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh', '10d'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {
            "2": Rank.TWO,
            "3": Rank.THREE,
            "4": Rank.FOUR,
            "5": Rank.FIVE,
            "6": Rank.SIX,
            "7": Rank.SEVEN,
            "8": Rank.EIGHT,
            "9": Rank.NINE,
            "10": Rank.TEN,
            "T": Rank.TEN,
            "J": Rank.JACK,
            "Q": Rank.QUEEN,
            "K": Rank.KING,
            "A": Rank.ACE,
        }

        suit_map = {
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


def parse_cards(text: str) -> list[Card]:
    """Parse a whitespace separated list of cards, e.g. 'AS KH 10D'."""
    return [Card.from_string(token) for token in text.split()]


class Deck:
    """
    A standard 52-card deck, consumed from the top.

    Shuffling uses ``Random.shuffle`` (Fisher-Yates), so every permutation
    is equally likely.
    """

    def __init__(
        self,
        rng: Random | None = None,
        threshold: int = RESHUFFLE_THRESHOLD,
    ) -> None:
        """
        Initialize a new deck.

        Args:
            rng: Random number generator for reproducible shuffles
            threshold: Cards remaining below which ``ensure`` reshuffles
        """
        self._rng = rng or Random()
        self._threshold = threshold
        self._cards: list[Card] = []
        self._stacked = False
        self.reset()

    @classmethod
    def stacked(cls, cards: Iterable[Card], rng: Random | None = None) -> "Deck":
        """
        Build a deck that deals ``cards`` in the given order, first card first.

        Once a stacked deck is exhausted, ``ensure`` falls back to a normal
        shuffled deck.
        """
        deck = cls(rng=rng)
        deck._cards = list(reversed(list(cards)))
        deck._stacked = True
        return deck

    def reset(self) -> None:
        """Reset deck to all 52 cards in order."""
        self._cards = [Card(rank, suit) for suit in Suit for rank in Rank]
        self._stacked = False

    def shuffle(self) -> None:
        """Restore all 52 cards and shuffle them."""
        self.reset()
        self._rng.shuffle(self._cards)

    def draw(self) -> Card:
        """Draw a card from the top of the deck."""
        if not self._cards:
            raise EmptyDeck("Cannot draw from empty deck")
        return self._cards.pop()

    def ensure(self, cards_needed: int = 0) -> bool:
        """
        Reshuffle a fresh deck when too few cards remain for a round.

        Must only be called between rounds. A stacked deck is kept until it
        runs dry.

        Returns:
            True if the deck was replaced
        """
        if self._stacked:
            if self._cards:
                return False
        elif len(self._cards) >= max(cards_needed, self._threshold):
            return False
        self.shuffle()
        return True

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(reversed(self._cards))

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def threshold(self) -> int:
        return self._threshold


def new_shuffled_deck(rng: Random | None = None) -> Deck:
    """Return a freshly shuffled 52-card deck."""
    deck = Deck(rng=rng)
    deck.shuffle()
    return deck
