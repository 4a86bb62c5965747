"""Pytest fixtures for casino engine tests."""

import pytest
from decimal import Decimal
from random import Random

from hypothesis import strategies as st

from casino.cards import Card, Deck, Rank, Suit, parse_cards
from casino.hand import Hand
from casino.wallet import InMemoryWallet


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled deck."""
    d = Deck(rng=rng)
    d.shuffle()
    return d


@pytest.fixture
def wallet():
    """A wallet holding the standard starting balance."""
    return InMemoryWallet(Decimal("1000"))


@pytest.fixture
def stacked():
    """Factory for decks that deal the given cards in order, e.g. stacked('AS KH')."""

    def make(text: str, rng: Random | None = None) -> Deck:
        return Deck.stacked(parse_cards(text), rng=rng or Random(7))

    return make


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.KING, Suit.HEARTS))
    return hand


# Hypothesis strategies for property-based testing


@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


@st.composite
def distinct_cards_strategy(draw, min_cards=5, max_cards=7):
    """Generate distinct cards, as dealt from one deck."""
    return draw(
        st.lists(card_strategy(), min_size=min_cards, max_size=max_cards, unique=True)
    )


@st.composite
def hand_strategy(draw, min_cards=2, max_cards=5):
    """Generate a random blackjack hand."""
    cards = draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards))
    hand = Hand()
    for card in cards:
        hand.add_card(card)
    return hand
