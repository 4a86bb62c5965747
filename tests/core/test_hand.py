"""Tests for blackjack hand evaluation."""

from hypothesis import given

from casino.cards import Card, Rank, Suit, parse_cards
from casino.hand import Hand, evaluate_hands

from conftest import hand_strategy


def make_hand(text: str) -> Hand:
    return Hand(parse_cards(text))


class TestHand:
    """Tests for the Hand class."""

    def test_empty_hand(self, empty_hand):
        """Test empty hand properties."""
        assert len(empty_hand) == 0
        assert empty_hand.value == 0
        assert not empty_hand.is_soft
        assert not empty_hand.is_blackjack
        assert not empty_hand.is_busted

    def test_add_card(self, empty_hand):
        """Test adding cards to hand."""
        empty_hand.add_card(Card(Rank.TEN, Suit.SPADES))
        assert len(empty_hand) == 1
        assert empty_hand.value == 10

    def test_hard_hand_value(self):
        """Test hard hand value calculation."""
        hand = make_hand("10S 6H")
        assert hand.value == 16
        assert not hand.is_soft

    def test_soft_hand_value(self):
        """Test soft hand value calculation."""
        hand = make_hand("AS 6H")
        assert hand.value == 17
        assert hand.is_soft

    def test_blackjack(self, blackjack_hand):
        """Test blackjack detection."""
        assert blackjack_hand.is_blackjack
        assert blackjack_hand.value == 21

    def test_not_blackjack_three_cards(self):
        """Test that 21 with 3+ cards is not blackjack."""
        hand = make_hand("7S 7H 7C")
        assert hand.value == 21
        assert not hand.is_blackjack

    def test_bust(self):
        """Test bust detection."""
        hand = make_hand("10S 6H KC")
        assert hand.is_busted
        assert hand.value == 26

    def test_two_aces_and_nine(self):
        """A, A, 9 is 21: one ace stays at eleven."""
        hand = make_hand("AS AH 9C")
        assert hand.value == 21
        assert hand.is_soft

    def test_three_aces_and_nine(self):
        """A, A, A, 9 is 12: aces drop to one, one at a time."""
        hand = make_hand("AS AH AC 9D")
        assert hand.value == 12
        assert not hand.is_soft

    def test_soft_to_hard_transition(self):
        """Test ace switching from 11 to 1."""
        hand = make_hand("AS")
        assert hand.value == 11
        hand.add_card(Card(Rank.NINE, Suit.HEARTS))
        assert hand.value == 20
        hand.add_card(Card(Rank.FIVE, Suit.CLUBS))
        assert hand.value == 15
        assert not hand.is_soft

    def test_clear(self):
        """Test clearing a hand."""
        hand = make_hand("AS KH")
        hand.clear()
        assert len(hand) == 0

    def test_str(self, blackjack_hand):
        """Test string representation."""
        assert "BLACKJACK" in str(blackjack_hand)
        assert "BUST" in str(make_hand("10S 6H KC"))
        assert "soft 17" in str(make_hand("AS 6H"))

    @given(hand_strategy())
    def test_value_in_range(self, hand):
        """A hand never counts more than 21 while it still has an eleven ace."""
        hard = sum(1 if c.is_ace else c.blackjack_value for c in hand)
        assert hand.value in (hard, hard + 10)
        if hand.is_soft:
            assert hand.value <= 21


class TestEvaluateHands:
    """Tests for comparing player and dealer hands."""

    def test_player_higher_wins(self):
        assert evaluate_hands(make_hand("10S 9H"), make_hand("10C 8D")) == 1

    def test_dealer_higher_wins(self):
        assert evaluate_hands(make_hand("10S 7H"), make_hand("10C 8D")) == -1

    def test_push(self):
        assert evaluate_hands(make_hand("10S 8H"), make_hand("9C 9D")) == 0

    def test_player_bust_loses_even_if_dealer_busts(self):
        """Test that the player's bust settles first."""
        assert evaluate_hands(make_hand("10S 6H KC"), make_hand("10C 6D QH")) == -1

    def test_dealer_bust_player_wins(self):
        assert evaluate_hands(make_hand("10S 2H"), make_hand("10C 6D QH")) == 1
