"""Tests for poker hand classification and the video poker paytable."""

import pytest
from hypothesis import given

from casino.cards import parse_cards
from casino.evaluators.poker import (
    FLUSH,
    FULL_HOUSE,
    JACKS_OR_BETTER,
    ROYAL_FLUSH,
    STRAIGHT,
    STRAIGHT_FLUSH,
    TWO_PAIR,
    HandCategory,
    evaluate_best,
    evaluate_five,
    score_video_poker,
)

from conftest import distinct_cards_strategy


def rank_of(text: str):
    return evaluate_five(parse_cards(text))


class TestEvaluateFive:
    """Tests for five-card classification."""

    @pytest.mark.parametrize(
        "text,category",
        [
            ("AS KS QS JS 10S", HandCategory.STRAIGHT_FLUSH),
            ("9H 9S 9D 9C 2H", HandCategory.FOUR_OF_A_KIND),
            ("3H 3S 3D KC KH", HandCategory.FULL_HOUSE),
            ("2H 7H 9H JH KH", HandCategory.FLUSH),
            ("5C 6D 7H 8S 9C", HandCategory.STRAIGHT),
            ("QH QS QD 4C 2H", HandCategory.THREE_OF_A_KIND),
            ("JH JS 4D 4C 2H", HandCategory.TWO_PAIR),
            ("10H 10S 4D 6C 2H", HandCategory.ONE_PAIR),
            ("AH 10S 4D 6C 2H", HandCategory.HIGH_CARD),
        ],
    )
    def test_categories(self, text, category):
        assert rank_of(text).category == category

    def test_wheel_is_five_high_straight(self):
        """A-2-3-4-5 is a straight whose high card is the five."""
        wheel = rank_of("AS 2D 3H 4C 5S")
        assert wheel.category == HandCategory.STRAIGHT
        assert wheel.tiebreak == (5,)
        assert wheel < rank_of("2S 3D 4H 5C 6S")

    def test_wheel_straight_flush(self):
        rank = rank_of("AH 2H 3H 4H 5H")
        assert rank.category == HandCategory.STRAIGHT_FLUSH
        assert rank.tiebreak == (5,)

    def test_no_wraparound_straight(self):
        assert rank_of("QS KD AH 2C 3S").category == HandCategory.HIGH_CARD

    def test_category_precedence(self):
        """Higher categories always beat lower ones."""
        assert rank_of("3H 3S 3D 2C 2H") > rank_of("AH KH QH JH 9H")
        assert rank_of("2H 4H 6H 8H 10H") > rank_of("10C JD QH KS AS")

    def test_tiebreak_within_category(self):
        assert rank_of("KH KS 4D 6C 2H") > rank_of("QH QS AD 6C 2H")
        assert rank_of("KH KS 4D 7C 2H") > rank_of("KD KC 4S 6C 2D")
        assert rank_of("KH KS 4D 7C 2H") == rank_of("KD KC 4S 7D 2D")

    def test_value_orders_like_rank(self):
        hands = ["AH 10S 4D 6C 2H", "10H 10S 4D 6C 2H", "JH JS 4D 4C 2H", "AS KS QS JS 10S"]
        values = [rank_of(h).value for h in hands]
        assert values == sorted(values)

    def test_label(self):
        assert rank_of("10H 10S 4D 6C 2H").label == "Pair"
        assert rank_of("AS KS QS JS 10S").label == "Straight Flush"

    def test_wrong_card_count(self):
        with pytest.raises(ValueError):
            evaluate_five(parse_cards("AS KS QS JS"))


class TestEvaluateBest:
    """Tests for best-five-of-seven."""

    def test_finds_flush_among_seven(self):
        rank = evaluate_best(parse_cards("2H 9H KS QD 5H 7H JH"))
        assert rank.category == HandCategory.FLUSH
        assert rank.tiebreak == (11, 9, 7, 5, 2)

    def test_board_straight_with_pair_in_hand(self):
        rank = evaluate_best(parse_cards("2C 2D 5H 6S 7D 8C 9H"))
        assert rank.category == HandCategory.STRAIGHT
        assert rank.tiebreak == (9,)

    def test_full_house_from_two_trips(self):
        rank = evaluate_best(parse_cards("4C 4D 4H 9S 9D 9C AH"))
        assert rank.category == HandCategory.FULL_HOUSE
        assert rank.tiebreak == (9, 4)

    @given(distinct_cards_strategy())
    def test_best_is_at_least_any_five(self, cards):
        best = evaluate_best(cards)
        assert best >= evaluate_five(cards[:5])


class TestVideoPokerPaytable:
    """Tests for Jacks or Better scoring."""

    def test_royal_flush_pays_250(self):
        entry = score_video_poker(parse_cards("10H JH QH KH AH"))
        assert entry == ROYAL_FLUSH
        assert entry.multiplier == 250

    def test_straight_flush(self):
        assert score_video_poker(parse_cards("9S 10S JS QS KS")) == STRAIGHT_FLUSH

    def test_pair_of_twos_pays_nothing(self):
        assert score_video_poker(parse_cards("2H 2S 7D 9C KH")) is None

    def test_pair_of_tens_pays_nothing(self):
        assert score_video_poker(parse_cards("10H 10S 7D 9C KH")) is None

    def test_jacks_or_better(self):
        assert score_video_poker(parse_cards("JH JS 7D 9C 2H")) == JACKS_OR_BETTER
        assert score_video_poker(parse_cards("AH AS 7D 9C 2H")) == JACKS_OR_BETTER

    def test_other_rows(self):
        assert score_video_poker(parse_cards("3H 3S 3D KC KH")) == FULL_HOUSE
        assert score_video_poker(parse_cards("2H 7H 9H JH KH")) == FLUSH
        assert score_video_poker(parse_cards("AS 2D 3H 4C 5S")) == STRAIGHT
        assert score_video_poker(parse_cards("2H 2S 7D 7C KH")) == TWO_PAIR
        assert score_video_poker(parse_cards("2H 2S 2D 7C KH")).multiplier == 3
        assert score_video_poker(parse_cards("2H 2S 2D 2C KH")).multiplier == 25

    def test_high_card_pays_nothing(self):
        assert score_video_poker(parse_cards("AH KS 7D 9C 2H")) is None
