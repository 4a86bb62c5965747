"""Tests for baccarat scoring and drawing rules."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from casino.cards import parse_cards
from casino.evaluators.baccarat import (
    Outcome,
    banker_draws,
    is_natural,
    play_coup,
    player_draws,
    score,
)

from conftest import card_strategy


def drawer(text: str):
    """A draw callable that hands out the given cards in order."""
    cards = iter(parse_cards(text))
    return lambda: next(cards)


class TestScore:
    """Tests for hand scoring."""

    def test_score_mod_ten(self):
        assert score(parse_cards("7S 8H")) == 5
        assert score(parse_cards("KS QH")) == 0
        assert score(parse_cards("AS 9H")) == 0
        assert score(parse_cards("AS 2H 3D")) == 6

    def test_natural(self):
        assert is_natural(parse_cards("5S 3H"))
        assert is_natural(parse_cards("KS 9H"))
        assert not is_natural(parse_cards("5S 2H"))
        assert not is_natural(parse_cards("4S 2H 2D"))


class TestDrawingRules:
    """Tests for the third-card tables."""

    @pytest.mark.parametrize("player_score,draws", [(0, True), (5, True), (6, False), (7, False)])
    def test_player(self, player_score, draws):
        assert player_draws(player_score) == draws

    def test_banker_when_player_stood(self):
        """Banker acts like the player when the player stands."""
        assert banker_draws(5, None)
        assert not banker_draws(6, None)

    @pytest.mark.parametrize(
        "banker_score,player_third,draws",
        [
            (2, 8, True),
            (3, 8, False),
            (3, 9, True),
            (4, 1, False),
            (4, 2, True),
            (4, 7, True),
            (4, 8, False),
            (5, 3, False),
            (5, 4, True),
            (5, 7, True),
            (6, 5, False),
            (6, 6, True),
            (6, 7, True),
            (7, 6, False),
        ],
    )
    def test_banker_after_player_drew(self, banker_score, player_third, draws):
        assert banker_draws(banker_score, player_third) == draws


class TestPlayCoup:
    """Tests for full coups."""

    def test_natural_stops_drawing(self):
        """Player 5+3 against Banker 2+2: natural eight, no draws."""
        coup = play_coup(parse_cards("5S 3H"), parse_cards("2C 2D"), drawer(""))
        assert coup.natural
        assert coup.player_score == 8
        assert coup.banker_score == 4
        assert len(coup.player) == 2
        assert len(coup.banker) == 2
        assert coup.outcome == Outcome.PLAYER

    def test_both_draw(self):
        """Player 4 draws a 5, Banker 3 draws because the third card is not an 8."""
        coup = play_coup(parse_cards("2S 2H"), parse_cards("KC 3D"), drawer("5C 4H"))
        assert [c.baccarat_value for c in coup.player] == [2, 2, 5]
        assert len(coup.banker) == 3
        assert coup.player_score == 9
        assert coup.banker_score == 7
        assert coup.outcome == Outcome.PLAYER

    def test_banker_stands_on_player_eight(self):
        coup = play_coup(parse_cards("2S 2H"), parse_cards("KC 3D"), drawer("8C"))
        assert len(coup.banker) == 2
        assert coup.player_score == 2
        assert coup.outcome == Outcome.BANKER

    def test_tie(self):
        coup = play_coup(parse_cards("3S 4H"), parse_cards("2C 5D"), drawer(""))
        assert coup.outcome == Outcome.TIE
        assert coup.winning_score == 7

    def test_requires_two_cards_each(self):
        with pytest.raises(ValueError):
            play_coup(parse_cards("3S"), parse_cards("2C 5D"), drawer(""))

    @given(
        st.lists(card_strategy(), min_size=4, max_size=4),
        st.lists(card_strategy(), min_size=2, max_size=2),
    )
    def test_drawing_terminates(self, initial, extras):
        """Each side ends with two or three cards and at most two cards are drawn."""
        supply = iter(extras)
        coup = play_coup(initial[:2], initial[2:], lambda: next(supply))
        assert 2 <= len(coup.player) <= 3
        assert 2 <= len(coup.banker) <= 3
        assert len(coup.player) + len(coup.banker) <= 6
        assert coup.player_score == score(coup.player)
        assert coup.banker_score == score(coup.banker)
