"""Tests for Jacks or Better video poker."""

from decimal import Decimal
from random import Random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from casino.evaluators.poker import PAYTABLE, ROYAL_FLUSH, TWO_PAIR
from casino.games.base import Reason
from casino.games.events import EventType
from casino.games.video_poker import VideoPokerGame, VideoPokerState
from casino.wallet import InMemoryWallet


@pytest.fixture
def machine(wallet, stacked):
    """Factory for a machine dealing from a stacked deck."""

    def make(cards: str) -> VideoPokerGame:
        return VideoPokerGame(wallet, deck=stacked(cards))

    return make


def hold(game: VideoPokerGame, *indices: int) -> None:
    for i in indices:
        game.toggle_hold(i)


class TestDeal:
    """Tests for dealing a hand."""

    def test_deal(self, machine, wallet):
        game = machine("2H 2S 7D 9C KH")
        result = game.deal(10)
        assert result.snapshot.state == VideoPokerState.HOLDING
        assert len(result.snapshot.cards) == 5
        assert wallet.get_balance() == Decimal("990")

    def test_insufficient_funds(self, stacked):
        wallet = InMemoryWallet(Decimal("5"))
        game = VideoPokerGame(wallet, deck=stacked("2H 2S 7D 9C KH"))
        assert game.deal(10).reason == Reason.INSUFFICIENT_FUNDS
        assert game.state == VideoPokerState.BETTING

    def test_deal_while_holding_rejected(self, machine):
        game = machine("2H 2S 7D 9C KH")
        game.deal(10)
        assert game.deal(10).reason == Reason.INVALID_STATE


class TestHold:
    """Tests for holding cards."""

    def test_toggle(self, machine):
        game = machine("2H 2S 7D 9C KH")
        game.deal(10)
        game.toggle_hold(1)
        assert game.held == {1}
        game.toggle_hold(1)
        assert game.held == set()
        assert game.events.of_type(EventType.CARD_RELEASED)

    @pytest.mark.parametrize("index", [-1, 5])
    def test_out_of_range(self, machine, index):
        game = machine("2H 2S 7D 9C KH")
        game.deal(10)
        assert game.toggle_hold(index).reason == Reason.INVALID_INPUT

    def test_hold_before_deal_rejected(self, machine):
        assert machine("2H").toggle_hold(0).reason == Reason.INVALID_STATE


class TestDraw:
    """Tests for the draw and scoring."""

    def test_royal_flush_pays_250x(self, machine, wallet):
        game = machine("10H JH QH KH AH")
        game.deal(10)
        hold(game, 0, 1, 2, 3, 4)

        result = game.draw()

        assert result.snapshot.winning_hand == ROYAL_FLUSH
        assert result.snapshot.payout == Decimal("2500")
        assert wallet.get_balance() == Decimal("3490")

    def test_non_held_cards_replaced(self, machine, wallet):
        game = machine("2H 2S 7D 9C KH JS JD 4C")
        game.deal(10)
        hold(game, 0, 1)

        result = game.draw()

        assert [str(c) for c in result.snapshot.cards] == ["2♥", "2♠", "J♠", "J♦", "4♣"]
        assert result.snapshot.winning_hand == TWO_PAIR
        assert wallet.get_balance() == Decimal("1010")

    def test_low_pair_pays_nothing(self, machine, wallet):
        game = machine("2H 2S 7D 9C KH")
        game.deal(10)
        hold(game, 0, 1, 2, 3, 4)
        result = game.draw()
        assert result.snapshot.winning_hand is None
        assert result.snapshot.state == VideoPokerState.RESULT
        assert wallet.get_balance() == Decimal("990")

    def test_draw_only_once(self, machine, wallet):
        game = machine("10H JH QH KH AH")
        game.deal(10)
        hold(game, 0, 1, 2, 3, 4)
        game.draw()
        assert game.draw().reason == Reason.INVALID_STATE
        assert wallet.get_balance() == Decimal("3490")

    def test_reset_forfeits_undrawn_hand(self, machine, wallet):
        """A dealt hand cannot be walked away from for a refund."""
        game = machine("2H 2S 7D 9C KH")
        game.deal(10)
        game.reset()
        assert game.state == VideoPokerState.BETTING
        assert wallet.get_balance() == Decimal("990")
        assert game.history[-1] == ""

    def test_ledger_carries_memos(self, machine, wallet):
        game = machine("10H JH QH KH AH")
        game.deal(10)
        hold(game, 0, 1, 2, 3, 4)
        game.draw()
        assert [t.memo for t in wallet.ledger] == ["video poker", ROYAL_FLUSH.name]

    @settings(max_examples=40, deadline=None)
    @given(
        seed=st.integers(min_value=0, max_value=10_000),
        rounds=st.lists(
            st.tuples(st.sets(st.integers(min_value=0, max_value=4)), st.booleans()),
            min_size=1,
            max_size=15,
        ),
    )
    def test_each_round_nets_one_paytable_line(self, seed, rounds):
        """Each hand loses the stake or wins stake x (paytable multiplier - 1)."""
        multipliers = {entry.multiplier for entry in PAYTABLE}
        wallet = InMemoryWallet(Decimal("1000"))
        game = VideoPokerGame(wallet, rng=Random(seed))
        for held, abandon in rounds:
            opening = wallet.get_balance()
            game.deal(10)
            hold(game, *held)
            if abandon:
                game.reset()
                assert wallet.get_balance() - opening == Decimal("-10")
                continue
            game.draw()

            entry = game.snapshot().winning_hand
            net = wallet.get_balance() - opening
            if entry is None:
                assert net == Decimal("-10")
            else:
                assert entry.multiplier in multipliers
                assert net == Decimal(10) * entry.multiplier - 10
