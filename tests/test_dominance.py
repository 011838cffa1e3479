"""
Tests for the round dominance rule.
"""

import itertools

import pytest

from sumoball.sumo_core.moves import MoveSymbol, RoundOutcome, Side, beats, resolve_moves

ROCK, PAPER, SCISSORS, SUPER = MoveSymbol


class TestBeats:
    """Test the beats() relation."""

    @pytest.mark.parametrize("winner,loser", [
        (ROCK, SCISSORS),
        (SCISSORS, PAPER),
        (PAPER, ROCK),
    ])
    def test_standard_cycle(self, winner, loser):
        """The standard symbols beat one another in a cycle."""
        assert beats(winner, loser)
        assert not beats(loser, winner)

    @pytest.mark.parametrize("other", [ROCK, PAPER, SCISSORS])
    def test_super_beats_everything_else(self, other):
        """Super beats every standard symbol."""
        assert beats(SUPER, other)
        assert not beats(other, SUPER)

    def test_identical_symbols_tie(self):
        """No symbol beats itself."""
        for symbol in MoveSymbol:
            assert not beats(symbol, symbol)

    def test_total_and_antisymmetric(self):
        """For distinct symbols exactly one side wins."""
        for a, b in itertools.permutations(MoveSymbol, 2):
            assert beats(a, b) != beats(b, a)


class TestResolveMoves:
    """Test round outcome resolution."""

    def test_left_wins(self):
        """Left's winning symbol gives LEFT_WINS."""
        outcome = resolve_moves(ROCK, SCISSORS)
        assert outcome is RoundOutcome.LEFT_WINS
        assert outcome.winner is Side.LEFT

    def test_right_wins(self):
        """Right's winning symbol gives RIGHT_WINS."""
        outcome = resolve_moves(ROCK, PAPER)
        assert outcome is RoundOutcome.RIGHT_WINS
        assert outcome.winner is Side.RIGHT

    def test_tie(self):
        """Matching symbols tie with no winner."""
        outcome = resolve_moves(SUPER, SUPER)
        assert outcome is RoundOutcome.TIE
        assert outcome.winner is None
        assert not outcome.is_decisive

    def test_side_opponent(self):
        """Each side's opponent is the other side."""
        assert Side.LEFT.opponent is Side.RIGHT
        assert Side.RIGHT.opponent is Side.LEFT
