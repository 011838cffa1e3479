"""
Moves
=====

Move symbols, combatant sides and the dominance rule for a single round.

Super beats every other symbol and loses to nothing. Rock, Paper and
Scissors follow the usual cycle. Identical symbols tie.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Optional


class MoveSymbol(IntEnum):
    """The four playable symbols, in sampling band order."""
    ROCK = 0
    PAPER = 1
    SCISSORS = 2
    SUPER = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


# attacker -> the symbol it defeats
_CYCLE = {
    MoveSymbol.ROCK: MoveSymbol.SCISSORS,
    MoveSymbol.PAPER: MoveSymbol.ROCK,
    MoveSymbol.SCISSORS: MoveSymbol.PAPER,
}


class Side(Enum):
    """Which end of the board a combatant fights from."""
    LEFT = "left"
    RIGHT = "right"

    @property
    def opponent(self) -> "Side":
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


class RoundOutcome(Enum):
    """Result of comparing two moves."""
    LEFT_WINS = "left_wins"
    RIGHT_WINS = "right_wins"
    TIE = "tie"

    @property
    def winner(self) -> Optional[Side]:
        """Winning side, or None on a tie."""
        if self is RoundOutcome.LEFT_WINS:
            return Side.LEFT
        if self is RoundOutcome.RIGHT_WINS:
            return Side.RIGHT
        return None

    @property
    def is_decisive(self) -> bool:
        return self is not RoundOutcome.TIE


def beats(a: MoveSymbol, b: MoveSymbol) -> bool:
    """
    Check whether move ``a`` defeats move ``b``.

    Args:
        a: Attacking move.
        b: Defending move.

    Returns:
        True if ``a`` wins outright. False for ties and losses.
    """
    if a == b:
        return False
    if a is MoveSymbol.SUPER:
        return True
    if b is MoveSymbol.SUPER:
        return False
    return _CYCLE[a] is b


def resolve_moves(left: MoveSymbol, right: MoveSymbol) -> RoundOutcome:
    """Compare both sides' moves and return the round outcome."""
    if beats(left, right):
        return RoundOutcome.LEFT_WINS
    if beats(right, left):
        return RoundOutcome.RIGHT_WINS
    return RoundOutcome.TIE
