"""
Scoring System
==============

Round and match tallies for a best-of-N series.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from sumoball.sumo_core.config_loader import coerce_best_of
from sumoball.sumo_core.moves import Side


@dataclass
class Tally:
    """A pair of per-side counters."""
    left: int = 0
    right: int = 0

    def get(self, side: Side) -> int:
        return self.left if side is Side.LEFT else self.right

    def increment(self, side: Side) -> int:
        """Add one to ``side`` and return its new count."""
        if side is Side.LEFT:
            self.left += 1
            return self.left
        self.right += 1
        return self.right

    def reset(self) -> None:
        self.left = 0
        self.right = 0

    def as_tuple(self) -> Tuple[int, int]:
        """(left, right) counts."""
        return (self.left, self.right)

    def __repr__(self) -> str:
        return f"{self.left}-{self.right}"


class Scoreboard:
    """
    Tracks round wins (per match) and match wins (per series).

    Round wins reset at the start of every match. Match wins accumulate until
    one side reaches ``wins_needed``.
    """

    def __init__(self, best_of: int = 3):
        """
        Initialize scoreboard.

        Args:
            best_of: Series length, coerced to an odd number >= 1.
        """
        self._best_of = coerce_best_of(best_of)
        self._round_wins = Tally()
        self._match_wins = Tally()

    @property
    def best_of(self) -> int:
        return self._best_of

    @property
    def wins_needed(self) -> int:
        """Match wins needed to take the series."""
        return self._best_of // 2 + 1

    @property
    def round_wins(self) -> Tally:
        return self._round_wins

    @property
    def match_wins(self) -> Tally:
        return self._match_wins

    def record_round_win(self, side: Side) -> int:
        return self._round_wins.increment(side)

    def record_match_win(self, side: Side) -> int:
        return self._match_wins.increment(side)

    @property
    def series_winner(self) -> Optional[Side]:
        """Side that has reached ``wins_needed``, if any."""
        if self._match_wins.left >= self.wins_needed:
            return Side.LEFT
        if self._match_wins.right >= self.wins_needed:
            return Side.RIGHT
        return None

    def reset_rounds(self) -> None:
        """Clear round wins for a new match."""
        self._round_wins.reset()

    def reset(self) -> None:
        """Clear everything for a new series."""
        self._round_wins.reset()
        self._match_wins.reset()
