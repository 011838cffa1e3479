"""
Match Engine
============

Round / match / series state machine combining the board, both combatants
and the scoreboard.

One call to ``resolve_round()`` plays exactly one round: both sides sample a
move, the dominance rule picks a winner, the shared board index moves one
step toward the loser's wall, and knockouts and series completion are
checked. All state is final when the call returns; animating the result is
the caller's business.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from sumoball.sumo_core.board import BoardLayout
from sumoball.sumo_core.combatant import CombatantState
from sumoball.sumo_core.config_loader import MatchConfig, TimingConfig, load_config
from sumoball.sumo_core.errors import ConfigurationError
from sumoball.sumo_core.events import (
    CombatantMoved,
    EdgeVisitIncremented,
    MatchComplete,
    MatchEvent,
    MatchListener,
    RoundResolved,
    SeriesComplete,
)
from sumoball.sumo_core.moves import MoveSymbol, RoundOutcome, Side, resolve_moves
from sumoball.sumo_core.scoring import Scoreboard

logger = logging.getLogger(__name__)


class EngineState(Enum):
    """Top-level engine state."""
    AWAITING_SETUP = "awaiting_setup"
    SERIES_IN_PROGRESS = "series_in_progress"
    SERIES_COMPLETE = "series_complete"


class RoundPhase(Enum):
    """Where the live series sits after the most recent transition."""
    AWAITING_ROUND = "awaiting_round"
    ROUND_RESOLVED = "round_resolved"
    MATCH_CONTINUES = "match_continues"
    MATCH_COMPLETE = "match_complete"
    SERIES_CONTINUES = "series_continues"
    SERIES_COMPLETE = "series_complete"


@dataclass
class RoundResult:
    """Result of a single ``resolve_round()`` call."""
    left_move: Optional[MoveSymbol]
    right_move: Optional[MoveSymbol]
    outcome: Optional[RoundOutcome]
    board_index: int
    phase: RoundPhase
    round_score: Tuple[int, int]
    match_score: Tuple[int, int]
    knocked_out: Optional[Side] = None
    series_winner: Optional[Side] = None
    events: List[MatchEvent] = field(default_factory=list)

    @property
    def halted(self) -> bool:
        """True if the series was already over and nothing was played."""
        return self.outcome is None

    @property
    def match_complete(self) -> bool:
        return self.knocked_out is not None

    @property
    def series_complete(self) -> bool:
        return self.series_winner is not None


class MatchEngine:
    """
    Main series simulation class.

    Orchestrates:
    - Board layout
    - Both combatants (position, edge visits, move sampling)
    - Scoreboard
    - Event dispatch to listeners

    Call ``setup()`` once, then ``resolve_round()`` until ``is_series_over``.
    """

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        left: Optional[CombatantState] = None,
        right: Optional[CombatantState] = None,
        board: Optional[BoardLayout] = None,
        listeners: Iterable[MatchListener] = (),
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize engine.

        Args:
            config: Match configuration. Loads the default file if None.
            left: Left combatant. Built from ``config.left`` if None.
            right: Right combatant. Built from ``config.right`` if None.
            board: Board layout. Built from ``config.board`` if None.
            listeners: Event listeners, called in order.
            rng: Generator shared by both config-built combatants. If None,
                each combatant seeds its own from its config.
            seed: Shorthand for ``rng=random.Random(seed)``.

        Raises:
            ConfigurationError: If a combatant is on the wrong side.
        """
        if config is None:
            config = load_config()
        if rng is None and seed is not None:
            rng = random.Random(seed)

        self._config = config
        self._left = left if left is not None else CombatantState.from_config(config.left, rng=rng)
        self._right = right if right is not None else CombatantState.from_config(config.right, rng=rng)
        if self._left.side is not Side.LEFT or self._right.side is not Side.RIGHT:
            raise ConfigurationError(
                "Combatants must be given as (left, right)",
                context={"left": self._left.side.value, "right": self._right.side.value}
            )

        self._board = board if board is not None else BoardLayout.from_config(config.board)
        self._scoreboard = Scoreboard(config.series.best_of)
        self._listeners: List[MatchListener] = list(listeners)

        self._board_index: int = 0
        self._state = EngineState.AWAITING_SETUP
        self._phase = RoundPhase.AWAITING_ROUND
        self._rounds_played: int = 0
        self._match_number: int = 0

    @property
    def config(self) -> MatchConfig:
        return self._config

    @property
    def timing(self) -> TimingConfig:
        """Advisory presentation timings, passed through unchanged."""
        return self._config.timing

    @property
    def board(self) -> BoardLayout:
        return self._board

    @property
    def scoreboard(self) -> Scoreboard:
        return self._scoreboard

    @property
    def left(self) -> CombatantState:
        return self._left

    @property
    def right(self) -> CombatantState:
        return self._right

    def combatant(self, side: Side) -> CombatantState:
        return self._left if side is Side.LEFT else self._right

    @property
    def board_index(self) -> int:
        """The contested column."""
        return self._board_index

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def phase(self) -> RoundPhase:
        return self._phase

    @property
    def is_series_over(self) -> bool:
        return self._state is EngineState.SERIES_COMPLETE

    @property
    def series_winner(self) -> Optional[Side]:
        return self._scoreboard.series_winner

    @property
    def rounds_played(self) -> int:
        """Rounds resolved since the series started, ties included."""
        return self._rounds_played

    @property
    def match_number(self) -> int:
        """1-based number of the match in progress (or last played)."""
        return self._match_number

    def add_listener(self, listener: MatchListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: MatchListener) -> None:
        self._listeners.remove(listener)

    def setup(
        self,
        anchor_left: Sequence[float],
        anchor_right: Sequence[float]
    ) -> Tuple[np.ndarray, int]:
        """
        Lay out the board and start a fresh series.

        Args:
            anchor_left: Left combatant's starting location.
            anchor_right: Right combatant's starting location.

        Returns:
            (positions, center_index) from the board layout.

        Raises:
            ConfigurationError: If anchors are missing or invalid.
        """
        positions, center = self._board.setup(anchor_left, anchor_right)
        self._start_series()
        return positions, center

    def reset_series(self) -> None:
        """
        Restart the series on the current board.

        Raises:
            ConfigurationError: If called before ``setup()``.
        """
        self._require_setup()
        self._start_series()

    def resolve_round(self) -> RoundResult:
        """
        Play one round.

        Returns:
            RoundResult describing moves, outcome and any match/series end.
            After the series is over, a halted result with no moves.

        Raises:
            ConfigurationError: If called before ``setup()``.
        """
        self._require_setup()

        if self.is_series_over:
            return self._build_result(None, None, None, None, [])

        events: List[MatchEvent] = []
        result = self._play_round(events)
        self._dispatch(events)
        return result

    def _play_round(self, events: List[MatchEvent]) -> RoundResult:
        """Apply every state change of one round, collecting its events."""
        left_move = self._left.pick_move()
        right_move = self._right.pick_move()
        outcome = resolve_moves(left_move, right_move)
        self._rounds_played += 1
        self._phase = RoundPhase.ROUND_RESOLVED
        self._emit(RoundResolved(left_move, right_move, outcome), events)

        winner = outcome.winner
        if winner is None:
            logger.debug("Round %d: tie (%s)", self._rounds_played, left_move.label)
            self._phase = RoundPhase.MATCH_CONTINUES
            return self._build_result(left_move, right_move, outcome, None, events)

        self._scoreboard.record_round_win(winner)
        step = 1 if winner is Side.LEFT else -1
        self._board_index = self._board.clamp_index(self._board_index + step)
        logger.debug(
            "Round %d: %s vs %s, %s wins, board index %d",
            self._rounds_played, left_move.label, right_move.label,
            winner.value, self._board_index
        )

        if not self._board.is_wall(self._board_index):
            self._move(Side.LEFT, self._board_index, events)
            self._move(Side.RIGHT, self._board_index, events)
            self._phase = RoundPhase.MATCH_CONTINUES
            return self._build_result(left_move, right_move, outcome, None, events)

        # Only the loser goes to the wall; the winner holds its column
        knocked_out = Side.LEFT if self._board_index == 0 else Side.RIGHT
        self._move(knocked_out, self._board_index, events)
        self._complete_match(knocked_out, events)
        return self._build_result(left_move, right_move, outcome, knocked_out, events)

    def combatant_position(self, side: Side) -> np.ndarray:
        """Board coordinate of a combatant's current column."""
        return self._board.position_at(self.combatant(side).column_index)

    def get_info(self) -> Dict[str, Any]:
        """Plain dictionary of the observable state, for HUDs and logging."""
        return {
            "state": self._state.value,
            "phase": self._phase.value,
            "board_index": self._board_index,
            "columns": self._board.columns,
            "center_index": self._board.center_index,
            "round_score": self._scoreboard.round_wins.as_tuple(),
            "match_score": self._scoreboard.match_wins.as_tuple(),
            "wins_needed": self._scoreboard.wins_needed,
            "rounds_played": self._rounds_played,
            "match_number": self._match_number,
            "series_winner": self.series_winner.value if self.series_winner else None,
            "combatants": {
                c.side.value: {
                    "name": c.name,
                    "column_index": c.column_index,
                    "edge_visits": c.edge_visits,
                    "distribution": c.active_distribution_name,
                }
                for c in (self._left, self._right)
            },
        }

    def _require_setup(self) -> None:
        if self._state is EngineState.AWAITING_SETUP or not self._board.is_setup:
            raise ConfigurationError("MatchEngine used before setup()")

    def _start_series(self) -> None:
        """Reset scores, edge visits and positions for a new series."""
        center = self._board.center_index
        self._scoreboard.reset()
        for combatant in (self._left, self._right):
            combatant.place(self._board.columns, center)
            combatant.reset_edge_visits()
        self._board_index = center
        self._rounds_played = 0
        self._match_number = 1
        self._state = EngineState.SERIES_IN_PROGRESS
        self._phase = RoundPhase.AWAITING_ROUND
        logger.debug("Series started: %d columns, best of %d",
                     self._board.columns, self._scoreboard.best_of)

    def _complete_match(self, knocked_out: Side, events: List[MatchEvent]) -> None:
        """Score a knockout, then either end the series or start the next match."""
        winner = knocked_out.opponent
        round_score = self._scoreboard.round_wins.as_tuple()
        self._scoreboard.record_match_win(winner)
        self.combatant(knocked_out).reset_edge_visits()
        self._phase = RoundPhase.MATCH_COMPLETE

        match_score = self._scoreboard.match_wins.as_tuple()
        logger.info(
            "Match %d: %s knocked out, %s wins (matches %d-%d)",
            self._match_number, self.combatant(knocked_out).name,
            self.combatant(winner).name, *match_score
        )
        self._emit(MatchComplete(winner, round_score, match_score), events)

        series_winner = self._scoreboard.series_winner
        if series_winner is not None:
            self._state = EngineState.SERIES_COMPLETE
            self._phase = RoundPhase.SERIES_COMPLETE
            logger.info("%s wins the series %d-%d",
                        self.combatant(series_winner).name, *match_score)
            self._emit(SeriesComplete(series_winner, match_score), events)
            return

        self._scoreboard.reset_rounds()
        center = self._board.center_index
        self._board_index = center
        self._move(Side.LEFT, center, events)
        self._move(Side.RIGHT, center, events)
        self._match_number += 1
        self._phase = RoundPhase.SERIES_CONTINUES

    def _move(self, side: Side, index: int, events: List[MatchEvent]) -> None:
        """Apply a column transition and emit the resulting events."""
        combatant = self.combatant(side)
        from_index = combatant.column_index
        visited = combatant.apply_column_transition(index)
        self._emit(CombatantMoved(side, from_index, index), events)
        if visited:
            self._emit(
                EdgeVisitIncremented(side, combatant.edge_visits, combatant.active_distribution_name),
                events
            )

    def _emit(self, event: MatchEvent, events: List[MatchEvent]) -> None:
        events.append(event)

    def _dispatch(self, events: List[MatchEvent]) -> None:
        """Hand a finished round's events to listeners, in emission order."""
        for event in events:
            for listener in list(self._listeners):
                listener.dispatch(event)

    def _build_result(
        self,
        left_move: Optional[MoveSymbol],
        right_move: Optional[MoveSymbol],
        outcome: Optional[RoundOutcome],
        knocked_out: Optional[Side],
        events: List[MatchEvent]
    ) -> RoundResult:
        return RoundResult(
            left_move=left_move,
            right_move=right_move,
            outcome=outcome,
            board_index=self._board_index,
            phase=self._phase,
            round_score=self._scoreboard.round_wins.as_tuple(),
            match_score=self._scoreboard.match_wins.as_tuple(),
            knocked_out=knocked_out,
            series_winner=self._scoreboard.series_winner,
            events=events
        )
