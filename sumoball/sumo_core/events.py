"""
Events
======

Transition events raised by the match engine, and listeners that consume them.

Presentation layers (movement tweening, hit feedback, score text) subclass
``MatchListener`` and override the handlers they care about. All handlers run
synchronously, in registration order, before ``resolve_round()`` returns; the
logical game state they observe is already final.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from sumoball.sumo_core.moves import MoveSymbol, RoundOutcome, Side


@dataclass(frozen=True)
class RoundResolved:
    """Both moves were drawn and compared."""
    left_move: MoveSymbol
    right_move: MoveSymbol
    outcome: RoundOutcome

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "round_resolved",
            "left_move": self.left_move.label,
            "right_move": self.right_move.label,
            "outcome": self.outcome.value,
        }


@dataclass(frozen=True)
class CombatantMoved:
    """A combatant's logical column changed (or was re-asserted)."""
    side: Side
    from_index: int
    to_index: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "combatant_moved",
            "side": self.side.value,
            "from_index": self.from_index,
            "to_index": self.to_index,
        }


@dataclass(frozen=True)
class EdgeVisitIncremented:
    """A combatant reached its near-wall column from elsewhere."""
    side: Side
    new_count: int
    distribution_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "edge_visit_incremented",
            "side": self.side.value,
            "new_count": self.new_count,
            "distribution_name": self.distribution_name,
        }


@dataclass(frozen=True)
class MatchComplete:
    """A combatant was pushed onto its wall."""
    winning_side: Side
    round_score: Tuple[int, int]  # (left, right) round wins in the finished match
    match_score: Tuple[int, int]  # (left, right) match wins so far

    @property
    def knocked_out_side(self) -> Side:
        return self.winning_side.opponent

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "match_complete",
            "winning_side": self.winning_side.value,
            "round_score": list(self.round_score),
            "match_score": list(self.match_score),
        }


@dataclass(frozen=True)
class SeriesComplete:
    """One side reached the required number of match wins."""
    winning_side: Side
    match_score: Tuple[int, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "series_complete",
            "winning_side": self.winning_side.value,
            "match_score": list(self.match_score),
        }


MatchEvent = Union[RoundResolved, CombatantMoved, EdgeVisitIncremented, MatchComplete, SeriesComplete]

_HANDLERS = {
    RoundResolved: "on_round_resolved",
    CombatantMoved: "on_combatant_moved",
    EdgeVisitIncremented: "on_edge_visit_incremented",
    MatchComplete: "on_match_complete",
    SeriesComplete: "on_series_complete",
}


class MatchListener:
    """Base listener. Every handler is a no-op."""

    def dispatch(self, event: MatchEvent) -> None:
        """Route an event to its handler."""
        getattr(self, _HANDLERS[type(event)])(event)

    def on_round_resolved(self, event: RoundResolved) -> None:
        pass

    def on_combatant_moved(self, event: CombatantMoved) -> None:
        pass

    def on_edge_visit_incremented(self, event: EdgeVisitIncremented) -> None:
        pass

    def on_match_complete(self, event: MatchComplete) -> None:
        pass

    def on_series_complete(self, event: SeriesComplete) -> None:
        pass


class EventRecorder(MatchListener):
    """Keeps every event in arrival order."""

    def __init__(self):
        self._events: List[MatchEvent] = []

    def dispatch(self, event: MatchEvent) -> None:
        self._events.append(event)
        super().dispatch(event)

    @property
    def events(self) -> List[MatchEvent]:
        return list(self._events)

    def of_type(self, event_type: type) -> List[MatchEvent]:
        """Recorded events of one class."""
        return [e for e in self._events if isinstance(e, event_type)]

    def to_list(self) -> List[Dict[str, Any]]:
        """Recorded events as plain dictionaries."""
        return [e.to_dict() for e in self._events]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)


class LoggingListener(MatchListener):
    """Writes a one-line trace of every event to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self._logger = logger if logger is not None else logging.getLogger("sumoball.events")
        self._level = level

    def on_round_resolved(self, event: RoundResolved) -> None:
        self._logger.log(
            self._level, "Round: %s vs %s -> %s",
            event.left_move.label, event.right_move.label, event.outcome.value
        )

    def on_combatant_moved(self, event: CombatantMoved) -> None:
        self._logger.log(
            self._level, "%s moved %d -> %d",
            event.side.value, event.from_index, event.to_index
        )

    def on_edge_visit_incremented(self, event: EdgeVisitIncremented) -> None:
        self._logger.log(
            self._level, "%s edge visits: %d (distribution %s)",
            event.side.value, event.new_count, event.distribution_name
        )

    def on_match_complete(self, event: MatchComplete) -> None:
        self._logger.log(
            self._level, "%s knocked out, %s wins match (rounds %d-%d, matches %d-%d)",
            event.knocked_out_side.value, event.winning_side.value,
            *event.round_score, *event.match_score
        )

    def on_series_complete(self, event: SeriesComplete) -> None:
        self._logger.log(
            self._level, "%s wins series %d-%d",
            event.winning_side.value, *event.match_score
        )
