"""
Sumo Core - The game logic of sumo rock-paper-scissors.

This module provides the board coordinate model, per-combatant state,
weighted move sampling with edge-visit escalation, and the round/match/series
state machine. Rendering and input are left to the embedding application,
which follows along through events.

Main exports:
- MatchEngine: Round/match/series state machine
- BoardLayout: Column positions between two anchors
- CombatantState: Column index, edge visits, escalation
- MoveSampler / Distribution: Weighted move sampling
- MatchConfig: Configuration loaded from match_config.yaml
"""

from sumoball.sumo_core.errors import ConfigurationError, SumoballError
from sumoball.sumo_core.config_loader import MatchConfig, load_config, parse_config
from sumoball.sumo_core.moves import MoveSymbol, RoundOutcome, Side, beats, resolve_moves
from sumoball.sumo_core.board import BoardLayout
from sumoball.sumo_core.rng import Distribution, MoveSampler
from sumoball.sumo_core.escalation import EscalationRule, EscalationTable
from sumoball.sumo_core.combatant import CombatantState
from sumoball.sumo_core.scoring import Scoreboard
from sumoball.sumo_core.events import (
    CombatantMoved,
    EdgeVisitIncremented,
    EventRecorder,
    LoggingListener,
    MatchComplete,
    MatchListener,
    RoundResolved,
    SeriesComplete,
)
from sumoball.sumo_core.game import EngineState, MatchEngine, RoundPhase, RoundResult

__all__ = [
    "ConfigurationError",
    "SumoballError",
    "MatchConfig",
    "load_config",
    "parse_config",
    "MoveSymbol",
    "RoundOutcome",
    "Side",
    "beats",
    "resolve_moves",
    "BoardLayout",
    "Distribution",
    "MoveSampler",
    "EscalationRule",
    "EscalationTable",
    "CombatantState",
    "Scoreboard",
    "CombatantMoved",
    "EdgeVisitIncremented",
    "EventRecorder",
    "LoggingListener",
    "MatchComplete",
    "MatchListener",
    "RoundResolved",
    "SeriesComplete",
    "EngineState",
    "MatchEngine",
    "RoundPhase",
    "RoundResult",
]
