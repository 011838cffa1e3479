"""
Series Evaluation
=================

Plays complete series without a presentation layer and summarizes how a
pair of combatant configurations fares over many seeds.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from sumoball.sumo_core.config_loader import MatchConfig, load_config
from sumoball.sumo_core.events import EventRecorder, MatchComplete
from sumoball.sumo_core.game import MatchEngine
from sumoball.sumo_core.moves import RoundOutcome

logger = logging.getLogger(__name__)

# Fixed anchors; layout coordinates do not affect the outcome
DEFAULT_ANCHORS = ((-1.0, 0.0), (1.0, 0.0))
DEFAULT_MAX_ROUNDS = 10_000


@dataclass
class SeriesResult:
    """Result for a single seed."""
    seed: int
    winner: Optional[str]   # "left", "right", or None if truncated
    match_score: Tuple[int, int]
    rounds_played: int
    ties: int
    matches_played: int
    truncated: bool
    elapsed_time: float


@dataclass
class MatchupSummary:
    """Summary of a matchup across all seeds."""
    left_win_rate: float
    right_win_rate: float
    truncated_count: int
    mean_rounds: float
    std_rounds: float
    mean_tie_rate: float
    total_time: float
    results: List[SeriesResult]


def simulate_series(
    config: Optional[MatchConfig] = None,
    seed: int = 0,
    max_rounds: int = DEFAULT_MAX_ROUNDS
) -> SeriesResult:
    """
    Play one series to completion.

    Args:
        config: Match configuration. Uses default if None.
        seed: Random seed shared by both combatants.
        max_rounds: Give up after this many rounds (guards all-tie setups).

    Returns:
        SeriesResult for this seed.
    """
    if config is None:
        config = load_config()

    recorder = EventRecorder()
    engine = MatchEngine(config, listeners=[recorder], seed=seed)
    engine.setup(*DEFAULT_ANCHORS)

    start_time = time.time()
    ties = 0
    while not engine.is_series_over and engine.rounds_played < max_rounds:
        result = engine.resolve_round()
        if result.outcome is RoundOutcome.TIE:
            ties += 1
    elapsed = time.time() - start_time

    truncated = not engine.is_series_over
    if truncated:
        logger.warning("Seed %d truncated after %d rounds", seed, engine.rounds_played)

    winner = engine.series_winner
    return SeriesResult(
        seed=seed,
        winner=winner.value if winner is not None else None,
        match_score=engine.scoreboard.match_wins.as_tuple(),
        rounds_played=engine.rounds_played,
        ties=ties,
        matches_played=len(recorder.of_type(MatchComplete)),
        truncated=truncated,
        elapsed_time=elapsed
    )


def evaluate_matchup(
    config: Optional[MatchConfig] = None,
    seeds: Optional[Sequence[int]] = None,
    max_rounds: int = DEFAULT_MAX_ROUNDS
) -> MatchupSummary:
    """
    Simulate one series per seed and aggregate the results.

    Args:
        config: Match configuration. Uses default if None.
        seeds: Seeds to play. ``range(100)`` if None.
        max_rounds: Per-series round cap.

    Returns:
        MatchupSummary with win rates and round statistics.
    """
    if config is None:
        config = load_config()
    if seeds is None:
        seeds = range(100)

    results: List[SeriesResult] = []
    total_start = time.time()
    for seed in seeds:
        results.append(simulate_series(config, seed, max_rounds))
    total_time = time.time() - total_start

    if not results:
        return MatchupSummary(0.0, 0.0, 0, 0.0, 0.0, 0.0, total_time, results)

    winners = np.array([r.winner or "" for r in results])
    rounds = np.array([r.rounds_played for r in results], dtype=np.float64)
    ties = np.array([r.ties for r in results], dtype=np.float64)
    tie_rates = np.divide(ties, rounds, out=np.zeros_like(ties), where=rounds > 0)

    summary = MatchupSummary(
        left_win_rate=float(np.mean(winners == "left")),
        right_win_rate=float(np.mean(winners == "right")),
        truncated_count=int(sum(r.truncated for r in results)),
        mean_rounds=float(np.mean(rounds)),
        std_rounds=float(np.std(rounds)),
        mean_tie_rate=float(np.mean(tie_rates)),
        total_time=total_time,
        results=results
    )
    logger.info(
        "Evaluated %d series: left %.1f%%, right %.1f%%, mean rounds %.1f",
        len(results), summary.left_win_rate * 100, summary.right_win_rate * 100,
        summary.mean_rounds
    )
    return summary
