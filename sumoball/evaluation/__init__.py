"""
Evaluation Package
==================

Headless batch simulation of whole series for balancing distributions.
"""

from sumoball.evaluation.run_series import evaluate_matchup, simulate_series

__all__ = ["evaluate_matchup", "simulate_series"]
