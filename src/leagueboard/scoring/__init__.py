"""
Scoring module.

Applies a league's compiled point rules (see records/rules.py) to game
placements:
- evaluator: Per-placement and per-game point evaluation with the
  participation fallback
- recalculate: Diffs stored points against the current rules
"""

from leagueboard.scoring.evaluator import PointsBreakdown, evaluate_placement, score_game
from leagueboard.scoring.recalculate import (
    PointsChange,
    RecalculationResult,
    diff_game_points,
    recalculate_games,
)

__all__ = [
    "PointsBreakdown",
    "evaluate_placement",
    "score_game",
    "PointsChange",
    "RecalculationResult",
    "diff_game_points",
    "recalculate_games",
]
