"""
Scoring - settings, the scoring engine and manual adjustments.
"""
from .settings import ScoringSettings
from .adjustments import ScoreAdjustment, new_adjustment, total_adjustment
from .extras import ExtrasScore, score_extras
from .engine import (
    RoundScore,
    ScoreBreakdown,
    default_points,
    eliminated_teams,
    max_possible_remaining,
    score,
    score_entries,
)

__all__ = [
    "ScoringSettings",
    "ScoreAdjustment",
    "new_adjustment",
    "total_adjustment",
    "ExtrasScore",
    "score_extras",
    "RoundScore",
    "ScoreBreakdown",
    "default_points",
    "eliminated_teams",
    "max_possible_remaining",
    "score",
    "score_entries",
]
