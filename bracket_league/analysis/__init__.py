"""
Analysis - entry comparison and league pick statistics.
"""
from .comparison import RoundAgreement, SimilarityReport, compare_entries
from .stats import (
    champion_picks,
    league_summary,
    pick_distribution,
    picks_frame,
    seed_performance,
    upset_count,
)

__all__ = [
    "RoundAgreement",
    "SimilarityReport",
    "compare_entries",
    "champion_picks",
    "league_summary",
    "pick_distribution",
    "picks_frame",
    "seed_performance",
    "upset_count",
]
