"""
Ranking - leaderboard ordering and league winner determination.
"""
from .resolver import (
    LeagueWinners,
    RankedEntry,
    determine_winners,
    finalize_winners,
    leaderboard_frame,
    rank,
)

__all__ = [
    "LeagueWinners",
    "RankedEntry",
    "determine_winners",
    "finalize_winners",
    "leaderboard_frame",
    "rank",
]
