"""
Visibility - fog-of-war gate over entries and leaderboard rows.
"""
from .gate import (
    AdminVisibilityPolicy,
    VisibilityGate,
    VisibilitySettings,
    gate_for,
    is_visible,
    tournament_complete,
)

__all__ = [
    "AdminVisibilityPolicy",
    "VisibilityGate",
    "VisibilitySettings",
    "gate_for",
    "is_visible",
    "tournament_complete",
]
