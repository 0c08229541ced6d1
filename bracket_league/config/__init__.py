"""
Configuration module with strongly typed settings.

Usage:
    from bracket_league.config import settings

    print(settings.scoring.bonus_enabled)
    print(settings.visibility.fog_of_war_enabled)
"""
from .settings import (
    Settings,
    ScoringDefaults,
    VisibilityDefaults,
    ObservabilitySettings,
)

# Singleton instance - validates on import
settings = Settings()

__all__ = [
    "settings",
    "Settings",
    "ScoringDefaults",
    "VisibilityDefaults",
    "ObservabilitySettings",
]
