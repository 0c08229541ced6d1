"""
Strongly typed configuration using pydantic-settings.

All settings are validated at startup and loaded from:
1. Default values defined here
2. .env file (if present)
3. Environment variables (highest priority)

Environment variable naming:
- ScoringDefaults: SCORING_BONUS_ENABLED, SCORING_UPSET_THRESHOLD, etc.
- VisibilityDefaults: VISIBILITY_FOG_OF_WAR_ENABLED, VISIBILITY_ADMIN_EXEMPT
- ObservabilitySettings: ENVIRONMENT, LOG_LEVEL (no prefix)
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class ScoringDefaults(BaseSettings):
    """League-wide scoring defaults used when a league stores no custom settings."""

    model_config = SettingsConfigDict(env_prefix="SCORING_")

    # Upset bonus
    bonus_enabled: bool = Field(default=False, description="Award upset bonus points")
    bonus_type: str = Field(default="seed_difference", pattern="^(seed_difference|flat)$")
    bonus_per_seed_difference: float = Field(default=0.5, ge=0.0)
    flat_bonus_value: float = Field(default=0.5, ge=0.0)
    upset_threshold: int = Field(default=1, ge=1, description="Minimum seed gap counted as an upset")

    # Bonus predictions (NBA series length, Finals MVP, play-in)
    series_length_bonus_enabled: bool = Field(default=True)
    finals_mvp_enabled: bool = Field(default=True)
    finals_mvp_points: float = Field(default=2.5, ge=0.0)
    play_in_enabled: bool = Field(default=True)
    play_in_points: float = Field(default=1.0, ge=0.0)

    def to_scoring_settings(self):
        """Build the per-call ScoringSettings from these defaults."""
        from bracket_league.scoring.settings import ScoringSettings
        return ScoringSettings(
            bonus_enabled=self.bonus_enabled,
            bonus_type=self.bonus_type,
            bonus_per_seed_difference=self.bonus_per_seed_difference,
            flat_bonus_value=self.flat_bonus_value,
            upset_threshold=self.upset_threshold,
            series_length_bonus_enabled=self.series_length_bonus_enabled,
            finals_mvp_enabled=self.finals_mvp_enabled,
            finals_mvp_points=self.finals_mvp_points,
            play_in_enabled=self.play_in_enabled,
            play_in_points=self.play_in_points,
        )


class VisibilityDefaults(BaseSettings):
    """Fog-of-war defaults for newly created leagues."""

    model_config = SettingsConfigDict(env_prefix="VISIBILITY_")

    fog_of_war_enabled: bool = Field(default=False)
    admin_exempt: bool = Field(default=False, description="Exempt league admins from fog of war")


class ObservabilitySettings(BaseSettings):
    """Logging and metrics settings."""

    model_config = SettingsConfigDict(env_prefix="")  # Direct: ENVIRONMENT, LOG_LEVEL

    environment: str = Field(default="development", pattern="^(development|staging|production)$")
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = Field(default="console", pattern="^(console|json)$")


class Settings(BaseSettings):
    """
    Root settings aggregating all subsections.

    Usage:
        from bracket_league.config import settings

        settings.scoring.upset_threshold
        settings.visibility.fog_of_war_enabled
        settings.observability.log_level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    scoring: ScoringDefaults = Field(default_factory=ScoringDefaults)
    visibility: VisibilityDefaults = Field(default_factory=VisibilityDefaults)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    # Paths
    data_dir: Path = Field(default=Path("data"))
    game_types_config: Path = Field(default=Path("config/game_types.yaml"))
