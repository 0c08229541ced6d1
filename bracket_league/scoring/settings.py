"""
Scoring settings passed explicitly to every scoring call.
"""
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ScoringSettings(BaseModel):
    """
    Per-league scoring configuration.

    Accepts snake_case fields or the camelCase names used in stored league
    documents (bonusEnabled, bonusPerSeedDifference, ...).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    round_points: Dict[str, float] = Field(default_factory=dict, description="Base points per round key")
    bonus_enabled: bool = Field(default=False)
    bonus_type: str = Field(default="seed_difference")
    bonus_per_seed_difference: float = Field(default=0.5, ge=0.0)
    flat_bonus_value: float = Field(default=0.5, ge=0.0)
    upset_threshold: int = Field(default=1, ge=1, description="Minimum seed gap that earns a bonus")

    # Bonus predictions; formats without them never record official outcomes
    series_length_bonus_enabled: bool = Field(default=True)
    series_length_bonus: Dict[str, float] = Field(
        default_factory=dict, description="Bonus per round key for calling the series length"
    )
    finals_mvp_enabled: bool = Field(default=True)
    finals_mvp_points: float = Field(default=2.5, ge=0.0)
    play_in_enabled: bool = Field(default=True)
    play_in_points: float = Field(default=1.0, ge=0.0)

    @field_validator("round_points", "series_length_bonus")
    @classmethod
    def points_non_negative(cls, v):
        for round_key, points in v.items():
            if points < 0:
                raise ValueError(f"points for {round_key} must be >= 0")
        return v

    @field_validator("bonus_type", mode="before")
    @classmethod
    def normalize_bonus_type(cls, v):
        value = {"seedDifference": "seed_difference"}.get(v, v)
        if value not in ("seed_difference", "flat"):
            raise ValueError("bonus_type must be 'seed_difference' or 'flat'")
        return value

    def points_for(self, round_key: str, defaults: Optional[Mapping[str, float]] = None) -> float:
        """Base points for a correct pick in round_key."""
        if round_key in self.round_points:
            return float(self.round_points[round_key])
        if defaults and round_key in defaults:
            return float(defaults[round_key])
        return 0.0

    def upset_bonus(self, winner_seed: Optional[int], opponent_seed: Optional[int]) -> float:
        """Bonus for a correctly picked upset; zero unless enabled and the gap meets the threshold."""
        if not self.bonus_enabled or winner_seed is None or opponent_seed is None:
            return 0.0
        gap = winner_seed - opponent_seed
        if gap < self.upset_threshold:
            return 0.0
        if self.bonus_type == "flat":
            return self.flat_bonus_value
        return gap * self.bonus_per_seed_difference

    def series_bonus_for(self, round_key: str) -> float:
        if not self.series_length_bonus_enabled:
            return 0.0
        return float(self.series_length_bonus.get(round_key, 0.0))

    def with_series_defaults(self, defaults: Mapping[str, float]) -> "ScoringSettings":
        """Copy with a format's series-length bonuses filled in under any league overrides."""
        if not defaults:
            return self
        merged = {**defaults, **self.series_length_bonus}
        return self.model_copy(update={"series_length_bonus": merged})
