"""
Game type interface and the data-driven bracket implementation.

A game type bundles everything format-specific: region layout, seed count,
round names, default points. Formats differ only in data, so each one is a
BracketGameType instance rather than a subclass.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import (
    Any,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    runtime_checkable,
)

from bracket_league.bracket.extras import split_key
from bracket_league.bracket.model import Region, RegionMatchupConfig
from bracket_league.bracket.results import OfficialResults, champion, is_tournament_complete
from bracket_league.bracket.structure import BracketStructure, build_structure
from bracket_league.entries.entry import Entry
from bracket_league.ranking.resolver import (
    LeagueWinners,
    RankedEntry,
    determine_winners,
    finalize_winners,
    rank,
)
from bracket_league.scoring.adjustments import ScoreAdjustment
from bracket_league.scoring.engine import ScoreBreakdown, score
from bracket_league.scoring.settings import ScoringSettings


@runtime_checkable
class GameType(Protocol):
    """Capabilities every tournament format provides."""

    type_id: str
    name: str

    def build_structure(
        self,
        regions: Sequence[Region],
        region_matchup_config: Optional[RegionMatchupConfig] = None,
    ) -> BracketStructure:
        ...

    def score(
        self,
        entry: Entry,
        structure: BracketStructure,
        official_results: OfficialResults,
        scoring_settings: Optional[ScoringSettings] = None,
        adjustments: Optional[Iterable[ScoreAdjustment]] = None,
    ) -> ScoreBreakdown:
        ...

    def rank(
        self,
        entries: Iterable[Entry],
        structure: BracketStructure,
        official_results: OfficialResults,
        scoring_settings: Optional[ScoringSettings] = None,
        adjustments: Optional[Mapping[str, List[ScoreAdjustment]]] = None,
    ) -> List[RankedEntry]:
        ...

    def determine_winners(
        self,
        entries: Iterable[Entry],
        structure: BracketStructure,
        official_results: OfficialResults,
        scoring_settings: Optional[ScoringSettings] = None,
        adjustments: Optional[Mapping[str, List[ScoreAdjustment]]] = None,
    ) -> FrozenSet[str]:
        ...

    def finalize_winners(
        self,
        entries: Iterable[Entry],
        structure: BracketStructure,
        official_results: OfficialResults,
        scoring_settings: Optional[ScoringSettings] = None,
        adjustments: Optional[Mapping[str, List[ScoreAdjustment]]] = None,
        now: Optional[datetime] = None,
    ) -> LeagueWinners:
        ...

    def supports_extra(self, key: str) -> bool:
        ...

    def get_metadata(self, structure: Optional[BracketStructure], results: OfficialResults) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class BracketGameType:
    """Single-elimination bracket format described entirely by data."""
    type_id: str
    name: str
    description: str
    region_names: Tuple[str, ...]
    seed_count: int
    round_keys: Tuple[str, ...]
    round_display_names: Dict[str, str] = field(default_factory=dict)
    default_points: Dict[str, float] = field(default_factory=dict)
    default_region_config: Optional[RegionMatchupConfig] = None
    category: str = "Sports"
    # Bonus prediction categories this format scores, and series-length bonus per round
    extra_categories: Tuple[str, ...] = ()
    default_series_bonus: Dict[str, float] = field(default_factory=dict)

    @property
    def uses_region_config(self) -> bool:
        return len(self.region_names) == 4

    @property
    def team_count(self) -> int:
        return len(self.region_names) * self.seed_count

    def display_name(self, round_key: str) -> str:
        return self.round_display_names.get(round_key, round_key)

    def supports_extra(self, key: str) -> bool:
        category, _ = split_key(key)
        return category is not None and category in self.extra_categories

    def _settings(self, scoring_settings: Optional[ScoringSettings]) -> ScoringSettings:
        return (scoring_settings or ScoringSettings()).with_series_defaults(self.default_series_bonus)

    def build_structure(
        self,
        regions: Sequence[Region],
        region_matchup_config: Optional[RegionMatchupConfig] = None,
    ) -> BracketStructure:
        config = region_matchup_config
        if config is None and self.uses_region_config:
            config = self.default_region_config
        return build_structure(regions, config, self.seed_count, self.round_keys)

    def score(
        self,
        entry: Entry,
        structure: BracketStructure,
        official_results: OfficialResults,
        scoring_settings: Optional[ScoringSettings] = None,
        adjustments: Optional[Iterable[ScoreAdjustment]] = None,
    ) -> ScoreBreakdown:
        return score(
            entry, structure, official_results, self._settings(scoring_settings),
            self.default_points, adjustments,
        )

    def rank(
        self,
        entries: Iterable[Entry],
        structure: BracketStructure,
        official_results: OfficialResults,
        scoring_settings: Optional[ScoringSettings] = None,
        adjustments: Optional[Mapping[str, List[ScoreAdjustment]]] = None,
    ) -> List[RankedEntry]:
        return rank(
            entries, structure, official_results, self._settings(scoring_settings),
            self.default_points, adjustments, self.type_id,
        )

    def determine_winners(
        self,
        entries: Iterable[Entry],
        structure: BracketStructure,
        official_results: OfficialResults,
        scoring_settings: Optional[ScoringSettings] = None,
        adjustments: Optional[Mapping[str, List[ScoreAdjustment]]] = None,
    ) -> FrozenSet[str]:
        return determine_winners(
            entries, structure, official_results, self._settings(scoring_settings),
            self.default_points, adjustments, self.type_id,
        )

    def finalize_winners(
        self,
        entries: Iterable[Entry],
        structure: BracketStructure,
        official_results: OfficialResults,
        scoring_settings: Optional[ScoringSettings] = None,
        adjustments: Optional[Mapping[str, List[ScoreAdjustment]]] = None,
        now: Optional[datetime] = None,
    ) -> LeagueWinners:
        return finalize_winners(
            entries, structure, official_results, self._settings(scoring_settings),
            self.default_points, adjustments, self.type_id, now,
        )

    def get_metadata(self, structure: Optional[BracketStructure], results: OfficialResults) -> Dict[str, Any]:
        """Status summary for league listings."""
        status = "Not Started"
        teams = 0
        winner = "TBD"
        label = winner

        if structure is not None:
            teams = structure.team_count
            if is_tournament_complete(structure, results):
                status = "Completed"
                team = structure.team(champion(structure, results))
                winner = team.name if team else champion(structure, results)
                label = team.label() if team else winner
            elif len(results) > 0:
                status = "In Progress"

        return {
            "game_type": self.type_id,
            "status": status,
            "teams": teams,
            "champion": winner,
            "custom_fields": [
                {"label": "Teams", "value": f"{teams}/{self.team_count}" if teams > 0 else "Not Set"},
                {"label": "Status", "value": status},
                {"label": "Champion", "value": label},
            ],
        }

    def info(self) -> Dict[str, Any]:
        return {
            "id": self.type_id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "regions": list(self.region_names),
            "seed_count": self.seed_count,
            "rounds": [self.display_name(k) for k in self.round_keys],
            "extras": list(self.extra_categories),
        }
