"""
Protocol definitions for league persistence.

The engine itself never touches storage; LeagueService reads and writes
league documents through this interface so the backing store can be
swapped (local JSON files, a document database, ...).
"""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

import polars as pl

from bracket_league.bracket.model import Region, RegionMatchupConfig
from bracket_league.bracket.results import OfficialResults
from bracket_league.entries.entry import Entry
from bracket_league.ranking.resolver import LeagueWinners
from bracket_league.scoring.adjustments import ScoreAdjustment
from bracket_league.scoring.settings import ScoringSettings
from bracket_league.visibility.gate import VisibilitySettings


@runtime_checkable
class LeagueRepository(Protocol):
    """
    Storage abstraction for league documents.

    Implementations:
    - LocalLeagueRepository (default): JSON documents on local disk
    """

    def exists(self, league_id: str) -> bool:
        """Check if a league has been created."""
        ...

    def list_leagues(self) -> List[str]:
        ...

    def delete_league(self, league_id: str) -> None:
        """Remove every stored document for the league."""
        ...

    def load_league(self, league_id: str) -> Dict[str, Any]:
        """
        Load the league document (name, game_type, lock_time, admins, status).

        Raises:
            LeagueNotFoundError: If the league does not exist
        """
        ...

    def save_league(self, league_id: str, league: Dict[str, Any]) -> None:
        ...

    def load_regions(self, league_id: str) -> List[Region]:
        ...

    def save_regions(self, league_id: str, regions: List[Region]) -> None:
        ...

    def load_region_config(self, league_id: str) -> Optional[RegionMatchupConfig]:
        ...

    def save_region_config(self, league_id: str, config: RegionMatchupConfig) -> None:
        ...

    def load_entries(self, league_id: str) -> List[Entry]:
        """Load all entries, official reference entry included, in submission order."""
        ...

    def save_entry(self, league_id: str, entry: Entry) -> None:
        ...

    def delete_entry(self, league_id: str, owner_id: str) -> None:
        ...

    def load_results(self, league_id: str) -> OfficialResults:
        ...

    def save_results(self, league_id: str, results: OfficialResults) -> None:
        ...

    def load_visibility(self, league_id: str) -> Optional[VisibilitySettings]:
        ...

    def save_visibility(self, league_id: str, visibility: VisibilitySettings) -> None:
        ...

    def load_scoring_settings(self, league_id: str) -> Optional[ScoringSettings]:
        ...

    def save_scoring_settings(self, league_id: str, scoring: ScoringSettings) -> None:
        ...

    def load_adjustments(self, league_id: str) -> Dict[str, List[ScoreAdjustment]]:
        """Adjustments keyed by entry owner."""
        ...

    def save_adjustments(self, league_id: str, adjustments: Dict[str, List[ScoreAdjustment]]) -> None:
        ...

    def save_scores(self, league_id: str, scores: pl.DataFrame) -> None:
        """Write the derived score cache."""
        ...

    def load_scores(self, league_id: str) -> pl.DataFrame:
        ...

    def load_winners(self, league_id: str) -> Optional[LeagueWinners]:
        ...

    def save_winners(self, league_id: str, winners: LeagueWinners) -> None:
        ...
