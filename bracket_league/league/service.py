"""
League Service - orchestrates the engine over stored league documents.

Every call loads what it needs from the repository, runs the pure engine
functions and writes back only what changed. Scores are derived data: the
cache is rewritten whenever results or adjustments change, and the
leaderboard itself is always computed fresh.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

import polars as pl

from bracket_league.bracket.model import Region, RegionMatchupConfig
from bracket_league.bracket.results import (
    OfficialResults,
    clear_extra,
    clear_result,
    record_extra,
    record_result,
)
from bracket_league.bracket.structure import BracketStructure
from bracket_league.bracket.validator import (
    RegionConfigProblem,
    check_region_config,
    require_valid_region_config,
)
from bracket_league.config import settings
from bracket_league.core.container import ServiceContainer
from bracket_league.core.protocols import LeagueRepository
from bracket_league.entries.entry import OFFICIAL_ENTRY_ID, Entry
from bracket_league.entries.store import EntryBook
from bracket_league.exceptions import InvalidResultError, LeagueFinalizedError, StructureError
from bracket_league.game_types.base import GameType
from bracket_league.game_types.registry import GameTypeRegistry
from bracket_league.ranking.resolver import LeagueWinners, RankedEntry, leaderboard_frame
from bracket_league.scoring.adjustments import ScoreAdjustment, new_adjustment
from bracket_league.scoring.settings import ScoringSettings
from bracket_league.utils.observability import Logger
from bracket_league.visibility.gate import (
    AdminVisibilityPolicy,
    VisibilitySettings,
    gate_for,
)

logger = Logger(__name__)

STATUS_DRAFT = "draft"
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class LeagueService:
    """
    High-level league operations.

    Usage:
        service = LeagueService()
        service.create_league("office-pool", "Office Pool", "march_madness")
        service.set_regions("office-pool", regions)
        service.activate("office-pool")
        service.submit_entry("office-pool", "alice", picks)
        rows = service.leaderboard("office-pool", viewer_id="alice")
    """

    def __init__(
        self,
        repository: Optional[LeagueRepository] = None,
        game_type: Optional[GameType] = None,
    ):
        self.repository = repository or ServiceContainer.get_repository()
        self._game_type = game_type

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def game_type(self, league_id: str) -> GameType:
        if self._game_type is not None:
            return self._game_type
        league = self.repository.load_league(league_id)
        return GameTypeRegistry.get(league["game_type"])

    def structure(self, league_id: str) -> BracketStructure:
        """Build the bracket from the stored regions and semifinal config."""
        regions = self.repository.load_regions(league_id)
        if not regions:
            raise StructureError(f"League {league_id} has no regions")
        config = self.repository.load_region_config(league_id)
        return self.game_type(league_id).build_structure(regions, config)

    def scoring_settings(self, league_id: str) -> ScoringSettings:
        stored = self.repository.load_scoring_settings(league_id)
        return stored if stored is not None else settings.scoring.to_scoring_settings()

    def visibility_settings(self, league_id: str) -> VisibilitySettings:
        stored = self.repository.load_visibility(league_id)
        if stored is not None:
            return stored
        return VisibilitySettings(
            fog_of_war_enabled=settings.visibility.fog_of_war_enabled,
            admin_policy=(
                AdminVisibilityPolicy.EXEMPT
                if settings.visibility.admin_exempt
                else AdminVisibilityPolicy.SUBJECT_TO_FOG
            ),
        )

    def entry_book(self, league_id: str) -> EntryBook:
        league = self.repository.load_league(league_id)
        return EntryBook(
            lock_time=_parse_time(league.get("lock_time")),
            entries=self.repository.load_entries(league_id),
        )

    def is_admin(self, league_id: str, viewer_id: Optional[str]) -> bool:
        league = self.repository.load_league(league_id)
        return viewer_id is not None and viewer_id in league.get("admin_ids", [])

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def create_league(
        self,
        league_id: str,
        name: str,
        game_type: str = "march_madness",
        lock_time: Optional[datetime] = None,
        admin_ids: Iterable[str] = (),
        fog_of_war_enabled: Optional[bool] = None,
        scoring_settings: Optional[ScoringSettings] = None,
    ) -> Dict[str, Any]:
        # Fail fast on unknown or disabled formats
        GameTypeRegistry.get(game_type)

        league = {
            "league_id": league_id,
            "name": name,
            "game_type": game_type,
            "lock_time": lock_time.isoformat() if lock_time else None,
            "admin_ids": list(admin_ids),
            "status": STATUS_DRAFT,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self.repository.save_league(league_id, league)

        visibility = self.visibility_settings(league_id)
        if fog_of_war_enabled is not None:
            visibility = VisibilitySettings(
                fog_of_war_enabled=fog_of_war_enabled,
                admin_policy=visibility.admin_policy,
            )
        self.repository.save_visibility(league_id, visibility)
        self.repository.save_scoring_settings(
            league_id, scoring_settings or settings.scoring.to_scoring_settings()
        )

        logger.log_event("league_created", league_id=league_id, game_type=game_type)
        return league

    def set_regions(self, league_id: str, regions: List[Region]) -> None:
        self.repository.save_regions(league_id, list(regions))

    def set_region_config(
        self,
        league_id: str,
        config: RegionMatchupConfig,
    ) -> List[RegionConfigProblem]:
        """
        Save the semifinal pairing while editing.

        Conflicts are reported as warnings and the config is saved anyway;
        activation is where an invalid config is refused.
        """
        problems = self.validate_config(league_id, config)
        self.repository.save_region_config(league_id, config)
        return problems

    def validate_config(
        self,
        league_id: str,
        config: Optional[RegionMatchupConfig] = None,
    ) -> List[RegionConfigProblem]:
        if config is None:
            config = self.repository.load_region_config(league_id)
        if config is None:
            return []
        regions = [r.name for r in self.repository.load_regions(league_id)] or None
        return check_region_config(config, regions)

    def activate(self, league_id: str) -> BracketStructure:
        """
        Open the league for entries.

        Raises:
            StructureError: If the region config or bracket input is invalid
        """
        league = self.repository.load_league(league_id)
        config = self.repository.load_region_config(league_id)
        if config is not None:
            regions = [r.name for r in self.repository.load_regions(league_id)] or None
            require_valid_region_config(config, regions)

        structure = self.structure(league_id)
        league["status"] = STATUS_ACTIVE
        self.repository.save_league(league_id, league)
        logger.log_event(
            "league_activated",
            league_id=league_id,
            matchups=structure.total_matchups,
            teams=structure.team_count,
        )
        return structure

    # ------------------------------------------------------------------
    # Entries and results
    # ------------------------------------------------------------------

    def submit_entry(
        self,
        league_id: str,
        owner_id: str,
        picks: Mapping[str, str],
        now: Optional[datetime] = None,
        extras: Optional[Mapping[str, str]] = None,
    ) -> Entry:
        """
        Bonus predictions the league's format does not score are dropped.

        Raises:
            ReservedOwnerIdError: If owner_id is the official entry's id
            EntryLockedError: If the league's lock time has passed
        """
        game_type = self.game_type(league_id)
        kept = {k: v for k, v in (extras or {}).items() if game_type.supports_extra(k)}
        if len(kept) != len(extras or {}):
            logger.log_warning(
                "unsupported_extras_dropped",
                owner_id=owner_id,
                keys=sorted(set(extras) - set(kept)),
            )
        entry = self.entry_book(league_id).submit(owner_id, picks, now, kept)
        self.repository.save_entry(league_id, entry)
        return entry

    def remove_entry(self, league_id: str, owner_id: str) -> None:
        self.repository.delete_entry(league_id, owner_id)
        logger.log_event("entry_removed", league_id=league_id, owner_id=owner_id)

    def _sync_official_entry(self, league_id: str, results: OfficialResults) -> None:
        book = self.entry_book(league_id)
        official = book.set_official(dict(results.winners), extras=dict(results.extras))
        self.repository.save_entry(league_id, official)

    def record_result(
        self,
        league_id: str,
        matchup_id: str,
        winner_id: str,
        now: Optional[datetime] = None,
    ) -> OfficialResults:
        """
        Record a matchup winner, mirror it into the official entry and
        rewrite the score cache.

        Raises:
            InvalidResultError: If the winner did not play in the matchup
        """
        structure = self.structure(league_id)
        results = self.repository.load_results(league_id)
        record_result(structure, results, matchup_id, winner_id, now)
        self.repository.save_results(league_id, results)
        self._sync_official_entry(league_id, results)
        self.refresh_scores(league_id)
        return results

    def clear_result(self, league_id: str, matchup_id: str) -> OfficialResults:
        structure = self.structure(league_id)
        results = self.repository.load_results(league_id)
        clear_result(structure, results, matchup_id)
        self.repository.save_results(league_id, results)
        self._sync_official_entry(league_id, results)
        self.refresh_scores(league_id)
        return results

    def record_extra(self, league_id: str, key: str, value: str) -> OfficialResults:
        """
        Record the outcome of a bonus prediction (series length, Finals MVP,
        play-in winner) and rescore.

        Raises:
            InvalidResultError: If the format has no such prediction or the
                value is invalid
        """
        if not self.game_type(league_id).supports_extra(key):
            raise InvalidResultError(key, "this format does not score that prediction")
        results = self.repository.load_results(league_id)
        record_extra(self.structure(league_id), results, key, value)
        self.repository.save_results(league_id, results)
        self._sync_official_entry(league_id, results)
        self.refresh_scores(league_id)
        return results

    def clear_extra(self, league_id: str, key: str) -> OfficialResults:
        results = clear_extra(self.repository.load_results(league_id), key)
        self.repository.save_results(league_id, results)
        self._sync_official_entry(league_id, results)
        self.refresh_scores(league_id)
        return results

    def add_adjustment(
        self,
        league_id: str,
        owner_id: str,
        value: float,
        reason: str,
        admin_id: str,
    ) -> ScoreAdjustment:
        """
        Raises:
            ValueError: If value is zero or reason/admin_id are missing
        """
        adjustment = new_adjustment(value, reason, admin_id)
        adjustments = self.repository.load_adjustments(league_id)
        adjustments.setdefault(owner_id, []).append(adjustment)
        self.repository.save_adjustments(league_id, adjustments)
        logger.log_event(
            "score_adjusted",
            league_id=league_id,
            owner_id=owner_id,
            value=adjustment.value,
            admin_id=admin_id,
        )
        self.refresh_scores(league_id)
        return adjustment

    # ------------------------------------------------------------------
    # Scoring and display
    # ------------------------------------------------------------------

    def _rank(self, league_id: str) -> List[RankedEntry]:
        structure = self.structure(league_id)
        return self.game_type(league_id).rank(
            self.repository.load_entries(league_id),
            structure,
            self.repository.load_results(league_id),
            self.scoring_settings(league_id),
            self.repository.load_adjustments(league_id),
        )

    def refresh_scores(self, league_id: str) -> pl.DataFrame:
        """Recompute every score and rewrite the cache."""
        frame = leaderboard_frame(self._rank(league_id))
        self.repository.save_scores(league_id, frame)
        return frame

    def leaderboard(
        self,
        league_id: str,
        viewer_id: Optional[str] = None,
        is_admin: Optional[bool] = None,
    ) -> List[RankedEntry]:
        """Ranked rows the viewer may see; hidden rows keep their place in the ranking."""
        if is_admin is None:
            is_admin = self.is_admin(league_id, viewer_id)
        gate = gate_for(
            self.visibility_settings(league_id),
            self.structure(league_id),
            self.repository.load_results(league_id),
        )
        return gate.filter_leaderboard(self._rank(league_id), viewer_id, is_admin)

    def visible_entries(
        self,
        league_id: str,
        viewer_id: Optional[str] = None,
        is_admin: Optional[bool] = None,
    ) -> List[Entry]:
        if is_admin is None:
            is_admin = self.is_admin(league_id, viewer_id)
        gate = gate_for(
            self.visibility_settings(league_id),
            self.structure(league_id),
            self.repository.load_results(league_id),
        )
        return gate.filter_entries(self.repository.load_entries(league_id), viewer_id, is_admin)

    def entry(self, league_id: str, owner_id: str) -> Optional[Entry]:
        return self.entry_book(league_id).get(owner_id)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def finalize(self, league_id: str, now: Optional[datetime] = None) -> LeagueWinners:
        """
        Determine and store the league winners.

        Raises:
            LeagueFinalizedError: If winners were already stored
            NoEntriesError: If nobody submitted an entry
            ResultsIncompleteError: If the Championship is undecided
        """
        existing = self.repository.load_winners(league_id)
        if existing is not None:
            raise LeagueFinalizedError(
                f"League {league_id} was finalized at {existing.finalized_at.isoformat()}"
            )

        winners = self.game_type(league_id).finalize_winners(
            self.repository.load_entries(league_id),
            self.structure(league_id),
            self.repository.load_results(league_id),
            self.scoring_settings(league_id),
            self.repository.load_adjustments(league_id),
            now,
        )
        self.repository.save_winners(league_id, winners)

        league = self.repository.load_league(league_id)
        league["status"] = STATUS_COMPLETED
        self.repository.save_league(league_id, league)
        self.repository.save_visibility(league_id, self.visibility_settings(league_id).completed())

        logger.log_event(
            "league_finalized",
            league_id=league_id,
            winners=sorted(winners.owner_ids),
            winning_score=winners.winning_score,
        )
        return winners

    def winners(self, league_id: str) -> Optional[LeagueWinners]:
        return self.repository.load_winners(league_id)

    def delete_league(self, league_id: str) -> None:
        """Remove every stored document for the league."""
        self.repository.load_league(league_id)
        self.repository.delete_league(league_id)
        logger.log_event("league_deleted", league_id=league_id)

    def metadata(self, league_id: str) -> Dict[str, Any]:
        league = self.repository.load_league(league_id)
        game_type = self.game_type(league_id)
        regions = self.repository.load_regions(league_id)
        structure = self.structure(league_id) if regions else None
        meta = game_type.get_metadata(structure, self.repository.load_results(league_id))
        meta.update({
            "league_id": league_id,
            "name": league.get("name"),
            "league_status": league.get("status", STATUS_DRAFT),
            "entries": sum(1 for e in self.repository.load_entries(league_id) if e.owner_id != OFFICIAL_ENTRY_ID),
        })
        return meta
