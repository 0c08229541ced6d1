"""
Ranking & Winner Resolver.

Ranking (leaderboard display) works on partial results at any time.
Winner determination is separate and only allowed once the Championship
has a recorded winner; every entry tied on the top score wins.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

import polars as pl

from bracket_league.bracket.results import OfficialResults, is_tournament_complete
from bracket_league.bracket.structure import BracketStructure
from bracket_league.entries.entry import Entry
from bracket_league.exceptions import NoEntriesError, ResultsIncompleteError
from bracket_league.scoring.adjustments import ScoreAdjustment
from bracket_league.scoring.engine import ScoreBreakdown, score_entries
from bracket_league.scoring.settings import ScoringSettings
from bracket_league.utils.observability import Logger, get_metrics

logger = Logger(__name__)


@dataclass(frozen=True)
class RankedEntry:
    """One leaderboard row."""
    rank: int           # competition rank, ties share a rank (1, 1, 3)
    position: int       # 1-based display position, unique
    entry: Entry
    breakdown: ScoreBreakdown

    @property
    def owner_id(self) -> str:
        return self.entry.owner_id

    @property
    def total(self) -> float:
        return self.breakdown.total


@dataclass(frozen=True)
class LeagueWinners:
    """Owners tied on the maximum score when the league was finalized."""
    owner_ids: FrozenSet[str]
    winning_score: float
    finalized_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner_ids": sorted(self.owner_ids),
            "winning_score": self.winning_score,
            "finalized_at": self.finalized_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeagueWinners":
        return cls(
            owner_ids=frozenset(data["owner_ids"]),
            winning_score=float(data["winning_score"]),
            finalized_at=datetime.fromisoformat(data["finalized_at"]),
        )


def _participants(entries: Iterable[Entry]) -> List[Entry]:
    return [e for e in entries if not e.is_official]


def rank(
    entries: Iterable[Entry],
    structure: BracketStructure,
    official_results: OfficialResults,
    scoring_settings: Optional[ScoringSettings] = None,
    default_points_by_round: Optional[Mapping[str, float]] = None,
    adjustments: Optional[Mapping[str, List[ScoreAdjustment]]] = None,
    game_type: str = "custom",
) -> List[RankedEntry]:
    """
    Order entries by total score, highest first.

    The sort is stable, so tied entries keep their submission order for
    display. The official reference entry is never ranked.
    """
    participants = _participants(entries)
    breakdowns = score_entries(
        participants,
        structure,
        official_results,
        scoring_settings,
        default_points_by_round,
        adjustments,
        game_type,
    )
    scored = sorted(zip(participants, breakdowns), key=lambda pair: -pair[1].total)

    ranked = []
    previous_total = None
    current_rank = 0
    for position, (entry, breakdown) in enumerate(scored, start=1):
        if breakdown.total != previous_total:
            current_rank = position
            previous_total = breakdown.total
        ranked.append(RankedEntry(rank=current_rank, position=position, entry=entry, breakdown=breakdown))
    return ranked


def determine_winners(
    entries: Iterable[Entry],
    structure: BracketStructure,
    official_results: OfficialResults,
    scoring_settings: Optional[ScoringSettings] = None,
    default_points_by_round: Optional[Mapping[str, float]] = None,
    adjustments: Optional[Mapping[str, List[ScoreAdjustment]]] = None,
    game_type: str = "custom",
) -> FrozenSet[str]:
    """
    Owners of every entry whose score equals the maximum.

    Raises:
        NoEntriesError: If there are no participant entries
        ResultsIncompleteError: If the Championship has no recorded winner
    """
    return _resolve(
        entries, structure, official_results, scoring_settings,
        default_points_by_round, adjustments, game_type,
    ).owner_ids


def finalize_winners(
    entries: Iterable[Entry],
    structure: BracketStructure,
    official_results: OfficialResults,
    scoring_settings: Optional[ScoringSettings] = None,
    default_points_by_round: Optional[Mapping[str, float]] = None,
    adjustments: Optional[Mapping[str, List[ScoreAdjustment]]] = None,
    game_type: str = "custom",
    now: Optional[datetime] = None,
) -> LeagueWinners:
    """determine_winners, stamped with the winning score and time for storage."""
    return _resolve(
        entries, structure, official_results, scoring_settings,
        default_points_by_round, adjustments, game_type, now,
    )


def _resolve(
    entries,
    structure,
    official_results,
    scoring_settings,
    default_points_by_round,
    adjustments,
    game_type,
    now=None,
) -> LeagueWinners:
    metrics = get_metrics()
    participants = _participants(entries)

    if not participants:
        metrics.winners_determined.labels(status="no_entries").inc()
        raise NoEntriesError("No entries found to determine winners")

    if not is_tournament_complete(structure, official_results):
        metrics.winners_determined.labels(status="incomplete").inc()
        raise ResultsIncompleteError(structure.championship.matchup_id)

    ranked = rank(
        participants, structure, official_results, scoring_settings,
        default_points_by_round, adjustments, game_type,
    )
    winning_score = ranked[0].total
    owners = frozenset(r.owner_id for r in ranked if r.total == winning_score)

    metrics.winners_determined.labels(status="success").inc()
    logger.log_event(
        "league_winners_determined",
        winners=sorted(owners),
        winning_score=winning_score,
        entries=len(participants),
    )
    return LeagueWinners(
        owner_ids=owners,
        winning_score=winning_score,
        finalized_at=now or datetime.now(timezone.utc),
    )


def leaderboard_frame(ranked: List[RankedEntry]) -> pl.DataFrame:
    """Tabular leaderboard for display or export."""
    schema = {
        "rank": pl.Int64,
        "owner_id": pl.Utf8,
        "total": pl.Float64,
        "base_points": pl.Float64,
        "bonus_points": pl.Float64,
        "extra_points": pl.Float64,
        "adjustment_points": pl.Float64,
        "correct_picks": pl.Int64,
        "max_possible_remaining": pl.Float64,
        "possible_total": pl.Float64,
    }
    rows = [
        {
            "rank": r.rank,
            "owner_id": r.owner_id,
            "total": float(r.breakdown.total),
            "base_points": float(r.breakdown.base_points),
            "bonus_points": float(r.breakdown.bonus_points),
            "extra_points": float(r.breakdown.extra_points),
            "adjustment_points": float(r.breakdown.adjustment_points),
            "correct_picks": r.breakdown.correct_picks,
            "max_possible_remaining": float(r.breakdown.max_possible_remaining),
            "possible_total": float(r.breakdown.possible_total),
        }
        for r in ranked
    ]
    return pl.DataFrame(rows, schema=schema)
