"""
Scoring Engine.

Compares an entry's picks to the official results and produces a score
breakdown. Scoring is a pure function of its inputs:

- unresolved matchups contribute nothing, so partial tournaments score fine
  and adding results can only raise a score
- malformed or missing picks withhold points and never raise, so a
  leaderboard can always be rendered
"""
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from bracket_league.bracket.results import OfficialResults
from bracket_league.bracket.structure import BracketStructure
from bracket_league.entries.entry import Entry, normalize_picks
from bracket_league.scoring.adjustments import ScoreAdjustment, total_adjustment
from bracket_league.scoring.extras import score_extras
from bracket_league.scoring.settings import ScoringSettings
from bracket_league.utils.observability import Logger, get_metrics

logger = Logger(__name__)


@dataclass
class RoundScore:
    """Points earned in one round."""
    correct: int = 0
    base: float = 0.0
    bonus: float = 0.0
    possible: float = 0.0       # base points available from resolved matchups

    @property
    def total(self) -> float:
        return self.base + self.bonus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correct": self.correct,
            "base": self.base,
            "bonus": self.bonus,
            "total": self.total,
            "possible": self.possible,
        }


@dataclass
class ScoreBreakdown:
    """Derived score for one entry. Recomputed whenever results change."""
    owner_id: Optional[str]
    base_points: float = 0.0
    bonus_points: float = 0.0
    adjustment_points: float = 0.0
    extra_points: float = 0.0         # series length, Finals MVP, play-in
    correct_picks: int = 0
    rounds: Dict[str, RoundScore] = field(default_factory=dict)
    max_possible_remaining: float = 0.0
    ignored_picks: int = 0
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def total(self) -> float:
        return self.base_points + self.bonus_points + self.extra_points + self.adjustment_points

    @property
    def possible_total(self) -> float:
        """Best total still reachable if every live pick comes in."""
        return self.total + self.max_possible_remaining

    @property
    def correct_by_round(self) -> Dict[str, int]:
        return {key: r.correct for key, r in self.rounds.items()}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the score cache."""
        return {
            "owner_id": self.owner_id,
            "total": self.total,
            "base_points": self.base_points,
            "bonus_points": self.bonus_points,
            "adjustment_points": self.adjustment_points,
            "extra_points": self.extra_points,
            "correct_picks": self.correct_picks,
            "max_possible_remaining": self.max_possible_remaining,
            "possible_total": self.possible_total,
            "rounds": {key: r.to_dict() for key, r in self.rounds.items()},
            "extras": dict(self.extras),
        }


def default_points(structure: BracketStructure) -> Dict[str, float]:
    """Doubling points per round: 1, 2, 4, ... for the Championship."""
    return {key: float(2 ** i) for i, key in enumerate(structure.round_keys)}


def _same_team(a: Optional[str], b: Optional[str]) -> bool:
    if a is None or b is None:
        return False
    return str(a).strip() == str(b).strip()


def eliminated_teams(structure: BracketStructure, results: OfficialResults) -> Set[str]:
    """Teams that lost a resolved matchup."""
    out = set()
    for matchup_id in structure.matchups:
        winner = results.winner(matchup_id)
        if winner is None:
            continue
        for team_id in structure.participants(matchup_id, results):
            if team_id is not None and team_id != winner:
                out.add(team_id)
    return out


def max_possible_remaining(
    picks: Mapping[str, str],
    structure: BracketStructure,
    results: OfficialResults,
    scoring_settings: ScoringSettings,
    points: Mapping[str, float],
) -> float:
    """Base points still available from unresolved matchups whose picked team is alive."""
    out = eliminated_teams(structure, results)
    remaining = 0.0
    for matchup in structure.all_matchups:
        if results.is_resolved(matchup.matchup_id):
            continue
        picked = picks.get(matchup.matchup_id)
        if picked is not None and picked not in out:
            remaining += scoring_settings.points_for(matchup.round_key, points)
    return remaining


def score(
    entry: Optional[Entry],
    structure: BracketStructure,
    official_results: OfficialResults,
    scoring_settings: Optional[ScoringSettings] = None,
    default_points_by_round: Optional[Mapping[str, float]] = None,
    adjustments: Optional[Iterable[ScoreAdjustment]] = None,
) -> ScoreBreakdown:
    """
    Score one entry against the official results.

    Args:
        entry: The participant's entry (None or malformed picks score zero)
        structure: Bracket the picks refer to
        official_results: Results recorded so far, possibly partial
        scoring_settings: League scoring settings; defaults award no bonus
        default_points_by_round: Base points for rounds the settings leave out
        adjustments: Manual admin adjustments for this entry

    Bonus predictions in entry.extras are scored on top when the settings
    enable them.

    Returns:
        ScoreBreakdown with per-round subtotals
    """
    settings = scoring_settings or ScoringSettings()
    points = default_points_by_round if default_points_by_round is not None else default_points(structure)
    results = official_results.snapshot()
    picks = normalize_picks(getattr(entry, "picks", None))

    breakdown = ScoreBreakdown(
        owner_id=getattr(entry, "owner_id", None),
        rounds={key: RoundScore() for key in structure.round_keys},
    )

    for matchup in structure.all_matchups:
        winner = results.winner(matchup.matchup_id)
        if winner is None:
            continue

        round_score = breakdown.rounds[matchup.round_key]
        value = settings.points_for(matchup.round_key, points)
        round_score.possible += value

        if not _same_team(picks.get(matchup.matchup_id), winner):
            continue

        round_score.correct += 1
        round_score.base += value
        breakdown.correct_picks += 1
        breakdown.base_points += value

        participants = structure.participants(matchup.matchup_id, results)
        opponent = next((t for t in participants if t is not None and t != winner), None)
        bonus = settings.upset_bonus(structure.seed_of(winner), structure.seed_of(opponent))
        round_score.bonus += bonus
        breakdown.bonus_points += bonus

    extras = score_extras(
        normalize_picks(getattr(entry, "extras", None)),
        picks, structure, results, settings, eliminated_teams(structure, results),
    )
    breakdown.extra_points = extras.total
    breakdown.extras = extras.to_dict()

    breakdown.ignored_picks = sum(1 for mid in picks if mid not in structure)
    if breakdown.ignored_picks:
        logger.log_debug("picks_ignored", owner_id=breakdown.owner_id, count=breakdown.ignored_picks)
    breakdown.adjustment_points = total_adjustment(adjustments)
    breakdown.max_possible_remaining = max_possible_remaining(
        picks, structure, results, settings, points
    ) + extras.remaining
    return breakdown


def score_entries(
    entries: Iterable[Entry],
    structure: BracketStructure,
    official_results: OfficialResults,
    scoring_settings: Optional[ScoringSettings] = None,
    default_points_by_round: Optional[Mapping[str, float]] = None,
    adjustments: Optional[Mapping[str, List[ScoreAdjustment]]] = None,
    game_type: str = "custom",
) -> List[ScoreBreakdown]:
    """Score many entries against one results snapshot."""
    metrics = get_metrics()
    snapshot = official_results.snapshot()
    adjustments = adjustments or {}
    start = time.perf_counter()

    breakdowns = []
    for entry in entries:
        breakdown = score(
            entry,
            structure,
            snapshot,
            scoring_settings,
            default_points_by_round,
            adjustments.get(entry.owner_id),
        )
        if breakdown.ignored_picks:
            metrics.ignored_picks.inc(breakdown.ignored_picks)
        breakdowns.append(breakdown)

    elapsed = time.perf_counter() - start
    metrics.scoring_latency.observe(elapsed)
    metrics.entries_scored.labels(game_type=game_type).inc(len(breakdowns))
    logger.log_event(
        "entries_scored",
        game_type=game_type,
        count=len(breakdowns),
        resolved_matchups=len(snapshot),
        duration_ms=round(elapsed * 1000, 2),
    )
    return breakdowns
