"""
Official Results.

The authoritative record of each matchup's actual winner, filled in round by
round as games complete. Recording a different winner for a matchup that
already has one is a correction: it is logged, kept in the correction log,
and any later results that had advanced the old winner are cleared.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bracket_league.bracket.extras import SERIES_LENGTH, series_length_key, split_key, validate_extra
from bracket_league.bracket.structure import BracketStructure
from bracket_league.exceptions import InvalidResultError
from bracket_league.utils.observability import Logger, get_metrics

logger = Logger(__name__)


@dataclass(frozen=True)
class ResultCorrection:
    """A recorded winner that was later changed."""
    matchup_id: str
    previous_winner: str
    new_winner: Optional[str]
    corrected_at: datetime
    cleared: tuple = ()             # downstream matchups whose results were dropped


@dataclass
class OfficialResults:
    """Matchup id -> winning team id, the correction log and any bonus outcomes."""
    winners: Dict[str, str] = field(default_factory=dict)
    corrections: List[ResultCorrection] = field(default_factory=list)
    extras: Dict[str, str] = field(default_factory=dict)

    def winner(self, matchup_id: str) -> Optional[str]:
        value = self.winners.get(matchup_id)
        return value if value else None

    def is_resolved(self, matchup_id: str) -> bool:
        return self.winner(matchup_id) is not None

    def resolved_ids(self) -> List[str]:
        return [mid for mid, team in self.winners.items() if team]

    def snapshot(self) -> "OfficialResults":
        """Independent copy, safe to score while the original is edited."""
        return OfficialResults(
            winners=dict(self.winners),
            corrections=list(self.corrections),
            extras=dict(self.extras),
        )

    def __len__(self) -> int:
        return len(self.resolved_ids())


def is_tournament_complete(structure: BracketStructure, results: OfficialResults) -> bool:
    """True once the Championship has a recorded winner."""
    return results.is_resolved(structure.championship.matchup_id)


def champion(structure: BracketStructure, results: OfficialResults) -> Optional[str]:
    return results.winner(structure.championship.matchup_id)


def _clear_dependents(
    structure: BracketStructure,
    results: OfficialResults,
    matchup_id: str,
    team_id: str,
) -> List[str]:
    """Drop later results that advanced team_id out of matchup_id."""
    cleared = []
    for later in structure.downstream(matchup_id):
        if results.winners.get(later) == team_id:
            del results.winners[later]
            results.extras.pop(series_length_key(later), None)
            cleared.append(later)
        else:
            break
    return cleared


def record_result(
    structure: BracketStructure,
    results: OfficialResults,
    matchup_id: str,
    winner_id: str,
    now: Optional[datetime] = None,
) -> OfficialResults:
    """
    Record the actual winner of a matchup.

    Args:
        structure: Bracket the matchup belongs to
        results: Results to update in place
        matchup_id: Matchup that finished
        winner_id: Team id of the winner

    Returns:
        The updated results

    Raises:
        InvalidResultError: If the matchup is unknown or the winner did not
            play in it
    """
    if matchup_id not in structure:
        raise InvalidResultError(matchup_id, "matchup is not part of this bracket")

    participants = structure.participants(matchup_id, results)
    if None in participants:
        raise InvalidResultError(matchup_id, "participants are not decided yet")
    if winner_id not in participants:
        raise InvalidResultError(
            matchup_id, f"{winner_id} is not one of {participants[0]}, {participants[1]}"
        )

    previous = results.winner(matchup_id)
    if previous == winner_id:
        return results

    if previous is not None:
        cleared = _clear_dependents(structure, results, matchup_id, previous)
        correction = ResultCorrection(
            matchup_id=matchup_id,
            previous_winner=previous,
            new_winner=winner_id,
            corrected_at=now or datetime.now(timezone.utc),
            cleared=tuple(cleared),
        )
        results.corrections.append(correction)
        get_metrics().result_corrections.inc()
        logger.log_warning(
            "official_result_corrected",
            matchup_id=matchup_id,
            previous_winner=previous,
            new_winner=winner_id,
            cleared=cleared,
        )

    results.winners[matchup_id] = winner_id
    logger.log_event("official_result_recorded", matchup_id=matchup_id, winner=winner_id)
    return results


def clear_result(
    structure: BracketStructure,
    results: OfficialResults,
    matchup_id: str,
    now: Optional[datetime] = None,
) -> OfficialResults:
    """Remove a recorded winner and the later results that depended on it."""
    previous = results.winner(matchup_id)
    if previous is None:
        return results

    cleared = _clear_dependents(structure, results, matchup_id, previous)
    del results.winners[matchup_id]
    results.extras.pop(series_length_key(matchup_id), None)
    results.corrections.append(ResultCorrection(
        matchup_id=matchup_id,
        previous_winner=previous,
        new_winner=None,
        corrected_at=now or datetime.now(timezone.utc),
        cleared=tuple(cleared),
    ))
    get_metrics().result_corrections.inc()
    logger.log_warning("official_result_cleared", matchup_id=matchup_id, cleared=cleared)
    return results


def record_extra(
    structure: BracketStructure,
    results: OfficialResults,
    key: str,
    value: str,
) -> OfficialResults:
    """
    Record the outcome of a bonus prediction (series length, Finals MVP,
    play-in winner).

    A series length can only be recorded once the series has a winner.

    Raises:
        InvalidResultError: If the key is unknown or the value is invalid
    """
    value = validate_extra(structure, key, value)
    category, parts = split_key(key)
    if category == SERIES_LENGTH and not results.is_resolved(parts[0]):
        raise InvalidResultError(key, "series has no recorded winner yet")

    previous = results.extras.get(key)
    if previous == value:
        return results
    if previous is not None:
        logger.log_warning("official_extra_corrected", key=key, previous=previous, new=value)

    results.extras[key] = value
    logger.log_event("official_extra_recorded", key=key, value=value)
    return results


def clear_extra(results: OfficialResults, key: str) -> OfficialResults:
    if results.extras.pop(key, None) is not None:
        logger.log_warning("official_extra_cleared", key=key)
    return results


def results_from_dict(data: Dict[str, Any]) -> OfficialResults:
    """Load results from their stored document ({"winners": {...}, "corrections": [...]})."""
    corrections = [
        ResultCorrection(
            matchup_id=c["matchup_id"],
            previous_winner=c["previous_winner"],
            new_winner=c.get("new_winner"),
            corrected_at=datetime.fromisoformat(c["corrected_at"]),
            cleared=tuple(c.get("cleared", ())),
        )
        for c in data.get("corrections", [])
    ]
    winners = {str(k): str(v) for k, v in data.get("winners", {}).items() if v}
    extras = {str(k): str(v) for k, v in data.get("extras", {}).items() if v}
    return OfficialResults(winners=winners, corrections=corrections, extras=extras)


def results_to_dict(results: OfficialResults) -> Dict[str, Any]:
    return {
        "winners": dict(results.winners),
        "corrections": [
            {
                "matchup_id": c.matchup_id,
                "previous_winner": c.previous_winner,
                "new_winner": c.new_winner,
                "corrected_at": c.corrected_at.isoformat(),
                "cleared": list(c.cleared),
            }
            for c in results.corrections
        ],
        "extras": dict(results.extras),
    }
