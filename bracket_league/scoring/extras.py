"""
Bonus prediction scoring: series length, Finals MVP and play-in winners.

A series-length call only pays when the entry also had the right winner and
the same two teams in the series. Predictions whose official outcome is not
recorded yet count toward the points still available.
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Set

from bracket_league.bracket.extras import (
    FINALS_MVP,
    PLAY_IN,
    PLAY_IN_GAMES,
    SERIES_LENGTH,
    series_games,
    split_key,
)
from bracket_league.bracket.results import OfficialResults
from bracket_league.bracket.structure import BracketStructure
from bracket_league.scoring.settings import ScoringSettings


@dataclass
class ExtrasScore:
    """Points from bonus predictions, by category."""
    series_length: float = 0.0
    finals_mvp: float = 0.0
    play_in: float = 0.0
    correct: int = 0
    remaining: float = 0.0

    @property
    def total(self) -> float:
        return self.series_length + self.finals_mvp + self.play_in

    def to_dict(self) -> Dict[str, Any]:
        return {
            SERIES_LENGTH: self.series_length,
            FINALS_MVP: self.finals_mvp,
            PLAY_IN: self.play_in,
            "correct": self.correct,
        }


def _same_value(a: Optional[str], b: Optional[str]) -> bool:
    if a is None or b is None:
        return False
    return str(a).strip().casefold() == str(b).strip().casefold()


def _teams_match(
    picks: Mapping[str, str],
    structure: BracketStructure,
    results: OfficialResults,
    matchup_id: str,
) -> bool:
    """True if the entry advanced the same two teams into the series that actually met."""
    for feeder in structure.matchups[matchup_id].feeders:
        if not _same_value(picks.get(feeder), results.winner(feeder)):
            return False
    return True


def score_extras(
    extras: Mapping[str, str],
    picks: Mapping[str, str],
    structure: BracketStructure,
    results: OfficialResults,
    scoring_settings: ScoringSettings,
    eliminated: Optional[Set[str]] = None,
) -> ExtrasScore:
    """
    Score an entry's bonus predictions.

    Args:
        extras: The entry's bonus predictions
        picks: The entry's matchup picks, used to gate series-length calls
        structure: Bracket the series keys refer to
        results: Official results, including recorded bonus outcomes
        scoring_settings: Toggles and point values
        eliminated: Teams already knocked out, for the remaining-points estimate

    Returns:
        ExtrasScore; unknown or malformed keys are ignored
    """
    settings = scoring_settings
    eliminated = eliminated or set()
    out = ExtrasScore()

    for key, predicted in extras.items():
        category, parts = split_key(key)

        if category == SERIES_LENGTH:
            if not settings.series_length_bonus_enabled or len(parts) != 1 or parts[0] not in structure:
                continue
            matchup_id = parts[0]
            bonus = settings.series_bonus_for(structure.matchups[matchup_id].round_key)
            guess = series_games(predicted)
            picked = picks.get(matchup_id)
            if guess is None or picked is None or bonus == 0:
                continue
            winner = results.winner(matchup_id)
            actual = series_games(results.extras.get(key))
            if winner is None:
                if picked not in eliminated:
                    out.remaining += bonus
            elif (
                actual == guess
                and _same_value(picked, winner)
                and _teams_match(picks, structure, results, matchup_id)
            ):
                out.series_length += bonus
                out.correct += 1

        elif category == FINALS_MVP:
            if not settings.finals_mvp_enabled or parts:
                continue
            actual = results.extras.get(key)
            if actual is None:
                out.remaining += settings.finals_mvp_points
            elif _same_value(predicted, actual):
                out.finals_mvp += settings.finals_mvp_points
                out.correct += 1

        elif category == PLAY_IN:
            if not settings.play_in_enabled or len(parts) != 2 or parts[1] not in PLAY_IN_GAMES:
                continue
            actual = results.extras.get(key)
            if actual is None:
                out.remaining += settings.play_in_points
            elif _same_value(predicted, actual):
                out.play_in += settings.play_in_points
                out.correct += 1

    return out
