"""
Bonus predictions recorded alongside the bracket.

Some formats ask for more than a winner per matchup: how many games a
series went, the Finals MVP, the play-in winners. Entries and official
results both carry these as string key/value pairs:

    series_length:<matchup_id>      "4" .. "7"
    finals_mvp                      player name
    play_in:<conference>:<game>     team id
"""
from typing import Optional, Tuple

from bracket_league.bracket.structure import BracketStructure
from bracket_league.exceptions import InvalidResultError


SERIES_LENGTH = "series_length"
FINALS_MVP = "finals_mvp"
PLAY_IN = "play_in"
EXTRA_CATEGORIES = (SERIES_LENGTH, FINALS_MVP, PLAY_IN)

FINALS_MVP_KEY = FINALS_MVP
SERIES_GAMES = (4, 5, 6, 7)
PLAY_IN_GAMES = ("seventh_eighth", "ninth_tenth", "final")


def series_length_key(matchup_id: str) -> str:
    return f"{SERIES_LENGTH}:{matchup_id}"


def play_in_key(conference: str, game: str) -> str:
    return f"{PLAY_IN}:{conference}:{game}"


def split_key(key: str) -> Tuple[Optional[str], Tuple[str, ...]]:
    """Category and remaining parts of an extras key; category is None if unknown."""
    category, _, rest = key.partition(":")
    if category not in EXTRA_CATEGORIES:
        return None, ()
    return category, tuple(rest.split(":")) if rest else ()


def series_games(value: Optional[str]) -> Optional[int]:
    """Parse a series length, None unless it is one of 4..7."""
    try:
        games = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return games if games in SERIES_GAMES else None


def validate_extra(structure: BracketStructure, key: str, value: str) -> str:
    """
    Check an official extras value against the bracket.

    Returns:
        The normalized value to store

    Raises:
        InvalidResultError: If the key or value cannot be recorded
    """
    category, parts = split_key(key)
    value = str(value).strip() if value is not None else ""
    if not value:
        raise InvalidResultError(key, "value is empty")

    if category == SERIES_LENGTH:
        if len(parts) != 1 or parts[0] not in structure:
            raise InvalidResultError(key, "series length must name a bracket matchup")
        games = series_games(value)
        if games is None:
            raise InvalidResultError(key, f"series length must be one of {SERIES_GAMES}, got {value}")
        return str(games)

    if category == FINALS_MVP:
        if parts:
            raise InvalidResultError(key, "finals MVP key takes no qualifier")
        return value

    if category == PLAY_IN:
        if len(parts) != 2:
            raise InvalidResultError(key, "play-in key must be play_in:<conference>:<game>")
        conference, game = parts
        if conference not in structure.region_names:
            raise InvalidResultError(key, f"unknown conference {conference}")
        if game not in PLAY_IN_GAMES:
            raise InvalidResultError(key, f"play-in game must be one of {PLAY_IN_GAMES}")
        return value

    raise InvalidResultError(key, "unknown bonus prediction")
