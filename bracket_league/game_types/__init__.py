"""
Game types package - pluggable tournament formats.

Usage:
    from bracket_league.game_types import get_game_type

    game_type = get_game_type("march_madness")
    structure = game_type.build_structure(regions, region_matchup_config)
"""
# Import registry first
from .base import BracketGameType, GameType
from .registry import GameTypeRegistry

# Import format modules to register them
from .march_madness import MARCH_MADNESS
from .nba_playoffs import NBA_PLAYOFFS


def get_game_type(type_id: str) -> GameType:
    return GameTypeRegistry.get(type_id)


__all__ = [
    "BracketGameType",
    "GameType",
    "GameTypeRegistry",
    "MARCH_MADNESS",
    "NBA_PLAYOFFS",
    "get_game_type",
]
