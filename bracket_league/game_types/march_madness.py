"""
NCAA March Madness: four regions of 16 seeds, 64 teams, six rounds.
"""
from bracket_league.bracket.model import DEFAULT_REGION_MATCHUP_CONFIG
from bracket_league.game_types.base import BracketGameType
from bracket_league.game_types.registry import GameTypeRegistry


MARCH_MADNESS = GameTypeRegistry.register(BracketGameType(
    type_id="march_madness",
    name="March Madness Bracket",
    description="Predict the winners of the NCAA basketball tournament",
    region_names=("East", "West", "South", "Midwest"),
    seed_count=16,
    round_keys=("RoundOf64", "RoundOf32", "Sweet16", "Elite8", "FinalFour", "Championship"),
    round_display_names={
        "RoundOf64": "Round of 64",
        "RoundOf32": "Round of 32",
        "Sweet16": "Sweet 16",
        "Elite8": "Elite 8",
        "FinalFour": "Final Four",
        "Championship": "Championship",
    },
    default_points={
        "RoundOf64": 1.0,
        "RoundOf32": 2.0,
        "Sweet16": 4.0,
        "Elite8": 8.0,
        "FinalFour": 16.0,
        "Championship": 32.0,
    },
    default_region_config=DEFAULT_REGION_MATCHUP_CONFIG,
))
