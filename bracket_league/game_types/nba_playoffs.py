"""
NBA Playoffs: two conferences of 8 seeds; conference champions meet in the Finals.

Entries may also call series lengths, the Finals MVP and the play-in games.
"""
from bracket_league.bracket.extras import EXTRA_CATEGORIES
from bracket_league.game_types.base import BracketGameType
from bracket_league.game_types.registry import GameTypeRegistry


NBA_PLAYOFFS = GameTypeRegistry.register(BracketGameType(
    type_id="nba_playoffs",
    name="NBA Playoffs Bracket",
    description="Predict the winners of the NBA playoffs",
    region_names=("East", "West"),
    seed_count=8,
    round_keys=("FirstRound", "ConferenceSemifinals", "ConferenceFinals", "NBAFinals"),
    round_display_names={
        "FirstRound": "First Round",
        "ConferenceSemifinals": "Conference Semifinals",
        "ConferenceFinals": "Conference Finals",
        "NBAFinals": "NBA Finals",
    },
    default_points={
        "FirstRound": 1.0,
        "ConferenceSemifinals": 2.0,
        "ConferenceFinals": 3.0,
        "NBAFinals": 4.0,
    },
    extra_categories=EXTRA_CATEGORIES,
    default_series_bonus={
        "FirstRound": 0.5,
        "ConferenceSemifinals": 1.0,
        "ConferenceFinals": 1.5,
        "NBAFinals": 2.0,
    },
))
