"""
Bracket League - scoring and visibility engine for bracket prediction leagues.

Usage:
    from bracket_league import build_structure, score, rank, VisibilityGate
"""
from bracket_league.bracket import (
    DEFAULT_REGION_MATCHUP_CONFIG,
    BracketStructure,
    OfficialResults,
    Region,
    RegionMatchupConfig,
    SemifinalSlot,
    Team,
    build_structure,
    record_result,
    validate_region_config,
)
from bracket_league.entries import Entry, EntryBook
from bracket_league.exceptions import (
    BracketLeagueError,
    EntryLockedError,
    ReservedOwnerIdError,
    NoEntriesError,
    ResultsIncompleteError,
    StructureError,
    ValidationWarning,
)
from bracket_league.game_types import GameTypeRegistry, get_game_type
from bracket_league.ranking import LeagueWinners, RankedEntry, determine_winners, rank
from bracket_league.scoring import ScoreBreakdown, ScoringSettings, score
from bracket_league.visibility import AdminVisibilityPolicy, VisibilityGate, VisibilitySettings

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_REGION_MATCHUP_CONFIG",
    "BracketStructure",
    "OfficialResults",
    "Region",
    "RegionMatchupConfig",
    "SemifinalSlot",
    "Team",
    "build_structure",
    "record_result",
    "validate_region_config",
    "Entry",
    "EntryBook",
    "BracketLeagueError",
    "EntryLockedError",
    "ReservedOwnerIdError",
    "NoEntriesError",
    "ResultsIncompleteError",
    "StructureError",
    "ValidationWarning",
    "GameTypeRegistry",
    "get_game_type",
    "LeagueWinners",
    "RankedEntry",
    "determine_winners",
    "rank",
    "ScoreBreakdown",
    "ScoringSettings",
    "score",
    "AdminVisibilityPolicy",
    "VisibilityGate",
    "VisibilitySettings",
]
