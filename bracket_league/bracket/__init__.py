"""
Bracket model - regions, matchups, structure building and official results.
"""
from .model import (
    CROSS_REGION,
    DEFAULT_REGION_MATCHUP_CONFIG,
    Matchup,
    Region,
    RegionMatchupConfig,
    SemifinalSlot,
    Team,
    TeamRef,
    WinnerOf,
)
from .validator import (
    DuplicateRegion,
    RegionConfigProblem,
    SameRegionMatchup,
    UnknownRegion,
    check_region_config,
    is_valid_region_config,
    require_valid_region_config,
    validate_region_config,
)
from .structure import BracketStructure, bracket_order, build_structure, default_round_keys
from .extras import (
    EXTRA_CATEGORIES,
    FINALS_MVP_KEY,
    PLAY_IN_GAMES,
    SERIES_GAMES,
    play_in_key,
    series_length_key,
    validate_extra,
)
from .results import (
    OfficialResults,
    ResultCorrection,
    champion,
    clear_extra,
    clear_result,
    is_tournament_complete,
    record_extra,
    record_result,
    results_from_dict,
    results_to_dict,
)

__all__ = [
    "CROSS_REGION",
    "DEFAULT_REGION_MATCHUP_CONFIG",
    "Matchup",
    "Region",
    "RegionMatchupConfig",
    "SemifinalSlot",
    "Team",
    "TeamRef",
    "WinnerOf",
    "DuplicateRegion",
    "RegionConfigProblem",
    "SameRegionMatchup",
    "UnknownRegion",
    "check_region_config",
    "is_valid_region_config",
    "require_valid_region_config",
    "validate_region_config",
    "BracketStructure",
    "bracket_order",
    "build_structure",
    "default_round_keys",
    "EXTRA_CATEGORIES",
    "FINALS_MVP_KEY",
    "PLAY_IN_GAMES",
    "SERIES_GAMES",
    "play_in_key",
    "series_length_key",
    "validate_extra",
    "OfficialResults",
    "ResultCorrection",
    "champion",
    "clear_extra",
    "clear_result",
    "is_tournament_complete",
    "record_extra",
    "record_result",
    "results_from_dict",
    "results_to_dict",
]
