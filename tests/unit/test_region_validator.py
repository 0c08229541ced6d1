"""
Tests for the region matchup validator.
"""
import warnings

import pytest

from bracket_league.bracket import (
    DEFAULT_REGION_MATCHUP_CONFIG,
    DuplicateRegion,
    RegionMatchupConfig,
    SameRegionMatchup,
    SemifinalSlot,
    UnknownRegion,
    build_structure,
    check_region_config,
    is_valid_region_config,
    require_valid_region_config,
    validate_region_config,
)
from bracket_league.exceptions import StructureError, ValidationWarning

REGIONS = ["East", "West", "South", "Midwest"]


def _config(a, b, c, d):
    return RegionMatchupConfig(SemifinalSlot(a, b), SemifinalSlot(c, d))


def test_valid_config_has_no_problems():
    config = _config("South", "West", "Midwest", "East")
    assert validate_region_config(config) == []
    assert is_valid_region_config(config, REGIONS)


def test_default_config_is_valid():
    assert validate_region_config(DEFAULT_REGION_MATCHUP_CONFIG, REGIONS) == []


def test_same_region_in_one_slot():
    """South vs South reports one same-region and one duplicate problem."""
    problems = validate_region_config(_config("South", "South", "Midwest", "East"))

    assert problems.count(SameRegionMatchup(slot="semifinal1")) == 1
    assert problems.count(DuplicateRegion(region="South")) == 1
    assert len(problems) == 2


def test_region_used_in_both_semifinals():
    problems = validate_region_config(_config("South", "West", "South", "East"))
    assert problems == [DuplicateRegion(region="South")]


def test_duplicate_reported_once_per_region():
    problems = validate_region_config(_config("East", "East", "East", "East"))

    assert problems.count(DuplicateRegion(region="East")) == 1
    assert SameRegionMatchup(slot="semifinal1") in problems
    assert SameRegionMatchup(slot="semifinal2") in problems


def test_unknown_region_only_checked_when_regions_given():
    config = _config("South", "West", "Midwest", "Atlantis")

    assert validate_region_config(config) == []
    assert validate_region_config(config, REGIONS) == [UnknownRegion(region="Atlantis")]


def test_problem_messages_are_readable():
    problems = validate_region_config(_config("South", "South", "Midwest", "East"))
    messages = [str(p) for p in problems]
    assert any("semifinal1" in m for m in messages)
    assert any("South" in m for m in messages)


def test_check_region_config_warns_without_raising():
    config = _config("South", "South", "Midwest", "East")

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        problems = check_region_config(config)

    assert len(problems) == 2
    assert len(caught) == 2
    assert all(issubclass(w.category, ValidationWarning) for w in caught)


def test_check_region_config_silent_when_valid():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert check_region_config(DEFAULT_REGION_MATCHUP_CONFIG) == []


def test_require_valid_region_config_raises_with_problems():
    with pytest.raises(StructureError) as exc_info:
        require_valid_region_config(_config("South", "South", "Midwest", "East"))

    assert len(exc_info.value.problems) == 2
    assert "South" in str(exc_info.value)


@pytest.mark.parametrize("positions", [
    ("South", "West", "Midwest", "East"),
    ("East", "West", "South", "Midwest"),
    ("Midwest", "South", "West", "East"),
    ("South", "South", "Midwest", "East"),
    ("South", "West", "South", "East"),
    ("East", "East", "West", "West"),
])
def test_validator_agrees_with_structure_builder(regions, positions):
    """A config builds a bracket exactly when it has no problems."""
    config = _config(*positions)
    valid = not validate_region_config(config)

    if valid:
        assert build_structure(regions, config, 16).total_matchups == 63
    else:
        with pytest.raises(StructureError):
            build_structure(regions, config, 16)


def test_config_round_trips_through_document():
    config = _config("South", "West", "Midwest", "East")
    data = config.to_dict()

    assert data == {
        "semifinal1": {"region1": "South", "region2": "West"},
        "semifinal2": {"region1": "Midwest", "region2": "East"},
    }
    assert RegionMatchupConfig.from_dict(data) == config
