"""
Region-Matchup Validator.

Checks an admin-configured mapping of regions to semifinal slots. The
validator only reports problems: it runs on every edit so the admin can be
warned while the bracket preview keeps updating, and leaves the decision to
block a save to the caller. Activation of a bracket is the one place that
refuses an invalid configuration (see require_valid_region_config).
"""
import warnings
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional

from bracket_league.bracket.model import RegionMatchupConfig
from bracket_league.exceptions import StructureError, ValidationWarning
from bracket_league.utils.observability import Logger

logger = Logger(__name__)


@dataclass(frozen=True)
class RegionConfigProblem:
    """Base class for a single configuration problem."""

    @property
    def message(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class SameRegionMatchup(RegionConfigProblem):
    """A semifinal slot pairs a region against itself."""
    slot: str

    @property
    def message(self) -> str:
        return f"Same region selected in both positions of {self.slot}"


@dataclass(frozen=True)
class DuplicateRegion(RegionConfigProblem):
    """A region occupies more than one of the four positions."""
    region: str

    @property
    def message(self) -> str:
        return f"Region {self.region} is used more than once"


@dataclass(frozen=True)
class UnknownRegion(RegionConfigProblem):
    """A position names a region the tournament does not have."""
    region: str

    @property
    def message(self) -> str:
        return f"Region {self.region} is not part of this tournament"


def validate_region_config(
    config: RegionMatchupConfig,
    regions: Optional[Iterable[str]] = None,
) -> List[RegionConfigProblem]:
    """
    Return every problem with a region-matchup configuration.

    Args:
        config: The two semifinal slots
        regions: Optional tournament region names; enables UnknownRegion checks

    Returns:
        List of problems, empty when the configuration is valid
    """
    problems: List[RegionConfigProblem] = []

    for slot_name, slot in config.slots():
        if slot.region1 == slot.region2:
            problems.append(SameRegionMatchup(slot=slot_name))

    # Report each duplicated region once, in first-seen order
    counts = Counter(config.positions())
    seen = set()
    for region in config.positions():
        if counts[region] > 1 and region not in seen:
            problems.append(DuplicateRegion(region=region))
            seen.add(region)

    if regions is not None:
        known = set(regions)
        for region in dict.fromkeys(config.positions()):
            if region not in known:
                problems.append(UnknownRegion(region=region))

    return problems


def is_valid_region_config(
    config: RegionMatchupConfig,
    regions: Optional[Iterable[str]] = None,
) -> bool:
    return not validate_region_config(config, regions)


def check_region_config(
    config: RegionMatchupConfig,
    regions: Optional[Iterable[str]] = None,
) -> List[RegionConfigProblem]:
    """
    Edit-time validation: warn about every problem without rejecting.

    Each problem is issued as a ValidationWarning so callers can surface it
    (or escalate with a warnings filter).
    """
    problems = validate_region_config(config, regions)
    for problem in problems:
        warnings.warn(problem.message, ValidationWarning, stacklevel=2)
    if problems:
        logger.log_warning(
            "region_config_problems",
            count=len(problems),
            problems=[p.message for p in problems],
        )
    return problems


def require_valid_region_config(
    config: RegionMatchupConfig,
    regions: Optional[Iterable[str]] = None,
) -> None:
    """Activation gate: raise StructureError while any problem remains."""
    problems = validate_region_config(config, regions)
    if problems:
        raise StructureError("Invalid region matchup configuration", problems)
