"""
Bracket Structure construction.

Builds the matchup graph for a tournament from its regions, the seed count
per region and the region-matchup configuration: standard single-elimination
seeding inside each region, regional champions into the semifinal slot the
configuration assigns, semifinal winners into the Championship.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from bracket_league.bracket.model import (
    CROSS_REGION,
    Matchup,
    Region,
    RegionMatchupConfig,
    Team,
    TeamRef,
    WinnerOf,
)
from bracket_league.bracket.validator import validate_region_config
from bracket_league.exceptions import StructureError

logger = logging.getLogger(__name__)


SEMIFINAL_ROUND_KEY = "FinalFour"
CHAMPIONSHIP_ROUND_KEY = "Championship"


def bracket_order(seed_count: int) -> List[int]:
    """
    Seed order down one side of a region so that adjacent pairs meet first.

    For 16 seeds: 1, 16, 8, 9, 4, 13, 5, 12, 2, 15, 7, 10, 3, 14, 6, 11
    (1 and 2 can only meet in the regional final).
    """
    order = [1]
    while len(order) < seed_count:
        size = len(order) * 2
        order = [seed for top in order for seed in (top, size + 1 - top)]
    return order


def default_round_keys(region_count: int, seed_count: int) -> List[str]:
    """Round keys named by the size of the field, e.g. RoundOf64 ... Championship."""
    regional_rounds = int(math.log2(seed_count))
    field_size = region_count * seed_count
    keys = [f"RoundOf{field_size // (2 ** r)}" for r in range(regional_rounds)]
    if region_count == 4:
        keys.append(SEMIFINAL_ROUND_KEY)
    keys.append(CHAMPIONSHIP_ROUND_KEY)
    return keys


@dataclass(frozen=True)
class BracketStructure:
    """
    Complete matchup graph for a tournament.

    Matchups are stored in bracket order: round 1 first, regions in the
    order given, slots ascending.
    """
    regions: Tuple[Region, ...]
    region_matchup_config: Optional[RegionMatchupConfig]
    seed_count: int
    round_keys: Tuple[str, ...]
    matchups: Dict[str, Matchup]
    _teams: Dict[str, Tuple[Team, str]] = field(default_factory=dict, repr=False, compare=False)
    _next: Dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self):
        teams = {
            team.team_id: (team, region.name)
            for region in self.regions
            for team in region.teams
        }
        next_matchup = {
            feeder: matchup.matchup_id
            for matchup in self.matchups.values()
            for feeder in matchup.feeders
        }
        object.__setattr__(self, "_teams", teams)
        object.__setattr__(self, "_next", next_matchup)

    # -- lookups ---------------------------------------------------------

    def __contains__(self, matchup_id: str) -> bool:
        return matchup_id in self.matchups

    def get(self, matchup_id: str) -> Optional[Matchup]:
        return self.matchups.get(matchup_id)

    @property
    def all_matchups(self) -> List[Matchup]:
        return list(self.matchups.values())

    @property
    def total_matchups(self) -> int:
        return len(self.matchups)

    @property
    def num_rounds(self) -> int:
        return len(self.round_keys)

    @property
    def region_names(self) -> List[str]:
        return [r.name for r in self.regions]

    def round_key(self, round_num: int) -> str:
        return self.round_keys[round_num - 1]

    def round_matchups(self, round_num: int) -> List[Matchup]:
        return [m for m in self.matchups.values() if m.round_num == round_num]

    @property
    def championship(self) -> Matchup:
        """The single final-round matchup."""
        return self.round_matchups(self.num_rounds)[0]

    def team(self, team_id: str) -> Optional[Team]:
        entry = self._teams.get(team_id)
        return entry[0] if entry else None

    def seed_of(self, team_id: Optional[str]) -> Optional[int]:
        entry = self._teams.get(team_id) if team_id is not None else None
        return entry[0].seed if entry else None

    def region_of(self, team_id: str) -> Optional[str]:
        entry = self._teams.get(team_id)
        return entry[1] if entry else None

    @property
    def team_count(self) -> int:
        return len(self._teams)

    # -- graph -----------------------------------------------------------

    def next_matchup(self, matchup_id: str) -> Optional[str]:
        """The matchup the winner of matchup_id advances to."""
        return self._next.get(matchup_id)

    def downstream(self, matchup_id: str) -> List[str]:
        """Every later matchup the winner of matchup_id could reach."""
        path = []
        current = self._next.get(matchup_id)
        while current is not None:
            path.append(current)
            current = self._next.get(current)
        return path

    def participants(self, matchup_id: str, results) -> Tuple[Optional[str], Optional[str]]:
        """
        Resolve both entrants of a matchup to team ids.

        Later-round entrants come from the recorded winners of their
        feeders and are None while those are unresolved.
        """
        matchup = self.matchups[matchup_id]

        def _resolve(entrant) -> Optional[str]:
            if isinstance(entrant, TeamRef):
                return entrant.team_id
            return results.winner(entrant.matchup_id)

        return _resolve(matchup.entrant1), _resolve(matchup.entrant2)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize bracket to dictionary."""
        return {
            "regions": [r.to_dict() for r in self.regions],
            "region_matchup_config": (
                self.region_matchup_config.to_dict() if self.region_matchup_config else None
            ),
            "seed_count": self.seed_count,
            "round_keys": list(self.round_keys),
            "matchups": [m.to_dict() for m in self.matchups.values()],
        }


def _check_regions(regions: Sequence[Region], seed_count: int) -> None:
    names = [r.name for r in regions]
    if len(set(names)) != len(names):
        raise StructureError(f"Region names must be unique, got {names}")

    seen_ids = set()
    expected = set(range(1, seed_count + 1))
    for region in regions:
        if len(region.teams) != seed_count:
            raise StructureError(
                f"Region {region.name} has {len(region.teams)} teams, expected {seed_count}"
            )
        seeds = [t.seed for t in region.teams]
        if set(seeds) != expected or len(seeds) != len(expected):
            raise StructureError(
                f"Seeds in region {region.name} are not a permutation of 1..{seed_count}"
            )
        for team in region.teams:
            if team.team_id in seen_ids:
                raise StructureError(f"Team {team.team_id} appears more than once")
            seen_ids.add(team.team_id)


def build_structure(
    regions: Sequence[Region],
    region_matchup_config: Optional[RegionMatchupConfig],
    seed_count: int,
    round_keys: Optional[Sequence[str]] = None,
) -> BracketStructure:
    """
    Build the full matchup graph for a tournament.

    Args:
        regions: Four regions (or two, for formats whose regional champions
            meet directly in the Championship)
        region_matchup_config: Semifinal slot assignment; required for four
            regions, must be None for two
        seed_count: Number of seeded teams per region (power of two)
        round_keys: Optional round identifiers, one per round

    Returns:
        BracketStructure with every matchup populated

    Raises:
        StructureError: If any input is inconsistent
    """
    regions = tuple(regions)

    if seed_count < 2 or seed_count & (seed_count - 1):
        raise StructureError(f"Seed count must be a power of two >= 2, got {seed_count}")

    if len(regions) == 4:
        if region_matchup_config is None:
            raise StructureError("A four-region bracket needs a region matchup configuration")
        problems = validate_region_config(region_matchup_config, [r.name for r in regions])
        if problems:
            raise StructureError("Invalid region matchup configuration", problems)
    elif len(regions) == 2:
        if region_matchup_config is not None:
            raise StructureError("A two-region bracket has no semifinal slots to configure")
    else:
        raise StructureError(f"Expected 2 or 4 regions, got {len(regions)}")

    _check_regions(regions, seed_count)

    keys = list(round_keys) if round_keys is not None else default_round_keys(len(regions), seed_count)
    regional_rounds = int(math.log2(seed_count))
    expected_rounds = regional_rounds + (2 if len(regions) == 4 else 1)
    if len(keys) != expected_rounds:
        raise StructureError(f"Expected {expected_rounds} round keys, got {len(keys)}")
    if len(set(keys)) != len(keys):
        raise StructureError(f"Round keys must be unique, got {keys}")

    matchups: Dict[str, Matchup] = {}
    order = bracket_order(seed_count)
    regional_champions: Dict[str, str] = {}

    # Round by round so the stored order is bracket order
    previous: Dict[str, List[str]] = {}
    for round_num in range(1, regional_rounds + 1):
        round_key = keys[round_num - 1]
        for region in regions:
            ids = []
            if round_num == 1:
                for slot in range(1, seed_count // 2 + 1):
                    high = region.team_by_seed(order[2 * slot - 2])
                    low = region.team_by_seed(order[2 * slot - 1])
                    matchup = Matchup(
                        matchup_id=f"{round_key}-{region.name}-{slot}",
                        round_num=round_num,
                        round_key=round_key,
                        region=region.name,
                        slot=slot,
                        entrant1=TeamRef(high.team_id),
                        entrant2=TeamRef(low.team_id),
                    )
                    matchups[matchup.matchup_id] = matchup
                    ids.append(matchup.matchup_id)
            else:
                feeders = previous[region.name]
                for slot in range(1, len(feeders) // 2 + 1):
                    matchup = Matchup(
                        matchup_id=f"{round_key}-{region.name}-{slot}",
                        round_num=round_num,
                        round_key=round_key,
                        region=region.name,
                        slot=slot,
                        entrant1=WinnerOf(feeders[2 * slot - 2]),
                        entrant2=WinnerOf(feeders[2 * slot - 1]),
                    )
                    matchups[matchup.matchup_id] = matchup
                    ids.append(matchup.matchup_id)
            previous[region.name] = ids

    for region in regions:
        regional_champions[region.name] = previous[region.name][0]

    if len(regions) == 4:
        semifinal_key = keys[regional_rounds]
        semifinal_ids = []
        for slot, (_, pairing) in enumerate(region_matchup_config.slots(), start=1):
            matchup = Matchup(
                matchup_id=f"{semifinal_key}-{slot}",
                round_num=regional_rounds + 1,
                round_key=semifinal_key,
                region=CROSS_REGION,
                slot=slot,
                entrant1=WinnerOf(regional_champions[pairing.region1]),
                entrant2=WinnerOf(regional_champions[pairing.region2]),
            )
            matchups[matchup.matchup_id] = matchup
            semifinal_ids.append(matchup.matchup_id)
        final_feeders = semifinal_ids
    else:
        final_feeders = [regional_champions[r.name] for r in regions]

    final_key = keys[-1]
    final = Matchup(
        matchup_id=f"{final_key}-1",
        round_num=len(keys),
        round_key=final_key,
        region=CROSS_REGION,
        slot=1,
        entrant1=WinnerOf(final_feeders[0]),
        entrant2=WinnerOf(final_feeders[1]),
    )
    matchups[final.matchup_id] = final

    structure = BracketStructure(
        regions=regions,
        region_matchup_config=region_matchup_config,
        seed_count=seed_count,
        round_keys=tuple(keys),
        matchups=matchups,
    )
    logger.debug(
        f"Built bracket: {len(regions)} regions, {structure.total_matchups} matchups, "
        f"{structure.num_rounds} rounds"
    )
    return structure
