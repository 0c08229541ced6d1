"""
Bracket data structures.

Regions, teams and matchups are frozen once built so that a bracket in
play cannot be edited underneath the scoring engine.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple, Union


# Region marker for Final Four / Championship matchups
CROSS_REGION = "cross-region"

SEMIFINAL_SLOTS = ("semifinal1", "semifinal2")


@dataclass(frozen=True)
class Team:
    """A seeded team within a region."""
    team_id: str
    name: str
    seed: int

    def label(self) -> str:
        """Display name with seed, e.g. "Duke (1)"."""
        return f"{self.name} ({self.seed})"


@dataclass(frozen=True)
class Region:
    """A named sub-bracket of seeded teams."""
    name: str
    teams: Tuple[Team, ...]

    def team_by_seed(self, seed: int) -> Optional[Team]:
        for team in self.teams:
            if team.seed == seed:
                return team
        return None

    def seed_of(self, team_id: str) -> Optional[int]:
        for team in self.teams:
            if team.team_id == team_id:
                return team.seed
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Region":
        """
        Build a region from its stored document.

        Teams may be given as dicts with team_id/name/seed, or as a plain
        list of names in seed order.
        """
        teams = []
        for index, raw in enumerate(data.get("teams", []), start=1):
            if isinstance(raw, dict):
                name = raw.get("name", "")
                teams.append(Team(
                    team_id=str(raw.get("team_id") or name),
                    name=name,
                    seed=int(raw.get("seed", index)),
                ))
            else:
                teams.append(Team(team_id=str(raw), name=str(raw), seed=index))
        return cls(name=data["name"], teams=tuple(teams))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "teams": [
                {"team_id": t.team_id, "name": t.name, "seed": t.seed}
                for t in self.teams
            ],
        }


@dataclass(frozen=True)
class SemifinalSlot:
    """The two regions whose champions meet in one semifinal."""
    region1: str
    region2: str


@dataclass(frozen=True)
class RegionMatchupConfig:
    """Admin-defined assignment of regions to the two semifinal slots."""
    semifinal1: SemifinalSlot
    semifinal2: SemifinalSlot

    def slots(self) -> Iterator[Tuple[str, SemifinalSlot]]:
        yield "semifinal1", self.semifinal1
        yield "semifinal2", self.semifinal2

    def positions(self) -> Tuple[str, str, str, str]:
        """The four region positions in slot order."""
        return (
            self.semifinal1.region1,
            self.semifinal1.region2,
            self.semifinal2.region1,
            self.semifinal2.region2,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, str]]) -> "RegionMatchupConfig":
        return cls(
            semifinal1=SemifinalSlot(**data["semifinal1"]),
            semifinal2=SemifinalSlot(**data["semifinal2"]),
        )

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {
            name: {"region1": slot.region1, "region2": slot.region2}
            for name, slot in self.slots()
        }


DEFAULT_REGION_MATCHUP_CONFIG = RegionMatchupConfig(
    semifinal1=SemifinalSlot("South", "West"),
    semifinal2=SemifinalSlot("East", "Midwest"),
)


@dataclass(frozen=True)
class TeamRef:
    """Entrant known from the seeding."""
    team_id: str


@dataclass(frozen=True)
class WinnerOf:
    """Entrant decided by an earlier matchup."""
    matchup_id: str


Entrant = Union[TeamRef, WinnerOf]


@dataclass(frozen=True)
class Matchup:
    """A single game in the bracket."""
    matchup_id: str
    round_num: int                  # 1 = first round
    round_key: str                  # "RoundOf64", "Championship"
    region: str                     # region name or CROSS_REGION
    slot: int                       # position within the round and region
    entrant1: Entrant
    entrant2: Entrant

    @property
    def is_cross_region(self) -> bool:
        return self.region == CROSS_REGION

    @property
    def feeders(self) -> Tuple[str, ...]:
        """Matchup ids whose winners play in this matchup."""
        return tuple(
            e.matchup_id for e in (self.entrant1, self.entrant2)
            if isinstance(e, WinnerOf)
        )

    def to_dict(self) -> Dict[str, Any]:
        def _entrant(e: Entrant) -> Dict[str, str]:
            if isinstance(e, TeamRef):
                return {"team_id": e.team_id}
            return {"winner_of": e.matchup_id}

        return {
            "matchup_id": self.matchup_id,
            "round_num": self.round_num,
            "round_key": self.round_key,
            "region": self.region,
            "slot": self.slot,
            "entrant1": _entrant(self.entrant1),
            "entrant2": _entrant(self.entrant2),
        }
