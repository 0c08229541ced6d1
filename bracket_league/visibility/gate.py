"""
Visibility Gate ("fog of war").

Decides whether a viewer may see another participant's picks before the
tournament completes. Every surface that lists or renders entries
(leaderboard, entry browser) filters through this gate.

Admins are subject to fog of war like any other viewer unless the league
opts into AdminVisibilityPolicy.EXEMPT.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional
import logging

from bracket_league.bracket.results import OfficialResults, is_tournament_complete
from bracket_league.bracket.structure import BracketStructure
from bracket_league.entries.entry import Entry
from bracket_league.ranking.resolver import RankedEntry
from bracket_league.utils.observability import get_metrics

logger = logging.getLogger(__name__)


class AdminVisibilityPolicy(str, Enum):
    SUBJECT_TO_FOG = "subject_to_fog"
    EXEMPT = "exempt"


@dataclass(frozen=True)
class VisibilitySettings:
    """Per-league fog-of-war flag plus tournament completion state."""
    fog_of_war_enabled: bool = False
    tournament_complete: bool = False
    exempt_viewers: FrozenSet[str] = field(default_factory=frozenset)
    admin_policy: AdminVisibilityPolicy = AdminVisibilityPolicy.SUBJECT_TO_FOG

    def completed(self) -> "VisibilitySettings":
        return replace(self, tournament_complete=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fog_of_war_enabled": self.fog_of_war_enabled,
            "tournament_complete": self.tournament_complete,
            "exempt_viewers": sorted(self.exempt_viewers),
            "admin_policy": self.admin_policy.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VisibilitySettings":
        return cls(
            fog_of_war_enabled=bool(data.get("fog_of_war_enabled", data.get("fogOfWarEnabled", False))),
            tournament_complete=bool(data.get("tournament_complete", False)),
            exempt_viewers=frozenset(data.get("exempt_viewers", [])),
            admin_policy=AdminVisibilityPolicy(data.get("admin_policy", "subject_to_fog")),
        )


class VisibilityGate:
    """Single source of truth for which entries a viewer may see."""

    def __init__(self, settings: VisibilitySettings):
        self.settings = settings

    @property
    def fog_active(self) -> bool:
        return self.settings.fog_of_war_enabled and not self.settings.tournament_complete

    def is_visible(self, target_entry: Entry, viewer_id: Optional[str], is_admin: bool = False) -> bool:
        if not self.fog_active:
            return True
        if target_entry.is_official:
            return True
        if viewer_id is not None and target_entry.owner_id == viewer_id:
            return True
        if viewer_id is not None and viewer_id in self.settings.exempt_viewers:
            return True
        if is_admin and self.settings.admin_policy == AdminVisibilityPolicy.EXEMPT:
            return True
        return False

    def filter_entries(
        self,
        entries: Iterable[Entry],
        viewer_id: Optional[str],
        is_admin: bool = False,
    ) -> List[Entry]:
        visible = []
        hidden = 0
        for entry in entries:
            if self.is_visible(entry, viewer_id, is_admin):
                visible.append(entry)
            else:
                hidden += 1
        if hidden:
            get_metrics().visibility_denials.inc(hidden)
            logger.debug(f"Fog of war hid {hidden} entries from {viewer_id}")
        return visible

    def filter_leaderboard(
        self,
        ranked: Iterable[RankedEntry],
        viewer_id: Optional[str],
        is_admin: bool = False,
    ) -> List[RankedEntry]:
        """Visible leaderboard rows; each keeps its rank in the full league."""
        rows = list(ranked)
        visible = {
            e.owner_id for e in self.filter_entries([r.entry for r in rows], viewer_id, is_admin)
        }
        return [r for r in rows if r.owner_id in visible]


def is_visible(
    target_entry: Entry,
    viewer_id: Optional[str],
    is_admin: bool,
    settings: VisibilitySettings,
) -> bool:
    """One-off visibility check."""
    return VisibilityGate(settings).is_visible(target_entry, viewer_id, is_admin)


def tournament_complete(structure: BracketStructure, results: OfficialResults) -> bool:
    """Fog of war lifts once the Championship has a recorded winner."""
    return is_tournament_complete(structure, results)


def gate_for(
    settings: VisibilitySettings,
    structure: BracketStructure,
    results: OfficialResults,
) -> VisibilityGate:
    """Gate whose completion flag reflects the current results."""
    if tournament_complete(structure, results) and not settings.tournament_complete:
        settings = settings.completed()
    return VisibilityGate(settings)
