"""
Entry - one participant's predicted winners.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


# Owner id of the reference entry that mirrors the official results
OFFICIAL_ENTRY_ID = "official"


def normalize_picks(picks: Any) -> Dict[str, str]:
    """
    Coerce stored picks into {matchup_id: team_id}.

    Anything that is not a mapping becomes an empty pick set, and blank
    picks are dropped, so a malformed document never reaches scoring.
    """
    if not isinstance(picks, Mapping):
        return {}
    cleaned = {}
    for matchup_id, team_id in picks.items():
        if team_id is None or isinstance(team_id, (dict, list, tuple, set)):
            continue
        team = str(team_id).strip()
        if team:
            cleaned[str(matchup_id)] = team
    return cleaned


@dataclass(frozen=True)
class Entry:
    """
    A participant's full set of picks, keyed by matchup id.

    extras holds bonus predictions (series lengths, Finals MVP, play-in
    winners) for formats that score them.
    """
    owner_id: str
    picks: Mapping[str, str] = field(default_factory=dict)
    submitted_at: Optional[datetime] = None
    is_official: bool = False
    score: Optional[Any] = field(default=None, compare=False)   # cached ScoreBreakdown
    extras: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "picks", MappingProxyType(normalize_picks(self.picks)))
        object.__setattr__(self, "extras", MappingProxyType(normalize_picks(self.extras)))

    def extra(self, key: str) -> Optional[str]:
        return self.extras.get(key)

    def pick(self, matchup_id: str) -> Optional[str]:
        return self.picks.get(matchup_id)

    @property
    def pick_count(self) -> int:
        return len(self.picks)

    def with_score(self, breakdown) -> "Entry":
        """Copy of this entry carrying a freshly computed score."""
        return replace(self, picks=dict(self.picks), extras=dict(self.extras), score=breakdown)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        submitted = data.get("submitted_at")
        return cls(
            owner_id=str(data["owner_id"]),
            picks=data.get("picks", {}),
            submitted_at=datetime.fromisoformat(submitted) if submitted else None,
            is_official=bool(data.get("is_official", False)),
            extras=data.get("extras", {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner_id": self.owner_id,
            "picks": dict(self.picks),
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
            "is_official": self.is_official,
            "extras": dict(self.extras),
        }
