"""
Bracket comparison - how often two entries agree, by round.
"""
from dataclasses import dataclass, field
from typing import Any, Dict

from bracket_league.bracket.structure import BracketStructure
from bracket_league.entries.entry import Entry


@dataclass
class RoundAgreement:
    matches: int = 0
    possible: int = 0

    @property
    def percentage(self) -> float:
        return self.matches / self.possible if self.possible > 0 else 0.0


@dataclass
class SimilarityReport:
    """Agreement between two entries over matchups both of them picked."""
    owner_a: str
    owner_b: str
    by_round: Dict[str, RoundAgreement] = field(default_factory=dict)

    @property
    def total_matches(self) -> int:
        return sum(r.matches for r in self.by_round.values())

    @property
    def total_possible(self) -> int:
        return sum(r.possible for r in self.by_round.values())

    @property
    def percentage(self) -> float:
        possible = self.total_possible
        return self.total_matches / possible if possible > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner_a": self.owner_a,
            "owner_b": self.owner_b,
            "total_matches": self.total_matches,
            "total_possible": self.total_possible,
            "percentage": round(self.percentage, 4),
            "by_round": {
                key: {"matches": r.matches, "possible": r.possible, "percentage": round(r.percentage, 4)}
                for key, r in self.by_round.items()
            },
        }


def compare_entries(entry_a: Entry, entry_b: Entry, structure: BracketStructure) -> SimilarityReport:
    report = SimilarityReport(
        owner_a=entry_a.owner_id,
        owner_b=entry_b.owner_id,
        by_round={key: RoundAgreement() for key in structure.round_keys},
    )
    for matchup in structure.all_matchups:
        pick_a = entry_a.pick(matchup.matchup_id)
        pick_b = entry_b.pick(matchup.matchup_id)
        if pick_a is None or pick_b is None:
            continue
        agreement = report.by_round[matchup.round_key]
        agreement.possible += 1
        if pick_a == pick_b:
            agreement.matches += 1
    return report
