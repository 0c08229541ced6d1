"""
Manual score adjustments made by a league admin.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional


@dataclass(frozen=True)
class ScoreAdjustment:
    """A signed point change applied on top of the computed score."""
    adjustment_id: str
    value: float
    reason: str
    admin_id: str
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "adjustment_id": self.adjustment_id,
            "value": self.value,
            "reason": self.reason,
            "admin_id": self.admin_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoreAdjustment":
        return cls(
            adjustment_id=data["adjustment_id"],
            value=float(data["value"]),
            reason=data["reason"],
            admin_id=data["admin_id"],
            created_at=datetime.fromisoformat(data["created_at"]),
        )


def new_adjustment(
    value: float,
    reason: str,
    admin_id: str,
    now: Optional[datetime] = None,
) -> ScoreAdjustment:
    """
    Create an adjustment.

    Raises:
        ValueError: If value is zero or reason/admin_id are missing
    """
    if not value:
        raise ValueError("Adjustment value must be non-zero")
    if not reason or not admin_id:
        raise ValueError("Adjustment must include a reason and adminId")
    return ScoreAdjustment(
        adjustment_id=f"adj_{uuid.uuid4().hex[:12]}",
        value=float(value),
        reason=reason,
        admin_id=admin_id,
        created_at=now or datetime.now(timezone.utc),
    )


def total_adjustment(adjustments: Optional[Iterable[ScoreAdjustment]]) -> float:
    if not adjustments:
        return 0.0
    return sum(a.value for a in adjustments)
