"""
League orchestration over stored documents.
"""
from .service import STATUS_ACTIVE, STATUS_COMPLETED, STATUS_DRAFT, LeagueService

__all__ = [
    "LeagueService",
    "STATUS_ACTIVE",
    "STATUS_COMPLETED",
    "STATUS_DRAFT",
]
