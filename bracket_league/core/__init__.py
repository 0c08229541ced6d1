"""
Core abstractions - repository protocol, storage and service container.
"""
from .protocols import LeagueRepository
from .container import ServiceContainer
from .storage import LocalLeagueRepository

__all__ = [
    "LeagueRepository",
    "ServiceContainer",
    "LocalLeagueRepository",
]
