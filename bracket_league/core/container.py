"""
Service Container - simple dependency injection for the league repository.

Usage:
    from bracket_league.core import ServiceContainer

    repository = ServiceContainer.get_repository()

    # Swap in another backing store
    ServiceContainer.register_repository(MyRepository())
"""
from typing import Optional, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from .protocols import LeagueRepository

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Lazily builds the default repository and allows replacing it."""

    _repository: Optional["LeagueRepository"] = None

    @classmethod
    def get_repository(cls) -> "LeagueRepository":
        """Get the configured league repository."""
        if cls._repository is None:
            from bracket_league.config import settings
            from .storage import LocalLeagueRepository
            cls._repository = LocalLeagueRepository(settings.data_dir)
            logger.debug(f"Initialized default LocalLeagueRepository at {settings.data_dir}")
        return cls._repository

    @classmethod
    def register_repository(cls, repository: "LeagueRepository") -> None:
        """Register a custom repository implementation."""
        cls._repository = repository
        logger.info(f"Registered repository: {type(repository).__name__}")

    @classmethod
    def reset(cls) -> None:
        """Reset to defaults (for testing)."""
        cls._repository = None
