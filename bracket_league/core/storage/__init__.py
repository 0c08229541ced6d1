from .local import LocalLeagueRepository

__all__ = ["LocalLeagueRepository"]
