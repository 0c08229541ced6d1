"""
Custom exceptions for the Bracket League engine.
"""
from typing import Iterable, Optional


class BracketLeagueError(Exception):
    """Base exception for all custom errors."""
    pass


# Structure & Configuration Errors
class StructureError(BracketLeagueError):
    """Raised when bracket, region or seed input is malformed."""
    def __init__(self, message: str, problems: Optional[Iterable] = None):
        self.problems = list(problems or [])
        if self.problems:
            message += ": " + "; ".join(str(p) for p in self.problems)
        super().__init__(message)


class ValidationWarning(UserWarning):
    """Issued for region-matchup conflicts while a bracket is being edited."""
    pass


class ConfigurationError(BracketLeagueError):
    """Raised when configuration is invalid or missing."""
    pass


class UnknownGameTypeError(ConfigurationError):
    """Raised when no game type is registered under the requested id."""
    def __init__(self, type_id: str):
        self.type_id = type_id
        super().__init__(f"Unknown game type: {type_id}")


# Results Errors
class InvalidResultError(BracketLeagueError):
    """Raised when an official result cannot be recorded."""
    def __init__(self, matchup_id: str, reason: str):
        self.matchup_id = matchup_id
        self.reason = reason
        super().__init__(f"Cannot record result for {matchup_id}: {reason}")


# Entry Errors
class EntryLockedError(BracketLeagueError):
    """Raised when picks are submitted after the lock deadline."""
    def __init__(self, owner_id: str = None, lock_time=None):
        self.owner_id = owner_id
        self.lock_time = lock_time
        msg = "Entries are locked"
        if owner_id:
            msg += f" (owner {owner_id})"
        if lock_time:
            msg += f" since {lock_time.isoformat()}"
        super().__init__(msg)


class ReservedOwnerIdError(BracketLeagueError):
    """Raised when a participant submits under the official entry's owner id."""
    def __init__(self, owner_id: str):
        self.owner_id = owner_id
        super().__init__(f"Owner id {owner_id!r} is reserved for the official results entry")


# Winner Determination Errors
class WinnerDeterminationError(BracketLeagueError):
    """Base exception for league winner preconditions."""
    pass


class NoEntriesError(WinnerDeterminationError):
    """Raised when there are no entries to determine winners from."""
    pass


class ResultsIncompleteError(WinnerDeterminationError):
    """Raised when the Championship has no recorded winner yet."""
    def __init__(self, matchup_id: str = None):
        self.matchup_id = matchup_id
        msg = "Official results are incomplete"
        if matchup_id:
            msg += f" (no winner recorded for {matchup_id})"
        super().__init__(msg)


# League Errors
class LeagueNotFoundError(BracketLeagueError):
    """Raised when a league has no stored data."""
    pass


class LeagueFinalizedError(BracketLeagueError):
    """Raised when winners have already been written for a league."""
    pass
