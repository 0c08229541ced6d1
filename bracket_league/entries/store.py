"""
Pick Store - holds one entry per participant and enforces the lock deadline.
"""
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Mapping, Optional, Tuple
import logging

from bracket_league.bracket.structure import BracketStructure
from bracket_league.entries.entry import OFFICIAL_ENTRY_ID, Entry
from bracket_league.exceptions import EntryLockedError, ReservedOwnerIdError
from bracket_league.utils.observability import get_metrics

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntryBook:
    """
    Entries for one league, in submission order.

    Submissions are rejected once the lock time has passed; there is no
    coordination between submitters since each entry has a single owner.
    """

    def __init__(self, lock_time: Optional[datetime] = None, entries: Optional[List[Entry]] = None):
        self.lock_time = lock_time
        self._entries: Dict[str, Entry] = {}
        self._official: Optional[Entry] = None
        for entry in entries or []:
            if entry.is_official:
                self._official = entry
            else:
                self._entries[entry.owner_id] = entry

    def is_locked(self, now: Optional[datetime] = None) -> bool:
        if self.lock_time is None:
            return False
        return (now or _utcnow()) >= self.lock_time

    def submit(
        self,
        owner_id: str,
        picks: Mapping[str, str],
        now: Optional[datetime] = None,
        extras: Optional[Mapping[str, str]] = None,
    ) -> Entry:
        """
        Create or replace the owner's entry.

        Raises:
            ReservedOwnerIdError: If owner_id is the official entry's id
            EntryLockedError: If the lock deadline has passed
        """
        if owner_id == OFFICIAL_ENTRY_ID:
            raise ReservedOwnerIdError(owner_id)
        now = now or _utcnow()
        if self.is_locked(now):
            get_metrics().locked_submissions.inc()
            logger.warning(f"Rejected submission from {owner_id}: entries locked at {self.lock_time}")
            raise EntryLockedError(owner_id, self.lock_time)

        entry = Entry(owner_id=owner_id, picks=picks, submitted_at=now, extras=extras or {})
        replacing = owner_id in self._entries
        self._entries[owner_id] = entry
        logger.info(
            f"{'Updated' if replacing else 'Created'} entry for {owner_id} ({entry.pick_count} picks)"
        )
        return entry

    def set_official(
        self,
        picks: Mapping[str, str],
        now: Optional[datetime] = None,
        extras: Optional[Mapping[str, str]] = None,
    ) -> Entry:
        """Store the reference entry; it mirrors official results and is never locked."""
        self._official = Entry(
            owner_id=OFFICIAL_ENTRY_ID,
            picks=picks,
            extras=extras or {},
            submitted_at=now or _utcnow(),
            is_official=True,
        )
        return self._official

    @property
    def official(self) -> Optional[Entry]:
        return self._official

    def remove(self, owner_id: str) -> Optional[Entry]:
        """Destroy an entry when its owner leaves the league."""
        removed = self._entries.pop(owner_id, None)
        if removed is not None:
            logger.info(f"Removed entry for {owner_id}")
        return removed

    def get(self, owner_id: str) -> Optional[Entry]:
        if owner_id == OFFICIAL_ENTRY_ID:
            return self._official
        return self._entries.get(owner_id)

    def entries(self, include_official: bool = False) -> List[Entry]:
        entries = list(self._entries.values())
        if include_official and self._official is not None:
            entries.insert(0, self._official)
        return entries

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, owner_id: str) -> bool:
        return owner_id in self._entries


def completeness(entry: Entry, structure: BracketStructure) -> Tuple[int, int]:
    """(picks made on bracket matchups, total matchups)."""
    made = sum(1 for mid in structure.matchups if entry.pick(mid) is not None)
    return made, structure.total_matchups


def is_entry_complete(entry: Entry, structure: BracketStructure) -> bool:
    made, total = completeness(entry, structure)
    return made == total


def unknown_picks(entry: Entry, structure: BracketStructure) -> List[str]:
    """Pick keys that do not name a matchup in the bracket."""
    return [mid for mid in entry.picks if mid not in structure]
