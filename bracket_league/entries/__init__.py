"""
Entries - participant picks and the pick store.
"""
from .entry import OFFICIAL_ENTRY_ID, Entry, normalize_picks
from .store import EntryBook, completeness, is_entry_complete, unknown_picks

__all__ = [
    "OFFICIAL_ENTRY_ID",
    "Entry",
    "normalize_picks",
    "EntryBook",
    "completeness",
    "is_entry_complete",
    "unknown_picks",
]
