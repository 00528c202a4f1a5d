"""Query and sort views over the entry store."""
import locale
from collections import Counter
from threading import Lock
from typing import Dict, Iterable, List

from src.models.attendee import AttendeeRecord
from src.services.entry_store import EntryStore
from src.utils.validation import matches_query

SEARCH_FIELDS = ("name", "college", "email", "phone")
NO_COLLEGE_LABEL = "(none)"


def filter_records(records: Iterable[AttendeeRecord], query: str) -> List[AttendeeRecord]:
    """
    Filter records by free-text query.

    Args:
        records: Records in display order
        query: Search text (empty matches everything)

    Returns:
        List[AttendeeRecord]: Records whose name, college, email or phone
        contains the query, case-insensitively, in original order
    """
    return [
        record for record in records
        if not query or any(matches_query(getattr(record, field), query) for field in SEARCH_FIELDS)
    ]


def _college_key(record: AttendeeRecord) -> str:
    return locale.strxfrm((record.college or "").lower())


class CollegeSorter:
    """Sorts the whole store by college, flipping direction on every call."""

    def __init__(self, ascending: bool = True):
        self.ascending = ascending
        self._lock = Lock()

    def sort(self, store: EntryStore) -> bool:
        """
        Reorder the store by lower-cased college using locale collation.

        Args:
            store: Store whose order is replaced in place

        Returns:
            bool: True if this call sorted ascending
        """
        with self._lock, store.mutex():
            ascending = self.ascending
            ordered = sorted(store.records, key=_college_key, reverse=not ascending)
            store.replace_all(ordered)
            self.ascending = not ascending

        return ascending


_college_sorter = CollegeSorter()


def sort_by_college(store: EntryStore) -> bool:
    """Sort with the process-wide toggle; returns True if ascending."""
    return _college_sorter.sort(store)


def summarize_by_college(records: Iterable[AttendeeRecord]) -> Dict[str, int]:
    """Count records per college, most common first."""
    counts = Counter(record.college or NO_COLLEGE_LABEL for record in records)
    return dict(counts.most_common())
