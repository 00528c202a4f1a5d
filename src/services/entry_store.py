"""Entry store: the authoritative ordered list of accepted attendee records."""
import json
import logging
from threading import Lock, RLock
from typing import Iterator, List, Optional

from src.models.attendee import AttendeeRecord
from src.services.storage_service import FileStorage
from src.utils.config import STORAGE_KEY, get_data_dir
from src.utils.exceptions import PersistenceReadError

logger = logging.getLogger(__name__)


class EntryStore:
    """
    Ordered list of accepted records, persisted after every mutation.

    The snapshot is a JSON array of record objects stored under a single
    key. Streamlit serves each browser session on its own script thread,
    so mutations and their snapshot writes are serialized with a lock.
    """

    def __init__(self, storage: FileStorage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._lock = RLock()
        self._records: List[AttendeeRecord] = self._load()

    def _load(self) -> List[AttendeeRecord]:
        """Read the snapshot; missing or unreadable snapshots yield []."""
        try:
            return self._read_snapshot()
        except PersistenceReadError as e:
            logger.warning("Starting with empty entry list: %s", e)
            return []

    def _read_snapshot(self) -> List[AttendeeRecord]:
        """
        Deserialize the persisted snapshot.

        Returns:
            List[AttendeeRecord]: Stored records in saved order ([] if absent)

        Raises:
            PersistenceReadError: If the snapshot is unreadable or malformed
        """
        try:
            raw = self.storage.get(self.key)
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceReadError(f"Cannot read '{self.key}': {e}") from e

        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise PersistenceReadError(f"Malformed JSON in '{self.key}': {e}") from e

        if not isinstance(data, list):
            raise PersistenceReadError(f"Snapshot '{self.key}' is not a list")

        try:
            return [AttendeeRecord.from_dict(item) for item in data]
        except (AttributeError, TypeError, ValueError) as e:
            raise PersistenceReadError(f"Invalid record in '{self.key}': {e}") from e

    def _commit(self, records: List[AttendeeRecord]) -> None:
        """Write the snapshot, then adopt the new list; a failed write changes nothing."""
        payload = json.dumps(
            [record.to_dict() for record in records],
            ensure_ascii=False,
        )
        self.storage.set(self.key, payload)
        self._records = records

    @property
    def records(self) -> List[AttendeeRecord]:
        """Copy of the records in current order."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[AttendeeRecord]:
        return iter(self.records)

    def get(self, record_id: str) -> Optional[AttendeeRecord]:
        """Return the first record with this id, or None."""
        with self._lock:
            for record in self._records:
                if record.id == record_id:
                    return record
        return None

    def add(self, record: AttendeeRecord) -> None:
        """Append a record and persist."""
        with self._lock:
            self._commit(self._records + [record])

    def remove(self, record_id: str) -> bool:
        """
        Remove the first record with the given id and persist.

        Returns:
            bool: True if a record was removed
        """
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id == record_id:
                    self._commit(self._records[:index] + self._records[index + 1:])
                    return True
        return False

    def clear(self) -> None:
        """Empty the list and delete the persisted snapshot."""
        with self._lock:
            self.storage.remove(self.key)
            self._records = []

    def replace_all(self, records: List[AttendeeRecord]) -> None:
        """Replace the full ordered list (used by sorting) and persist."""
        with self._lock:
            self._commit(list(records))

    def mutex(self) -> RLock:
        """Lock guarding the list, for read-check-write sequences."""
        return self._lock


# Process-wide store
_store: Optional[EntryStore] = None
_STORE_LOCK = Lock()


def get_entry_store() -> EntryStore:
    """Return the process-wide store, creating it over the data directory."""
    global _store

    if _store is not None:
        return _store

    with _STORE_LOCK:
        if _store is None:
            _store = EntryStore(FileStorage(get_data_dir()))
            logger.info("Loaded %d entries from %s", len(_store), get_data_dir())

    return _store


def _reset_store() -> None:
    """Drop the process-wide store so the next call reloads from storage."""
    global _store
    _store = None
