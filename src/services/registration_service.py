"""Registration service: dedup check and the scan/manual accept pipeline."""
import logging
from typing import Iterable, Optional, Tuple

from src.models.attendee import AttendeeRecord
from src.services.entry_store import EntryStore, get_entry_store
from src.services.record_service import build_manual_record, parse_scanned
from src.utils.exceptions import (
    DuplicateRecordError,
    InvalidFormatError,
    MissingRequiredFieldError,
)

logger = logging.getLogger(__name__)

MSG_INVALID_FORMAT = "⚠️ Invalid QR format"
MSG_DUPLICATE_SCAN = "⚠️ Duplicate QR detected — already registered!"
MSG_MISSING_FIELD = "Name & email required"
MSG_DUPLICATE_MANUAL = "Duplicate detected"
MSG_UNEXPECTED = "Something went wrong, please try again"


def is_duplicate(candidate: AttendeeRecord, records: Iterable[AttendeeRecord]) -> bool:
    """
    Check whether an identical record already exists.

    Args:
        candidate: Normalized record
        records: Records to search

    Returns:
        True if some record matches on id, name, college, email and phone

    Behavior:
        - Exact, case-sensitive comparison of all five fields
        - Stops at the first match
    """
    return any(
        existing.id == candidate.id
        and existing.name == candidate.name
        and existing.college == candidate.college
        and existing.email == candidate.email
        and existing.phone == candidate.phone
        for existing in records
    )


def accept_record(record: AttendeeRecord, store: EntryStore) -> AttendeeRecord:
    """
    Add a record unless an identical one is already stored.

    Raises:
        DuplicateRecordError: If the record is an exact duplicate
    """
    with store.mutex():
        if is_duplicate(record, store.records):
            raise DuplicateRecordError(f"Record {record.id} already registered")
        store.add(record)

    logger.info("Registered %s (%s)", record.id, record.display_label())
    return record


def register_scan(decoded_text: str, store: Optional[EntryStore] = None) -> Tuple[bool, str]:
    """
    Run one decoded QR payload through parse, dedup and store.

    Args:
        decoded_text: Text decoded from a QR code
        store: Entry store (defaults to the process-wide store)

    Returns:
        Tuple of (success: bool, message: str)
        - (True, "✅ Scan successful: <label>") on success
        - (False, MSG_INVALID_FORMAT) if payload is not a JSON object
        - (False, MSG_DUPLICATE_SCAN) if already registered
    """
    store = store if store is not None else get_entry_store()

    try:
        record = parse_scanned(decoded_text)
        accept_record(record, store)
    except InvalidFormatError as e:
        logger.warning("Rejected scan: %s", e)
        return False, MSG_INVALID_FORMAT
    except DuplicateRecordError as e:
        logger.warning("Rejected scan: %s", e)
        return False, MSG_DUPLICATE_SCAN
    except IOError as e:
        logger.error(f"File operation failed during scan registration: {e}")
        return False, MSG_UNEXPECTED

    return True, f"✅ Scan successful: {record.display_label()}"


def register_manual(
    name: str,
    college: str = "",
    email: str = "",
    phone: str = "",
    store: Optional[EntryStore] = None,
) -> Tuple[bool, str]:
    """
    Register an attendee from the manual-entry form.

    Returns:
        Tuple of (success: bool, message: str)
        - (True, "Added <name>") on success
        - (False, MSG_MISSING_FIELD) if name or email is empty
        - (False, MSG_DUPLICATE_MANUAL) if already registered
    """
    store = store if store is not None else get_entry_store()

    try:
        record = build_manual_record(name, college=college, email=email, phone=phone)
        accept_record(record, store)
    except MissingRequiredFieldError as e:
        logger.warning("Rejected manual entry: %s", e)
        return False, MSG_MISSING_FIELD
    except DuplicateRecordError as e:
        logger.warning("Rejected manual entry: %s", e)
        return False, MSG_DUPLICATE_MANUAL
    except IOError as e:
        logger.error(f"File operation failed during manual registration: {e}")
        return False, MSG_UNEXPECTED

    return True, f"Added {record.name}"


def remove_entry(record_id: str, store: Optional[EntryStore] = None) -> Tuple[bool, str]:
    """Remove a confirmed entry by id."""
    store = store if store is not None else get_entry_store()

    try:
        removed = store.remove(record_id)
    except IOError as e:
        logger.error(f"File operation failed during entry removal: {e}")
        return False, MSG_UNEXPECTED

    if not removed:
        return False, f"Entry {record_id} not found"

    logger.info("Removed %s", record_id)
    return True, f"Removed {record_id}"


def clear_entries(store: Optional[EntryStore] = None) -> Tuple[bool, str]:
    """Remove every entry and the persisted snapshot."""
    store = store if store is not None else get_entry_store()

    count = len(store)
    try:
        store.clear()
    except OSError as e:
        logger.error(f"File operation failed while clearing entries: {e}")
        return False, MSG_UNEXPECTED

    logger.info("Cleared %d entries", count)
    return True, f"Cleared {count} entries"
