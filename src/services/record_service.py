"""Record normalizer: turns scan payloads and form input into attendee records."""
import json
import logging
import random
from typing import Any, Dict

from src.models.attendee import AttendeeRecord, TEXT_FIELDS
from src.utils.config import ID_PREFIX
from src.utils.exceptions import InvalidFormatError, MissingRequiredFieldError
from src.utils.validation import normalize_field, to_text, validate_manual_entry

logger = logging.getLogger(__name__)

ID_MIN = 100000
ID_MAX = 999999


def generate_record_id() -> str:
    """
    Generate a fallback record id.

    Returns:
        str: ID_PREFIX followed by a 6-digit number in [100000, 999999]

    Note:
        Not checked against existing records.
    """
    return f"{ID_PREFIX}{random.randint(ID_MIN, ID_MAX)}"


def _reject_constant(name: str) -> None:
    """NaN, Infinity and -Infinity are not valid JSON."""
    raise ValueError(f"Unsupported JSON constant: {name}")


def _record_from_mapping(data: Dict[str, Any]) -> AttendeeRecord:
    """Normalize a decoded mapping into a record."""
    raw_id = data.get("id")
    record_id = to_text(raw_id) if raw_id else generate_record_id()

    normalized = {key: normalize_field(data.get(key)) for key in TEXT_FIELDS}
    return AttendeeRecord(id=record_id, **normalized)


def parse_scanned(text: str) -> AttendeeRecord:
    """
    Parse decoded QR text into an attendee record.

    Args:
        text: Decoded payload, expected to be a JSON object with any of
              id, name, college, email, phone

    Returns:
        AttendeeRecord: Normalized record (generated id if missing)

    Raises:
        InvalidFormatError: If text is not JSON or not a JSON object
    """
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except (TypeError, ValueError) as e:
        raise InvalidFormatError(f"Scanned text is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidFormatError(
            f"Scanned JSON must be an object, got {type(data).__name__}"
        )

    return _record_from_mapping(data)


def build_manual_record(
    name: str,
    college: str = "",
    email: str = "",
    phone: str = "",
) -> AttendeeRecord:
    """
    Build a record from the manual-entry form.

    Args:
        name: Attendee name (required)
        college: College name
        email: Email address (required)
        phone: Phone number

    Returns:
        AttendeeRecord: Record with a freshly generated id

    Raises:
        MissingRequiredFieldError: If name or email is empty after trimming
    """
    record = AttendeeRecord(
        id=generate_record_id(),
        name=normalize_field(name),
        college=normalize_field(college),
        email=normalize_field(email),
        phone=normalize_field(phone),
    )

    is_valid, missing_field = validate_manual_entry(record.name, record.email)
    if not is_valid:
        raise MissingRequiredFieldError(missing_field)

    return record
