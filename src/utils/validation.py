"""Field normalization and validation utilities."""
from typing import Any, Tuple


def normalize_field(value: Any) -> str:
    """
    Normalize one record field.

    Args:
        value: Raw field value from a scan payload or form

    Returns:
        Trimmed string, or "" for absent/falsy values

    Behavior:
        - None, "", 0, False, empty containers → ""
        - Anything else is coerced with to_text() and trimmed
        - Example: "  Jane " → "Jane", 9876543210 → "9876543210", True → "true"
    """
    if not value:
        return ""
    return to_text(value).strip()


def to_text(value: Any) -> str:
    """
    Render a decoded JSON scalar as text.

    Booleans render as "true"/"false" and integral floats drop the
    trailing ".0", so 9876543210.0 → "9876543210".
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def validate_manual_entry(name: str, email: str) -> Tuple[bool, str]:
    """
    Validate required manual-entry fields.

    Args:
        name: Normalized attendee name
        email: Normalized attendee email

    Returns:
        Tuple of (is_valid: bool, missing_field: str)
        - (True, "") if both are present
        - (False, "name") if name is empty
        - (False, "email") if email is empty
    """
    if not name:
        return False, "name"
    if not email:
        return False, "email"
    return True, ""


def matches_query(text: str, query: str) -> bool:
    """Case-insensitive substring test; empty query matches."""
    if not query:
        return True
    return query.lower() in (text or "").lower()
