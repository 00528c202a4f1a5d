"""Attendee record data model."""
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict

RECORD_FIELDS = ("id", "name", "college", "email", "phone")
TEXT_FIELDS = ("name", "college", "email", "phone")


@dataclass(frozen=True)
class AttendeeRecord:
    """One registered attendee."""

    id: str
    name: str = ""
    college: str = ""
    email: str = ""
    phone: str = ""

    def __post_init__(self):
        """Validate record data."""
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("Record id cannot be empty")

        for field in fields(self):
            if not isinstance(getattr(self, field.name), str):
                raise ValueError(f"Field '{field.name}' must be a string")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttendeeRecord":
        """
        Build a record from a persisted mapping.

        Args:
            data: Mapping with any of the five record keys

        Returns:
            AttendeeRecord with missing keys set to ""

        Raises:
            ValueError: If the id is missing or any value is not a string
        """
        return cls(**{key: data.get(key, "") for key in RECORD_FIELDS})

    def to_dict(self) -> Dict[str, str]:
        """Convert to a dict in id, name, college, email, phone order."""
        return asdict(self)

    def display_label(self) -> str:
        """Return the first non-empty of name, email, id."""
        return self.name or self.email or self.id
