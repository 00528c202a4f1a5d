"""Tests for AttendeeRecord model."""
import dataclasses

import pytest
from src.models.attendee import AttendeeRecord


class TestAttendeeRecordValidation:
    """Tests for record data validation."""

    def test_create_valid_record(self):
        """Valid record should be created successfully."""
        record = AttendeeRecord(
            id="NOESIS123456",
            name="Test User",
            college="Test College",
            email="test@example.com",
            phone="9999999999",
        )
        assert record.id == "NOESIS123456"
        assert record.name == "Test User"

    def test_optional_fields_default_to_empty_string(self):
        """Only id is required; other fields default to ''."""
        record = AttendeeRecord(id="NOESIS100000")
        assert record.name == ""
        assert record.college == ""
        assert record.email == ""
        assert record.phone == ""

    def test_empty_id_raises_error(self):
        """Empty id should raise ValueError."""
        with pytest.raises(ValueError, match="Record id cannot be empty"):
            AttendeeRecord(id="")

    def test_non_string_field_raises_error(self):
        """Non-string field values should raise ValueError."""
        with pytest.raises(ValueError, match="'phone' must be a string"):
            AttendeeRecord(id="NOESIS100000", phone=9999999999)

    def test_record_is_immutable(self):
        """Records cannot be modified after creation."""
        record = AttendeeRecord(id="NOESIS100000", name="A")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.name = "B"


class TestAttendeeRecordSerialization:
    """Tests for dict conversion."""

    def test_to_dict_key_order(self):
        """to_dict keeps id, name, college, email, phone order."""
        record = AttendeeRecord(id="X1", name="N", college="C", email="E", phone="P")
        assert list(record.to_dict().keys()) == ["id", "name", "college", "email", "phone"]

    def test_from_dict_fills_missing_keys(self):
        """Missing keys become empty strings."""
        record = AttendeeRecord.from_dict({"id": "NOESIS100000", "name": "Asha"})
        assert record == AttendeeRecord(id="NOESIS100000", name="Asha")

    def test_from_dict_ignores_unknown_keys(self):
        """Extra keys in stored data are dropped."""
        record = AttendeeRecord.from_dict({"id": "X1", "year": "3"})
        assert record.to_dict() == {"id": "X1", "name": "", "college": "", "email": "", "phone": ""}

    def test_from_dict_without_id_raises_error(self):
        """A stored record without id is invalid."""
        with pytest.raises(ValueError):
            AttendeeRecord.from_dict({"name": "Asha"})


class TestDisplayLabel:
    """Tests for display_label fallback chain."""

    def test_label_prefers_name(self):
        record = AttendeeRecord(id="X1", name="Asha", email="asha@example.com")
        assert record.display_label() == "Asha"

    def test_label_falls_back_to_email(self):
        record = AttendeeRecord(id="X1", email="asha@example.com")
        assert record.display_label() == "asha@example.com"

    def test_label_falls_back_to_id(self):
        record = AttendeeRecord(id="X1")
        assert record.display_label() == "X1"
