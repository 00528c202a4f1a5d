"""Unit tests for registration_service."""
import json
from unittest.mock import patch

import pytest
from src.models.attendee import AttendeeRecord
from src.services import registration_service
from src.services.entry_store import EntryStore
from src.services.registration_service import (
    MSG_DUPLICATE_MANUAL,
    MSG_DUPLICATE_SCAN,
    MSG_INVALID_FORMAT,
    MSG_MISSING_FIELD,
    MSG_UNEXPECTED,
    accept_record,
    clear_entries,
    is_duplicate,
    register_manual,
    register_scan,
    remove_entry,
)
from src.services.storage_service import FileStorage
from src.utils.config import STORAGE_KEY
from src.utils.exceptions import DuplicateRecordError


@pytest.fixture
def storage(tmp_path):
    return FileStorage(tmp_path)


@pytest.fixture
def store(storage):
    return EntryStore(storage)


@pytest.fixture
def existing_record():
    return AttendeeRecord(
        id="NOESIS123456",
        name="Test User",
        college="Test College",
        email="test@example.com",
        phone="9999999999",
    )


@pytest.fixture
def scan_payload(existing_record):
    return json.dumps(existing_record.to_dict())


class TestIsDuplicate:
    """Tests for exact-match duplicate detection."""

    def test_identical_record_is_duplicate(self, existing_record):
        candidate = AttendeeRecord(**existing_record.to_dict())
        assert is_duplicate(candidate, [existing_record]) is True

    def test_empty_store_has_no_duplicates(self, existing_record):
        assert is_duplicate(existing_record, []) is False

    @pytest.mark.parametrize("field,value", [
        ("id", "NOESIS654321"),
        ("name", "Other User"),
        ("college", "Other College"),
        ("email", "other@example.com"),
        ("phone", "8888888888"),
    ])
    def test_any_differing_field_is_not_duplicate(self, existing_record, field, value):
        candidate = AttendeeRecord(**{**existing_record.to_dict(), field: value})
        assert is_duplicate(candidate, [existing_record]) is False

    def test_case_difference_is_not_duplicate(self, existing_record):
        """Comparison is case-sensitive."""
        candidate = AttendeeRecord(**{**existing_record.to_dict(), "name": "test user"})
        assert is_duplicate(candidate, [existing_record]) is False

    def test_match_anywhere_in_list(self, existing_record):
        others = [AttendeeRecord(id=f"NOESIS10000{i}") for i in range(3)]
        assert is_duplicate(existing_record, others + [existing_record]) is True


class TestAcceptRecord:
    """Tests for accept_record."""

    def test_accept_adds_record(self, store, existing_record):
        accept_record(existing_record, store)
        assert store.records == [existing_record]

    def test_duplicate_raises_and_store_unchanged(self, store, existing_record):
        accept_record(existing_record, store)
        with pytest.raises(DuplicateRecordError):
            accept_record(existing_record, store)
        assert len(store) == 1


class TestRegisterScan:
    """Tests for register_scan."""

    def test_successful_scan(self, store, scan_payload):
        success, message = register_scan(scan_payload, store=store)

        assert success is True
        assert message == "✅ Scan successful: Test User"
        assert len(store) == 1

    def test_identical_payload_twice_registers_once(self, store, scan_payload):
        """Duplicate suppression makes repeated scans idempotent."""
        register_scan(scan_payload, store=store)
        success, message = register_scan(scan_payload, store=store)

        assert success is False
        assert message == MSG_DUPLICATE_SCAN
        assert len(store) == 1

    def test_invalid_payload(self, store):
        success, message = register_scan("not json", store=store)

        assert success is False
        assert message == MSG_INVALID_FORMAT
        assert len(store) == 0

    def test_two_malformed_payloads_leave_store_untouched(self, store, storage):
        register_scan("{broken", store=store)
        register_scan("<html>", store=store)

        assert len(store) == 0
        assert storage.get(STORAGE_KEY) is None

    def test_label_falls_back_to_email_then_id(self, store):
        _, message = register_scan('{"id": "X1", "email": "a@x.com"}', store=store)
        assert message == "✅ Scan successful: a@x.com"

        _, message = register_scan('{"id": "X2"}', store=store)
        assert message == "✅ Scan successful: X2"

    def test_casing_difference_registers_twice(self, store):
        register_scan('{"id": "X1", "name": "Asha"}', store=store)
        register_scan('{"id": "X1", "name": "ASHA"}', store=store)
        assert len(store) == 2

    def test_storage_failure_reports_error(self, store, scan_payload):
        with patch.object(store.storage, "set", side_effect=IOError("disk full")):
            success, message = register_scan(scan_payload, store=store)

        assert success is False
        assert message == MSG_UNEXPECTED
        assert len(store) == 0

    def test_defaults_to_process_store(self, store, scan_payload, monkeypatch):
        monkeypatch.setattr(registration_service, "get_entry_store", lambda: store)
        register_scan(scan_payload)
        assert len(store) == 1


class TestRegisterManual:
    """Tests for register_manual."""

    def test_successful_manual_entry(self, store):
        success, message = register_manual("Asha", college="SJU", email="asha@example.com", store=store)

        assert success is True
        assert message == "Added Asha"
        assert store.records[0].email == "asha@example.com"

    def test_empty_email_rejected(self, store):
        success, message = register_manual("Asha", email="", store=store)

        assert success is False
        assert message == MSG_MISSING_FIELD
        assert len(store) == 0

    def test_empty_name_rejected(self, store):
        success, message = register_manual("", email="asha@example.com", store=store)

        assert success is False
        assert message == MSG_MISSING_FIELD

    def test_duplicate_manual_entry(self, store):
        with patch("src.services.record_service.random.randint", return_value=123456):
            register_manual("Asha", email="asha@example.com", store=store)
            success, message = register_manual("Asha", email="asha@example.com", store=store)

        assert success is False
        assert message == MSG_DUPLICATE_MANUAL
        assert len(store) == 1

    def test_same_details_with_new_id_is_not_duplicate(self, store):
        with patch("src.services.record_service.random.randint", side_effect=[111111, 222222]):
            register_manual("Asha", email="asha@example.com", store=store)
            success, _ = register_manual("Asha", email="asha@example.com", store=store)

        assert success is True
        assert len(store) == 2


class TestRemoveAndClear:
    """Tests for remove_entry and clear_entries."""

    def test_remove_entry(self, store, existing_record):
        store.add(existing_record)

        success, message = remove_entry("NOESIS123456", store=store)

        assert success is True
        assert "NOESIS123456" in message
        assert len(store) == 0

    def test_remove_unknown_entry(self, store):
        success, message = remove_entry("NOESIS000000", store=store)
        assert success is False
        assert "not found" in message

    def test_clear_entries(self, store, storage, existing_record):
        store.add(existing_record)

        success, message = clear_entries(store=store)

        assert success is True
        assert message == "Cleared 1 entries"
        assert storage.get(STORAGE_KEY) is None
        assert EntryStore(storage).records == []
