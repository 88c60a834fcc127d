"""
Unit tests for task_sync/models/validation.py

Tests sequence validation, error collection across elements, and JSON
reloading of strict records.
"""

import json

import pytest

from task_sync.exceptions import RecordValidationError, ValidationIssue
from task_sync.models import AppleReminder, validate_records
from task_sync.models.validation import list_adapter, validate_json_with


class TestValidateRecords:
    """Test element-wise validation of sequences."""

    def test_valid_sequence(self, reminder_payload):
        second = {**reminder_payload, "id": "x-apple-reminder://DEF-456"}

        reminders = validate_records(AppleReminder, [reminder_payload, second])

        assert [r.id for r in reminders] == ["x-apple-reminder://ABC-123", "x-apple-reminder://DEF-456"]

    def test_empty_sequence(self):
        assert validate_records(AppleReminder, []) == []

    def test_failures_collected_from_every_element(self, reminder_payload):
        """Each invalid element is reported with its index."""
        missing_priority = {k: v for k, v in reminder_payload.items() if k != "priority"}
        missing_list = {k: v for k, v in reminder_payload.items() if k != "list"}

        with pytest.raises(RecordValidationError) as exc_info:
            validate_records(
                AppleReminder,
                [reminder_payload, missing_priority, reminder_payload, missing_list],
            )

        assert exc_info.value.fields == ["1.priority", "3.list"]
        assert exc_info.value.record_type == "list[AppleReminder]"

    def test_non_dict_element(self, reminder_payload):
        with pytest.raises(RecordValidationError) as exc_info:
            validate_records(AppleReminder, [reminder_payload, "not a reminder"])

        assert exc_info.value.fields == ["1"]

    def test_error_message_lists_issues(self, reminder_payload):
        del reminder_payload["title"]

        with pytest.raises(RecordValidationError) as exc_info:
            validate_records(AppleReminder, [reminder_payload])

        assert "0.title" in str(exc_info.value)
        assert isinstance(exc_info.value.issues[0], ValidationIssue)
        assert exc_info.value.original_error is not None

    def test_list_adapter_cached(self):
        assert list_adapter(AppleReminder) is list_adapter(AppleReminder)


class TestValidateJson:
    def test_iso_dates_accepted_from_json(self, reminder_payload):
        """Serialized records reload with their dates intact."""
        reminder = validate_records(AppleReminder, [reminder_payload])[0]
        raw = json.dumps([reminder.model_dump(by_alias=True, mode="json")])

        reloaded = validate_json_with(list_adapter(AppleReminder), raw, "reminders")

        assert reloaded == [reminder]

    def test_invalid_json_payload(self):
        with pytest.raises(RecordValidationError):
            validate_json_with(list_adapter(AppleReminder), '[{"id": 1}]', "reminders")


class TestValidationIssue:
    def test_str_uses_path(self):
        issue = ValidationIssue(path="2.priority", message="Field required", type="missing")
        assert str(issue) == "2.priority: Field required"

    def test_str_root(self):
        issue = ValidationIssue(path="", message="Input should be a valid list", type="list_type")
        assert str(issue) == "<root>: Input should be a valid list"
