"""
Mapping from Reminders script output to AppleReminder payloads.

Handles:
- Renaming script properties (name/body) to record fields (title/notes)
- Date strings to datetimes
- All-day due dates

Values are not type-coerced: a malformed script value is passed through
so record validation rejects it with the offending field named.
"""

from typing import Any

from task_sync.integrations.apple_script import parse_script_date


class AppleRemindersAdapter:
    """Maps Reminders script output to record payloads."""

    @staticmethod
    def from_script_list(raw: Any) -> Any:
        """Convert a script list object to an AppleRemindersList payload."""
        if not isinstance(raw, dict):
            return raw

        payload: dict[str, Any] = {
            "id": raw.get("id"),
            "name": raw.get("name"),
        }
        if raw.get("color"):
            payload["color"] = raw["color"]
        if raw.get("count") is not None:
            payload["reminderCount"] = raw["count"]
        return payload

    @staticmethod
    def from_script_reminder(raw: Any) -> Any:
        """Convert a script reminder object to an AppleReminder payload."""
        if not isinstance(raw, dict):
            return raw

        all_day_due = parse_script_date(raw.get("alldayDueDate"))
        due = all_day_due if all_day_due is not None else parse_script_date(raw.get("dueDate"))

        payload: dict[str, Any] = {
            "id": raw.get("id"),
            "title": raw.get("name"),
            "completed": raw.get("completed"),
            "priority": raw.get("priority"),
            "list": AppleRemindersAdapter.from_script_list(raw.get("list")),
        }

        if raw.get("body"):
            payload["notes"] = raw["body"]

        dates = {
            "completionDate": parse_script_date(raw.get("completionDate")),
            "creationDate": parse_script_date(raw.get("creationDate")),
            "modificationDate": parse_script_date(raw.get("modificationDate")),
            "dueDate": due,
        }
        payload.update({key: value for key, value in dates.items() if value is not None})

        if due is not None:
            payload["allDay"] = all_day_due is not None

        if raw.get("url"):
            payload["url"] = raw["url"]

        return payload
