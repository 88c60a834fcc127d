"""
Mapping from Calendar script output to AppleCalendarEvent payloads.

Handles:
- Script property names (uid/summary/alldayEvent) to record fields
- Event status ("none" means confirmed)
- Attendee participation status ("unknown" means pending)
- Unique ids for occurrences of recurring events
"""

from datetime import datetime
from typing import Any

from task_sync.integrations.apple_script import parse_script_date

STATUS_FROM_SCRIPT = {
    "none": "confirmed",
    "confirmed": "confirmed",
    "tentative": "tentative",
    "cancelled": "cancelled",
}

ATTENDEE_STATUS_FROM_SCRIPT = {
    "unknown": "pending",
    "accepted": "accepted",
    "declined": "declined",
    "tentative": "tentative",
}


class AppleCalendarAdapter:
    """Maps Calendar script output to record payloads."""

    @staticmethod
    def from_script_calendar(raw: Any) -> Any:
        if not isinstance(raw, dict):
            return raw

        payload: dict[str, Any] = {
            "id": raw.get("uid"),
            "name": raw.get("name"),
            "visible": raw.get("visible", True),
        }
        for key in ("description", "color", "account", "type"):
            if raw.get(key):
                payload[key] = raw[key]
        return payload

    @staticmethod
    def from_script_attendee(raw: Any) -> Any:
        if not isinstance(raw, dict):
            return raw

        status = raw.get("participationStatus", "unknown")
        payload: dict[str, Any] = {
            "email": raw.get("email"),
            "status": ATTENDEE_STATUS_FROM_SCRIPT.get(status, status),
        }
        if raw.get("displayName"):
            payload["name"] = raw["displayName"]
        if raw.get("isOrganizer") is not None:
            payload["isOrganizer"] = raw["isOrganizer"]
        return payload

    @staticmethod
    def from_script_event(raw: Any) -> Any:
        """Convert a script event object to an AppleCalendarEvent payload."""
        if not isinstance(raw, dict):
            return raw

        start = parse_script_date(raw.get("startDate"))
        status = raw.get("status", "none")
        recurrence = raw.get("recurrence") or None

        event_id = raw.get("uid")
        # Occurrences of a recurring event share the series uid
        if recurrence and isinstance(event_id, str) and isinstance(start, datetime):
            event_id = f"{event_id}@{start.isoformat()}"

        payload: dict[str, Any] = {
            "id": event_id,
            "title": raw.get("summary"),
            "startDate": start,
            "endDate": parse_script_date(raw.get("endDate")),
            "allDay": raw.get("alldayEvent"),
            "status": STATUS_FROM_SCRIPT.get(status, status),
            "availability": raw.get("availability", "busy"),
            "calendar": AppleCalendarAdapter.from_script_calendar(raw.get("calendar")),
        }

        for key in ("description", "location", "url"):
            if raw.get(key):
                payload[key] = raw[key]
        if recurrence:
            payload["recurrenceRule"] = recurrence

        attendees = raw.get("attendees")
        if attendees:
            payload["attendees"] = [
                AppleCalendarAdapter.from_script_attendee(attendee) for attendee in attendees
            ]
        if raw.get("organizer"):
            payload["organizer"] = AppleCalendarAdapter.from_script_attendee(raw["organizer"])

        created = parse_script_date(raw.get("creationDate"))
        if created is not None:
            payload["creationDate"] = created
        modified = parse_script_date(raw.get("stampDate") or raw.get("modificationDate"))
        if modified is not None:
            payload["modificationDate"] = modified

        return payload
