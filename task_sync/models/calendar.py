"""
Apple Calendar record models.

Shapes match what the Calendar automation scripts return after
normalization (see task_sync.integrations.apple_calendar.adapter).
"""

from typing import Literal, Optional

from pydantic import Field

from task_sync.models.base import CamelRecord, StrictBool, StrictDatetime, StrictStr

EventStatus = Literal["confirmed", "tentative", "cancelled"]
EventAvailability = Literal["busy", "free"]
AttendeeStatus = Literal["accepted", "declined", "tentative", "pending"]


class AppleCalendar(CamelRecord):
    """A calendar from the Calendar app. Read-only snapshot."""

    id: StrictStr
    name: StrictStr
    description: Optional[StrictStr] = None
    color: Optional[StrictStr] = None
    visible: StrictBool
    account: Optional[StrictStr] = None
    calendar_type: Optional[StrictStr] = Field(default=None, alias="type")


class AppleCalendarAttendee(CamelRecord):
    """An attendee (or the organizer) of a calendar event."""

    name: Optional[StrictStr] = None
    email: StrictStr
    status: AttendeeStatus
    is_organizer: Optional[StrictBool] = None


class AppleCalendarEvent(CamelRecord):
    """A single event occurrence from the Calendar app."""

    id: StrictStr
    title: StrictStr
    description: Optional[StrictStr] = None
    location: Optional[StrictStr] = None
    start_date: StrictDatetime
    end_date: StrictDatetime
    all_day: StrictBool
    status: EventStatus
    availability: EventAvailability
    calendar: AppleCalendar
    url: Optional[StrictStr] = None
    attendees: Optional[list[AppleCalendarAttendee]] = None
    organizer: Optional[AppleCalendarAttendee] = None
    recurrence_rule: Optional[StrictStr] = None
    creation_date: Optional[StrictDatetime] = None
    modification_date: Optional[StrictDatetime] = None

    @property
    def duration_minutes(self) -> int:
        """Calculate event duration in minutes."""
        delta = self.end_date - self.start_date
        return int(delta.total_seconds() / 60)
