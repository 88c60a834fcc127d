"""
Apple Reminders record models.

Creation, modification and due dates are optional because the Reminders
automation interface omits them for some reminders (e.g. items synced from
older iCloud accounts).
"""

from typing import Annotated, Optional

from pydantic import Field

from task_sync.models.base import (
    CamelRecord,
    StrictBool,
    StrictDatetime,
    StrictInt,
    StrictStr,
)

# 0 = none, 1-4 = high, 5 = medium, 6-9 = low (Reminders app convention)
ReminderPriority = Annotated[StrictInt, Field(ge=0, le=9)]


class AppleRemindersList(CamelRecord):
    """A reminders list."""

    id: StrictStr
    name: StrictStr
    color: Optional[StrictStr] = None
    reminder_count: Optional[StrictInt] = None


class AppleReminder(CamelRecord):
    """A single reminder."""

    id: StrictStr
    title: StrictStr
    notes: Optional[StrictStr] = None
    completed: StrictBool
    completion_date: Optional[StrictDatetime] = None
    creation_date: Optional[StrictDatetime] = None
    modification_date: Optional[StrictDatetime] = None
    due_date: Optional[StrictDatetime] = None
    priority: ReminderPriority
    reminder_list: AppleRemindersList = Field(alias="list")
    all_day: Optional[StrictBool] = None
    url: Optional[StrictStr] = None

    @property
    def external_url(self) -> str:
        """Deep link that opens the reminder in the Reminders app."""
        return f"x-apple-reminderkit://REMCDReminder/{self.id}"
