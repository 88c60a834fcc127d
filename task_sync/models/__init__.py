"""
Record and settings models for Task Sync.

Exports validated record types for integration payloads and the plugin
settings object.
"""

from task_sync.models.calendar import (
    AppleCalendar,
    AppleCalendarAttendee,
    AppleCalendarEvent,
)
from task_sync.models.github import GitHubIssue, GitHubLabel, GitHubUser
from task_sync.models.reminders import AppleReminder, AppleRemindersList
from task_sync.models.settings import (
    AppleCalendarIntegrationSettings,
    AppleRemindersIntegrationSettings,
    GitHubIntegrationSettings,
    TaskStatus,
    TaskSyncSettings,
)
from task_sync.models.validation import to_payload, validate_record, validate_records

__all__ = [
    "AppleCalendar",
    "AppleCalendarAttendee",
    "AppleCalendarEvent",
    "AppleCalendarIntegrationSettings",
    "AppleReminder",
    "AppleRemindersIntegrationSettings",
    "AppleRemindersList",
    "GitHubIntegrationSettings",
    "GitHubIssue",
    "GitHubLabel",
    "GitHubUser",
    "TaskStatus",
    "TaskSyncSettings",
    "to_payload",
    "validate_record",
    "validate_records",
]
