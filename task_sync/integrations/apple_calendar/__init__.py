"""
Apple Calendar integration for Task Sync.
"""

from task_sync.integrations.apple_calendar.adapter import AppleCalendarAdapter
from task_sync.integrations.apple_calendar.service import AppleCalendarService

__all__ = ["AppleCalendarAdapter", "AppleCalendarService"]
