"""
Apple Reminders integration for Task Sync.
"""

from task_sync.integrations.apple_reminders.adapter import AppleRemindersAdapter
from task_sync.integrations.apple_reminders.service import AppleRemindersService

__all__ = ["AppleRemindersAdapter", "AppleRemindersService"]
