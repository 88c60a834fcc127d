"""
Apple Reminders integration service.

Reads lists and reminders from the Reminders app, validates them, and
caches the result per list selection.
"""

import json
import logging
from typing import Optional

from task_sync.cache import PluginDataStore
from task_sync.exceptions import ScriptExecutionError
from task_sync.integrations.apple_reminders.adapter import AppleRemindersAdapter
from task_sync.integrations.apple_script import (
    REMINDER_LISTS_SCRIPT,
    REMINDERS_SCRIPT,
    OsascriptRunner,
    ScriptRunner,
)
from task_sync.integrations.base import MacOSIntegrationService
from task_sync.models.reminders import AppleReminder, AppleRemindersList
from task_sync.models.settings import AppleRemindersIntegrationSettings
from task_sync.models.validation import validate_records

logger = logging.getLogger(__name__)


class AppleRemindersService(MacOSIntegrationService[AppleRemindersIntegrationSettings]):
    """Fetches reminders according to the integration settings."""

    service_name = "appleReminders"
    settings_model = AppleRemindersIntegrationSettings

    def __init__(
        self,
        settings: AppleRemindersIntegrationSettings,
        store: Optional[PluginDataStore] = None,
        runner: Optional[ScriptRunner] = None,
    ):
        super().__init__(settings, store)
        self.runner = runner or OsascriptRunner()

    async def fetch_lists(self, force_refresh: bool = False) -> list[AppleRemindersList]:
        """
        Get all reminder lists.

        Returns:
            Lists, or an empty list if the integration is unavailable

        Raises:
            ScriptExecutionError: If the Reminders app could not be queried
            RecordValidationError: If the app returned malformed lists
        """
        if not self.is_available():
            return []

        cache = self._cache("lists", list[AppleRemindersList])
        if not force_refresh:
            cached = cache.get("all")
            if cached is not None:
                return cached

        raw = await self._run(REMINDER_LISTS_SCRIPT)
        lists = validate_records(
            AppleRemindersList, [AppleRemindersAdapter.from_script_list(item) for item in raw]
        )
        logger.info(f"Fetched {len(lists)} reminder lists")
        return cache.set("all", lists)

    async def fetch_reminders(self, force_refresh: bool = False) -> list[AppleReminder]:
        """
        Get reminders from the configured lists.

        Returns:
            Filtered reminders, or an empty list if the integration is unavailable

        Raises:
            ScriptExecutionError: If the Reminders app could not be queried
            RecordValidationError: If any reminder is malformed
        """
        if not self.is_available():
            return []

        cache = self._cache("reminders", list[AppleReminder])
        key = self.reminders_cache_key()
        if not force_refresh:
            cached = cache.get(key)
            if cached is not None:
                logger.debug(f"Using cached reminders for {key}")
                return cached

        raw = await self._run(
            REMINDERS_SCRIPT,
            json.dumps(self.settings.reminder_lists),
            "true" if self.settings.include_completed_reminders else "false",
        )
        reminders = validate_records(
            AppleReminder, [AppleRemindersAdapter.from_script_reminder(item) for item in raw]
        )
        reminders = self.filter_reminders(reminders)
        logger.info(f"Fetched {len(reminders)} reminders")
        return cache.set(key, reminders)

    def filter_reminders(self, reminders: list[AppleReminder]) -> list[AppleReminder]:
        """Apply list, completion and all-day settings."""
        wanted = set(self.settings.reminder_lists)
        result = []
        for reminder in reminders:
            if wanted and reminder.reminder_list.name not in wanted:
                continue
            if reminder.completed and not self.settings.include_completed_reminders:
                continue
            if reminder.all_day and self.settings.exclude_all_day_reminders:
                continue
            result.append(reminder)
        return result

    def reminders_cache_key(self) -> str:
        """Cache key for the current list selection and filter settings."""
        lists = ",".join(sorted(self.settings.reminder_lists)) or "*"
        completed = "all" if self.settings.include_completed_reminders else "open"
        all_day = "timed" if self.settings.exclude_all_day_reminders else "any"
        return f"{lists}:{completed}:{all_day}"

    async def _run(self, script: str, *args: str) -> list:
        raw = await self.runner.run_json(script, *args)
        if not isinstance(raw, list):
            raise ScriptExecutionError(f"Expected a JSON array from Reminders, got {type(raw).__name__}")
        return raw
