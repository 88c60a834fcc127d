"""
Apple Calendar integration service.

Reads calendars and events from the Calendar app within a day window
configured by the integration settings.
"""

import json
import logging
from datetime import datetime, timedelta
from typing import Optional

from task_sync.cache import PluginDataStore
from task_sync.exceptions import ScriptExecutionError
from task_sync.integrations.apple_calendar.adapter import AppleCalendarAdapter
from task_sync.integrations.apple_script import (
    CALENDARS_SCRIPT,
    EVENTS_SCRIPT,
    OsascriptRunner,
    ScriptRunner,
)
from task_sync.integrations.base import MacOSIntegrationService
from task_sync.models.calendar import AppleCalendar, AppleCalendarEvent
from task_sync.models.settings import AppleCalendarIntegrationSettings
from task_sync.models.validation import validate_records

logger = logging.getLogger(__name__)


class AppleCalendarService(MacOSIntegrationService[AppleCalendarIntegrationSettings]):
    """Fetches calendars and events according to the integration settings."""

    service_name = "appleCalendar"
    settings_model = AppleCalendarIntegrationSettings

    def __init__(
        self,
        settings: AppleCalendarIntegrationSettings,
        store: Optional[PluginDataStore] = None,
        runner: Optional[ScriptRunner] = None,
    ):
        super().__init__(settings, store)
        self.runner = runner or OsascriptRunner()

    async def fetch_calendars(self, force_refresh: bool = False) -> list[AppleCalendar]:
        """
        Get all calendars.

        Raises:
            ScriptExecutionError: If the Calendar app could not be queried
            RecordValidationError: If the app returned malformed calendars
        """
        if not self.is_available():
            return []

        cache = self._cache("calendars", list[AppleCalendar])
        if not force_refresh:
            cached = cache.get("all")
            if cached is not None:
                return cached

        raw = await self._run(CALENDARS_SCRIPT)
        calendars = validate_records(
            AppleCalendar, [AppleCalendarAdapter.from_script_calendar(item) for item in raw]
        )
        logger.info(f"Fetched {len(calendars)} calendars")
        return cache.set("all", calendars)

    async def fetch_events(
        self,
        start: datetime,
        end: datetime,
        force_refresh: bool = False,
    ) -> list[AppleCalendarEvent]:
        """
        Get events overlapping [start, end) from the selected calendars.

        Args:
            start: Range start (timezone-aware)
            end: Range end (timezone-aware)
            force_refresh: Bypass the cache

        Returns:
            Filtered events sorted by start, or an empty list if unavailable

        Raises:
            ValueError: If end is not after start
            ScriptExecutionError: If the Calendar app could not be queried
            RecordValidationError: If any event is malformed
        """
        if end <= start:
            raise ValueError("end must be after start")
        if not self.is_available():
            return []

        cache = self._cache("events", list[AppleCalendarEvent])
        key = self.events_cache_key(start, end)
        if not force_refresh:
            cached = cache.get(key)
            if cached is not None:
                return cached

        raw = await self._run(
            EVENTS_SCRIPT,
            start.isoformat(),
            end.isoformat(),
            json.dumps(self.settings.selected_calendars),
        )
        events = validate_records(
            AppleCalendarEvent, [AppleCalendarAdapter.from_script_event(item) for item in raw]
        )
        events = sorted(self.filter_events(events), key=lambda e: e.start_date)
        logger.info(f"Fetched {len(events)} events between {start.isoformat()} and {end.isoformat()}")
        return cache.set(key, events)

    async def fetch_upcoming_events(
        self,
        now: Optional[datetime] = None,
        force_refresh: bool = False,
    ) -> list[AppleCalendarEvent]:
        """Get events in the configured window around today."""
        start, end = self.event_window(now)
        return await self.fetch_events(start, end, force_refresh=force_refresh)

    def event_window(self, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
        """
        Window from ``days_behind`` days before today's midnight to the end of
        the day ``days_ahead`` days after today.
        """
        now = now or datetime.now().astimezone()
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        start = midnight - timedelta(days=self.settings.days_behind)
        end = midnight + timedelta(days=self.settings.days_ahead + 1)
        return start, end

    def filter_events(self, events: list[AppleCalendarEvent]) -> list[AppleCalendarEvent]:
        """Apply calendar selection, all-day and availability settings."""
        selected = set(self.settings.selected_calendars)
        result = []
        for event in events:
            if selected and event.calendar.name not in selected:
                continue
            if event.all_day and not self.settings.include_all_day_events:
                continue
            if event.availability == "busy" and not self.settings.include_busy_events:
                continue
            if event.availability == "free" and not self.settings.include_free_events:
                continue
            result.append(event)
        return result

    def events_cache_key(self, start: datetime, end: datetime) -> str:
        calendars = ",".join(sorted(self.settings.selected_calendars)) or "*"
        flags = "".join(
            "1" if flag else "0"
            for flag in (
                self.settings.include_all_day_events,
                self.settings.include_busy_events,
                self.settings.include_free_events,
            )
        )
        return f"{calendars}:{start.isoformat()}:{end.isoformat()}:{flags}"

    async def _run(self, script: str, *args: str) -> list:
        raw = await self.runner.run_json(script, *args)
        if not isinstance(raw, list):
            raise ScriptExecutionError(f"Expected a JSON array from Calendar, got {type(raw).__name__}")
        return raw
