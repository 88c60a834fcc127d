"""
Base class for handlers that react to settings changes.

Services extend SettingsChangeHandler to react to specific settings
sections without subscribing to the whole settings object.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Protocol

from task_sync.events.types import EventType, PluginEvent, SettingsChangedEventData

logger = logging.getLogger(__name__)


class SettingsChangeHandler(ABC):
    """
    Abstract handler for SETTINGS_CHANGED events.

    An event is handled only if it reports a real change (``has_changes``)
    to one of the watched sections. Errors raised by handle_settings_change
    are logged here and never propagate to the dispatcher.
    """

    @abstractmethod
    def watched_sections(self) -> set[str]:
        """Settings sections (dotted camelCase paths) this handler cares about."""

    @abstractmethod
    async def handle_settings_change(
        self, section: str, old_settings: Any, new_settings: Any
    ) -> None:
        """React to a change of one watched section."""

    def supported_event_types(self) -> list[EventType]:
        return [EventType.SETTINGS_CHANGED]

    def should_handle(self, event: PluginEvent) -> bool:
        if event.type != EventType.SETTINGS_CHANGED:
            return False
        data = event.data
        if not isinstance(data, SettingsChangedEventData):
            return False
        return data.has_changes and data.section in self.watched_sections()

    async def handle(self, event: PluginEvent) -> None:
        data = event.data
        try:
            await self.handle_settings_change(data.section, data.old_settings, data.new_settings)
        except Exception:
            logger.exception(
                f"{type(self).__name__}: error handling settings change for section '{data.section}'"
            )


class ReactiveService(Protocol):
    """A service that can take new settings and drop cached data."""

    def update_settings(self, settings: Any) -> None:
        ...

    def clear_cache(self) -> None:
        ...


class IntegrationSettingsHandler(SettingsChangeHandler):
    """
    Pushes an integration's settings section into its service.

    The service receives the new section and its cache is cleared, so the
    next fetch uses the new credentials and filters.
    """

    def __init__(self, service: ReactiveService, section: str):
        self.service = service
        self.section = section

    def watched_sections(self) -> set[str]:
        return {self.section}

    async def handle_settings_change(
        self, section: str, old_settings: Any, new_settings: Any
    ) -> None:
        logger.info(f"Settings section '{section}' changed, refreshing {type(self.service).__name__}")
        self.service.update_settings(new_settings)
        self.service.clear_cache()
