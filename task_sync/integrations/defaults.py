"""
Built-in integrations and their registration.
"""

from typing import Optional

from task_sync.cache import PluginDataStore
from task_sync.integrations.apple_calendar import AppleCalendarService
from task_sync.integrations.apple_reminders import AppleRemindersService
from task_sync.integrations.github import GitHubService
from task_sync.integrations.registry import (
    IntegrationConfig,
    IntegrationRegistry,
    integration_registry,
)

GITHUB = "github"
APPLE_REMINDERS = "apple-reminders"
APPLE_CALENDAR = "apple-calendar"


def default_integrations(store: Optional[PluginDataStore] = None) -> list[IntegrationConfig]:
    """
    Configurations for the built-in integrations.

    Args:
        store: Plugin data store shared by the services' caches
    """
    return [
        IntegrationConfig(
            key=GITHUB,
            name="GitHub",
            icon="github",
            factory=lambda s: GitHubService(s.integrations.github, store=store),
            is_enabled=lambda s: s.integrations.github.enabled,
            settings_path=lambda s: s.integrations.github,
            settings_key="integrations.github",
        ),
        IntegrationConfig(
            key=APPLE_REMINDERS,
            name="Apple Reminders",
            icon="list-checks",
            factory=lambda s: AppleRemindersService(s.integrations.apple_reminders, store=store),
            is_enabled=lambda s: s.integrations.apple_reminders.enabled,
            settings_path=lambda s: s.integrations.apple_reminders,
            settings_key="integrations.appleReminders",
        ),
        IntegrationConfig(
            key=APPLE_CALENDAR,
            name="Apple Calendar",
            icon="calendar",
            factory=lambda s: AppleCalendarService(s.integrations.apple_calendar, store=store),
            is_enabled=lambda s: s.integrations.apple_calendar.enabled,
            settings_path=lambda s: s.integrations.apple_calendar,
            settings_key="integrations.appleCalendar",
        ),
    ]


def register_default_integrations(
    registry: IntegrationRegistry = integration_registry,
    store: Optional[PluginDataStore] = None,
) -> IntegrationRegistry:
    """Register the built-in integrations (safe to call more than once)."""
    for config in default_integrations(store):
        registry.register(config)
    return registry
