"""
Event system for Task Sync.

Provides the event manager, event types, and settings-change publication.
"""

from task_sync.events.manager import EventManager
from task_sync.events.settings_changes import detect_settings_changes, publish_settings_changes
from task_sync.events.types import (
    DoneChangedEventData,
    EventType,
    PluginEvent,
    SettingsChangedEventData,
    StatusChangedEventData,
)

__all__ = [
    "DoneChangedEventData",
    "EventManager",
    "EventType",
    "PluginEvent",
    "SettingsChangedEventData",
    "StatusChangedEventData",
    "detect_settings_changes",
    "publish_settings_changes",
]
