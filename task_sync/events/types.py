"""
Event types and interfaces for Task Sync.

Defines the event system used to react to settings changes and to
status/done field changes in task notes.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Protocol, Union


class EventType(str, Enum):
    """All event types supported by the plugin."""

    # File change events
    STATUS_CHANGED = "status-changed"
    DONE_CHANGED = "done-changed"

    # System events
    PLUGIN_LOADED = "plugin-loaded"
    PLUGIN_UNLOADED = "plugin-unloaded"
    SETTINGS_CHANGED = "settings-changed"


@dataclass
class StatusChangedEventData:
    file_path: str
    new_status: str
    frontmatter: dict[str, Any] = field(default_factory=dict)
    old_status: Optional[str] = None


@dataclass
class DoneChangedEventData:
    file_path: str
    new_done: bool
    frontmatter: dict[str, Any] = field(default_factory=dict)
    old_done: Optional[bool] = None


@dataclass
class SettingsChangedEventData:
    """
    Data for SETTINGS_CHANGED.

    ``section`` is the dotted camelCase settings path (e.g. ``taskStatuses``,
    ``integrations.github``). ``has_changes`` is False when the section was
    re-saved with identical content.
    """

    section: str
    old_settings: Any
    new_settings: Any
    has_changes: bool


@dataclass
class GenericEventData:
    payload: dict[str, Any] = field(default_factory=dict)


EventData = Union[
    StatusChangedEventData,
    DoneChangedEventData,
    SettingsChangedEventData,
    GenericEventData,
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PluginEvent:
    type: EventType
    data: EventData
    timestamp: datetime = field(default_factory=_utcnow)


class EventHandler(Protocol):
    """
    Protocol for event handlers.

    Handlers declare the event types they receive and may filter individual
    events with should_handle before handle is awaited.
    """

    def supported_event_types(self) -> list[EventType]:
        ...

    def should_handle(self, event: PluginEvent) -> bool:
        ...

    async def handle(self, event: PluginEvent) -> None:
        ...


# Middleware returns the (possibly modified) event, or None to cancel it
EventMiddleware = Callable[[PluginEvent], Awaitable[Optional[PluginEvent]]]
