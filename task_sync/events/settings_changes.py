"""
Settings change detection.

Compares two settings snapshots section by section and publishes one
SETTINGS_CHANGED event per section.
"""

import logging
from typing import Iterable, Optional

from task_sync.events.manager import EventManager
from task_sync.events.types import EventType, SettingsChangedEventData
from task_sync.models.settings import SETTINGS_SECTIONS, TaskSyncSettings

logger = logging.getLogger(__name__)


def detect_settings_changes(
    old: Optional[TaskSyncSettings],
    new: TaskSyncSettings,
    sections: Iterable[str] = SETTINGS_SECTIONS,
) -> list[SettingsChangedEventData]:
    """
    Build change records for each section.

    Every section gets a record; ``has_changes`` tells whether it differs.
    With no previous snapshot, every section counts as changed.
    """
    changes = []
    for section in sections:
        old_value = old.get_section(section) if old is not None else None
        new_value = new.get_section(section)
        changes.append(
            SettingsChangedEventData(
                section=section,
                old_settings=old_value,
                new_settings=new_value,
                has_changes=old is None or old_value != new_value,
            )
        )
    return changes


async def publish_settings_changes(
    manager: EventManager,
    old: Optional[TaskSyncSettings],
    new: TaskSyncSettings,
) -> list[str]:
    """
    Emit SETTINGS_CHANGED for every section.

    Returns:
        Names of the sections that actually changed
    """
    changed = []
    for change in detect_settings_changes(old, new):
        await manager.emit(EventType.SETTINGS_CHANGED, change)
        if change.has_changes:
            changed.append(change.section)

    if changed:
        logger.info(f"Settings changed: {', '.join(changed)}")
    return changed
