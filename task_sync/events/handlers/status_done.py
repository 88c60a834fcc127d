"""
Synchronizes the Status and Done fields of task notes.

When a note's Status changes, Done is set from the status's ``is_done``
flag; when Done changes, Status is moved to a status matching the new
done state.
"""

import asyncio
import logging
from typing import Any, Optional, Protocol

from task_sync.events.types import (
    DoneChangedEventData,
    EventType,
    PluginEvent,
    StatusChangedEventData,
)
from task_sync.models.settings import TaskStatus, TaskSyncSettings

logger = logging.getLogger(__name__)

PREFERRED_DONE_STATUSES = ("Done", "Completed", "Finished")
PREFERRED_NOT_DONE_STATUSES = ("Backlog", "Todo", "In Progress")

# Seconds a written field stays locked so the echoed change event is ignored
RELEASE_DELAY = 0.05


class FrontmatterStore(Protocol):
    """Writes frontmatter fields of notes in the host vault."""

    async def update_field(self, file_path: str, field: str, value: Any) -> bool:
        """Set ``field`` to ``value``; return True if the note was modified."""
        ...


class StatusDoneHandler:
    """Handles STATUS_CHANGED and DONE_CHANGED to keep both fields in sync."""

    def __init__(
        self,
        settings: TaskSyncSettings,
        frontmatter: FrontmatterStore,
        release_delay: float = RELEASE_DELAY,
    ):
        self.settings = settings
        self.frontmatter = frontmatter
        self.release_delay = release_delay
        self._processing: dict[str, set[EventType]] = {}

    def update_settings(self, settings: TaskSyncSettings) -> None:
        self.settings = settings

    def supported_event_types(self) -> list[EventType]:
        return [EventType.STATUS_CHANGED, EventType.DONE_CHANGED]

    def should_handle(self, event: PluginEvent) -> bool:
        file_path = getattr(event.data, "file_path", None)
        if file_path is None:
            return False
        return event.type not in self._processing.get(file_path, set())

    async def handle(self, event: PluginEvent) -> None:
        try:
            if event.type == EventType.STATUS_CHANGED:
                await self._handle_status_changed(event.data)
            elif event.type == EventType.DONE_CHANGED:
                await self._handle_done_changed(event.data)
            else:
                logger.warning(f"Unsupported event type: {event.type.value}")
        except Exception:
            logger.exception(f"Error handling {event.type.value}")

    def find_status_for_done(self, is_done: bool) -> Optional[TaskStatus]:
        """
        Pick a status matching ``is_done``.

        Conventional names are preferred (Done/Completed/Finished, or
        Backlog/Todo/In Progress); otherwise the first matching status wins.
        """
        matching = [s for s in self.settings.task_statuses if s.is_done == is_done]
        if not matching:
            return None

        preferred = PREFERRED_DONE_STATUSES if is_done else PREFERRED_NOT_DONE_STATUSES
        for name in preferred:
            for status in matching:
                if status.name == name:
                    return status
        return matching[0]

    async def _handle_status_changed(self, data: StatusChangedEventData) -> None:
        status = self.settings.find_status(data.new_status)
        if status is None:
            logger.warning(f"Unknown status '{data.new_status}' in {data.file_path}")
            return

        current_done = data.frontmatter.get("Done")
        if current_done == status.is_done:
            logger.debug(f"Done already correct for {data.file_path}")
            return

        logger.info(f"Updating Done for {data.file_path}: {current_done} -> {status.is_done}")
        await self._update_field(data.file_path, "Done", status.is_done)

    async def _handle_done_changed(self, data: DoneChangedEventData) -> None:
        current_status = data.frontmatter.get("Status")
        if not current_status:
            logger.debug(f"No Status field in {data.file_path}, skipping")
            return

        status = self.settings.find_status(current_status)
        if status is None:
            logger.warning(f"Unknown current status '{current_status}' in {data.file_path}")
            return

        if status.is_done == data.new_done:
            logger.debug(f"Status already correct for {data.file_path}")
            return

        target = self.find_status_for_done(data.new_done)
        if target is None:
            logger.warning(f"No status configured for Done={data.new_done}")
            return
        if target.name == current_status:
            return

        logger.info(f"Updating Status for {data.file_path}: {current_status} -> {target.name}")
        await self._update_field(data.file_path, "Status", target.name)

    async def _update_field(self, file_path: str, field: str, value: Any) -> None:
        # Writing a field makes the host emit the matching change event; lock it
        # for this file so that echo is not processed again.
        echo_type = EventType.DONE_CHANGED if field == "Done" else EventType.STATUS_CHANGED
        self._processing.setdefault(file_path, set()).add(echo_type)
        try:
            await self.frontmatter.update_field(file_path, field, value)
        finally:
            asyncio.get_running_loop().call_later(
                self.release_delay, self._release, file_path, echo_type
            )

    def _release(self, file_path: str, event_type: EventType) -> None:
        types = self._processing.get(file_path)
        if types is None:
            return
        types.discard(event_type)
        if not types:
            del self._processing[file_path]
