"""
Keeps the status evaluator in step with the configured task statuses.
"""

import logging
from typing import Any, Protocol

from task_sync.events.handlers.settings_change import SettingsChangeHandler
from task_sync.models.settings import TaskSyncSettings

logger = logging.getLogger(__name__)

TASK_STATUSES_SECTION = "taskStatuses"


class StatusEvaluator(Protocol):
    """Component that decides done-ness from the configured statuses."""

    def update_settings(self, settings: TaskSyncSettings) -> None:
        ...


class TaskStatusesSettingsHandler(SettingsChangeHandler):
    """
    Reacts to ``taskStatuses`` changes.

    Merges the new status list into the held settings object and pushes the
    merged settings into the status evaluator.
    """

    def __init__(self, settings: TaskSyncSettings, status_evaluator: StatusEvaluator):
        self.settings = settings
        self.status_evaluator = status_evaluator

    def watched_sections(self) -> set[str]:
        return {TASK_STATUSES_SECTION}

    async def handle_settings_change(
        self, section: str, old_settings: Any, new_settings: Any
    ) -> None:
        self.settings = self.settings.with_section(TASK_STATUSES_SECTION, new_settings)
        self.status_evaluator.update_settings(self.settings)
        logger.info(
            f"Task statuses updated: {[status.name for status in self.settings.task_statuses]}"
        )
