from task_sync.events.handlers.settings_change import (
    IntegrationSettingsHandler,
    SettingsChangeHandler,
)
from task_sync.events.handlers.status_done import FrontmatterStore, StatusDoneHandler
from task_sync.events.handlers.task_statuses import TaskStatusesSettingsHandler

__all__ = [
    "FrontmatterStore",
    "IntegrationSettingsHandler",
    "SettingsChangeHandler",
    "StatusDoneHandler",
    "TaskStatusesSettingsHandler",
]
