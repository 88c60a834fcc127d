"""
User-facing plugin settings.

This is the settings object persisted by the host application. Settings are
grouped into named sections (e.g. ``taskStatuses``, ``integrations.github``);
settings-change events and the integration registry address sections by
their dotted camelCase path.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python


class SettingsSection(BaseModel):
    """Base for settings sections: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class TaskStatus(SettingsSection):
    """A configured task status and whether it counts as done."""

    name: str = Field(..., min_length=1)
    color: str = "gray"
    is_done: bool = False


def default_task_statuses() -> list[TaskStatus]:
    return [
        TaskStatus(name="Backlog", color="gray", is_done=False),
        TaskStatus(name="In Progress", color="blue", is_done=False),
        TaskStatus(name="Done", color="green", is_done=True),
    ]


class GitHubIssueFilters(SettingsSection):
    state: Literal["open", "closed", "all"] = "open"
    assignee: str = ""
    labels: list[str] = Field(default_factory=list)


class GitHubIntegrationSettings(SettingsSection):
    enabled: bool = False
    personal_access_token: str = ""
    repositories: list[str] = Field(default_factory=list)
    default_repository: str = ""
    include_pull_requests: bool = False
    issue_filters: GitHubIssueFilters = Field(default_factory=GitHubIssueFilters)


class AppleRemindersIntegrationSettings(SettingsSection):
    enabled: bool = False
    reminder_lists: list[str] = Field(
        default_factory=list,
        description="Lists to import from (empty means all lists)",
    )
    include_completed_reminders: bool = False
    exclude_all_day_reminders: bool = False
    sync_interval: int = Field(default=60, ge=1, description="Minutes between syncs")


class AppleCalendarIntegrationSettings(SettingsSection):
    enabled: bool = False
    selected_calendars: list[str] = Field(
        default_factory=list,
        description="Calendars to include (empty means all calendars)",
    )
    include_all_day_events: bool = True
    include_busy_events: bool = True
    include_free_events: bool = True
    days_ahead: int = Field(default=1, ge=0)
    days_behind: int = Field(default=0, ge=0)


class IntegrationsSettings(SettingsSection):
    github: GitHubIntegrationSettings = Field(default_factory=GitHubIntegrationSettings)
    apple_reminders: AppleRemindersIntegrationSettings = Field(
        default_factory=AppleRemindersIntegrationSettings
    )
    apple_calendar: AppleCalendarIntegrationSettings = Field(
        default_factory=AppleCalendarIntegrationSettings
    )


class TaskSyncSettings(SettingsSection):
    """Root settings object."""

    tasks_folder: str = "Tasks"
    task_statuses: list[TaskStatus] = Field(default_factory=default_task_statuses)
    integrations: IntegrationsSettings = Field(default_factory=IntegrationsSettings)

    def to_data(self) -> dict[str, Any]:
        """Dump to the persisted camelCase form."""
        return self.model_dump(by_alias=True, mode="json")

    def get_section(self, section: str) -> Any:
        """
        Get a section by dotted camelCase path, in its persisted form.

        Raises:
            KeyError: If the path does not name a section
        """
        value: Any = self.to_data()
        for part in section.split("."):
            if not isinstance(value, dict) or part not in value:
                raise KeyError(f"Unknown settings section: {section}")
            value = value[part]
        return value

    def with_section(self, section: str, value: Any) -> "TaskSyncSettings":
        """
        Return a copy with one section replaced by ``value``.

        ``value`` may be a model, a list of models, or plain data; it is
        validated as part of the resulting settings object.

        Raises:
            KeyError: If the path does not name a section
            pydantic.ValidationError: If ``value`` is invalid for the section
        """
        data = self.to_data()
        *parents, leaf = section.split(".")
        target = data
        for part in parents:
            if not isinstance(target.get(part), dict):
                raise KeyError(f"Unknown settings section: {section}")
            target = target[part]
        if leaf not in target:
            raise KeyError(f"Unknown settings section: {section}")

        target[leaf] = to_jsonable_python(value, by_alias=True)
        return TaskSyncSettings.model_validate(data)

    def find_status(self, name: str) -> Optional[TaskStatus]:
        for status in self.task_statuses:
            if status.name == name:
                return status
        return None


# Sections that settings-change events are emitted for
SETTINGS_SECTIONS: tuple[str, ...] = (
    "tasksFolder",
    "taskStatuses",
    "integrations.github",
    "integrations.appleReminders",
    "integrations.appleCalendar",
)
