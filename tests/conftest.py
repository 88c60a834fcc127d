"""
Pytest configuration and fixtures for Task Sync tests.

Provides sample provider payloads, settings objects and stores.
"""

from datetime import datetime, timezone
from typing import Any

import pytest

from task_sync.cache import MemoryStore
from task_sync.config import get_settings
from task_sync.integrations import IntegrationRegistry
from task_sync.models.settings import TaskSyncSettings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Ensure each test sees environment changes made with monkeypatch."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def registry() -> IntegrationRegistry:
    """A fresh registry so tests never touch the process-wide one."""
    return IntegrationRegistry()


@pytest.fixture
def plugin_settings() -> TaskSyncSettings:
    return TaskSyncSettings()


@pytest.fixture
def reminder_list_payload() -> dict[str, Any]:
    return {"id": "list-1", "name": "Work", "color": "#FF0000", "reminderCount": 2}


@pytest.fixture
def reminder_payload(reminder_list_payload) -> dict[str, Any]:
    """
    A complete AppleReminder payload.

    Returns:
        dict: Payload in camelCase wire shape with datetime values
    """
    return {
        "id": "x-apple-reminder://ABC-123",
        "title": "Write quarterly report",
        "notes": "Include Q3 numbers",
        "completed": False,
        "creationDate": datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc),
        "modificationDate": datetime(2024, 1, 11, 9, 0, tzinfo=timezone.utc),
        "dueDate": datetime(2024, 1, 15, 17, 0, tzinfo=timezone.utc),
        "priority": 1,
        "list": reminder_list_payload,
        "allDay": False,
    }


@pytest.fixture
def calendar_payload() -> dict[str, Any]:
    return {
        "id": "cal-1",
        "name": "Work",
        "description": "Work calendar",
        "color": "#0000FF",
        "visible": True,
        "account": "iCloud",
        "type": "caldav",
    }


@pytest.fixture
def event_payload(calendar_payload) -> dict[str, Any]:
    """A complete AppleCalendarEvent payload."""
    return {
        "id": "evt-1",
        "title": "Team Meeting",
        "description": "Weekly sync",
        "location": "Room 4",
        "startDate": datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
        "endDate": datetime(2024, 1, 15, 11, 0, tzinfo=timezone.utc),
        "allDay": False,
        "status": "confirmed",
        "availability": "busy",
        "calendar": calendar_payload,
        "url": "https://example.com/meeting",
        "attendees": [
            {"name": "Ada", "email": "ada@example.com", "status": "accepted", "isOrganizer": True},
            {"email": "bob@example.com", "status": "pending"},
        ],
        "organizer": {"name": "Ada", "email": "ada@example.com", "status": "accepted", "isOrganizer": True},
        "recurrenceRule": "FREQ=WEEKLY;BYDAY=MO",
        "creationDate": datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc),
        "modificationDate": datetime(2024, 1, 2, 8, 0, tzinfo=timezone.utc),
    }


@pytest.fixture
def github_issue_payload() -> dict[str, Any]:
    return {
        "id": 1001,
        "number": 42,
        "title": "Crash on startup",
        "body": "Steps to reproduce...",
        "state": "open",
        "assignee": {"login": "octocat"},
        "labels": [{"name": "bug", "color": "d73a4a"}],
        "created_at": "2024-01-10T09:00:00Z",
        "updated_at": "2024-01-11T09:00:00Z",
        "html_url": "https://github.com/acme/app/issues/42",
        "user": {"login": "reporter"},
    }
