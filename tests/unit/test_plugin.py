"""
Unit tests for task_sync/plugin.py

Tests loading persisted settings, integration lifecycle on settings
changes, and wiring of the status/done handler.
"""

from unittest.mock import AsyncMock, patch

import pytest

from task_sync.cache import JsonFileStore, MemoryStore
from task_sync.events import EventManager, EventType, StatusChangedEventData
from task_sync.integrations import APPLE_REMINDERS, GITHUB
from task_sync.integrations.apple_reminders import AppleRemindersService
from task_sync.integrations.github import GitHubService
from task_sync.models.settings import TaskSyncSettings
from task_sync.plugin import TaskSyncPlugin


@pytest.fixture
def frontmatter() -> AsyncMock:
    store = AsyncMock()
    store.update_field.return_value = True
    return store


def make_plugin(store, frontmatter, registry) -> TaskSyncPlugin:
    return TaskSyncPlugin(
        frontmatter,
        store=store,
        registry=registry,
        event_manager=EventManager(handler_timeout=1.0),
    )


class TestLoad:
    """Test plugin startup."""

    @pytest.mark.asyncio
    async def test_load_with_empty_store(self, store, frontmatter, registry):
        plugin = make_plugin(store, frontmatter, registry)

        await plugin.load()

        assert plugin.settings == TaskSyncSettings()
        assert len(registry) == 3
        assert plugin.active_integrations == []
        assert plugin.events.handler_count(EventType.STATUS_CHANGED) == 1
        assert plugin.events.stats()["processed_events"] == 1

    @pytest.mark.asyncio
    async def test_load_enabled_integration(self, frontmatter, registry):
        store = MemoryStore({"settings": {"integrations": {"github": {"enabled": True}}}})
        plugin = make_plugin(store, frontmatter, registry)

        await plugin.load()

        assert plugin.active_integrations == [GITHUB]
        assert isinstance(plugin.get_service(GITHUB), GitHubService)
        assert plugin.get_service(APPLE_REMINDERS) is None

    @pytest.mark.asyncio
    async def test_unload(self, store, frontmatter, registry):
        plugin = make_plugin(store, frontmatter, registry)
        await plugin.load()

        await plugin.unload()

        assert plugin.events.stats()["total_handlers"] == 0
        assert plugin.active_integrations == []


class TestConfiguration:
    """Test use of process settings at startup."""

    @pytest.mark.asyncio
    async def test_default_store_is_data_file(self, tmp_path, monkeypatch, frontmatter, registry):
        data_file = tmp_path / "plugin.json"
        data_file.write_text('{"settings": {"tasksFolder": "Projects"}}')
        monkeypatch.setenv("TASK_SYNC_DATA_FILE", str(data_file))

        plugin = TaskSyncPlugin(frontmatter, registry=registry)
        await plugin.load()

        assert isinstance(plugin.store, JsonFileStore)
        assert plugin.settings.tasks_folder == "Projects"

    def test_invalid_production_config_rejected(self, monkeypatch, store, frontmatter, registry):
        monkeypatch.setenv("TASK_SYNC_PYTHON_ENV", "production")
        monkeypatch.setenv("TASK_SYNC_LOG_LEVEL", "DEBUG")

        with pytest.raises(ValueError, match="TASK_SYNC_LOG_LEVEL"):
            TaskSyncPlugin(frontmatter, store=store, registry=registry)

    @pytest.mark.asyncio
    async def test_load_configures_logging(self, store, frontmatter, registry):
        plugin = make_plugin(store, frontmatter, registry)

        with patch("task_sync.plugin.configure_logging") as mock_configure:
            await plugin.load()

        mock_configure.assert_called_once_with(plugin.config)


class TestUpdateSettings:
    """Test reacting to settings changes."""

    @pytest.mark.asyncio
    async def test_enable_integration(self, store, frontmatter, registry):
        plugin = make_plugin(store, frontmatter, registry)
        await plugin.load()
        new = plugin.settings.with_section("integrations.appleReminders", {"enabled": True})

        changed = await plugin.update_settings(new)

        assert changed == ["integrations.appleReminders"]
        assert isinstance(plugin.get_service(APPLE_REMINDERS), AppleRemindersService)

    @pytest.mark.asyncio
    async def test_settings_persisted(self, frontmatter, registry):
        store = MemoryStore({"cache": {"github.issues": {}}})
        plugin = make_plugin(store, frontmatter, registry)
        await plugin.load()

        await plugin.update_settings(plugin.settings.with_section("tasksFolder", "Projects"))

        data = store.load_data()
        assert data["settings"]["tasksFolder"] == "Projects"
        assert data["cache"] == {"github.issues": {}}

    @pytest.mark.asyncio
    async def test_unchanged_settings(self, store, frontmatter, registry):
        plugin = make_plugin(store, frontmatter, registry)
        await plugin.load()

        assert await plugin.update_settings(TaskSyncSettings()) == []

    @pytest.mark.asyncio
    async def test_service_receives_new_settings(self, frontmatter, registry):
        """A settings change reaches the live service through its handler."""
        store = MemoryStore({"settings": {"integrations": {"github": {"enabled": True}}}})
        plugin = make_plugin(store, frontmatter, registry)
        await plugin.load()
        service = plugin.get_service(GITHUB)

        await plugin.update_settings(
            plugin.settings.with_section(
                "integrations.github", {"enabled": True, "personalAccessToken": "ghp_new"}
            )
        )

        assert plugin.get_service(GITHUB) is service
        assert service.settings.personal_access_token == "ghp_new"

    @pytest.mark.asyncio
    async def test_disable_integration(self, frontmatter, registry):
        store = MemoryStore({"settings": {"integrations": {"github": {"enabled": True}}}})
        plugin = make_plugin(store, frontmatter, registry)
        await plugin.load()
        settings_handlers = plugin.events.handler_count(EventType.SETTINGS_CHANGED)

        await plugin.update_settings(
            plugin.settings.with_section("integrations.github", {"enabled": False})
        )

        assert plugin.get_service(GITHUB) is None
        assert plugin.events.handler_count(EventType.SETTINGS_CHANGED) == settings_handlers - 1

    @pytest.mark.asyncio
    async def test_disable_integration_clears_persisted_cache(self, frontmatter, registry):
        """Cache entries written in an earlier session go when the integration is disabled."""
        store = MemoryStore(
            {
                "settings": {"integrations": {"github": {"enabled": True}}},
                "cache": {"github.issues": {"acme/app:open:::issues": {"data": "[]"}}},
            }
        )
        plugin = make_plugin(store, frontmatter, registry)
        await plugin.load()

        await plugin.update_settings(
            plugin.settings.with_section("integrations.github", {"enabled": False})
        )

        assert store.load_data()["cache"] == {}

    @pytest.mark.asyncio
    async def test_task_statuses_reach_status_handler(self, store, frontmatter, registry):
        plugin = make_plugin(store, frontmatter, registry)
        await plugin.load()

        await plugin.update_settings(
            plugin.settings.with_section("taskStatuses", [{"name": "Open"}, {"name": "Shipped", "isDone": True}])
        )

        assert plugin.status_handler.find_status_for_done(True).name == "Shipped"


class TestStatusSync:
    @pytest.mark.asyncio
    async def test_status_change_updates_done(self, store, frontmatter, registry):
        plugin = make_plugin(store, frontmatter, registry)
        await plugin.load()

        await plugin.events.emit(
            EventType.STATUS_CHANGED,
            StatusChangedEventData(file_path="Tasks/a.md", new_status="Done", frontmatter={"Done": False}),
        )

        frontmatter.update_field.assert_awaited_once_with("Tasks/a.md", "Done", True)
