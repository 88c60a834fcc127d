"""
Plugin lifecycle for Task Sync.

Loads persisted settings, wires event handlers, and keeps the set of live
integration services in step with which integrations are enabled.
"""

import logging
from typing import Any, Optional

from task_sync.cache import JsonFileStore, PluginDataStore
from task_sync.config import configure_logging, get_settings
from task_sync.events import EventManager, EventType, publish_settings_changes
from task_sync.events.handlers import (
    FrontmatterStore,
    IntegrationSettingsHandler,
    StatusDoneHandler,
    TaskStatusesSettingsHandler,
)
from task_sync.events.types import GenericEventData
from task_sync.integrations import (
    IntegrationRegistry,
    integration_registry,
    register_default_integrations,
)
from task_sync.models.settings import TaskSyncSettings

logger = logging.getLogger(__name__)


class TaskSyncPlugin:
    """
    Host-facing entry point.

    The host supplies a frontmatter store (write access to notes) and,
    optionally, a data store for its persisted plugin data, then calls
    load(). Without a data store, plugin data lives in the JSON file named
    by ``TASK_SYNC_DATA_FILE``.

    Raises:
        ValueError: If the process configuration is invalid for production
    """

    def __init__(
        self,
        frontmatter: FrontmatterStore,
        store: Optional[PluginDataStore] = None,
        registry: IntegrationRegistry = integration_registry,
        event_manager: Optional[EventManager] = None,
    ):
        self.config = get_settings()
        if self.config.is_production:
            self.config.validate_production_config()

        self.store = store if store is not None else JsonFileStore(self.config.data_file)
        self.frontmatter = frontmatter
        self.registry = registry
        self.events = event_manager or EventManager()
        self.settings = TaskSyncSettings()
        self.status_handler: Optional[StatusDoneHandler] = None
        self._services: dict[str, Any] = {}
        self._service_handlers: dict[str, IntegrationSettingsHandler] = {}

    async def load(self) -> None:
        configure_logging(self.config)
        data = self.store.load_data() or {}
        self.settings = TaskSyncSettings.model_validate(data.get("settings", {}))
        register_default_integrations(self.registry, store=self.store)

        self.status_handler = StatusDoneHandler(self.settings, self.frontmatter)
        self.events.register_handler(self.status_handler)
        self.events.register_handler(
            TaskStatusesSettingsHandler(self.settings, self.status_handler)
        )

        self._sync_services()
        await self.events.emit(EventType.PLUGIN_LOADED, GenericEventData())
        logger.info(f"Task Sync loaded with integrations: {sorted(self._services) or 'none'}")

    async def unload(self) -> None:
        await self.events.emit(EventType.PLUGIN_UNLOADED, GenericEventData())
        self.events.clear()
        self._services.clear()
        self._service_handlers.clear()
        logger.info("Task Sync unloaded")

    async def update_settings(self, new_settings: TaskSyncSettings) -> list[str]:
        """
        Persist new settings and notify handlers of changed sections.

        Returns:
            Names of the sections that changed
        """
        old_settings = self.settings
        self.settings = new_settings
        self._save_settings()
        self._sync_services()
        return await publish_settings_changes(self.events, old_settings, new_settings)

    def get_service(self, key: str) -> Optional[Any]:
        """Live service for an enabled integration, or None."""
        return self._services.get(key)

    @property
    def active_integrations(self) -> list[str]:
        return list(self._services)

    def _sync_services(self) -> None:
        """Create services for newly enabled integrations and drop disabled ones."""
        for config in self.registry.get_all():
            enabled = config.is_enabled(self.settings)
            active = config.key in self._services

            if enabled and not active:
                service = config.factory(self.settings)
                handler = IntegrationSettingsHandler(service, config.settings_key)
                self._services[config.key] = service
                self._service_handlers[config.key] = handler
                self.events.register_handler(handler)
                logger.info(f"Enabled integration '{config.key}'")
            elif not enabled and active:
                service = self._services.pop(config.key)
                self.events.unregister_handler(self._service_handlers.pop(config.key))
                service.clear_cache()
                logger.info(f"Disabled integration '{config.key}'")

    def _save_settings(self) -> None:
        data = self.store.load_data() or {}
        data["settings"] = self.settings.to_data()
        self.store.save_data(data)
