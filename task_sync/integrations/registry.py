"""
Integration registry.

Maps integration keys to their configuration: display data, a factory that
builds the service from the plugin settings, an enablement predicate, and
an accessor for the settings section the integration reads.

The registry ``key`` is the integration's identity and is not necessarily
the name of its settings section; the section is reached only through
``settings_path`` (and named by ``settings_key`` for subscriptions).
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from task_sync.exceptions import IntegrationNotFoundError
from task_sync.models.settings import TaskSyncSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntegrationConfig:
    """Registration record for one integration."""

    key: str
    name: str
    icon: str
    factory: Callable[[TaskSyncSettings], Any]
    is_enabled: Callable[[TaskSyncSettings], bool]
    settings_path: Callable[[TaskSyncSettings], Any]
    settings_key: str


class IntegrationRegistry:
    """
    Keyed map of integration configurations.

    Registration is idempotent: registering an existing key replaces the
    entry in place, keeping its original position.
    """

    def __init__(self) -> None:
        self._integrations: dict[str, IntegrationConfig] = {}

    def register(self, config: IntegrationConfig) -> None:
        if config.key in self._integrations:
            logger.debug(f"Replacing registered integration '{config.key}'")
        self._integrations[config.key] = config

    def get(self, key: str) -> Optional[IntegrationConfig]:
        """Return the entry for ``key``, or None if it is not registered."""
        return self._integrations.get(key)

    def require(self, key: str) -> IntegrationConfig:
        """
        Return the entry for ``key``.

        Raises:
            IntegrationNotFoundError: If ``key`` is not registered
        """
        config = self._integrations.get(key)
        if config is None:
            raise IntegrationNotFoundError(key)
        return config

    def get_all(self) -> list[IntegrationConfig]:
        """Snapshot of all entries in registration order."""
        return list(self._integrations.values())

    def get_enabled(self, settings: TaskSyncSettings) -> list[IntegrationConfig]:
        """Entries whose enablement predicate holds for ``settings``."""
        return [config for config in self.get_all() if config.is_enabled(settings)]

    def keys(self) -> list[str]:
        return list(self._integrations.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._integrations

    def __len__(self) -> int:
        return len(self._integrations)


# Process-wide registry, populated at startup by register_default_integrations()
integration_registry = IntegrationRegistry()
