"""
Base class for integration services.

A service is built by its registry factory from the plugin settings, holds
its own settings section, and owns the schema caches for the data it
fetches.
"""

import logging
import sys
from typing import Any, ClassVar, Generic, Optional, TypeVar

from pydantic import BaseModel

from task_sync.cache import MemoryStore, PluginDataStore, SchemaCache, clear_namespace

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=BaseModel)


class BaseIntegrationService(Generic[S]):
    """
    Common lifecycle for integration services.

    Subclasses set ``service_name`` and ``settings_model`` and create their
    caches through ``_cache``.
    """

    service_name: ClassVar[str] = "integration"
    settings_model: ClassVar[type[BaseModel]]

    def __init__(self, settings: S, store: Optional[PluginDataStore] = None):
        self.settings: S = settings
        self.store = store if store is not None else MemoryStore()
        self._caches: dict[str, SchemaCache] = {}

    def is_enabled(self) -> bool:
        return bool(getattr(self.settings, "enabled", False))

    def is_platform_supported(self) -> bool:
        return True

    def is_available(self) -> bool:
        """Enabled and able to run here; logs why not otherwise."""
        if not self.is_enabled():
            logger.debug(f"{self.service_name} is disabled")
            return False
        if not self.is_platform_supported():
            logger.info(f"{self.service_name} is not supported on {sys.platform}")
            return False
        return True

    def update_settings(self, settings: Any) -> None:
        """Replace settings; accepts a settings model or its persisted dict form."""
        if not isinstance(settings, self.settings_model):
            settings = self.settings_model.model_validate(settings)
        self.settings = settings

    def clear_cache(self) -> None:
        """Drop this service's caches, including entries persisted by earlier sessions."""
        self._caches.clear()
        clear_namespace(self.store, self.service_name)

    def _cache(self, name: str, type_: Any) -> SchemaCache:
        if name not in self._caches:
            self._caches[name] = SchemaCache(self.store, f"{self.service_name}.{name}", type_)
        return self._caches[name]


class MacOSIntegrationService(BaseIntegrationService[S]):
    """Base for services that drive macOS apps through automation scripts."""

    def is_platform_supported(self) -> bool:
        return sys.platform == "darwin"
