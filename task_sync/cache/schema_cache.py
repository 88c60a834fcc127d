"""
Schema-validated two-level cache for integration data.

Entries live in memory and in the plugin data store under
``cache.<cache_key>.<key>``. Data is validated on write and again on load
from storage, so a stale persisted entry from an older schema is treated as
a miss instead of leaking malformed records.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Generic, Optional, TypeVar, get_origin

from pydantic import TypeAdapter

from task_sync.cache.storage import PluginDataStore
from task_sync.config import get_settings
from task_sync.exceptions import RecordValidationError
from task_sync.models.validation import validate_json_with, validate_with

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CacheEntry(Generic[T]):
    data: T
    timestamp: datetime
    version: str
    expires_at: Optional[datetime] = None

    def is_valid(self, version: str, now: datetime) -> bool:
        if self.version != version:
            return False
        if self.expires_at is not None and self.expires_at <= now:
            return False
        return True


class SchemaCache(Generic[T]):
    """
    Cache of validated values of one type.

    Example:
        >>> cache = SchemaCache(MemoryStore(), "appleReminders", list[AppleReminder])
        >>> cache.set("all", reminders)
        >>> cache.get("all")
    """

    def __init__(
        self,
        store: PluginDataStore,
        cache_key: str,
        type_: Any,
        ttl_seconds: Optional[int] = None,
        version: Optional[str] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        settings = get_settings()
        self.store = store
        self.cache_key = cache_key
        self.ttl_seconds = settings.cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.version = version or settings.cache_version
        self._adapter = TypeAdapter(type_)
        self._type_name = str(type_) if get_origin(type_) else getattr(type_, "__name__", str(type_))
        self._clock = clock
        self._memory: dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> Optional[T]:
        """Return cached data for ``key``, or None on miss, expiry or version mismatch."""
        now = self._clock()

        entry = self._memory.get(key)
        if entry is not None and entry.is_valid(self.version, now):
            return entry.data

        entry = self._load_entry(key)
        if entry is not None and entry.is_valid(self.version, now):
            self._memory[key] = entry
            return entry.data

        return None

    def set(self, key: str, data: T) -> T:
        """
        Validate and store ``data``.

        Returns:
            The validated data

        Raises:
            RecordValidationError: If ``data`` does not match the cache type
        """
        validated = validate_with(self._adapter, data, self._type_name)
        now = self._clock()
        entry = CacheEntry(
            data=validated,
            timestamp=now,
            version=self.version,
            expires_at=now + timedelta(seconds=self.ttl_seconds) if self.ttl_seconds else None,
        )
        self._memory[key] = entry
        self._save_entry(key, entry)
        return validated

    def delete(self, key: str) -> None:
        self._memory.pop(key, None)
        cache_data = self._load_cache_data()
        if cache_data.pop(key, None) is not None:
            self._save_cache_data(cache_data)

    def clear(self) -> None:
        self._memory.clear()
        self._save_cache_data({})
        logger.info(f"Cleared cache '{self.cache_key}'")

    def keys(self) -> list[str]:
        """Keys present in persistent storage, valid or not."""
        return list(self._load_cache_data().keys())

    def _load_entry(self, key: str) -> Optional[CacheEntry[T]]:
        serialized = self._load_cache_data().get(key)
        if serialized is None:
            return None

        try:
            return CacheEntry(
                data=validate_json_with(self._adapter, serialized["data"], self._type_name),
                timestamp=datetime.fromisoformat(serialized["timestamp"]),
                version=serialized["version"],
                expires_at=(
                    datetime.fromisoformat(serialized["expiresAt"])
                    if serialized.get("expiresAt")
                    else None
                ),
            )
        except (RecordValidationError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring invalid cache entry '{self.cache_key}.{key}': {e}")
            return None

    def _save_entry(self, key: str, entry: CacheEntry[T]) -> None:
        cache_data = self._load_cache_data()
        cache_data[key] = {
            "data": self._adapter.dump_json(entry.data, by_alias=True).decode("utf-8"),
            "timestamp": entry.timestamp.isoformat(),
            "version": entry.version,
            "expiresAt": entry.expires_at.isoformat() if entry.expires_at else None,
        }
        self._save_cache_data(cache_data)

    def _load_cache_data(self) -> dict[str, Any]:
        data = self.store.load_data() or {}
        return dict(data.get("cache", {}).get(self.cache_key, {}))

    def _save_cache_data(self, cache_data: dict[str, Any]) -> None:
        plugin_data = self.store.load_data() or {}
        plugin_data.setdefault("cache", {})[self.cache_key] = cache_data
        self.store.save_data(plugin_data)


def clear_namespace(store: PluginDataStore, namespace: str) -> list[str]:
    """
    Remove every persisted cache named ``namespace`` or ``namespace.<name>``.

    Works on the stored document alone, so it also drops caches written by
    an earlier session that no ``SchemaCache`` in this process has opened.

    Returns:
        The cache keys that were removed
    """
    plugin_data = store.load_data() or {}
    caches = plugin_data.get("cache", {})
    removed = [
        cache_key
        for cache_key in caches
        if cache_key == namespace or cache_key.startswith(f"{namespace}.")
    ]
    if not removed:
        return []

    for cache_key in removed:
        del caches[cache_key]
    store.save_data(plugin_data)
    logger.info(f"Cleared {len(removed)} persisted caches under '{namespace}'")
    return removed
