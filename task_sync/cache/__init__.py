"""
Persistent, schema-validated caching for integration data.
"""

from task_sync.cache.schema_cache import CacheEntry, SchemaCache, clear_namespace
from task_sync.cache.storage import JsonFileStore, MemoryStore, PluginDataStore

__all__ = [
    "CacheEntry",
    "JsonFileStore",
    "MemoryStore",
    "PluginDataStore",
    "SchemaCache",
    "clear_namespace",
]
