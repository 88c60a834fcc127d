"""
Unit tests for task_sync/cache/schema_cache.py

Tests expiry, version invalidation, persistence through the plugin data
store, and handling of invalid persisted entries.
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from task_sync.cache import MemoryStore, SchemaCache, clear_namespace
from task_sync.exceptions import RecordValidationError
from task_sync.models import AppleReminder, validate_records


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def reminders(reminder_payload) -> list[AppleReminder]:
    return validate_records(AppleReminder, [reminder_payload])


def make_cache(store, clock, ttl_seconds=60, version="1") -> SchemaCache:
    return SchemaCache(
        store,
        "appleReminders.reminders",
        list[AppleReminder],
        ttl_seconds=ttl_seconds,
        version=version,
        clock=clock,
    )


class TestGetSet:
    """Test basic cache reads and writes."""

    def test_miss_on_empty_store(self, store, clock):
        assert make_cache(store, clock).get("all") is None

    def test_set_then_get(self, store, clock, reminders):
        cache = make_cache(store, clock)

        cache.set("all", reminders)

        assert cache.get("all") == reminders

    def test_set_validates_raw_payloads(self, store, clock, reminder_payload):
        """Raw dicts are validated into records on write."""
        cache = make_cache(store, clock)

        stored = cache.set("all", [reminder_payload])

        assert isinstance(stored[0], AppleReminder)

    def test_set_rejects_invalid_data(self, store, clock, reminder_payload):
        del reminder_payload["priority"]
        cache = make_cache(store, clock)

        with pytest.raises(RecordValidationError) as exc_info:
            cache.set("all", [reminder_payload])

        assert exc_info.value.fields == ["0.priority"]
        assert cache.get("all") is None

    def test_keys_are_independent(self, store, clock, reminders):
        cache = make_cache(store, clock)

        cache.set("Work:open", reminders)

        assert cache.get("Home:open") is None
        assert cache.keys() == ["Work:open"]


class TestExpiry:
    def test_expired_entry_is_miss(self, store, clock, reminders):
        cache = make_cache(store, clock, ttl_seconds=60)
        cache.set("all", reminders)

        clock.advance(59)
        assert cache.get("all") == reminders

        clock.advance(2)
        assert cache.get("all") is None

    def test_zero_ttl_never_expires(self, store, clock, reminders):
        cache = make_cache(store, clock, ttl_seconds=0)
        cache.set("all", reminders)

        clock.advance(365 * 24 * 3600)

        assert cache.get("all") == reminders


class TestPersistence:
    """Test entries surviving across cache instances."""

    def test_reload_from_store(self, store, clock, reminders):
        make_cache(store, clock).set("all", reminders)

        reloaded = make_cache(store, clock).get("all")

        assert reloaded == reminders
        assert reloaded[0].due_date == reminders[0].due_date

    def test_persisted_entry_shape(self, store, clock, reminders):
        make_cache(store, clock, ttl_seconds=60).set("all", reminders)

        entry = store.load_data()["cache"]["appleReminders.reminders"]["all"]

        assert set(entry) == {"data", "timestamp", "version", "expiresAt"}
        assert entry["version"] == "1"
        assert entry["timestamp"] == "2024-01-15T12:00:00+00:00"
        assert entry["expiresAt"] == "2024-01-15T12:01:00+00:00"
        assert isinstance(entry["data"], str)

    def test_version_change_invalidates(self, store, clock, reminders):
        """Entries written under another schema version are misses."""
        make_cache(store, clock, version="1").set("all", reminders)

        assert make_cache(store, clock, version="2").get("all") is None

    def test_other_plugin_data_preserved(self, clock, reminders):
        store = MemoryStore({"settings": {"tasksFolder": "Tasks"}})

        make_cache(store, clock).set("all", reminders)

        assert store.load_data()["settings"] == {"tasksFolder": "Tasks"}

    def test_invalid_persisted_entry_ignored(self, clock, caplog):
        """A persisted entry that fails validation is a miss, not an error."""
        store = MemoryStore({
            "cache": {
                "appleReminders.reminders": {
                    "all": {
                        "data": '[{"id": "r1", "title": "No priority"}]',
                        "timestamp": "2024-01-15T11:00:00+00:00",
                        "version": "1",
                        "expiresAt": None,
                    }
                }
            }
        })

        with caplog.at_level(logging.WARNING):
            assert make_cache(store, clock).get("all") is None

        assert "Ignoring invalid cache entry" in caplog.text

    def test_malformed_persisted_entry_ignored(self, clock):
        store = MemoryStore({"cache": {"appleReminders.reminders": {"all": {"version": "1"}}}})
        assert make_cache(store, clock).get("all") is None


class TestDeleteClear:
    def test_delete(self, store, clock, reminders):
        cache = make_cache(store, clock)
        cache.set("a", reminders)
        cache.set("b", reminders)

        cache.delete("a")

        assert cache.get("a") is None
        assert cache.keys() == ["b"]

    def test_delete_missing_key(self, store, clock):
        make_cache(store, clock).delete("missing")

    def test_clear(self, store, clock, reminders):
        cache = make_cache(store, clock)
        cache.set("a", reminders)

        cache.clear()

        assert cache.get("a") is None
        assert cache.keys() == []
        assert make_cache(store, clock).get("a") is None

    def test_clear_namespace_removes_unopened_caches(self, clock, reminders):
        """Caches under the namespace go even if no SchemaCache opened them."""
        store = MemoryStore()
        make_cache(store, clock).set("all", reminders)
        SchemaCache(store, "appleRemindersArchive.reminders", list[AppleReminder]).set("all", reminders)

        removed = clear_namespace(store, "appleReminders")

        assert removed == ["appleReminders.reminders"]
        assert list(store.load_data()["cache"]) == ["appleRemindersArchive.reminders"]

    def test_clear_namespace_empty_store(self, store):
        assert clear_namespace(store, "github") == []
        assert store.load_data() is None


class TestDefaults:
    def test_ttl_and_version_from_settings(self, store, monkeypatch):
        monkeypatch.setenv("TASK_SYNC_CACHE_TTL_SECONDS", "120")
        monkeypatch.setenv("TASK_SYNC_CACHE_VERSION", "9.9.9")

        cache = SchemaCache(store, "github.issues", list[AppleReminder])

        assert cache.ttl_seconds == 120
        assert cache.version == "9.9.9"
