"""
Unit tests for plugin data stores.
"""

from task_sync.cache import JsonFileStore, MemoryStore


class TestMemoryStore:
    def test_empty_store(self):
        assert MemoryStore().load_data() is None

    def test_save_and_load(self):
        store = MemoryStore()
        store.save_data({"settings": {"tasksFolder": "Tasks"}})
        assert store.load_data() == {"settings": {"tasksFolder": "Tasks"}}

    def test_load_returns_copy(self):
        """Mutating loaded data must not change stored state."""
        store = MemoryStore({"cache": {}})

        data = store.load_data()
        data["cache"]["x"] = 1

        assert store.load_data() == {"cache": {}}


class TestJsonFileStore:
    def test_missing_file(self, tmp_path):
        assert JsonFileStore(tmp_path / "data.json").load_data() is None

    def test_save_and_load(self, tmp_path):
        store = JsonFileStore(tmp_path / "data.json")

        store.save_data({"settings": {"tasksFolder": "Tasks"}, "cache": {}})

        assert store.load_data() == {"settings": {"tasksFolder": "Tasks"}, "cache": {}}

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "data.json"

        JsonFileStore(path).save_data({})

        assert path.exists()

    def test_no_temporary_files_left(self, tmp_path):
        store = JsonFileStore(tmp_path / "data.json")

        store.save_data({"a": 1})
        store.save_data({"a": 2})

        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]
        assert store.load_data() == {"a": 2}
