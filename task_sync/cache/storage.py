"""
Plugin data storage backends.

The host application persists a single JSON document of plugin data; the
schema cache keeps its entries under the document's ``cache`` key.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class PluginDataStore(Protocol):
    """Load/save interface for the plugin's persisted data document."""

    def load_data(self) -> Optional[dict[str, Any]]:
        """Return the stored document, or None if nothing has been saved."""
        ...

    def save_data(self, data: dict[str, Any]) -> None:
        """Replace the stored document."""
        ...


class MemoryStore:
    """In-process store for tests and hosts that persist data themselves."""

    def __init__(self, data: Optional[dict[str, Any]] = None):
        self._data = json.loads(json.dumps(data)) if data is not None else None

    def load_data(self) -> Optional[dict[str, Any]]:
        if self._data is None:
            return None
        # Return a copy so callers cannot mutate stored state in place
        return json.loads(json.dumps(self._data))

    def save_data(self, data: dict[str, Any]) -> None:
        self._data = json.loads(json.dumps(data))


class JsonFileStore:
    """Store backed by a JSON file, written atomically."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load_data(self) -> Optional[dict[str, Any]]:
        if not self.path.exists():
            return None
        with self.path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def save_data(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            os.unlink(tmp_path)
            raise
        logger.debug(f"Saved plugin data to {self.path}")
