"""
Durable local key/value store for process-wide state.

Holds the active language, the exchange-rate record, the rate suppression
deadline and the rate block record. Values are JSON documents in a single
file; every write replaces the file atomically so a crash never leaves a
half-written record behind.
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

_MISSING = object()


class LocalStateStore:
    """
    JSON-file backed key/value store.

    Reads are served from an in-memory copy loaded at construction.
    Writes update the copy and persist the whole document under a lock.

    Args:
        path: Location of the JSON file. Parent directories are created
            on first write.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            logger.info(f"No persisted state at {self.path}, starting empty")
            return {}

        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable state file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring state file {self.path}: top level is not an object")
            return {}

        return data

    def _persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        with self._lock:
            value = self._data.get(key, _MISSING)
        return default if value is _MISSING else value

    def set(self, key: str, value: Any) -> None:
        self.update({key: value})

    def update(self, values: Mapping[str, Any]) -> None:
        """Set several keys in one atomic write."""
        with self._lock:
            self._data.update(values)
            self._persist()

    def delete(self, key: str) -> None:
        with self._lock:
            if key not in self._data:
                return
            del self._data[key]
            self._persist()
