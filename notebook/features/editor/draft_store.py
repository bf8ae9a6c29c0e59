"""Local key/value persistence for editor drafts (device scoped, not account scoped)"""
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from notebook import config

logger = logging.getLogger(__name__)

NOTE_DRAFT_KEY = "note-draft"
WAS_IN_NOTE_KEY = "was-in-note"


class DraftStore(ABC):
    """get / set / delete over JSON-serializable values"""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Stored value, or None when absent"""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is a no-op."""


class InMemoryDraftStore(DraftStore):
    """Draft store that lives as long as the process"""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileDraftStore(DraftStore):
    """
    Draft store backed by one JSON file.

    Every write replaces the file atomically (temp file + os.replace), so a
    crash mid-write leaves either the old or the new contents.
    """

    def __init__(self, path: str = config.DRAFT_STORE_PATH):
        self._path = Path(path)

    def _read_all(self) -> Dict[str, Any]:
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Draft store {self._path} unreadable, starting empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, prefix=".drafts-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Optional[Any]:
        return self._read_all().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
