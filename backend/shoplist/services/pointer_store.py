"""
Persistence of the "current list" pointer.

The pointer lives in an injected key-value store so tests (and other hosts)
can swap the backend. It is read once at startup with `load()` and written
through on every change.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

POINTER_KEY = "current_list_id"


class KeyValueStore(ABC):
    """Minimal string key-value interface."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore(KeyValueStore):
    """Keeps all keys in one small JSON document."""

    def __init__(self, path: str):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable pointer file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class CurrentListPointer:
    """Id of the list the session is editing, or None."""

    def __init__(self, store: KeyValueStore, key: str = POINTER_KEY):
        self.store = store
        self.key = key
        self._value: Optional[int] = None
        self._loaded = False

    def load(self) -> Optional[int]:
        """Read the persisted pointer. Garbage values are discarded."""
        raw = self.store.get(self.key)
        self._loaded = True
        if raw is None:
            self._value = None
            return None
        try:
            self._value = int(raw)
        except ValueError:
            logger.warning(f"Discarding invalid list pointer {raw!r}")
            self.store.delete(self.key)
            self._value = None
        return self._value

    @property
    def value(self) -> Optional[int]:
        if not self._loaded:
            return self.load()
        return self._value

    def set(self, list_id: int) -> None:
        self._value = list_id
        self._loaded = True
        self.store.set(self.key, str(list_id))
        logger.info(f"Current list pointer -> {list_id}")

    def clear(self) -> None:
        self._value = None
        self._loaded = True
        self.store.delete(self.key)
        logger.info("Current list pointer cleared")
