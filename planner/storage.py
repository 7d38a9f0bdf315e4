"""Key-value storage backends for persisted planner state."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)


class Storage(ABC):
    """Abstract durable key-value store holding JSON-serializable values."""
    
    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for key, or default when absent."""
        pass
    
    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key."""
        pass


class MemoryStorage(Storage):
    """Storage kept in a dict for the lifetime of the object."""
    
    def __init__(self, initial: Union[dict[str, Any], None] = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})
    
    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)
    
    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


class JsonFileStorage(Storage):
    """Storage backed by a single JSON object on disk.
    
    The file is read once on construction and rewritten on every set().
    A missing or unreadable file starts an empty store.
    """
    
    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        self._data: dict[str, Any] = self._read()
    
    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self._path, e)
            return {}
        
        if not isinstance(data, dict):
            logger.warning("Ignoring state file %s: not a JSON object", self._path)
            return {}
        return data
    
    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)
    
    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, ensure_ascii=False, indent=2)
