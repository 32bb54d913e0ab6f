"""
Store Module - In-memory keyed storage for patients and recordings
==================================================================

This module provides the process-lifetime key-value store that backs
the patient registry and the recording log. Nothing is persisted;
a fresh store is empty apart from whatever the caller seeds.
"""

import threading
import time
from typing import Any, Dict, Iterator, List, Optional

from .exceptions import NotFoundError
from .logging import get_logger

logger = get_logger("core.store")


class MemoryStore:
    """
    Thread-safe in-memory key-value store.

    One store owns one collection (patients, recordings). All mutation
    happens under a single lock, so callers that drive one store from
    several threads get unique ids and consistent reads.

    Attributes:
        name (str): Collection name, used in logs
        label (str): Item noun used in not-found errors
        lock (threading.Lock): Guards ``_items`` and id generation

    Example:
        store = MemoryStore("patients", label="Patient")
        key = store.generate_id("patient")
        store.put(key, {"id": key, "name": "Jane"})
        store.get(key)
    """

    def __init__(self, name: str, label: str = "Item"):
        self.name = name
        self.label = label
        self.lock = threading.Lock()
        self._items: Dict[str, Any] = {}
        self._last_stamp = 0

    def generate_id(self, prefix: str) -> str:
        """
        Generate a new identifier of the form ``<prefix>_<epoch-ms>``.

        Two calls within the same millisecond get consecutive stamps,
        so ids stay unique for the life of the store.

        Args:
            prefix: Id prefix, e.g. ``patient`` or ``rec``

        Returns:
            New identifier string
        """
        with self.lock:
            stamp = max(int(time.time() * 1000), self._last_stamp + 1)
            self._last_stamp = stamp
        return f"{prefix}_{stamp}"

    def put(self, key: str, value: Any) -> None:
        """Insert or replace the value stored under ``key``."""
        with self.lock:
            self._items[key] = value

    def get(self, key: str) -> Any:
        """
        Get the value stored under ``key``.

        Raises:
            NotFoundError: If the key is unknown
        """
        with self.lock:
            if key not in self._items:
                raise NotFoundError(f"{self.label} not found", {"id": key})
            return self._items[key]

    def find(self, key: str) -> Optional[Any]:
        """Get the value stored under ``key``, or None."""
        with self.lock:
            return self._items.get(key)

    def delete(self, key: str) -> Any:
        """
        Remove and return the value stored under ``key``.

        Raises:
            NotFoundError: If the key is unknown
        """
        with self.lock:
            if key not in self._items:
                raise NotFoundError(f"{self.label} not found", {"id": key})
            value = self._items.pop(key)

        logger.debug(f"Deleted {key} from {self.name}")
        return value

    def values(self) -> List[Any]:
        """Snapshot of all stored values in insertion order."""
        with self.lock:
            return list(self._items.values())

    def clear(self) -> None:
        """Remove every item."""
        with self.lock:
            self._items.clear()

    def __contains__(self, key: str) -> bool:
        with self.lock:
            return key in self._items

    def __len__(self) -> int:
        with self.lock:
            return len(self._items)

    def __iter__(self) -> Iterator[str]:
        with self.lock:
            return iter(list(self._items))
