from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Protocol

from ..core.exceptions import CorruptStoreError


class KeyValueStore(Protocol):
    """A single document of named collections.

    Repositories read a whole collection, change it, and write it back
    inside ``transaction()``.
    """

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def transaction(self):
        raise NotImplementedError


class BaseStore:
    """Shared locking and rollback for the concrete stores.

    A re-entrant lock makes every read-modify-write single-writer. The
    outermost transaction snapshots the data and restores it on error;
    nested transactions join the outer one. Only transactions that changed
    something are flushed.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(data or {})
        self._lock = threading.RLock()
        self._depth = 0
        self._dirty = False

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            value = self._data.get(key)
            return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        with self.transaction():
            self._data[key] = copy.deepcopy(value)
            self._dirty = True

    def remove(self, key: str) -> None:
        with self.transaction():
            if key in self._data:
                del self._data[key]
                self._dirty = True

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data.keys())

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            outermost = self._depth == 0
            snapshot = copy.deepcopy(self._data) if outermost else None
            self._depth += 1
            try:
                yield
                if outermost and self._dirty:
                    self._flush()
            except Exception:
                if outermost:
                    self._data = snapshot
                raise
            finally:
                self._depth -= 1
                if outermost:
                    self._dirty = False

    def _flush(self) -> None:
        """Persist ``self._data``; in-memory stores have nothing to do."""


def load_collection(store: KeyValueStore, key: str) -> List[Dict[str, Any]]:
    value = store.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(r, dict) for r in value):
        raise CorruptStoreError(f"Stored collection {key!r} is not a list of records")
    return value


def save_collection(store: KeyValueStore, key: str, rows: List[Dict[str, Any]]) -> None:
    """Replace the whole collection in one write."""
    store.set(key, list(rows))
