from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .base import BaseStore
from .json_store import JsonFileStore
from .memory_store import InMemoryStore


@dataclass
class StoreConfig:
    path: Optional[str] = None


def open_store(config: StoreConfig) -> BaseStore:
    """JSON file store for a configured path, in-memory store otherwise."""

    if not config.path:
        return InMemoryStore()
    return JsonFileStore.get_instance(config.path)
