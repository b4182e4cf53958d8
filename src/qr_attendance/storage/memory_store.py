from __future__ import annotations

from .base import BaseStore


class InMemoryStore(BaseStore):
    """Process-local store used by tests and by the ``testing`` settings."""
