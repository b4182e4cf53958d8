from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from ..core.exceptions import CorruptStoreError
from .base import BaseStore

logger = logging.getLogger(__name__)


def _read_document(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptStoreError(f"Store file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise CorruptStoreError(f"Store file {path} must contain a JSON object")
    return data


class JsonFileStore(BaseStore):
    """Singleton-like store per file path.

    Note: One instance per path so every writer in the process shares the
    same lock. Writes go to a temp file that replaces the target.
    """

    _instances: Dict[str, "JsonFileStore"] = {}

    def __init__(self, path: str | Path):
        self._path = Path(path)
        super().__init__(_read_document(self._path))
        logger.debug("Opened store %s (keys=%s)", self._path, sorted(self._data))

    @classmethod
    def get_instance(cls, path: str | Path) -> "JsonFileStore":
        key = str(Path(path).resolve())
        if key not in cls._instances:
            cls._instances[key] = JsonFileStore(path)
        return cls._instances[key]

    @property
    def path(self) -> Path:
        return self._path

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=self._path.name, suffix=".tmp", dir=str(self._path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

