"""Persistence utilities for the finance tracker ledger.

A store is a flat key/value mapping of JSON-serializable values. The ledger
keeps three slots in it: ``transactions``, ``categories`` and ``currency``.
"""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)


class Storage(ABC):
    """Key/value persistence used by the ledger.

    ``load`` returns ``None`` for a slot that has never been written.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        pass


class JSONStorage(Storage):
    """File-based JSON storage with one crash-safe file per key."""

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Unable to create data directory {self._base_path}") from exc

    def load(self, key: str) -> Optional[Any]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupted JSON data in {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

    def save(self, key: str, value: Any) -> None:
        path = self._path_for(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(value, handle, indent=2, ensure_ascii=False)
                handle.flush()
            # Rename is atomic on POSIX, so readers never see a partial file.
            temp_path.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to persist %s to %s: %s", key, path, exc)
            raise PersistenceError(f"Unable to write to {path}") from exc

    def _path_for(self, key: str) -> Path:
        return self._base_path / f"{key}.json"

    @property
    def base_path(self) -> Path:
        return self._base_path


class MemoryStorage(Storage):
    """In-process storage; values are deep-copied on the way in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._slots: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def load(self, key: str) -> Optional[Any]:
        if key not in self._slots:
            return None
        return copy.deepcopy(self._slots[key])

    def save(self, key: str, value: Any) -> None:
        self._slots[key] = copy.deepcopy(value)
