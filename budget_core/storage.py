"""Document store backing the budget tracker services."""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)

FILE_SCHEME = "file://"


class JSONStorage:
    """File-based JSON document collections with crash-safe writes.

    Each resource is one JSON file holding a list of documents. Writers hold
    ``lock`` while they mutate and save a collection.
    """

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        self._lock = threading.RLock()
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Unable to create data directory {self._base_path}") from exc

    @classmethod
    def from_uri(cls, uri: str) -> "JSONStorage":
        """Open storage from a connection string such as ``file:///var/lib/budget``."""
        candidate = uri.strip()
        if not candidate:
            raise PersistenceError("Database URI cannot be empty")
        if candidate.startswith(FILE_SCHEME):
            candidate = candidate[len(FILE_SCHEME):]
        elif "://" in candidate:
            scheme = candidate.split("://", 1)[0]
            raise PersistenceError(f"Unsupported database URI scheme: {scheme}")
        if not candidate:
            raise PersistenceError("Database URI does not name a directory")
        return cls(Path(candidate))

    def ping(self) -> None:
        """Check that the store is reachable and every collection is readable."""
        if not self._base_path.is_dir():
            raise PersistenceError(f"Data directory {self._base_path} does not exist")
        if not os.access(self._base_path, os.R_OK | os.W_OK):
            raise PersistenceError(f"Data directory {self._base_path} is not readable and writable")
        for path in sorted(self._base_path.glob("*.json")):
            self.load(path.name)
        logger.debug("Storage at %s is reachable", self._base_path)

    def load(self, resource: str) -> List[Dict[str, Any]]:
        path = self._base_path / resource
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupted JSON data in {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

        if not isinstance(payload, list):
            raise PersistenceError(f"Expected list payload in {path}")
        return payload

    def save(self, resource: str, records: Iterable[Dict[str, Any]]) -> None:
        path = self._base_path / resource
        temp_path = path.with_suffix(path.suffix + ".tmp")
        with self._lock:
            try:
                with temp_path.open("w", encoding="utf-8") as handle:
                    json.dump(list(records), handle, indent=2)
                    handle.flush()
                # Atomic on POSIX.
                temp_path.replace(path)
            except OSError as exc:
                raise PersistenceError(f"Unable to write to {path}") from exc

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def base_path(self) -> Path:
        return self._base_path
