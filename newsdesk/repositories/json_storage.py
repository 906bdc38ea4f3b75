"""
JSON-file persistence for the flat resource collections.

Each collection is one JSON array in its own file. A request loads the whole
array, mutates it in memory and saves it back; there is no cache, no lock and
no atomic rename, so concurrent writers can lose updates (last writer wins).
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for collection persistence failures."""


class CollectionUnavailableError(StorageError):
    """Raised when a collection file is missing, unreadable or not a JSON array."""


class CollectionWriteError(StorageError):
    """Raised when a collection file cannot be written."""


class CollectionStore(Protocol):
    def load(self) -> list: ...

    def save(self, records: list) -> None: ...


class JsonCollectionStore:
    """Reads and rewrites one JSON array file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> list:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.error("Error reading data file at %s: %s", self.path, exc)
            raise CollectionUnavailableError(f"Failed to read data file at {self.path}") from exc
        if not isinstance(data, list):
            raise CollectionUnavailableError(f"Data file at {self.path} does not hold a JSON array")
        return data

    def save(self, records: list) -> None:
        try:
            self.path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error writing to data file at %s: %s", self.path, exc)
            raise CollectionWriteError(f"Failed to write to data file at {self.path}") from exc


class InMemoryCollectionStore:
    """Same contract as JsonCollectionStore without touching the disk."""

    def __init__(self, records: list | None = None) -> None:
        self._records = copy.deepcopy(records) if records is not None else []

    def load(self) -> list:
        return copy.deepcopy(self._records)

    def save(self, records: list) -> None:
        self._records = copy.deepcopy(records)
