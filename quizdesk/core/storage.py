"""Key-value storage collaborators and the record codec built on top of them.

The engine treats persistence as an opaque durable mapping from a collection
name to bytes. Records are serialized as JSON through pydantic ``TypeAdapter``
so the frozen dataclasses in :mod:`quizdesk.core.models` round-trip without a
second set of schema classes.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from threading import Lock
from typing import Generic, Protocol, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from quizdesk.core.errors import StorageError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


class KeyValueStore(Protocol):
    def load(self, key: str) -> bytes | None: ...

    def save(self, key: str, data: bytes) -> None: ...


class InMemoryStore:
    """Volatile store, one bytes blob per key."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}
        self._lock = Lock()

    def load(self, key: str) -> bytes | None:
        with self._lock:
            return self._data.get(key)

    def save(self, key: str, data: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(data)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)


class FileStore:
    """Stores each key as ``<directory>/<key>.json``."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory).resolve()
        self._lock = Lock()

    @property
    def directory(self) -> Path:
        return self._directory

    def load(self, key: str) -> bytes | None:
        path = self._path_for(key)
        with self._lock:
            if not path.exists():
                return None
            try:
                return path.read_bytes()
            except OSError as exc:
                raise StorageError(f"Could not read '{key}' from {path}: {exc}") from exc

    def save(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        with self._lock:
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path.write_bytes(data)
                # Readers see either the old file or the new one, never a torn write.
                os.replace(tmp_path, path)
            except OSError as exc:
                raise StorageError(f"Could not write '{key}' to {path}: {exc}") from exc

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"


class RecordCollection(Generic[RecordT]):
    """Reads and writes one named collection of records through a store."""

    def __init__(self, store: KeyValueStore, key: str, record_type: type[RecordT]) -> None:
        self._store = store
        self._key = key
        self._adapter = TypeAdapter(tuple[record_type, ...])

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> tuple[RecordT, ...]:
        raw = self._call_store("load")
        if raw is None:
            return ()
        try:
            records = self._adapter.validate_json(raw)
        except PydanticValidationError as exc:
            raise StorageError(f"Collection '{self._key}' is corrupt: {exc}") from exc
        logger.info("Loaded %d record(s) from '%s'", len(records), self._key)
        return records

    def save(self, records: tuple[RecordT, ...]) -> None:
        payload = self._adapter.dump_json(records)
        self._call_store("save", payload)

    def _call_store(self, operation: str, *args):
        try:
            return getattr(self._store, operation)(self._key, *args)
        except StorageError:
            raise
        except Exception as exc:
            raise StorageError(f"Storage {operation} failed for '{self._key}': {exc}") from exc
