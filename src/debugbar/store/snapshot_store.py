"""Snapshot persistence keyed by an opaque, filesystem-safe id.

Backends
--------
- `FileSnapshotStore`: one JSON file per snapshot,
  ``<base_dir>/debugbar_<id>.json``. Writes go to a temporary file in the
  same directory and are moved into place with ``os.replace``, so a reader
  sees either the previous complete file or the new one, and a write under
  one id never touches another id's file. Concurrent writes to the same id
  are last-write-wins.
- `MemorySnapshotStore`: a dict guarded by a lock; volatile, for tests and
  single-process development servers.

The stores treat payloads as raw bytes. `load` returns a
:class:`~debugbar.core.result.Result` so a missing id is an ordinary
outcome rather than an exception.
"""

from __future__ import annotations

import os
import re
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from debugbar.core.errors import SnapshotNotFound
from debugbar.core.result import Result, err, ok
from debugbar.core.settings import Settings, get_logger, load_settings

FILE_PREFIX = "debugbar_"
FILE_SUFFIX = ".json"

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")

logger = get_logger("debugbar.store")


def sanitize_id(token: str) -> str:
    """Reduce a caller-supplied token to a filesystem-safe snapshot id.

    Keeps ``[A-Za-z0-9._-]``, removes ``..`` sequences and leading dots.
    Raises ``ValueError`` if nothing usable remains.
    """
    cleaned = _UNSAFE.sub("", token)
    while ".." in cleaned:
        cleaned = cleaned.replace("..", "")
    cleaned = cleaned.lstrip(".")
    if not cleaned:
        raise ValueError(f"Snapshot id {token!r} has no usable characters")
    return cleaned


class SnapshotStore(ABC):
    """Byte-oriented snapshot storage."""

    @abstractmethod
    def save(self, snapshot_id: str, data: bytes) -> None: ...

    @abstractmethod
    def load(self, snapshot_id: str) -> Result[bytes, SnapshotNotFound]: ...

    @abstractmethod
    def exists(self, snapshot_id: str) -> bool: ...

    @abstractmethod
    def list_ids(self) -> list[str]:
        """Return stored ids, newest first."""

    @abstractmethod
    def delete(self, snapshot_id: str) -> bool:
        """Remove ``snapshot_id``; return whether anything was removed."""


class FileSnapshotStore(SnapshotStore):
    """Persist snapshots as files under ``base_dir``."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, snapshot_id: str) -> Path:
        return self.base_dir / f"{FILE_PREFIX}{sanitize_id(snapshot_id)}{FILE_SUFFIX}"

    def save(self, snapshot_id: str, data: bytes) -> None:
        path = self.path_for(snapshot_id)
        fd, tmp_name = tempfile.mkstemp(dir=self.base_dir, prefix=".tmp_", suffix=FILE_SUFFIX)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Saved snapshot %s (%d bytes)", snapshot_id, len(data))

    def load(self, snapshot_id: str) -> Result[bytes, SnapshotNotFound]:
        try:
            return ok(self.path_for(snapshot_id).read_bytes())
        except (FileNotFoundError, ValueError):
            return err(SnapshotNotFound(snapshot_id))

    def exists(self, snapshot_id: str) -> bool:
        try:
            return self.path_for(snapshot_id).is_file()
        except ValueError:
            return False

    def list_ids(self) -> list[str]:
        files = [
            p for p in self.base_dir.glob(f"{FILE_PREFIX}*{FILE_SUFFIX}") if p.is_file()
        ]
        files.sort(key=lambda p: p.stat().st_mtime, reverse=True)
        return [p.name[len(FILE_PREFIX) : -len(FILE_SUFFIX)] for p in files]

    def delete(self, snapshot_id: str) -> bool:
        try:
            path = self.path_for(snapshot_id)
        except ValueError:
            return False
        if not path.exists():
            return False
        path.unlink()
        return True


class MemorySnapshotStore(SnapshotStore):
    """Volatile in-process store."""

    def __init__(self) -> None:
        self._items: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def save(self, snapshot_id: str, data: bytes) -> None:
        key = sanitize_id(snapshot_id)
        with self._lock:
            # re-insert so the newest id sorts last
            self._items.pop(key, None)
            self._items[key] = bytes(data)

    def load(self, snapshot_id: str) -> Result[bytes, SnapshotNotFound]:
        try:
            key = sanitize_id(snapshot_id)
        except ValueError:
            return err(SnapshotNotFound(snapshot_id))
        with self._lock:
            data = self._items.get(key)
        return ok(data) if data is not None else err(SnapshotNotFound(snapshot_id))

    def exists(self, snapshot_id: str) -> bool:
        return self.load(snapshot_id).is_ok()

    def list_ids(self) -> list[str]:
        with self._lock:
            return list(reversed(self._items))

    def delete(self, snapshot_id: str) -> bool:
        try:
            key = sanitize_id(snapshot_id)
        except ValueError:
            return False
        with self._lock:
            return self._items.pop(key, None) is not None


class StoreHolder:
    """Process-wide store chosen from settings on first use."""

    _instance: ClassVar[SnapshotStore | None] = None

    @classmethod
    def get(cls, settings: Settings | None = None) -> SnapshotStore:
        if cls._instance is None:
            cfg = settings or load_settings()
            if cfg.store_backend == "memory":
                cls._instance = MemorySnapshotStore()
            else:
                cls._instance = FileSnapshotStore(cfg.store_dir)
        return cls._instance

    @classmethod
    def set(cls, store: SnapshotStore | None) -> None:
        """Replace (or with None, reset) the process-wide store."""
        cls._instance = store


def get_store(settings: Settings | None = None) -> SnapshotStore:
    return StoreHolder.get(settings)


__all__ = [
    "FileSnapshotStore",
    "MemorySnapshotStore",
    "SnapshotStore",
    "StoreHolder",
    "get_store",
    "sanitize_id",
]
