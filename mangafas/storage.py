"""File-based JSON collections with atomic read-modify-write.

Every entity collection (users, suspensions, comments, ...) lives in one JSON
file holding a list of dicts.  Reads go through :meth:`JsonCollection.load`;
every mutation goes through :meth:`JsonCollection.transaction`, which holds a
per-file lock across read, mutation and write so check-then-write
invariants hold under concurrent writers in the same process.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator, Optional

from mangafas.errors import StoreUnavailableError

Clock = Callable[[], datetime]

_locks: dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _locks[key] = lock
        return lock


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    """Return a fresh id such as ``comment-3f2a9c1b7d4e``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def parse_ts(value: str) -> Optional[datetime]:
    """Parse an ISO timestamp written by this package (naive values are UTC)."""
    if not value:
        return None
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class JsonCollection:
    """One JSON file holding a list of record dicts."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = _lock_for(self.path)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_json(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            raise StoreUnavailableError(str(self.path), str(exc)) from exc
        if not isinstance(data, list):
            raise StoreUnavailableError(str(self.path), "expected a JSON list")
        return data

    def _write_json(self, data: list[dict]) -> None:
        try:
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(data, indent=2, default=str))
            os.replace(tmp, self.path)
        except OSError as exc:
            raise StoreUnavailableError(str(self.path), str(exc)) from exc

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self) -> list[dict]:
        """Return a snapshot of every record."""
        with self._lock:
            return self._read_json()

    @contextmanager
    def transaction(self) -> Iterator[list[dict]]:
        """Yield the records for mutation; write them back on clean exit.

        The lock is held for the whole block.  If the block raises, or leaves
        the records unchanged, nothing is written.
        """
        with self._lock:
            records = self._read_json()
            before = json.dumps(records, sort_keys=True, default=str)
            yield records
            if json.dumps(records, sort_keys=True, default=str) != before:
                self._write_json(records)

    def find(self, record_id: str) -> Optional[dict]:
        for record in self.load():
            if record.get("id") == record_id:
                return record
        return None
