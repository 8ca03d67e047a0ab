"""A single JSON document on disk, shared by the JSON repositories.

Each repository owns one file. A load-modify-persist cycle runs inside
``transaction()``, which holds the store's re-entrant thread lock and an
exclusive ``flock`` on a sibling ``.<name>.lock`` file, so two stores on
the same path (in one process or in several) never interleave their
writes. Every write goes to a unique temporary file that replaces the
document in one ``os.replace`` call, so readers never see half a document.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterator


class JsonFileStore:

    def __init__(self, file_path: Path, empty: Any) -> None:
        self._file_path = file_path
        self._lock_path = file_path.with_name(f".{file_path.name}.lock")
        self._empty = empty
        self._lock = threading.RLock()
        self._depth = 0
        self._ensure_file()

    def load(self) -> Any:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def persist(self, data: Any) -> None:
        with self.transaction():
            fd, temp_path = tempfile.mkstemp(
                dir=self._file_path.parent,
                prefix=f".{self._file_path.stem}_",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                    f.write("\n")
                os.replace(temp_path, self._file_path)
            except Exception:
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass
                raise

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the thread lock and the file lock across a load-modify-persist cycle.

        Re-entrant: nested transactions on the same store reuse the file
        lock taken by the outermost one.
        """
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return
            with open(self._lock_path, "w") as lock_file:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                self._depth = 1
                try:
                    yield
                finally:
                    self._depth = 0
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _ensure_file(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        with self.transaction():
            if not self._file_path.exists():
                self.persist(self._empty)


# --- Field codecs -------------------------------------------------------------


def dump_decimal(value: Decimal) -> str:
    return str(value)


def load_decimal(raw: str | int | float | None, default: str = "0") -> Decimal:
    if raw is None:
        return Decimal(default)
    return Decimal(str(raw))


def dump_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def load_datetime(raw: str | None) -> datetime | None:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    if not raw:
        return None
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
