"""Key-value backends for the title cache.

Backends are synchronous and may block; :class:`~pytitle.state.store.TitleStore`
always calls them off the event loop.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from typing import Protocol

_logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):
    """Structural backend interface used by the title store.

    Keeping this a protocol lets tests pass failing or slow doubles
    while the production backends stay concrete.
    """

    def read(self, key: int) -> str | None: ...

    def write(self, key: int, value: str) -> None: ...

    def close(self) -> None: ...


class MemoryBackend:
    """Process-local backend; contents are lost on exit."""

    def __init__(self) -> None:
        self._rows: dict[int, str] = {}
        self._lock = threading.Lock()

    def read(self, key: int) -> str | None:
        with self._lock:
            return self._rows.get(key)

    def write(self, key: int, value: str) -> None:
        with self._lock:
            self._rows[key] = value

    def close(self) -> None:
        with self._lock:
            self._rows.clear()


class SqliteBackend:
    """SQLite file backend with a single ``title`` table.

    Writes use ``INSERT OR REPLACE`` so the row is replaced atomically on
    primary-key conflict.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._lock = threading.Lock()
        # The connection is shared by the worker threads used for writes;
        # access is serialized by ``_lock``.
        self._conn = sqlite3.connect(path, check_same_thread=False)
        with self._lock, self._conn:
            self._conn.execute("CREATE TABLE IF NOT EXISTS title (id INTEGER PRIMARY KEY, title TEXT NOT NULL)")
        _logger.debug("Opened title database at %s", path)

    @property
    def path(self) -> str:
        return self._path

    def read(self, key: int) -> str | None:
        with self._lock:
            row = self._conn.execute("SELECT title FROM title WHERE id = ?", (key,)).fetchone()
        if row is None:
            return None
        return str(row[0])

    def write(self, key: int, value: str) -> None:
        with self._lock, self._conn:
            self._conn.execute("INSERT OR REPLACE INTO title (id, title) VALUES (?, ?)", (key, value))

    def close(self) -> None:
        with self._lock:
            self._conn.close()
