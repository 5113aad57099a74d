"""Process-wide title database.

One :class:`TitleDatabase` is shared by every repository in the process so
they all read and write the same row.  :func:`get_database` creates it on
first use behind a lock.
"""

from __future__ import annotations

import logging
import threading

from pytitle.config import TitleConfig
from pytitle.state.backends import KeyValueBackend, MemoryBackend, SqliteBackend
from pytitle.state.store import TitleStore

_logger = logging.getLogger(__name__)


class TitleDatabase:
    """Owns the backend and the title store built on top of it."""

    def __init__(self, backend: KeyValueBackend) -> None:
        self._backend = backend
        self.title_dao = TitleStore(backend)

    @classmethod
    def from_config(cls, config: TitleConfig) -> TitleDatabase:
        if config.database_path:
            return cls(SqliteBackend(config.database_path))
        return cls(MemoryBackend())

    def close(self) -> None:
        self._backend.close()


_instance: TitleDatabase | None = None
_instance_lock = threading.Lock()


def get_database(config: TitleConfig | None = None) -> TitleDatabase:
    """Return the shared database, creating it from *config* on first call.

    Later calls return the same instance and ignore *config*.
    """
    global _instance
    database = _instance
    if database is not None:
        return database
    with _instance_lock:
        if _instance is None:
            _instance = TitleDatabase.from_config(config or TitleConfig.from_env())
            _logger.debug("Created shared title database")
        return _instance


def reset_database() -> None:
    """Close and drop the shared database (next call to get_database recreates it)."""
    global _instance
    with _instance_lock:
        database = _instance
        _instance = None
    if database is not None:
        database.close()
