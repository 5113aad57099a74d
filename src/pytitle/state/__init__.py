"""State/store layer.

This package is the single source of truth for the cached title: the
persisted row, the observable readers subscribe to, and the shared
database instance.
"""

from pytitle.state.backends import KeyValueBackend, MemoryBackend, SqliteBackend
from pytitle.state.database import TitleDatabase, get_database, reset_database
from pytitle.state.observable import MutableObservable, Observable
from pytitle.state.store import TitleStore

__all__ = [
    "KeyValueBackend",
    "MemoryBackend",
    "MutableObservable",
    "Observable",
    "SqliteBackend",
    "TitleDatabase",
    "TitleStore",
    "get_database",
    "reset_database",
]
