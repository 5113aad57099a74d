"""pytitle - Async title refresh with an observable, persisted cache."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pytitle")
except PackageNotFoundError:
    __version__ = "0+local"
from pytitle.config import TitleConfig
from pytitle.exceptions import (
    NetworkError,
    PersistenceError,
    RefreshError,
    ScopeClosedError,
    TitleConfigError,
    TitleError,
)
from pytitle.interceptors import SkipNetworkInterceptor, TitleRequest
from pytitle.models import Title, UiState
from pytitle.network import HttpTitleNetwork, TitleNetwork
from pytitle.repository import TitleRepository
from pytitle.scope import LifecycleScope
from pytitle.state import (
    MemoryBackend,
    Observable,
    SqliteBackend,
    TitleDatabase,
    TitleStore,
    get_database,
    reset_database,
)
from pytitle.viewmodel import MainViewModel

__all__ = [
    "__version__",
    "HttpTitleNetwork",
    "LifecycleScope",
    "MainViewModel",
    "MemoryBackend",
    "NetworkError",
    "Observable",
    "PersistenceError",
    "RefreshError",
    "ScopeClosedError",
    "SkipNetworkInterceptor",
    "SqliteBackend",
    "Title",
    "TitleConfig",
    "TitleConfigError",
    "TitleDatabase",
    "TitleError",
    "TitleNetwork",
    "TitleRepository",
    "TitleRequest",
    "TitleStore",
    "UiState",
    "get_database",
    "reset_database",
]
