"""Custom exception hierarchy for pytitle."""

from __future__ import annotations


class TitleError(Exception):
    """Base exception for all pytitle errors."""


class TitleConfigError(TitleError):
    """Invalid or missing configuration."""


class NetworkError(TitleError):
    """Fetching the next title failed (transport, non-200, empty body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class PersistenceError(TitleError):
    """Writing the title row to the backing store failed."""


class RefreshError(TitleError):
    """A title refresh failed.

    Raised at the repository boundary for any network or persistence
    failure.  ``message`` is safe to show to the user as-is; the
    underlying error is available as ``__cause__``.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ScopeClosedError(TitleError):
    """Work was launched on a lifecycle scope that has already ended."""
