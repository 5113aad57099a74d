"""Snapshot of the UI-facing state exposed by the view model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pytitle.models.title import Title


class UiState(BaseModel):
    """Point-in-time view of every observable the UI binds to.

    Parameters
    ----------
    title : Title or None
        Latest cached title, ``None`` until one has been stored.
    spinner_visible : bool
        ``True`` only while a refresh is in flight.
    snackbar_message : str or None
        Pending one-shot error notice.
    tap_count : int
        Number of taps so far.
    taps_label : str
        Last label written by a completed tap task.
    """

    model_config = ConfigDict(frozen=True)

    title: Title | None = None
    spinner_visible: bool = False
    snackbar_message: str | None = None
    tap_count: int = Field(default=0, ge=0)
    taps_label: str = "0 taps"
