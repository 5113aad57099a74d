"""UI-facing state machine for the title screen."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from pytitle._constants import DEFAULT_TAP_DELAY
from pytitle.config import TitleConfig
from pytitle.exceptions import RefreshError
from pytitle.models.title import Title
from pytitle.models.ui_state import UiState
from pytitle.repository import TitleRepository
from pytitle.scope import LifecycleScope
from pytitle.state.observable import MutableObservable, Observable

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _taps_label(count: int) -> str:
    return f"{count} taps"


class MainViewModel:
    """Store and manage UI-related state for the title screen.

    All background work (title refreshes, delayed tap-label updates) runs
    on a :class:`LifecycleScope` owned by this view model.  Ending the
    lifecycle with :meth:`clear` or :meth:`aclose` cancels pending work,
    and no observable is written afterwards.

    Usage::

        async with MainViewModel(repository) as view_model:
            view_model.spinner.subscribe(show_spinner)
            view_model.on_main_view_clicked()

    Parameters
    ----------
    repository : TitleRepository
        The data source this view model refreshes the title from.
    tap_delay : float
        Seconds a tap waits before updating the taps label.
    """

    def __init__(self, repository: TitleRepository, *, tap_delay: float = DEFAULT_TAP_DELAY) -> None:
        self._repository = repository
        self._tap_delay = tap_delay
        self._scope = LifecycleScope(name=type(self).__name__)

        # Request a snackbar to display an error message.
        self._snackbar: MutableObservable[str | None] = MutableObservable(None)
        # Show a loading spinner if True.
        self._spinner: MutableObservable[bool] = MutableObservable(False)

        self._tap_count = 0
        self._taps: MutableObservable[str] = MutableObservable(_taps_label(self._tap_count))

    @classmethod
    def from_config(cls, repository: TitleRepository, config: TitleConfig) -> MainViewModel:
        return cls(repository, tap_delay=config.tap_delay)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> MainViewModel:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    def clear(self) -> None:
        """End the lifecycle: cancel pending work without waiting for it."""
        self._scope.cancel()

    async def aclose(self) -> None:
        """End the lifecycle and wait until cancelled work has unwound."""
        await self._scope.aclose()

    # ------------------------------------------------------------------
    # Observables
    # ------------------------------------------------------------------

    @property
    def title(self) -> Observable[Title | None]:
        return self._repository.title

    @property
    def snackbar(self) -> Observable[str | None]:
        return self._snackbar.as_observable()

    @property
    def spinner(self) -> Observable[bool]:
        return self._spinner.as_observable()

    @property
    def taps(self) -> Observable[str]:
        """Formatted tap count, updated when each delayed tap task fires."""
        return self._taps.as_observable()

    @property
    def tap_count(self) -> int:
        return self._tap_count

    @property
    def is_active(self) -> bool:
        return self._scope.is_active

    @property
    def state(self) -> UiState:
        return UiState(
            title=self.title.value,
            spinner_visible=bool(self._spinner.value),
            snackbar_message=self._snackbar.value,
            tap_count=self._tap_count,
            taps_label=self._taps.value or _taps_label(0),
        )

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def on_main_view_clicked(self) -> None:
        """Handle a tap on the root view: refresh the title and count the tap.

        Raises
        ------
        ScopeClosedError
            If the lifecycle already ended (after :meth:`clear` or
            :meth:`aclose`).  No tap is counted.
        """
        self.refresh_title()
        self.on_view_tapped()

    def on_view_tapped(self) -> asyncio.Task[None]:
        """Count a tap and schedule its delayed label update.

        Every tap gets its own task; earlier tasks are neither cancelled
        nor merged.  Whichever finishes last decides the label.
        """
        task = self._scope.launch(self._update_taps())
        self._tap_count += 1
        return task

    async def _update_taps(self) -> None:
        await asyncio.sleep(self._tap_delay)
        self._set(self._taps, _taps_label(self._tap_count))

    def on_snackbar_shown(self) -> None:
        """Called immediately after the UI shows the snackbar."""
        if self._snackbar.value is None:
            return
        self._set(self._snackbar, None)

    def refresh_title(self) -> asyncio.Task[None]:
        """Refresh the title from the network via the repository.

        The spinner is shown until the refresh finishes; a failure is
        turned into a snackbar message.  Returns the launched task.
        """
        return self._launch_data_load(self._repository.refresh_title)

    def on_refresh_requested(self) -> asyncio.Task[None]:
        return self.refresh_title()

    def _launch_data_load(self, block: Callable[[], Awaitable[None]]) -> asyncio.Task[None]:
        async def _load() -> None:
            try:
                self._set(self._spinner, True)
                await block()
            except RefreshError as error:
                self._set(self._snackbar, error.message)
            finally:
                self._set(self._spinner, False)

        return self._scope.launch(_load())

    def _set(self, target: MutableObservable[T], value: T) -> None:
        if not self._scope.is_active:
            _logger.debug("Lifecycle ended; dropping update %r", value)
            return
        target.publish(value)
