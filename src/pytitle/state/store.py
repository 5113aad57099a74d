"""Single-row persisted title cache.

This is the only component allowed to write the title row.  Every
committed write is published to an observable so readers always see the
last committed value.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3

from pytitle._constants import TITLE_ROW_ID
from pytitle.exceptions import PersistenceError
from pytitle.models.title import Title
from pytitle.state.backends import KeyValueBackend
from pytitle.state.observable import MutableObservable, Observable

_logger = logging.getLogger(__name__)

_BACKEND_ERRORS = (sqlite3.Error, OSError)


class TitleStore:
    """Persisted title exposed as a replay-latest observable.

    The row previously committed to *backend* (if any) is loaded on
    construction, so subscribers see it straight away.
    """

    def __init__(self, backend: KeyValueBackend) -> None:
        self._backend = backend
        self._write_lock = asyncio.Lock()
        self._title: MutableObservable[Title | None] = MutableObservable()

        try:
            stored = backend.read(TITLE_ROW_ID)
        except _BACKEND_ERRORS as exc:
            raise PersistenceError(f"Unable to load title: {exc}") from exc
        if stored is not None:
            self._title.publish(Title(title=stored))

    def observe(self) -> Observable[Title | None]:
        """Return the title observable (``None`` until a title is stored)."""
        return self._title.as_observable()

    async def upsert(self, title: Title) -> None:
        """Replace the title row with *title*.

        Writes are serialized.  The observable is only updated after the
        backend committed the row; on failure both stay unchanged.  A
        caller cancelled while queued behind another write writes nothing;
        once its backend write has started, it completes.

        Raises
        ------
        PersistenceError
            If the backend write fails.
        """
        # Cancelled while queued: nothing is written.
        await self._write_lock.acquire()
        try:
            commit = asyncio.ensure_future(self._commit(title))
        except BaseException:
            self._write_lock.release()
            raise
        # The commit task owns the lock from here on.  A write that has
        # started always runs to completion, so the observable never lags
        # behind the committed row.
        commit.add_done_callback(self._on_commit_done)
        try:
            await asyncio.shield(commit)
        except asyncio.CancelledError:
            commit.add_done_callback(self._log_orphaned_failure)
            raise

    async def _commit(self, title: Title) -> None:
        try:
            await asyncio.to_thread(self._backend.write, title.id, title.title)
        except _BACKEND_ERRORS as exc:
            _logger.debug("Title write failed", exc_info=True)
            raise PersistenceError(f"Unable to save title: {exc}") from exc
        _logger.debug("Stored title %r", title.title)
        self._title.publish(title)

    def _on_commit_done(self, _commit: asyncio.Future[None]) -> None:
        self._write_lock.release()

    def _log_orphaned_failure(self, commit: asyncio.Future[None]) -> None:
        if commit.cancelled():
            return
        exc = commit.exception()
        if exc is not None:
            _logger.warning("Title write failed after its caller was cancelled", exc_info=exc)
