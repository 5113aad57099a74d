"""Lifecycle-bound task scope."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

from pytitle.exceptions import ScopeClosedError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class LifecycleScope:
    """Owns every task launched on behalf of one lifecycle.

    Tasks are tracked until they finish.  :meth:`cancel` cancels all
    pending tasks and ends the scope; nothing can be launched afterwards.
    Failures other than cancellation are logged, not re-raised, so a
    crashing task cannot take its siblings down with it.
    """

    def __init__(self, name: str = "scope") -> None:
        self._name = name
        self._tasks: set[asyncio.Task[Any]] = set()
        self._active = True

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def launch(self, coro: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
        """Schedule *coro* on the running loop as a task owned by this scope.

        Raises
        ------
        ScopeClosedError
            If the scope was already cancelled.  *coro* is closed.
        """
        if not self._active:
            coro.close()
            raise ScopeClosedError(f"{self._name} is no longer active")
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.error("Task %s in %s failed", task.get_name(), self._name, exc_info=exc)

    def cancel(self) -> None:
        """End the scope and cancel every pending task."""
        if not self._active:
            return
        self._active = False
        pending = [task for task in self._tasks if not task.done()]
        _logger.debug("Cancelling %d pending task(s) in %s", len(pending), self._name)
        for task in pending:
            task.cancel()

    async def aclose(self) -> None:
        """Cancel the scope and wait for its tasks to unwind."""
        self.cancel()
        tasks = list(self._tasks)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
