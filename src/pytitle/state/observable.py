"""Replay-latest observable values.

An :class:`Observable` is a hot, multicast holder of a single value.  New
subscribers immediately receive the latest value (if one was ever
published) and then every later publish, in publish order.  Nothing older
than the latest value is buffered.

Owners keep a :class:`MutableObservable` privately and hand out the
read-only :class:`Observable` surface.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from typing import Any, Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET: Any = object()


class Observable(Generic[T]):
    """Read-only view of a replay-latest value."""

    def __init__(self, initial: T = _UNSET) -> None:
        self._value: T = initial
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def has_value(self) -> bool:
        return self._value is not _UNSET

    @property
    def value(self) -> T | None:
        """Latest published value, or ``None`` if nothing was published yet."""
        if self._value is _UNSET:
            return None
        return self._value

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register *callback* and replay the latest value to it.

        Returns a function that removes the subscription.  Calling it more
        than once is harmless.
        """
        self._subscribers.append(callback)
        if self._value is not _UNSET:
            self._deliver(callback, self._value)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass

        return _unsubscribe

    async def values(self) -> AsyncIterator[T]:
        """Iterate the latest value followed by every later publish."""
        queue: asyncio.Queue[T] = asyncio.Queue()
        unsubscribe = self.subscribe(queue.put_nowait)
        try:
            while True:
                yield await queue.get()
        finally:
            unsubscribe()

    def _deliver(self, callback: Callable[[T], None], value: T) -> None:
        try:
            callback(value)
        except Exception:
            _logger.warning("Observable subscriber %r failed", callback, exc_info=True)

    def _publish(self, value: T) -> None:
        self._value = value
        # Snapshot so callbacks may unsubscribe while being notified.
        for callback in list(self._subscribers):
            self._deliver(callback, value)


class MutableObservable(Observable[T]):
    """Observable whose owner may publish new values."""

    def publish(self, value: T) -> None:
        self._publish(value)

    def as_observable(self) -> Observable[T]:
        return self
