"""Request interceptors for :class:`~pytitle.network.HttpTitleNetwork`.

An interceptor is an async callable ``(request, proceed) -> str``.  It may
call ``await proceed(request)`` to continue down the chain (the last link
performs the HTTP request), return a title of its own, raise
:class:`~pytitle.exceptions.NetworkError`, or sleep to add latency.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from pytitle._constants import DEFAULT_FAKE_DELAY, FAKE_ERROR_MESSAGE, FAKE_TITLES
from pytitle.exceptions import NetworkError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TitleRequest:
    """A single "next title" request travelling through the chain."""

    url: str
    timeout: float


Proceed = Callable[[TitleRequest], Awaitable[str]]
Interceptor = Callable[[TitleRequest, Proceed], Awaitable[str]]


class SkipNetworkInterceptor:
    """Answer every request locally without touching the network.

    Each call waits *delay* seconds, then fails with probability
    *error_rate* (a ``500`` :class:`NetworkError`) or returns a title
    picked from *titles*, never the same one twice in a row.  Pass *seed*
    for reproducible sequences.
    """

    def __init__(
        self,
        *,
        delay: float = DEFAULT_FAKE_DELAY,
        error_rate: float = 0.0,
        titles: Sequence[str] = FAKE_TITLES,
        seed: int | None = None,
    ) -> None:
        if not titles:
            raise ValueError("titles must not be empty")
        self._delay = delay
        self._error_rate = error_rate
        self._titles = tuple(titles)
        self._rng = random.Random(seed)
        self._last_result: str | None = None
        self.attempts = 0

    async def __call__(self, request: TitleRequest, proceed: Proceed) -> str:
        self.attempts += 1
        await asyncio.sleep(self._delay)
        if self._error_rate and self._rng.random() < self._error_rate:
            _logger.debug("Faking failure for %s", request.url)
            raise NetworkError(FAKE_ERROR_MESSAGE, status_code=500, url=request.url)
        return self._next_result()

    def _next_result(self) -> str:
        if len(self._titles) == 1:
            result = self._titles[0]
        else:
            result = self._last_result
            while result == self._last_result:
                result = self._rng.choice(self._titles)
        self._last_result = result
        return result
