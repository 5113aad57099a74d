"""Title repository: network fetch plus persisted cache."""

from __future__ import annotations

import logging

from pytitle.exceptions import NetworkError, PersistenceError, RefreshError
from pytitle.models.title import Title
from pytitle.network import TitleNetwork
from pytitle.state.observable import Observable
from pytitle.state.store import TitleStore

_logger = logging.getLogger(__name__)


class TitleRepository:
    """Provide a refresh API for the title and expose it as an observable.

    ``refresh_title`` is safe to await from the event loop driving the UI:
    the network call is non-blocking and the store writes off the loop.
    Results are only ever delivered through :attr:`title`.

    Parameters
    ----------
    network : TitleNetwork
        Source of new titles.
    title_dao : TitleStore
        Persisted cache the fetched title is written to.
    """

    def __init__(self, network: TitleNetwork, title_dao: TitleStore) -> None:
        self._network = network
        self._title_dao = title_dao

    @property
    def title(self) -> Observable[Title | None]:
        """Latest cached title; ``None`` until one was stored."""
        return self._title_dao.observe()

    async def refresh_title(self) -> None:
        """Fetch a new title and store it.

        Not retried; callers re-invoke after a failure.

        Raises
        ------
        RefreshError
            If the fetch or the write fails.  The cached title is left
            unchanged.
        """
        try:
            result = await self._network.fetch_next_title()
            await self._title_dao.upsert(Title(title=result))
        except (NetworkError, PersistenceError) as exc:
            _logger.debug("Title refresh failed: %s", exc)
            raise RefreshError(str(exc)) from exc
