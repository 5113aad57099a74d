"""Network access for fetching the next title."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any, Protocol
from urllib.parse import urljoin

import aiohttp

from pytitle._constants import NEXT_TITLE_PATH, USER_AGENT
from pytitle.config import TitleConfig
from pytitle.exceptions import NetworkError
from pytitle.interceptors import Interceptor, SkipNetworkInterceptor, TitleRequest

_logger = logging.getLogger(__name__)


class TitleNetwork(Protocol):
    """Structural network interface used by the repository.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTitleNetwork`) concrete.
    """

    async def fetch_next_title(self) -> str: ...


def parse_title_body(text: str, *, url: str = "") -> str:
    """Extract the title from a response body.

    The service answers with a JSON string (``"Hello"``); anything that
    does not decode to a string is taken as bare text.
    """
    body = text.strip()
    try:
        decoded = json.loads(body)
    except json.JSONDecodeError:
        decoded = body
    title = decoded.strip() if isinstance(decoded, str) else body
    if not title:
        raise NetworkError(f"Empty title from {url}", url=url)
    return title


class HttpTitleNetwork:
    """Fetch titles with an HTTP GET through an interceptor chain.

    Usage::

        async with HttpTitleNetwork(config) as network:
            title = await network.fetch_next_title()

    Interceptors run in the order given; the last link performs the
    request.  An aiohttp session passed as *session* is left open on exit.
    """

    def __init__(
        self,
        config: TitleConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        interceptors: Sequence[Interceptor] = (),
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._interceptors = tuple(interceptors)

    @classmethod
    def from_config(cls, config: TitleConfig, **kwargs: Any) -> HttpTitleNetwork:
        """Build a network, faking responses when ``config.skip_network`` is set."""
        interceptors: list[Interceptor] = list(kwargs.pop("interceptors", ()))
        if config.skip_network:
            interceptors.append(
                SkipNetworkInterceptor(
                    delay=config.fake_delay,
                    error_rate=config.fake_error_rate,
                    seed=config.fake_seed,
                )
            )
        return cls(config, interceptors=interceptors, **kwargs)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> HttpTitleNetwork:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
        self._http_session = None

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def fetch_next_title(self) -> str:
        """Fetch the next title.

        Raises
        ------
        NetworkError
            If the request fails, times out, returns a non-200 status,
            an undecodable or empty body, or an interceptor rejects it.
        """
        request = TitleRequest(
            url=urljoin(self._config.base_url, NEXT_TITLE_PATH),
            timeout=self._config.request_timeout,
        )
        return await self._proceed(0, request)

    async def _proceed(self, index: int, request: TitleRequest) -> str:
        if index < len(self._interceptors):
            interceptor = self._interceptors[index]

            async def _next(next_request: TitleRequest) -> str:
                return await self._proceed(index + 1, next_request)

            return await interceptor(request, _next)
        return await self._get(request)

    def _require_session(self) -> aiohttp.ClientSession:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return self._http_session

    async def _get(self, request: TitleRequest) -> str:
        http = self._require_session()
        headers = {"accept": "application/json", "user-agent": USER_AGENT}

        _logger.debug("GET %s", request.url)

        try:
            async with http.get(
                request.url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=request.timeout),
            ) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise NetworkError(
                        f"HTTP {resp.status} from {request.url}: {text[:200]}",
                        status_code=resp.status,
                        url=request.url,
                    )
        except NetworkError:
            raise
        except UnicodeDecodeError as exc:
            raise NetworkError(f"Undecodable response from {request.url}: {exc.reason}", url=request.url) from exc
        except TimeoutError as exc:
            raise NetworkError(f"Request to {request.url} timed out", url=request.url) from exc
        except aiohttp.ClientError as exc:
            raise NetworkError(f"Request to {request.url} failed: {exc}", url=request.url) from exc

        return parse_title_body(text, url=request.url)
