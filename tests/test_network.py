from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import pytest
from aiohttp import test_utils, web

from pytitle._constants import FAKE_TITLES
from pytitle.config import TitleConfig
from pytitle.exceptions import NetworkError
from pytitle.interceptors import Proceed, SkipNetworkInterceptor, TitleRequest
from pytitle.network import HttpTitleNetwork, parse_title_body


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ('"Hello"', "Hello"),
        ("Hello", "Hello"),
        ('  " spaced "\n', "spaced"),
        ('{"title": "x"}', '{"title": "x"}'),
    ],
)
def test_parse_title_body(body: str, expected: str) -> None:
    assert parse_title_body(body) == expected


@pytest.mark.parametrize("body", ["", "   ", '""'])
def test_parse_title_body_rejects_empty(body: str) -> None:
    with pytest.raises(NetworkError):
        parse_title_body(body, url="http://localhost/next_title.json")


@pytest.mark.asyncio
async def test_interceptors_run_in_order_and_may_short_circuit() -> None:
    calls: list[str] = []

    async def _outer(request: TitleRequest, proceed: Proceed) -> str:
        calls.append(f"outer:{request.url}")
        return (await proceed(request)).upper()

    async def _inner(request: TitleRequest, proceed: Proceed) -> str:
        calls.append("inner")
        return "hello"

    network = HttpTitleNetwork(TitleConfig(), interceptors=[_outer, _inner])

    assert await network.fetch_next_title() == "HELLO"
    assert calls == ["outer:http://localhost/next_title.json", "inner"]
    await network.close()


@pytest.mark.asyncio
async def test_interceptor_failure_surfaces_as_network_error() -> None:
    async def _offline(request: TitleRequest, proceed: Proceed) -> str:
        raise NetworkError("offline", url=request.url)

    network = HttpTitleNetwork(TitleConfig(), interceptors=[_offline])

    with pytest.raises(NetworkError, match="offline"):
        await network.fetch_next_title()


@pytest.mark.asyncio
async def test_skip_network_interceptor_is_reproducible_with_seed() -> None:
    async def _never(_request: TitleRequest) -> str:
        raise AssertionError("SkipNetworkInterceptor must not proceed")

    request = TitleRequest(url="http://localhost/next_title.json", timeout=1.0)
    first = SkipNetworkInterceptor(delay=0, seed=42)
    second = SkipNetworkInterceptor(delay=0, seed=42)

    run_a = [await first(request, _never) for _ in range(10)]
    run_b = [await second(request, _never) for _ in range(10)]

    assert run_a == run_b
    assert set(run_a) <= set(FAKE_TITLES)
    assert all(a != b for a, b in zip(run_a, run_a[1:]))
    assert first.attempts == 10


@pytest.mark.asyncio
async def test_skip_network_interceptor_fakes_failures() -> None:
    interceptor = SkipNetworkInterceptor(delay=0, error_rate=1.0, seed=1)
    request = TitleRequest(url="http://localhost/next_title.json", timeout=1.0)

    with pytest.raises(NetworkError) as exc_info:
        await interceptor(request, lambda _request: asyncio.sleep(0, result="unused"))

    assert exc_info.value.status_code == 500
    assert exc_info.value.url == request.url


@pytest.mark.asyncio
async def test_from_config_fakes_titles_without_http() -> None:
    config = TitleConfig(skip_network=True, fake_delay=0, fake_seed=3)

    async with HttpTitleNetwork.from_config(config) as network:
        title = await network.fetch_next_title()

    assert title in FAKE_TITLES


async def _serve(handler: Callable[[web.Request], Awaitable[web.StreamResponse]]) -> test_utils.TestServer:
    app = web.Application()
    app.router.add_get("/next_title.json", handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    return server


@pytest.mark.asyncio
async def test_http_fetch_decodes_json_string_body() -> None:
    async def _handler(_request: web.Request) -> web.Response:
        return web.json_response("Hello, network!")

    server = await _serve(_handler)
    try:
        config = TitleConfig(base_url=str(server.make_url("/")), skip_network=False)
        async with HttpTitleNetwork.from_config(config) as network:
            assert await network.fetch_next_title() == "Hello, network!"
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_http_error_status_maps_to_network_error() -> None:
    async def _handler(_request: web.Request) -> web.Response:
        return web.Response(status=500, text='{"cause": "not sure"}')

    server = await _serve(_handler)
    try:
        config = TitleConfig(base_url=str(server.make_url("/")), skip_network=False)
        async with HttpTitleNetwork(config) as network:
            with pytest.raises(NetworkError) as exc_info:
                await network.fetch_next_title()
    finally:
        await server.close()

    assert exc_info.value.status_code == 500
    assert exc_info.value.url.endswith("/next_title.json")


@pytest.mark.asyncio
async def test_http_timeout_maps_to_network_error() -> None:
    async def _handler(_request: web.Request) -> web.Response:
        await asyncio.sleep(0.5)
        return web.json_response("too late")

    server = await _serve(_handler)
    try:
        config = TitleConfig(base_url=str(server.make_url("/")), skip_network=False, request_timeout=0.05)
        async with HttpTitleNetwork(config) as network:
            with pytest.raises(NetworkError):
                await network.fetch_next_title()
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_http_undecodable_body_maps_to_network_error() -> None:
    async def _handler(_request: web.Request) -> web.Response:
        return web.Response(body=b"\xff\xfe\xfa", content_type="text/plain", charset="utf-8")

    server = await _serve(_handler)
    try:
        config = TitleConfig(base_url=str(server.make_url("/")), skip_network=False)
        async with HttpTitleNetwork(config) as network:
            with pytest.raises(NetworkError, match="Undecodable") as exc_info:
                await network.fetch_next_title()
    finally:
        await server.close()

    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
