from __future__ import annotations

import asyncio
import sqlite3
import threading
from pathlib import Path

import pytest
from pydantic import ValidationError

from pytitle.exceptions import PersistenceError
from pytitle.models.title import Title
from pytitle.state.backends import MemoryBackend, SqliteBackend
from pytitle.state.store import TitleStore


class _FlakyBackend(MemoryBackend):
    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False

    def write(self, key: int, value: str) -> None:
        if self.fail_writes:
            raise sqlite3.OperationalError("disk I/O error")
        super().write(key, value)


def test_empty_store_has_no_title() -> None:
    store = TitleStore(MemoryBackend())

    assert store.observe().value is None
    assert not store.observe().has_value


@pytest.mark.asyncio
async def test_upsert_replaces_single_row_and_publishes() -> None:
    backend = MemoryBackend()
    store = TitleStore(backend)
    received: list[Title | None] = []
    store.observe().subscribe(received.append)

    await store.upsert(Title(title="Hello"))
    await store.upsert(Title(title="World"))

    assert [t.title for t in received if t is not None] == ["Hello", "World"]
    assert None not in received
    assert store.observe().value == Title(title="World")
    assert backend.read(0) == "World"


@pytest.mark.asyncio
async def test_failed_write_leaves_row_and_observable_unchanged() -> None:
    backend = _FlakyBackend()
    store = TitleStore(backend)
    await store.upsert(Title(title="Hello"))
    received: list[Title | None] = []
    store.observe().subscribe(received.append)

    backend.fail_writes = True
    with pytest.raises(PersistenceError, match="disk I/O error"):
        await store.upsert(Title(title="Lost"))

    assert received == [Title(title="Hello")]
    assert backend.read(0) == "Hello"


@pytest.mark.asyncio
async def test_concurrent_writes_are_delivered_in_write_order() -> None:
    store = TitleStore(MemoryBackend())
    received: list[str] = []
    store.observe().subscribe(lambda t: received.append(t.title) if t else None)

    await asyncio.gather(*(store.upsert(Title(title=name)) for name in ("a", "b", "c")))

    assert received == ["a", "b", "c"]
    assert store.observe().value == Title(title="c")


@pytest.mark.asyncio
async def test_sqlite_row_survives_reopen(tmp_path: Path) -> None:
    path = str(tmp_path / "titles.sqlite3")
    backend = SqliteBackend(path)
    await TitleStore(backend).upsert(Title(title="Hello"))
    backend.close()

    reopened = SqliteBackend(path)
    try:
        store = TitleStore(reopened)
        assert store.observe().value == Title(title="Hello")
        count = reopened._conn.execute("SELECT COUNT(*) FROM title").fetchone()[0]  # noqa: SLF001
        assert count == 1
    finally:
        reopened.close()


def test_title_row_id_is_fixed() -> None:
    assert Title(title="x").id == 0
    with pytest.raises(ValidationError):
        Title(title="x", id=1)


class _GatedBackend(MemoryBackend):
    """Blocks each write until ``release`` is set; optionally fails it."""

    def __init__(self) -> None:
        super().__init__()
        self.release = threading.Event()
        self.fail_writes = False

    def write(self, key: int, value: str) -> None:
        self.release.wait(timeout=5)
        if self.fail_writes:
            raise sqlite3.OperationalError("database is locked")
        super().write(key, value)


async def _wait_until_unlocked(store: TitleStore) -> None:
    for _ in range(500):
        if not store._write_lock.locked():  # noqa: SLF001
            return
        await asyncio.sleep(0.01)
    raise AssertionError("write lock never released")


@pytest.mark.asyncio
async def test_write_cancelled_while_queued_is_never_committed() -> None:
    backend = _GatedBackend()
    store = TitleStore(backend)
    received: list[Title | None] = []
    store.observe().subscribe(received.append)

    first = asyncio.create_task(store.upsert(Title(title="first")))
    await asyncio.sleep(0)
    queued = asyncio.create_task(store.upsert(Title(title="second")))
    await asyncio.sleep(0)

    queued.cancel()
    backend.release.set()
    await first
    with pytest.raises(asyncio.CancelledError):
        await queued
    await _wait_until_unlocked(store)

    assert received == [Title(title="first")]
    assert backend.read(0) == "first"


@pytest.mark.asyncio
async def test_started_write_completes_after_caller_is_cancelled() -> None:
    backend = _GatedBackend()
    store = TitleStore(backend)

    upsert = asyncio.create_task(store.upsert(Title(title="Hello")))
    await asyncio.sleep(0.01)
    upsert.cancel()
    backend.release.set()
    with pytest.raises(asyncio.CancelledError):
        await upsert
    await _wait_until_unlocked(store)

    assert store.observe().value == Title(title="Hello")
    assert backend.read(0) == "Hello"


@pytest.mark.asyncio
async def test_failure_of_write_whose_caller_was_cancelled_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    backend = _GatedBackend()
    backend.fail_writes = True
    store = TitleStore(backend)

    upsert = asyncio.create_task(store.upsert(Title(title="Hello")))
    await asyncio.sleep(0.01)
    upsert.cancel()
    backend.release.set()
    with pytest.raises(asyncio.CancelledError):
        await upsert
    await _wait_until_unlocked(store)
    await asyncio.sleep(0)

    assert "after its caller was cancelled" in caplog.text
    assert "database is locked" in caplog.text
    assert store.observe().value is None
