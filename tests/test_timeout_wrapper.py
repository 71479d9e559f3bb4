"""Tests for the ``timeout_wrapper`` module."""

from __future__ import annotations

import asyncio
import threading
import time

import pytest

from mercator.utils.exceptions import AsyncTimeoutError
from mercator.utils.timeout_wrapper import async_timeout, run_in_daemon_thread


@pytest.mark.asyncio
async def test_async_timeout_returns_result() -> None:
    """Calls finishing in time return their result."""

    @async_timeout(1)
    async def _quick() -> str:
        return "done"

    assert await _quick() == "done"


@pytest.mark.asyncio
async def test_async_timeout_raises() -> None:
    """Calls exceeding the limit raise ``AsyncTimeoutError``."""

    @async_timeout(0)
    async def _slow() -> None:
        await asyncio.sleep(1)

    with pytest.raises(AsyncTimeoutError, match="timed out after 0 seconds"):
        await _slow()


@pytest.mark.asyncio
async def test_run_in_daemon_thread_returns_result() -> None:
    """The blocking function runs on a daemon thread and its result is awaited."""

    def _where() -> tuple[str, bool]:
        current = threading.current_thread()
        return current.name, current.daemon

    assert await run_in_daemon_thread(_where) == ("mercator-worker", True)


@pytest.mark.asyncio
async def test_run_in_daemon_thread_raises() -> None:
    """Exceptions of the blocking function are raised to the awaiting coroutine."""

    def _fail(message: str) -> None:
        raise ValueError(message)

    with pytest.raises(ValueError, match="boom"):
        await run_in_daemon_thread(_fail, "boom")


@pytest.mark.asyncio
async def test_run_in_daemon_thread_abandoned_on_timeout() -> None:
    """A timed out call returns control while the thread keeps running."""
    release = threading.Event()

    @async_timeout(0.1)
    async def _blocked() -> None:
        await run_in_daemon_thread(release.wait, 10)

    start = time.monotonic()
    try:
        with pytest.raises(AsyncTimeoutError):
            await _blocked()
        assert time.monotonic() - start < 5
    finally:
        release.set()
