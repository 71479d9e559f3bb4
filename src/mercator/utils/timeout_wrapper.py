"""Utility functions for the mercator package."""

from __future__ import annotations

import asyncio
import concurrent.futures
import functools
import threading
from typing import Awaitable, Callable, TypeVar

from mercator.utils.compat_typing import ParamSpec
from mercator.utils.exceptions import AsyncTimeoutError

T = TypeVar("T")
P = ParamSpec("P")


def async_timeout(seconds: float) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Async Timeout decorator.

    This decorator wraps an asynchronous function and ensures it does not run for
    longer than the specified number of seconds. If the function execution exceeds
    this limit, it raises an ``AsyncTimeoutError``.

    Parameters
    ----------
    seconds : float
        The maximum allowed time (in seconds) for the asynchronous function to complete.

    Returns
    -------
    Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]
        A decorator that, when applied to an async function, ensures the function
        completes within the specified time limit. If the function takes too long,
        an ``AsyncTimeoutError`` is raised.

    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return await asyncio.wait_for(func(*args, **kwargs), timeout=seconds)
            except asyncio.TimeoutError as exc:
                msg = f"Operation timed out after {seconds} seconds"
                raise AsyncTimeoutError(msg) from exc

        return wrapper

    return decorator


def run_in_daemon_thread(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> asyncio.Future[T]:
    """Run a blocking function on a daemon thread and return an awaitable for its result.

    Unlike ``asyncio.to_thread``, the thread is neither joined when the event loop shuts down nor
    when the interpreter exits, so a call abandoned after a timeout cannot keep the process alive.
    Must be called from a running event loop.

    Parameters
    ----------
    func : Callable[P, T]
        The blocking function to run.
    *args : P.args
        Positional arguments for ``func``.
    **kwargs : P.kwargs
        Keyword arguments for ``func``.

    Returns
    -------
    asyncio.Future[T]
        Resolves to the return value of ``func`` or raises its exception.

    """
    future: concurrent.futures.Future[T] = concurrent.futures.Future()

    def _target() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = func(*args, **kwargs)
        except BaseException as exc:  # noqa: BLE001
            future.set_exception(exc)
        else:
            future.set_result(result)

    threading.Thread(target=_target, name="mercator-worker", daemon=True).start()
    return asyncio.wrap_future(future)
