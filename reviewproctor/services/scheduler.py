"""Executors that run work on the host's main execution context."""
from __future__ import annotations

import asyncio
from typing import Callable, Protocol

Task = Callable[[], None]


class MainContextExecutor(Protocol):
    """Run ``task`` on the context that owns the UI (or its stand-in)."""

    def submit(self, task: Task) -> None:
        ...


class ImmediateExecutor:
    """Run tasks inline.  Suited to hosts without an event loop."""

    def submit(self, task: Task) -> None:
        task()


class AsyncioExecutor:
    """Schedule tasks on an ``asyncio`` event loop.

    ``call_soon_threadsafe`` makes :meth:`submit` usable from any thread; the
    task always runs on a later iteration of ``loop``, never inside the call.
    Exceptions raised by a task go to the loop's exception handler.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def submit(self, task: Task) -> None:
        self._loop.call_soon_threadsafe(task)
