"""Completion executors: where fetch callbacks are delivered."""

import asyncio
from collections.abc import Callable
from typing import Any


class ImmediateExecutor:
    """Run completions synchronously on the thread that finished the fetch."""

    def submit(self, fn: Callable[..., Any], /, *args: Any) -> None:
        fn(*args)


class LoopExecutor:
    """Marshal completions onto a designated asyncio event loop.

    Safe to call from any thread; the callback runs on the loop's thread.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    @classmethod
    def current(cls) -> "LoopExecutor":
        """Executor for the running loop."""
        return cls(asyncio.get_running_loop())

    def submit(self, fn: Callable[..., Any], /, *args: Any) -> asyncio.Handle:
        return self._loop.call_soon_threadsafe(fn, *args)
