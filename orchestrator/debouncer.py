"""
Debouncer - Coalesces bursts of calls into one trailing invocation.

Each call resets a single pending timer; when the quiet window elapses the
handler runs with the latest value. Only the timer is ever cancelled: a
handler that already started keeps running to completion.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """
    Example usage:
        debouncer = Debouncer(0.2, handle_term)
        debouncer("c"); debouncer("ca"); debouncer("cat")
        await debouncer.drain()   # handle_term("cat") ran once
    """

    def __init__(self, delay_s: float, handler: Callable[[T], Awaitable[Any]]):
        self._delay_s = max(delay_s, 0.0)
        self._handler = handler
        self._timer: asyncio.TimerHandle | None = None
        self._deadline: float | None = None
        self._latest: T | None = None
        self._running: set[asyncio.Task[Any]] = set()

    @property
    def delay_s(self) -> float:
        return self._delay_s

    @property
    def pending(self) -> bool:
        """True while a timer is waiting to fire."""
        return self._timer is not None

    @property
    def busy(self) -> bool:
        return self.pending or bool(self._running)

    def __call__(self, value: T) -> None:
        """Schedule handler(value), superseding any pending value."""
        loop = asyncio.get_running_loop()
        if self._timer is not None:
            self._timer.cancel()
        self._latest = value
        self._deadline = loop.time() + self._delay_s
        self._timer = loop.call_later(self._delay_s, self._fire)

    def cancel(self) -> None:
        """Drop the pending value, if any. Running handlers are left alone."""
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._deadline = None
        self._latest = None

    def flush(self) -> None:
        """Fire the pending value now instead of waiting for the window."""
        if self._timer is None:
            return
        self._timer.cancel()
        self._fire()

    def _fire(self) -> None:
        value = self._latest
        self._timer = None
        self._deadline = None
        self._latest = None
        task = asyncio.get_running_loop().create_task(self._handler(value))
        self._running.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._running.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"Debounced handler failed: {exc}",
                exc_info=exc,
                extra={"extra_fields": {"error_type": type(exc).__name__}},
            )

    async def drain(self) -> None:
        """Wait until no timer is pending and every started handler has finished."""
        loop = asyncio.get_running_loop()
        while self.busy:
            if self._timer is not None and self._deadline is not None:
                await asyncio.sleep(max(self._deadline - loop.time(), 0.0))
                # let the timer callback run
                await asyncio.sleep(0)
                continue
            await asyncio.wait(list(self._running))
