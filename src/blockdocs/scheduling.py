"""Delayed callbacks for the editing view-models.

Everything runs on one asyncio loop; a callback never runs concurrently with an
event handler. Tests swap in a manual scheduler that advances virtual time.
"""
import asyncio

from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class LoopScheduler:
    """Scheduler backed by the running event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class Debouncer:
    """Runs the most recently submitted callback once `delay` seconds pass without a new submission."""

    def __init__(self, delay: float, scheduler: Scheduler | None = None):
        self.delay = delay
        self.scheduler: Scheduler = scheduler or LoopScheduler()
        self._handle: TimerHandle | None = None
        self._callback: Callable[[], None] | None = None

    @property
    def pending(self) -> bool: return self._callback is not None

    def call(self, callback: Callable[[], None]) -> None:
        """(Re)start the timer for `callback`, superseding anything pending."""
        if self._handle is not None:
            self._handle.cancel()
        self._callback = callback
        self._handle = self.scheduler.call_later(self.delay, self._fire)

    def cancel(self) -> bool:
        """Drop the pending callback without running it."""
        was_pending = self.pending
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._callback = None
        return was_pending

    def flush(self) -> bool:
        """Run the pending callback now."""
        if (callback := self._callback) is None:
            return False
        self.cancel()
        callback()
        return True

    def _fire(self) -> None:
        callback, self._callback, self._handle = self._callback, None, None
        if callback is not None:
            callback()
