"""Timer scheduling -- one-shot and repeating callbacks with cancellation handles.

Two interchangeable backends:

* ``AsyncioScheduler`` arms timers on the running event loop (service use).
* ``ManualScheduler`` keeps a virtual clock that only moves when ``advance``
  is called, so timing behaviour can be driven deterministically.

``TimerRegistry`` wraps either backend and remembers every handle it hands
out, so a session can tear all of its timers down in one call.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable

logger = logging.getLogger("engine.scheduler")

Callback = Callable[[], None]


class TimerHandle:
    """Cancellation handle for a scheduled callback."""

    def __init__(self, name: str = "", *, repeating: bool = False) -> None:
        self.name = name
        self.repeating = repeating
        self.fired = 0
        self._cancelled = False
        self._on_cancel: Callable[[], None] | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        """True while the callback can still fire."""
        if self._cancelled:
            return False
        return self.repeating or self.fired == 0

    def cancel(self) -> None:
        """Stop the callback from firing. Safe to call more than once."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()
            self._on_cancel = None

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else ("active" if self.active else "done")
        return f"TimerHandle({self.name!r}, {state})"


def _run_callback(handle: TimerHandle, fn: Callback) -> None:
    handle.fired += 1
    try:
        fn()
    except Exception as e:
        logger.error("Timer %s callback failed: %s", handle.name or "<anon>", e, exc_info=True)


class Scheduler(ABC):
    """Clock plus timer registration."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as an aware UTC datetime."""

    @abstractmethod
    def schedule_once(self, delay: float, fn: Callback, *, name: str = "") -> TimerHandle:
        """Run ``fn`` once after ``delay`` seconds."""

    @abstractmethod
    def schedule_repeating(
        self, interval: float, fn: Callback, *, name: str = ""
    ) -> TimerHandle:
        """Run ``fn`` every ``interval`` seconds until cancelled."""


class AsyncioScheduler(Scheduler):
    """Scheduler backed by ``loop.call_later`` on the running event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def schedule_once(self, delay: float, fn: Callback, *, name: str = "") -> TimerHandle:
        handle = TimerHandle(name)
        timer = self._get_loop().call_later(delay, _run_callback, handle, fn)
        handle._on_cancel = timer.cancel
        return handle

    def schedule_repeating(
        self, interval: float, fn: Callback, *, name: str = ""
    ) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TimerHandle(name, repeating=True)
        loop = self._get_loop()

        def tick() -> None:
            if handle.cancelled:
                return
            _run_callback(handle, fn)
            if not handle.cancelled:
                arm()

        def arm() -> None:
            timer = loop.call_later(interval, tick)
            handle._on_cancel = timer.cancel

        arm()
        return handle


class ManualScheduler(Scheduler):
    """Virtual-clock scheduler. Time only moves through ``advance``."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2025, 1, 1, tzinfo=timezone.utc)
        self._queue: list[tuple[datetime, int, TimerHandle, Callback, float | None]] = []
        self._counter = itertools.count()

    def now(self) -> datetime:
        return self._now

    def _push(
        self, due: datetime, handle: TimerHandle, fn: Callback, interval: float | None
    ) -> None:
        heapq.heappush(self._queue, (due, next(self._counter), handle, fn, interval))

    def schedule_once(self, delay: float, fn: Callback, *, name: str = "") -> TimerHandle:
        handle = TimerHandle(name)
        self._push(self._now + timedelta(seconds=delay), handle, fn, None)
        return handle

    def schedule_repeating(
        self, interval: float, fn: Callback, *, name: str = ""
    ) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TimerHandle(name, repeating=True)
        self._push(self._now + timedelta(seconds=interval), handle, fn, interval)
        return handle

    @property
    def pending(self) -> int:
        """Number of timers that can still fire."""
        return sum(1 for entry in self._queue if not entry[2].cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due callbacks in time order.

        Returns:
            Number of callbacks fired.
        """
        target = self._now + timedelta(seconds=seconds)
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, fn, interval = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            _run_callback(handle, fn)
            fired += 1
            if interval is not None and not handle.cancelled:
                self._push(due + timedelta(seconds=interval), handle, fn, interval)
        self._now = target
        return fired


class TimerRegistry(Scheduler):
    """Tracks every handle issued through it so they can be cancelled together."""

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._handles: list[TimerHandle] = []

    def now(self) -> datetime:
        return self._scheduler.now()

    def _track(self, handle: TimerHandle) -> TimerHandle:
        self._handles = [h for h in self._handles if h.active]
        self._handles.append(handle)
        return handle

    def schedule_once(self, delay: float, fn: Callback, *, name: str = "") -> TimerHandle:
        return self._track(self._scheduler.schedule_once(delay, fn, name=name))

    def schedule_repeating(
        self, interval: float, fn: Callback, *, name: str = ""
    ) -> TimerHandle:
        return self._track(self._scheduler.schedule_repeating(interval, fn, name=name))

    @property
    def active_count(self) -> int:
        return sum(1 for h in self._handles if h.active)

    def cancel_all(self) -> int:
        """Cancel every outstanding handle.

        Returns:
            Number of handles that were still active.
        """
        count = 0
        for handle in self._handles:
            if handle.active:
                count += 1
            handle.cancel()
        self._handles.clear()
        if count:
            logger.debug("Cancelled %d outstanding timers", count)
        return count
