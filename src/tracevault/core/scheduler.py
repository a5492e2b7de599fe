"""Clocks, cancellable scheduled tasks and a single-slot debouncer.

AsyncioScheduler runs actions on the event loop after a real delay.
ManualScheduler keeps its own clock and only fires actions when advanced,
so time-dependent behaviour can be driven deterministically.
"""

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Protocol

logger = logging.getLogger(__name__)

Action = Callable[[], Awaitable[None]]


class Clock(Protocol):
    def now_ms(self) -> int:
        """Current time in milliseconds since the epoch."""
        ...


class ScheduledTask(Protocol):
    def cancel(self) -> None:
        """Prevent the action from running if it has not started yet."""
        ...

    @property
    def cancelled(self) -> bool: ...


class Scheduler(Clock, Protocol):
    def call_later(self, delay_ms: int, action: Action) -> ScheduledTask:
        """Run action once after delay_ms unless cancelled first."""
        ...


async def _run_logged(action: Action) -> None:
    try:
        await action()
    except Exception:
        logger.exception("Scheduled action failed")


class _LoopTask:
    def __init__(self, delay_ms: int, action: Action) -> None:
        self._started = False
        self._cancelled = False
        self._task = asyncio.get_running_loop().create_task(self._run(delay_ms, action))

    async def _run(self, delay_ms: int, action: Action) -> None:
        await asyncio.sleep(delay_ms / 1000)
        self._started = True
        await _run_logged(action)

    def cancel(self) -> None:
        # An action that already started runs to completion
        if not self._started:
            self._cancelled = True
            self._task.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def wait(self) -> None:
        with contextlib.suppress(asyncio.CancelledError):
            await self._task


class AsyncioScheduler:
    """Scheduler backed by the running event loop and the wall clock."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)

    def call_later(self, delay_ms: int, action: Action) -> _LoopTask:
        return _LoopTask(delay_ms, action)


class _ManualTask:
    def __init__(self, due_ms: int, action: Action) -> None:
        self.due_ms = due_ms
        self.action = action
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler:
    """Scheduler whose clock only moves when advance() is called."""

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms
        self._tasks: list[_ManualTask] = []

    def now_ms(self) -> int:
        return self._now

    def call_later(self, delay_ms: int, action: Action) -> _ManualTask:
        task = _ManualTask(self._now + delay_ms, action)
        self._tasks.append(task)
        return task

    @property
    def pending(self) -> int:
        """Number of scheduled tasks that have neither fired nor been cancelled."""
        return sum(1 for task in self._tasks if not task.cancelled)

    async def advance(self, ms: int) -> None:
        """Move the clock forward, firing due tasks in due-time order.

        Each fired action is awaited before the next one is considered, so
        actions that schedule new tasks see the clock at their due time.
        """
        target = self._now + ms
        while True:
            due = [t for t in self._tasks if not t.cancelled and t.due_ms <= target]
            if not due:
                break
            task = min(due, key=lambda t: t.due_ms)
            self._tasks.remove(task)
            self._now = max(self._now, task.due_ms)
            await _run_logged(task.action)
        self._tasks = [t for t in self._tasks if not t.cancelled]
        self._now = target


class Debouncer:
    """Run an action once a quiet period has passed since the last trigger.

    Holds exactly one pending task; each trigger cancels and replaces it.
    """

    def __init__(self, scheduler: Scheduler, delay_ms: int, action: Action) -> None:
        self._scheduler = scheduler
        self.delay_ms = delay_ms
        self._action = action
        self._pending: ScheduledTask | None = None

    @property
    def is_pending(self) -> bool:
        return self._pending is not None

    def trigger(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
        self._pending = self._scheduler.call_later(self.delay_ms, self._fire)

    def cancel(self) -> bool:
        """Cancel the pending run. Returns True if one was pending."""
        if self._pending is None:
            return False
        self._pending.cancel()
        self._pending = None
        return True

    async def _fire(self) -> None:
        self._pending = None
        await self._action()
