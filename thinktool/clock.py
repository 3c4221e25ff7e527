from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


class Clock(Protocol):
    """Monotonic clock abstraction.

    Core logic depends on this interface rather than calling real time directly.
    """

    def now(self) -> float:
        """Return monotonic seconds."""


class RealClock:
    """Production clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


@dataclass(slots=True)
class PeriodicTask:
    """Handle for a callback registered with :meth:`Scheduler.call_every`."""

    period_s: float
    callback: Callable[[], None]
    next_due_s: float
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Cooperative scheduler for recurring callbacks.

    Nothing runs on its own: the owner (the pygame frame loop, or a test) calls
    :meth:`run_pending` and every due task fires at most once per pump. Missed
    periods are skipped rather than replayed, so a stalled frame never causes a
    burst of ticks.
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._tasks: list[PeriodicTask] = []

    @property
    def clock(self) -> Clock:
        return self._clock

    def call_every(self, period_s: float, callback: Callable[[], None]) -> PeriodicTask:
        if period_s <= 0:
            raise ValueError("period_s must be > 0")
        task = PeriodicTask(
            period_s=float(period_s),
            callback=callback,
            next_due_s=self._clock.now() + float(period_s),
        )
        self._tasks.append(task)
        return task

    def pending(self) -> int:
        return sum(1 for t in self._tasks if not t.cancelled)

    def run_pending(self) -> int:
        """Fire every due task once. Returns the number of callbacks run."""

        now = self._clock.now()
        fired = 0
        # Snapshot: callbacks may register or cancel tasks.
        for task in list(self._tasks):
            if task.cancelled or now < task.next_due_s:
                continue
            while task.next_due_s <= now:
                task.next_due_s += task.period_s
            task.callback()
            fired += 1
        self._tasks = [t for t in self._tasks if not t.cancelled]
        return fired
