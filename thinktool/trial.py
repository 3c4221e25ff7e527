"""Timed trial state machine.

    IDLE --start()--> RUNNING --stop() / expiry--> IDLE

A running trial owns a periodic tick on the shared :class:`Scheduler`. Manual
``stop()`` and tick-driven expiry both go through ``_finalize``, which drops
the session reference before anything else, so whichever arrives second sees
IDLE and cannot finalize twice.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

from .clock import PeriodicTask, Scheduler
from .errors import AlreadyRunningError, NotRunningError

logger = logging.getLogger(__name__)

TICK_PERIOD_S = 0.1


@dataclass(slots=True)
class TrialSession:
    started_at_s: float
    ends_at_s: float
    time_left_s: int
    total_questions: int = 0
    correct_answers: int = 0


@dataclass(frozen=True, slots=True)
class TrialResults:
    total: int
    correct: int
    accuracy: float

    @property
    def percent(self) -> int:
        return _round_half_up(self.accuracy * 100)

    def describe(self) -> str:
        return f"{self.correct}/{self.total} correct ({self.percent}%)"


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


class TrialController:
    def __init__(
        self,
        scheduler: Scheduler,
        *,
        on_tick: Callable[[int | None], None] | None = None,
        on_complete: Callable[[TrialResults], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._clock = scheduler.clock
        self._on_tick = on_tick
        self._on_complete = on_complete
        self._session: TrialSession | None = None
        self._task: PeriodicTask | None = None

    @property
    def running(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> TrialSession | None:
        return self._session

    def start(self, duration_s: float) -> TrialSession:
        if self._session is not None:
            raise AlreadyRunningError("trial already in progress. Use 'stop' to end current trial")
        if duration_s <= 0:
            raise ValueError("duration_s must be > 0")

        now = self._clock.now()
        self._session = TrialSession(
            started_at_s=now,
            ends_at_s=now + float(duration_s),
            time_left_s=int(math.ceil(duration_s)),
        )
        self._task = self._scheduler.call_every(TICK_PERIOD_S, self._tick)
        logger.info("trial started for %s seconds", duration_s)
        self._emit_tick(self._session.time_left_s)
        return self._session

    def stop(self) -> TrialResults:
        if self._session is None:
            raise NotRunningError("no trial in progress")
        results = self._finalize()
        logger.info("trial stopped: %s", results.describe())
        return results

    def record_answer(self, is_correct: bool) -> None:
        session = self._session
        if session is None:
            return
        session.total_questions += 1
        if is_correct:
            session.correct_answers += 1

    def time_left(self) -> int:
        if self._session is None:
            raise NotRunningError("no trial in progress")
        return self._session.time_left_s

    def _tick(self) -> None:
        session = self._session
        if session is None:
            return
        now = self._clock.now()
        if now >= session.ends_at_s:
            logger.debug("trial expired at t=%.3f", now)
            results = self._finalize()
            logger.info("trial complete: %s", results.describe())
            if self._on_complete is not None:
                self._on_complete(results)
            return
        session.time_left_s = int(math.ceil(session.ends_at_s - now))
        self._emit_tick(session.time_left_s)

    def _finalize(self) -> TrialResults:
        session = self._session
        assert session is not None
        self._session = None
        if self._task is not None:
            self._task.cancel()
            self._task = None

        total = session.total_questions
        correct = session.correct_answers
        accuracy = 0.0 if total == 0 else correct / total
        self._emit_tick(None)
        return TrialResults(total=total, correct=correct, accuracy=accuracy)

    def _emit_tick(self, seconds_left: int | None) -> None:
        if self._on_tick is not None:
            self._on_tick(seconds_left)
