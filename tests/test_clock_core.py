from __future__ import annotations

from dataclasses import dataclass

import pytest

from thinktool.clock import Scheduler


@dataclass
class FakeClock:
    t: float = 0.0

    def now(self) -> float:
        return self.t

    def advance(self, dt: float) -> None:
        self.t += dt


def test_task_fires_once_per_pump_and_skips_missed_periods() -> None:
    clock = FakeClock()
    scheduler = Scheduler(clock)
    calls: list[float] = []
    scheduler.call_every(0.5, lambda: calls.append(clock.now()))

    assert scheduler.run_pending() == 0
    clock.advance(0.5)
    assert scheduler.run_pending() == 1
    clock.advance(3.0)
    assert scheduler.run_pending() == 1
    assert scheduler.run_pending() == 0
    clock.advance(0.5)
    assert scheduler.run_pending() == 1
    assert calls == [0.5, 3.5, 4.0]


def test_cancel_takes_effect_within_the_same_pump() -> None:
    clock = FakeClock()
    scheduler = Scheduler(clock)
    fired: list[str] = []
    second = None

    def first() -> None:
        fired.append("first")
        assert second is not None
        second.cancel()

    scheduler.call_every(1.0, first)
    second = scheduler.call_every(1.0, lambda: fired.append("second"))
    clock.advance(1.0)
    scheduler.run_pending()
    assert fired == ["first"]
    assert scheduler.pending() == 1


def test_period_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Scheduler(FakeClock()).call_every(0, lambda: None)
