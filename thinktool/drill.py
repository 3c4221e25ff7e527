from __future__ import annotations

import logging
import math
import random

from .clock import Clock, Scheduler
from .commands import CommandInterpreter, CommandOutcome
from .config import DrillConfig, Settings
from .display import Display
from .questions import QuestionEngine, QuestionState, render
from .suggestions import suggest
from .terms import TermGenerator
from .trial import TrialController, TrialResults

logger = logging.getLogger(__name__)


def parse_answer(raw: str) -> float:
    """Parse a typed answer; anything unparsable becomes nan (never correct)."""

    try:
        return float(raw.strip())
    except ValueError:
        return math.nan


class Drill:
    """Single owner of the drill state.

    Wires the question engine, trial controller and command interpreter to one
    :class:`Display`. Front ends forward answer submissions, command lines and
    a per-frame :meth:`update`; everything user-visible comes back through the
    display.
    """

    def __init__(
        self,
        *,
        display: Display,
        clock: Clock,
        config: DrillConfig | None = None,
        seed: int | None = None,
        auto_start_trial: bool = True,
    ) -> None:
        self._display = display
        self._config = config if config is not None else DrillConfig()
        self._auto_start_trial = auto_start_trial
        self._scheduler = Scheduler(clock)

        rng = random.Random(seed) if seed is not None else random.Random()
        self._engine = QuestionEngine(
            self._config,
            terms=TermGenerator(rng),
            listener=self._on_question,
        )
        self._trial = TrialController(
            self._scheduler,
            on_tick=display.show_trial_time,
            on_complete=self._on_trial_complete,
        )
        self._interpreter = CommandInterpreter(self._engine, self._trial, display)

    @classmethod
    def from_settings(cls, settings: Settings, *, display: Display, clock: Clock) -> "Drill":
        return cls(
            display=display,
            clock=clock,
            config=settings.drill_config(),
            seed=settings.seed,
            auto_start_trial=settings.auto_start_trial,
        )

    @property
    def config(self) -> DrillConfig:
        return self._config

    @property
    def engine(self) -> QuestionEngine:
        return self._engine

    @property
    def trial(self) -> TrialController:
        return self._trial

    def begin(self) -> QuestionState:
        return self._engine.generate()

    def submit_answer(self, raw: str) -> bool | None:
        """Grade the current question and deal the next one.

        Returns whether the answer was correct, or ``None`` for the warm-up
        question, which is never graded.
        """

        if not self._trial.running and self._auto_start_trial:
            self._trial.start(self._config.trial_duration_s)

        previous = self._engine.current
        if previous is None:
            self._engine.generate()
            return None

        correct: bool | None = None
        if not previous.warmup:
            correct = self._engine.grade(parse_answer(raw), previous)
            self._trial.record_answer(correct)
            self._display.show_feedback(render(previous), correct)

        self._engine.generate()
        return correct

    def execute_command(self, line: str) -> CommandOutcome | None:
        line = line.strip()
        if not line:
            return None
        outcome = self._interpreter.run(line)
        if outcome.is_error:
            self._display.show_transient(outcome.text, True)
        else:
            self._display.show_transient(line, False)
        return outcome

    def suggest(self, partial: str) -> list[str]:
        return suggest(partial, self._interpreter.registry)

    def update(self) -> None:
        self._scheduler.run_pending()

    def _on_question(self, state: QuestionState) -> None:
        self._display.show_question(render(state))

    def _on_trial_complete(self, results: TrialResults) -> None:
        self._display.show_transient(f"trial complete! {results.describe()}", False)
