from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from thinktool.commands import CommandSpec
from thinktool.config import DrillConfig
from thinktool.drill import Drill, parse_answer


@dataclass
class FakeClock:
    t: float = 0.0

    def now(self) -> float:
        return self.t

    def advance(self, dt: float) -> None:
        self.t += dt


@dataclass
class RecordingDisplay:
    questions: list[str] = field(default_factory=list)
    transients: list[tuple[str, bool]] = field(default_factory=list)
    times: list[int | None] = field(default_factory=list)
    feedback: list[tuple[str, bool]] = field(default_factory=list)
    help_calls: int = 0

    def show_transient(self, text: str, is_error: bool) -> None:
        self.transients.append((text, is_error))

    def show_help(self, catalogue: Sequence[CommandSpec]) -> None:
        self.help_calls += 1

    def show_question(self, text: str) -> None:
        self.questions.append(text)

    def show_trial_time(self, seconds_left: int | None) -> None:
        self.times.append(seconds_left)

    def show_feedback(self, question_text: str, correct: bool) -> None:
        self.feedback.append((question_text, correct))


def _drill(clock: FakeClock, display: RecordingDisplay, **kwargs: object) -> Drill:
    return Drill(display=display, clock=clock, seed=1234, **kwargs)  # type: ignore[arg-type]


def _answer_current(drill: Drill, *, correct: bool) -> bool | None:
    value = drill.engine.correct_answer()
    return drill.submit_answer(str(value if correct else value + 1))


def test_scripted_trial_runs_to_completion() -> None:
    clock = FakeClock()
    display = RecordingDisplay()
    drill = _drill(clock, display, config=DrillConfig(trial_duration_s=10))

    drill.begin()
    assert display.questions == ["0 + 0?"]

    # Answering the warm-up starts the trial but is not graded.
    assert drill.submit_answer("") is None
    assert drill.trial.running
    assert display.feedback == []

    script = [True, True, False, True]
    for correct in script:
        clock.advance(1.0)
        drill.update()
        assert _answer_current(drill, correct=correct) is correct

    assert [c for _, c in display.feedback] == script
    assert display.times[0] == 10
    assert 6 in display.times

    for _ in range(100):
        clock.advance(0.25)
        drill.update()
        if not drill.trial.running:
            break

    assert not drill.trial.running
    assert display.transients[-1] == ("trial complete! 3/4 correct (75%)", False)
    assert display.times[-1] is None


def test_answer_after_completion_auto_starts_next_trial() -> None:
    clock = FakeClock()
    display = RecordingDisplay()
    drill = _drill(clock, display, config=DrillConfig(trial_duration_s=10))
    drill.begin()
    drill.submit_answer("")
    clock.advance(10.0)
    drill.update()
    assert not drill.trial.running

    _answer_current(drill, correct=True)
    assert drill.trial.running
    session = drill.trial.session
    assert session is not None
    assert (session.total_questions, session.correct_answers) == (1, 1)


def test_no_auto_start_leaves_answers_uncounted() -> None:
    clock = FakeClock()
    display = RecordingDisplay()
    drill = _drill(clock, display, auto_start_trial=False)
    drill.begin()
    drill.submit_answer("0")
    assert not drill.trial.running
    assert _answer_current(drill, correct=True) is True
    assert display.times == []


def test_commands_echo_line_or_show_error() -> None:
    clock = FakeClock()
    display = RecordingDisplay()
    drill = _drill(clock, display)
    drill.begin()

    outcome = drill.execute_command("  op multiplication ")
    assert outcome is not None and not outcome.is_error
    assert outcome.text == "mode changed to multiplication"
    assert display.transients[-1] == ("op multiplication", False)
    assert " × " in display.questions[-1]

    drill.execute_command("tc 99")
    assert display.transients[-1] == ("error: term count must be a number between 2 and 10", True)

    assert drill.execute_command("   ") is None
    assert len(display.transients) == 2

    drill.execute_command("help")
    assert display.help_calls == 1


def test_start_then_stop_through_commands() -> None:
    clock = FakeClock()
    display = RecordingDisplay()
    drill = _drill(clock, display, config=DrillConfig(trial_duration_s=20))
    drill.begin()

    drill.execute_command("start")
    assert drill.trial.running
    assert display.times[-1] == 20

    _answer_current(drill, correct=True)
    _answer_current(drill, correct=False)
    outcome = drill.execute_command("stop")
    assert outcome is not None
    assert outcome.text == "trial stopped. 1/2 correct (50%)"
    assert display.times[-1] is None

    outcome = drill.execute_command("stop")
    assert outcome is not None and outcome.is_error


def test_term_changes_drive_question_shape() -> None:
    clock = FakeClock()
    display = RecordingDisplay()
    drill = _drill(clock, display)
    drill.begin()
    drill.submit_answer("")
    drill.execute_command("tl 1 1 1")
    operands = display.questions[-1].rstrip("?").split(" + ")
    assert len(operands) == 3
    assert all(len(op) == 1 for op in operands)
    assert drill.config.term_lengths == [1, 1, 1]


def test_suggest_delegates_to_registry() -> None:
    drill = _drill(FakeClock(), RecordingDisplay())
    assert drill.suggest("s") == ["start", "stop"]
    assert drill.suggest("op a") == ["op addition"]


def test_parse_answer_handles_garbage() -> None:
    assert parse_answer(" 12.5 ") == 12.5
    assert parse_answer("-3") == -3.0
    assert parse_answer("") != parse_answer("")  # nan
    assert parse_answer("abc") != parse_answer("abc")
