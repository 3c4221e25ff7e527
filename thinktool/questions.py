"""Question generation and grading for the arithmetic drill.

A question is a run of operands joined by a single operator and evaluated
strictly left to right (``a - b - c`` is ``(a - b) - c``; there is no
precedence because every step uses the same operator). The engine owns the
current question; callers read it through :attr:`QuestionEngine.current` and
replace it only by calling :meth:`QuestionEngine.generate`, directly or through
one of the configuration setters.

The very first question an engine deals is a ``0 + 0`` style warm-up. It gives
the user something to press Enter on and must never be counted toward trial
statistics.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .config import (
    DEFAULT_TERM_LENGTH,
    TERM_COUNT_MAX,
    TERM_COUNT_MIN,
    TERM_LENGTH_MAX,
    TERM_LENGTH_MIN,
    DrillConfig,
)
from .errors import ValidationError
from .operators import Operator
from .terms import TermGenerator

logger = logging.getLogger(__name__)

GRADE_TOLERANCE = 0.001


@dataclass(frozen=True, slots=True)
class QuestionState:
    operands: tuple[int, ...]
    operator: Operator
    warmup: bool = False


def render(state: QuestionState) -> str:
    return f" {state.operator.symbol} ".join(str(v) for v in state.operands) + "?"


def correct_answer(state: QuestionState) -> float:
    if not state.operands:
        return 0
    result: float = state.operands[0]
    for value in state.operands[1:]:
        result = state.operator.apply(result, value)
    return result


def grade(user_answer: float, state: QuestionState) -> bool:
    expected = correct_answer(state)
    if not math.isfinite(expected):
        return False
    return abs(user_answer - expected) < GRADE_TOLERANCE


class QuestionEngine:
    """Owns the current question and the question-shaping half of the config."""

    def __init__(
        self,
        config: DrillConfig,
        *,
        terms: TermGenerator | None = None,
        listener: Callable[[QuestionState], None] | None = None,
    ) -> None:
        self._config = config
        self._terms = terms if terms is not None else TermGenerator()
        self._listener = listener
        self._current: QuestionState | None = None

    @property
    def config(self) -> DrillConfig:
        return self._config

    @property
    def current(self) -> QuestionState | None:
        return self._current

    def set_operator(self, op: Operator) -> QuestionState:
        self._config.operator = Operator(op)
        return self.generate()

    def set_term_count(self, count: int) -> QuestionState:
        if not (TERM_COUNT_MIN <= count <= TERM_COUNT_MAX):
            raise ValidationError(
                f"term count must be a number between {TERM_COUNT_MIN} and {TERM_COUNT_MAX}"
            )
        lengths = list(self._config.term_lengths[:count])
        while len(lengths) < count:
            lengths.append(DEFAULT_TERM_LENGTH)
        self._config.term_lengths = lengths
        return self.generate()

    def set_term_lengths(self, lengths: Sequence[int]) -> QuestionState:
        if not lengths:
            raise ValidationError("at least one term length is required")
        if len(lengths) > TERM_COUNT_MAX:
            raise ValidationError(f"at most {TERM_COUNT_MAX} term lengths are allowed")
        for length in lengths:
            if not (TERM_LENGTH_MIN <= length <= TERM_LENGTH_MAX):
                raise ValidationError(
                    f"term lengths must be numbers between {TERM_LENGTH_MIN} and {TERM_LENGTH_MAX}"
                )
        self._config.term_lengths = list(lengths)
        return self.generate()

    def generate(self) -> QuestionState:
        op = self._config.operator
        if self._current is None:
            state = QuestionState(operands=(0, 0), operator=op, warmup=True)
        else:
            operands = tuple(self._terms.generate(d) for d in self._config.term_lengths)
            state = QuestionState(operands=operands, operator=op)
        self._current = state
        logger.debug("generated question %s", render(state))
        if self._listener is not None:
            self._listener(state)
        return state

    def render(self, state: QuestionState | None = None) -> str:
        return render(self._require(state))

    def correct_answer(self, state: QuestionState | None = None) -> float:
        return correct_answer(self._require(state))

    def grade(self, user_answer: float, state: QuestionState | None = None) -> bool:
        return grade(user_answer, self._require(state))

    def _require(self, state: QuestionState | None) -> QuestionState:
        if state is not None:
            return state
        if self._current is None:
            raise RuntimeError("No question has been generated yet")
        return self._current
