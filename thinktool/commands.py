"""Command line interpreter for reconfiguring the drill.

A line such as ``tl 2 3`` goes through three steps:

* :func:`parse` splits it into a lowercased name and positional args.
* :func:`build_command` validates the args against the named command and
  returns one of the command variants (``SetTermLengths((2, 3))``), raising
  :class:`ValidationError` on bad input.
* :meth:`CommandInterpreter.apply` performs the change on the engine or trial
  controller.

Internally every outcome is a :class:`CommandOutcome` carrying an
:class:`ErrorKind`. Only at the text boundary (:meth:`CommandOutcome.text`)
is an error flattened to the ``error: ...`` string that front ends style.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Union

from .config import (
    DURATION_MAX_S,
    DURATION_MIN_S,
    TERM_COUNT_MAX,
    TERM_COUNT_MIN,
    TERM_LENGTH_MAX,
    TERM_LENGTH_MIN,
)
from .display import Display
from .errors import StateConflictError, ValidationError
from .operators import Operator
from .questions import QuestionEngine
from .trial import TrialController

logger = logging.getLogger(__name__)

ERROR_PREFIX = "error:"


@dataclass(frozen=True, slots=True)
class CommandSpec:
    name: str
    description: str
    usage: str
    valid_args: tuple[str, ...] | None = None


COMMANDS: Mapping[str, CommandSpec] = MappingProxyType(
    {
        "op": CommandSpec("op", "change the operator", "op [operator]", Operator.names()),
        "tl": CommandSpec("tl", "change term length", "tl [termlength1 termlength2 etc]"),
        "tc": CommandSpec("tc", "change the number of terms", "tc [termcount]"),
        "cd": CommandSpec("cd", "change the duration of the trial", "cd [duration]"),
        "start": CommandSpec("start", "start a timed trial", "start"),
        "stop": CommandSpec("stop", "stop the current trial", "stop"),
        "help": CommandSpec("help", "show help information", "help"),
    }
)


@dataclass(frozen=True, slots=True)
class SetOperator:
    operator: Operator


@dataclass(frozen=True, slots=True)
class SetTermLengths:
    lengths: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class SetTermCount:
    count: int


@dataclass(frozen=True, slots=True)
class SetDuration:
    seconds: int


@dataclass(frozen=True, slots=True)
class StartTrial:
    pass


@dataclass(frozen=True, slots=True)
class StopTrial:
    pass


@dataclass(frozen=True, slots=True)
class ShowHelp:
    pass


Command = Union[SetOperator, SetTermLengths, SetTermCount, SetDuration, StartTrial, StopTrial, ShowHelp]


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    STATE_CONFLICT = "state_conflict"
    UNKNOWN_COMMAND = "unknown_command"


@dataclass(frozen=True, slots=True)
class CommandOutcome:
    message: str
    error: ErrorKind | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def text(self) -> str:
        if self.error is None:
            return self.message
        return f"{ERROR_PREFIX} {self.message}"


@dataclass(frozen=True, slots=True)
class ParsedLine:
    name: str
    args: tuple[str, ...]


def is_error_text(text: str) -> bool:
    return text.lower().startswith(ERROR_PREFIX)


def parse(line: str) -> ParsedLine:
    parts = line.split()
    if not parts:
        return ParsedLine(name="", args=())
    return ParsedLine(name=parts[0].lower(), args=tuple(parts[1:]))


_LEADING_INT = re.compile(r"([+-]?)0*([0-9]+)")
_MAX_INT_DIGITS = 18


def _parse_int(token: str) -> int | None:
    # Leading ASCII integer prefix: "12abc" -> 12, "2.5" -> 2, "abc" -> None.
    m = _LEADING_INT.match(token.strip())
    if m is None:
        return None
    sign, digits = m.groups()
    if len(digits) > _MAX_INT_DIGITS:
        # Far outside every argument range; never handed to int().
        return None
    value = int(digits)
    return -value if sign == "-" else value


def _int_in_range(token: str, lo: int, hi: int, message: str) -> int:
    value = _parse_int(token)
    if value is None or not (lo <= value <= hi):
        raise ValidationError(message)
    return value


def build_command(name: str, args: Sequence[str]) -> Command:
    """Validate ``args`` for command ``name`` and return its variant."""

    if name == "op":
        valid = ", ".join(Operator.names())
        if not args:
            raise ValidationError(f"please specify a operator. valid operators: {valid}")
        token = args[0].lower()
        if token not in Operator.names():
            raise ValidationError(f"invalid operator. Valid operators: {valid}")
        return SetOperator(Operator(token))

    if name == "tl":
        if not args:
            raise ValidationError(
                "please specify term lengths (e.g., tl 2 3 for 2-digit and 3-digit terms)"
            )
        lengths = tuple(
            _int_in_range(
                a,
                TERM_LENGTH_MIN,
                TERM_LENGTH_MAX,
                f"term lengths must be numbers between {TERM_LENGTH_MIN} and {TERM_LENGTH_MAX}",
            )
            for a in args
        )
        if len(lengths) > TERM_COUNT_MAX:
            raise ValidationError(f"at most {TERM_COUNT_MAX} term lengths are allowed")
        return SetTermLengths(lengths)

    if name == "tc":
        if not args:
            raise ValidationError("please specify a number of terms")
        return SetTermCount(
            _int_in_range(
                args[0],
                TERM_COUNT_MIN,
                TERM_COUNT_MAX,
                f"term count must be a number between {TERM_COUNT_MIN} and {TERM_COUNT_MAX}",
            )
        )

    if name == "cd":
        if not args:
            raise ValidationError("please specify a duration in seconds")
        return SetDuration(
            _int_in_range(
                args[0],
                DURATION_MIN_S,
                DURATION_MAX_S,
                f"duration must be a number between {DURATION_MIN_S} and {DURATION_MAX_S} seconds",
            )
        )

    if name == "start":
        return StartTrial()
    if name == "stop":
        return StopTrial()
    if name == "help":
        return ShowHelp()

    raise KeyError(name)


class CommandInterpreter:
    def __init__(
        self,
        engine: QuestionEngine,
        trial: TrialController,
        display: Display,
        *,
        registry: Mapping[str, CommandSpec] = COMMANDS,
    ) -> None:
        self._engine = engine
        self._trial = trial
        self._display = display
        self._registry = registry

    @property
    def registry(self) -> Mapping[str, CommandSpec]:
        return self._registry

    def execute(self, line: str) -> str:
        return self.run(line).text

    def run(self, line: str) -> CommandOutcome:
        parsed = parse(line)
        logger.debug("command %r args=%r", parsed.name, parsed.args)
        if parsed.name not in self._registry:
            return CommandOutcome(
                f"Unknown command '{parsed.name}'. Type 'help' for available commands.",
                ErrorKind.UNKNOWN_COMMAND,
            )
        try:
            command = build_command(parsed.name, parsed.args)
            message = self.apply(command)
        except ValidationError as exc:
            return CommandOutcome(str(exc), ErrorKind.VALIDATION)
        except StateConflictError as exc:
            return CommandOutcome(str(exc), ErrorKind.STATE_CONFLICT)
        return CommandOutcome(message)

    def apply(self, command: Command) -> str:
        config = self._engine.config

        if isinstance(command, SetOperator):
            self._engine.set_operator(command.operator)
            return f"mode changed to {command.operator.value}"

        if isinstance(command, SetTermLengths):
            self._engine.set_term_lengths(command.lengths)
            return "term lengths set to: " + ", ".join(str(n) for n in config.term_lengths)

        if isinstance(command, SetTermCount):
            self._engine.set_term_count(command.count)
            return f"term count set to {config.term_count}"

        if isinstance(command, SetDuration):
            config.trial_duration_s = command.seconds
            return f"trial duration set to {config.trial_duration_s} seconds"

        if isinstance(command, StartTrial):
            self._trial.start(config.trial_duration_s)
            self._engine.generate()
            return f"trial started for {config.trial_duration_s} seconds"

        if isinstance(command, StopTrial):
            results = self._trial.stop()
            return f"trial stopped. {results.describe()}"

        if isinstance(command, ShowHelp):
            self._display.show_help(list(self._registry.values()))
            return "help window opened"

        raise TypeError(f"Unhandled command: {command!r}")
