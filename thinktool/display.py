from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .commands import CommandSpec


class Display(Protocol):
    """Everything the drill core needs from a front end."""

    def show_transient(self, text: str, is_error: bool) -> None:
        """Briefly show command feedback."""
        ...

    def show_help(self, catalogue: Sequence["CommandSpec"]) -> None:
        ...

    def show_question(self, text: str) -> None:
        ...

    def show_trial_time(self, seconds_left: int | None) -> None:
        """Show the countdown; ``None`` hides it."""
        ...

    def show_feedback(self, question_text: str, correct: bool) -> None:
        """Show the question just answered, marked right or wrong."""
        ...

