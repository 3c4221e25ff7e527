from __future__ import annotations

import random


def digit_range(digit_length: int) -> tuple[int, int]:
    """Inclusive bounds for a term with ``digit_length`` digits.

    Single-digit terms start at 1 so a question never contains a bare zero.
    """

    if digit_length == 1:
        return 1, 9
    return 10 ** (digit_length - 1), 10**digit_length - 1


class TermGenerator:
    """Random operand source.

    Deterministic when constructed with a seeded ``random.Random``.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    @classmethod
    def seeded(cls, seed: int) -> "TermGenerator":
        return cls(random.Random(int(seed)))

    def generate(self, digit_length: int) -> int:
        lo, hi = digit_range(digit_length)
        return self._rng.randint(lo, hi)
