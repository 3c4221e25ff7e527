from __future__ import annotations

import math
from enum import Enum


class Operator(str, Enum):
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLICATION = "multiplication"
    DIVISION = "division"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    def apply(self, left: float, right: float) -> float:
        if self is Operator.ADDITION:
            return left + right
        if self is Operator.SUBTRACTION:
            return left - right
        if self is Operator.MULTIPLICATION:
            return left * right
        return _true_divide(left, right)

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(op.value for op in cls)


_SYMBOLS = {
    Operator.ADDITION: "+",
    Operator.SUBTRACTION: "-",
    Operator.MULTIPLICATION: "×",
    Operator.DIVISION: "÷",
}


def _true_divide(left: float, right: float) -> float:
    # IEEE semantics instead of ZeroDivisionError: x/0 -> +-inf, 0/0 -> nan.
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right
