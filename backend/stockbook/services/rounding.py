"""Shared two-decimal rounding policy for every running total."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, getcontext
from typing import Iterable

getcontext().prec = 28

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Decimal | int | str | float) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value: Decimal | int | str | float) -> Decimal:
    """Quantize ``value`` to cents, half away from zero."""

    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def safe_div(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, resolving a zero denominator to zero."""

    if denominator == 0:
        return ZERO
    return numerator / denominator


def percent(part: Decimal, whole: Decimal) -> Decimal:
    return round2(safe_div(part, whole) * HUNDRED)


class RunningTotal:
    """Accumulator that re-rounds after every update."""

    __slots__ = ("_value",)

    def __init__(self, start: Decimal = ZERO):
        self._value = round2(start)

    def add(self, amount: Decimal) -> "RunningTotal":
        self._value = round2(self._value + amount)
        return self

    @property
    def value(self) -> Decimal:
        return self._value


def sum_rounded(values: Iterable[Decimal]) -> Decimal:
    total = RunningTotal()
    for value in values:
        total.add(value)
    return total.value


__all__ = [
    "CENT",
    "HUNDRED",
    "RunningTotal",
    "ZERO",
    "percent",
    "round2",
    "safe_div",
    "sum_rounded",
    "to_decimal",
]
