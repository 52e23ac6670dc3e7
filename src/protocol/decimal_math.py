"""Decimal helpers shared by the AMM model and the looping engine.

All token quantities and USD values are ``decimal.Decimal``.  The only
floating-point step is the continuous-compounding growth factor, where
``math.exp`` is used directly.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from src.data.constants import SECONDS_PER_DAY, SECONDS_PER_YEAR
from src.errors import ComputationError, InvalidInputError

ZERO = Decimal(0)
ONE = Decimal(1)

_OUTPUT_QUANTUM = Decimal("1e-12")


def to_decimal(value: str | int | float | Decimal, name: str = "value") -> Decimal:
    """Parse a number into a finite Decimal.

    Floats go through ``str`` so that ``0.6`` becomes ``Decimal("0.6")``
    rather than its binary expansion.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be numeric, got bool")
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, float):
            result = Decimal(repr(value))
        else:
            result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidInputError(f"{name} is not a numeric value: {value!r}") from exc
    if not result.is_finite():
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return result


def safe_div(numerator: Decimal, denominator: Decimal, what: str = "denominator") -> Decimal:
    """Divide, raising ``ComputationError`` instead of producing Infinity/NaN."""
    if denominator == 0:
        raise ComputationError(f"division by zero: {what} is zero")
    try:
        return numerator / denominator
    except (InvalidOperation, ArithmeticError) as exc:
        raise ComputationError(f"invalid division by {what}") from exc


def non_negative(value: Decimal) -> Decimal:
    """Clamp a Decimal at zero."""
    return ZERO if value < 0 else value


def growth_factor(apr: float, days: int) -> Decimal:
    """Continuous-compounding factor ``exp(apr * days / 365)``.

    Short-circuits to exactly 1 when the rate or the elapsed time is zero.
    """
    if apr == 0 or days == 0:
        return ONE
    exponent = (apr * days * SECONDS_PER_DAY) / SECONDS_PER_YEAR
    return Decimal(math.exp(exponent))


def accrue(amount: Decimal, apr: float, days: int) -> Decimal:
    """Grow ``amount`` at ``apr`` for ``days`` days."""
    factor = growth_factor(apr, days)
    if factor == ONE:
        return amount
    return amount * factor


def ratio(numerator: Decimal, denominator: Decimal) -> float:
    """Float ratio where a zero denominator means "unbounded" (``inf``)."""
    if denominator == 0:
        return float("inf")
    return float(numerator / denominator)


def to_output_float(value: Decimal) -> float:
    """Round half-up to 12 decimal places for serialised output."""
    try:
        return float(value.quantize(_OUTPUT_QUANTUM, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # Too many integer digits to hold 12 places at context precision
        return float(value)
