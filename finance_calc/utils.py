"""Numeric helpers shared by the calculation engines.

All engines compute with ``decimal.Decimal``. Callers may hand in ints,
floats, strings or Decimals; ``to_decimal`` normalizes them. Floats are routed
through ``str`` so that ``0.1`` becomes ``Decimal("0.1")`` rather than its
binary expansion.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Union

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

Number = Union[int, float, str, Decimal]

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
TWELVE = Decimal("12")

_PENNY = Decimal("0.01")
_UNIT = Decimal("1")


def parse_decimal(value: Number) -> Decimal:
    """Convert ``value`` into a ``Decimal`` without checking that it is finite.

    ``None`` is treated as zero, which mirrors how empty form fields reach the
    engines. ``"NaN"`` and ``"Infinity"`` come back as they are; callers that
    need to reject them check ``is_finite()``.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Booleans are not numeric inputs")
    if isinstance(value, str):
        return decimal_from_str(value)
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid numeric value: {value!r}") from exc


def to_decimal(value: Number) -> Decimal:
    """Convert ``value`` into a finite ``Decimal``.

    NaN and infinities are treated like a missing value and become zero, so
    the engines always have something to compute with.
    """
    number = parse_decimal(value)
    return number if number.is_finite() else ZERO


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.replace(",", "").strip()
        return Decimal(cleaned)
    except Exception as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc


def round_money(value: Decimal) -> Decimal:
    """Round to pennies, half away from zero."""
    return value.quantize(_PENNY, rounding=ROUND_HALF_UP)


def round_whole(value: Decimal) -> Decimal:
    """Round to whole currency units, half away from zero."""
    return value.quantize(_UNIT, rounding=ROUND_HALF_UP)


def clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return min(high, max(low, value))


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """Return ``part`` as a percentage of ``whole`` (0 when ``whole`` is 0)."""
    if whole == 0:
        return ZERO
    return part / whole * HUNDRED
