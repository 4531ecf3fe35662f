"""Exceptions raised by the strict entry points in ``finance_calc.strict``."""

from __future__ import annotations

from typing import Optional


class CalculationError(Exception):
    """Base class for calculator errors."""


class InvalidInputError(CalculationError, ValueError):
    """An input is outside the range the calculator accepts.

    ``field`` names the offending input so callers can point at it.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class ConvergenceError(CalculationError):
    """An amortization schedule did not pay the balance down to zero."""

    def __init__(self, months: int, remaining_balance, message: Optional[str] = None) -> None:
        super().__init__(
            message
            or f"Balance of {remaining_balance:.2f} still outstanding after {months} months"
        )
        self.months = months
        self.remaining_balance = remaining_balance
