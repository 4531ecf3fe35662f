"""Calendar helpers for deadlines, ages and month buckets.

Every function takes the reference date explicitly; nothing here reads the
clock, so results are reproducible in tests.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Callable, Dict, Iterable, List, Tuple, TypeVar

T = TypeVar("T")


def parse_date(text: str) -> date:
    """Parse ``YYYY-MM-DD`` or ``YYYY-MM`` into a ``date``.

    A bare year-month is normalized to the first day of that month.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    try:
        parts = text.strip().split("-")
        if len(parts) not in (2, 3):
            raise ValueError
        year = int(parts[0])
        month = int(parts[1])
        day = int(parts[2]) if len(parts) == 3 else 1
        return date(year, month, day)
    except Exception as exc:
        raise ValueError(f"Invalid date string: {text}") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def months_between(reference: date, deadline: date) -> int:
    """Count completed calendar months from ``reference`` to ``deadline``.

    The raw month difference drops by one when the deadline's day of month
    falls before the reference's, so 15 Jan -> 14 Mar is one month, not two.
    Past deadlines give 0.
    """
    months = (deadline.year - reference.year) * 12 + (deadline.month - reference.month)
    if deadline.day < reference.day:
        months -= 1
    return max(0, months)


def age_on(dob: date, today: date) -> int:
    """Completed years of age on ``today``; 0 for a future date of birth."""
    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return max(0, years)


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def month_range(today: date) -> Tuple[date, date]:
    """Inclusive first and last day of the month containing ``today``."""
    last_day = calendar.monthrange(today.year, today.month)[1]
    return date(today.year, today.month, 1), date(today.year, today.month, last_day)


def group_by_month(records: Iterable[T], date_of: Callable[[T], date]) -> Dict[str, List[T]]:
    """Bucket ``records`` by year-month of ``date_of(record)``.

    Buckets keep the order in which their first record was seen.
    """
    buckets: Dict[str, List[T]] = {}
    for record in records:
        buckets.setdefault(month_key(date_of(record)), []).append(record)
    return buckets
