"""50/30/20 budget tracking.

Monthly income is split into essentials (50 %), lifestyle (30 %) and
priorities such as saving and debt repayment (20 %). Spending lines are
totalled per bucket and compared with that bucket's share.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from .constants import BUDGET_ALLOCATION
from .data_models import BUDGET_KINDS, BudgetBucket, BudgetCategory, BudgetEntry, BudgetSummary
from .periods import month_range
from .utils import HUNDRED, ZERO, Number, clamp, percent_of, to_decimal


def allocation_for(kind: str) -> Decimal:
    """Share of income for ``kind``; unknown kinds get nothing."""
    return BUDGET_ALLOCATION.get(kind, ZERO)


def summarize_budget(monthly_income: Number, categories: Iterable[BudgetCategory]) -> BudgetSummary:
    """Compare spending per bucket with its 50/30/20 allocation.

    ``left`` never goes below zero; the overall ``remaining`` is signed so an
    overspend shows as a negative figure.
    """
    income = to_decimal(monthly_income)
    by_kind: Dict[str, List[BudgetCategory]] = {kind: [] for kind in BUDGET_KINDS}
    total = ZERO
    for category in categories:
        amount = to_decimal(category.amount)
        total += amount
        by_kind.setdefault(category.kind, []).append(category)

    buckets: Dict[str, BudgetBucket] = {}
    for kind, members in by_kind.items():
        share = allocation_for(kind)
        budget = income * share
        spent = sum((to_decimal(c.amount) for c in members), ZERO)
        buckets[kind] = BudgetBucket(
            kind=kind,
            allocation_pct=share * HUNDRED,
            budget=budget,
            spent=spent,
            left=max(ZERO, budget - spent),
            used_pct=clamp(percent_of(spent, budget), ZERO, HUNDRED),
            categories=tuple(members),
        )

    return BudgetSummary(
        monthly_income=income,
        total_spent=total,
        remaining=income - total,
        buckets=buckets,
    )


def entries_for_month(entries: Iterable[BudgetEntry], today: date) -> List[BudgetEntry]:
    """Entries dated within the calendar month containing ``today``."""
    first_day, last_day = month_range(today)
    return [e for e in entries if first_day <= e.spent_on <= last_day]


def entries_to_categories(entries: Iterable[BudgetEntry]) -> List[BudgetCategory]:
    """Sum dated entries into one category per ``(name, kind)``."""
    totals: Dict[Tuple[str, str], Decimal] = {}
    for entry in entries:
        key = (entry.name, entry.kind)
        totals[key] = totals.get(key, ZERO) + to_decimal(entry.amount)
    return [BudgetCategory(name=name, amount=amount, kind=kind) for (name, kind), amount in totals.items()]
