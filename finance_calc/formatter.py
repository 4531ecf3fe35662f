"""Output helpers for the finance calculators.

This module renders calculator results as plain text for the terminal and
converts result records into JSON-serialisable structures for file export and
the web API. Money is shown to two decimal places; the engines themselves
return unrounded ``Decimal`` values.
"""

from __future__ import annotations

import dataclasses
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from .data_models import (
    AmortizationRow,
    BudgetSummary,
    MortgageSummary,
    PayoffResult,
    RetirementResult,
    SalaryResult,
)


def to_jsonable(value: Any) -> Any:
    """Recursively convert dataclasses, Decimals and dates to JSON types."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def print_mortgage_summary(summary: MortgageSummary) -> None:
    """Print the headline mortgage figures in a human‑readable format."""
    print("Mortgage")
    print("-" * 72)
    print(f"House price        : {summary.house_price:.2f}")
    print(f"Deposit            : {summary.deposit_amount:.2f} ({summary.deposit_pct:.0f}%)")
    print(f"Loan amount        : {summary.loan_amount:.2f}")
    print(f"LTV                : {summary.ltv_pct:.1f}%")
    print(f"Monthly payment    : {summary.monthly_payment:.2f}")
    if summary.monthly_overpayment:
        print(f"With overpayment   : {summary.monthly_total:.2f}")
    print(f"Stress test ({summary.stress_rate_pct:.1f}%): {summary.stress_monthly_payment:.2f}")
    print(f"Total interest     : {summary.total_interest:.2f}")
    print(f"Total cost         : {summary.total_payments:.2f}")
    print(f"Months to payoff   : {summary.months_to_payoff}")
    if summary.monthly_overpayment:
        print(f"Baseline interest  : {summary.baseline_total_interest:.2f}")
        print(f"Interest saved     : {summary.interest_saved:.2f}")
        if summary.months_saved:
            print(f"Term reduction     : {summary.months_saved} months")
    print(f"Ideal salary (3.6x): {summary.ideal_household_salary:.2f}")
    if summary.household_income:
        print(f"Payment to income  : {summary.payment_to_income_pct:.1f}%")
        print(f"Max price (multiple): {summary.max_price_by_income_multiple:.0f}")
    if not summary.converged:
        print("Warning: the payment never clears the balance; schedule truncated.")
    print("-" * 72)


def print_schedule(schedule: Iterable[AmortizationRow]) -> None:
    """Print the yearly amortization schedule as a simple table."""
    print("\t".join(["Year", "Principal", "Interest", "Total"]))
    for row in schedule:
        total = row.principal_paid + row.interest_paid
        print(f"{row.year}\t{row.principal_paid:.2f}\t{row.interest_paid:.2f}\t{total:.2f}")


def print_retirement(result: RetirementResult) -> None:
    print("Retirement")
    print("-" * 72)
    print(f"Years to retirement    : {result.years_to_grow}")
    print(f"Monthly contribution   : {result.total_monthly_contribution:.2f} (incl. employer)")
    print(f"Real return            : {result.real_return_pct:.2f}%")
    print(f"Projected pot (nominal): {result.projected_pot_nominal:.0f}")
    print(f"Projected pot (today's): {result.projected_pot_real:.0f}")
    print(f"Goal (inflated)        : {result.inflation_adjusted_goal:.0f}")
    print(f"Progress               : {result.progress_pct:.1f}%")
    print(f"Sustainable income     : {result.sustainable_monthly_real:.2f} / month")
    print(f"Income need (inflated) : {result.inflation_adjusted_monthly_need:.2f} / month")
    label = "Surplus" if result.income_gap_monthly >= 0 else "Shortfall"
    print(f"{label:23s}: {abs(result.income_gap_monthly):.2f} / month")
    print("-" * 72)
    print("\t".join(["Year", "Pot"]))
    for point in result.projection:
        print(f"{point.year_label}\t{point.pot_value:.0f}")


def print_salary(result: SalaryResult) -> None:
    print("Net salary")
    print("-" * 72)
    print(f"Gross salary       : {result.gross_salary:.2f}")
    print(f"Pension            : {result.pension_amount:.2f}")
    print(f"Income tax         : {result.income_tax:.2f}")
    print(f"National Insurance : {result.national_insurance:.2f}")
    print(f"Net annual         : {result.net_annual:.2f}")
    print(f"Net monthly        : {result.net_monthly:.2f}")
    print(f"Net weekly         : {result.net_weekly:.2f}")
    print(f"Net daily          : {result.net_daily:.2f}")
    print(f"Net hourly         : {result.net_hourly:.2f}")
    print(f"Effective rate     : {result.effective_tax_rate_pct:.1f}%")
    print(f"Band               : {result.tax_band_label}")
    print("-" * 72)


def print_payoff(result: PayoffResult) -> None:
    title = "Debt repayment" if result.kind == "debt" else "Savings goal"
    print(title)
    print("-" * 72)
    print(f"Months left        : {result.months_remaining}")
    print(f"Remaining          : {result.remaining_amount:.2f}")
    print(f"Monthly needed     : {result.required_monthly_amount:.2f}")
    if result.kind == "debt":
        print(f"Total with interest: {result.total_cost_over_term:.2f}")
        print(f"Interest           : {result.total_interest_over_term:.2f}")
    else:
        print(f"Progress           : {result.progress_pct:.0f}%")
    print("-" * 72)


def print_budget(summary: BudgetSummary) -> None:
    """Print the 50/30/20 breakdown, one line per bucket."""
    print("Budget")
    print("=" * 72)
    print(f"{'Bucket':12s} {'Share':>6s} {'Budget':>12s} {'Spent':>12s} {'Left':>12s} {'Used':>7s}")
    for bucket in summary.buckets.values():
        print(
            f"{bucket.kind:12s} {bucket.allocation_pct:5.0f}% {bucket.budget:12.2f} "
            f"{bucket.spent:12.2f} {bucket.left:12.2f} {bucket.used_pct:6.1f}%"
        )
    print("=" * 72)
    print(f"Income {summary.monthly_income:.2f}, spent {summary.total_spent:.2f}, remaining {summary.remaining:.2f}")
