"""Data models for the finance calculators.

This module defines the value records passed into and returned from the
calculation engines. They are frozen dataclasses: an engine builds a fresh
record per call and never mutates it afterwards. Result records always carry
every field, using zero where a figure does not apply, and a ``version`` so
that serialized results can evolve.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Tuple

from .constants import DEFAULT_HOURS_PER_WEEK

RESULT_VERSION = 1

KIND_SAVINGS_GOAL = "savingsGoal"
KIND_DEBT = "debt"

BUDGET_KINDS = ("essentials", "lifestyle", "priorities")


# ── Mortgage ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class MortgageInputs:
    """Loan parameters for the amortization engine.

    Attributes
    ----------
    principal: Decimal
        Amount borrowed, i.e. house price less deposit.
    annual_rate_pct: Decimal
        Nominal annual interest rate in percent (``4.5`` means 4.5 %).
    term_years: Decimal
        Loan term in years. ``term_years * 12`` is the number of payments.
    monthly_overpayment: Decimal
        Extra amount paid on top of the scheduled payment every month.
    """

    principal: Decimal
    annual_rate_pct: Decimal
    term_years: Decimal
    monthly_overpayment: Decimal = Decimal("0")


@dataclass(frozen=True)
class AmortizationRow:
    """Principal and interest paid during one loan year (1-based)."""

    year: int
    principal_paid: Decimal
    interest_paid: Decimal


@dataclass(frozen=True)
class AmortizationResult:
    """Outcome of running the month-by-month amortization loop.

    ``converged`` is False when the loop stopped with a balance still
    outstanding, either because the payment never covered the interest or
    because the month bound was reached.
    """

    rows: List[AmortizationRow]
    months_elapsed: int
    final_balance: Decimal
    converged: bool


@dataclass(frozen=True)
class MortgageSummary:
    """Headline mortgage figures including affordability metrics."""

    house_price: Decimal
    deposit_pct: Decimal
    deposit_amount: Decimal
    loan_amount: Decimal
    ltv_pct: Decimal
    fees: Decimal
    monthly_payment: Decimal
    monthly_overpayment: Decimal
    monthly_total: Decimal
    stress_rate_pct: Decimal
    stress_monthly_payment: Decimal
    total_payments: Decimal
    total_interest: Decimal
    months_to_payoff: int
    converged: bool
    baseline_total_interest: Decimal
    interest_saved: Decimal
    months_saved: int
    household_income: Decimal
    payment_to_income_pct: Decimal
    max_loan_by_income_multiple: Decimal
    max_price_by_income_multiple: Decimal
    ideal_household_salary: Decimal
    version: int = RESULT_VERSION


# ── Retirement ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class RetirementInputs:
    current_age: Decimal
    retirement_age: Decimal
    starting_pot: Decimal
    monthly_contribution: Decimal
    employer_match_pct: Decimal
    nominal_return_pct: Decimal
    annual_fees_pct: Decimal
    inflation_rate_pct: Decimal
    goal_amount: Decimal
    monthly_income_need: Decimal


@dataclass(frozen=True)
class ProjectionPoint:
    """Pot value at a yearly checkpoint, labelled ``"<years>y"``."""

    year_label: str
    pot_value: Decimal


@dataclass(frozen=True)
class RetirementResult:
    years_to_grow: Decimal
    months_to_grow: int
    total_monthly_contribution: Decimal
    real_return_pct: Decimal
    projection: List[ProjectionPoint]
    projected_pot_nominal: Decimal
    projected_pot_real: Decimal
    inflation_adjusted_goal: Decimal
    inflation_adjusted_monthly_need: Decimal
    progress_pct: Decimal
    sustainable_annual_real: Decimal
    sustainable_monthly_real: Decimal
    income_gap_monthly: Decimal
    version: int = RESULT_VERSION


# ── Salary ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SalaryInputs:
    """Salary calculator inputs.

    ``work_hours_factor`` scales the full-time salary for part-time work
    (0.8 for four days a week). ``hours_per_week`` only affects the hourly
    figure.
    """

    gross_annual_salary: Decimal
    pension_contribution_pct: Decimal
    work_hours_factor: Decimal = Decimal("1")
    hours_per_week: Decimal = DEFAULT_HOURS_PER_WEEK


@dataclass(frozen=True)
class SalaryResult:
    gross_salary: Decimal
    pension_amount: Decimal
    salary_after_pension: Decimal
    personal_allowance: Decimal
    income_tax: Decimal
    national_insurance: Decimal
    net_annual: Decimal
    net_monthly: Decimal
    net_weekly: Decimal
    net_daily: Decimal
    net_hourly: Decimal
    effective_tax_rate_pct: Decimal
    tax_band_label: str
    version: int = RESULT_VERSION


# ── Goals and debts ──────────────────────────────────────────────────


@dataclass(frozen=True)
class SavingsGoal:
    target_amount: Decimal
    amount_saved: Decimal
    deadline: date
    name: str = ""
    kind: str = field(default=KIND_SAVINGS_GOAL, init=False)


@dataclass(frozen=True)
class Debt:
    balance: Decimal
    annual_percentage_rate: Decimal
    deadline: date
    name: str = ""
    kind: str = field(default=KIND_DEBT, init=False)


@dataclass(frozen=True)
class PayoffResult:
    """What it takes to hit a goal or clear a debt by its deadline.

    For savings goals ``total_cost_over_term`` and ``total_interest_over_term``
    are zero. ``progress_pct`` is only meaningful for savings goals and is zero
    for debts.
    """

    kind: str
    months_remaining: int
    required_monthly_amount: Decimal
    total_cost_over_term: Decimal
    total_interest_over_term: Decimal
    remaining_amount: Decimal
    progress_pct: Decimal
    version: int = RESULT_VERSION


# ── Budget ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BudgetCategory:
    """A named spending line, e.g. ``Rent`` in ``essentials``."""

    name: str
    amount: Decimal
    kind: str


@dataclass(frozen=True)
class BudgetEntry:
    """A dated spend, bucketed into calendar months for the budget view."""

    name: str
    amount: Decimal
    kind: str
    spent_on: date


@dataclass(frozen=True)
class BudgetBucket:
    kind: str
    allocation_pct: Decimal
    budget: Decimal
    spent: Decimal
    left: Decimal
    used_pct: Decimal
    categories: Tuple[BudgetCategory, ...]


@dataclass(frozen=True)
class BudgetSummary:
    monthly_income: Decimal
    total_spent: Decimal
    remaining: Decimal
    buckets: Dict[str, BudgetBucket]
    version: int = RESULT_VERSION
