"""Validating entry points for programmatic use.

The engines themselves clamp or zero out anything odd so a calculator page
always has a number to show. The functions here check every input first and
raise ``InvalidInputError`` naming the offending field, and refuse amortization
schedules that never reach a zero balance.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Tuple

from . import budget, mortgage, payoff, retirement, salary
from .constants import (
    DEFAULT_HOURS_PER_WEEK,
    DEFAULT_INCOME_MULTIPLE,
    DEFAULT_STRESS_ADD_PCT,
    MAX_DEPOSIT_PCT,
    MAX_HOURS_PER_WEEK,
    MAX_TERM_YEARS,
    MIN_HOURS_PER_WEEK,
)
from .data_models import (
    BUDGET_KINDS,
    AmortizationResult,
    AmortizationRow,
    BudgetCategory,
    BudgetSummary,
    Debt,
    MortgageSummary,
    PayoffResult,
    RetirementInputs,
    RetirementResult,
    SalaryInputs,
    SalaryResult,
    SavingsGoal,
)
from .errors import ConvergenceError, InvalidInputError
from .periods import months_between
from .utils import HUNDRED, ONE, ZERO, Number, parse_decimal, to_decimal


def _number(field: str, value: Number) -> Decimal:
    try:
        number = parse_decimal(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(field, f"not a number: {value!r}") from exc
    if not number.is_finite():
        raise InvalidInputError(field, "must be a finite number")
    return number


def _at_least(field: str, value: Number, low: Decimal) -> Decimal:
    number = _number(field, value)
    if number < low:
        raise InvalidInputError(field, f"must be at least {low}, got {number}")
    return number


def _above(field: str, value: Number, low: Decimal) -> Decimal:
    number = _number(field, value)
    if number <= low:
        raise InvalidInputError(field, f"must be greater than {low}, got {number}")
    return number


def _between(field: str, value: Number, low: Decimal, high: Decimal) -> Decimal:
    number = _number(field, value)
    if not low <= number <= high:
        raise InvalidInputError(field, f"must be between {low} and {high}, got {number}")
    return number


def _future_deadline(deadline: date, today: date) -> None:
    if months_between(today, deadline) == 0:
        raise InvalidInputError("deadline", f"{deadline.isoformat()} is less than a month after {today.isoformat()}")


# ── Mortgage ─────────────────────────────────────────────────────────


def _term_years(term_years: Number) -> Decimal:
    term = _above("term_years", term_years, ZERO)
    if term > MAX_TERM_YEARS:
        raise InvalidInputError("term_years", f"must be at most {MAX_TERM_YEARS}, got {term}")
    return term


def _loan_terms(principal: Number, annual_rate_pct: Number, term_years: Number) -> None:
    _at_least("principal", principal, ZERO)
    _at_least("annual_rate_pct", annual_rate_pct, ZERO)
    _term_years(term_years)


def check_converged(result: AmortizationResult) -> AmortizationResult:
    """Raise ``ConvergenceError`` unless the schedule cleared the balance."""
    if not result.converged:
        raise ConvergenceError(result.months_elapsed, result.final_balance)
    return result


def monthly_payment(principal: Number, annual_rate_pct: Number, term_years: Number) -> Decimal:
    _loan_terms(principal, annual_rate_pct, term_years)
    return mortgage.monthly_payment(principal, annual_rate_pct, term_years)


def build_amortization_schedule(
    principal: Number,
    annual_rate_pct: Number,
    term_years: Number,
    monthly_overpayment: Number = 0,
) -> List[AmortizationRow]:
    _loan_terms(principal, annual_rate_pct, term_years)
    _at_least("monthly_overpayment", monthly_overpayment, ZERO)
    result = mortgage.amortize(principal, annual_rate_pct, term_years, monthly_overpayment)
    return check_converged(result).rows


def summarize_mortgage(
    house_price: Number,
    deposit_pct: Number,
    annual_rate_pct: Number,
    term_years: Number,
    monthly_overpayment: Number = 0,
    fees: Number = 0,
    stress_add_pct: Number = DEFAULT_STRESS_ADD_PCT,
    household_income: Number = 0,
    income_multiple: Number = DEFAULT_INCOME_MULTIPLE,
) -> Tuple[List[AmortizationRow], MortgageSummary]:
    _at_least("house_price", house_price, ZERO)
    _between("deposit_pct", deposit_pct, ZERO, MAX_DEPOSIT_PCT)
    _at_least("annual_rate_pct", annual_rate_pct, ZERO)
    _term_years(term_years)
    _at_least("monthly_overpayment", monthly_overpayment, ZERO)
    _at_least("fees", fees, ZERO)
    _at_least("stress_add_pct", stress_add_pct, ZERO)
    _at_least("household_income", household_income, ZERO)
    _above("income_multiple", income_multiple, ZERO)
    rows, summary = mortgage.summarize_mortgage(
        house_price,
        deposit_pct,
        annual_rate_pct,
        term_years,
        monthly_overpayment,
        fees,
        stress_add_pct,
        household_income,
        income_multiple,
    )
    if not summary.converged:
        outstanding = summary.loan_amount - (summary.total_payments - summary.total_interest)
        raise ConvergenceError(summary.months_to_payoff, outstanding)
    return rows, summary


# ── Retirement ───────────────────────────────────────────────────────


def project_retirement(inputs: RetirementInputs) -> RetirementResult:
    current_age = _at_least("current_age", inputs.current_age, ZERO)
    _at_least("retirement_age", inputs.retirement_age, current_age)
    _at_least("starting_pot", inputs.starting_pot, ZERO)
    _at_least("monthly_contribution", inputs.monthly_contribution, ZERO)
    _at_least("employer_match_pct", inputs.employer_match_pct, ZERO)
    _number("nominal_return_pct", inputs.nominal_return_pct)
    _at_least("annual_fees_pct", inputs.annual_fees_pct, ZERO)
    _above("inflation_rate_pct", inputs.inflation_rate_pct, -HUNDRED)
    _above("goal_amount", inputs.goal_amount, ZERO)
    _at_least("monthly_income_need", inputs.monthly_income_need, ZERO)
    return retirement.project_retirement(inputs)


# ── Salary ───────────────────────────────────────────────────────────


def calculate_net_salary(
    gross_salary: Number,
    pension_contribution_pct: Number,
    hours_per_week: Number = DEFAULT_HOURS_PER_WEEK,
) -> SalaryResult:
    _at_least("gross_salary", gross_salary, ZERO)
    _between("pension_contribution_pct", pension_contribution_pct, ZERO, HUNDRED)
    _between("hours_per_week", hours_per_week, MIN_HOURS_PER_WEEK, MAX_HOURS_PER_WEEK)
    return salary.calculate_net_salary(gross_salary, pension_contribution_pct, hours_per_week)


def net_salary_for(inputs: SalaryInputs) -> SalaryResult:
    _between("work_hours_factor", inputs.work_hours_factor, ZERO, ONE)
    gross = _at_least("gross_annual_salary", inputs.gross_annual_salary, ZERO) * to_decimal(inputs.work_hours_factor)
    return calculate_net_salary(gross, inputs.pension_contribution_pct, inputs.hours_per_week)


# ── Goals and debts ──────────────────────────────────────────────────


def savings_goal_payoff(goal: SavingsGoal, today: date) -> PayoffResult:
    target = _above("target_amount", goal.target_amount, ZERO)
    _between("amount_saved", goal.amount_saved, ZERO, target)
    _future_deadline(goal.deadline, today)
    return payoff.savings_goal_payoff(goal, today)


def debt_payoff(debt: Debt, today: date) -> PayoffResult:
    _at_least("balance", debt.balance, ZERO)
    _at_least("annual_percentage_rate", debt.annual_percentage_rate, ZERO)
    _future_deadline(debt.deadline, today)
    return payoff.debt_payoff(debt, today)


# ── Budget ───────────────────────────────────────────────────────────


def summarize_budget(monthly_income: Number, categories: Iterable[BudgetCategory]) -> BudgetSummary:
    _at_least("monthly_income", monthly_income, ZERO)
    checked = list(categories)
    for category in checked:
        if not category.name.strip():
            raise InvalidInputError("name", "category name is empty")
        _at_least("amount", category.amount, ZERO)
        if category.kind not in BUDGET_KINDS:
            raise InvalidInputError("kind", f"unknown budget kind {category.kind!r}")
    return budget.summarize_budget(monthly_income, checked)
