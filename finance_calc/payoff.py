"""Savings-goal and debt payoff calculations against a deadline."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Union

from .data_models import KIND_DEBT, KIND_SAVINGS_GOAL, Debt, PayoffResult, SavingsGoal
from .mortgage import annuity_payment
from .periods import months_between
from .utils import HUNDRED, TWELVE, ZERO, Number, clamp, percent_of, to_decimal

logger = logging.getLogger(__name__)


def debt_monthly_payment(balance: Number, apr_pct: Number, months: int) -> Decimal:
    """Level monthly payment that clears ``balance`` in ``months`` payments."""
    rate_per_month = to_decimal(apr_pct) / HUNDRED / TWELVE
    return annuity_payment(to_decimal(balance), rate_per_month, Decimal(months))


def savings_goal_payoff(goal: SavingsGoal, today: date) -> PayoffResult:
    """Monthly saving needed to reach ``goal`` by its deadline.

    A deadline that has passed, or falls within the current month, leaves no
    months to save over and the required amount is reported as 0.
    """
    months = months_between(today, goal.deadline)
    target = to_decimal(goal.target_amount)
    saved = to_decimal(goal.amount_saved)
    remaining = max(ZERO, target - saved)
    required = remaining / months if months > 0 else ZERO
    if months == 0 and remaining > 0:
        logger.debug("Goal %r is past its deadline with %s still to save", goal.name, remaining)

    return PayoffResult(
        kind=KIND_SAVINGS_GOAL,
        months_remaining=months,
        required_monthly_amount=required,
        total_cost_over_term=ZERO,
        total_interest_over_term=ZERO,
        remaining_amount=remaining,
        progress_pct=clamp(percent_of(saved, target), ZERO, HUNDRED),
    )


def debt_payoff(debt: Debt, today: date) -> PayoffResult:
    """Monthly repayment, total cost and interest to clear ``debt`` on time.

    With no months left there is no repayment plan, so payment, cost and
    interest are all 0.
    """
    months = months_between(today, debt.deadline)
    balance = to_decimal(debt.balance)
    required = debt_monthly_payment(balance, debt.annual_percentage_rate, months)
    if months > 0:
        total_cost = required * months
        total_interest = total_cost - balance
    else:
        total_cost = ZERO
        total_interest = ZERO

    return PayoffResult(
        kind=KIND_DEBT,
        months_remaining=months,
        required_monthly_amount=required,
        total_cost_over_term=total_cost,
        total_interest_over_term=total_interest,
        remaining_amount=max(ZERO, balance),
        progress_pct=ZERO,
    )


def payoff(item: Union[SavingsGoal, Debt], today: date) -> PayoffResult:
    if item.kind == KIND_DEBT:
        return debt_payoff(item, today)
    return savings_goal_payoff(item, today)
