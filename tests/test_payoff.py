"""Tests for savings-goal and debt payoff calculations."""

from datetime import date
from decimal import Decimal

import pytest

from finance_calc.data_models import KIND_DEBT, KIND_SAVINGS_GOAL, Debt, SavingsGoal
from finance_calc.payoff import debt_monthly_payment, debt_payoff, payoff, savings_goal_payoff


def test_savings_goal_monthly_amount(today):
    goal = SavingsGoal(target_amount=Decimal("1200"), amount_saved=Decimal("200"), deadline=date(2027, 10, 18))
    result = savings_goal_payoff(goal, today)
    assert result.kind == KIND_SAVINGS_GOAL
    assert result.months_remaining == 12
    assert result.remaining_amount == 1000
    assert result.required_monthly_amount == Decimal("1000") / 12
    assert float(result.progress_pct) == pytest.approx(100 / 6)
    assert result.total_interest_over_term == 0


def test_savings_goal_past_deadline(today):
    goal = SavingsGoal(target_amount=Decimal("1200"), amount_saved=Decimal("200"), deadline=date(2026, 1, 1))
    result = savings_goal_payoff(goal, today)
    assert result.months_remaining == 0
    assert result.required_monthly_amount == 0
    assert result.remaining_amount == 1000


def test_savings_goal_already_reached(today):
    goal = SavingsGoal(target_amount=Decimal("1200"), amount_saved=Decimal("1500"), deadline=date(2027, 10, 18))
    result = savings_goal_payoff(goal, today)
    assert result.remaining_amount == 0
    assert result.required_monthly_amount == 0
    assert result.progress_pct == 100


def test_debt_annuity_payment(today):
    """5k at 20 % APR cleared over 12 months."""
    debt = Debt(balance=Decimal("5000"), annual_percentage_rate=Decimal("20"), deadline=date(2027, 10, 18))
    result = debt_payoff(debt, today)
    assert result.kind == KIND_DEBT
    assert result.months_remaining == 12
    assert result.required_monthly_amount == debt_monthly_payment(5000, 20, 12)
    assert float(result.required_monthly_amount) == pytest.approx(463.17, abs=0.02)
    assert result.total_cost_over_term == result.required_monthly_amount * 12
    assert result.total_interest_over_term == result.total_cost_over_term - 5000
    assert result.total_interest_over_term > 0
    assert result.progress_pct == 0


def test_interest_free_debt(today):
    debt = Debt(balance=Decimal("1200"), annual_percentage_rate=Decimal("0"), deadline=date(2027, 10, 18))
    result = debt_payoff(debt, today)
    assert result.required_monthly_amount == 100
    assert result.total_interest_over_term == 0


def test_debt_past_deadline_has_no_plan(today):
    debt = Debt(balance=Decimal("5000"), annual_percentage_rate=Decimal("20"), deadline=date(2026, 10, 1))
    result = debt_payoff(debt, today)
    assert result.months_remaining == 0
    assert result.required_monthly_amount == 0
    assert result.total_cost_over_term == 0
    assert result.total_interest_over_term == 0
    assert result.remaining_amount == 5000


def test_debt_monthly_payment_without_months():
    assert debt_monthly_payment(1000, 10, 0) == 0


def test_payoff_dispatches_on_kind(today):
    goal = SavingsGoal(target_amount=Decimal("600"), amount_saved=Decimal("0"), deadline=date(2027, 4, 18))
    debt = Debt(balance=Decimal("600"), annual_percentage_rate=Decimal("0"), deadline=date(2027, 4, 18))
    assert payoff(goal, today) == savings_goal_payoff(goal, today)
    assert payoff(debt, today) == debt_payoff(debt, today)
