"""Tests for the 50/30/20 budget tracker."""

from datetime import date
from decimal import Decimal

import pytest

from finance_calc.budget import entries_for_month, entries_to_categories, summarize_budget
from finance_calc.data_models import BUDGET_KINDS, BudgetCategory, BudgetEntry


@pytest.fixture
def categories():
    return [
        BudgetCategory("Rent", Decimal("700"), "essentials"),
        BudgetCategory("Groceries", Decimal("275"), "essentials"),
        BudgetCategory("Transport", Decimal("60"), "essentials"),
        BudgetCategory("Savings", Decimal("50"), "priorities"),
        BudgetCategory("Debt", Decimal("200"), "priorities"),
        BudgetCategory("Entertainment", Decimal("125"), "lifestyle"),
        BudgetCategory("Dining", Decimal("80"), "lifestyle"),
    ]


def test_buckets(categories):
    summary = summarize_budget(2000, categories)
    assert list(summary.buckets) == list(BUDGET_KINDS)

    essentials = summary.buckets["essentials"]
    assert essentials.budget == 1000
    assert essentials.spent == 1035
    assert essentials.left == 0
    assert essentials.used_pct == 100
    assert essentials.allocation_pct == 50
    assert [c.name for c in essentials.categories] == ["Rent", "Groceries", "Transport"]

    lifestyle = summary.buckets["lifestyle"]
    assert lifestyle.budget == 600
    assert lifestyle.left == 395
    assert float(lifestyle.used_pct) == pytest.approx(205 / 600 * 100)

    priorities = summary.buckets["priorities"]
    assert priorities.budget == 400
    assert priorities.left == 150
    assert priorities.used_pct == Decimal("62.5")

    assert summary.total_spent == 1490
    assert summary.remaining == 510


def test_allocations_cover_income(categories):
    summary = summarize_budget(Decimal("2345.67"), categories)
    assert sum(b.budget for b in summary.buckets.values()) == Decimal("2345.67")


def test_overspend_shows_negative_remaining():
    summary = summarize_budget(500, [BudgetCategory("Rent", Decimal("700"), "essentials")])
    assert summary.remaining == -200
    assert summary.buckets["essentials"].left == 0


def test_empty_budget_and_zero_income():
    summary = summarize_budget(0, [BudgetCategory("Rent", Decimal("10"), "essentials")])
    assert summary.buckets["essentials"].used_pct == 0
    assert summary.buckets["lifestyle"].spent == 0
    assert summary.buckets["lifestyle"].categories == ()


def test_entries_for_month(today):
    entries = [
        BudgetEntry("Rent", Decimal("700"), "essentials", date(2026, 9, 30)),
        BudgetEntry("Rent", Decimal("700"), "essentials", date(2026, 10, 1)),
        BudgetEntry("Cinema", Decimal("20"), "lifestyle", date(2026, 10, 31)),
        BudgetEntry("Rent", Decimal("700"), "essentials", date(2026, 11, 1)),
    ]
    selected = entries_for_month(entries, today)
    assert [e.spent_on for e in selected] == [date(2026, 10, 1), date(2026, 10, 31)]


def test_entries_to_categories_sums_same_line():
    entries = [
        BudgetEntry("Groceries", Decimal("40"), "essentials", date(2026, 10, 2)),
        BudgetEntry("Cinema", Decimal("20"), "lifestyle", date(2026, 10, 3)),
        BudgetEntry("Groceries", Decimal("35.50"), "essentials", date(2026, 10, 9)),
    ]
    assert entries_to_categories(entries) == [
        BudgetCategory("Groceries", Decimal("75.50"), "essentials"),
        BudgetCategory("Cinema", Decimal("20"), "lifestyle"),
    ]
