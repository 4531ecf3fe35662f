"""Tests for the Flask JSON API and its goal store."""

from datetime import date
from decimal import Decimal

import pytest

from finance_calc import strict
from finance_calc.data_models import BudgetEntry, Debt, SavingsGoal
from finance_calc.errors import ConvergenceError
from finance_calc_web.app import create_app
from finance_calc_web.goal_store import GoalStore


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok", "service": "finance-calc"}


def test_mortgage_endpoint(client):
    response = client.post(
        "/api/mortgage", json={"house_price": 300000, "deposit_pct": 10, "annual_rate_pct": 4.5, "term_years": 25}
    )
    assert response.status_code == 200
    data = response.get_json()
    assert data["summary"]["loan_amount"] == 270000
    assert data["summary"]["monthly_payment"] == pytest.approx(1500.74, abs=0.05)
    assert len(data["schedule"]) == 25


def test_mortgage_missing_field(client):
    response = client.post("/api/mortgage", json={"house_price": 300000, "term_years": 25})
    assert response.status_code == 400
    assert response.get_json()["field"] == "annual_rate_pct"


def test_mortgage_strict_rejects_negative_price(client):
    response = client.post(
        "/api/mortgage",
        json={"house_price": -1, "annual_rate_pct": 4.5, "term_years": 25, "strict": True},
    )
    assert response.status_code == 400
    assert response.get_json()["field"] == "house_price"


def test_convergence_error_maps_to_422(client, monkeypatch):
    def never_converges(*args):
        raise ConvergenceError(700, Decimal("1234.5"))

    monkeypatch.setattr(strict, "summarize_mortgage", never_converges)
    response = client.post(
        "/api/mortgage",
        json={"house_price": 100000, "annual_rate_pct": 5, "term_years": 25, "strict": True},
    )
    assert response.status_code == 422
    data = response.get_json()
    assert data["months"] == 700
    assert "1234.50" in data["error"]


def test_salary_endpoint(client):
    response = client.post("/api/salary", json={"gross_annual_salary": 30000, "pension_contribution_pct": 8})
    assert response.status_code == 200
    data = response.get_json()
    assert data["net_annual"] == pytest.approx(22790.40)
    assert data["tax_band_label"] == "Basic Rate Payer"


def test_retirement_endpoint(client):
    response = client.post(
        "/api/retirement",
        json={"dob": "1996-10-18", "today": "2026-10-18", "starting_pot": 20000, "goal_amount": 500000},
    )
    assert response.status_code == 200
    assert response.get_json()["months_to_grow"] == 444

    response = client.post("/api/retirement", json={"current_age": 30})
    assert response.status_code == 400
    assert response.get_json()["field"] == "goal_amount"


def test_budget_endpoint(client):
    response = client.post(
        "/api/budget",
        json={
            "monthly_income": 2000,
            "categories": [
                {"name": "Rent", "amount": 700, "kind": "essentials"},
                {"name": "Gym", "amount": 40, "kind": "lifestyle"},
            ],
        },
    )
    assert response.status_code == 200
    data = response.get_json()
    assert data["remaining"] == 1260
    assert data["buckets"]["essentials"]["left"] == 300

    response = client.post(
        "/api/budget",
        json={"monthly_income": 2000, "strict": True, "categories": [{"name": "Rent", "amount": 700, "kind": "housing"}]},
    )
    assert response.status_code == 400
    assert response.get_json()["field"] == "kind"


def test_goal_lifecycle(client):
    response = client.post(
        "/api/goals",
        json={
            "name": "Holiday",
            "target_amount": 1200,
            "amount_saved": 200,
            "deadline": "2027-10-18",
            "today": "2026-10-18",
        },
    )
    assert response.status_code == 201
    created = response.get_json()
    goal_id = created["id"]
    assert created["payoff"]["months_remaining"] == 12

    listed = client.get("/api/goals?today=2026-10-18").get_json()["goals"]
    assert [g["id"] for g in listed] == [goal_id]
    assert listed[0]["goal"]["name"] == "Holiday"
    assert listed[0]["payoff"]["required_monthly_amount"] == pytest.approx(1000 / 12)

    response = client.post(f"/api/goals/{goal_id}/saved", json={"amount_saved": 5000, "today": "2026-10-18"})
    assert response.status_code == 200
    updated = response.get_json()
    assert updated["goal"]["amount_saved"] == 1200
    assert updated["payoff"]["progress_pct"] == 100

    assert client.delete(f"/api/goals/{goal_id}").status_code == 204
    assert client.get("/api/goals").get_json()["goals"] == []
    assert client.delete(f"/api/goals/{goal_id}").status_code == 404


def test_debt_goal(client):
    response = client.post(
        "/api/goals",
        json={
            "name": "Credit card",
            "kind": "debt",
            "balance": 5000,
            "annual_percentage_rate": 20,
            "deadline": "2027-10-18",
            "today": "2026-10-18",
        },
    )
    assert response.status_code == 201
    data = response.get_json()
    assert data["payoff"]["kind"] == "debt"
    assert data["payoff"]["total_interest_over_term"] > 0

    response = client.post(f"/api/goals/{data['id']}/saved", json={"amount_saved": 100})
    assert response.status_code == 404


@pytest.mark.parametrize(
    "body, field",
    [
        ({"target_amount": 1200, "deadline": "2027-01-01"}, "name"),
        ({"name": "Car", "target_amount": 1000, "amount_saved": 1500, "deadline": "2027-01-01"}, "amount_saved"),
        ({"name": "Car", "target_amount": 0, "deadline": "2027-01-01"}, "target_amount"),
        ({"name": "Car", "target_amount": 1000, "deadline": "someday"}, "deadline"),
        ({"name": "Car", "kind": "wish", "target_amount": 1000, "deadline": "2027-01-01"}, "kind"),
        ({"name": "Loan", "kind": "debt", "balance": 0, "annual_percentage_rate": 5, "deadline": "2027-01-01"}, "balance"),
    ],
)
def test_invalid_goals_rejected(client, body, field):
    response = client.post("/api/goals", json=body)
    assert response.status_code == 400
    assert response.get_json()["field"] == field


def test_goals_are_per_user(app):
    first = app.test_client()
    second = app.test_client()
    first.post("/api/goals", json={"name": "Bike", "target_amount": 500, "deadline": "2027-01-01"})
    assert len(first.get("/api/goals").get_json()["goals"]) == 1
    assert second.get("/api/goals").get_json()["goals"] == []


def test_goal_limit_per_user(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test",
            "DATABASE_URL": f"sqlite:///{tmp_path / 'limit.sqlite3'}",
            "MAX_GOALS_PER_USER": 2,
        }
    )
    client = app.test_client()
    for name in ("One", "Two", "Three"):
        client.post("/api/goals", json={"name": name, "target_amount": 100, "deadline": "2027-01-01"})
    assert len(client.get("/api/goals").get_json()["goals"]) == 2


def test_budget_entries(client):
    for body in (
        {"name": "Rent", "amount": 700, "kind": "essentials", "spent_on": "2026-10-01"},
        {"name": "Cinema", "amount": 20, "kind": "lifestyle", "spent_on": "2026-10-12"},
        {"name": "Rent", "amount": 700, "kind": "essentials", "spent_on": "2026-09-01"},
    ):
        assert client.post("/api/budget/entries", json=body).status_code == 201

    data = client.get("/api/budget/entries?today=2026-10-18&monthly_income=2000").get_json()
    assert [e["spent_on"] for e in data["entries"]] == ["2026-10-01", "2026-10-12"]
    assert data["summary"]["total_spent"] == 720
    assert data["summary"]["remaining"] == 1280

    data = client.get("/api/budget/entries?today=2026-09-05").get_json()
    assert len(data["entries"]) == 1
    assert data["summary"] is None


def test_budget_entry_validation(client):
    response = client.post("/api/budget/entries", json={"name": "Rent", "amount": 700, "kind": "housing"})
    assert response.status_code == 400
    assert response.get_json()["field"] == "kind"

    response = client.post("/api/budget/entries", json={"name": "Rent", "amount": -5, "kind": "essentials"})
    assert response.status_code == 400
    assert response.get_json()["field"] == "amount"


def test_goal_store_round_trip(tmp_path):
    store = GoalStore(f"sqlite:///{tmp_path / 'store.sqlite3'}")
    store.add_goal("user", "g1", SavingsGoal(Decimal("1000"), Decimal("100"), date(2027, 1, 1), name="Car"))
    store.add_goal("user", "d1", Debt(Decimal("2500"), Decimal("19.9"), date(2027, 6, 1), name="Card"))

    goals = {g["id"]: g["goal"] for g in store.list_goals("user")}
    assert goals["g1"] == SavingsGoal(Decimal("1000"), Decimal("100"), date(2027, 1, 1), name="Car")
    assert goals["d1"] == Debt(Decimal("2500"), Decimal("19.9"), date(2027, 6, 1), name="Card")
    assert store.list_goals("someone-else") == []

    assert store.update_saved("user", "g1", Decimal("-10"))["goal"].amount_saved == 0
    assert store.update_saved("user", "d1", Decimal("10")) is None
    assert store.update_saved("user", "missing", Decimal("10")) is None
    assert store.remove_goal("someone-else", "g1") is False
    assert store.remove_goal("user", "g1") is True


def test_goal_store_entries_for_month(tmp_path):
    store = GoalStore(f"sqlite:///{tmp_path / 'store.sqlite3'}")
    store.add_entry("user", "e1", BudgetEntry("Rent", Decimal("700"), "essentials", date(2026, 10, 1)))
    store.add_entry("user", "e2", BudgetEntry("Rent", Decimal("700"), "essentials", date(2026, 11, 1)))
    entries = store.entries_for_month("user", date(2026, 10, 18))
    assert entries == [BudgetEntry("Rent", Decimal("700"), "essentials", date(2026, 10, 1))]


def test_mortgage_clamps_lenient_inputs(client):
    response = client.post(
        "/api/mortgage", json={"house_price": 100000, "deposit_pct": 0, "annual_rate_pct": 0, "term_years": 2000000}
    )
    assert response.status_code == 200
    data = response.get_json()
    assert data["summary"]["months_to_payoff"] == 480
    assert len(data["schedule"]) == 40

    response = client.post(
        "/api/mortgage", json={"house_price": 50000000, "annual_rate_pct": 4, "term_years": 25}
    )
    assert response.get_json()["summary"]["house_price"] == 10000000


def test_mortgage_strict_rejects_long_term(client):
    response = client.post(
        "/api/mortgage",
        json={"house_price": 100000, "annual_rate_pct": 0, "term_years": 41, "strict": True},
    )
    assert response.status_code == 400
    assert response.get_json()["field"] == "term_years"


@pytest.mark.parametrize("value", ["NaN", "Infinity", "-inf"])
def test_non_finite_numbers_rejected(client, value):
    response = client.post("/api/salary", json={"gross_annual_salary": value})
    assert response.status_code == 400
    assert response.get_json() == {"error": "must be a finite number", "field": "gross_annual_salary"}


def test_added_goal_matches_stored_goal(client):
    response = client.post(
        "/api/goals",
        json={
            "name": "Deposit",
            "target_amount": "1200.457",
            "amount_saved": 100,
            "deadline": "2027-10-18",
            "today": "2026-10-18",
        },
    )
    assert response.status_code == 201
    created = response.get_json()
    assert created["goal"]["target_amount"] == 1200.46
    assert created["created_at"] is not None

    listed = client.get("/api/goals?today=2026-10-18").get_json()["goals"]
    assert listed == [created]
