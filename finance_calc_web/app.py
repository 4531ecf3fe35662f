"""JSON API for the finance calculators.

Each calculator is a POST endpoint taking a JSON body of inputs and returning
the computed result. Savings goals, debts and budget entries are kept per
user in a ``GoalStore``; the user is identified by a random token held in the
Flask session. Sending ``"strict": true`` switches a calculator to the
validating entry points.
"""

import logging
import os
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import uuid4

from flask import Blueprint, Flask, current_app, jsonify, request, session
from werkzeug.exceptions import HTTPException

from finance_calc import budget, mortgage, payoff, retirement, salary, strict
from finance_calc.data_models import (
    BUDGET_KINDS,
    KIND_DEBT,
    KIND_SAVINGS_GOAL,
    BudgetCategory,
    BudgetEntry,
    Debt,
    RetirementInputs,
    SalaryInputs,
    SavingsGoal,
)
from finance_calc.constants import MORTGAGE_INPUT_RANGES
from finance_calc.errors import ConvergenceError, InvalidInputError
from finance_calc.formatter import to_jsonable
from finance_calc.periods import age_on, parse_date
from finance_calc.utils import parse_decimal
from finance_calc_web.goal_store import GoalStore, create_store_from_env

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__, url_prefix="/api")


def _store() -> GoalStore:
    return current_app.extensions["goal_store"]


def _ensure_user_token() -> str:
    token = session.get("user_token")
    if not token:
        token = uuid4().hex
        session["user_token"] = token
        session.modified = True
    return token


def _body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _decimal(body: Dict[str, Any], name: str, default: Any = None) -> Decimal:
    value = body.get(name, default)
    if value is None or value == "":
        raise InvalidInputError(name, "is required")
    try:
        number = parse_decimal(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(name, f"not a number: {value!r}") from exc
    if not number.is_finite():
        raise InvalidInputError(name, "must be a finite number")
    return number


def _mortgage_field(body: Dict[str, Any], name: str, default: Any, strict_mode: bool) -> Decimal:
    value = _decimal(body, name, default)
    if strict_mode or name not in MORTGAGE_INPUT_RANGES:
        return value
    return mortgage.clamp_input(name, value)


def _date(value: Any, name: str) -> date:
    if not value:
        raise InvalidInputError(name, "is required")
    try:
        return parse_date(str(value))
    except ValueError as exc:
        raise InvalidInputError(name, str(exc)) from exc


def _today(body: Optional[Dict[str, Any]] = None) -> date:
    value = (body or {}).get("today") or request.args.get("today")
    return _date(value, "today") if value else date.today()


def _is_strict(body: Dict[str, Any]) -> bool:
    return bool(body.get("strict")) or request.args.get("strict") == "1"


def _goal_from_body(body: Dict[str, Any]):
    """Build a goal or debt from a form-style body, rejecting bad entries."""
    name = str(body.get("name", "")).strip()
    if not name:
        raise InvalidInputError("name", "is required")
    kind = body.get("kind", KIND_SAVINGS_GOAL)
    deadline = _date(body.get("deadline"), "deadline")
    if kind == KIND_DEBT:
        item = Debt(
            balance=_decimal(body, "balance"),
            annual_percentage_rate=_decimal(body, "annual_percentage_rate"),
            deadline=deadline,
            name=name,
        )
        if item.balance <= 0:
            raise InvalidInputError("balance", "must be greater than 0")
        if item.annual_percentage_rate < 0:
            raise InvalidInputError("annual_percentage_rate", "must not be negative")
        return item
    if kind != KIND_SAVINGS_GOAL:
        raise InvalidInputError("kind", f"unknown goal kind {kind!r}")
    item = SavingsGoal(
        target_amount=_decimal(body, "target_amount"),
        amount_saved=_decimal(body, "amount_saved", 0),
        deadline=deadline,
        name=name,
    )
    if item.target_amount <= 0:
        raise InvalidInputError("target_amount", "must be greater than 0")
    if not 0 <= item.amount_saved <= item.target_amount:
        raise InvalidInputError("amount_saved", "must be between 0 and the target")
    return item


def _goal_view(stored: Dict[str, Any], today: date) -> Dict[str, Any]:
    goal = stored["goal"]
    return {
        "id": stored["id"],
        "created_at": stored["created_at"],
        "goal": to_jsonable(goal),
        "payoff": to_jsonable(payoff.payoff(goal, today)),
    }


@api.errorhandler(InvalidInputError)
def _invalid_input(exc: InvalidInputError):
    return jsonify({"error": exc.message, "field": exc.field}), 400


@api.errorhandler(ConvergenceError)
def _not_converged(exc: ConvergenceError):
    return jsonify({"error": str(exc), "months": exc.months}), 422


@api.errorhandler(Exception)
def _unexpected(exc: Exception):
    if isinstance(exc, HTTPException):
        return exc
    logger.exception("Unhandled error on %s", request.path)
    return jsonify({"error": str(exc)}), 500


@api.get("/health")
def health():
    return jsonify({"status": "ok", "service": "finance-calc"})


@api.post("/mortgage")
def mortgage_endpoint():
    body = _body()
    strict_mode = _is_strict(body)
    engine = strict.summarize_mortgage if strict_mode else mortgage.summarize_mortgage
    schedule, summary = engine(
        *(
            _mortgage_field(body, name, default, strict_mode)
            for name, default in (
                ("house_price", None),
                ("deposit_pct", 10),
                ("annual_rate_pct", None),
                ("term_years", None),
                ("monthly_overpayment", 0),
                ("fees", 0),
                ("stress_add_pct", 1),
                ("household_income", 0),
                ("income_multiple", 4.5),
            )
        )
    )
    return jsonify({"summary": to_jsonable(summary), "schedule": to_jsonable(schedule)})


@api.post("/retirement")
def retirement_endpoint():
    body = _body()
    if body.get("dob"):
        current_age = Decimal(age_on(_date(body["dob"], "dob"), _today(body)))
    else:
        current_age = _decimal(body, "current_age")
    inputs = RetirementInputs(
        current_age=current_age,
        retirement_age=_decimal(body, "retirement_age", 67),
        starting_pot=_decimal(body, "starting_pot", 0),
        monthly_contribution=_decimal(body, "monthly_contribution", 0),
        employer_match_pct=_decimal(body, "employer_match_pct", 0),
        nominal_return_pct=_decimal(body, "nominal_return_pct", 7),
        annual_fees_pct=_decimal(body, "annual_fees_pct", 0.5),
        inflation_rate_pct=_decimal(body, "inflation_rate_pct", 2.5),
        goal_amount=_decimal(body, "goal_amount"),
        monthly_income_need=_decimal(body, "monthly_income_need", 0),
    )
    engine = strict.project_retirement if _is_strict(body) else retirement.project_retirement
    return jsonify(to_jsonable(engine(inputs)))


@api.post("/salary")
def salary_endpoint():
    body = _body()
    inputs = SalaryInputs(
        gross_annual_salary=_decimal(body, "gross_annual_salary"),
        pension_contribution_pct=_decimal(body, "pension_contribution_pct", 8),
        work_hours_factor=_decimal(body, "work_hours_factor", 1),
        hours_per_week=_decimal(body, "hours_per_week", 37.5),
    )
    engine = strict.net_salary_for if _is_strict(body) else salary.net_salary_for
    return jsonify(to_jsonable(engine(inputs)))


@api.post("/budget")
def budget_endpoint():
    body = _body()
    categories = []
    for raw in body.get("categories") or []:
        if not isinstance(raw, dict):
            raise InvalidInputError("categories", "each category must be an object")
        categories.append(
            BudgetCategory(
                name=str(raw.get("name", "")),
                amount=_decimal(raw, "amount"),
                kind=str(raw.get("kind", "")),
            )
        )
    engine = strict.summarize_budget if _is_strict(body) else budget.summarize_budget
    return jsonify(to_jsonable(engine(_decimal(body, "monthly_income"), categories)))


@api.get("/goals")
def list_goals():
    user_token = _ensure_user_token()
    today = _today()
    return jsonify({"goals": [_goal_view(g, today) for g in _store().list_goals(user_token)]})


@api.post("/goals")
def add_goal():
    user_token = _ensure_user_token()
    body = _body()
    item = _goal_from_body(body)
    goal_id = uuid4().hex
    stored = _store().add_goal(user_token, goal_id, item)
    logger.info("Added %s %s for user %s", item.kind, goal_id, user_token)
    return jsonify(_goal_view(stored, _today(body))), 201


@api.post("/goals/<goal_id>/saved")
def update_saved(goal_id: str):
    user_token = _ensure_user_token()
    body = _body()
    stored = _store().update_saved(user_token, goal_id, _decimal(body, "amount_saved"))
    if stored is None:
        return jsonify({"error": "No such savings goal"}), 404
    return jsonify(_goal_view(stored, _today(body)))


@api.delete("/goals/<goal_id>")
def remove_goal(goal_id: str):
    user_token = _ensure_user_token()
    if not _store().remove_goal(user_token, goal_id):
        return jsonify({"error": "No such goal"}), 404
    return "", 204


@api.get("/budget/entries")
def list_entries():
    user_token = _ensure_user_token()
    today = _today()
    entries = _store().entries_for_month(user_token, today)
    income = request.args.get("monthly_income")
    payload: Dict[str, Any] = {"entries": to_jsonable(entries), "summary": None}
    if income:
        categories = budget.entries_to_categories(entries)
        payload["summary"] = to_jsonable(budget.summarize_budget(_decimal(request.args, "monthly_income"), categories))
    return jsonify(payload)


@api.post("/budget/entries")
def add_entry():
    user_token = _ensure_user_token()
    body = _body()
    name = str(body.get("name", "")).strip()
    if not name:
        raise InvalidInputError("name", "is required")
    kind = body.get("kind")
    if kind not in BUDGET_KINDS:
        raise InvalidInputError("kind", f"must be one of {', '.join(BUDGET_KINDS)}")
    amount = _decimal(body, "amount")
    if amount < 0:
        raise InvalidInputError("amount", "must not be negative")
    spent_on = _date(body.get("spent_on"), "spent_on") if body.get("spent_on") else _today(body)
    entry = BudgetEntry(name=name, amount=amount, kind=kind, spent_on=spent_on)
    entry_id = uuid4().hex
    _store().add_entry(user_token, entry_id, entry)
    return jsonify({"id": entry_id, "entry": to_jsonable(entry)}), 201


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """Build the Flask application.

    Configuration comes from the environment (``FLASK_SECRET_KEY``,
    ``FINANCE_DATABASE_URL``, ``FINANCE_MAX_GOALS``) and may be overridden by
    ``config``.
    """
    app = Flask(__name__)
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("FLASK_SECRET_KEY", "dev-secret-key"),
        DATABASE_URL=os.environ.get("FINANCE_DATABASE_URL"),
        MAX_GOALS_PER_USER=int(os.environ.get("FINANCE_MAX_GOALS", "20")),
    )
    if config:
        app.config.update(config)
    app.extensions["goal_store"] = create_store_from_env(
        app.config["DATABASE_URL"], max_per_user=app.config["MAX_GOALS_PER_USER"]
    )
    app.register_blueprint(api)
    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print("Starting finance calculator API...")
    create_app().run(host="0.0.0.0", port=8710, debug=True)
