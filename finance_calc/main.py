"""Command‑line interface for the finance calculators.

This module uses the ``click`` library to implement a multi‑command
interface: one command per calculator (mortgage, retirement, salary, savings
goal, debt, budget). Results are printed to the terminal or exported to
JSON (and CSV for the mortgage schedule). ``--strict`` switches a command to
the validating entry points, so bad input is reported instead of clamped.
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import click

from . import budget as budget_engine
from . import mortgage as mortgage_engine
from . import payoff as payoff_engine
from . import retirement as retirement_engine
from . import salary as salary_engine
from . import strict as strict_engine
from .data_models import BUDGET_KINDS, AmortizationRow, BudgetCategory, Debt, RetirementInputs, SalaryInputs, SavingsGoal
from .errors import ConvergenceError, InvalidInputError
from .formatter import (
    print_budget,
    print_mortgage_summary,
    print_payoff,
    print_retirement,
    print_salary,
    print_schedule,
    to_jsonable,
)
from .periods import age_on, parse_date
from .utils import decimal_from_str

logger = logging.getLogger(__name__)


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000"), thousands separators ("1,500") and
    shorthand with ``k``/``m`` suffixes (e.g., "500k" meaning 500_000).
    """
    value = value.strip().lower().replace(",", "")
    factor = Decimal("1")
    if value.endswith("k"):
        factor = Decimal("1000")
        value = value[:-1]
    elif value.endswith("m"):
        factor = Decimal("1000000")
        value = value[:-1]
    try:
        amount = decimal_from_str(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")
    if not amount.is_finite():
        raise click.BadParameter(f"Amount must be a finite number: {value}")
    return amount


def parse_category_strings(values: Tuple[str, ...]) -> List[BudgetCategory]:
    categories: List[BudgetCategory] = []
    for item in values:
        parts = item.rsplit(":", 2)
        if len(parts) != 3:
            raise click.BadParameter(f"Category must be in NAME:AMOUNT:KIND format; got {item}")
        name, amount_str, kind = parts
        kind = kind.lower()
        if kind not in BUDGET_KINDS:
            raise click.BadParameter(f"Category kind must be one of {', '.join(BUDGET_KINDS)}; got {kind}")
        categories.append(BudgetCategory(name=name.strip(), amount=parse_amount(amount_str), kind=kind))
    return categories


def _amount_option(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[Decimal]:
    return parse_amount(value) if value is not None else None


def _date_option(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def _run(func: Callable[..., Any], *args: Any) -> Any:
    """Call an engine, turning strict-mode errors into click errors."""
    try:
        return func(*args)
    except InvalidInputError as exc:
        raise click.BadParameter(exc.message, param_hint=exc.field)
    except ConvergenceError as exc:
        raise click.ClickException(str(exc))


def export_to_json(path: Path, payload: Any) -> None:
    """Export a result (or several) to a JSON file."""
    with path.open("w", encoding="utf-8") as f:
        json.dump(to_jsonable(payload), f, indent=2)


def export_to_csv(path: Path, schedule: List[AmortizationRow]) -> None:
    """Export a yearly amortization schedule to a CSV file."""
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["Year", "Principal", "Interest"])
        for row in schedule:
            writer.writerow([row.year, float(row.principal_paid), float(row.interest_paid)])


def _export(output: str, payload: Any) -> None:
    path = Path(output)
    if path.suffix.lower() != ".json":
        raise click.BadParameter("Export must use .json extension", param_hint="--output")
    export_to_json(path, payload)
    click.echo(f"Result exported to {path}")


output_option = click.option("--output", "-o", "output", type=str, help="Output file path (.json)")
strict_option = click.option("--strict", is_flag=True, help="Reject out-of-range input instead of clamping it")
today_option = click.option(
    "--today", "today", callback=_date_option, help="Reference date (YYYY-MM-DD); defaults to the current date"
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output")
def cli(verbose: bool) -> None:
    """Personal finance calculators: mortgage, retirement, salary, goals, budget."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--price", "-p", "price", required=True, callback=_amount_option, help="House price")
@click.option("--deposit-pct", "-d", "deposit_pct", type=float, default=10.0, show_default=True, help="Deposit (percent of price)")
@click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)")
@click.option("--years", "-y", "years", required=True, type=float, help="Loan term in years")
@click.option("--overpayment", "overpayment", default="0", callback=_amount_option, help="Monthly overpayment")
@click.option("--fees", "fees", default="0", callback=_amount_option, help="Arrangement and legal fees")
@click.option("--stress", "stress", type=float, default=1.0, show_default=True, help="Stress test rate add-on (percent)")
@click.option("--income", "income", default="0", callback=_amount_option, help="Household gross annual income")
@click.option("--income-multiple", "income_multiple", type=float, default=4.5, show_default=True, help="Lender income multiple")
@click.option("--output", "-o", "output", type=str, help="Output file path (.json or .csv)")
@strict_option
def mortgage(
    price: Decimal,
    deposit_pct: float,
    rate: float,
    years: float,
    overpayment: Decimal,
    fees: Decimal,
    stress: float,
    income: Decimal,
    income_multiple: float,
    output: Optional[str],
    strict: bool,
) -> None:
    """Compute a repayment mortgage and its yearly amortization schedule.

    Without ``--strict`` the price, term, overpayment, fees, income and
    income multiple are clamped to the ranges the calculator supports
    (e.g. a term of 1 to 40 years).
    """
    if not strict:
        price, years, overpayment, fees, income, income_multiple = (
            mortgage_engine.clamp_input(name, value)
            for name, value in (
                ("house_price", price),
                ("term_years", years),
                ("monthly_overpayment", overpayment),
                ("fees", fees),
                ("household_income", income),
                ("income_multiple", income_multiple),
            )
        )
    engine = strict_engine.summarize_mortgage if strict else mortgage_engine.summarize_mortgage
    schedule, summary = _run(
        engine, price, deposit_pct, rate, years, overpayment, fees, stress, income, income_multiple
    )
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, {"summary": summary, "schedule": schedule})
            click.echo(f"Schedule exported to {path}")
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, schedule)
            click.echo(f"Schedule exported to {path}")
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
    else:
        print_mortgage_summary(summary)
        print_schedule(schedule)


@cli.command()
@click.option("--current-age", "current_age", type=float, default=30, show_default=True, help="Current age")
@click.option("--dob", "dob", callback=_date_option, help="Date of birth (YYYY-MM-DD); overrides --current-age")
@click.option("--retirement-age", "retirement_age", type=float, default=67, show_default=True, help="Planned retirement age")
@click.option("--pot", "pot", default="20000", callback=_amount_option, show_default=True, help="Current pension pot")
@click.option("--contribution", "contribution", default="750", callback=_amount_option, show_default=True, help="Own monthly contribution")
@click.option("--match", "match", type=float, default=3.0, show_default=True, help="Employer match (percent of own contribution)")
@click.option("--return", "nominal_return", type=float, default=7.0, show_default=True, help="Expected nominal annual return (percent)")
@click.option("--fees", "fees", type=float, default=0.5, show_default=True, help="Annual fees (percent)")
@click.option("--inflation", "inflation", type=float, default=2.5, show_default=True, help="Inflation rate (percent)")
@click.option("--goal", "goal", default="500k", callback=_amount_option, show_default=True, help="Target pot in today's money")
@click.option("--income-need", "income_need", default="2000", callback=_amount_option, show_default=True, help="Monthly retirement income need in today's money")
@today_option
@output_option
@strict_option
def retirement(
    current_age: float,
    dob: Optional[date],
    retirement_age: float,
    pot: Decimal,
    contribution: Decimal,
    match: float,
    nominal_return: float,
    fees: float,
    inflation: float,
    goal: Decimal,
    income_need: Decimal,
    today: Optional[date],
    output: Optional[str],
    strict: bool,
) -> None:
    """Project a pension pot to retirement and compare it with a goal."""
    if dob is not None:
        current_age = age_on(dob, today or date.today())
        logger.debug("Current age %s derived from date of birth %s", current_age, dob)
    inputs = RetirementInputs(
        current_age=Decimal(str(current_age)),
        retirement_age=Decimal(str(retirement_age)),
        starting_pot=pot,
        monthly_contribution=contribution,
        employer_match_pct=Decimal(str(match)),
        nominal_return_pct=Decimal(str(nominal_return)),
        annual_fees_pct=Decimal(str(fees)),
        inflation_rate_pct=Decimal(str(inflation)),
        goal_amount=goal,
        monthly_income_need=income_need,
    )
    engine = strict_engine.project_retirement if strict else retirement_engine.project_retirement
    result = _run(engine, inputs)
    if output:
        _export(output, result)
    else:
        print_retirement(result)


@cli.command()
@click.option("--gross", "-g", "gross", required=True, callback=_amount_option, help="Full-time gross annual salary")
@click.option("--pension", "pension", type=float, default=8.0, show_default=True, help="Pension contribution (percent of gross)")
@click.option("--hours-factor", "hours_factor", type=float, default=1.0, show_default=True, help="Part-time factor, e.g. 0.8")
@click.option("--hours", "hours", type=float, default=37.5, show_default=True, help="Hours worked per week")
@output_option
@strict_option
def salary(gross: Decimal, pension: float, hours_factor: float, hours: float, output: Optional[str], strict: bool) -> None:
    """Estimate UK take-home pay after tax, NI and pension."""
    inputs = SalaryInputs(
        gross_annual_salary=gross,
        pension_contribution_pct=Decimal(str(pension)),
        work_hours_factor=Decimal(str(hours_factor)),
        hours_per_week=Decimal(str(hours)),
    )
    engine = strict_engine.net_salary_for if strict else salary_engine.net_salary_for
    result = _run(engine, inputs)
    if output:
        _export(output, result)
    else:
        print_salary(result)


@cli.command()
@click.option("--target", "-t", "target", required=True, callback=_amount_option, help="Target amount")
@click.option("--saved", "-s", "saved", default="0", callback=_amount_option, help="Amount saved so far")
@click.option("--deadline", "deadline", required=True, callback=_date_option, help="Deadline (YYYY-MM-DD)")
@today_option
@output_option
@strict_option
def goal(target: Decimal, saved: Decimal, deadline: date, today: Optional[date], output: Optional[str], strict: bool) -> None:
    """Monthly saving needed to hit a savings goal by its deadline."""
    item = SavingsGoal(target_amount=target, amount_saved=saved, deadline=deadline)
    engine = strict_engine.savings_goal_payoff if strict else payoff_engine.savings_goal_payoff
    result = _run(engine, item, today or date.today())
    if output:
        _export(output, result)
    else:
        print_payoff(result)


@cli.command()
@click.option("--balance", "-b", "balance", required=True, callback=_amount_option, help="Outstanding balance")
@click.option("--apr", "apr", required=True, type=float, help="Annual percentage rate")
@click.option("--deadline", "deadline", required=True, callback=_date_option, help="Clear-by date (YYYY-MM-DD)")
@today_option
@output_option
@strict_option
def debt(balance: Decimal, apr: float, deadline: date, today: Optional[date], output: Optional[str], strict: bool) -> None:
    """Monthly repayment needed to clear a debt by its deadline."""
    item = Debt(balance=balance, annual_percentage_rate=Decimal(str(apr)), deadline=deadline)
    engine = strict_engine.debt_payoff if strict else payoff_engine.debt_payoff
    result = _run(engine, item, today or date.today())
    if output:
        _export(output, result)
    else:
        print_payoff(result)


@cli.command()
@click.option("--income", "-i", "income", required=True, callback=_amount_option, help="Monthly take-home income")
@click.option("--category", "category", multiple=True, help="Spending line in NAME:AMOUNT:KIND format")
@output_option
@strict_option
def budget(income: Decimal, category: Tuple[str, ...], output: Optional[str], strict: bool) -> None:
    """Check spending against a 50/30/20 split.

    Kinds are essentials (50%), lifestyle (30%) and priorities (20%), e.g.:

        finance-calc budget -i 2500 --category Rent:700:essentials --category Gym:40:lifestyle
    """
    categories = parse_category_strings(category)
    engine = strict_engine.summarize_budget if strict else budget_engine.summarize_budget
    summary = _run(engine, income, categories)
    if output:
        _export(output, summary)
    else:
        print_budget(summary)


if __name__ == "__main__":
    cli()
