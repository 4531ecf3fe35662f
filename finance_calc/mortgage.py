"""Mortgage amortization engine.

This module implements the fixed-rate annuity payment and the month-by-month
amortization loop used by the mortgage calculator. Monthly figures are folded
into one row per loan year. Overpayments are applied every month on top of
the scheduled payment and shorten the term. Results are returned as
``AmortizationRow`` records, with a ``MortgageSummary`` for the headline and
affordability figures.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, List, Tuple

from .constants import (
    DEFAULT_INCOME_MULTIPLE,
    DEFAULT_STRESS_ADD_PCT,
    EXTRA_MONTHS_BOUND,
    IDEAL_SALARY_MULTIPLE,
    MAX_DEPOSIT_PCT,
    MORTGAGE_INPUT_RANGES,
)
from .data_models import AmortizationResult, AmortizationRow, MortgageInputs, MortgageSummary
from .utils import HUNDRED, ONE, TWELVE, ZERO, Number, clamp, percent_of, round_money, to_decimal

logger = logging.getLogger(__name__)

# Balances below half a penny after a payment are swept into that payment.
_RESIDUAL = Decimal("0.005")


def annuity_payment(principal: Decimal, rate_per_month: Decimal, periods: Decimal) -> Decimal:
    """Return the annuity (equal installment) payment for a loan.

    The formula is:

        payment = P * i * (1 + i)^n / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the periodic interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``. A non-positive number of periods gives
    0, as does a rate at or below -100 % per period, which has no meaningful
    annuity.
    """
    if periods <= 0:
        return ZERO
    if rate_per_month == 0:
        return principal / periods
    if rate_per_month <= -1:
        logger.debug("Periodic rate %s has no annuity; returning 0", rate_per_month)
        return ZERO
    factor = (ONE + rate_per_month) ** periods
    if factor == ONE:
        # Rate too small to register at this precision.
        return principal / periods
    return principal * rate_per_month * factor / (factor - ONE)


def clamp_input(name: str, value: Number) -> Decimal:
    """Clamp a mortgage form field (``house_price``, ``term_years``, ...) to its allowed range."""
    low, high = MORTGAGE_INPUT_RANGES[name]
    return clamp(to_decimal(value), low, high)


def monthly_payment(principal: Number, annual_rate_pct: Number, term_years: Number) -> Decimal:
    """Scheduled monthly payment for a fixed-rate repayment mortgage."""
    rate_per_month = to_decimal(annual_rate_pct) / HUNDRED / TWELVE
    periods = to_decimal(term_years) * TWELVE
    return annuity_payment(to_decimal(principal), rate_per_month, periods)


def amortize(
    principal: Number,
    annual_rate_pct: Number,
    term_years: Number,
    monthly_overpayment: Number = 0,
) -> AmortizationResult:
    """Run the amortization loop and report how it ended.

    Each month interest accrues on the outstanding balance and the rest of
    the payment (scheduled payment plus overpayment) reduces the balance. The
    principal part is capped at the balance so the final month pays off
    exactly what is left. A balance under half a penny left after a payment
    is added to that payment, so Decimal round-off cannot leave an extra
    month of dust at the end of a term. The loop stops when the balance reaches zero, after
    ``n + 600`` months, or straight after a month in which the payment did
    not exceed the interest.

    Principal and interest are accumulated per loan year at full precision
    and only rounded to pennies in the returned rows.
    """
    balance = to_decimal(principal)
    rate_per_month = to_decimal(annual_rate_pct) / HUNDRED / TWELVE
    periods = to_decimal(term_years) * TWELVE
    base_payment = annuity_payment(balance, rate_per_month, periods)
    payment = base_payment + to_decimal(monthly_overpayment)

    totals: Dict[int, List[Decimal]] = {}
    month = 0
    limit = periods + EXTRA_MONTHS_BOUND
    while balance > 0 and month < limit:
        month += 1
        year = (month + 11) // 12
        interest = balance * rate_per_month
        principal_part = payment - interest
        if principal_part > balance:
            principal_part = balance
        balance = max(ZERO, balance - principal_part)
        if 0 < balance < _RESIDUAL:
            principal_part += balance
            balance = ZERO

        bucket = totals.setdefault(year, [ZERO, ZERO])
        bucket[0] += principal_part
        bucket[1] += interest

        if payment <= interest and rate_per_month > 0:
            logger.debug(
                "Payment %s does not cover interest %s in month %d; stopping", payment, interest, month
            )
            break

    converged = balance <= 0
    if not converged:
        logger.warning(
            "Amortization stopped after %d months with %.2f outstanding", month, balance
        )

    rows = [
        AmortizationRow(year=year, principal_paid=round_money(p), interest_paid=round_money(i))
        for year, (p, i) in sorted(totals.items())
    ]
    return AmortizationResult(rows=rows, months_elapsed=month, final_balance=balance, converged=converged)


def build_amortization_schedule(
    principal: Number,
    annual_rate_pct: Number,
    term_years: Number,
    monthly_overpayment: Number = 0,
) -> List[AmortizationRow]:
    """Return the yearly principal/interest breakdown of a loan."""
    return amortize(principal, annual_rate_pct, term_years, monthly_overpayment).rows


def schedule_for(inputs: MortgageInputs) -> List[AmortizationRow]:
    return build_amortization_schedule(
        inputs.principal, inputs.annual_rate_pct, inputs.term_years, inputs.monthly_overpayment
    )


def schedule_totals(rows: List[AmortizationRow]) -> Tuple[Decimal, Decimal]:
    """Return ``(total_payments, total_interest)`` summed over a schedule."""
    total_interest = sum((r.interest_paid for r in rows), ZERO)
    total_principal = sum((r.principal_paid for r in rows), ZERO)
    return total_principal + total_interest, total_interest


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
    """Compute the schedule and headline figures for a house purchase.

    Parameters
    ----------
    house_price: Number
        Purchase price of the property.
    deposit_pct: Number
        Deposit as a percentage of the price, clamped to 0..95.
    annual_rate_pct, term_years, monthly_overpayment: Number
        Loan terms, as for ``build_amortization_schedule``.
    fees: Number
        Arrangement and legal fees. They reduce the loan an income multiple
        can support.
    stress_add_pct: Number
        Percentage points added to the rate for the stress-test payment.
    household_income: Number
        Gross annual household income. Zero disables the affordability ratios.
    income_multiple: Number
        Lender income multiple used for the maximum loan.

    Returns
    -------
    schedule: List[AmortizationRow]
        Yearly principal and interest with the overpayment applied.
    summary: MortgageSummary
        Loan, payment, interest and affordability figures. When an
        overpayment is given the summary also compares against the same loan
        without it.
    """
    price = to_decimal(house_price)
    deposit_pct_clamped = clamp(to_decimal(deposit_pct), ZERO, MAX_DEPOSIT_PCT)
    deposit_amount = price * deposit_pct_clamped / HUNDRED
    loan_amount = max(ZERO, price - deposit_amount)
    ltv = percent_of(loan_amount, price) if loan_amount > 0 else ZERO

    rate = to_decimal(annual_rate_pct)
    term = to_decimal(term_years)
    overpay = to_decimal(monthly_overpayment)
    fees_value = to_decimal(fees)
    stress_rate = rate + to_decimal(stress_add_pct)

    payment = monthly_payment(loan_amount, rate, term)
    stress_payment = monthly_payment(loan_amount, stress_rate, term)
    monthly_total = payment + overpay

    result = amortize(loan_amount, rate, term, overpay)
    total_payments, total_interest = schedule_totals(result.rows)

    if overpay != 0:
        baseline = amortize(loan_amount, rate, term, ZERO)
        _, baseline_interest = schedule_totals(baseline.rows)
        interest_saved = baseline_interest - total_interest
        months_saved = baseline.months_elapsed - result.months_elapsed
    else:
        baseline_interest = total_interest
        interest_saved = ZERO
        months_saved = 0

    income = to_decimal(household_income)
    income_monthly = income / TWELVE if income > 0 else ZERO
    payment_to_income = percent_of(monthly_total, income_monthly)
    max_loan = max(ZERO, income * to_decimal(income_multiple) - fees_value)

    summary = MortgageSummary(
        house_price=price,
        deposit_pct=deposit_pct_clamped,
        deposit_amount=deposit_amount,
        loan_amount=loan_amount,
        ltv_pct=ltv,
        fees=fees_value,
        monthly_payment=payment,
        monthly_overpayment=overpay,
        monthly_total=monthly_total,
        stress_rate_pct=stress_rate,
        stress_monthly_payment=stress_payment,
        total_payments=total_payments,
        total_interest=total_interest,
        months_to_payoff=result.months_elapsed,
        converged=result.converged,
        baseline_total_interest=baseline_interest,
        interest_saved=interest_saved,
        months_saved=months_saved,
        household_income=income,
        payment_to_income_pct=payment_to_income,
        max_loan_by_income_multiple=max_loan,
        max_price_by_income_multiple=max_loan + deposit_amount,
        ideal_household_salary=payment * TWELVE * IDEAL_SALARY_MULTIPLE,
    )
    return result.rows, summary
