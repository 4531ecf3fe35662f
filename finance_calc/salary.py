"""
UK net-salary calculation.

Income tax is charged in strict bands on salary after pension contributions:
20 % from the (possibly tapered) personal allowance up to £50,270, 40 % up to
£125,140 and 45 % above. National Insurance is a single flat 12 % above the
primary threshold.
"""

from __future__ import annotations

from decimal import Decimal

from . import constants as cfg
from .data_models import SalaryInputs, SalaryResult
from .utils import HUNDRED, TWELVE, ZERO, Number, clamp, percent_of, to_decimal


def _band_overlap(income: Decimal, lower: Decimal, upper: Decimal) -> Decimal:
    """Portion of ``income`` that falls between ``lower`` and ``upper``."""
    return max(ZERO, min(income, upper) - lower)


# ─── Personal Allowance ─────────────────────────────────────────────

def personal_allowance(income: Number) -> Decimal:
    """Compute personal allowance after the £100k taper.

    For every £2 of income above £100,000 the allowance drops by £1,
    reaching zero at £125,140.
    """
    excess = max(ZERO, to_decimal(income) - cfg.PA_TAPER_THRESHOLD)
    return max(ZERO, cfg.PERSONAL_ALLOWANCE - excess / 2)


# ─── Income Tax ──────────────────────────────────────────────────────

def income_tax(income: Number) -> Decimal:
    """Calculate annual income tax on ``income`` (salary after pension).

    Each band only taxes the slice of income inside it, so the total is
    continuous across band edges.
    """
    income = to_decimal(income)
    allowance = personal_allowance(income)

    tax = _band_overlap(income, allowance, cfg.BASIC_RATE_LIMIT) * cfg.BASIC_RATE
    tax += _band_overlap(income, cfg.BASIC_RATE_LIMIT, cfg.ADDITIONAL_RATE_THRESHOLD) * cfg.HIGHER_RATE
    tax += max(ZERO, income - cfg.ADDITIONAL_RATE_THRESHOLD) * cfg.ADDITIONAL_RATE
    return tax


# ─── National Insurance ─────────────────────────────────────────────

def national_insurance(income: Number) -> Decimal:
    """Flat-rate employee NI on earnings above the primary threshold."""
    return max(ZERO, to_decimal(income) - cfg.NI_THRESHOLD) * cfg.NI_RATE


def tax_band_label(income: Number) -> str:
    income = to_decimal(income)
    if income > cfg.ADDITIONAL_RATE_THRESHOLD:
        return cfg.BAND_VERY_HIGH
    if income > cfg.BASIC_RATE_LIMIT:
        return cfg.BAND_HIGHER
    return cfg.BAND_BASIC


# ─── Net salary ─────────────────────────────────────────────────────

def calculate_net_salary(
    gross_salary: Number,
    pension_contribution_pct: Number,
    hours_per_week: Number = cfg.DEFAULT_HOURS_PER_WEEK,
) -> SalaryResult:
    """Derive take-home pay from a gross annual salary.

    Parameters
    ----------
    gross_salary : Number
        Annual gross salary.
    pension_contribution_pct : Number
        Employee pension contribution as a percentage of gross, taken before
        tax (net pay arrangement).
    hours_per_week : Number
        Working hours used for the hourly figure, clamped to 10..80.

    Returns
    -------
    SalaryResult
        Deductions, net pay at every frequency, effective rate and band.
    """
    gross = to_decimal(gross_salary)
    pension = gross * to_decimal(pension_contribution_pct) / HUNDRED
    after_pension = gross - pension

    tax = income_tax(after_pension)
    ni = national_insurance(after_pension)
    net = max(ZERO, after_pension - tax - ni)

    weekly = net / cfg.WEEKS_PER_YEAR
    hours = clamp(to_decimal(hours_per_week), cfg.MIN_HOURS_PER_WEEK, cfg.MAX_HOURS_PER_WEEK)

    return SalaryResult(
        gross_salary=gross,
        pension_amount=pension,
        salary_after_pension=after_pension,
        personal_allowance=personal_allowance(after_pension),
        income_tax=tax,
        national_insurance=ni,
        net_annual=net,
        net_monthly=net / TWELVE,
        net_weekly=weekly,
        net_daily=weekly / cfg.WORKING_DAYS_PER_WEEK,
        net_hourly=weekly / hours,
        effective_tax_rate_pct=percent_of(tax + ni, gross),
        tax_band_label=tax_band_label(after_pension),
    )


def net_salary_for(inputs: SalaryInputs) -> SalaryResult:
    """Apply the part-time factor to the full-time salary, then calculate."""
    gross = to_decimal(inputs.gross_annual_salary) * to_decimal(inputs.work_hours_factor)
    return calculate_net_salary(gross, inputs.pension_contribution_pct, inputs.hours_per_week)
