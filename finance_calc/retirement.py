"""Retirement projection engine.

The pot grows monthly at the nominal return less fees, with contributions
(including the employer's share) added every month. The final nominal pot is
then deflated back to today's money so it can be compared against a goal and
an income need that are inflated forward over the same horizon.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List

from .constants import SUSTAINABLE_WITHDRAWAL_RATE
from .data_models import ProjectionPoint, RetirementInputs, RetirementResult
from .utils import HUNDRED, ONE, TWELVE, ZERO, Number, clamp, percent_of, round_whole, to_decimal

logger = logging.getLogger(__name__)


def real_return_pct(nominal_return_pct: Number, inflation_rate_pct: Number) -> Decimal:
    """Inflation-adjusted return in percent, ``(1 + n) / (1 + i) - 1``."""
    denominator = ONE + to_decimal(inflation_rate_pct) / HUNDRED
    if denominator == 0:
        logger.debug("Inflation of -100%% has no real return; returning 0")
        return ZERO
    return ((ONE + to_decimal(nominal_return_pct) / HUNDRED) / denominator - ONE) * HUNDRED


def total_monthly_contribution(monthly_contribution: Number, employer_match_pct: Number) -> Decimal:
    """Own contribution grossed up by the employer match, never negative.

    The match is a flat percentage on top of the member's contribution; no
    matching cap is modelled.
    """
    total = to_decimal(monthly_contribution) * (ONE + to_decimal(employer_match_pct) / HUNDRED)
    return max(ZERO, total)


def project_pot(
    starting_pot: Number,
    total_monthly_contribution: Number,
    nominal_return_pct: Number,
    annual_fees_pct: Number,
    months: int,
) -> List[ProjectionPoint]:
    """Simulate the pot month by month and sample it once a year.

    Month 0 is the starting pot with no contribution. From month 1 the pot
    grows by the monthly net rate (return less fees, floored at -100 %) and
    then receives the contribution. A point is recorded every 12 months and
    on the final month, rounded to whole units and floored at 0.
    """
    monthly_gross = to_decimal(nominal_return_pct) / HUNDRED / TWELVE
    monthly_fees = to_decimal(annual_fees_pct) / HUNDRED / TWELVE
    monthly_net = max(-ONE, monthly_gross - monthly_fees)
    contribution = to_decimal(total_monthly_contribution)

    pot = to_decimal(starting_pot)
    points: List[ProjectionPoint] = []
    for i in range(months + 1):
        if i > 0:
            pot = pot * (ONE + monthly_net) + contribution
        if i % 12 == 0 or i == months:
            points.append(ProjectionPoint(year_label=f"{i // 12}y", pot_value=max(ZERO, round_whole(pot))))
    return points


def project_retirement(inputs: RetirementInputs) -> RetirementResult:
    """Project the pot to retirement and compare it with the goal.

    The horizon is the whole number of months between the current and the
    retirement age (zero if already retired). Goal, income need and the
    deflation of the final pot all use ``(1 + inflation) ** years``. The
    sustainable income assumes a 3.5 % annual withdrawal from the real pot;
    a negative gap is a shortfall.
    """
    years = max(ZERO, to_decimal(inputs.retirement_age) - to_decimal(inputs.current_age))
    months = int(years * TWELVE)

    contribution = total_monthly_contribution(inputs.monthly_contribution, inputs.employer_match_pct)
    projection = project_pot(
        inputs.starting_pot,
        contribution,
        inputs.nominal_return_pct,
        inputs.annual_fees_pct,
        months,
    )
    pot_nominal = projection[-1].pot_value if projection else to_decimal(inputs.starting_pot)

    growth = ONE + to_decimal(inputs.inflation_rate_pct) / HUNDRED
    if growth > 0:
        inflation_factor = growth ** years
    else:
        logger.debug("Inflation rate %s wipes out all value; real figures set to 0", inputs.inflation_rate_pct)
        inflation_factor = ZERO

    adjusted_goal = to_decimal(inputs.goal_amount) * inflation_factor
    adjusted_need = to_decimal(inputs.monthly_income_need) * inflation_factor
    pot_real = pot_nominal / inflation_factor if inflation_factor > 0 else ZERO

    progress = clamp(percent_of(pot_real, adjusted_goal), ZERO, HUNDRED)

    sustainable_annual = pot_real * SUSTAINABLE_WITHDRAWAL_RATE
    sustainable_monthly = sustainable_annual / TWELVE

    return RetirementResult(
        years_to_grow=years,
        months_to_grow=months,
        total_monthly_contribution=contribution,
        real_return_pct=real_return_pct(inputs.nominal_return_pct, inputs.inflation_rate_pct),
        projection=projection,
        projected_pot_nominal=pot_nominal,
        projected_pot_real=pot_real,
        inflation_adjusted_goal=adjusted_goal,
        inflation_adjusted_monthly_need=adjusted_need,
        progress_pct=progress,
        sustainable_annual_real=sustainable_annual,
        sustainable_monthly_real=sustainable_monthly,
        income_gap_monthly=sustainable_monthly - adjusted_need,
    )
