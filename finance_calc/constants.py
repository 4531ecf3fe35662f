"""
Fixed constants used by the calculators.

All monetary values in GBP. Income tax thresholds are the England & Wales
figures frozen since 2021/22.
"""

from decimal import Decimal

# ── Income Tax ───────────────────────────────────────────────────────
PERSONAL_ALLOWANCE = Decimal("12570")
PA_TAPER_THRESHOLD = Decimal("100000")   # PA reduces £1 per £2 above this
BASIC_RATE_LIMIT = Decimal("50270")
ADDITIONAL_RATE_THRESHOLD = Decimal("125140")

BASIC_RATE = Decimal("0.20")
HIGHER_RATE = Decimal("0.40")
ADDITIONAL_RATE = Decimal("0.45")

# ── National Insurance ───────────────────────────────────────────────
# Single flat band; no upper earnings limit is modelled.
NI_THRESHOLD = Decimal("12570")
NI_RATE = Decimal("0.12")

# ── Pay frequencies ──────────────────────────────────────────────────
WEEKS_PER_YEAR = Decimal("52")
WORKING_DAYS_PER_WEEK = Decimal("5")
MIN_HOURS_PER_WEEK = Decimal("10")
MAX_HOURS_PER_WEEK = Decimal("80")
DEFAULT_HOURS_PER_WEEK = Decimal("37.5")

BAND_BASIC = "Basic Rate Payer"
BAND_HIGHER = "Higher Rate Payer"
BAND_VERY_HIGH = "Very High Earner"

# ── Mortgage ─────────────────────────────────────────────────────────
EXTRA_MONTHS_BOUND = 600          # months allowed past the term before giving up
MAX_DEPOSIT_PCT = Decimal("95")
IDEAL_SALARY_MULTIPLE = Decimal("3.6")   # annual payments x 3.6 rule of thumb
DEFAULT_STRESS_ADD_PCT = Decimal("1.0")
DEFAULT_INCOME_MULTIPLE = Decimal("4.5")
MAX_TERM_YEARS = Decimal("40")

# Ranges the mortgage form accepts; the CLI and API clamp lenient input to them.
MORTGAGE_INPUT_RANGES = {
    "house_price": (Decimal("0"), Decimal("10000000")),
    "term_years": (Decimal("1"), MAX_TERM_YEARS),
    "monthly_overpayment": (Decimal("0"), Decimal("100000")),
    "fees": (Decimal("0"), Decimal("100000")),
    "household_income": (Decimal("0"), Decimal("5000000")),
    "income_multiple": (Decimal("1"), Decimal("10")),
}

# ── Retirement ───────────────────────────────────────────────────────
SUSTAINABLE_WITHDRAWAL_RATE = Decimal("0.035")

# ── Budget (50/30/20) ────────────────────────────────────────────────
BUDGET_ALLOCATION = {
    "essentials": Decimal("0.50"),
    "lifestyle": Decimal("0.30"),
    "priorities": Decimal("0.20"),
}
