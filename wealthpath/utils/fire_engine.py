from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Optional, Tuple

from wealthpath.core.config import SETTINGS
from wealthpath.utils.logging import get_logger
from wealthpath.utils.projection_models import (
    BaristaFireResult, CoastFireResult, FireCalculationResult, FireLevel,
    MaxSpendResult, YearsToFire,
)

logger = get_logger("fire_engine")

_ZERO_RATE = 1e-9

FIRE_LEVELS: Tuple[FireLevel, ...] = (
    FireLevel(
        name="Lean FIRE",
        description="Frugal lifestyle with annual expenses under $40k",
        min_annual_expenses=0,
        max_annual_expenses=40000,
        withdrawal_rate=0.035,
        color="#fbbf24",
    ),
    FireLevel(
        name="Regular FIRE",
        description="Comfortable middle-class lifestyle ($40-60k/year)",
        min_annual_expenses=40000,
        max_annual_expenses=60000,
        withdrawal_rate=0.035,
        color="#10b981",
    ),
    FireLevel(
        name="Chubby FIRE",
        description="Upper-middle-class lifestyle ($60-100k/year)",
        min_annual_expenses=60000,
        max_annual_expenses=100000,
        withdrawal_rate=0.035,
        color="#6366f1",
    ),
    FireLevel(
        name="Fat FIRE",
        description="Affluent lifestyle with $100k+ annual expenses",
        min_annual_expenses=100000,
        max_annual_expenses=math.inf,
        withdrawal_rate=0.025,
        color="#f59e0b",
    ),
)

BARISTA_WITHDRAWAL_RATE = 0.03
COAST_TARGET_AGE = 65


def calculate_fire_number(annual_expenses: float, withdrawal_rate: Optional[float] = None) -> float:
    rate = SETTINGS.default_withdrawal_rate if withdrawal_rate is None else withdrawal_rate
    if rate <= 0:
        return math.inf if annual_expenses > 0 else 0.0
    return annual_expenses / rate


def get_fire_level(annual_expenses: float) -> FireLevel:
    for level in FIRE_LEVELS:
        if level.min_annual_expenses <= annual_expenses < level.max_annual_expenses:
            return level
    return FIRE_LEVELS[-1]


def solve_years_to_fire(
    current_net_worth: float,
    annual_savings: float,
    fire_number: float,
    expected_return: Optional[float] = None,
) -> YearsToFire:
    """
    Closed-form solution of  B(1+r)^t + S((1+r)^t - 1)/r = T  for t.

    Rearranged: (1+r)^t = (T + S/r) / (B + S/r). The target is unreachable
    when that ratio is not positive or the solved t is negative (wealth drifts
    away from, or settles below, the target).
    """
    r = SETTINGS.default_annual_return if expected_return is None else expected_return
    b, s, t = current_net_worth, annual_savings, fire_number

    if b >= t:
        return YearsToFire.finite(0.0)
    if not math.isfinite(t) or r <= -1:
        return YearsToFire.unreachable()

    if abs(r) < _ZERO_RATE:
        if s <= 0:
            return YearsToFire.unreachable()
        return YearsToFire.finite((t - b) / s)

    k = s / r
    den = b + k
    if den == 0:
        return YearsToFire.unreachable()
    ratio = (t + k) / den
    if ratio <= 0:
        return YearsToFire.unreachable()

    years = math.log(ratio) / math.log1p(r)
    if not math.isfinite(years) or years < 0:
        return YearsToFire.unreachable()
    return YearsToFire.finite(years)


def calculate_years_to_fire(
    current_net_worth: float,
    annual_savings: float,
    fire_number: float,
    expected_return: Optional[float] = None,
) -> float:
    """Years to reach ``fire_number``; ``math.inf`` when it can never be reached."""
    out = solve_years_to_fire(current_net_worth, annual_savings, fire_number, expected_return)
    if not out.reachable:
        logger.debug(
            "fire_unreachable net_worth=%.2f savings=%.2f target=%.2f",
            current_net_worth, annual_savings, fire_number,
        )
    return out.as_float()


def calculate_required_contribution(
    current_net_worth: float,
    fire_number: float,
    years: float,
    annual_return: Optional[float] = None,
) -> float:
    """Monthly contribution needed to hit ``fire_number`` in ``years``."""
    r = SETTINGS.default_annual_return if annual_return is None else annual_return
    if years <= 0 or current_net_worth >= fire_number:
        return 0.0

    mr = r / 12
    months = years * 12

    fv_current = current_net_worth * (1 + mr) ** months
    remaining = fire_number - fv_current
    if remaining <= 0:
        return 0.0

    if abs(mr) < _ZERO_RATE:
        return max(0.0, remaining / months)
    return max(0.0, remaining * mr / ((1 + mr) ** months - 1))


def calculate_coast_fire(
    current_age: int,
    current_net_worth: float,
    annual_savings: float,
    fire_number: float,
    annual_return: Optional[float] = None,
) -> CoastFireResult:
    r = SETTINGS.default_annual_return if annual_return is None else annual_return
    years_until_65 = max(0, COAST_TARGET_AGE - current_age)

    if years_until_65 == 0:
        return CoastFireResult(
            coast_number=fire_number,
            years_to_coast=YearsToFire.finite(0.0),
            is_coast_fire=current_net_worth >= fire_number,
            monthly_contribution_needed=0.0,
        )

    coast_number = fire_number / (1 + r) ** years_until_65
    is_coast = current_net_worth >= coast_number

    if is_coast:
        years_to_coast = YearsToFire.finite(0.0)
        monthly = 0.0
    else:
        years_to_coast = solve_years_to_fire(current_net_worth, annual_savings, coast_number, r)
        monthly = calculate_required_contribution(current_net_worth, coast_number, 1, r)

    return CoastFireResult(
        coast_number=coast_number,
        years_to_coast=years_to_coast,
        is_coast_fire=is_coast,
        monthly_contribution_needed=monthly,
    )


def calculate_barista_fire(
    current_net_worth: float,
    annual_savings: float,
    annual_expenses: float,
    part_time_income: float = 20000,
    annual_return: Optional[float] = None,
) -> BaristaFireResult:
    """Portfolio covers expenses net of part-time income at a 3% withdrawal rate."""
    r = SETTINGS.default_annual_return if annual_return is None else annual_return
    covered = max(0.0, annual_expenses - part_time_income)
    barista_number = covered / BARISTA_WITHDRAWAL_RATE

    is_barista = current_net_worth >= barista_number
    years = (
        YearsToFire.finite(0.0) if is_barista
        else solve_years_to_fire(current_net_worth, annual_savings, barista_number, r)
    )

    return BaristaFireResult(
        barista_number=barista_number,
        years_to_barista_fire=years,
        is_barista_fire=is_barista,
        part_time_income_needed=max(0.0, annual_expenses - current_net_worth * BARISTA_WITHDRAWAL_RATE),
    )


def calculate_fire(
    current_net_worth: float,
    current_age: int,
    annual_income: float,
    annual_expenses: float,
    annual_return: Optional[float] = None,
    is_couple: bool = False,
    couple_multiplier: float = 1.7,
    part_time_income: float = 0,
    *,
    as_of: Optional[date] = None,
) -> FireCalculationResult:
    r = SETTINGS.default_annual_return if annual_return is None else annual_return
    today = as_of or date.today()

    expenses = annual_expenses * couple_multiplier if is_couple else annual_expenses
    level = get_fire_level(expenses)
    fire_number = calculate_fire_number(expenses, level.withdrawal_rate)

    if fire_number > 0:
        progress = min(100.0, current_net_worth / fire_number * 100)
    else:
        progress = 100.0

    annual_savings = max(0.0, annual_income - expenses)
    years = solve_years_to_fire(current_net_worth, annual_savings, fire_number, r)

    if years.reachable:
        fire_date = today + timedelta(days=round(years.years * 365.25))
        horizon = years.years
    else:
        # Unreachable at current pace: quote the contribution needed within the display horizon.
        fire_date = None
        horizon = float(SETTINGS.years_cap)

    return FireCalculationResult(
        fire_number=fire_number,
        current_progress=progress,
        years_to_fire=years,
        fire_date=fire_date,
        monthly_contribution_needed=calculate_required_contribution(current_net_worth, fire_number, horizon, r),
        level=level,
        coast_fire=calculate_coast_fire(current_age, current_net_worth, annual_savings, fire_number, r),
        barista_fire=calculate_barista_fire(current_net_worth, annual_savings, expenses, part_time_income, r),
    )


def calculate_max_spend_for_date(
    current_net_worth: float,
    current_age: int,
    annual_income: float,
    target_fire_year: int,
    annual_return: Optional[float] = None,
    withdrawal_rate: Optional[float] = None,
    is_couple: bool = False,
    couple_multiplier: float = 1.7,
    *,
    as_of: Optional[date] = None,
) -> MaxSpendResult:
    """Largest annual spend that still reaches FIRE by ``target_fire_year``."""
    r = SETTINGS.default_annual_return if annual_return is None else annual_return
    wr = SETTINGS.default_withdrawal_rate if withdrawal_rate is None else withdrawal_rate
    today = as_of or date.today()
    years_available = max(0, target_fire_year - today.year)

    if years_available == 0:
        max_expenses = current_net_worth * wr
        adjusted = max_expenses / couple_multiplier if is_couple else max_expenses
        return MaxSpendResult(
            max_monthly_spend=adjusted / 12,
            max_annual_expenses=adjusted,
            fire_number=current_net_worth,
            level=get_fire_level(adjusted),
        )

    lo, hi = 0.0, annual_income * 0.95
    best = 0.0
    while hi - lo > 100:
        mid = (lo + hi) / 2
        household = mid * couple_multiplier if is_couple else mid
        target = calculate_fire_number(household, wr)
        needed = calculate_years_to_fire(current_net_worth, annual_income - household, target, r)
        if needed <= years_available:
            lo = mid
            best = mid
        else:
            hi = mid

    household = best * couple_multiplier if is_couple else best
    return MaxSpendResult(
        max_monthly_spend=best / 12,
        max_annual_expenses=best,
        fire_number=calculate_fire_number(household, wr),
        level=get_fire_level(household),
    )
