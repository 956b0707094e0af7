"""Years-to-FIRE across the five location cost tiers."""
from __future__ import annotations

import math
from typing import Dict, List, Optional

from wealthpath.core.config import SETTINGS
from wealthpath.utils.fire_engine import calculate_fire_number, solve_years_to_fire
from wealthpath.utils.location_tiers import LOCATION_TIERS, get_metro_tier
from wealthpath.utils.logging import get_logger
from wealthpath.utils.projection_models import (
    LocationGlidepathInputs, LocationTier, TierProjection, YearPoint,
)

logger = get_logger("location_glidepath")

# Salary in a tier relative to the user's current salary when income follows location.
INCOME_MULTIPLIERS: Dict[int, float] = {
    1: 0.40,
    2: 0.60,
    3: 0.80,
    4: 1.00,
    5: 1.15,
}

GLIDEPATH_YEARS = 50


def project_tier(inputs: LocationGlidepathInputs, tier: LocationTier, *, years_cap: Optional[int] = None) -> TierProjection:
    cap = SETTINGS.years_cap if years_cap is None else years_cap

    income_multiplier = INCOME_MULTIPLIERS.get(tier.tier, 1.0) if inputs.income_adjust_by_location else 1.0
    annual_savings = inputs.annual_income * income_multiplier * (inputs.savings_rate_percent / 100)

    fire_number = calculate_fire_number(tier.annual_expenses, inputs.withdrawal_rate)

    points: List[YearPoint] = []
    nw = inputs.current_net_worth
    for y in range(GLIDEPATH_YEARS + 1):
        phase = "fi" if nw >= fire_number else "accumulating"
        points.append(YearPoint(year=y, age=inputs.current_age + y, net_worth=round(nw), phase=phase))
        # savings stop once FI is reached; compounding continues
        nw = nw * (1 + inputs.expected_return) + (annual_savings if phase == "accumulating" else 0.0)

    # whole years, counted like the trace: first year that starts at or above target
    fi_year = next((pt.year for pt in points if pt.phase == "fi"), None)
    if fi_year is not None:
        years_to_fire = min(fi_year, cap)
    else:
        years = solve_years_to_fire(inputs.current_net_worth, annual_savings, fire_number, inputs.expected_return)
        if years.reachable:
            years_to_fire = min(cap, max(GLIDEPATH_YEARS + 1, math.ceil(years.years)))
        else:
            years_to_fire = cap

    return TierProjection(
        tier=tier,
        fire_number=fire_number,
        years_to_fire=years_to_fire,
        fire_age=cap if years_to_fire >= cap else inputs.current_age + years_to_fire,
        delta_from_current_tier=0,
        year_by_year=points,
    )


def project_all_tiers(inputs: LocationGlidepathInputs, *, years_cap: Optional[int] = None) -> List[TierProjection]:
    """
    One projection per tier, cheapest first. ``delta_from_current_tier`` is
    positive when a tier reaches FI sooner than the user's own metro tier.
    """
    current = get_metro_tier(inputs.current_metro)
    projections = [project_tier(inputs, tier, years_cap=years_cap) for tier in LOCATION_TIERS]

    current_years = next(p.years_to_fire for p in projections if p.tier.tier == current.tier)
    for p in projections:
        p.delta_from_current_tier = current_years - p.years_to_fire

    logger.debug(
        "glidepath metro=%s current_tier=%s years=%s",
        inputs.current_metro, current.tier, [p.years_to_fire for p in projections],
    )
    return projections
