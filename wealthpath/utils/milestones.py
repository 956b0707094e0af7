"""Years to each round-number net-worth milestone."""
from __future__ import annotations

from typing import List, Optional, Tuple

from wealthpath.core.config import SETTINGS
from wealthpath.utils.logging import get_logger
from wealthpath.utils.projection_models import Milestone

logger = get_logger("milestones")

MILESTONES: Tuple[Tuple[float, str], ...] = (
    (100_000, "$100K"),
    (250_000, "$250K"),
    (500_000, "$500K"),
    (750_000, "$750K"),
    (1_000_000, "$1M"),
    (2_000_000, "$2M"),
    (3_000_000, "$3M"),
    (5_000_000, "$5M"),
)

MAX_YEARS = 100


def _years_to_reach(net_worth: float, annual_savings: float, target: float, annual_return: float) -> Optional[int]:
    # same yearly step as the glidepath trace: grow, then add the year's savings
    wealth = net_worth
    years = 0
    while wealth < target and years < MAX_YEARS:
        wealth = wealth * (1 + annual_return) + annual_savings
        years += 1
    if wealth < target or years >= MAX_YEARS:
        return None
    return years


def get_milestones(
    current_net_worth: float,
    annual_savings: float,
    annual_return: Optional[float] = None,
    *,
    current_age: Optional[int] = None,
) -> List[Milestone]:
    """
    Whole years until net worth first reaches each milestone.

    Milestones already passed report 0 years. With no positive savings, or
    when a milestone takes 100 years or more, ``years`` is ``None``.
    ``age`` is filled in only when ``current_age`` is given.
    """
    r = SETTINGS.default_annual_return if annual_return is None else annual_return

    out: List[Milestone] = []
    for amount, label in MILESTONES:
        if current_net_worth >= amount:
            years: Optional[int] = 0
        elif annual_savings <= 0:
            years = None
        else:
            years = _years_to_reach(current_net_worth, annual_savings, amount, r)

        age = current_age + years if current_age is not None and years is not None else None
        out.append(Milestone(milestone=amount, label=label, years=years, age=age))

    logger.debug("milestones net_worth=%.2f savings=%.2f years=%s", current_net_worth, annual_savings, [m.years for m in out])
    return out
