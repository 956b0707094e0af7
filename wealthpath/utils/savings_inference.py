from __future__ import annotations

import math
from typing import Optional, Sequence

from wealthpath.core.config import SETTINGS
from wealthpath.core.schemas import NetWorthEntry
from wealthpath.utils.logging import get_logger

logger = get_logger("savings_inference")

DAYS_PER_YEAR = 365.25
MAX_PLAUSIBLE_RATE = 0.9


def infer_savings_rate(
    entries: Sequence[NetWorthEntry],
    estimated_annual_income: float,
    annual_return: Optional[float] = None,
    *,
    fallback: Optional[float] = None,
) -> float:
    """
    Implied savings rate from the first and last entries of a sorted history.

    Growth that the starting balance would have earned on its own at
    ``annual_return`` is subtracted from actual growth; what remains is
    attributed to savings out of ``estimated_annual_income``. Any result that
    is negative, above 90% or NaN is replaced by the fallback (0.25), never
    clamped.
    """
    r = SETTINGS.default_annual_return if annual_return is None else annual_return
    default = SETTINGS.fallback_savings_rate if fallback is None else fallback

    if len(entries) < 2 or estimated_annual_income == 0:
        return default

    first, last = entries[0], entries[-1]
    years_elapsed = (last.date - first.date).days / DAYS_PER_YEAR
    if years_elapsed == 0:
        return default

    starting = first.total_net_worth
    actual_growth = last.total_net_worth - starting

    investment_growth = starting * ((1 + r) ** years_elapsed - 1)
    growth_from_savings = actual_growth - investment_growth
    inferred = growth_from_savings / (estimated_annual_income * years_elapsed)

    if isinstance(inferred, complex) or math.isnan(inferred) or inferred < 0 or inferred > MAX_PLAUSIBLE_RATE:
        logger.info("inferred_rate_rejected value=%s fallback=%s", inferred, default)
        return default
    return inferred
