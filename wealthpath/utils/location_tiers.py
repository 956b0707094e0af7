from __future__ import annotations

from typing import FrozenSet, Tuple

from wealthpath.utils.projection_models import LocationTier

# Ordered by rank: index 0 is tier 1 (cheapest), index 4 is tier 5.
LOCATION_TIERS: Tuple[LocationTier, ...] = (
    LocationTier(
        tier=1,
        name="budget",
        label="Budget ($1,500/mo)",
        monthly_expenses=1500,
        annual_expenses=18000,
        example_cities=("Chiang Mai", "Medellín", "Da Nang", "Tbilisi"),
        color="#22c55e",
    ),
    LocationTier(
        tier=2,
        name="affordable",
        label="Affordable ($2,500/mo)",
        monthly_expenses=2500,
        annual_expenses=30000,
        example_cities=("Lisbon", "Mexico City", "Prague", "Buenos Aires"),
        color="#84cc16",
    ),
    LocationTier(
        tier=3,
        name="moderate",
        label="Moderate ($3,500/mo)",
        monthly_expenses=3500,
        annual_expenses=42000,
        example_cities=("Berlin", "Austin", "Denver", "Barcelona"),
        color="#eab308",
    ),
    LocationTier(
        tier=4,
        name="expensive",
        label="Expensive ($5,000/mo)",
        monthly_expenses=5000,
        annual_expenses=60000,
        example_cities=("Seattle", "Los Angeles", "London", "Sydney"),
        color="#f97316",
    ),
    LocationTier(
        tier=5,
        name="premium",
        label="Premium ($7,000/mo)",
        monthly_expenses=7000,
        annual_expenses=84000,
        example_cities=("San Francisco", "New York", "Zurich", "Singapore"),
        color="#ef4444",
    ),
)

DEFAULT_TIER_RANK = 3

# Metro ids use the underscore convention (e.g. "salt_lake_city").
PREMIUM_METROS: FrozenSet[str] = frozenset({"san_francisco", "san_jose", "new_york"})
EXPENSIVE_METROS: FrozenSet[str] = frozenset({"seattle", "los_angeles", "boston", "washington_dc", "san_diego"})
AFFORDABLE_METROS: FrozenSet[str] = frozenset({"charlotte", "detroit", "houston", "tampa", "pittsburgh", "columbus"})
MODERATE_METROS: FrozenSet[str] = frozenset({
    "austin", "denver", "portland", "chicago", "miami", "atlanta",
    "minneapolis", "philadelphia", "dallas", "phoenix", "raleigh",
    "nashville", "salt_lake_city", "remote", "other",
})


def tier_by_rank(rank: int) -> LocationTier:
    return LOCATION_TIERS[rank - 1]


def get_metro_tier(metro: str) -> LocationTier:
    """Total lookup: anything unrecognized (including None/empty) is moderate."""
    m = (metro or "").strip().lower()
    if m in PREMIUM_METROS:
        return tier_by_rank(5)
    if m in EXPENSIVE_METROS:
        return tier_by_rank(4)
    if m in AFFORDABLE_METROS:
        return tier_by_rank(2)
    if m in MODERATE_METROS:
        return tier_by_rank(3)
    return tier_by_rank(DEFAULT_TIER_RANK)
