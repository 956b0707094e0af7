from __future__ import annotations

import math
from datetime import date
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

Phase = Literal["accumulating", "fi"]


class LocationTier(BaseModel):
    model_config = ConfigDict(frozen=True)

    tier: Literal[1, 2, 3, 4, 5]
    name: str
    label: str
    monthly_expenses: float = Field(..., gt=0)
    annual_expenses: float = Field(..., gt=0)
    example_cities: Tuple[str, ...] = ()
    color: str = "#888888"

    @model_validator(mode="after")
    def _annual_matches_monthly(self) -> "LocationTier":
        if not math.isclose(self.annual_expenses, self.monthly_expenses * 12):
            raise ValueError(
                f"annual_expenses ({self.annual_expenses}) must equal monthly_expenses x 12 "
                f"({self.monthly_expenses * 12}) for tier {self.tier}"
            )
        return self


# -------------------------
# Geographic scenarios
# -------------------------

class GeographicCalculationInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_salary: float
    current_net_worth: float
    savings_rate: float = Field(..., description="Fraction of salary saved, 0.25 = 25%")
    investment_return: float = Field(..., description="Annual return, 0.07 = 7%")
    current_col: float = Field(..., gt=0, description="Cost-of-living multiplier of the current city")
    target_salary_multiplier: float = Field(..., ge=0)
    target_col: float = Field(..., gt=0)


class Breakdown(BaseModel):
    income_delta: float
    expenses_delta: float
    net_savings_delta: float


class CalculationResult(BaseModel):
    adjusted_net_worth: float
    delta: float
    breakdown: Breakdown


class QuickEstimate(BaseModel):
    adjusted_net_worth: float
    delta: float


# -------------------------
# FIRE target
# -------------------------

class YearsToFire(BaseModel):
    """Either a finite number of years or an unreachable target."""

    model_config = ConfigDict(frozen=True)

    status: Literal["finite", "unreachable"]
    years: Optional[float] = Field(default=None, ge=0)

    @classmethod
    def finite(cls, years: float) -> "YearsToFire":
        return cls(status="finite", years=max(0.0, float(years)))

    @classmethod
    def unreachable(cls) -> "YearsToFire":
        return cls(status="unreachable")

    @property
    def reachable(self) -> bool:
        return self.status == "finite"

    def as_float(self) -> float:
        return float(self.years) if self.reachable else math.inf

    def capped(self, cap: int = 99) -> int:
        if not self.reachable:
            return cap
        return min(cap, int(round(self.years)))


class FireLevel(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    min_annual_expenses: float
    max_annual_expenses: float
    withdrawal_rate: float
    color: str


class CoastFireResult(BaseModel):
    coast_number: float
    years_to_coast: YearsToFire
    is_coast_fire: bool
    monthly_contribution_needed: float


class BaristaFireResult(BaseModel):
    barista_number: float
    years_to_barista_fire: YearsToFire
    is_barista_fire: bool
    part_time_income_needed: float


class FireCalculationResult(BaseModel):
    fire_number: float
    current_progress: float = Field(..., description="Percent of FIRE number reached, capped at 100")
    years_to_fire: YearsToFire
    fire_date: Optional[date] = None
    monthly_contribution_needed: float
    level: FireLevel
    coast_fire: CoastFireResult
    barista_fire: BaristaFireResult


class MaxSpendResult(BaseModel):
    max_monthly_spend: float
    max_annual_expenses: float
    fire_number: float
    level: FireLevel


# -------------------------
# Location glidepath
# -------------------------

class LocationGlidepathInputs(BaseModel):
    current_net_worth: float
    current_age: int = Field(..., ge=0)
    annual_income: float = Field(..., ge=0)
    current_metro: str = "other"
    savings_rate_percent: float = Field(..., ge=0, le=100)
    expected_return: float = 0.07
    withdrawal_rate: float = Field(0.04, gt=0)
    income_adjust_by_location: bool = True


class YearPoint(BaseModel):
    year: int
    age: int
    net_worth: float
    phase: Phase


class TierProjection(BaseModel):
    tier: LocationTier
    fire_number: float
    years_to_fire: int = Field(..., description="Rounded years; the display cap (99) means never")
    fire_age: int
    delta_from_current_tier: int = 0
    year_by_year: List[YearPoint] = Field(default_factory=list)


# -------------------------
# Milestones
# -------------------------

class Milestone(BaseModel):
    milestone: float
    label: str
    years: Optional[int] = Field(default=None, ge=0)  # None = not reached within the horizon
    age: Optional[int] = None
