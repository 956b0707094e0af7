from __future__ import annotations

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


# -------------------------
# History + profile
# -------------------------

class NetWorthEntry(BaseModel):
    """One dated net-worth observation. Callers keep these sorted by date."""

    date: dt.date
    total_net_worth: float
    cash: float = Field(default=0.0, ge=0)


class Profile(BaseModel):
    model_config = ConfigDict(frozen=True)

    age: int = Field(ge=18, le=100)
    savings_rate_percent: float = Field(ge=0, le=100)
    annual_income: float = 0.0
    metro: str = "other"
    occupation: str
    level: str


# -------------------------
# Deviation
# -------------------------

class TrajectoryPoint(BaseModel):
    date: dt.date
    net_worth: float


class DeviationResult(BaseModel):
    has_deviation: bool
    is_ahead: bool
    z_score: float
    expected_value: float
    actual_value: float
    deviation_amount: float
    deviation_percent: float
    confidence: int = Field(ge=0, le=100)
    message: str
    recommendations: List[str] = Field(default_factory=list)


# -------------------------
# Validation
# -------------------------

class ValidationResult(BaseModel):
    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def finalize(self) -> "ValidationResult":
        self.is_valid = len(self.errors) == 0
        return self


class ValidationMessages(BaseModel):
    error_message: Optional[str] = None
    warning_message: Optional[str] = None


# -------------------------
# Velocity
# -------------------------

SegmentType = Literal["high-growth", "moderate", "stagnant", "declining"]


class VelocitySegment(BaseModel):
    start_date: dt.date
    end_date: dt.date
    start_value: float
    end_value: float
    velocity: float  # $ per day, smoothed over a 90-day window when there are 3+ segments
    annualized_rate: float  # % per year
    duration_days: int
    type: SegmentType = "moderate"
    color: str = "#fbbf24"


class VelocityResult(BaseModel):
    segments: List[VelocitySegment] = Field(default_factory=list)
    overall_velocity: float = 0.0
    average_annualized_rate: float = 0.0
    has_minimum_data: bool = False
    data_point_count: int = 0
    recommendation: str = ""
