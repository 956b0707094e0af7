"""
Trajectory deviation: fit a linear trend to all but the latest observation,
project it to the latest date, and compare.

Confidence (0-100) blends sample size and trend stability:

    sample    = min(n_entries / 10, 1)
    stability = max(0, R^2) of the trend fit   (0.5 when only two points were fitted)
    confidence = round(100 * (0.4 * sample + 0.6 * stability))

Two points always fit a line perfectly, so their R^2 says nothing about
stability and is replaced by the neutral 0.5.
"""
from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from wealthpath.core.config import SETTINGS
from wealthpath.core.schemas import DeviationResult, NetWorthEntry, TrajectoryPoint
from wealthpath.utils.logging import get_logger

logger = get_logger("deviation")

MIN_ENTRIES = 3
FULL_SAMPLE_SIZE = 10
SAMPLE_WEIGHT = 0.4
STABILITY_WEIGHT = 0.6
UNKNOWN_STABILITY = 0.5
LOW_CONFIDENCE = 50


def _linear_fit(x: np.ndarray, y: np.ndarray) -> Tuple[float, float, float, float]:
    """Returns (slope, intercept, r2, residual_std)."""
    n = len(x)
    mx, my = x.mean(), y.mean()
    sxx = float(((x - mx) ** 2).sum())
    slope = float(((x - mx) * (y - my)).sum()) / sxx
    intercept = float(my - slope * mx)

    residuals = y - (slope * x + intercept)
    ss_res = float((residuals ** 2).sum())
    ss_tot = float(((y - my) ** 2).sum())
    r2 = 1.0 if ss_tot == 0 else 1 - ss_res / ss_tot
    residual_std = math.sqrt(ss_res / (n - 2)) if n > 2 else 0.0
    return slope, intercept, r2, residual_std


def score_confidence(n_entries: int, r2: float, fitted_points: int) -> int:
    sample = min(n_entries / FULL_SAMPLE_SIZE, 1.0)
    stability = max(0.0, min(1.0, r2)) if fitted_points > 2 else UNKNOWN_STABILITY
    return max(0, min(100, round((SAMPLE_WEIGHT * sample + STABILITY_WEIGHT * stability) * 100)))


def _message(has_deviation: bool, is_ahead: bool, pct: float, threshold: float) -> str:
    size = abs(pct)
    if not has_deviation:
        side = "above" if is_ahead else "below"
        return f"You're tracking right on your expected trajectory ({size:.1f}% {side} trend)."
    if is_ahead:
        if size > 3 * threshold:
            return f"Exceptional progress! You're {size:.0f}% ahead of your trend."
        if size > 2 * threshold:
            return f"Excellent! You're significantly ahead of your trend, by {size:.0f}%."
        return f"Great work! You're {size:.0f}% ahead of your expected trajectory."
    if size > 3 * threshold:
        return f"Significant lag: you're {size:.0f}% behind your expected trajectory."
    if size > 2 * threshold:
        return f"You're notably behind your expected trajectory, by {size:.0f}%."
    return f"You're slightly behind your expected trajectory, by {size:.0f}%."


def _recommendations(is_ahead: bool, pct: float, threshold: float, confidence: int) -> List[str]:
    strong = abs(pct) > 2 * threshold
    if is_ahead:
        recs = ["Keep up your current savings and investment strategy"]
        if strong:
            recs += [
                "Consider if you can sustain this pace long-term",
                "You may be able to retire earlier than projected",
            ]
        else:
            recs += [
                "Review what's working well in your strategy",
                "Consider documenting your approach for consistency",
            ]
    elif strong:
        recs = [
            "Consider increasing your savings rate",
            "Review your budget and cut discretionary spending",
            "Check if investment allocations need rebalancing",
            "Consider if income growth is on track with expectations",
        ]
    else:
        recs = [
            "Small course corrections can get you back on track",
            "Review if recent expenses were one-time or recurring",
            "Ensure you're maximizing tax-advantaged accounts",
        ]

    if confidence < LOW_CONFIDENCE:
        recs.append("Note: add more data points for a more reliable analysis")
    return recs


PointLike = Union[TrajectoryPoint, NetWorthEntry]


def as_point(p: PointLike) -> TrajectoryPoint:
    if isinstance(p, NetWorthEntry):
        return TrajectoryPoint(date=p.date, net_worth=p.total_net_worth)
    return p


def detect_deviation(
    points: Sequence[PointLike],
    *,
    threshold_pct: Optional[float] = None,
) -> Optional[DeviationResult]:
    """
    Compare the latest observation against the trend of the earlier ones.

    Returns ``None`` when there are fewer than three points, when the earlier
    points share a single date, or when the projected value is zero (no
    meaningful percentage). ``has_deviation`` is set when the absolute
    percentage gap exceeds ``threshold_pct`` (default 10%).
    """
    threshold = SETTINGS.deviation_threshold_pct if threshold_pct is None else threshold_pct

    if len(points) < MIN_ENTRIES:
        logger.debug("deviation_skipped reason=insufficient_history n=%s", len(points))
        return None

    ordered = sorted((as_point(p) for p in points), key=lambda p: p.date)
    history, current = ordered[:-1], ordered[-1]

    first = history[0].date
    x = np.array([(p.date - first).days for p in history], dtype=float)
    y = np.array([p.net_worth for p in history], dtype=float)
    if np.ptp(x) == 0:
        logger.debug("deviation_skipped reason=single_date_history")
        return None

    slope, intercept, r2, residual_std = _linear_fit(x, y)
    expected = slope * (current.date - first).days + intercept
    if expected == 0 or not math.isfinite(expected):
        logger.debug("deviation_skipped reason=zero_expectation")
        return None

    actual = current.net_worth
    amount = actual - expected
    pct = amount / expected * 100
    z_score = amount / residual_std if residual_std > 0 else 0.0

    is_ahead = actual >= expected
    has_deviation = abs(pct) > threshold
    confidence = score_confidence(len(points), r2, len(history))

    return DeviationResult(
        has_deviation=has_deviation,
        is_ahead=is_ahead,
        z_score=z_score,
        expected_value=expected,
        actual_value=actual,
        deviation_amount=amount,
        deviation_percent=pct,
        confidence=confidence,
        message=_message(has_deviation, is_ahead, pct, threshold),
        recommendations=_recommendations(is_ahead, pct, threshold, confidence),
    )


def deviation_alert_id(points: Sequence[PointLike]) -> str:
    """Stable id for the alert shown for this history: entry count + latest date."""
    if not points:
        return "0_"
    latest = max(as_point(p).date for p in points)
    return f"{len(points)}_{latest.isoformat()}"
