from __future__ import annotations

import math
from datetime import timedelta
from typing import Dict, List, Sequence

import numpy as np

from wealthpath.core.schemas import VelocityResult, VelocitySegment
from wealthpath.utils.deviation import PointLike, as_point
from wealthpath.utils.logging import get_logger

logger = get_logger("velocity")

MIN_POINTS = 5
RICH_HISTORY = 25
SMOOTHING_HALF_WINDOW = timedelta(days=45)
DAYS_PER_YEAR = 365

SEGMENT_COLORS: Dict[str, str] = {
    "declining": "#ef4444",
    "stagnant": "#f97316",
    "moderate": "#fbbf24",
    "high-growth": "#10b981",
}

SEGMENT_DESCRIPTIONS: Dict[str, str] = {
    "high-growth": "Excellent progress! Your wealth is growing rapidly.",
    "moderate": "Steady growth. You're building wealth consistently.",
    "stagnant": "Slow growth. Consider increasing savings or investment returns.",
    "declining": "Declining wealth. Review expenses and investment strategy.",
}


def _annualized_rate(start: float, end: float, days: int) -> float:
    if start <= 0:
        return 0.0
    ratio = end / start
    if ratio <= 0:
        # everything (or more) lost over the segment
        return -100.0
    return (ratio ** (DAYS_PER_YEAR / days) - 1) * 100


def _smooth(segments: List[VelocitySegment]) -> List[VelocitySegment]:
    """Replace each velocity with the mean over segments starting within 45 days of it."""
    if len(segments) < 3:
        return segments
    out = []
    for seg in segments:
        lo, hi = seg.start_date - SMOOTHING_HALF_WINDOW, seg.end_date + SMOOTHING_HALF_WINDOW
        window = [s.velocity for s in segments if lo <= s.start_date <= hi]
        out.append(seg.model_copy(update={"velocity": float(np.mean(window))}))
    return out


def _classify(segments: List[VelocitySegment]) -> List[VelocitySegment]:
    if not segments:
        return segments
    ordered = np.sort([s.velocity for s in segments])
    n = len(ordered)
    q25 = ordered[int(n * 0.25)]
    q75 = ordered[int(n * 0.75)]

    out = []
    for seg in segments:
        if seg.velocity < 0:
            kind = "declining"
        elif seg.velocity < q25:
            kind = "stagnant"
        elif seg.velocity < q75:
            kind = "moderate"
        else:
            kind = "high-growth"
        out.append(seg.model_copy(update={"type": kind, "color": SEGMENT_COLORS[kind]}))
    return out


def _recommendation(count: int) -> str:
    if count < MIN_POINTS:
        return "Add more data points (target: 5-25) for better velocity analysis accuracy."
    if count > RICH_HISTORY:
        return "You have excellent data coverage! Consider focusing on recent trends (last 12 months)."
    return "Good data coverage. Continue tracking regularly for optimal insights."


def calculate_velocity(points: Sequence[PointLike]) -> VelocityResult:
    """
    Growth speed between consecutive observations.

    Each segment reports dollars per day and an annualized growth rate.
    Same-day pairs are skipped. With three or more segments the per-day
    velocity is smoothed over a roughly 90-day window, then segments are
    classified against the velocity quartiles (negative is always
    "declining").
    """
    ordered = sorted((as_point(p) for p in points), key=lambda p: p.date)
    count = len(ordered)

    if count < 2:
        return VelocityResult(
            data_point_count=count,
            recommendation="Add more data points (at least 5) for accurate velocity analysis.",
        )

    segments: List[VelocitySegment] = []
    for start, end in zip(ordered, ordered[1:]):
        days = (end.date - start.date).days
        if days == 0:
            continue
        segments.append(VelocitySegment(
            start_date=start.date,
            end_date=end.date,
            start_value=start.net_worth,
            end_value=end.net_worth,
            velocity=(end.net_worth - start.net_worth) / days,
            annualized_rate=_annualized_rate(start.net_worth, end.net_worth, days),
            duration_days=days,
        ))

    segments = _classify(_smooth(segments))

    total_days = (ordered[-1].date - ordered[0].date).days
    overall = (ordered[-1].net_worth - ordered[0].net_worth) / total_days if total_days > 0 else 0.0
    avg_rate = float(np.mean([s.annualized_rate for s in segments])) if segments else 0.0
    if not math.isfinite(avg_rate):
        avg_rate = 0.0

    logger.debug("velocity points=%s segments=%s overall=%.2f", count, len(segments), overall)
    return VelocityResult(
        segments=segments,
        overall_velocity=overall,
        average_annualized_rate=avg_rate,
        has_minimum_data=count >= MIN_POINTS,
        data_point_count=count,
        recommendation=_recommendation(count),
    )


def get_velocity_recommendations(result: VelocityResult) -> List[str]:
    """Advice from the last three segments compared with the overall pace."""
    if not result.has_minimum_data:
        return ["Track your net worth more frequently (monthly is ideal)"]
    recent = result.segments[-3:]
    if not recent:
        return []

    recent_velocity = float(np.mean([s.velocity for s in recent]))
    overall = result.overall_velocity
    if recent_velocity < 0:
        return [
            "Review recent expenses - your wealth is declining",
            "Consider reducing discretionary spending",
            "Check if investments need rebalancing",
        ]
    if recent_velocity < overall * 0.5:
        return [
            "Recent growth has slowed compared to your average",
            "Review if you've reduced savings rate",
            "Consider increasing investment contributions",
        ]
    if recent_velocity > overall * 1.5:
        return [
            "Excellent recent progress! You're accelerating.",
            "Maintain current savings and investment strategy",
            "Consider increasing FIRE target if comfortable",
        ]
    return []


def get_velocity_description(kind: str) -> str:
    return SEGMENT_DESCRIPTIONS[kind]
