from __future__ import annotations
from typing import Any, Dict, List


def format_currency(value: float) -> str:
    if abs(value) >= 1_000_000:
        return f"${value / 1_000_000:.2f}M"
    if abs(value) >= 1_000:
        return f"${value / 1_000:.1f}k"
    return f"${value:.0f}"


def format_deviation_md(result: Dict[str, Any]) -> str:
    if not result:
        return "Not enough history yet to compare against a trend."
    lines = [
        f"**{result['message']}**",
        f"- Expected: {format_currency(result['expected_value'])}",
        f"- Actual: {format_currency(result['actual_value'])} ({result['deviation_percent']:+.1f}%)",
        f"- Confidence: {result['confidence']}%",
    ]
    recs: List[str] = result.get("recommendations") or []
    if recs:
        lines.append("\n### Recommendations")
        lines.extend(f"- {r}" for r in recs)
    return "\n".join(lines)


def format_velocity(velocity: float) -> str:
    """Dollars per day shown in the unit that reads best for its size."""
    mag = abs(velocity)
    if mag < 1:
        return f"${velocity * 365:.0f}/year"
    if mag < 100:
        return f"${velocity:.0f}/day"
    if mag < 1000:
        return f"${velocity * 7:.0f}/week"
    return f"${velocity * 30:.0f}/month"
