from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Union

from wealthpath.core.config import SETTINGS
from wealthpath.core.schemas import NetWorthEntry, TrajectoryPoint
from wealthpath.utils.deviation import deviation_alert_id, detect_deviation
from wealthpath.utils.fire_engine import calculate_fire
from wealthpath.utils.geographic import calculate_prospective_impact, calculate_retrospective_impact
from wealthpath.utils.location_glidepath import project_all_tiers
from wealthpath.utils.logging import get_logger, set_operation
from wealthpath.utils.milestones import get_milestones
from wealthpath.utils.projection_models import GeographicCalculationInput, LocationGlidepathInputs
from wealthpath.utils.savings_inference import infer_savings_rate
from wealthpath.utils.validators import validate_net_worth_entry, validate_profile
from wealthpath.utils.velocity import calculate_velocity, get_velocity_recommendations

logger = get_logger("tools")

# camelCase keys sent by the UI -> canonical field names
_ALIASES = {
    "currentSalary": "current_salary",
    "currentNetWorth": "current_net_worth",
    "savingsRate": "savings_rate",
    "investmentReturn": "investment_return",
    "currentCOL": "current_col",
    "targetSalaryMultiplier": "target_salary_multiplier",
    "targetCOL": "target_col",
    "currentAge": "current_age",
    "annualIncome": "annual_income",
    "currentMetro": "current_metro",
    "savingsRatePercent": "savings_rate_percent",
    "expectedReturn": "expected_return",
    "withdrawalRate": "withdrawal_rate",
    "incomeAdjustByLocation": "income_adjust_by_location",
    "totalNetWorth": "total_net_worth",
    "netWorth": "net_worth",
}


def _canonical(payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    p = dict(payload or {})
    for alias, name in _ALIASES.items():
        if alias in p and name not in p:
            p[name] = p.pop(alias)
    return p


def _entries(rows: List[Dict[str, Any]]) -> List[NetWorthEntry]:
    return [NetWorthEntry(**_canonical(r)) for r in rows or []]


def _points(p: Dict[str, Any]) -> List[Union[TrajectoryPoint, NetWorthEntry]]:
    # "points" rows carry net_worth; "entries" rows are full NetWorthEntry records
    if p.get("points"):
        return [TrajectoryPoint(**_canonical(r)) for r in p["points"]]
    return _entries(p.get("entries") or [])


def tool_retrospective_impact(payload: Dict[str, Any]) -> Dict[str, Any]:
    set_operation("retrospective_impact")
    p = _canonical(payload)
    years_back = p.pop("years_back", p.pop("yearsBack", 0))
    growth = p.pop("historical_growth_rate", p.pop("historicalGrowth", None))
    inp = GeographicCalculationInput(**p)
    return calculate_retrospective_impact(inp, years_back, growth).model_dump()


def tool_prospective_impact(payload: Dict[str, Any]) -> Dict[str, Any]:
    set_operation("prospective_impact")
    p = _canonical(payload)
    years_forward = p.pop("years_forward", p.pop("yearsForward", 0))
    growth = p.pop("career_growth_rate", p.pop("careerGrowthRate", None))
    inp = GeographicCalculationInput(**p)
    return calculate_prospective_impact(inp, years_forward, growth).model_dump()


def tool_location_glidepath(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    set_operation("location_glidepath")
    inp = LocationGlidepathInputs(**_canonical(payload))
    return [p.model_dump() for p in project_all_tiers(inp)]


def tool_fire_summary(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Comprehensive FIRE numbers with years capped for display."""
    set_operation("fire_summary")
    p = _canonical(payload)
    res = calculate_fire(
        current_net_worth=float(p.get("current_net_worth", 0)),
        current_age=int(p["current_age"]),
        annual_income=float(p.get("annual_income", 0)),
        annual_expenses=float(p.get("annual_expenses", p.get("annualExpenses", 0))),
        annual_return=p.get("expected_return"),
        is_couple=bool(p.get("is_couple", p.get("isCouple", False))),
        couple_multiplier=float(p.get("couple_multiplier", p.get("coupleMultiplier", 1.7))),
        part_time_income=float(p.get("part_time_income", p.get("partTimeIncome", 0))),
        as_of=date.fromisoformat(p["as_of"]) if p.get("as_of") else None,
    )
    out = res.model_dump()
    out["years_to_fire_display"] = res.years_to_fire.capped(SETTINGS.years_cap)
    return out


def tool_infer_savings_rate(payload: Dict[str, Any]) -> Dict[str, Any]:
    set_operation("infer_savings_rate")
    p = _canonical(payload)
    entries = _entries(p.get("entries") or [])
    income = float(p.get("estimated_annual_income", p.get("estimatedAnnualIncome", 0)))
    rate = infer_savings_rate(entries, income, p.get("annual_return", p.get("annualReturn")))
    return {"inferred_savings_rate": rate, "entries_used": len(entries)}


def tool_detect_deviation(payload: Dict[str, Any]) -> Dict[str, Any]:
    set_operation("detect_deviation")
    p = _canonical(payload)
    points = _points(p)
    res = detect_deviation(points)
    return {
        "alert_id": deviation_alert_id(points),
        "deviation": res.model_dump() if res is not None else None,
    }


def tool_validate_entry(payload: Dict[str, Any]) -> Dict[str, Any]:
    set_operation("validate_entry")
    p = _canonical(payload)
    existing = _entries(p.get("existing_entries") or p.get("existingEntries") or [])
    res = validate_net_worth_entry(p.get("net_worth"), p.get("cash"), existing)
    if not res.is_valid:
        logger.info("entry_rejected errors=%s", len(res.errors))
    return res.model_dump()


def tool_validate_profile(payload: Dict[str, Any]) -> Dict[str, Any]:
    set_operation("validate_profile")
    return validate_profile(_canonical(payload)).model_dump()


def tool_milestones(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    set_operation("milestones")
    p = _canonical(payload)
    age = p.get("current_age")
    milestones = get_milestones(
        float(p.get("current_net_worth", 0)),
        float(p.get("annual_savings", p.get("annualSavings", 0))),
        p.get("expected_return", p.get("annual_return")),
        current_age=int(age) if age is not None else None,
    )
    return [m.model_dump() for m in milestones]


def tool_velocity(payload: Dict[str, Any]) -> Dict[str, Any]:
    set_operation("velocity")
    res = calculate_velocity(_points(_canonical(payload)))
    out = res.model_dump()
    out["recommendations"] = get_velocity_recommendations(res)
    return out
