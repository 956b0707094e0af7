from __future__ import annotations

from wealthpath.core.config import SETTINGS
from wealthpath.tools.engine_tools import (
    tool_detect_deviation, tool_fire_summary, tool_infer_savings_rate, tool_location_glidepath,
    tool_milestones, tool_prospective_impact, tool_retrospective_impact, tool_validate_entry,
    tool_validate_profile, tool_velocity,
)
from wealthpath.utils.answer_format import format_currency, format_deviation_md, format_velocity
from wealthpath.utils.logging import set_log_context, setup_logging


def main():
    setup_logging(SETTINGS.log_level)
    set_log_context(request_id="smoke")

    scenario = {
        "currentSalary": 150000,
        "currentNetWorth": 250000,
        "savingsRate": 0.25,
        "investmentReturn": 0.07,
        "currentCOL": 1.3,
        "targetSalaryMultiplier": 0.85,
        "targetCOL": 0.9,
    }
    retro = tool_retrospective_impact({**scenario, "yearsBack": 5})
    print("Retrospective delta:", format_currency(retro["delta"]))
    pro = tool_prospective_impact({**scenario, "yearsForward": 10})
    print("Prospective delta:", format_currency(pro["delta"]))

    tiers = tool_location_glidepath({
        "currentNetWorth": 250000,
        "currentAge": 32,
        "annualIncome": 150000,
        "currentMetro": "seattle",
        "savingsRatePercent": 30,
        "expectedReturn": 0.07,
        "withdrawalRate": 0.04,
        "incomeAdjustByLocation": False,
    })
    for t in tiers:
        print(f"Tier {t['tier']['tier']} {t['tier']['label']}: {t['years_to_fire']}y (delta {t['delta_from_current_tier']:+d})")

    fire = tool_fire_summary({"currentNetWorth": 250000, "currentAge": 32, "annualIncome": 150000, "annual_expenses": 55000})
    print("FIRE number:", format_currency(fire["fire_number"]), "years:", fire["years_to_fire_display"])

    history = [
        {"date": "2022-01-01", "totalNetWorth": 120000, "cash": 20000},
        {"date": "2022-07-01", "totalNetWorth": 150000, "cash": 22000},
        {"date": "2023-01-01", "totalNetWorth": 178000, "cash": 21000},
        {"date": "2023-07-01", "totalNetWorth": 205000, "cash": 25000},
        {"date": "2024-01-01", "totalNetWorth": 260000, "cash": 30000},
    ]
    inferred = tool_infer_savings_rate({"entries": history, "estimatedAnnualIncome": 150000})
    print("Inferred savings rate:", round(inferred["inferred_savings_rate"], 3))

    dev = tool_detect_deviation({"points": [{"date": h["date"], "netWorth": h["totalNetWorth"]} for h in history]})
    print("Alert id:", dev["alert_id"])
    print(format_deviation_md(dev["deviation"]))

    for m in tool_milestones({"currentNetWorth": 250000, "annualSavings": 45000, "currentAge": 32})[:5]:
        print(f"Milestone {m['label']}: {m['years']}y")
    vel = tool_velocity({"entries": history})
    print("Velocity:", format_velocity(vel["overall_velocity"]), vel["recommendation"])

    print("Entry check:", tool_validate_entry({"netWorth": 900000, "cash": 1000, "existingEntries": history}))
    print("Profile check:", tool_validate_profile({"age": 20, "savingsRatePercent": 85, "occupation": "engineer", "level": "senior", "metro": "austin"}))


if __name__ == "__main__":
    main()
