"""
Geographic arbitrage: what net worth would look like had the user lived
elsewhere (retrospective), or if they move now (prospective).
"""
from __future__ import annotations

from typing import Optional

from wealthpath.core.config import SETTINGS
from wealthpath.core.errors import InvalidScenarioError
from wealthpath.utils.logging import get_logger
from wealthpath.utils.projection_models import (
    Breakdown, CalculationResult, GeographicCalculationInput, QuickEstimate,
)

logger = get_logger("geographic")


def _check_horizon(years: float, label: str) -> None:
    if years < 0:
        raise InvalidScenarioError(f"{label} cannot be negative (got {years})")


def calculate_retrospective_impact(
    inp: GeographicCalculationInput,
    years_back: float,
    historical_growth_rate: Optional[float] = None,
) -> CalculationResult:
    """
    Net worth today had the user lived in the target city for the last
    ``years_back`` years.

    The constant annual net-savings delta is grown with the trapezoidal
    approximation ``delta * n * (1 + r * n / 2)`` rather than an exact annuity
    sum; downstream figures are calibrated against that formula.
    ``historical_growth_rate`` is accepted for call-site compatibility and does
    not enter the result.
    """
    _check_horizon(years_back, "years_back")

    target_salary = inp.current_salary * inp.target_salary_multiplier
    income_delta = target_salary - inp.current_salary

    current_expenses = inp.current_salary * (1 - inp.savings_rate) * inp.current_col
    target_expenses = target_salary * (1 - inp.savings_rate) * inp.target_col
    expenses_delta = target_expenses - current_expenses

    net_savings_delta = income_delta - expenses_delta

    total_delta = net_savings_delta * years_back * (1 + inp.investment_return * years_back / 2)
    adjusted = inp.current_net_worth + total_delta

    logger.debug(
        "retrospective years_back=%s net_savings_delta=%.2f total_delta=%.2f",
        years_back, net_savings_delta, total_delta,
    )

    return CalculationResult(
        adjusted_net_worth=adjusted,
        delta=adjusted - inp.current_net_worth,
        breakdown=Breakdown(
            income_delta=income_delta,
            expenses_delta=expenses_delta,
            net_savings_delta=net_savings_delta,
        ),
    )


def _simulate(
    net_worth: float,
    salary: float,
    savings_rate: float,
    col_ratio: float,
    investment_return: float,
    career_growth_rate: float,
    years: int,
) -> float:
    for _ in range(years):
        # income - income*(1-s)*ratio, arranged so ratio == 1 gives exactly income*s
        savings = salary * savings_rate + salary * (1 - savings_rate) * (1 - col_ratio)
        net_worth = (net_worth + savings) * (1 + investment_return)
        salary *= 1 + career_growth_rate
    return net_worth


def calculate_prospective_impact(
    inp: GeographicCalculationInput,
    years_forward: int,
    career_growth_rate: Optional[float] = None,
) -> CalculationResult:
    """
    Exact year-by-year simulation of "stay" versus "move" over ``years_forward``.

    Each year: add that year's savings, compound by ``1 + investment_return``,
    then grow salary by ``career_growth_rate``. ``delta`` is move minus stay.
    """
    _check_horizon(years_forward, "years_forward")
    growth = SETTINGS.career_growth_rate if career_growth_rate is None else career_growth_rate
    years = int(years_forward)

    col_ratio = inp.target_col / inp.current_col

    staying = _simulate(
        inp.current_net_worth, inp.current_salary, inp.savings_rate,
        1.0, inp.investment_return, growth, years,
    )
    moving = _simulate(
        inp.current_net_worth, inp.current_salary * inp.target_salary_multiplier, inp.savings_rate,
        col_ratio, inp.investment_return, growth, years,
    )

    target_salary = inp.current_salary * inp.target_salary_multiplier
    income_delta = target_salary - inp.current_salary
    current_expenses = inp.current_salary * (1 - inp.savings_rate)
    target_expenses = target_salary * (1 - inp.savings_rate) * col_ratio
    expenses_delta = target_expenses - current_expenses

    return CalculationResult(
        adjusted_net_worth=moving,
        delta=moving - staying,
        breakdown=Breakdown(
            income_delta=income_delta,
            expenses_delta=expenses_delta,
            net_savings_delta=income_delta - expenses_delta,
        ),
    )


def quick_estimate(
    current_net_worth: float,
    annual_salary: float,
    savings_rate: float,
    salary_multiplier: float,
    col_multiplier: float,
    current_col: float,
    years: int,
    is_retrospective: bool,
) -> QuickEstimate:
    inp = GeographicCalculationInput(
        current_salary=annual_salary,
        current_net_worth=current_net_worth,
        savings_rate=savings_rate,
        investment_return=0.07,
        current_col=current_col,
        target_salary_multiplier=salary_multiplier,
        target_col=col_multiplier,
    )
    if is_retrospective:
        res = calculate_retrospective_impact(inp, years, 0.07)
    else:
        res = calculate_prospective_impact(inp, years)
    return QuickEstimate(adjusted_net_worth=res.adjusted_net_worth, delta=res.delta)
