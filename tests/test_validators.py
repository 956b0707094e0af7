import math
from datetime import date, datetime

import pytest

from wealthpath.core.schemas import NetWorthEntry, Profile
from wealthpath.utils.validators import (
    format_validation_messages, sanitize_number_input, validate_date_entry,
    validate_net_worth_entry, validate_profile,
)


def _history(*values):
    return [NetWorthEntry(date=date(2024, 1, 1 + i), total_net_worth=v, cash=0) for i, v in enumerate(values)]


# -------------------------
# Net worth entries
# -------------------------

def test_nan_is_rejected():
    res = validate_net_worth_entry(float("nan"), 1000, [])
    assert not res.is_valid
    assert len(res.errors) >= 1


@pytest.mark.parametrize("nw,cash", [("abc", 0), (None, 0), (100, "x"), (True, 0)])
def test_non_numeric_is_rejected(nw, cash):
    assert not validate_net_worth_entry(nw, cash, []).is_valid


def test_numeric_strings_are_accepted():
    assert validate_net_worth_entry("1500", "100", []).is_valid


def test_range_errors():
    assert not validate_net_worth_entry(2e12, 0, []).is_valid
    assert not validate_net_worth_entry(-2e9, 0, []).is_valid
    assert not validate_net_worth_entry(1000, -1, []).is_valid
    assert not validate_net_worth_entry(1000, 2e12, []).is_valid
    assert validate_net_worth_entry(1e12, 0, []).is_valid
    assert validate_net_worth_entry(-1e9, 0, []).is_valid


def test_cash_above_positive_net_worth_warns():
    res = validate_net_worth_entry(100, 5000, [])
    assert res.is_valid
    assert any("Cash exceeds" in w for w in res.warnings)


def test_cash_with_negative_net_worth_does_not_warn():
    res = validate_net_worth_entry(-100, 5000, [])
    assert res.warnings == []


def test_outlier_warning():
    res = validate_net_worth_entry(150000, 0, _history(100000, 101000, 102000))
    assert res.is_valid
    assert any("historical average" in w for w in res.warnings)
    assert not any("changed by" in w for w in res.warnings)


def test_outlier_needs_three_entries():
    res = validate_net_worth_entry(105000, 0, _history(100000, 101000))
    assert not any("historical average" in w for w in res.warnings)


def test_large_jump_needs_both_conditions():
    big = validate_net_worth_entry(200000, 0, _history(100000))
    assert any("changed by 100%" in w for w in big.warnings)

    small_balance = validate_net_worth_entry(160, 0, _history(100))
    assert small_balance.warnings == []

    small_pct = validate_net_worth_entry(1_040_000, 0, _history(1_000_000))
    assert small_pct.warnings == []


def test_jump_from_zero_does_not_raise():
    res = validate_net_worth_entry(50000, 0, _history(0))
    assert res.is_valid
    assert any("from zero" in w for w in res.warnings)


# -------------------------
# Profile
# -------------------------

def test_valid_profile_model():
    p = Profile(age=35, savings_rate_percent=25, annual_income=120000, metro="austin", occupation="engineer", level="senior")
    res = validate_profile(p)
    assert res.is_valid
    assert res.warnings == []


@pytest.mark.parametrize("age,ok,warn", [(17, False, False), (18, True, True), (21, True, True), (22, True, False), (100, True, False), (101, False, False), ("x", False, False)])
def test_profile_age(age, ok, warn):
    res = validate_profile({"age": age, "occupation": "o", "level": "l", "metro": "m"})
    assert res.is_valid is ok
    assert bool(res.warnings) is warn


@pytest.mark.parametrize("rate,ok,warn", [(-1, False, False), (0, True, True), (4.9, True, True), (5, True, False), (80, True, False), (81, True, True), (100, True, True), (101, False, False)])
def test_profile_savings_rate(rate, ok, warn):
    res = validate_profile({"savings_rate_percent": rate, "occupation": "o", "level": "l", "metro": "m"})
    assert res.is_valid is ok
    assert bool(res.warnings) is warn


def test_profile_required_fields():
    res = validate_profile({"age": 30})
    assert not res.is_valid
    assert res.errors == ["Occupation is required", "Career level is required", "Metro area is required"]


# -------------------------
# Dates
# -------------------------

TODAY = date(2026, 10, 18)


def test_missing_date():
    assert not validate_date_entry(None, [], today=TODAY).is_valid


def test_far_past_is_error():
    res = validate_date_entry(date(1900, 1, 1), [], today=TODAY)
    assert not res.is_valid


def test_far_future_warns():
    res = validate_date_entry(date(2028, 1, 1), [], today=TODAY)
    assert res.is_valid
    assert any("future" in w for w in res.warnings)
    assert validate_date_entry(date(2027, 10, 18), [], today=TODAY).warnings == []


def test_duplicate_date_warns_not_errors():
    res = validate_date_entry(date(2025, 3, 1), ["2025-03-01", date(2025, 4, 1)], today=TODAY)
    assert res.is_valid
    assert any("overwritten" in w for w in res.warnings)


def test_datetime_input_and_leap_day_reference():
    res = validate_date_entry(datetime(2025, 3, 1, 12, 0), [date(2025, 3, 1)], today=date(2024, 2, 29))
    assert res.is_valid
    assert any("overwritten" in w for w in res.warnings)


# -------------------------
# Helpers
# -------------------------

@pytest.mark.parametrize("text,expected", [("$1,234.50", 1234.5), ("-500", -500.0), (" 42 ", 42.0), ("1.2.3", 1.2)])
def test_sanitize_number_input(text, expected):
    assert sanitize_number_input(text) == expected


def test_sanitize_number_input_nothing_numeric():
    assert math.isnan(sanitize_number_input("abc"))
    assert math.isnan(sanitize_number_input("-"))


def test_format_validation_messages():
    res = validate_net_worth_entry("abc", "def", [])
    msgs = format_validation_messages(res)
    assert msgs.error_message == "Net worth must be a valid number\nCash must be a valid number"
    assert msgs.warning_message is None
