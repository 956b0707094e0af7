from datetime import date

import pytest

from wealthpath.core.schemas import NetWorthEntry, TrajectoryPoint
from wealthpath.utils.answer_format import format_velocity
from wealthpath.utils.velocity import calculate_velocity, get_velocity_description, get_velocity_recommendations


def _points(*rows):
    return [TrajectoryPoint(date=d, net_worth=v) for d, v in rows]


def test_needs_two_points():
    res = calculate_velocity(_points(("2024-01-01", 100000)))
    assert res.segments == []
    assert res.data_point_count == 1
    assert res.has_minimum_data is False
    assert res.overall_velocity == 0


def test_single_segment_rates():
    res = calculate_velocity(_points(("2023-01-01", 100000), ("2024-01-01", 110000)))
    (seg,) = res.segments
    assert seg.duration_days == 365
    assert seg.velocity == pytest.approx(10000 / 365)
    assert seg.annualized_rate == pytest.approx(10.0)
    assert res.average_annualized_rate == pytest.approx(10.0)


def test_smoothing_classification_and_overall():
    # raw velocities 100, 200, 300 $/day on 365-day segments
    res = calculate_velocity(_points(
        ("2021-01-01", 100000), ("2022-01-01", 136500), ("2023-01-01", 209500), ("2024-01-01", 319000),
    ))
    assert [s.velocity for s in res.segments] == pytest.approx([150, 250, 300])
    assert [s.type for s in res.segments] == ["moderate", "moderate", "high-growth"]
    assert res.segments[-1].color == "#10b981"
    assert res.overall_velocity == pytest.approx(200)
    assert res.has_minimum_data is False
    assert get_velocity_recommendations(res) == ["Track your net worth more frequently (monthly is ideal)"]


def test_unsorted_input_and_same_day_pairs():
    res = calculate_velocity(_points(
        ("2024-03-01", 120000), ("2024-01-01", 100000), ("2024-01-01", 101000),
    ))
    assert res.data_point_count == 3
    assert len(res.segments) == 1
    assert res.segments[0].start_date == date(2024, 1, 1)


def test_declining_recent_history():
    entries = [
        NetWorthEntry(date=d, total_net_worth=v)
        for d, v in [("2020-01-01", 100000), ("2021-01-01", 200000), ("2022-01-01", 300000),
                     ("2023-01-01", 250000), ("2024-01-01", 200000)]
    ]
    res = calculate_velocity(entries)
    assert res.has_minimum_data is True
    assert "Good data coverage" in res.recommendation
    assert [s.type for s in res.segments[-2:]] == ["declining", "declining"]
    recs = get_velocity_recommendations(res)
    assert recs[0].startswith("Review recent expenses")
    assert get_velocity_description("declining").startswith("Declining wealth")


def test_non_positive_start_has_zero_rate():
    res = calculate_velocity(_points(("2023-01-01", -5000), ("2024-01-01", 5000), ("2025-01-01", -1000)))
    assert res.segments[0].annualized_rate == 0
    assert res.segments[1].annualized_rate == -100


@pytest.mark.parametrize("value,expected", [
    (0.2, "$73/year"), (50, "$50/day"), (500, "$3500/week"), (2000, "$60000/month"), (-50, "$-50/day"),
])
def test_format_velocity(value, expected):
    assert format_velocity(value) == expected
