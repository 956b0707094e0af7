from datetime import date, timedelta

import pytest

from wealthpath.core.schemas import NetWorthEntry, TrajectoryPoint
from wealthpath.utils.deviation import deviation_alert_id, detect_deviation, score_confidence

BASE = [("2024-01-01", 100000), ("2024-03-01", 105000), ("2024-05-01", 110000)]


def _points(rows):
    return [TrajectoryPoint(date=d, net_worth=v) for d, v in rows]


def _linear(n, step=1000.0):
    start = date(2022, 1, 1)
    return [TrajectoryPoint(date=start + timedelta(days=30 * i), net_worth=100000 + step * i) for i in range(n)]


def test_insufficient_history_returns_none():
    assert detect_deviation(_points(BASE[:2])) is None
    assert detect_deviation([]) is None


def test_on_track():
    res = detect_deviation(_points(BASE + [("2024-07-01", 115000)]))
    assert res is not None
    assert not res.has_deviation
    assert abs(res.deviation_percent) < 10
    assert "tracking" in res.message
    assert res.recommendations


def test_ahead_of_trend():
    res = detect_deviation(_points(BASE + [("2024-07-01", 130000)]))
    assert res.has_deviation
    assert res.is_ahead
    assert res.deviation_percent > 10
    assert res.z_score > 0
    assert "ahead" in res.message
    assert res.recommendations[0] == "Keep up your current savings and investment strategy"


def test_behind_trend():
    res = detect_deviation(_points(BASE + [("2024-07-01", 100000)]))
    assert res.has_deviation
    assert not res.is_ahead
    assert res.deviation_percent < -10
    assert "behind" in res.message
    assert "Small course corrections can get you back on track" in res.recommendations


def test_far_behind_gets_corrective_tips():
    res = detect_deviation(_points(BASE + [("2024-07-01", 80000)]))
    assert res.has_deviation
    assert "Consider increasing your savings rate" in res.recommendations
    assert "Review your budget and cut discretionary spending" in res.recommendations
    assert "Check if investment allocations need rebalancing" in res.recommendations


def test_fields_are_consistent():
    res = detect_deviation(_points(BASE + [("2024-07-01", 130000)]))
    assert res.actual_value == 130000
    assert res.deviation_amount == pytest.approx(res.actual_value - res.expected_value)
    assert res.deviation_percent == pytest.approx(res.deviation_amount / res.expected_value * 100)
    assert len(set(res.recommendations)) == len(res.recommendations)


def test_threshold_is_configurable():
    pts = _points(BASE + [("2024-07-01", 130000)])
    assert detect_deviation(pts, threshold_pct=10).has_deviation
    assert not detect_deviation(pts, threshold_pct=20).has_deviation


def test_accepts_unsorted_net_worth_entries():
    entries = [NetWorthEntry(date=d, total_net_worth=v) for d, v in reversed(BASE + [("2024-07-01", 130000)])]
    res = detect_deviation(entries)
    assert res.actual_value == 130000


def test_degenerate_histories_return_none():
    same_day = _points([("2024-01-01", 100), ("2024-01-01", 200), ("2024-02-01", 300)])
    assert detect_deviation(same_day) is None
    zero_trend = _points([("2024-01-01", 0), ("2024-02-01", 0), ("2024-03-01", 5000)])
    assert detect_deviation(zero_trend) is None


def test_flat_history_is_on_track():
    res = detect_deviation(_points([("2024-01-01", 5000), ("2024-02-01", 5000), ("2024-03-01", 5000)]))
    assert res.expected_value == pytest.approx(5000)
    assert not res.has_deviation


def test_confidence_bounded_and_monotonic_in_sample_size():
    scores = [detect_deviation(_linear(n)).confidence for n in range(3, 20)]
    assert all(0 <= s <= 100 for s in scores)
    assert all(a <= b for a, b in zip(scores, scores[1:]))
    assert scores[-1] == 100


def test_low_confidence_adds_note():
    res = detect_deviation(_linear(3))
    assert res.confidence < 50
    assert res.recommendations[-1].startswith("Note:")


def test_noisy_trend_lowers_confidence():
    smooth = detect_deviation(_linear(8))
    noisy_rows = [TrajectoryPoint(date=p.date, net_worth=p.net_worth + (15000 if i % 2 else -15000))
                  for i, p in enumerate(_linear(8))]
    noisy = detect_deviation(noisy_rows)
    assert noisy.confidence < smooth.confidence


@pytest.mark.parametrize("r2", [-3.0, 0.0, 0.4, 1.0, 2.0])
@pytest.mark.parametrize("n", [0, 3, 10, 500])
def test_score_confidence_range(n, r2):
    assert 0 <= score_confidence(n, r2, max(0, n - 1)) <= 100


def test_alert_id():
    pts = _points(BASE + [("2024-07-01", 130000)])
    assert deviation_alert_id(pts) == "4_2024-07-01"
    assert deviation_alert_id([]) == "0_"
