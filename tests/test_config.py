import pytest

from wealthpath.core.config import load_settings

_KEYS = [
    "APP_ENV", "LOG_LEVEL", "DEFAULT_ANNUAL_RETURN", "DEFAULT_WITHDRAWAL_RATE", "CAREER_GROWTH_RATE",
    "FALLBACK_SAVINGS_RATE", "DEVIATION_THRESHOLD_PCT", "DISMISSAL_DAYS", "YEARS_CAP",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for k in _KEYS:
        monkeypatch.delenv(k, raising=False)


def test_defaults_without_config(tmp_path):
    s = load_settings(str(tmp_path / "missing.yaml"))
    assert s.default_annual_return == 0.07
    assert s.default_withdrawal_rate == 0.04
    assert s.fallback_savings_rate == 0.25
    assert s.deviation_threshold_pct == 10.0
    assert s.dismissal_days == 30
    assert s.years_cap == 99


def test_yaml_then_env_override(tmp_path, monkeypatch):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("app:\n  log_level: debug\nassumptions:\n  annual_return: 0.05\ndeviation:\n  threshold_pct: 15\n", encoding="utf-8")
    s = load_settings(str(cfg))
    assert s.log_level == "DEBUG"
    assert s.default_annual_return == 0.05
    assert s.deviation_threshold_pct == 15.0

    monkeypatch.setenv("DEFAULT_ANNUAL_RETURN", "0.06")
    monkeypatch.setenv("DEVIATION_THRESHOLD_PCT", "")
    s = load_settings(str(cfg))
    assert s.default_annual_return == 0.06
    assert s.deviation_threshold_pct == 15.0


def test_rejects_non_positive_withdrawal_rate(tmp_path, monkeypatch):
    monkeypatch.setenv("DEFAULT_WITHDRAWAL_RATE", "0")
    with pytest.raises(ValueError):
        load_settings(str(tmp_path / "missing.yaml"))
