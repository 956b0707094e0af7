from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict

import yaml
from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    env: str
    log_level: str

    default_annual_return: float
    default_withdrawal_rate: float
    career_growth_rate: float
    fallback_savings_rate: float

    deviation_threshold_pct: float
    dismissal_days: int

    years_cap: int


def _deep_get(d: Dict[str, Any], path: str, default=None):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def load_settings(config_path: str = "config.yaml") -> Settings:
    """
    Loads config.yaml + overrides from .env/environment variables.
    """
    load_dotenv()  # loads .env into env vars

    cfg: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}

    # Empty env vars count as "not set" so a stray DEFAULT_ANNUAL_RETURN=""
    # cannot shadow config.yaml.
    def _env_or_cfg(key: str, cfg_path: str, default):
        v = os.getenv(key)
        if v is None:
            return _deep_get(cfg, cfg_path, default)
        v = v.strip()
        return _deep_get(cfg, cfg_path, default) if v == "" else v

    env = _env_or_cfg("APP_ENV", "app.env", "dev")
    log_level = _env_or_cfg("LOG_LEVEL", "app.log_level", "INFO")

    default_annual_return = float(_env_or_cfg("DEFAULT_ANNUAL_RETURN", "assumptions.annual_return", 0.07))
    default_withdrawal_rate = float(_env_or_cfg("DEFAULT_WITHDRAWAL_RATE", "assumptions.withdrawal_rate", 0.04))
    career_growth_rate = float(_env_or_cfg("CAREER_GROWTH_RATE", "assumptions.career_growth_rate", 0.03))
    fallback_savings_rate = float(_env_or_cfg("FALLBACK_SAVINGS_RATE", "assumptions.fallback_savings_rate", 0.25))

    deviation_threshold_pct = float(_env_or_cfg("DEVIATION_THRESHOLD_PCT", "deviation.threshold_pct", 10.0))
    dismissal_days = int(_env_or_cfg("DISMISSAL_DAYS", "deviation.dismissal_days", 30))

    years_cap = int(_env_or_cfg("YEARS_CAP", "display.years_cap", 99))

    if default_withdrawal_rate <= 0:
        raise ValueError("assumptions.withdrawal_rate must be positive")

    return Settings(
        env=str(env),
        log_level=str(log_level).upper(),
        default_annual_return=default_annual_return,
        default_withdrawal_rate=default_withdrawal_rate,
        career_growth_rate=career_growth_rate,
        fallback_savings_rate=fallback_savings_rate,
        deviation_threshold_pct=deviation_threshold_pct,
        dismissal_days=dismissal_days,
        years_cap=years_cap,
    )


# Optional convenience singleton
SETTINGS = load_settings()
