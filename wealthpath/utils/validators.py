from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

import numpy as np
from pydantic import BaseModel

from wealthpath.core.schemas import NetWorthEntry, ValidationMessages, ValidationResult

MAX_NET_WORTH = 1e12
MIN_NET_WORTH = -1e9
MAX_CASH = 1e12

OUTLIER_MIN_HISTORY = 3
OUTLIER_STDEVS = 2.0
JUMP_PCT = 0.5
JUMP_ABS = 10_000

_NUMBER_PREFIX_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")
_STRIP_RE = re.compile(r"[^0-9.\-]")


def _to_number(value: Any) -> Optional[float]:
    """float(value), or None when it is missing, boolean, unparseable or NaN."""
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(out) else out


def validate_net_worth_entry(
    net_worth: Any,
    cash: Any,
    existing_entries: Sequence[NetWorthEntry],
) -> ValidationResult:
    report = ValidationResult()

    nw = _to_number(net_worth)
    c = _to_number(cash)
    if nw is None:
        report.add_error("Net worth must be a valid number")
    if c is None:
        report.add_error("Cash must be a valid number")
    if nw is None or c is None:
        return report.finalize()

    # Ranges
    if nw > MAX_NET_WORTH:
        report.add_error(f"Net worth exceeds maximum value (${MAX_NET_WORTH / 1e12:.0f} trillion)")
    if nw < MIN_NET_WORTH:
        report.add_error(f"Net worth below minimum value (-${abs(MIN_NET_WORTH) / 1e9:.0f} billion)")
    if c > MAX_CASH:
        report.add_error(f"Cash exceeds maximum value (${MAX_CASH / 1e12:.0f} trillion)")
    if c < 0:
        report.add_error("Cash cannot be negative")

    if nw > 0 and c > nw:
        report.add_warning("Cash exceeds total net worth. This is unusual - please verify your numbers.")

    # Outlier vs. history (population std over existing entries only)
    if len(existing_entries) >= OUTLIER_MIN_HISTORY:
        history = np.array([e.total_net_worth for e in existing_entries], dtype=float)
        mean = float(history.mean())
        std = float(history.std())
        if abs(nw - mean) > OUTLIER_STDEVS * std:
            report.add_warning("This value differs significantly from your historical average. Double-check for typos.")

    # Large jump from the previous entry: needs both a 50% and a $10k move
    if existing_entries:
        previous = existing_entries[-1].total_net_worth
        change = nw - previous
        if previous == 0:
            pct = math.inf if change != 0 else 0.0
        else:
            pct = abs(change / previous)

        if pct > JUMP_PCT and abs(change) > JUMP_ABS:
            if math.isinf(pct):
                report.add_warning("Net worth changed from zero at the last entry. Please verify.")
            else:
                report.add_warning(f"Net worth changed by {pct * 100:.0f}% from last entry. Please verify.")

    return report.finalize()


def validate_profile(profile: Union[Mapping[str, Any], BaseModel]) -> ValidationResult:
    """Accepts a full ``Profile`` or a partial mapping from a form."""
    data = profile.model_dump() if isinstance(profile, BaseModel) else dict(profile)
    report = ValidationResult()

    if data.get("age") is not None:
        age = _to_number(data["age"])
        if age is None:
            report.add_error("Age must be a valid number")
        elif age < 18:
            report.add_error("Age must be at least 18")
        elif age > 100:
            report.add_error("Age must be 100 or less")
        elif age < 22:
            report.add_warning("Age below 22 may have limited career data available")

    raw_rate = data.get("savings_rate_percent", data.get("savings_rate"))
    if raw_rate is not None:
        rate = _to_number(raw_rate)
        if rate is None:
            report.add_error("Savings rate must be a valid number")
        elif rate < 0:
            report.add_error("Savings rate cannot be negative")
        elif rate > 100:
            report.add_error("Savings rate cannot exceed 100%")
        elif rate > 80:
            report.add_warning("Savings rate above 80% is extremely high. Please verify.")
        elif rate < 5:
            report.add_warning("Savings rate below 5% may make wealth building difficult")

    if not data.get("occupation"):
        report.add_error("Occupation is required")
    if not data.get("level"):
        report.add_error("Career level is required")
    if not data.get("metro"):
        report.add_error("Metro area is required")

    return report.finalize()


def _shift_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:  # Feb 29 -> Feb 28
        return d.replace(year=d.year + years, day=28)


def validate_date_entry(
    entry_date: Optional[date],
    existing_dates: Iterable[Union[date, str]],
    *,
    today: Optional[date] = None,
) -> ValidationResult:
    report = ValidationResult()

    if entry_date is None:
        report.add_error("Date is required")
        return report.finalize()

    if isinstance(entry_date, datetime):
        entry_date = entry_date.date()
    ref = today or date.today()

    if entry_date > _shift_years(ref, 1):
        report.add_warning("Date is more than 1 year in the future. Please verify.")
    if entry_date < _shift_years(ref, -100):
        report.add_error("Date cannot be more than 100 years in the past")

    # Duplicates overwrite the previous entry rather than being rejected
    iso = entry_date.isoformat()
    seen = {d.isoformat()[:10] if isinstance(d, date) else str(d)[:10] for d in existing_dates}
    if iso in seen:
        report.add_warning("An entry already exists for this date. It will be overwritten.")

    return report.finalize()


def sanitize_number_input(value: str) -> float:
    """'$1,234.50' -> 1234.5; NaN when nothing numeric is left."""
    cleaned = _STRIP_RE.sub("", value or "")
    m = _NUMBER_PREFIX_RE.match(cleaned)
    return float(m.group(0)) if m else math.nan


def format_validation_messages(result: ValidationResult) -> ValidationMessages:
    return ValidationMessages(
        error_message="\n".join(result.errors) if result.errors else None,
        warning_message="\n".join(result.warnings) if result.warnings else None,
    )
