from __future__ import annotations

import threading
from datetime import datetime, timedelta, UTC
from typing import Dict, Optional, Protocol

from wealthpath.core.config import SETTINGS


class DismissalStore(Protocol):
    """Key/value record of alert id -> time the alert was dismissed."""

    def get(self, alert_id: str) -> Optional[datetime]: ...

    def put(self, alert_id: str, dismissed_at: datetime) -> None: ...


class InMemoryDismissalStore:
    """
    Simple in-memory dismissal record.
    - Thread-safe
    - Last write wins
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: Dict[str, datetime] = {}

    def get(self, alert_id: str) -> Optional[datetime]:
        with self._lock:
            return self._store.get(alert_id)

    def put(self, alert_id: str, dismissed_at: datetime) -> None:
        with self._lock:
            self._store[alert_id] = dismissed_at

    def delete(self, alert_id: str) -> None:
        with self._lock:
            self._store.pop(alert_id, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


def _now() -> datetime:
    return datetime.now(UTC)


def _as_utc(ts: datetime) -> datetime:
    # naive timestamps are taken to be UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def dismiss_alert(store: DismissalStore, alert_id: str, now: Optional[datetime] = None) -> None:
    store.put(alert_id, _as_utc(now or _now()))


def is_dismissed(
    store: DismissalStore,
    alert_id: str,
    now: Optional[datetime] = None,
    days: Optional[int] = None,
) -> bool:
    """True while ``now`` is within ``days`` (default 30) of the recorded dismissal."""
    dismissed_at = store.get(alert_id)
    if dismissed_at is None:
        return False
    window = timedelta(days=SETTINGS.dismissal_days if days is None else days)
    return _as_utc(now or _now()) < _as_utc(dismissed_at) + window
