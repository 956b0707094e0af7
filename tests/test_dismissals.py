from datetime import datetime, timedelta, UTC

from wealthpath.utils.dismissals import InMemoryDismissalStore, dismiss_alert, is_dismissed

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


def test_not_dismissed_by_default():
    assert is_dismissed(InMemoryDismissalStore(), "4_2024-07-01", now=NOW) is False


def test_dismissed_within_window():
    store = InMemoryDismissalStore()
    dismiss_alert(store, "4_2024-07-01", now=NOW)
    assert is_dismissed(store, "4_2024-07-01", now=NOW + timedelta(days=29))
    assert not is_dismissed(store, "5_2024-08-01", now=NOW)


def test_dismissal_expires_after_30_days():
    store = InMemoryDismissalStore()
    dismiss_alert(store, "a", now=NOW - timedelta(days=31))
    assert not is_dismissed(store, "a", now=NOW)
    assert is_dismissed(store, "a", now=NOW, days=60)


def test_last_write_wins():
    store = InMemoryDismissalStore()
    dismiss_alert(store, "a", now=NOW - timedelta(days=40))
    dismiss_alert(store, "a", now=NOW)
    assert store.get("a") == NOW
    assert is_dismissed(store, "a", now=NOW + timedelta(days=1))


def test_clear_and_delete():
    store = InMemoryDismissalStore()
    dismiss_alert(store, "a", now=NOW)
    dismiss_alert(store, "b", now=NOW)
    store.delete("a")
    assert store.get("a") is None
    store.clear()
    assert store.get("b") is None


def test_naive_and_aware_timestamps_compare_as_utc():
    store = InMemoryDismissalStore()
    dismiss_alert(store, "a", now=NOW.replace(tzinfo=None))
    assert store.get("a") == NOW
    assert is_dismissed(store, "a", now=NOW + timedelta(days=1))
    assert is_dismissed(store, "a", now=(NOW + timedelta(days=1)).replace(tzinfo=None))
    assert not is_dismissed(store, "a", now=(NOW + timedelta(days=31)).replace(tzinfo=None))


def test_store_with_naive_timestamp_against_default_clock():
    store = InMemoryDismissalStore()
    store.put("a", datetime(2000, 1, 1))
    assert is_dismissed(store, "a") is False
