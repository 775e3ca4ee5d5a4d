"""Unit tests for calendar month arithmetic"""

import pytest
from datetime import date, datetime, timezone
from wallet_engine.domain.exceptions import InvalidTimestampError
from wallet_engine.utils.date_utils import add_months, ensure_comparable, is_aware, now_like, whole_months_between


def test_add_months_clamps_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2025, 3, 15), 12) == date(2026, 3, 15)


def test_whole_months_floor():
    start = datetime(2025, 1, 15, 9, 0)

    assert whole_months_between(start, datetime(2025, 2, 15, 8, 59)) == 0
    assert whole_months_between(start, datetime(2025, 2, 15, 9, 0)) == 1
    assert whole_months_between(start, datetime(2026, 1, 14)) == 11
    assert whole_months_between(start, datetime(2026, 1, 15, 9, 0)) == 12


def test_whole_months_consistent_with_add_months():
    """Anniversary of a month-end start counts as a full month"""
    start = date(2025, 1, 31)
    assert whole_months_between(start, add_months(start, 1)) == 1
    assert whole_months_between(start, add_months(start, 6)) == 6


def test_whole_months_before_start():
    assert whole_months_between(date(2025, 5, 1), date(2025, 1, 1)) == 0


def test_now_like_matches_awareness():
    assert now_like(datetime(2025, 1, 1)).tzinfo is None
    assert now_like(datetime(2025, 1, 1, tzinfo=timezone.utc)).tzinfo is timezone.utc


def test_is_aware():
    assert is_aware(datetime(2025, 1, 15, tzinfo=timezone.utc)) is True
    assert is_aware(datetime(2025, 1, 15)) is False
    assert is_aware(date(2025, 1, 15)) is False


def test_ensure_comparable():
    aware = datetime(2025, 1, 15, tzinfo=timezone.utc)
    naive = datetime(2025, 1, 15)

    assert ensure_comparable(aware, aware) is aware
    assert ensure_comparable(naive, naive) is naive

    with pytest.raises(InvalidTimestampError):
        ensure_comparable(aware, naive)
    with pytest.raises(InvalidTimestampError):
        ensure_comparable(naive, aware)
    with pytest.raises(InvalidTimestampError, match="Expected a datetime"):
        ensure_comparable(aware, "2025-01-15")
