"""Tests for timezone helpers."""

import pytest
from datetime import datetime, timedelta, timezone

from glamora.utils.timezone_utils import subtract_months, window_start


NOW = datetime(2024, 3, 31, 10, 0, tzinfo=timezone.utc)


def test_subtract_months_clamps_day():
    assert subtract_months(NOW, 1) == datetime(2024, 2, 29, 10, 0, tzinfo=timezone.utc)


def test_subtract_months_crosses_year():
    assert subtract_months(NOW, 6) == datetime(2023, 9, 30, 10, 0, tzinfo=timezone.utc)
    assert subtract_months(NOW, 12) == datetime(2023, 3, 31, 10, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("period,expected", [
    ("week", NOW - timedelta(days=7)),
    ("month", datetime(2024, 2, 29, 10, 0, tzinfo=timezone.utc)),
    ("1month", datetime(2024, 2, 29, 10, 0, tzinfo=timezone.utc)),
    ("3months", datetime(2023, 12, 31, 10, 0, tzinfo=timezone.utc)),
    ("6months", datetime(2023, 9, 30, 10, 0, tzinfo=timezone.utc)),
    ("1year", datetime(2023, 3, 31, 10, 0, tzinfo=timezone.utc)),
    ("year", datetime(2023, 3, 31, 10, 0, tzinfo=timezone.utc)),
])
def test_window_start(period, expected):
    assert window_start(period, NOW) == expected


def test_window_start_unknown_period():
    with pytest.raises(ValueError):
        window_start("fortnight", NOW)
