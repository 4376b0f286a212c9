"""Centralized Timezone Utilities - All datetime operations should use these functions."""

import calendar
from datetime import datetime, timedelta, timezone
from typing import Optional

UTC = timezone.utc


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(UTC)


def subtract_months(dt: datetime, months: int) -> datetime:
    """Step back whole calendar months, clamping the day to the target month."""
    month_index = dt.year * 12 + (dt.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return dt.replace(year=year, month=month, day=min(dt.day, last_day))


def window_start(period: str, now: Optional[datetime] = None) -> datetime:
    """
    Start of a reporting window ending at ``now``.

    Admin analytics use month-based periods (1month, 3months, 6months, 1year);
    clothing usage uses week, month and year.
    """
    now = now or utc_now()
    if period == "week":
        return now - timedelta(days=7)
    if period in ("month", "1month"):
        return subtract_months(now, 1)
    if period == "3months":
        return subtract_months(now, 3)
    if period == "6months":
        return subtract_months(now, 6)
    if period in ("year", "1year"):
        return subtract_months(now, 12)
    raise ValueError(f"Unknown period: {period}")
