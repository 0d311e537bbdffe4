"""Calendar-date helpers for shift dates and month scopes."""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional, Tuple

import pandas as pd

from roster.exceptions import RosterValidationError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH = re.compile(r"^(\d{4})-(\d{2})$")

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def parse_shift_date(value) -> Optional[date]:
    """Parse a stored ``YYYY-MM-DD`` shift date; None when it is not one."""
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_month(month: str) -> Tuple[int, int]:
    """Parse ``YYYY-MM`` into (year, month)."""
    m = _MONTH.match(month or "")
    if not m or not 1 <= int(m.group(2)) <= 12:
        raise RosterValidationError(f"Invalid month '{month}', expected YYYY-MM")
    return int(m.group(1)), int(m.group(2))


def in_month(day: date, year: int, month: int) -> bool:
    return day.year == year and day.month == month


def month_days(month: str) -> List[str]:
    """All dates of a ``YYYY-MM`` month as ISO strings."""
    year, mon = parse_month(month)
    start = pd.Timestamp(year=year, month=mon, day=1)
    days = pd.date_range(start, periods=start.days_in_month, freq="D")
    return [d.strftime("%Y-%m-%d") for d in days]


def day_name(day: date) -> str:
    """English weekday name, e.g. ``Monday``."""
    return pd.Timestamp(day).day_name()
