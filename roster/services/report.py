"""Monthly employee-by-day report."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional

import pandas as pd

from roster.services.dates import month_days
from roster.services.search import filter_by_month


def build_month_report(store, month: str, scope: Optional[str] = None) -> pd.DataFrame:
    """
    Build the monthly roster grid.

    Args:
        store: RosterStore to read
        month: Month in YYYY-MM format
        scope: Calendar id or "all" (default: the store's active scope)

    Returns:
        DataFrame with an ``employee`` column plus one column per day
        (YYYY-MM-DD). Cells hold the comma-joined roles worked that day, the
        day event's label on event dates, or an empty string.
    """
    days = month_days(month)
    views = filter_by_month(store.visible_shifts(scope), month)
    events = {v.shift.date: v.shift.role for v in views if v.shift.is_day_event}

    employees = sorted(store.visible_employees(scope), key=lambda e: e.name.casefold())
    rows = []
    for employee in employees:
        by_day: Dict[str, List] = defaultdict(list)
        for view in views:
            if not view.shift.is_day_event and view.shift.is_owned_by(employee):
                by_day[view.shift.date].append(view.shift)
        row = {"employee": employee.name}
        for day in days:
            if day in events:
                row[day] = events[day]
            else:
                shifts = sorted(by_day.get(day, []), key=lambda s: s.start_time)
                row[day] = ", ".join(s.role for s in shifts)
        rows.append(row)

    return pd.DataFrame(rows, columns=["employee", *days])


def hours_by_employee(store, month: str, scope: Optional[str] = None) -> pd.Series:
    """Hours worked per employee name in the month (day events excluded)."""
    views = [v for v in filter_by_month(store.visible_shifts(scope), month) if not v.shift.is_day_event]
    if not views:
        return pd.Series(dtype=float)
    df = pd.DataFrame(
        [
            {"employee": v.shift.employee_name, "start": v.shift.start_time, "end": v.shift.end_time}
            for v in views
        ]
    )
    start = pd.to_timedelta(df["start"] + ":00", errors="coerce")
    end = pd.to_timedelta(df["end"] + ":00", errors="coerce")
    # Shifts ending at or before their start run past midnight.
    span = end - start
    span = span.where(span > pd.Timedelta(0), span + pd.Timedelta(days=1))
    df["hours"] = span.dt.total_seconds() / 3600.0
    return df.dropna(subset=["hours"]).groupby("employee")["hours"].sum().sort_values(ascending=False)
