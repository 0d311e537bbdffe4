"""CSV export utilities for roster reports."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd

from roster.services.report import build_month_report


def export_month_report_csv(store, csv_path: str | Path, month: str, scope: Optional[str] = None) -> int:
    """
    Export the monthly employee-by-day grid to CSV.

    Args:
        store: RosterStore to read
        csv_path: Path to output CSV
        month: Month in YYYY-MM format
        scope: Calendar id or "all" (default: active scope)

    Returns:
        Number of employee rows exported
    """
    df = build_month_report(store, month, scope)
    df.to_csv(csv_path, index=False)

    print(f"[INFO] Exported report for {month} ({len(df)} employees) to {csv_path}")
    return len(df)


def export_employees_csv(store, csv_path: str | Path) -> int:
    """
    Export employees to CSV.

    Args:
        store: RosterStore to read
        csv_path: Path to output CSV

    Returns:
        Number of employees exported
    """
    records = []
    for emp in store.employees:
        records.append({
            'id': emp.id,
            'name': emp.name,
            'role_id': emp.role_id,
            'preferences': emp.preferences,
            'calendar_ids': ";".join(emp.calendar_ids),
        })

    df = pd.DataFrame(records, columns=['id', 'name', 'role_id', 'preferences', 'calendar_ids'])
    df.to_csv(csv_path, index=False)

    print(f"[INFO] Exported {len(records)} employees to {csv_path}")
    return len(records)
