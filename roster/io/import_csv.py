"""CSV import utilities to load employees into the roster."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pandas as pd

from roster.exceptions import RosterValidationError


def import_employees_csv(engine, csv_path: str | Path) -> int:
    """
    Import employees from CSV through the mutation API.

    Expects a ``name`` column; ``preferences`` and ``role_id`` are optional.
    New employees join the active calendar, as with any added employee.

    Args:
        engine: RosterEngine to add employees through
        csv_path: Path to employees CSV

    Returns:
        Number of employees imported
    """
    df = pd.read_csv(csv_path, dtype=str)

    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()
    if 'name' not in df.columns:
        raise RosterValidationError(f"{csv_path} has no 'name' column")

    df = df[df['name'].notna() & (df['name'].str.strip() != '')]

    count = 0
    for _, row in df.iterrows():
        emp = engine.add_employee(str(row['name']))
        preferences = row.get('preferences')
        role_id = row.get('role_id')
        if pd.notna(preferences) or pd.notna(role_id):
            engine.update_employee(replace(
                emp,
                preferences=str(preferences) if pd.notna(preferences) else emp.preferences,
                role_id=str(role_id) if pd.notna(role_id) else emp.role_id,
            ))
        count += 1

    print(f"[INFO] Imported {count} employees from {csv_path}")
    return count
