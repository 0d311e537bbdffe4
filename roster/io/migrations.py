"""Versioned migrations from legacy persisted snapshots to the current schema.

Version history:
- 0: untagged. Shifts may carry a day-of-month ``day`` instead of ``date``,
  employees may store their windows as ``unavailability``, and the earliest
  builds kept a single top-level ``shifts`` list with no calendars.
- 1: one or more calendars, ISO ``date`` on every shift, ``availability``
  on every employee.
- 2: shifts carry ``employeeId`` next to the cached ``employeeName``.
"""

from __future__ import annotations

import copy
from calendar import monthrange
from datetime import date
from typing import Callable, Dict, List, Optional

from roster.domain.models import SCHEMA_VERSION

LEGACY_CALENDAR_ID = "cal-default"
LEGACY_CALENDAR_NAME = "Geral"


def _as_day_of_month(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        day = value
    elif isinstance(value, str) and value.strip().isdigit():
        day = int(value.strip())
    else:
        return None
    return day if 1 <= day <= 31 else None


def migrate_shift(record, today: Optional[date] = None):
    """
    Replace a legacy ``day`` with an ISO ``date``.

    The date is synthesized from the current year and month, which is only a
    guess for data saved in another month, so the result is tagged
    ``dateInferred``. Records that already have a ``date``, records that
    match no known shape, and days that do not exist in the current month
    are returned unchanged.
    """
    if not isinstance(record, dict) or "date" in record:
        return record
    day = _as_day_of_month(record.get("day"))
    if day is None:
        return record
    today = today or date.today()
    if day > monthrange(today.year, today.month)[1]:
        print(
            f"[WARN] Leaving shift {record.get('id')!r} unmigrated: day {day} does not exist in {today:%Y-%m}"
        )
        return record
    migrated = {k: v for k, v in record.items() if k != "day"}
    migrated["date"] = f"{today.year:04d}-{today.month:02d}-{day:02d}"
    migrated["dateInferred"] = True
    return migrated


def migrate_employee(record):
    """Rename a legacy ``unavailability`` field to ``availability`` verbatim."""
    if not isinstance(record, dict):
        return record
    if "unavailability" not in record or "availability" in record:
        return record
    return {("availability" if k == "unavailability" else k): v for k, v in record.items()}


def _v0_to_v1(payload: dict, today: date) -> dict:
    if "calendars" not in payload and isinstance(payload.get("shifts"), list):
        print(f"[INFO] Wrapping single-calendar snapshot into calendar '{LEGACY_CALENDAR_NAME}'")
        payload["calendars"] = [
            {"id": LEGACY_CALENDAR_ID, "name": LEGACY_CALENDAR_NAME, "shifts": payload.pop("shifts")}
        ]
        payload.setdefault("activeCalendarId", LEGACY_CALENDAR_ID)

    inferred = 0
    for calendar in payload.get("calendars") or []:
        if not isinstance(calendar, dict) or not isinstance(calendar.get("shifts"), list):
            continue
        shifts = [migrate_shift(s, today) for s in calendar["shifts"]]
        inferred += sum(1 for old, new in zip(calendar["shifts"], shifts) if old is not new)
        calendar["shifts"] = shifts
    if inferred:
        print(f"[WARN] Inferred dates for {inferred} legacy shifts using {today:%Y-%m}; they are tagged dateInferred")

    if isinstance(payload.get("employees"), list):
        payload["employees"] = [migrate_employee(e) for e in payload["employees"]]
    return payload


def _v1_to_v2(payload: dict, today: date) -> dict:
    ids_by_name: Dict[str, List[str]] = {}
    for employee in payload.get("employees") or []:
        if isinstance(employee, dict) and employee.get("name"):
            ids_by_name.setdefault(employee["name"], []).append(employee.get("id"))

    for calendar in payload.get("calendars") or []:
        if not isinstance(calendar, dict):
            continue
        for shift in calendar.get("shifts") or []:
            if not isinstance(shift, dict) or "employeeId" in shift:
                continue
            ids = ids_by_name.get(shift.get("employeeName") or "", [])
            shift["employeeId"] = ids[0] if len(ids) == 1 else None
    return payload


MIGRATIONS: Dict[int, Callable[[dict, date], dict]] = {
    0: _v0_to_v1,
    1: _v1_to_v2,
}


def detect_version(payload: dict) -> int:
    version = payload.get("schemaVersion", 0)
    if isinstance(version, bool) or not isinstance(version, int) or version < 0:
        return 0
    return version


def migrate_snapshot(payload, today: Optional[date] = None):
    """
    Bring a persisted snapshot up to the current schema version.

    Migration is idempotent: a current snapshot comes back equal to itself.
    Payloads that are not mappings, or that claim a newer version than this
    code knows, are returned unchanged.
    """
    if not isinstance(payload, dict):
        print(f"[WARN] Snapshot is not a mapping ({type(payload).__name__}); leaving it unchanged")
        return payload
    version = detect_version(payload)
    if version > SCHEMA_VERSION:
        print(f"[WARN] Snapshot schema version {version} is newer than {SCHEMA_VERSION}; leaving it unchanged")
        return payload

    today = today or date.today()
    migrated = copy.deepcopy(payload)
    while version < SCHEMA_VERSION:
        migrated = MIGRATIONS[version](migrated, today)
        version += 1
        print(f"[INFO] Migrated snapshot to schema version {version}")
    migrated["schemaVersion"] = SCHEMA_VERSION
    return migrated
