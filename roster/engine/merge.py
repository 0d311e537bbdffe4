"""Fold a batch of suggested assignments into calendar shift sets."""

from __future__ import annotations

import itertools
import time
from collections import defaultdict
from typing import Dict, List, Sequence

from roster.domain.models import Shift
from roster.exceptions import RosterValidationError


def suggestion_id(batch_stamp: int, index: int) -> str:
    return f"suggested-{batch_stamp}-{index}"


def merge_suggestions(store, assignments: Sequence, batch_stamp: int | None = None) -> List[Shift]:
    """
    Append one new shift per suggested assignment to its target calendar.

    Each assignment needs ``employee_id``, ``calendar_id``, ``shift_date``,
    ``shift_start_time``, ``shift_end_time`` and ``role``. Every target
    calendar and employee is resolved before anything is inserted; an
    unknown reference rejects the whole batch. Existing shifts are never
    replaced or deduplicated. Ids already present in the store are skipped,
    so batches merged within the same millisecond never share an id.

    Args:
        store: RosterStore to merge into
        assignments: Validated suggestion assignments
        batch_stamp: Millisecond stamp for the generated ids (default: now)

    Returns:
        The shifts that were added, in input order
    """
    if not assignments:
        return []

    for item in assignments:
        if store.find_calendar(item.calendar_id) is None:
            raise RosterValidationError(f"Suggestion targets unknown calendar '{item.calendar_id}'")
        if store.find_employee(item.employee_id) is None:
            raise RosterValidationError(f"Suggestion references unknown employee '{item.employee_id}'")

    if batch_stamp is None:
        batch_stamp = int(time.time() * 1000)

    taken = {s.id for c in store.calendars for s in c.shifts}
    indexes = itertools.count()
    by_calendar: Dict[str, List[Shift]] = defaultdict(list)
    added: List[Shift] = []
    for item in assignments:
        shift_id = suggestion_id(batch_stamp, next(indexes))
        while shift_id in taken:
            shift_id = suggestion_id(batch_stamp, next(indexes))
        taken.add(shift_id)
        employee = store.find_employee(item.employee_id)
        shift = Shift(
            id=shift_id,
            date=item.shift_date,
            role=item.role,
            employee_name=employee.name,
            employee_id=employee.id,
            start_time=item.shift_start_time,
            end_time=item.shift_end_time,
            color=store.registry.color_for(item.role),
        )
        by_calendar[item.calendar_id].append(shift)
        added.append(shift)

    for calendar_id, shifts in by_calendar.items():
        store.find_calendar(calendar_id).shifts.extend(shifts)
        print(f"[INFO] Merged {len(shifts)} suggested shifts into calendar {calendar_id}")

    return added
