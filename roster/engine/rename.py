"""Propagate employee and role renames into stored shifts."""

from __future__ import annotations

from typing import Dict, Iterable

from roster.domain.colors import ColorMeaningRegistry
from roster.domain.models import Calendar, Employee


def rename_employee_in_shifts(calendars: Iterable[Calendar], employee: Employee, new_name: str) -> int:
    """
    Point every shift owned by ``employee`` at ``new_name``.

    Ownership is checked against the employee record as it was before the
    rename, so name-keyed shifts still match the old name.

    Returns:
        Number of shifts rewritten
    """
    count = 0
    for calendar in calendars:
        for shift in calendar.shifts:
            if shift.is_owned_by(employee):
                shift.employee_name = new_name
                shift.employee_id = employee.id
                count += 1
    return count


def rename_roles_in_shifts(
    calendars: Iterable[Calendar],
    renames: Dict[str, str],
    registry: ColorMeaningRegistry,
) -> int:
    """
    Rewrite shift roles using an old meaning -> new meaning map.

    Each shift is looked up once against its original role, so swapped
    meanings (A -> B and B -> A in the same change) do not chain.

    Returns:
        Number of shifts rewritten
    """
    if not renames:
        return 0
    count = 0
    for calendar in calendars:
        for shift in calendar.shifts:
            new_role = renames.get(shift.role)
            if new_role is None:
                continue
            shift.role = new_role
            shift.color = registry.color_for(new_role)
            count += 1
    return count
