"""Mutation API: every state change to the roster goes through RosterEngine."""

from __future__ import annotations

import itertools
import time
from dataclasses import replace
from datetime import date
from typing import Iterable, List, Optional, Sequence

from roster.domain.colors import PALETTE, ColorMeaning, ColorMeaningRegistry
from roster.domain.models import ALL_CALENDARS, DAY_EVENT_END, DAY_EVENT_START, Calendar, Employee, Shift
from roster.domain.store import RosterStore
from roster.exceptions import RosterValidationError
from roster.services.dates import in_month, parse_month, parse_shift_date

from .merge import merge_suggestions
from .rename import rename_employee_in_shifts, rename_roles_in_shifts


def normalize_name(name: str) -> str:
    """Title-case each word: ``"ana  maria"`` -> ``"Ana Maria"``."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.split())


class RosterEngine:
    """
    Applies mutations to a RosterStore.

    Each public method runs to completion against the store and then commits,
    which publishes the new snapshot to the store's listeners. Rejected
    operations raise RosterValidationError before touching the store; lookup
    failures on unknown ids return False and commit nothing.
    """

    def __init__(self, store: RosterStore, default_start: str = "09:00", default_end: str = "17:00"):
        self.store = store
        self.default_start = default_start
        self.default_end = default_end
        self._seq = itertools.count(1)

    def _new_id(self, prefix: str = "") -> str:
        return f"{prefix}{int(time.time() * 1000)}-{next(self._seq)}"

    # Employees

    def add_employee(self, name: str) -> Employee:
        active = self.store.active_calendar
        employee = Employee(
            id=self._new_id("emp-"),
            name=normalize_name(name),
            calendar_ids=[active.id] if active is not None else [],
        )
        self.store.employees.append(employee)
        self.store.commit()
        return employee

    def update_employee(self, employee: Employee) -> bool:
        """Replace an employee by id, carrying a name change into their shifts."""
        for index, current in enumerate(self.store.employees):
            if current.id != employee.id:
                continue
            if current.name != employee.name:
                count = rename_employee_in_shifts(self.store.calendars, current, employee.name)
                print(f"[INFO] Renamed '{current.name}' to '{employee.name}' in {count} shifts")
            self.store.employees[index] = employee
            self.store.commit()
            return True
        return False

    def delete_employee(self, employee_id: str) -> bool:
        """Remove an employee and every shift they own."""
        employee = self.store.find_employee(employee_id)
        if employee is None:
            return False
        removed = 0
        for calendar in self.store.calendars:
            kept = [s for s in calendar.shifts if not s.is_owned_by(employee)]
            removed += len(calendar.shifts) - len(kept)
            calendar.shifts = kept
        self.store.employees = [e for e in self.store.employees if e.id != employee_id]
        print(f"[INFO] Deleted employee '{employee.name}' and {removed} shifts")
        self.store.commit()
        return True

    # Shifts

    def add_shift(
        self,
        date: str,
        role: str,
        employee_name: str,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> Shift:
        """Add a shift to the active calendar; times default to the configured shift."""
        calendar = self.store.active_calendar
        if calendar is None:
            raise RosterValidationError("Select a specific calendar before adding a shift")
        if parse_shift_date(date) is None:
            raise RosterValidationError(f"Invalid shift date '{date}', expected YYYY-MM-DD")
        shift = Shift(
            id=self._new_id(),
            date=date,
            role=role,
            employee_name=employee_name,
            employee_id=self.store.resolve_employee_id(employee_name),
            start_time=start_time or self.default_start,
            end_time=end_time or self.default_end,
            color=self.store.registry.color_for(role),
        )
        calendar.shifts.append(shift)
        self.store.commit()
        return shift

    def update_shift(self, shift: Shift) -> bool:
        """Replace a shift in whichever calendar owns it, re-deriving its color."""
        if parse_shift_date(shift.date) is None:
            raise RosterValidationError(f"Invalid shift date '{shift.date}', expected YYYY-MM-DD")
        found = self.store.find_shift(shift.id)
        if found is None:
            return False
        calendar, current = found

        employee_id = shift.employee_id
        if shift.employee_name != current.employee_name or employee_id is None:
            employee_id = self.store.resolve_employee_id(shift.employee_name)

        registry = self.store.registry
        color = registry.color_for(shift.role)
        if current.is_day_event and registry.find_by_meaning(shift.role) is None:
            # Day events keep the color they were created with.
            color = current.color

        updated = replace(shift, employee_id=employee_id, color=color, date_inferred=False)
        calendar.shifts = [updated if s.id == shift.id else s for s in calendar.shifts]
        self.store.commit()
        return True

    def delete_shift(self, shift_id: str) -> bool:
        found = self.store.find_shift(shift_id)
        if found is None:
            return False
        calendar, _ = found
        calendar.shifts = [s for s in calendar.shifts if s.id != shift_id]
        self.store.commit()
        return True

    def swap_shift(self, shift_id: str, employee_id: str) -> bool:
        """Hand a shift over to another employee."""
        found = self.store.find_shift(shift_id)
        employee = self.store.find_employee(employee_id)
        if found is None or employee is None:
            return False
        _, shift = found
        shift.employee_name = employee.name
        shift.employee_id = employee.id
        self.store.commit()
        return True

    def add_day_event(self, date: str, name: str, color: str) -> List[Shift]:
        """
        Replace every shift on ``date``, in every calendar, with one full-day event.

        Real shifts on that date are discarded.
        """
        if parse_shift_date(date) is None:
            raise RosterValidationError(f"Invalid event date '{date}', expected YYYY-MM-DD")
        if not name.strip():
            raise RosterValidationError("Day event needs a name")
        if color not in PALETTE:
            raise RosterValidationError(f"Unknown color '{color}'")

        events = []
        for calendar in self.store.calendars:
            event = Shift(
                id=self._new_id("event-"),
                date=date,
                role=name.strip(),
                employee_name="",
                start_time=DAY_EVENT_START,
                end_time=DAY_EVENT_END,
                color=color,
            )
            calendar.shifts = [s for s in calendar.shifts if s.date != date]
            calendar.shifts.append(event)
            events.append(event)
        self.store.commit()
        return events

    def clear_shifts_for_month(self, month: str, scope: Optional[str] = None) -> int:
        """
        Remove shifts dated in ``month`` from the calendars in ``scope``.

        Shifts with unparsable dates are kept.

        Returns:
            Number of shifts removed
        """
        year, mon = parse_month(month)
        removed = 0
        for calendar in self.store.scoped_calendars(scope):
            kept = []
            for shift in calendar.shifts:
                day = parse_shift_date(shift.date)
                if day is None:
                    print(f"[WARN] Keeping shift {shift.id} in '{calendar.name}': unparsable date {shift.date!r}")
                    kept.append(shift)
                elif not in_month(day, year, mon):
                    kept.append(shift)
            removed += len(calendar.shifts) - len(kept)
            calendar.shifts = kept
        if removed:
            self.store.commit()
        return removed

    # Calendars

    def add_calendar(self, name: str) -> Calendar:
        if not name.strip():
            raise RosterValidationError("Calendar name must not be empty")
        calendar = Calendar(id=self._new_id("cal-"), name=name.strip())
        self.store.calendars.append(calendar)
        self.store.commit()
        return calendar

    def update_calendar(self, calendar_id: str, name: str) -> bool:
        if not name.strip():
            raise RosterValidationError("Calendar name must not be empty")
        calendar = self.store.find_calendar(calendar_id)
        if calendar is None:
            return False
        calendar.name = name.strip()
        self.store.commit()
        return True

    def delete_calendar(self, calendar_id: str) -> bool:
        """Remove a calendar, unlink it from employees and fix the active scope."""
        if self.store.find_calendar(calendar_id) is None:
            return False
        self.store.calendars = [c for c in self.store.calendars if c.id != calendar_id]
        for employee in self.store.employees:
            if calendar_id in employee.calendar_ids:
                employee.calendar_ids = [c for c in employee.calendar_ids if c != calendar_id]
        if self.store.active_calendar_id == calendar_id:
            remaining = self.store.calendars
            self.store.active_calendar_id = remaining[0].id if remaining else ALL_CALENDARS
        self.store.commit()
        return True

    def select_calendar(self, scope: str) -> bool:
        if scope != ALL_CALENDARS and self.store.find_calendar(scope) is None:
            return False
        self.store.active_calendar_id = scope
        self.store.commit()
        return True

    # Color meanings

    def add_color_meaning(self, color: str, meaning: str) -> ColorMeaning:
        entry = self.store.registry.add(color, meaning)
        self.store.commit()
        return entry

    def change_color_meaning(self, new_meanings: Iterable) -> int:
        """
        Replace the registry, rewriting shift roles for every renamed color.

        Args:
            new_meanings: ColorMeaning objects or ``{"color", "meaning"}`` dicts

        Returns:
            Number of shifts whose role was rewritten
        """
        entries = [m if isinstance(m, ColorMeaning) else ColorMeaning.from_dict(m) for m in new_meanings]
        seen = set()
        for entry in entries:
            if entry.color not in PALETTE:
                raise RosterValidationError(f"Unknown color '{entry.color}'")
            if not entry.meaning.strip():
                raise RosterValidationError("Color meaning must not be empty")
            if entry.meaning in seen:
                raise RosterValidationError(f"Meaning '{entry.meaning}' is used more than once")
            seen.add(entry.meaning)

        new_registry = ColorMeaningRegistry(entries, fallback_color=self.store.registry.fallback_color)
        renames = self.store.registry.renames_to(new_registry)
        count = rename_roles_in_shifts(self.store.calendars, renames, new_registry)
        if renames:
            print(f"[INFO] Role renames {renames} rewrote {count} shifts")
        self.store.registry = new_registry
        self.store.commit()
        return count

    # UI state

    def set_current_date(self, current: date) -> None:
        self.store.current_date = current
        self.store.commit()

    def set_sidebar_open(self, is_open: bool) -> None:
        self.store.sidebar_open = bool(is_open)
        self.store.commit()

    # Suggestions

    def apply_suggestions(self, assignments: Sequence) -> List[Shift]:
        """Merge a validated suggestion batch; an empty batch changes nothing."""
        added = merge_suggestions(self.store, assignments)
        if added:
            self.store.commit()
        return added
