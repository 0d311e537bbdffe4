"""Entity store: the canonical in-memory roster and its read projections."""

from __future__ import annotations

from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from .colors import ColorMeaningRegistry
from .models import ALL_CALENDARS, SCHEMA_VERSION, Calendar, Employee, Shift, ShiftView

from roster.services.dates import parse_shift_date
from roster.services.search import filter_by_month, search_shifts

SnapshotListener = Callable[[dict], None]


class RosterStore:
    """
    Holds employees, calendars and the color-meaning registry.

    State changes go through ``roster.engine.mutations.RosterEngine``; after
    each committed change the engine calls ``commit()``, which hands the new
    snapshot to every subscribed listener (the persistence sink).
    """

    def __init__(
        self,
        employees: Optional[List[Employee]] = None,
        calendars: Optional[List[Calendar]] = None,
        registry: Optional[ColorMeaningRegistry] = None,
        active_calendar_id: str = ALL_CALENDARS,
        current_date: Optional[date] = None,
        sidebar_open: bool = True,
    ):
        self.employees: List[Employee] = list(employees or [])
        self.calendars: List[Calendar] = list(calendars or [])
        self.registry = registry if registry is not None else ColorMeaningRegistry()
        self.active_calendar_id = active_calendar_id
        self.current_date = current_date or date.today()
        self.sidebar_open = sidebar_open
        self._listeners: List[SnapshotListener] = []

    # Notification

    def subscribe(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def commit(self) -> None:
        """Publish the current snapshot; listener failures never undo the change."""
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception as e:
                print(f"[WARN] Snapshot listener {listener!r} failed: {e}")

    # Lookups

    def find_calendar(self, calendar_id: str) -> Optional[Calendar]:
        for calendar in self.calendars:
            if calendar.id == calendar_id:
                return calendar
        return None

    def find_employee(self, employee_id: str) -> Optional[Employee]:
        for employee in self.employees:
            if employee.id == employee_id:
                return employee
        return None

    def find_shift(self, shift_id: str) -> Optional[Tuple[Calendar, Shift]]:
        """Scan every calendar for a shift id."""
        for calendar in self.calendars:
            shift = calendar.find_shift(shift_id)
            if shift is not None:
                return calendar, shift
        return None

    def resolve_employee_id(self, name: str) -> Optional[str]:
        """Id of the only employee with this name; None if none or ambiguous."""
        matches = [e.id for e in self.employees if name and e.name == name]
        return matches[0] if len(matches) == 1 else None

    @property
    def active_calendar(self) -> Optional[Calendar]:
        if self.active_calendar_id == ALL_CALENDARS:
            return None
        return self.find_calendar(self.active_calendar_id)

    # Projections

    def _scope(self, scope: Optional[str]) -> str:
        return self.active_calendar_id if scope is None else scope

    def scoped_calendars(self, scope: Optional[str] = None) -> List[Calendar]:
        scope = self._scope(scope)
        if scope == ALL_CALENDARS:
            return list(self.calendars)
        calendar = self.find_calendar(scope)
        return [calendar] if calendar is not None else []

    def visible_shifts(self, scope: Optional[str] = None) -> List[ShiftView]:
        """Shifts in scope, each annotated with its owning calendar's name."""
        return [
            ShiftView(shift=shift, calendar_id=calendar.id, calendar_name=calendar.name)
            for calendar in self.scoped_calendars(scope)
            for shift in calendar.shifts
        ]

    def visible_employees(self, scope: Optional[str] = None) -> List[Employee]:
        scope = self._scope(scope)
        if scope == ALL_CALENDARS:
            return list(self.employees)
        return [e for e in self.employees if scope in e.calendar_ids]

    def search(self, query: str, month: str, scope: Optional[str] = None) -> List[ShiftView]:
        return search_shifts(self.visible_shifts(scope), query, month)

    def shifts_for_employee(self, employee_id: str) -> List[ShiftView]:
        employee = self.find_employee(employee_id)
        if employee is None:
            return []
        views = [v for v in self.visible_shifts(ALL_CALENDARS) if v.shift.is_owned_by(employee)]
        return sorted(views, key=lambda v: (v.shift.date, v.shift.start_time))

    def day_events(self, month: str, scope: Optional[str] = None) -> Dict[str, ShiftView]:
        """Full-day events in the month, keyed by date."""
        return {
            view.shift.date: view
            for view in filter_by_month(self.visible_shifts(scope), month)
            if view.shift.is_day_event
        }

    def roles(self) -> List[str]:
        return self.registry.meanings()

    # Serialization

    def snapshot(self) -> dict:
        return {
            "schemaVersion": SCHEMA_VERSION,
            "currentDate": self.current_date.isoformat(),
            "calendars": [c.to_dict() for c in self.calendars],
            "activeCalendarId": self.active_calendar_id,
            "employees": [e.to_dict() for e in self.employees],
            "colorMeanings": self.registry.to_list(),
            "sidebarOpen": self.sidebar_open,
        }

    @classmethod
    def from_snapshot(cls, payload: dict, fallback_color: str = "gray") -> "RosterStore":
        """Build a store from an already-migrated snapshot."""
        calendars = [Calendar.from_dict(c) for c in payload.get("calendars") or [] if isinstance(c, dict)]
        employees = [Employee.from_dict(e) for e in payload.get("employees") or [] if isinstance(e, dict)]
        registry = ColorMeaningRegistry.from_list(payload.get("colorMeanings") or [], fallback_color=fallback_color)
        active = str(payload.get("activeCalendarId") or ALL_CALENDARS)
        if active != ALL_CALENDARS and not any(c.id == active for c in calendars):
            active = calendars[0].id if calendars else ALL_CALENDARS
        return cls(
            employees=employees,
            calendars=calendars,
            registry=registry,
            active_calendar_id=active,
            current_date=parse_shift_date(payload.get("currentDate")),
            sidebar_open=bool(payload.get("sidebarOpen", True)),
        )
