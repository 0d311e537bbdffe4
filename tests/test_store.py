"""Tests for entity store projections."""

from roster.domain.models import ALL_CALENDARS
from roster.domain.store import RosterStore

from conftest import make_shift


def test_visible_shifts_all_scope_annotates_calendar(store):
    views = store.visible_shifts(ALL_CALENDARS)
    assert {v.shift.id for v in views} == {"s1", "s2", "s3", "s4", "s5"}
    names = {v.shift.id: v.calendar_name for v in views}
    assert names["s1"] == "UTI"
    assert names["s4"] == "Emergência"


def test_visible_shifts_single_calendar(store):
    views = store.visible_shifts("cal-b")
    assert {v.shift.id for v in views} == {"s4", "s5"}
    assert {v.calendar_name for v in views} == {"Emergência"}


def test_visible_shifts_defaults_to_active_scope(store):
    assert {v.shift.id for v in store.visible_shifts()} == {"s1", "s2", "s3"}


def test_visible_shifts_unknown_scope_is_empty(store):
    assert store.visible_shifts("ghost") == []


def test_visible_employees(store):
    assert [e.name for e in store.visible_employees(ALL_CALENDARS)] == ["Ana", "Beto"]
    assert [e.name for e in store.visible_employees("cal-b")] == ["Beto"]


def test_search_by_name_and_role_case_insensitive(store):
    by_name = store.search("beto", "2024-07", ALL_CALENDARS)
    assert {v.shift.id for v in by_name} == {"s1", "s4"}

    by_role = store.search("AMBULA", "2024-07", ALL_CALENDARS)
    assert {v.shift.id for v in by_role} == {"s2"}


def test_search_restricted_to_month(store):
    assert {v.shift.id for v in store.search("", "2024-08", ALL_CALENDARS)} == {"s3", "s5"}


def test_search_skips_unparsable_dates(store, capsys):
    store.calendars[0].shifts.append(make_shift("bad", "2024-07-xx", name="Beto"))
    views = store.search("beto", "2024-07", "cal-a")
    assert {v.shift.id for v in views} == {"s1"}
    assert "unparsable date" in capsys.readouterr().out
    assert store.find_shift("bad") is not None


def test_shifts_for_employee_sorted(store):
    views = store.shifts_for_employee("emp-2")
    assert [v.shift.id for v in views] == ["s1", "s4", "s5"]
    assert store.shifts_for_employee("nobody") == []


def test_day_events_projection(store):
    store.calendars[0].shifts.append(
        make_shift("ev", "2024-07-20", role="Feriado", name="", start="00:00", end="23:59", color="yellow")
    )
    events = store.day_events("2024-07", "cal-a")
    assert list(events) == ["2024-07-20"]
    assert events["2024-07-20"].shift.role == "Feriado"


def test_resolve_employee_id_requires_unique_name(store):
    assert store.resolve_employee_id("Ana") == "emp-1"
    assert store.resolve_employee_id("") is None
    from roster.domain.models import Employee
    store.employees.append(Employee(id="emp-9", name="Ana"))
    assert store.resolve_employee_id("Ana") is None


def test_snapshot_round_trip(store):
    snapshot = store.snapshot()
    assert snapshot["schemaVersion"] == 2
    assert set(snapshot) == {
        "schemaVersion", "currentDate", "calendars", "activeCalendarId",
        "employees", "colorMeanings", "sidebarOpen",
    }
    rebuilt = RosterStore.from_snapshot(snapshot)
    assert rebuilt.snapshot() == snapshot


def test_from_snapshot_repairs_dangling_active_calendar(store):
    snapshot = store.snapshot()
    snapshot["activeCalendarId"] = "deleted"
    assert RosterStore.from_snapshot(snapshot).active_calendar_id == "cal-a"
