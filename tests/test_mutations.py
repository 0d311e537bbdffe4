"""Tests for the mutation API."""

from dataclasses import replace

import pytest

from roster.domain.colors import ColorMeaning
from roster.domain.models import ALL_CALENDARS, Calendar
from roster.engine.mutations import normalize_name
from roster.exceptions import RosterValidationError

from conftest import make_shift


def _shift_ids(calendar):
    return {s.id for s in calendar.shifts}


def test_normalize_name():
    assert normalize_name("ana  MARIA silva") == "Ana Maria Silva"
    assert normalize_name("  dr. joão ") == "Dr. João"
    assert normalize_name("") == ""


def test_add_employee_scoped_to_active_calendar(engine, store, snapshots):
    emp = engine.add_employee("carla souza")
    assert emp.name == "Carla Souza"
    assert emp.calendar_ids == ["cal-a"]
    assert store.find_employee(emp.id) is emp
    assert len(snapshots) == 1


def test_add_employee_with_all_scope_has_no_calendars(engine, store):
    engine.select_calendar(ALL_CALENDARS)
    emp = engine.add_employee("davi")
    assert emp.calendar_ids == []


def test_add_employee_ids_are_unique(engine):
    ids = {engine.add_employee(f"person {i}").id for i in range(20)}
    assert len(ids) == 20


def test_rename_employee_propagates_to_all_calendars(engine, store):
    beto = store.find_employee("emp-2")
    before = [v.shift.id for v in store.visible_shifts(ALL_CALENDARS) if v.shift.employee_name == "Beto"]

    assert engine.update_employee(replace(beto, name="Roberto")) is True

    names = {v.shift.id: v.shift.employee_name for v in store.visible_shifts(ALL_CALENDARS)}
    assert all(names[sid] == "Roberto" for sid in before)
    assert "Beto" not in names.values()
    assert store.find_employee("emp-2").name == "Roberto"


def test_rename_employee_matches_name_keyed_legacy_shifts(engine, store):
    store.calendars[0].shifts.append(make_shift("legacy", "2024-07-09", name="Ana", employee_id=None))
    ana = store.find_employee("emp-1")
    engine.update_employee(replace(ana, name="Ana Paula"))
    legacy = store.find_shift("legacy")[1]
    assert legacy.employee_name == "Ana Paula"
    assert legacy.employee_id == "emp-1"


def test_update_unknown_employee_is_noop(engine, snapshots):
    from roster.domain.models import Employee
    assert engine.update_employee(Employee(id="ghost", name="Ghost")) is False
    assert snapshots == []


def test_delete_employee_cascades_only_their_shifts(engine, store):
    ana_shifts = {"s2", "s3"}
    all_before = {v.shift.id for v in store.visible_shifts(ALL_CALENDARS)}

    assert engine.delete_employee("emp-1") is True

    all_after = {v.shift.id for v in store.visible_shifts(ALL_CALENDARS)}
    assert all_after == all_before - ana_shifts
    assert store.find_employee("emp-1") is None


def test_delete_unknown_employee_is_noop(engine, store):
    before = store.snapshot()
    assert engine.delete_employee("nope") is False
    assert store.snapshot() == before


def test_add_shift_rejected_when_scope_is_all(registry):
    from roster.domain.store import RosterStore
    from roster.engine.mutations import RosterEngine

    store = RosterStore(
        calendars=[Calendar(id="A", name="A"), Calendar(id="B", name="B")],
        registry=registry,
        active_calendar_id=ALL_CALENDARS,
    )
    engine = RosterEngine(store)
    with pytest.raises(RosterValidationError):
        engine.add_shift("2024-07-05", "Plantão", "Beto", "08:00", "16:00")
    assert all(c.shifts == [] for c in store.calendars)


def test_add_shift_derives_color_and_owner(engine, store):
    shift = engine.add_shift("2024-07-10", "Ambulatório", "Ana", "07:00", "13:00")
    assert shift.color == "green"
    assert shift.employee_id == "emp-1"
    assert store.find_shift(shift.id)[0].id == "cal-a"


def test_add_shift_unknown_role_gets_fallback_color(engine):
    shift = engine.add_shift("2024-07-10", "Cirurgia", "Ana", "07:00", "13:00")
    assert shift.color == "gray"


def test_add_shift_rejects_bad_date(engine, store):
    before = len(store.calendars[0].shifts)
    with pytest.raises(RosterValidationError):
        engine.add_shift("05/07/2024", "Plantão", "Ana", "07:00", "13:00")
    assert len(store.calendars[0].shifts) == before


def test_update_shift_rederives_color(engine, store):
    _, shift = store.find_shift("s4")
    assert engine.update_shift(replace(shift, role="Plantão")) is True
    calendar, updated = store.find_shift("s4")
    assert calendar.id == "cal-b"
    assert updated.role == "Plantão"
    assert updated.color == "blue"


def test_update_shift_ignores_caller_color(engine, store):
    _, shift = store.find_shift("s1")
    engine.update_shift(replace(shift, color="pink"))
    assert store.find_shift("s1")[1].color == "blue"


def test_update_shift_clears_date_inferred(engine, store):
    _, shift = store.find_shift("s1")
    shift.date_inferred = True
    engine.update_shift(replace(shift, date="2024-07-07"))
    assert store.find_shift("s1")[1].date_inferred is False


def test_update_and_delete_unknown_shift_are_noops(engine, store, snapshots):
    assert engine.update_shift(make_shift("missing", "2024-07-01")) is False
    assert engine.delete_shift("missing") is False
    assert snapshots == []


def test_delete_shift_scans_all_calendars(engine, store):
    assert engine.delete_shift("s5") is True
    assert store.find_shift("s5") is None
    assert _shift_ids(store.find_calendar("cal-b")) == {"s4"}


def test_swap_shift(engine, store):
    assert engine.swap_shift("s1", "emp-1") is True
    _, shift = store.find_shift("s1")
    assert shift.employee_name == "Ana"
    assert shift.employee_id == "emp-1"
    assert engine.swap_shift("s1", "nobody") is False
    assert engine.swap_shift("nothing", "emp-1") is False


def test_add_update_calendar(engine, store):
    cal = engine.add_calendar("  Pediatria ")
    assert cal.id.startswith("cal-")
    assert cal.name == "Pediatria"
    assert engine.update_calendar(cal.id, "Pediatria 2") is True
    assert store.find_calendar(cal.id).name == "Pediatria 2"
    assert engine.update_calendar("nope", "x") is False
    with pytest.raises(RosterValidationError):
        engine.add_calendar(" ")


def test_delete_calendar_unlinks_employees_and_reselects(engine, store):
    assert engine.delete_calendar("cal-a") is True
    assert store.find_calendar("cal-a") is None
    assert all("cal-a" not in e.calendar_ids for e in store.employees)
    assert store.active_calendar_id == "cal-b"

    assert engine.delete_calendar("cal-b") is True
    assert store.active_calendar_id == ALL_CALENDARS


def test_delete_inactive_calendar_keeps_scope(engine, store):
    engine.delete_calendar("cal-b")
    assert store.active_calendar_id == "cal-a"


def test_select_calendar(engine, store):
    assert engine.select_calendar("cal-b") is True
    assert store.active_calendar_id == "cal-b"
    assert engine.select_calendar("ghost") is False
    assert store.active_calendar_id == "cal-b"


def test_day_event_replaces_shifts_on_date(engine, store):
    events = engine.add_day_event("2024-07-05", "Feriado", "yellow")
    assert len(events) == 2

    cal_a = store.find_calendar("cal-a")
    on_date = [s for s in cal_a.shifts if s.date == "2024-07-05"]
    assert len(on_date) == 1
    event = on_date[0]
    assert event.employee_name == ""
    assert (event.start_time, event.end_time) == ("00:00", "23:59")
    assert event.role == "Feriado"
    assert event.color == "yellow"
    assert event.is_day_event
    assert "s1" not in _shift_ids(cal_a)
    assert "s4" not in _shift_ids(store.find_calendar("cal-b"))
    assert "s2" in _shift_ids(cal_a)


def test_day_event_validation(engine):
    with pytest.raises(RosterValidationError):
        engine.add_day_event("2024-07-05", "Feriado", "magenta")
    with pytest.raises(RosterValidationError):
        engine.add_day_event("2024-07-05", " ", "yellow")


def test_clear_month_all_scope_removes_only_that_month(engine, store):
    removed = engine.clear_shifts_for_month("2024-07", ALL_CALENDARS)
    assert removed == 3
    assert _shift_ids(store.find_calendar("cal-a")) == {"s3"}
    assert _shift_ids(store.find_calendar("cal-b")) == {"s5"}


def test_clear_month_single_calendar(engine, store):
    engine.clear_shifts_for_month("2024-07", "cal-b")
    assert _shift_ids(store.find_calendar("cal-a")) == {"s1", "s2", "s3"}
    assert _shift_ids(store.find_calendar("cal-b")) == {"s5"}


def test_clear_month_keeps_unparsable_dates(engine, store, capsys):
    store.calendars[0].shifts.append(make_shift("bad", "julho 5"))
    engine.clear_shifts_for_month("2024-07", "cal-a")
    assert "bad" in _shift_ids(store.find_calendar("cal-a"))
    assert "[WARN]" in capsys.readouterr().out


def test_clear_month_rejects_bad_month(engine):
    with pytest.raises(RosterValidationError):
        engine.clear_shifts_for_month("2024-13", ALL_CALENDARS)


def test_change_color_meaning_renames_roles(engine, store):
    other_roles = {v.shift.id: v.shift.role for v in store.visible_shifts(ALL_CALENDARS) if v.shift.role != "Plantão"}
    oncall_ids = [v.shift.id for v in store.visible_shifts(ALL_CALENDARS) if v.shift.role == "Plantão"]

    count = engine.change_color_meaning([
        ColorMeaning("blue", "On-Call"),
        ColorMeaning("green", "Ambulatório"),
        ColorMeaning("purple", "Enfermaria"),
    ])

    assert count == len(oncall_ids)
    for sid in oncall_ids:
        shift = store.find_shift(sid)[1]
        assert shift.role == "On-Call"
        assert shift.color == "blue"
    for sid, role in other_roles.items():
        assert store.find_shift(sid)[1].role == role
    assert store.roles() == ["On-Call", "Ambulatório", "Enfermaria"]


def test_change_color_meaning_additions_and_removals_do_not_rewrite(engine, store):
    before = {v.shift.id: (v.shift.role, v.shift.color) for v in store.visible_shifts(ALL_CALENDARS)}
    count = engine.change_color_meaning([
        {"color": "blue", "meaning": "Plantão"},
        {"color": "orange", "meaning": "Sobreaviso"},
    ])
    after = {v.shift.id: (v.shift.role, v.shift.color) for v in store.visible_shifts(ALL_CALENDARS)}
    assert count == 0
    assert after == before


def test_change_color_meaning_swapped_meanings(engine, store):
    engine.change_color_meaning([
        ColorMeaning("blue", "Ambulatório"),
        ColorMeaning("green", "Plantão"),
        ColorMeaning("purple", "Enfermaria"),
    ])
    assert store.find_shift("s1")[1].role == "Ambulatório"
    assert store.find_shift("s2")[1].role == "Plantão"


def test_change_color_meaning_rejects_duplicate_meanings(engine, store):
    before = store.snapshot()
    with pytest.raises(RosterValidationError):
        engine.change_color_meaning([ColorMeaning("blue", "X"), ColorMeaning("green", "X")])
    assert store.snapshot() == before


def test_add_color_meaning(engine, store):
    engine.add_color_meaning("red", "Sobreaviso")
    assert "Sobreaviso" in store.roles()
    with pytest.raises(RosterValidationError):
        engine.add_color_meaning("pink", "Sobreaviso")


def test_ui_state_is_persisted_in_snapshot(engine, snapshots):
    from datetime import date
    engine.set_current_date(date(2024, 9, 1))
    engine.set_sidebar_open(False)
    assert snapshots[-1]["currentDate"] == "2024-09-01"
    assert snapshots[-1]["sidebarOpen"] is False


def test_listener_failure_does_not_roll_back(engine, store, capsys):
    def broken(snapshot):
        raise RuntimeError("disk full")

    store.subscribe(broken)
    emp = engine.add_employee("eva")
    assert store.find_employee(emp.id) is not None
    assert "disk full" in capsys.readouterr().out


def test_add_shift_uses_default_times(store):
    from roster.engine.mutations import RosterEngine

    engine = RosterEngine(store, default_start="07:00", default_end="19:00")
    shift = engine.add_shift("2024-07-11", "Plantão", "Beto")
    assert (shift.start_time, shift.end_time) == ("07:00", "19:00")


def test_change_color_meaning_renames_second_meaning_on_shared_color(engine, store):
    engine.add_color_meaning("blue", "Sobreaviso")
    shift = engine.add_shift("2024-07-12", "Sobreaviso", "Ana", "19:00", "07:00")
    assert shift.color == "blue"

    count = engine.change_color_meaning([
        ColorMeaning("blue", "Plantão"),
        ColorMeaning("blue", "Reserva"),
        ColorMeaning("green", "Ambulatório"),
        ColorMeaning("purple", "Enfermaria"),
    ])

    assert count == 1
    renamed = store.find_shift(shift.id)[1]
    assert (renamed.role, renamed.color) == ("Reserva", "blue")
    assert store.find_shift("s1")[1].role == "Plantão"
    assert store.roles() == ["Plantão", "Reserva", "Ambulatório", "Enfermaria"]


def test_update_shift_rejects_bad_date(engine, store, snapshots):
    _, shift = store.find_shift("s1")
    with pytest.raises(RosterValidationError):
        engine.update_shift(replace(shift, date="07/05/2024"))
    assert store.find_shift("s1")[1].date == "2024-07-05"
    assert snapshots == []
