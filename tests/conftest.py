"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from roster.domain.colors import ColorMeaning, ColorMeaningRegistry
from roster.domain.models import Calendar, Employee, Shift
from roster.domain.store import RosterStore
from roster.engine.mutations import RosterEngine


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )


def make_shift(shift_id, day, role="Plantão", name="Beto", start="08:00", end="16:00", employee_id=None, color="blue"):
    return Shift(
        id=shift_id,
        date=day,
        role=role,
        employee_name=name,
        start_time=start,
        end_time=end,
        color=color,
        employee_id=employee_id,
    )


@pytest.fixture
def registry():
    return ColorMeaningRegistry([
        ColorMeaning("blue", "Plantão"),
        ColorMeaning("green", "Ambulatório"),
        ColorMeaning("purple", "Enfermaria"),
    ])


@pytest.fixture
def store(registry):
    """Two calendars with a few shifts, two employees, calendar A active."""
    ana = Employee(id="emp-1", name="Ana", calendar_ids=["cal-a"])
    beto = Employee(id="emp-2", name="Beto", calendar_ids=["cal-a", "cal-b"])
    cal_a = Calendar(id="cal-a", name="UTI", shifts=[
        make_shift("s1", "2024-07-05", name="Beto", employee_id="emp-2"),
        make_shift("s2", "2024-07-06", role="Ambulatório", name="Ana", employee_id="emp-1", color="green"),
        make_shift("s3", "2024-08-01", name="Ana", employee_id="emp-1"),
    ])
    cal_b = Calendar(id="cal-b", name="Emergência", shifts=[
        make_shift("s4", "2024-07-05", role="Enfermaria", name="Beto", employee_id="emp-2", color="purple"),
        make_shift("s5", "2024-08-10", name="Beto", employee_id="emp-2"),
    ])
    return RosterStore(
        employees=[ana, beto],
        calendars=[cal_a, cal_b],
        registry=registry,
        active_calendar_id="cal-a",
        current_date=date(2024, 7, 1),
    )


@pytest.fixture
def engine(store):
    return RosterEngine(store)


@pytest.fixture
def snapshots(store):
    """Every snapshot the store publishes."""
    published = []
    store.subscribe(published.append)
    return published
