"""Tests for snapshot persistence through SQLAlchemy."""

import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from roster.config import RosterConfig
from roster.domain.models import Base
from roster.domain.repositories import SnapshotRepository
from roster.engine.mutations import RosterEngine
from roster.io.snapshot import SqlSnapshotSink, load_store, save_store, store_from_payload


@pytest.fixture
def db_session():
    """Create in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


def test_empty_database_gives_seeded_store(db_session):
    store = load_store(db_session, RosterConfig())
    assert store.calendars == []
    assert "Plantão" in store.roles()


def test_save_and_load_round_trip(db_session, store):
    save_store(db_session, store)
    loaded = load_store(db_session)
    assert loaded.snapshot() == store.snapshot()


def test_save_overwrites_single_row(db_session, store):
    save_store(db_session, store)
    save_store(db_session, store)
    record = SnapshotRepository.get(db_session)
    assert record.schema_version == 2
    assert json.loads(record.payload)["activeCalendarId"] == "cal-a"
    assert SnapshotRepository.delete(db_session) is True
    assert SnapshotRepository.get(db_session) is None
    assert SnapshotRepository.delete(db_session) is False


def test_sink_persists_every_mutation(db_session, store):
    store.subscribe(SqlSnapshotSink(db_session))
    engine = RosterEngine(store)
    engine.add_employee("carla")
    payload = SnapshotRepository.load_payload(db_session)
    assert [e["name"] for e in payload["employees"]] == ["Ana", "Beto", "Carla"]

    engine.delete_shift("s1")
    payload = SnapshotRepository.load_payload(db_session)
    shift_ids = {s["id"] for c in payload["calendars"] for s in c["shifts"]}
    assert "s1" not in shift_ids


def test_load_migrates_legacy_payload(db_session):
    legacy = {
        "currentDate": "2024-07-01",
        "shifts": [{"id": "1", "day": 5, "role": "Plantão", "employeeName": "Bob",
                    "startTime": "08:00", "endTime": "16:00", "color": "blue"}],
        "employees": [{"id": "e1", "name": "Bob", "unavailability": [
            {"day": "Monday", "startTime": "08:00", "endTime": "12:00"}], "preferences": ""}],
    }
    SnapshotRepository.save(db_session, legacy)
    store = load_store(db_session)
    [calendar] = store.calendars
    [shift] = calendar.shifts
    assert shift.date_inferred is True
    assert shift.employee_id == "e1"
    assert store.employees[0].availability[0].day == "Monday"
    assert store.active_calendar_id == calendar.id
    # Missing color meanings fall back to the configured defaults
    assert store.roles()[0] == "Plantão"


def test_store_from_unusable_payload(capsys):
    store = store_from_payload(["not", "a", "snapshot"])
    assert store.calendars == []
    assert "[WARN]" in capsys.readouterr().out


def test_sessions_on_memory_url_share_one_database(store):
    from roster.domain.db import dispose_engines, get_session

    url = "sqlite:///:memory:"
    writer = get_session(url)
    try:
        save_store(writer, store)
    finally:
        writer.close()

    reader = get_session(url)
    try:
        assert load_store(reader).snapshot() == store.snapshot()
    finally:
        reader.close()
        dispose_engines()
