"""Roster entities and the SQLAlchemy table that persists store snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase

SCHEMA_VERSION = 2
ALL_CALENDARS = "all"
DAY_EVENT_START = "00:00"
DAY_EVENT_END = "23:59"


@dataclass
class Availability:
    """A weekly window: day-of-week name plus HH:MM start/end."""

    day: str
    start_time: str
    end_time: str

    def to_dict(self) -> dict:
        return {"day": self.day, "startTime": self.start_time, "endTime": self.end_time}

    @classmethod
    def from_dict(cls, raw: dict) -> "Availability":
        return cls(
            day=str(raw.get("day", "")),
            start_time=str(raw.get("startTime", "")),
            end_time=str(raw.get("endTime", "")),
        )


@dataclass
class Employee:
    id: str
    name: str
    role_id: Optional[str] = None
    preferences: str = ""
    availability: List[Availability] = field(default_factory=list)
    calendar_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "roleId": self.role_id,
            "preferences": self.preferences,
            "availability": [a.to_dict() for a in self.availability],
            "calendarIds": list(self.calendar_ids),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "Employee":
        windows = raw.get("availability") or []
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", "")),
            role_id=raw.get("roleId"),
            preferences=str(raw.get("preferences") or ""),
            availability=[Availability.from_dict(w) for w in windows if isinstance(w, dict)],
            calendar_ids=[str(c) for c in (raw.get("calendarIds") or [])],
        )


@dataclass
class Shift:
    """
    A single work assignment.

    ``employee_id`` is the owning reference; ``employee_name`` is the display
    name cached from it (or the only reference for legacy name-keyed shifts).
    ``color`` is derived from ``role`` by the store and never set by callers.
    """

    id: str
    date: str
    role: str
    employee_name: str
    start_time: str
    end_time: str
    color: str = ""
    employee_id: Optional[str] = None
    date_inferred: bool = False

    @property
    def is_day_event(self) -> bool:
        return (
            self.employee_name == ""
            and self.start_time == DAY_EVENT_START
            and self.end_time == DAY_EVENT_END
        )

    def is_owned_by(self, employee: "Employee") -> bool:
        """Owned by id, or by name for shifts that carry no employee id."""
        if self.employee_id is not None:
            return self.employee_id == employee.id
        return self.employee_name != "" and self.employee_name == employee.name

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "date": self.date,
            "role": self.role,
            "employeeName": self.employee_name,
            "employeeId": self.employee_id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "color": self.color,
        }
        if self.date_inferred:
            data["dateInferred"] = True
        return data

    @classmethod
    def from_dict(cls, raw: dict) -> "Shift":
        return cls(
            id=str(raw.get("id", "")),
            date=str(raw.get("date", "")),
            role=str(raw.get("role", "")),
            employee_name=str(raw.get("employeeName") or ""),
            start_time=str(raw.get("startTime", "")),
            end_time=str(raw.get("endTime", "")),
            color=str(raw.get("color", "")),
            employee_id=raw.get("employeeId"),
            date_inferred=bool(raw.get("dateInferred", False)),
        )


@dataclass
class Calendar:
    id: str
    name: str
    shifts: List[Shift] = field(default_factory=list)

    def find_shift(self, shift_id: str) -> Optional[Shift]:
        for shift in self.shifts:
            if shift.id == shift_id:
                return shift
        return None

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "shifts": [s.to_dict() for s in self.shifts]}

    @classmethod
    def from_dict(cls, raw: dict) -> "Calendar":
        shifts = raw.get("shifts") or []
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", "")),
            shifts=[Shift.from_dict(s) for s in shifts if isinstance(s, dict)],
        )


@dataclass(frozen=True)
class ShiftView:
    """A shift as seen by projections, annotated with its owning calendar."""

    shift: Shift
    calendar_id: str
    calendar_name: str


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class SnapshotRecord(Base):
    """Serialized store snapshot; one row per store key, overwritten on save."""

    __tablename__ = "snapshots"

    key = Column(String(50), primary_key=True)
    schema_version = Column(Integer, nullable=False)
    payload = Column(Text, nullable=False)  # JSON document
    saved_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<SnapshotRecord(key='{self.key}', version={self.schema_version}, saved_at={self.saved_at})>"
