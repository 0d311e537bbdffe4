"""Request and response contracts of the shift suggestion service."""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class _Contract(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class UnavailabilityWindow(_Contract):
    day: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")


class EmployeeInput(_Contract):
    id: str
    name: str
    unavailability: List[UnavailabilityWindow] = Field(default_factory=list)
    preferences: str = ""


class CalendarRef(_Contract):
    id: str
    name: str


class SuggestionRequest(_Contract):
    employees: List[EmployeeInput]
    roles_to_fill: List[str] = Field(alias="rolesToFill")
    schedule_constraints: str = Field(default="", alias="scheduleConstraints")
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    calendars: List[CalendarRef]
    allowed_days: Optional[List[str]] = Field(default=None, alias="allowedDays")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SuggestedAssignment(_Contract):
    employee_id: str = Field(alias="employeeId")
    shift_date: str = Field(alias="shiftDate")
    shift_start_time: str = Field(alias="shiftStartTime")
    shift_end_time: str = Field(alias="shiftEndTime")
    role: str
    calendar_id: str = Field(alias="calendarId")

    @field_validator("shift_date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        date.fromisoformat(value)
        if len(value) != 10:
            raise ValueError("shiftDate must be YYYY-MM-DD")
        return value

    @field_validator("shift_start_time", "shift_end_time")
    @classmethod
    def _hhmm(cls, value: str) -> str:
        if not _HHMM.match(value):
            raise ValueError("shift times must be HH:MM")
        return value


class SuggestionResponse(_Contract):
    assignments: List[SuggestedAssignment]
    summary: str = ""
