"""Domain models, color-meaning registry and data access layer."""

from .colors import PALETTE, ColorMeaning, ColorMeaningRegistry
from .models import ALL_CALENDARS, Availability, Base, Calendar, Employee, Shift, ShiftView, SnapshotRecord
from .repositories import SnapshotRepository

__all__ = [
    "PALETTE",
    "ColorMeaning",
    "ColorMeaningRegistry",
    "ALL_CALENDARS",
    "Availability",
    "Base",
    "Calendar",
    "Employee",
    "Shift",
    "ShiftView",
    "SnapshotRecord",
    "SnapshotRepository",
]
