"""Roster mutation engine with rename propagation and suggestion merge."""

from .merge import merge_suggestions
from .mutations import RosterEngine, normalize_name
from .rename import rename_employee_in_shifts, rename_roles_in_shifts

__all__ = [
    "RosterEngine",
    "normalize_name",
    "merge_suggestions",
    "rename_employee_in_shifts",
    "rename_roles_in_shifts",
]
