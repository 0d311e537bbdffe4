"""Text and month filters over shift projections."""

from __future__ import annotations

from typing import Iterable, List

from roster.domain.models import ShiftView
from roster.services.dates import in_month, parse_month, parse_shift_date


def filter_by_month(views: Iterable[ShiftView], month: str) -> List[ShiftView]:
    """
    Keep shifts dated within a ``YYYY-MM`` month.

    Shifts whose date does not parse are left out and reported, never raised.
    """
    year, mon = parse_month(month)
    result = []
    for view in views:
        day = parse_shift_date(view.shift.date)
        if day is None:
            print(
                f"[WARN] Skipping shift {view.shift.id} in '{view.calendar_name}': "
                f"unparsable date {view.shift.date!r}"
            )
            continue
        if in_month(day, year, mon):
            result.append(view)
    return result


def matches_text(view: ShiftView, query: str) -> bool:
    """Case-insensitive substring match on employee name or role."""
    needle = query.casefold()
    return needle in view.shift.employee_name.casefold() or needle in view.shift.role.casefold()


def search_shifts(views: Iterable[ShiftView], query: str, month: str) -> List[ShiftView]:
    """Shifts in ``month`` whose employee name or role contains ``query``."""
    in_scope = filter_by_month(views, month)
    if not query:
        return in_scope
    return [view for view in in_scope if matches_text(view, query)]
