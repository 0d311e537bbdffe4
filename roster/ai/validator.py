"""Check a suggestion response against the request it answers."""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Dict

from roster.services.dates import day_name

from .contracts import SuggestionRequest, SuggestionResponse


def validate_suggestion_response(request: SuggestionRequest, response: SuggestionResponse) -> Dict[str, any]:
    """
    Validate a suggestion batch before it is merged.

    Returns:
        Dict with validation results including:
        - valid: bool
        - errors: List[str]
        - stats: Dict with per-calendar and per-role counts
    """
    results = {
        'valid': True,
        'errors': [],
        'stats': {},
    }

    employee_ids = {e.id for e in request.employees}
    calendar_ids = {c.id for c in request.calendars}
    allowed_days = set(request.allowed_days) if request.allowed_days else None

    for index, item in enumerate(response.assignments):
        label = f"Assignment {index}"
        if item.employee_id not in employee_ids:
            results['errors'].append(f"{label}: unknown employeeId '{item.employee_id}'")
        if item.calendar_id not in calendar_ids:
            results['errors'].append(f"{label}: unknown calendarId '{item.calendar_id}'")

        shift_day = date.fromisoformat(item.shift_date)
        if not request.start_date <= shift_day <= request.end_date:
            results['errors'].append(
                f"{label}: shiftDate {item.shift_date} outside "
                f"{request.start_date.isoformat()}..{request.end_date.isoformat()}"
            )
        if allowed_days is not None and day_name(shift_day) not in allowed_days:
            results['errors'].append(f"{label}: {item.shift_date} is a {day_name(shift_day)}, not an allowed day")

    results['valid'] = not results['errors']
    results['stats'] = {
        'total_assignments': len(response.assignments),
        'by_calendar': dict(Counter(a.calendar_id for a in response.assignments)),
        'by_role': dict(Counter(a.role for a in response.assignments)),
    }
    return results
