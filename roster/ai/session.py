"""Suggestion dialog lifecycle: build the request, await the service, merge if still open."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from roster.domain.models import Shift
from roster.exceptions import RosterValidationError, SuggestionServiceError
from roster.services.dates import WEEKDAYS

from .contracts import CalendarRef, EmployeeInput, SuggestionRequest, SuggestionResponse, UnavailabilityWindow
from .validator import validate_suggestion_response


def build_suggestion_request(
    store,
    roles_to_fill: Sequence[str],
    start_date: date,
    end_date: date,
    constraints: str = "",
    calendar_ids: Optional[Sequence[str]] = None,
    allowed_days: Optional[Sequence[str]] = None,
) -> SuggestionRequest:
    """
    Serialize the slice of the store the suggestion service needs.

    Args:
        store: RosterStore to read
        roles_to_fill: Role labels to staff (at least one)
        start_date: First day of the period
        end_date: Last day of the period (inclusive)
        constraints: Free-text scheduling constraints
        calendar_ids: Target calendars (default: all calendars)
        allowed_days: English weekday names shifts may fall on (default: any)

    Raises:
        RosterValidationError: empty roles, reversed period, unknown calendar
            or weekday, or no calendar to target
    """
    roles = [r for r in roles_to_fill if r and r.strip()]
    if not roles:
        raise RosterValidationError("Select at least one role to fill")
    if start_date > end_date:
        raise RosterValidationError("Start date must not be after end date")

    if calendar_ids is None:
        calendars = list(store.calendars)
    else:
        calendars = []
        for calendar_id in calendar_ids:
            calendar = store.find_calendar(calendar_id)
            if calendar is None:
                raise RosterValidationError(f"Unknown calendar '{calendar_id}'")
            calendars.append(calendar)
    if not calendars:
        raise RosterValidationError("Create a calendar before requesting suggestions")

    if allowed_days is not None:
        unknown = [d for d in allowed_days if d not in WEEKDAYS]
        if unknown:
            raise RosterValidationError(f"Unknown weekdays: {', '.join(unknown)}")

    target_ids = {c.id for c in calendars}
    if calendar_ids is None:
        employees = list(store.employees)
    else:
        employees = [e for e in store.employees if target_ids.intersection(e.calendar_ids)]

    return SuggestionRequest(
        employees=[
            EmployeeInput(
                id=e.id,
                name=e.name,
                unavailability=[
                    UnavailabilityWindow(day=w.day, start_time=w.start_time, end_time=w.end_time)
                    for w in e.availability
                ],
                preferences=e.preferences,
            )
            for e in employees
        ],
        roles_to_fill=roles,
        schedule_constraints=constraints,
        start_date=start_date,
        end_date=end_date,
        calendars=[CalendarRef(id=c.id, name=c.name) for c in calendars],
        allowed_days=list(allowed_days) if allowed_days is not None else None,
    )


@dataclass
class SuggestionOutcome:
    ok: bool
    added: List[Shift] = field(default_factory=list)
    summary: str = ""
    error: Optional[str] = None
    discarded: bool = False


class SuggestionSession:
    """
    One suggestion dialog.

    ``fetch`` awaits the service and keeps a validated batch pending;
    ``apply`` merges it (or a selection of it) while the dialog is open.
    Closing the dialog first makes any late result a no-op.
    """

    def __init__(self, engine, client):
        self.engine = engine
        self.client = client
        self.is_open = True
        self.pending: Optional[SuggestionResponse] = None

    def close(self) -> None:
        self.is_open = False
        self.pending = None

    async def fetch(self, request: SuggestionRequest) -> SuggestionOutcome:
        self.pending = None
        try:
            response = await self.client.suggest(request)
        except SuggestionServiceError as e:
            print(f"[ERROR] Suggestion request failed: {e}")
            return SuggestionOutcome(ok=False, error=str(e))

        if not self.is_open:
            print("[INFO] Suggestion dialog closed before the response arrived; discarding result")
            return SuggestionOutcome(ok=False, discarded=True)

        results = validate_suggestion_response(request, response)
        if not results['valid']:
            for error in results['errors']:
                print(f"[WARN] {error}")
            return SuggestionOutcome(
                ok=False,
                summary=response.summary,
                error=f"Suggestion batch rejected: {len(results['errors'])} invalid assignments",
            )

        self.pending = response
        return SuggestionOutcome(ok=True, summary=response.summary)

    def apply(self, selected: Optional[Sequence[int]] = None) -> SuggestionOutcome:
        """Merge the pending batch, or only the assignments at ``selected`` indexes."""
        if not self.is_open or self.pending is None:
            return SuggestionOutcome(ok=False, discarded=True)

        assignments = self.pending.assignments
        if selected is not None:
            assignments = [assignments[i] for i in sorted(set(selected)) if 0 <= i < len(assignments)]

        try:
            added = self.engine.apply_suggestions(assignments)
        except RosterValidationError as e:
            print(f"[ERROR] Could not merge suggestions: {e}")
            return SuggestionOutcome(ok=False, summary=self.pending.summary, error=str(e))

        summary = self.pending.summary
        self.close()
        return SuggestionOutcome(ok=True, added=added, summary=summary)

    async def run(self, request: SuggestionRequest) -> SuggestionOutcome:
        """Fetch and, if the dialog is still open, apply the whole batch."""
        outcome = await self.fetch(request)
        if not outcome.ok:
            return outcome
        return self.apply()
