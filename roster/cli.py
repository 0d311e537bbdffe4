"""Command-line interface for the roster engine."""

from __future__ import annotations

import argparse
import asyncio
from datetime import date

from roster.ai.client import SuggestionClient
from roster.ai.session import SuggestionSession, build_suggestion_request
from roster.config import RosterConfig, load_config
from roster.domain.db import get_session, init_database, reset_database
from roster.domain.models import ALL_CALENDARS
from roster.domain.repositories import SnapshotRepository
from roster.engine.mutations import RosterEngine
from roster.exceptions import RosterValidationError
from roster.io.export_csv import export_month_report_csv
from roster.io.import_csv import import_employees_csv
from roster.io.migrations import migrate_snapshot
from roster.io.snapshot import SqlSnapshotSink, load_store


def _config(args: argparse.Namespace) -> RosterConfig:
    return load_config(args.config) if args.config else RosterConfig()


def _db_url(args: argparse.Namespace, cfg: RosterConfig) -> str:
    return args.db or cfg.db_url


def _open_engine(session, cfg: RosterConfig) -> RosterEngine:
    store = load_store(session, cfg)
    store.subscribe(SqlSnapshotSink(session))
    return RosterEngine(store, default_start=cfg.default_shift_start, default_end=cfg.default_shift_end)


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    db_url = _db_url(args, _config(args))
    if args.reset:
        reset_database(db_url)
    else:
        init_database(db_url)
    print(f"[OK] Database initialized: {db_url}")


def _cmd_migrate(args: argparse.Namespace) -> None:
    """Migrate the stored snapshot to the current schema and save it back."""
    cfg = _config(args)
    session = get_session(_db_url(args, cfg))
    try:
        payload = SnapshotRepository.load_payload(session)
        if payload is None:
            print("[OK] Nothing to migrate")
            return
        migrated = migrate_snapshot(payload)
        if migrated == payload:
            print("[OK] Snapshot already current")
            return
        SnapshotRepository.save(session, migrated)
        print(f"[OK] Snapshot migrated to schema version {migrated['schemaVersion']}")
    finally:
        session.close()


def _cmd_import_csv(args: argparse.Namespace) -> None:
    """Import employees from CSV."""
    cfg = _config(args)
    session = get_session(_db_url(args, cfg))
    try:
        engine = _open_engine(session, cfg)
        count = import_employees_csv(engine, args.employees)
        print(f"[OK] Imported {count} employees")
    finally:
        session.close()


def _cmd_report(args: argparse.Namespace) -> None:
    """Export the monthly report."""
    cfg = _config(args)
    session = get_session(_db_url(args, cfg))
    try:
        store = load_store(session, cfg)
        count = export_month_report_csv(store, args.out, args.month, args.scope)
        print(f"[OK] Exported {count} report rows to {args.out}")
    finally:
        session.close()


def _cmd_clear_month(args: argparse.Namespace) -> None:
    """Remove every shift of a month from the scope."""
    cfg = _config(args)
    session = get_session(_db_url(args, cfg))
    try:
        engine = _open_engine(session, cfg)
        removed = engine.clear_shifts_for_month(args.month, args.scope)
        print(f"[OK] Removed {removed} shifts from {args.month}")
    finally:
        session.close()


def _cmd_add_calendar(args: argparse.Namespace) -> None:
    """Create a calendar and make it the active one."""
    cfg = _config(args)
    session = get_session(_db_url(args, cfg))
    try:
        engine = _open_engine(session, cfg)
        calendar = engine.add_calendar(args.name)
        engine.select_calendar(calendar.id)
        print(f"[OK] Created calendar {calendar.id} ({calendar.name})")
    finally:
        session.close()


def _cmd_add_shift(args: argparse.Namespace) -> None:
    """Add a shift to a calendar."""
    cfg = _config(args)
    session = get_session(_db_url(args, cfg))
    try:
        engine = _open_engine(session, cfg)
        if args.calendar and not engine.select_calendar(args.calendar):
            raise RosterValidationError(f"Unknown calendar '{args.calendar}'")
        shift = engine.add_shift(args.date, args.role, args.employee, args.start, args.end)
        print(f"[OK] Added shift {shift.id}: {shift.date} {shift.start_time}-{shift.end_time} {shift.role} ({shift.color})")
    finally:
        session.close()


async def _suggest(engine: RosterEngine, cfg: RosterConfig, request):
    async with SuggestionClient.from_config(cfg) as client:
        return await SuggestionSession(engine, client).run(request)


def _cmd_suggest(args: argparse.Namespace) -> None:
    """Ask the suggestion service for assignments and merge them."""
    cfg = _config(args)
    session = get_session(_db_url(args, cfg))
    try:
        engine = _open_engine(session, cfg)
        try:
            start, end = date.fromisoformat(args.start), date.fromisoformat(args.end)
        except ValueError as e:
            raise RosterValidationError(f"Invalid period: {e}") from e
        request = build_suggestion_request(
            engine.store,
            roles_to_fill=[r.strip() for r in args.roles.split(",")],
            start_date=start,
            end_date=end,
            constraints=args.constraints or "",
            calendar_ids=args.calendar or None,
            allowed_days=args.days.split(",") if args.days else None,
        )
        outcome = asyncio.run(_suggest(engine, cfg, request))
        if not outcome.ok:
            raise SystemExit(f"[ERROR] {outcome.error}")
        if outcome.summary:
            print(outcome.summary)
        print(f"[OK] Merged {len(outcome.added)} suggested shifts")
    finally:
        session.close()


def _cmd_day_event(args: argparse.Namespace) -> None:
    """Add a full-day event to every calendar."""
    cfg = _config(args)
    session = get_session(_db_url(args, cfg))
    try:
        engine = _open_engine(session, cfg)
        events = engine.add_day_event(args.date, args.name, args.color)
        print(f"[OK] Added '{args.name}' on {args.date} to {len(events)} calendars")
    finally:
        session.close()


def _cmd_show(args: argparse.Namespace) -> None:
    """Print the shifts visible in a scope."""
    cfg = _config(args)
    session = get_session(_db_url(args, cfg))
    try:
        store = load_store(session, cfg)
        views = store.search(args.query or "", args.month, args.scope) if args.month else store.visible_shifts(args.scope)
        for view in sorted(views, key=lambda v: (v.shift.date, v.shift.start_time)):
            s = view.shift
            who = s.employee_name or "-"
            print(f"{s.date} {s.start_time}-{s.end_time}  {s.role:<15} {who:<20} [{view.calendar_name}]")
        print(f"[OK] {len(views)} shifts")
    finally:
        session.close()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(prog="roster", description="Team shift roster engine")

    # Global options
    parser.add_argument("--db", help="Database URL (default: from config, sqlite:///roster.db)")
    parser.add_argument("--config", help="Path to config YAML/JSON")

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Initialize database")
    init.add_argument("--reset", action="store_true", help="Drop and recreate all tables (deletes the stored roster)")
    init.set_defaults(func=_cmd_init_db)

    mig = sub.add_parser("migrate", help="Migrate the stored snapshot to the current schema")
    mig.set_defaults(func=_cmd_migrate)

    imp = sub.add_parser("import-csv", help="Import employees from CSV")
    imp.add_argument("--employees", required=True, help="Path to employees CSV")
    imp.set_defaults(func=_cmd_import_csv)

    rep = sub.add_parser("report", help="Export the monthly employee-by-day report")
    rep.add_argument("--month", required=True, help="Month (YYYY-MM)")
    rep.add_argument("--scope", default=ALL_CALENDARS, help="Calendar id or 'all'")
    rep.add_argument("--out", required=True, help="Path to output CSV")
    rep.set_defaults(func=_cmd_report)

    clr = sub.add_parser("clear-month", help="Remove every shift of a month")
    clr.add_argument("--month", required=True, help="Month (YYYY-MM)")
    clr.add_argument("--scope", default=ALL_CALENDARS, help="Calendar id or 'all'")
    clr.set_defaults(func=_cmd_clear_month)

    cal = sub.add_parser("add-calendar", help="Create a calendar and select it")
    cal.add_argument("--name", required=True, help="Calendar name")
    cal.set_defaults(func=_cmd_add_calendar)

    shf = sub.add_parser("add-shift", help="Add a shift to the active (or given) calendar")
    shf.add_argument("--date", required=True, help="Date (YYYY-MM-DD)")
    shf.add_argument("--role", required=True, help="Role label")
    shf.add_argument("--employee", required=True, help="Employee name")
    shf.add_argument("--start", help="Start time HH:MM (default: from config)")
    shf.add_argument("--end", help="End time HH:MM (default: from config)")
    shf.add_argument("--calendar", help="Calendar id (default: active calendar)")
    shf.set_defaults(func=_cmd_add_shift)

    sug = sub.add_parser("suggest", help="Request AI shift suggestions and merge them")
    sug.add_argument("--start", required=True, help="First day (YYYY-MM-DD)")
    sug.add_argument("--end", required=True, help="Last day (YYYY-MM-DD)")
    sug.add_argument("--roles", required=True, help="Comma-separated roles to fill")
    sug.add_argument("--constraints", help="Free-text scheduling constraints")
    sug.add_argument("--calendar", action="append", help="Target calendar id (repeatable; default: all)")
    sug.add_argument("--days", help="Comma-separated allowed weekdays, e.g. Monday,Friday")
    sug.set_defaults(func=_cmd_suggest)

    evt = sub.add_parser("day-event", help="Replace a date's shifts with a full-day event")
    evt.add_argument("--date", required=True, help="Date (YYYY-MM-DD)")
    evt.add_argument("--name", required=True, help="Event label, e.g. Feriado")
    evt.add_argument("--color", default="yellow", help="Palette color")
    evt.set_defaults(func=_cmd_day_event)

    show = sub.add_parser("show", help="Print shifts in a scope")
    show.add_argument("--scope", default=ALL_CALENDARS, help="Calendar id or 'all'")
    show.add_argument("--month", help="Restrict to a month (YYYY-MM)")
    show.add_argument("--query", help="Filter by employee name or role")
    show.set_defaults(func=_cmd_show)

    args = parser.parse_args(argv)
    try:
        args.func(args)
    except RosterValidationError as e:
        raise SystemExit(f"[ERROR] {e}")


if __name__ == "__main__":
    main()
