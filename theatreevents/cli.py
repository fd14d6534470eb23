import argparse
import json
import logging
import sys
from pathlib import Path

from theatreevents import __version__
import theatreevents.config as cfg_module
import theatreevents.db as db_module
from theatreevents.filters import TIMES_OF_DAY, filter_events
from theatreevents.importer import run_import
from theatreevents.importer.companies import MATCHING_MODES
from theatreevents.importer.normalize import TYPE_PROFILES
from theatreevents.models import EVENT_TYPES


def _open_store(cfg) -> db_module.SqliteStore:
    conn = db_module.connect(cfg_module.get_database_path(cfg))
    return db_module.SqliteStore(conn)


def _import(args, cfg) -> int:
    settings = cfg_module.get_import_settings(cfg)
    if args.type_profile:
        settings.type_profile = args.type_profile
    if args.company_matching:
        settings.company_matching = args.company_matching

    path = Path(args.file)
    if not path.exists():
        print(f"Error: file '{path}' not found.", file=sys.stderr)
        return 1

    print(f"Importing {path.name} ...", flush=True)
    result = run_import(path.read_bytes(), _open_store(cfg), settings)
    if not result.success:
        print(f"FAILED: {result.message}", file=sys.stderr)
        return 1

    print(result.message)
    for rejection in result.rejected:
        print(f"  skipped {rejection.sheet} row {rejection.row_number}: {rejection.reason}")
    for fallback in result.fallbacks:
        print(f"  row {fallback.row_number}: unreadable {fallback.field} {fallback.raw!r}, used {fallback.fallback!r}")
    return 0


def _events(args, cfg) -> int:
    events = filter_events(
        _open_store(cfg).list_events(start_date=args.start, end_date=args.end),
        companies=args.company,
        venues=args.venue,
        event_types=args.type,
        time_of_day=args.time_of_day,
        interpreted=args.interpreted,
    )
    print(json.dumps([e.to_dict() for e in events], indent=2, ensure_ascii=False))
    return 0


def _venues(args, cfg) -> int:
    venues = _open_store(cfg).list_venues()
    print(json.dumps([v.to_dict() for v in venues], indent=2, ensure_ascii=False))
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="te",
        description="Theatre events calendar: spreadsheet import and event listing",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config", default="config.toml", metavar="PATH",
        help="Path to config.toml (default: config.toml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each processed row")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # import
    sp_import = subparsers.add_parser("import", help="Import events from an .xlsx workbook")
    sp_import.add_argument("file", help="Workbook with a Shows tab (and optionally a Companies tab)")
    sp_import.add_argument(
        "--type-profile", choices=sorted(TYPE_PROFILES),
        help="How show/performance type labels are mapped (overrides config)",
    )
    sp_import.add_argument(
        "--company-matching", choices=MATCHING_MODES,
        help="Company name matching strictness (overrides config)",
    )

    # events
    sp_events = subparsers.add_parser("events", help="Print stored events as JSON")
    sp_events.add_argument("--from", dest="start", metavar="YYYY-MM-DD", help="First date to include")
    sp_events.add_argument("--to", dest="end", metavar="YYYY-MM-DD", help="Last date to include")
    sp_events.add_argument(
        "--company", action="append", metavar="NAME",
        help="Only events by this company (repeatable)",
    )
    sp_events.add_argument(
        "--venue", action="append", metavar="NAME",
        help="Only events at this venue, or by this company when no venue is set (repeatable)",
    )
    sp_events.add_argument("--type", action="append", choices=EVENT_TYPES, help="Only this event type (repeatable)")
    sp_events.add_argument("--time-of-day", choices=TIMES_OF_DAY, help="morning, afternoon or evening performances")
    sp_events.add_argument(
        "--interpreted", action="store_true",
        help="Only performances with sign language interpreting",
    )

    # venues
    subparsers.add_parser("venues", help="Print stored venues as JSON")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = cfg_module.load(Path(args.config))
        if args.command == "import":
            code = _import(args, cfg)
        elif args.command == "events":
            code = _events(args, cfg)
        else:
            code = _venues(args, cfg)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
