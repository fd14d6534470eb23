"""
Spreadsheet import pipeline.

reader -> column resolver -> normalizers -> company matcher -> assembler
-> merge/dedup -> store. A fatal problem (unreadable file, missing Shows tab)
aborts before anything is written; bad rows and unparseable values are
collected in the ImportResult instead.
"""

import logging
from typing import Optional

from theatreevents.errors import SpreadsheetImportError
from theatreevents.importer.assemble import assemble_event, venue_from_company, venue_from_row
from theatreevents.importer.columns import SHOW_COLUMNS, ColumnResolver
from theatreevents.importer.companies import CompanyMatcher, companies_from_sheet
from theatreevents.importer.merge import EventStore, plan_merge
from theatreevents.importer.normalize import TYPE_PROFILES
from theatreevents.importer.reader import Source, find_sheets, read_workbook
from theatreevents.models import ImportResult, ImportSettings, Venue

logger = logging.getLogger(__name__)


def import_workbook(
    source: Source,
    store: EventStore,
    settings: Optional[ImportSettings] = None,
) -> ImportResult:
    """Import one workbook into store. Raises SpreadsheetImportError on fatal problems."""
    settings = settings or ImportSettings()
    type_aliases = TYPE_PROFILES[settings.type_profile]

    sheets = read_workbook(source)
    logger.info("Available sheets: %s", ", ".join(s.name for s in sheets))
    shows_sheet, companies_sheet = find_sheets(sheets, settings.require_companies_sheet)

    matcher = CompanyMatcher(settings.company_matching)
    if companies_sheet is not None:
        for company in companies_from_sheet(companies_sheet):
            matcher.add(company)
        logger.info("Company lookup built for %d companies", len(matcher))

    resolver = ColumnResolver(shows_sheet.headers, SHOW_COLUMNS)
    if unmapped := resolver.missing():
        logger.debug("Shows sheet has no column for: %s", ", ".join(unmapped))

    result = ImportResult(success=True, message="")
    events = []
    venues: dict[str, Venue] = {}
    for row_number, row in zip(shows_sheet.row_numbers, shows_sheet.rows):
        assembled = assemble_event(
            row, resolver, matcher, row_number,
            sheet_name=shows_sheet.name, type_aliases=type_aliases,
        )
        result.fallbacks.extend(assembled.fallbacks)
        if assembled.rejection is not None:
            result.rejected.append(assembled.rejection)
            continue

        event = assembled.event
        events.append(event)
        if event.theatre_name in venues:
            continue
        if companies_sheet is None:
            venues[event.theatre_name] = venue_from_row(row, resolver, event)
        elif assembled.company is not None:
            venues[event.theatre_name] = venue_from_company(assembled.company)

    for fallback in result.fallbacks:
        logger.warning(
            "Row %d: could not read %s %r, using %r",
            fallback.row_number, fallback.field, fallback.raw, fallback.fallback,
        )

    plan = plan_merge(store.list_events(), store.list_venues(), events, list(venues.values()))
    store.append(plan.venues_to_add, plan.events_to_add)

    result.companies_processed = len(matcher) if companies_sheet is not None else len(venues)
    result.total_processed = len(events)
    result.added_events = len(plan.events_to_add)
    result.added_theatres = len(plan.venues_to_add)
    result.duplicates_in_batch = plan.duplicates_in_batch
    result.message = _summary(result)
    logger.info(result.message)
    return result


def _summary(result: ImportResult) -> str:
    message = (
        f"Successfully processed {result.companies_processed} companies and "
        f"{result.total_processed} shows! Added {result.added_events} new events and "
        f"{result.added_theatres} new theatres."
    )
    if result.rejected:
        message += f" Skipped {len(result.rejected)} invalid rows."
    return message


def run_import(
    source: Source,
    store: EventStore,
    settings: Optional[ImportSettings] = None,
) -> ImportResult:
    """Import boundary: never raises, reports failures in the result."""
    try:
        return import_workbook(source, store, settings)
    except SpreadsheetImportError as exc:
        logger.warning("Import failed: %s", exc)
        return ImportResult(success=False, message=str(exc))
    except Exception:
        logger.exception("Unexpected error during import")
        return ImportResult(success=False, message="Error processing file: internal error")
