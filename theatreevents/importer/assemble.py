import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

from theatreevents.importer.columns import ColumnResolver
from theatreevents.importer.companies import CompanyMatcher
from theatreevents.importer.normalize import (
    TIME_FALLBACK,
    TYPE_FALLBACK,
    normalize_bool,
    normalize_text,
    parse_date,
    parse_event_type,
    parse_time,
)
from theatreevents.models import (
    Company,
    Event,
    NormalizationFallback,
    RawRow,
    RowRejected,
    Venue,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "theatre_name", "date")


@dataclass
class Assembled:
    event: Optional[Event] = None
    rejection: Optional[RowRejected] = None
    company: Optional[Company] = None
    fallbacks: list[NormalizationFallback] = field(default_factory=list)


def _new_id() -> str:
    return uuid.uuid4().hex


def assemble_event(
    row: RawRow,
    resolver: ColumnResolver,
    matcher: CompanyMatcher,
    row_number: int,
    sheet_name: str = "Shows",
    type_aliases: Optional[dict[str, str]] = None,
) -> Assembled:
    """Build and validate the event for one show row."""
    result = Assembled()
    theatre_name, company = matcher.match(normalize_text(resolver.get(row, "company")))
    result.company = company

    raw_date = resolver.get(row, "date")
    raw_time = resolver.get(row, "time")
    raw_type = resolver.get(row, "type")

    event_date = parse_date(raw_date)
    if event_date is None and raw_date:
        result.fallbacks.append(NormalizationFallback(row_number, "date", normalize_text(raw_date), ""))
    event_time = parse_time(raw_time)
    if event_time is None and raw_time:
        result.fallbacks.append(
            NormalizationFallback(row_number, "time", normalize_text(raw_time), TIME_FALLBACK)
        )
    event_type = parse_event_type(raw_type, type_aliases)
    if event_type is None and raw_type:
        result.fallbacks.append(
            NormalizationFallback(row_number, "type", normalize_text(raw_type), TYPE_FALLBACK)
        )

    website = (
        (company and company.show_website)
        or normalize_text(resolver.get(row, "url"))
        or (company and company.website)
        or ""
    )

    event = Event(
        id=_new_id(),
        title=normalize_text(resolver.get(row, "title")),
        theatre_name=theatre_name,
        date=event_date or "",
        time=event_time or TIME_FALLBACK,
        event_type=event_type or TYPE_FALLBACK,
        description=normalize_text(resolver.get(row, "description")),
        website_url=website,
        ticket_url=normalize_text(resolver.get(row, "ticket_url")),
        venue=normalize_text(resolver.get(row, "venue")),
        price=normalize_text(resolver.get(row, "price")),
        sign_language_interpreting=normalize_bool(resolver.get(row, "interpreting")),
    )
    logger.debug(
        "Row %d: title=%r company=%r type=%r date=%r time=%r",
        row_number, event.title, event.theatre_name, event.event_type, event.date, event.time,
    )

    missing = [name for name in REQUIRED_FIELDS if not getattr(event, name)]
    if missing:
        result.rejection = RowRejected(sheet_name, row_number, missing)
        logger.warning("Row %d skipped: %s", row_number, result.rejection.reason)
        return result

    result.event = event
    return result


def venue_from_company(company: Company) -> Venue:
    return Venue(
        name=company.name,
        website=company.website or "",
        address=company.address or "",
        email=company.email or "",
        phone=company.phone or "",
    )


def venue_from_row(row: RawRow, resolver: ColumnResolver, event: Event) -> Venue:
    """Infer venue details from the show row itself (no Companies tab)."""
    return Venue(
        name=event.theatre_name,
        website=event.website_url,
        address=normalize_text(resolver.get(row, "address")),
        email=normalize_text(resolver.get(row, "email")),
        phone=normalize_text(resolver.get(row, "phone")),
    )
