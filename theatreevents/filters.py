"""
Event filtering for listings.

Each criterion is optional; an empty selection does not filter. Venue
filtering falls back to the company name for events without a venue.
"""

from typing import Iterable, Optional

from theatreevents.models import Event

TIMES_OF_DAY = ("morning", "afternoon", "evening", "all")


def matches_time_of_day(event_time: str, preference: Optional[str]) -> bool:
    """morning: before 12:00, afternoon: 12:00-16:59, evening: 17:00 onwards."""
    if not preference or preference == "all":
        return True
    try:
        hours = int(event_time.split(":")[0])
    except ValueError:
        return True
    if preference == "morning":
        return hours < 12
    if preference == "afternoon":
        return 12 <= hours < 17
    if preference == "evening":
        return hours >= 17
    return True


def filter_events(
    events: Iterable[Event],
    companies: Optional[Iterable[str]] = None,
    venues: Optional[Iterable[str]] = None,
    event_types: Optional[Iterable[str]] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    time_of_day: Optional[str] = None,
    interpreted: bool = False,
) -> list[Event]:
    filtered = list(events)

    if companies and (selected := set(companies)):
        filtered = [e for e in filtered if e.theatre_name in selected]
    if venues and (selected := set(venues)):
        filtered = [e for e in filtered if (e.venue or e.theatre_name) in selected]
    if event_types and (selected := set(event_types)):
        filtered = [e for e in filtered if e.event_type in selected]
    if start_date:
        filtered = [e for e in filtered if e.date >= start_date]
    if end_date:
        filtered = [e for e in filtered if e.date <= end_date]

    filtered = [e for e in filtered if matches_time_of_day(e.time, time_of_day)]

    if interpreted:
        filtered = [e for e in filtered if e.sign_language_interpreting]
    return filtered
