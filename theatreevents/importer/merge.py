"""
Merging an import batch into the stored data.

Events are identified by (title, theatre_name, date, time), compared exactly;
venues by their exact name. Merging only ever appends.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol

from theatreevents.models import Event, Venue


class EventStore(Protocol):
    def list_events(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> list[Event]: ...

    def list_venues(self) -> list[Venue]: ...

    def append_events(self, events: list[Event]) -> int: ...

    def append_venues(self, venues: list[Venue]) -> int: ...

    def append(self, venues: list[Venue], events: list[Event]) -> tuple[int, int]: ...


@dataclass
class MergePlan:
    events_to_add: list[Event] = field(default_factory=list)
    venues_to_add: list[Venue] = field(default_factory=list)
    duplicates_in_batch: int = 0


def dedupe_batch(events: Iterable[Event]) -> tuple[list[Event], int]:
    """Keep the first event for each identity key; return (kept, dropped count)."""
    seen: set[tuple[str, str, str, str]] = set()
    kept = []
    dropped = 0
    for event in events:
        if event.identity_key in seen:
            dropped += 1
            continue
        seen.add(event.identity_key)
        kept.append(event)
    return kept, dropped


def plan_merge(
    existing_events: Iterable[Event],
    existing_venues: Iterable[Venue],
    events: Iterable[Event],
    venues: Iterable[Venue],
) -> MergePlan:
    unique_events, dropped = dedupe_batch(events)
    known_keys = {e.identity_key for e in existing_events}
    known_names = {v.name for v in existing_venues}

    plan = MergePlan(duplicates_in_batch=dropped)
    plan.events_to_add = [e for e in unique_events if e.identity_key not in known_keys]
    for venue in venues:
        if venue.name in known_names:
            continue
        known_names.add(venue.name)
        plan.venues_to_add.append(venue)
    return plan
