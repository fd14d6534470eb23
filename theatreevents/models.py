from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional, Union

EVENT_TYPES = (
    "Play", "Musical", "Comedy", "Drama", "Children",
    "Opera", "Dance", "Performance", "Other",
)


# --- Spreadsheet cells ---

@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Number:
    value: Union[int, float]


@dataclass(frozen=True)
class DateValue:
    value: Union[datetime, date, time]


Cell = Union[Text, Number, DateValue]
RawRow = dict[str, Cell]   # Column label -> cell; blank cells are omitted


# --- Domain records ---

@dataclass
class Company:
    name: str                            # Display name as written in the sheet
    website: Optional[str] = None
    show_website: Optional[str] = None   # Overrides the company website for its shows
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


@dataclass
class Venue:
    name: str          # Unique, exact display name of the company
    website: str = ""
    address: str = ""
    email: str = ""
    phone: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "website": self.website,
            "address": self.address,
            "email": self.email,
            "phone": self.phone,
        }


@dataclass
class Event:
    id: str
    title: str
    theatre_name: str                  # Display name of the producing company
    date: str                          # YYYY-MM-DD
    time: str = "00:00"                # HH:MM, 24-hour
    event_type: str = "Other"          # One of EVENT_TYPES
    description: str = ""
    website_url: str = ""
    ticket_url: Optional[str] = None
    venue: Optional[str] = None
    price: Optional[str] = None        # Free text, e.g. "$25", "Pay what you can"
    sign_language_interpreting: bool = False

    @property
    def identity_key(self) -> tuple[str, str, str, str]:
        return (self.title, self.theatre_name, self.date, self.time)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "theatreName": self.theatre_name,
            "eventType": self.event_type,
            "date": self.date,
            "time": self.time,
            "description": self.description,
            "websiteUrl": self.website_url,
            "ticketUrl": self.ticket_url,
            "venue": self.venue,
            "price": self.price,
            "signLanguageInterpreting": self.sign_language_interpreting,
        }


# --- Import settings and diagnostics ---

@dataclass
class ImportSettings:
    type_profile: str = "play"              # Key into TYPE_PROFILES
    company_matching: str = "normalized"    # "normalized" or "exact"
    require_companies_sheet: bool = False


@dataclass
class RowRejected:
    sheet: str
    row_number: int            # 1-based spreadsheet row, header is row 1
    missing: list[str]

    @property
    def reason(self) -> str:
        return f"missing required field(s): {', '.join(self.missing)}"


@dataclass
class NormalizationFallback:
    row_number: int
    field: str
    raw: str
    fallback: str


@dataclass
class ImportResult:
    success: bool
    message: str
    companies_processed: int = 0
    added_events: int = 0
    added_theatres: int = 0
    total_processed: int = 0   # Show rows accepted as events
    duplicates_in_batch: int = 0
    rejected: list[RowRejected] = field(default_factory=list)
    fallbacks: list[NormalizationFallback] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "companiesProcessed": self.companies_processed,
            "addedEvents": self.added_events,
            "addedTheatres": self.added_theatres,
            "totalProcessed": self.total_processed,
            "rejected": len(self.rejected),
        }
