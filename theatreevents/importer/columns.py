"""
Column-name resolution.

Spreadsheets arrive with inconsistent headings ("Name", "NAME", "Title" ...).
Each logical field lists the headings it accepts, highest priority first.
"""

from typing import Iterable, Union

from theatreevents.models import Cell, RawRow, Text


class _Absent:
    """Sentinel for a field with no usable column in a row."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "ABSENT"


ABSENT = _Absent()

Resolved = Union[Cell, _Absent]

SHOW_COLUMNS: dict[str, tuple[str, ...]] = {
    "title": ("Name", "name", "NAME", "Title", "title"),
    "company": ("Company", "company", "COMPANY"),
    "type": ("Type", "type", "TYPE"),
    "date": ("Date", "date", "DATE"),
    "time": ("StartTime", "starttime", "STARTTIME", "Time", "time", "TIME"),
    "description": ("Description", "description", "DESCRIPTION"),
    "url": ("url", "URL", "Website", "website"),
    "ticket_url": ("TicketURL", "ticketUrl", "TicketUrl", "ticketURL", "Ticket URL", "ticket url"),
    "venue": ("Theatre", "theatre", "THEATRE", "Venue", "venue", "VENUE"),
    "price": ("Price", "price", "PRICE"),
    "interpreting": (
        "InterpretativePerformance", "InterpretivePerformance", "interpretativeperformance",
        "Interpreting", "interpreting", "INTERPRETING",
    ),
    "address": ("Address", "address", "ADDRESS"),
    "email": ("Email", "email", "EMAIL"),
    "phone": ("Phone", "phone", "PHONE"),
}

COMPANY_COLUMNS: dict[str, tuple[str, ...]] = {
    "company": ("Company", "company", "COMPANY"),
    "company_website": ("CompanyWebsite", "companywebsite", "COMPANYWEBSITE"),
    "show_website": (
        "ShowWebsite (if different)", "showwebsite (if different)", "ShowWebsite", "showwebsite",
    ),
    "email": ("Email", "email", "EMAIL"),
    "phone": ("Phone", "phone", "PHONE"),
    "address": ("Address", "address", "ADDRESS"),
}


def _is_blank(cell: Cell) -> bool:
    return isinstance(cell, Text) and not cell.value.strip()


class ColumnResolver:
    """Field lookup for one sheet, narrowed to the headings the sheet has."""

    def __init__(self, headers: Iterable[str], columns: dict[str, tuple[str, ...]] = SHOW_COLUMNS):
        present = set(headers)
        self.columns = {
            name: tuple(alias for alias in aliases if alias in present)
            for name, aliases in columns.items()
        }

    def get(self, row: RawRow, name: str) -> Resolved:
        """Return the first non-blank cell among the field's columns, or ABSENT."""
        for alias in self.columns.get(name, ()):
            cell = row.get(alias)
            if cell is not None and not _is_blank(cell):
                return cell
        return ABSENT

    def missing(self) -> list[str]:
        return [name for name, aliases in self.columns.items() if not aliases]


def resolve(row: RawRow, name: str, columns: dict[str, tuple[str, ...]] = SHOW_COLUMNS) -> Resolved:
    return ColumnResolver(row.keys(), columns).get(row, name)
