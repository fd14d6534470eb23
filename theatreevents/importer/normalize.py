"""
Cell normalizers.

Every function here is total: it accepts any Cell (or ABSENT) and returns a
canonical value or the documented fallback, never raising. The parse_*
variants return None instead of the fallback so callers can tell a real
value from a fallback.
"""

import math
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from dateutil import parser as dateparser

from theatreevents.importer.columns import Resolved
from theatreevents.models import EVENT_TYPES, DateValue, Number, Text

# Spreadsheet day serial of 1970-01-01
_SERIAL_UNIX_EPOCH = 25569
_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MS_PER_DAY = 86_400_000

_US_SLASH_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_US_DASH_DATE = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)

_CLOCK_TIME = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)?", re.IGNORECASE)
_DIGIT_TIME = re.compile(r"^(\d{1,2})(\d{2})\s*(AM|PM)?$", re.IGNORECASE)
_HOUR_TIME = re.compile(r"^(\d{1,2})\s*(AM|PM)$", re.IGNORECASE)

TIME_FALLBACK = "00:00"
TYPE_FALLBACK = "Other"

TRUE_TOKENS = frozenset({"true", "yes", "1", "available", "offered", "y"})

_COMMON_TYPE_ALIASES = {
    "music": "Musical",
    "concert": "Musical",
    "theatre": "Play",
    "theater": "Play",
    "kid": "Children",
    "kids": "Children",
    "child": "Children",
}

# The two upload flows disagree on "show"; which one applies is a setting.
TYPE_PROFILES: dict[str, dict[str, str]] = {
    "play": {**_COMMON_TYPE_ALIASES, "show": "Play", "performance": "Play"},
    "performance": {**_COMMON_TYPE_ALIASES, "show": "Performance"},
}


def _format_number(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_text(cell: Resolved) -> str:
    if isinstance(cell, Text):
        return cell.value.strip()
    if isinstance(cell, Number):
        return _format_number(cell.value)
    if isinstance(cell, DateValue):
        value = cell.value
        if isinstance(value, datetime) and value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    return ""


def normalize_bool(cell: Resolved) -> bool:
    if isinstance(cell, (Text, Number)):
        return normalize_text(cell).lower() in TRUE_TOKENS
    return False


# --- Dates ---

def _serial_to_date(serial: float) -> date:
    ms = math.floor((serial - _SERIAL_UNIX_EPOCH) * _MS_PER_DAY + 0.5)
    return (_UNIX_EPOCH + timedelta(milliseconds=ms)).date()


def _utc_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def _parse_date_string(text: str) -> Optional[date]:
    if m := _US_SLASH_DATE.match(text):
        month, day, year = map(int, m.groups())
        return date(year, month, day)
    if m := _ISO_DATE.match(text):
        year, month, day = map(int, m.groups())
        return date(year, month, day)
    if m := _US_DASH_DATE.match(text):
        month, day, year = map(int, m.groups())
        return date(year, month, day)
    # Parse against two unrelated defaults: a string that leaves out the year,
    # month or day picks up different values from each and is not a date.
    first = dateparser.parse(text, default=_DEFAULT_A)
    second = dateparser.parse(text, default=_DEFAULT_B)
    if first != second:
        return None
    return _utc_date(first)


def parse_date(cell: Resolved) -> Optional[str]:
    """Return the cell as a YYYY-MM-DD string, or None if it is not a date."""
    try:
        if isinstance(cell, Number):
            parsed = _serial_to_date(cell.value)
        elif isinstance(cell, DateValue):
            value = cell.value
            if isinstance(value, datetime):
                parsed = _utc_date(value)
            elif isinstance(value, date):
                parsed = value
            else:
                return None
        elif isinstance(cell, Text) and cell.value.strip():
            parsed = _parse_date_string(cell.value.strip())
        else:
            return None
    except (ValueError, OverflowError):
        return None
    return parsed.isoformat()


def normalize_date(cell: Resolved) -> str:
    return parse_date(cell) or ""


# --- Times ---

def _clock(hours: int, minutes: int) -> Optional[str]:
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        return None
    return f"{hours:02d}:{minutes:02d}"


def _apply_meridiem(hours: int, meridiem: Optional[str]) -> int:
    if not meridiem:
        return hours
    if meridiem.lower() == "pm" and hours != 12:
        return hours + 12
    if meridiem.lower() == "am" and hours == 12:
        return 0
    return hours


def _parse_time_string(text: str) -> Optional[str]:
    if m := _CLOCK_TIME.search(text):
        hours = _apply_meridiem(int(m.group(1)), m.group(3))
        return _clock(hours, int(m.group(2)))
    if m := _DIGIT_TIME.match(text):
        hours = _apply_meridiem(int(m.group(1)), m.group(3))
        return _clock(hours, int(m.group(2)))
    if m := _HOUR_TIME.match(text):
        return _clock(_apply_meridiem(int(m.group(1)), m.group(2)), 0)
    return None


def parse_time(cell: Resolved) -> Optional[str]:
    """Return the cell as an HH:MM string, or None if it is not a time."""
    if isinstance(cell, Number):
        try:
            fraction = cell.value % 1
            # Tolerance absorbs float error such as 19:31 landing on 1170.9999 minutes
            total_minutes = math.floor(fraction * 24 * 60 + 1e-6) % (24 * 60)
        except (ValueError, OverflowError, TypeError):
            return None
        return _clock(total_minutes // 60, total_minutes % 60)
    if isinstance(cell, DateValue):
        value = cell.value
        if isinstance(value, (datetime, time)):
            return _clock(value.hour, value.minute)
        return None
    if isinstance(cell, Text):
        return _parse_time_string(cell.value.strip())
    return None


def normalize_time(cell: Resolved) -> str:
    return parse_time(cell) or TIME_FALLBACK


# --- Event types ---

def parse_event_type(cell: Resolved, aliases: Optional[dict[str, str]] = None) -> Optional[str]:
    if aliases is None:
        aliases = TYPE_PROFILES["play"]
    raw = normalize_text(cell)
    if not raw:
        return None
    label = raw[0].upper() + raw[1:].lower()
    if label.lower() in aliases:
        return aliases[label.lower()]
    if label in EVENT_TYPES:
        return label
    return None


def normalize_event_type(cell: Resolved, aliases: Optional[dict[str, str]] = None) -> str:
    return parse_event_type(cell, aliases) or TYPE_FALLBACK
