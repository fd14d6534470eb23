from datetime import date, datetime, time, timedelta, timezone

import pytest

from theatreevents.importer.columns import ABSENT
from theatreevents.importer.normalize import (
    TYPE_PROFILES,
    normalize_bool,
    normalize_date,
    normalize_event_type,
    normalize_text,
    normalize_time,
    parse_time,
)
from theatreevents.models import DateValue, Number, Text


# --- Dates ---

def test_serial_date_uses_1970_offset():
    assert normalize_date(Number(45905)) == "2025-09-05"
    assert normalize_date(Number(25569)) == "1970-01-01"


def test_serial_date_with_time_fraction_keeps_calendar_day():
    assert normalize_date(Number(45905.8125)) == "2025-09-05"


@pytest.mark.parametrize("raw, expected", [
    ("1/15/2025", "2025-01-15"),
    ("12/31/2024", "2024-12-31"),
    ("2025-03-07", "2025-03-07"),
    ("3-7-2025", "2025-03-07"),
    ("  2025-03-07 ", "2025-03-07"),
    ("March 7, 2025", "2025-03-07"),
    ("7 March 2025 19:30", "2025-03-07"),
    ("Fri, 7 Mar 2025", "2025-03-07"),
])
def test_string_dates(raw, expected):
    assert normalize_date(Text(raw)) == expected


def test_iso_dates_are_idempotent():
    for raw in ("2025-01-01", "2024-02-29", "1999-12-31"):
        once = normalize_date(Text(raw))
        assert normalize_date(Text(once)) == once == raw


def test_native_dates():
    assert normalize_date(DateValue(datetime(2025, 6, 1, 19, 30))) == "2025-06-01"
    assert normalize_date(DateValue(date(2025, 6, 1))) == "2025-06-01"


def test_aware_datetime_uses_utc_day():
    late = datetime(2025, 6, 1, 23, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert normalize_date(DateValue(late)) == "2025-06-02"


@pytest.mark.parametrize("cell", [
    Text("not a date"), Text("2/30/2025"), Text(""), DateValue(time(19, 30)),
    Text("Friday"), Text("7:30 PM"), Text("March"), Text("March 2025"), Text("15"),
    Number(float("nan")), Number(1e20), ABSENT,
])
def test_invalid_dates_are_empty(cell):
    assert normalize_date(cell) == ""


# --- Times ---

@pytest.mark.parametrize("raw, expected", [
    ("930", "09:30"),
    ("1234", "12:34"),
    ("730 PM", "19:30"),
    ("7:30 PM", "19:30"),
    ("7:30pm", "19:30"),
    ("19:30", "19:30"),
    ("9:05", "09:05"),
    ("12:00 PM", "12:00"),
    ("12:15 AM", "00:15"),
    ("8 PM", "20:00"),
])
def test_string_times(raw, expected):
    assert normalize_time(Text(raw)) == expected


@pytest.mark.parametrize("raw", ["abcd", "", "12345", "25:00", "9:75"])
def test_unparseable_times_fall_back(raw):
    assert normalize_time(Text(raw)) == "00:00"


def test_fractional_day_times():
    assert normalize_time(Number(0.8125)) == "19:30"
    assert normalize_time(Number(0.5)) == "12:00"
    assert normalize_time(Number(1171 / 1440)) == "19:31"


def test_native_times():
    assert normalize_time(DateValue(time(14, 5))) == "14:05"
    assert normalize_time(DateValue(datetime(2025, 1, 1, 9, 45))) == "09:45"


def test_parse_time_distinguishes_fallback_from_midnight():
    assert parse_time(Text("12:00 AM")) == "00:00"
    assert parse_time(Text("abcd")) is None
    assert normalize_time(ABSENT) == "00:00"


# --- Booleans ---

@pytest.mark.parametrize("raw", ["Yes", "1", "available", "Y", " TRUE ", "Offered"])
def test_true_tokens(raw):
    assert normalize_bool(Text(raw)) is True


@pytest.mark.parametrize("raw", ["no", "", "maybe", "0"])
def test_false_tokens(raw):
    assert normalize_bool(Text(raw)) is False


def test_bool_from_numbers_and_absent():
    assert normalize_bool(Number(1)) is True
    assert normalize_bool(Number(0)) is False
    assert normalize_bool(ABSENT) is False


# --- Event types ---

@pytest.mark.parametrize("raw, expected", [
    ("musical", "Musical"),
    ("MUSIC", "Musical"),
    ("concert", "Musical"),
    ("theater", "Play"),
    ("kids", "Children"),
    ("opera", "Opera"),
    ("dance", "Dance"),
    ("circus", "Other"),
])
def test_event_types(raw, expected):
    assert normalize_event_type(Text(raw)) == expected


def test_empty_type_is_other():
    assert normalize_event_type(ABSENT) == "Other"


def test_show_alias_depends_on_profile():
    assert normalize_event_type(Text("show"), TYPE_PROFILES["play"]) == "Play"
    assert normalize_event_type(Text("Show"), TYPE_PROFILES["performance"]) == "Performance"
    assert normalize_event_type(Text("performance"), TYPE_PROFILES["play"]) == "Play"
    assert normalize_event_type(Text("performance"), TYPE_PROFILES["performance"]) == "Performance"


# --- Text ---

def test_text_normalization():
    assert normalize_text(Text("  Hamlet  ")) == "Hamlet"
    assert normalize_text(Number(25.0)) == "25"
    assert normalize_text(Number(12.5)) == "12.5"
    assert normalize_text(ABSENT) == ""
