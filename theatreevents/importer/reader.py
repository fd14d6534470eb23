"""
Spreadsheet reader.

Opens an .xlsx workbook with openpyxl and turns every worksheet into a Sheet:
the first row is the header, each following non-blank row becomes a RawRow
keyed by the (stripped) header label. Blank cells are left out of the row, so
a missing key and an empty cell mean the same thing downstream.
"""

import logging
import zipfile
from dataclasses import dataclass, field
from datetime import date, datetime, time
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Union

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from theatreevents.errors import MissingSheetError, UnreadableFileError
from theatreevents.models import Cell, DateValue, Number, RawRow, Text

logger = logging.getLogger(__name__)

Source = Union[bytes, str, Path, BinaryIO]

# SyntaxError covers XML parse errors from both ElementTree and lxml
_CONTAINER_ERRORS = (
    InvalidFileException, zipfile.BadZipFile, SyntaxError, KeyError, OSError, ValueError,
)


@dataclass
class Sheet:
    name: str
    headers: list[str] = field(default_factory=list)
    rows: list[RawRow] = field(default_factory=list)
    # Spreadsheet row number of each entry in rows (header is row 1)
    row_numbers: list[int] = field(default_factory=list)


def to_cell(value) -> Optional[Cell]:
    """Wrap a raw openpyxl value in its Cell type; None for blank cells."""
    if value is None:
        return None
    # bool is an int subclass, keep it textual so "TRUE" flags still parse
    if isinstance(value, bool):
        return Text("true" if value else "false")
    if isinstance(value, (int, float)):
        return Number(value)
    if isinstance(value, (datetime, date, time)):
        return DateValue(value)
    text = str(value)
    if not text.strip():
        return None
    return Text(text)


def read_workbook(source: Source) -> list[Sheet]:
    """Read every worksheet of a workbook, in workbook order."""
    if isinstance(source, bytes):
        if not source:
            raise UnreadableFileError("the file is empty")
        source = BytesIO(source)

    try:
        workbook = load_workbook(source, data_only=True, read_only=True)
    except _CONTAINER_ERRORS as exc:
        raise UnreadableFileError(type(exc).__name__) from exc

    # Read-only workbooks parse each sheet lazily, so broken sheet parts
    # only surface while iterating rows.
    try:
        return [_read_sheet(name, workbook[name]) for name in workbook.sheetnames]
    except _CONTAINER_ERRORS as exc:
        raise UnreadableFileError(type(exc).__name__) from exc
    finally:
        workbook.close()


def _read_sheet(name: str, worksheet) -> Sheet:
    sheet = Sheet(name=name)
    rows = worksheet.iter_rows(values_only=True)
    try:
        header_row = next(rows)
    except StopIteration:
        return sheet

    columns: list[Optional[str]] = []
    for value in header_row:
        label = str(value).strip() if value is not None else ""
        # Blank and repeated headers can't be addressed by name
        if not label or label in sheet.headers:
            columns.append(None)
            continue
        columns.append(label)
        sheet.headers.append(label)

    for row_number, values in enumerate(rows, start=2):
        row: RawRow = {}
        for label, value in zip(columns, values or ()):
            if label is None:
                continue
            cell = to_cell(value)
            if cell is not None:
                row[label] = cell
        if row:
            sheet.rows.append(row)
            sheet.row_numbers.append(row_number)

    logger.info("Sheet %r: %d columns, %d rows", name, len(sheet.headers), len(sheet.rows))
    return sheet


def find_sheets(sheets: list[Sheet], require_companies: bool = False) -> tuple[Sheet, Optional[Sheet]]:
    """
    Pick the shows sheet and the optional companies sheet by name.

    Matching is a case-insensitive substring test: "show" for shows,
    "compan" for companies. Raises MissingSheetError listing what was found.
    """
    shows = next((s for s in sheets if "show" in s.name.lower()), None)
    companies = next((s for s in sheets if "compan" in s.name.lower()), None)

    required = []
    if require_companies and companies is None:
        required.append("Companies")
    if shows is None:
        required.append("Shows")
    if required:
        raise MissingSheetError([s.name for s in sheets], required)

    logger.info(
        "Using shows sheet %r%s", shows.name,
        f" and companies sheet {companies.name!r}" if companies else "",
    )
    return shows, companies
