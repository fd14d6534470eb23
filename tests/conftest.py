import zipfile
from io import BytesIO
from pathlib import Path

import pytest
from openpyxl import Workbook

import theatreevents.db as db_module


def build_workbook(sheets: dict[str, list[list]]) -> bytes:
    """Serialise {sheet name: [header, row, ...]} to .xlsx bytes."""
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture(name="store")
def store_fixture():
    conn = db_module.connect(Path(":memory:"))
    yield db_module.SqliteStore(conn)
    conn.close()


def truncate_sheet(data: bytes, part: str = "xl/worksheets/sheet1.xml") -> bytes:
    """Return the workbook with one sheet's XML cut in half."""
    source = zipfile.ZipFile(BytesIO(data))
    broken = BytesIO()
    with zipfile.ZipFile(broken, "w") as target:
        for info in source.infolist():
            content = source.read(info.filename)
            if info.filename == part:
                content = content[: len(content) // 2]
            target.writestr(info, content)
    return broken.getvalue()
