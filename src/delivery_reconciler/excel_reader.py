"""Excel extraction for plans and the client directory.

Plans and the master client list are often kept as workbooks. This module
reads them with ``openpyxl``: the directory becomes :class:`DirectoryEntry`
objects and a plan sheet is rendered as tab-separated text for the plan
parser.
"""

from __future__ import annotations

from pathlib import Path  # Filesystem path management
from typing import Any, List

from openpyxl import load_workbook  # Excel file loader

from delivery_reconciler.directory import entries_from_records
from delivery_reconciler.model import DirectoryEntry

DIRECTORY_SHEET = "clients"


def _open(workbook_path: Path):
    workbook_path = Path(workbook_path)  # Ensure we have a Path instance
    if not workbook_path.exists():  # Validate the file exists
        raise FileNotFoundError(f"Workbook not found: {workbook_path}")
    # Read-only mode, cell values only
    return load_workbook(filename=workbook_path, read_only=True, data_only=True)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))  # 10.0 -> "10"
    return str(value).strip()


def extract_directory(
    workbook_path: Path, sheet_name: str = DIRECTORY_SHEET
) -> List[DirectoryEntry]:
    """Return directory entries from the ``clients`` worksheet.

    The first row holds the headers; ``Name``, ``Location`` (or ``Zone``) and
    ``Freezer`` are recognised. Raises :class:`FileNotFoundError` for a missing
    workbook and :class:`ValueError` for a missing worksheet.
    """

    workbook = _open(workbook_path)
    try:
        try:
            sheet = workbook[sheet_name]
        except KeyError as exc:
            raise ValueError(f"Worksheet '{sheet_name}' not found in workbook") from exc

        rows = sheet.iter_rows(values_only=True)
        headers_row = next(rows, None)
        if headers_row is None:  # Empty sheet
            return []

        headers = [_cell_text(h).lower() for h in headers_row]
        records = []
        for row in rows:
            record = {headers[idx]: value for idx, value in enumerate(row) if idx < len(headers)}
            records.append(
                {
                    "name": _cell_text(record.get("name")),
                    "location": _cell_text(record.get("location") or record.get("zone")),
                    "freezer": record.get("freezer"),
                    "notes": _cell_text(record.get("notes")),
                }
            )
    finally:
        workbook.close()  # Always close the workbook handle

    return entries_from_records(records)


def extract_plan_text(workbook_path: Path, sheet_name: str | None = None) -> str:
    """Render a plan worksheet (the first one by default) as tab-separated lines."""

    workbook = _open(workbook_path)
    try:
        if sheet_name is None:
            sheet = workbook.worksheets[0]
        else:
            try:
                sheet = workbook[sheet_name]
            except KeyError as exc:
                raise ValueError(f"Worksheet '{sheet_name}' not found in workbook") from exc

        lines = []
        for row in sheet.iter_rows(values_only=True):
            cells = [_cell_text(v) for v in row]
            while cells and not cells[-1]:
                cells.pop()
            if cells:
                lines.append("\t".join(cells))
    finally:
        workbook.close()

    return "\n".join(lines)


__all__ = ["extract_directory", "extract_plan_text"]
