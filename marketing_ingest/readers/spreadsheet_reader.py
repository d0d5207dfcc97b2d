"""
marketing_ingest/readers/spreadsheet_reader.py

Parse uploaded bytes into a uniform SheetTable.

Workbooks are read with openpyxl in read-only, values-only mode. Date and
time cells are converted back to Excel serial numbers so that downstream
code only ever sees numbers and strings, whatever number format the author
used. CSV files become a single sheet named after the file stem.
"""

from __future__ import annotations

import csv
import io
import logging
import math
import zlib
from datetime import date, datetime, time, timedelta
from pathlib import PurePath
from typing import Any, Iterable, Sequence
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.datetime import to_excel
from openpyxl.utils.exceptions import InvalidFileException

from marketing_ingest.domain.sheet_table import RawCell, Row, Sheet, SheetTable, SourceFormat

logger = logging.getLogger(__name__)

WORKBOOK_EXTENSIONS: tuple[str, ...] = (".xlsx", ".xlsm")
CSV_EXTENSIONS: tuple[str, ...] = (".csv",)
SUPPORTED_EXTENSIONS: tuple[str, ...] = WORKBOOK_EXTENSIONS + CSV_EXTENSIONS

DEFAULT_CSV_SHEET_NAME = "Sheet1"
EMPTY_HEADER = "__EMPTY"
_ZIP_SIGNATURE = b"PK\x03\x04"


class SpreadsheetUnreadableError(ValueError):
    """
    Raised when uploaded bytes cannot be parsed as a workbook or CSV file.
    """


def detect_format(filename: str | None, content: bytes) -> str:
    """
    Decide between workbook and CSV parsing from the file name, then the bytes.
    """

    lowered = (filename or "").strip().lower()
    if lowered.endswith(CSV_EXTENSIONS):
        return SourceFormat.CSV
    if lowered.endswith(WORKBOOK_EXTENSIONS):
        return SourceFormat.WORKBOOK
    if content.startswith(_ZIP_SIGNATURE):
        return SourceFormat.WORKBOOK
    return SourceFormat.CSV


def read_upload(content: bytes, filename: str | None, *, header_row: int = 1) -> SheetTable:
    """
    Parse one uploaded file into a SheetTable.
    """

    if not content:
        raise SpreadsheetUnreadableError("Uploaded file is empty.")

    source_format = detect_format(filename, content)
    if source_format == SourceFormat.CSV:
        stem = PurePath(filename or "").stem.strip()
        return read_csv(content, sheet_name=stem or DEFAULT_CSV_SHEET_NAME, header_row=header_row)
    return read_workbook(content, header_row=header_row)


def read_workbook(content: bytes, *, header_row: int = 1) -> SheetTable:
    """
    Read every worksheet of an .xlsx/.xlsm workbook.
    """

    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError, ValueError) as exc:
        raise SpreadsheetUnreadableError(f"Workbook could not be opened: {exc}") from exc

    # Read-only worksheets are parsed lazily, so damaged sheet XML only
    # surfaces while iterating rows. ElementTree and lxml parse errors both
    # derive from SyntaxError.
    try:
        sheets = tuple(
            _build_sheet(
                name=worksheet.title,
                raw_rows=worksheet.iter_rows(values_only=True),
                header_row=header_row,
            )
            for worksheet in workbook.worksheets
        )
    except (SyntaxError, BadZipFile, zlib.error, EOFError, KeyError, ValueError) as exc:
        raise SpreadsheetUnreadableError(f"Worksheet could not be read: {exc}") from exc
    finally:
        workbook.close()

    logger.info("Workbook parsed sheets=%s", [sheet.name for sheet in sheets])
    return SheetTable(sheets=sheets, source_format=SourceFormat.WORKBOOK)


def read_csv(content: bytes, *, sheet_name: str = DEFAULT_CSV_SHEET_NAME, header_row: int = 1) -> SheetTable:
    """
    Read a CSV export as a single-sheet SheetTable.

    A UTF-8 byte-order mark is dropped, blank lines are skipped, ragged rows
    are tolerated and every field is whitespace-trimmed.
    """

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SpreadsheetUnreadableError("CSV must be UTF-8 encoded.") from exc

    try:
        reader = csv.reader(io.StringIO(text, newline=""), strict=False)
        raw_rows = [[field.strip() for field in record] for record in reader]
    except csv.Error as exc:
        raise SpreadsheetUnreadableError(f"Invalid CSV format: {exc}") from exc

    if not any(_has_content(record) for record in raw_rows):
        raise SpreadsheetUnreadableError("CSV file is empty.")

    sheet = _build_sheet(name=sheet_name, raw_rows=raw_rows, header_row=header_row)
    logger.info("CSV parsed sheet=%r rows=%d", sheet.name, len(sheet.rows))
    return SheetTable(sheets=(sheet,), source_format=SourceFormat.CSV)


def _build_sheet(*, name: str, raw_rows: Iterable[Sequence[Any]], header_row: int) -> Sheet:
    headers: tuple[str, ...] = ()
    rows: list[Row] = []
    position = 0

    for values in raw_rows:
        if not _has_content(values):
            continue
        position += 1
        if position < header_row:
            continue
        if position == header_row:
            headers = _dedupe_headers(values)
            continue

        row: Row = {}
        for header, value in zip(headers, values):
            cell = _to_raw_cell(value)
            if cell is not None:
                row[header] = cell
        if row:
            rows.append(row)

    return Sheet(name=name, headers=headers, rows=tuple(rows))


def _dedupe_headers(values: Sequence[Any]) -> tuple[str, ...]:
    texts = [_header_text(value) for value in values]
    while texts and texts[-1] is None:
        texts.pop()

    seen: dict[str, int] = {}
    headers: list[str] = []
    for text in texts:
        base = text if text is not None else EMPTY_HEADER
        if base in seen:
            seen[base] += 1
            headers.append(f"{base}_{seen[base]}")
        else:
            seen[base] = 0
            headers.append(base)
    return tuple(headers)


def _header_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    text = str(value).strip()
    return text or None


def _to_raw_cell(value: Any) -> RawCell | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (datetime, date, time, timedelta)):
        return to_excel(value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return None
        return value
    text = str(value).strip()
    return text or None


def _has_content(values: Sequence[Any]) -> bool:
    return any(_to_raw_cell(value) is not None for value in values)
