"""
marketing_ingest/dates/date_resolver.py

Resolution of raw spreadsheet cells into calendar dates.

Cells arrive either as Excel serial numbers (days since 1899-12-30, the
fractional part being the time of day) or as locale-formatted strings. The
two source systems disagree on slash-separated dates, so the caller always
states the expected field order explicitly:

    DateOrder.DMY   "19/09/2024" -> 2024-09-19  (consultation ledger)
    DateOrder.MDY   "09/19/2024" -> 2024-09-19  (ad-campaign export)

Unparseable input resolves to ``None``; callers skip such rows for
date-bucketed aggregation instead of failing the upload.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from typing import Any

EXCEL_EPOCH = datetime(1899, 12, 30)
SECONDS_PER_DAY = 86400

TWO_DIGIT_YEAR_PIVOT = 50

GENERIC_DATE_FORMATS: tuple[str, ...] = (
    "%Y.%m.%d",
    "%Y.%m.%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y年%m月%d日",
    "%Y年%m月%d日 %H:%M",
    "%Y年%m月%d日 %H:%M:%S",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%d-%b-%Y",
)

_NUMERIC_STRING = re.compile(r"^\d+(\.\d+)?$")
_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


class DateOrder:
    """
    Field order of slash-separated date strings.
    """

    DMY = "dmy"
    MDY = "mdy"
    ALL = frozenset({DMY, MDY})


def excel_serial_to_datetime(serial: float) -> datetime | None:
    """
    Convert an Excel serial day count into a naive datetime.

    The time of day is rounded to the nearest second.
    """

    if isinstance(serial, bool) or not math.isfinite(serial):
        return None
    try:
        return EXCEL_EPOCH + timedelta(seconds=round(serial * SECONDS_PER_DAY))
    except OverflowError:
        return None


def to_excel_serial(value: date) -> int:
    """
    Return the whole-day Excel serial of a calendar date.
    """

    return (value - EXCEL_EPOCH.date()).days


def resolve_datetime(cell: Any, order: str) -> datetime | None:
    """
    Resolve one raw cell into a naive datetime, or ``None`` when unparseable.
    """

    if order not in DateOrder.ALL:
        raise ValueError(f"Unsupported date order '{order}'. Allowed values: {sorted(DateOrder.ALL)}.")

    if cell is None or isinstance(cell, bool):
        return None
    if isinstance(cell, datetime):
        return cell.replace(tzinfo=None)
    if isinstance(cell, date):
        return datetime(cell.year, cell.month, cell.day)
    if isinstance(cell, (int, float)):
        return excel_serial_to_datetime(cell)
    if isinstance(cell, str):
        return _resolve_string(cell, order)
    return None


def resolve_date(cell: Any, order: str) -> date | None:
    """
    Resolve one raw cell into a calendar date, or ``None`` when unparseable.
    """

    moment = resolve_datetime(cell, order)
    return moment.date() if moment is not None else None


def format_iso_date(cell: Any, order: str) -> str | None:
    """
    Resolve a raw cell and render it as ``YYYY-MM-DD``.
    """

    resolved = resolve_date(cell, order)
    return resolved.isoformat() if resolved is not None else None


def format_timestamp(moment: datetime) -> str:
    """
    Render ``YYYY-MM-DD`` for midnight values, else ``YYYY-MM-DD HH:MM:SS``.
    """

    if moment.hour == 0 and moment.minute == 0 and moment.second == 0:
        return moment.strftime("%Y-%m-%d")
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def _resolve_string(raw: str, order: str) -> datetime | None:
    text = raw.strip()
    if not text:
        return None

    # Plain digit strings are never calendar text; treat them as serials.
    if _NUMERIC_STRING.match(text):
        return excel_serial_to_datetime(float(text))

    if "/" in text:
        parts = text.split("/")
        if len(parts) == 3:
            return _resolve_slash_parts(parts, order)

    return _parse_generic(text)


def _resolve_slash_parts(parts: list[str], order: str) -> datetime | None:
    numbers: list[int] = []
    widths: list[int] = []
    for part in parts:
        match = _LEADING_DIGITS.match(part)
        if match is None:
            return None
        numbers.append(int(match.group(1)))
        widths.append(len(match.group(1)))

    if widths[0] == 4:
        year, month, day = numbers
    elif order == DateOrder.DMY:
        day, month, year = numbers
    else:
        month, day, year = numbers

    if year < 100:
        year = 1900 + year if year > TWO_DIGIT_YEAR_PIVOT else 2000 + year

    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def _parse_generic(text: str) -> datetime | None:
    normalized = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return datetime.fromisoformat(normalized).replace(tzinfo=None)
    except ValueError:
        pass

    for fmt in GENERIC_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None
