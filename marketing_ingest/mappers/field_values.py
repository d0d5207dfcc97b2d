"""
marketing_ingest/mappers/field_values.py

Header fallback chains and lenient cell coercion shared by row normalizers.
"""

from __future__ import annotations

import math
import re
from typing import Any, Mapping, Sequence

_LEADING_FLOAT = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_LEADING_INT = re.compile(r"^[+-]?\d+")


def normalize_header(header: str) -> str:
    """
    Normalize a column name for flexible matching.
    """

    return "".join(ch for ch in header.strip().lower() if ch.isalnum())


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def first_present(row: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """
    Return the first non-blank value found under ``aliases``.

    Exact header names are tried in alias order first; only then are headers
    compared in normalized form (case, spacing and punctuation ignored).
    """

    for alias in aliases:
        value = row.get(alias)
        if not is_blank(value):
            return value

    normalized_lookup: dict[str, str] = {}
    for header in row:
        normalized_lookup.setdefault(normalize_header(header), header)

    for alias in aliases:
        header = normalized_lookup.get(normalize_header(alias))
        if header is not None and not is_blank(row[header]):
            return row[header]
    return None


def to_float(value: Any) -> float:
    """
    Coerce a cell into a float; blanks and garbage become ``0.0``.

    Strings lose a trailing ``%`` and thousands separators, then the leading
    numeric prefix is used.
    """

    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    text = _clean_numeric_text(str(value))
    try:
        number = float(text)
    except ValueError:
        match = _LEADING_FLOAT.match(text)
        if match is None:
            return 0.0
        number = float(match.group(0))
    return number if math.isfinite(number) else 0.0


def to_int(value: Any) -> int:
    """
    Coerce a cell into an int, truncating any fractional part.
    """

    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return math.trunc(value)

    match = _LEADING_INT.match(_clean_numeric_text(str(value)))
    return int(match.group(0)) if match is not None else 0


def to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _clean_numeric_text(text: str) -> str:
    cleaned = text.strip().replace(",", "")
    if cleaned.endswith("%"):
        cleaned = cleaned[:-1].strip()
    return cleaned
