"""
marketing_ingest/domain/sheet_table.py

Uniform in-memory representation of an uploaded workbook or CSV file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

RawCell = Union[int, float, str]
"""One non-empty cell value. Empty cells are absent from the row mapping."""

Row = dict[str, RawCell]


class SourceFormat:
    WORKBOOK = "workbook"
    CSV = "csv"


@dataclass(frozen=True)
class Sheet:
    """
    One named sheet: header tuple plus data rows keyed by header.
    """

    name: str
    headers: tuple[str, ...] = ()
    rows: tuple[Row, ...] = ()


@dataclass(frozen=True)
class SheetTable:
    """
    Ordered sequence of sheets parsed from one upload.
    """

    sheets: tuple[Sheet, ...] = field(default_factory=tuple)
    source_format: str = SourceFormat.WORKBOOK

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]

    def get(self, name: str) -> Sheet | None:
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        return None

    def first(self) -> Sheet | None:
        return self.sheets[0] if self.sheets else None
