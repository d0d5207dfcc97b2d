"""
marketing_ingest/mappers/ledger_normalizer.py

Map consultation ledger rows onto CanonicalLedgerRow.
"""

from __future__ import annotations

from typing import Sequence

from marketing_ingest.domain.canonical_rows import CanonicalLedgerRow
from marketing_ingest.domain.sheet_table import Row
from marketing_ingest.mappers.field_values import first_present, to_text

LEDGER_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "record_number": ("No.", "no"),
    "broker_name": ("Broker", "broker"),
    "raw_date": ("日期", "date"),
    "contact_handle": ("微信", "wechat"),
    "source_channel": ("来源", "source"),
}

LEDGER_KNOWN_FIELDS: tuple[str, ...] = tuple(LEDGER_COLUMN_ALIASES)


class LedgerRowNormalizer:
    """
    Produces one canonical ledger row per source row.

    The date cell is carried through untouched; the aggregation step resolves
    it with the ledger's configured date order.
    """

    def __init__(self, *, aliases: dict[str, tuple[str, ...]] | None = None) -> None:
        self._aliases = aliases or LEDGER_COLUMN_ALIASES

    @property
    def aliases(self) -> dict[str, tuple[str, ...]]:
        return self._aliases

    def normalize(self, rows: Sequence[Row]) -> list[CanonicalLedgerRow]:
        return [self.normalize_row(row) for row in rows]

    def normalize_row(self, row: Row) -> CanonicalLedgerRow:
        return CanonicalLedgerRow(
            record_number=first_present(row, self._aliases["record_number"]),
            broker_name=to_text(first_present(row, self._aliases["broker_name"])),
            raw_date=first_present(row, self._aliases["raw_date"]),
            contact_handle=to_text(first_present(row, self._aliases["contact_handle"])),
            source_channel=to_text(first_present(row, self._aliases["source_channel"])),
        )
