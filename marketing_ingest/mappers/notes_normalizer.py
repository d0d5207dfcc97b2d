"""
marketing_ingest/mappers/notes_normalizer.py

Filter and map notes export rows onto CanonicalNoteRow.
"""

from __future__ import annotations

from typing import Sequence

from marketing_ingest.dates.date_resolver import excel_serial_to_datetime, format_timestamp
from marketing_ingest.domain.canonical_rows import CanonicalNoteRow
from marketing_ingest.domain.sheet_table import RawCell, Row
from marketing_ingest.mappers.field_values import first_present, to_text

NOTES_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "status": ("笔记状态", "状态", "Status"),
    "published_at": ("笔记发布时间", "发布时间", "Post Time"),
    "note_type": ("笔记类型", "类型", "Type"),
    "title": ("笔记名称", "名称", "Name"),
    "link": ("笔记链接", "链接", "Link"),
}

NOTES_KNOWN_FIELDS: tuple[str, ...] = ("published_at", "note_type", "title", "link")

EXCLUDED_NOTE_STATUSES: frozenset[str] = frozenset({"笔记违规", "仅自己可见"})
EXCLUDED_PUBLISH_PREFIX = "专业号行业"


class NotesRowNormalizer:
    """
    Drops hidden or policy-violating notes, then keeps the four display columns.
    """

    def __init__(self, *, aliases: dict[str, tuple[str, ...]] | None = None) -> None:
        self._aliases = aliases or NOTES_COLUMN_ALIASES

    @property
    def aliases(self) -> dict[str, tuple[str, ...]]:
        return self._aliases

    def normalize(self, rows: Sequence[Row]) -> list[CanonicalNoteRow]:
        return [self.normalize_row(row) for row in rows if self.is_visible(row)]

    def is_visible(self, row: Row) -> bool:
        status = to_text(first_present(row, self._aliases["status"]))
        if status in EXCLUDED_NOTE_STATUSES:
            return False
        published = to_text(first_present(row, self._aliases["published_at"]))
        return not published.startswith(EXCLUDED_PUBLISH_PREFIX)

    def normalize_row(self, row: Row) -> CanonicalNoteRow:
        return CanonicalNoteRow(
            published_at=_published_text(first_present(row, self._aliases["published_at"])),
            note_type=to_text(first_present(row, self._aliases["note_type"])),
            title=to_text(first_present(row, self._aliases["title"])),
            link=to_text(first_present(row, self._aliases["link"])),
        )


def _published_text(value: RawCell | None) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        moment = excel_serial_to_datetime(value)
        if moment is not None:
            return format_timestamp(moment)
    return to_text(value)
