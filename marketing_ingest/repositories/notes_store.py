"""
marketing_ingest/repositories/notes_store.py

Process-local stores holding the most recently uploaded notes per account.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from functools import lru_cache
from typing import Sequence

from marketing_ingest.domain.canonical_rows import CanonicalNoteRow
from marketing_ingest.domain.ingestion import DatasetKind


class NotesSource:
    UPLOADED = "uploaded"


class UnknownNotesStoreError(KeyError):
    """
    Raised when a notes store name is not one of the configured stores.
    """


class NotesStore:
    """
    Replace-on-write holder for one account's notes.

    Readers get a copy of the rows; a write swaps the whole list under the
    lock, so the last upload wins.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._lock = threading.Lock()
        self._rows: list[CanonicalNoteRow] = []
        self._source: str | None = None
        self._uploaded_at: datetime | None = None

    @property
    def name(self) -> str:
        return self._name

    def set_data(self, rows: Sequence[CanonicalNoteRow], *, source: str = NotesSource.UPLOADED) -> None:
        snapshot = list(rows)
        with self._lock:
            self._rows = snapshot
            self._source = source
            self._uploaded_at = datetime.now(tz=timezone.utc)

    def get_data(self) -> list[CanonicalNoteRow]:
        with self._lock:
            return list(self._rows)

    def clear_data(self) -> None:
        with self._lock:
            self._rows = []
            self._source = None
            self._uploaded_at = None

    def has_data(self) -> bool:
        with self._lock:
            return bool(self._rows)

    def get_source(self) -> str | None:
        with self._lock:
            return self._source

    def uploaded_at(self) -> datetime | None:
        with self._lock:
            return self._uploaded_at


class NotesStoreRegistry:
    """
    One NotesStore per notes dataset.
    """

    def __init__(self, names: Sequence[str] = DatasetKind.NOTES) -> None:
        self._stores = {name: NotesStore(name) for name in names}

    @property
    def names(self) -> list[str]:
        return list(self._stores)

    def get(self, name: str) -> NotesStore:
        store = self._stores.get(name)
        if store is None:
            allowed = ", ".join(self._stores)
            raise UnknownNotesStoreError(f"Unknown notes store '{name}'. Allowed stores: {allowed}.")
        return store

    def __contains__(self, name: object) -> bool:
        return name in self._stores


@lru_cache(maxsize=1)
def get_notes_stores() -> NotesStoreRegistry:
    return NotesStoreRegistry()
