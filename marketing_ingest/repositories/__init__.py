"""
marketing_ingest/repositories package marker.
"""

from marketing_ingest.repositories.notes_store import (
    NotesSource,
    NotesStore,
    NotesStoreRegistry,
    UnknownNotesStoreError,
    get_notes_stores,
)

__all__ = [
    "NotesSource",
    "NotesStore",
    "NotesStoreRegistry",
    "UnknownNotesStoreError",
    "get_notes_stores",
]
