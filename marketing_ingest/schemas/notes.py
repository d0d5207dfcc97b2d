"""
marketing_ingest/schemas/notes.py

Response schemas for notes store endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from marketing_ingest.schemas.upload import NoteRowResponse


class NotesResponse(BaseModel):
    """
    API response model for the current contents of one notes store.
    """

    store: str
    data: list[NoteRowResponse] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    source: str | None = None
    uploaded_at: datetime | None = None


class NotesUploadResponse(BaseModel):
    success: bool
    message: str
    store: str
    data: list[NoteRowResponse] = Field(default_factory=list)
    total: int = Field(..., ge=0)


class NotesClearResponse(BaseModel):
    success: bool
    message: str
    store: str
