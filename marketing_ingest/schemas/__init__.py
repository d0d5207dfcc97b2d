"""
marketing_ingest/schemas package marker.
"""

from marketing_ingest.schemas.notes import NotesClearResponse, NotesResponse, NotesUploadResponse
from marketing_ingest.schemas.upload import (
    CampaignDatasetResponse,
    DashboardDataResponse,
    LedgerDatasetResponse,
    NoteRowResponse,
    UploadResponse,
    build_upload_response,
    empty_upload_response,
)

__all__ = [
    "CampaignDatasetResponse",
    "DashboardDataResponse",
    "LedgerDatasetResponse",
    "NoteRowResponse",
    "NotesClearResponse",
    "NotesResponse",
    "NotesUploadResponse",
    "UploadResponse",
    "build_upload_response",
    "empty_upload_response",
]
