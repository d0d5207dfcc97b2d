"""
marketing_ingest/api/routers/notes_router.py

Notes store HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from marketing_ingest.api.dependencies import UploadedSpreadsheet, get_spreadsheet_upload
from marketing_ingest.readers.spreadsheet_reader import SpreadsheetUnreadableError
from marketing_ingest.repositories.notes_store import NotesStore
from marketing_ingest.schemas.notes import NotesClearResponse, NotesResponse, NotesUploadResponse
from marketing_ingest.schemas.upload import note_rows_response
from marketing_ingest.services.ingestion_pipeline import SpreadsheetIngestionPipeline, get_ingestion_pipeline
from marketing_ingest.validators.sheet_validator import DatasetMalformedError

router = APIRouter(prefix="/notes", tags=["notes"])


def _resolve_store(pipeline: SpreadsheetIngestionPipeline, store: str) -> NotesStore:
    stores = pipeline.notes_stores
    if store not in stores:
        allowed = ", ".join(stores.names)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown notes store '{store}'. Allowed stores: {allowed}.",
        )
    return stores.get(store)


@router.get("/{store}", response_model=NotesResponse)
def get_notes(
    store: str,
    pipeline: SpreadsheetIngestionPipeline = Depends(get_ingestion_pipeline),
) -> NotesResponse:
    """
    Return the notes currently held for one account.
    """

    notes_store = _resolve_store(pipeline, store)
    rows = notes_store.get_data()
    return NotesResponse(
        store=store,
        data=note_rows_response(rows),
        total=len(rows),
        source=notes_store.get_source(),
        uploaded_at=notes_store.uploaded_at(),
    )


@router.delete("/{store}", response_model=NotesClearResponse)
def clear_notes(
    store: str,
    pipeline: SpreadsheetIngestionPipeline = Depends(get_ingestion_pipeline),
) -> NotesClearResponse:
    _resolve_store(pipeline, store).clear_data()
    return NotesClearResponse(success=True, message="Notes data cleared.", store=store)


@router.post("/{store}/upload", response_model=NotesUploadResponse)
def upload_notes(
    store: str,
    upload: UploadedSpreadsheet = Depends(get_spreadsheet_upload),
    pipeline: SpreadsheetIngestionPipeline = Depends(get_ingestion_pipeline),
) -> NotesUploadResponse:
    """
    Replace one account's notes with a standalone notes export.
    """

    _resolve_store(pipeline, store)
    try:
        rows = pipeline.ingest_notes_upload(store, upload.content, upload.filename)
    except DatasetMalformedError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    except SpreadsheetUnreadableError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Failed to process file.", "error": str(exc)},
        ) from exc

    return NotesUploadResponse(
        success=True,
        message=f"Stored {len(rows)} notes.",
        store=store,
        data=note_rows_response(rows),
        total=len(rows),
    )
