"""
marketing_ingest/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, File, HTTPException, UploadFile, status

from marketing_ingest.config import IngestionSettings, get_ingestion_settings
from marketing_ingest.readers.spreadsheet_reader import SUPPORTED_EXTENSIONS

SPREADSHEET_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel.sheet.macroenabled.12",
}


@dataclass(frozen=True)
class UploadedSpreadsheet:
    filename: str | None
    content: bytes


def get_spreadsheet_upload(
    file: UploadFile = File(...),
    settings: IngestionSettings = Depends(get_ingestion_settings),
) -> UploadedSpreadsheet:
    """
    Validate the uploaded file type and size, then return its bytes.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    if not filename.endswith(SUPPORTED_EXTENSIONS) and content_type not in SPREADSHEET_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only .xlsx, .xlsm and .csv files are allowed.",
        )

    try:
        content = file.file.read(settings.max_upload_bytes + 1)
    finally:
        file.file.close()

    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty.",
        )
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Uploaded file exceeds the {settings.max_upload_bytes} byte limit.",
        )

    return UploadedSpreadsheet(filename=file.filename, content=content)
