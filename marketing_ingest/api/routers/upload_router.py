"""
marketing_ingest/api/routers/upload_router.py

Workbook upload and dashboard data HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from marketing_ingest.api.dependencies import UploadedSpreadsheet, get_spreadsheet_upload
from marketing_ingest.readers.spreadsheet_reader import SpreadsheetUnreadableError
from marketing_ingest.schemas.upload import UploadResponse, build_upload_response, empty_upload_response
from marketing_ingest.services.ingestion_pipeline import (
    SpreadsheetIngestionPipeline,
    UnknownDatasetError,
    get_ingestion_pipeline,
)

router = APIRouter(tags=["upload"])


@router.post("/all-in-one-upload", response_model=UploadResponse)
def all_in_one_upload(
    upload: UploadedSpreadsheet = Depends(get_spreadsheet_upload),
    dataset: str | None = Query(default=None, description="Treat the first sheet as this dataset"),
    pipeline: SpreadsheetIngestionPipeline = Depends(get_ingestion_pipeline),
) -> UploadResponse:
    """
    Process every recognised dataset in one uploaded workbook or CSV file.
    """

    try:
        result = pipeline.ingest(upload.content, upload.filename, dataset_hint=dataset)
    except UnknownDatasetError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except SpreadsheetUnreadableError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Failed to process file.", "error": str(exc)},
        ) from exc

    return build_upload_response(result)


@router.get("/dashboard-data", response_model=UploadResponse)
def dashboard_data(
    pipeline: SpreadsheetIngestionPipeline = Depends(get_ingestion_pipeline),
) -> UploadResponse:
    """
    Return payloads for the configured default workbook, if any.
    """

    try:
        result = pipeline.ingest_default_workbook()
    except SpreadsheetUnreadableError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Default workbook could not be read.", "error": str(exc)},
        ) from exc

    if result is None:
        return empty_upload_response("No default workbook configured. Upload a file to load data.")
    return build_upload_response(result)
