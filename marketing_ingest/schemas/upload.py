"""
marketing_ingest/schemas/upload.py

Response schemas for workbook upload and dashboard data endpoints.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Union

from pydantic import BaseModel, Field

from marketing_ingest.domain.aggregates import CampaignDataset, LedgerDataset
from marketing_ingest.domain.canonical_rows import CanonicalNoteRow
from marketing_ingest.domain.ingestion import DatasetKind, IngestionResult

RawCellValue = Union[int, float, str, None]


class LedgerRowResponse(BaseModel):
    record_number: RawCellValue = None
    broker_name: str = ""
    raw_date: RawCellValue = None
    contact_handle: str = ""
    source_channel: str = ""


class CampaignRowResponse(BaseModel):
    """
    API response model for one normalized campaign day; currency in AUD.
    """

    date: str
    cost_aud: float = 0.0
    impressions: int = 0
    clicks: int = 0
    likes: int = 0
    comments: int = 0
    favorites: int = 0
    followers: int = 0
    shares: int = 0
    interactions: int = 0
    conversions: int = 0
    conversion_cost_aud: float = 0.0
    extra_metrics: dict[str, float] = Field(default_factory=dict)


class NoteRowResponse(BaseModel):
    published_at: str = ""
    note_type: str = ""
    title: str = ""
    link: str = ""


class CountBucketResponse(BaseModel):
    label: str
    record_count: int = Field(..., ge=0)
    total_cost: float = 0.0
    derived_average: float = 0.0


class SumBucketResponse(BaseModel):
    label: str
    record_count: int = Field(..., ge=0)
    total_cost: float = 0.0
    metrics: dict[str, float] = Field(default_factory=dict)
    derived_average: float = 0.0
    cost_per: dict[str, float] = Field(default_factory=dict)


class LedgerSummaryResponse(BaseModel):
    total_records: int = Field(..., ge=0)
    unique_clients: int = Field(..., ge=0)
    invalid_date_rows: int = Field(..., ge=0)
    broker_counts: dict[str, int] = Field(default_factory=dict)


class CampaignSummaryResponse(BaseModel):
    total_rows: int = Field(..., ge=0)
    dropped_rows: int = Field(..., ge=0)
    total_cost: float = 0.0
    totals: dict[str, float] = Field(default_factory=dict)
    avg_click_rate: float = 0.0
    avg_conversion_cost: float = 0.0


class LedgerDatasetResponse(BaseModel):
    """
    API response model for the consultation ledger payload.
    """

    record_rows: list[LedgerRowResponse] = Field(default_factory=list)
    daily_buckets: list[CountBucketResponse] = Field(default_factory=list)
    weekly_buckets: list[CountBucketResponse] = Field(default_factory=list)
    monthly_buckets: list[CountBucketResponse] = Field(default_factory=list)
    summary: LedgerSummaryResponse


class CampaignDatasetResponse(BaseModel):
    """
    API response model for one campaign ledger payload.
    """

    record_rows: list[CampaignRowResponse] = Field(default_factory=list)
    daily_buckets: list[SumBucketResponse] = Field(default_factory=list)
    weekly_buckets: list[SumBucketResponse] = Field(default_factory=list)
    monthly_buckets: list[SumBucketResponse] = Field(default_factory=list)
    summary: CampaignSummaryResponse


class DashboardDataResponse(BaseModel):
    consultation: LedgerDatasetResponse | None = None
    ad_campaign: CampaignDatasetResponse | None = None
    notes_a: list[NoteRowResponse] | None = None
    campaign_b: CampaignDatasetResponse | None = None
    notes_b: list[NoteRowResponse] | None = None


class UploadResponse(BaseModel):
    """
    API response model for one processed upload.
    """

    success: bool
    message: str
    processed: dict[str, bool]
    errors: dict[str, str] = Field(default_factory=dict)
    data: DashboardDataResponse
    timestamp: datetime


def note_rows_response(rows: list[CanonicalNoteRow]) -> list[NoteRowResponse]:
    return [NoteRowResponse(**asdict(row)) for row in rows]


def _ledger_response(payload: LedgerDataset | None) -> LedgerDatasetResponse | None:
    if payload is None:
        return None
    return LedgerDatasetResponse.model_validate(asdict(payload))


def _campaign_response(payload: CampaignDataset | None) -> CampaignDatasetResponse | None:
    if payload is None:
        return None
    return CampaignDatasetResponse.model_validate(asdict(payload))


def _notes_response(payload: list[CanonicalNoteRow] | None) -> list[NoteRowResponse] | None:
    if payload is None:
        return None
    return note_rows_response(payload)


def describe_result(result: IngestionResult) -> str:
    processed = [dataset for dataset, ok in result.processed.items() if ok]
    if not processed:
        if result.errors:
            return "No dataset could be processed."
        return "No recognised datasets found in upload."
    message = f"Processed {len(processed)} of {len(result.processed)} datasets: {', '.join(processed)}."
    if result.errors:
        message += f" Failed: {', '.join(result.errors)}."
    return message


def build_upload_response(result: IngestionResult, *, message: str | None = None) -> UploadResponse:
    """
    Convert a pipeline result into the upload response contract.
    """

    data = result.data
    return UploadResponse(
        success=True,
        message=message or describe_result(result),
        processed=result.processed,
        errors=result.errors,
        data=DashboardDataResponse(
            consultation=_ledger_response(data.get(DatasetKind.CONSULTATION)),
            ad_campaign=_campaign_response(data.get(DatasetKind.AD_CAMPAIGN)),
            notes_a=_notes_response(data.get(DatasetKind.NOTES_A)),
            campaign_b=_campaign_response(data.get(DatasetKind.CAMPAIGN_B)),
            notes_b=_notes_response(data.get(DatasetKind.NOTES_B)),
        ),
        timestamp=result.processed_at,
    )


def empty_upload_response(message: str) -> UploadResponse:
    return UploadResponse(
        success=True,
        message=message,
        processed={dataset: False for dataset in DatasetKind.ALL},
        data=DashboardDataResponse(),
        timestamp=datetime.now(tz=timezone.utc),
    )
