"""
marketing_ingest/domain package marker.
"""

from marketing_ingest.domain.aggregates import (
    CampaignDataset,
    CampaignSummary,
    CountAggregation,
    CountBucket,
    LedgerCosts,
    LedgerDataset,
    LedgerSummary,
    SumBucket,
)
from marketing_ingest.domain.canonical_rows import (
    CanonicalCampaignRow,
    CanonicalLedgerRow,
    CanonicalNoteRow,
)
from marketing_ingest.domain.ingestion import (
    DatasetAbsent,
    DatasetError,
    DatasetKind,
    DatasetOk,
    DatasetOutcome,
    IngestionResult,
    LedgerCostSheet,
)
from marketing_ingest.domain.sheet_table import RawCell, Row, Sheet, SheetTable, SourceFormat

__all__ = [
    "CampaignDataset",
    "CampaignSummary",
    "CanonicalCampaignRow",
    "CanonicalLedgerRow",
    "CanonicalNoteRow",
    "CountAggregation",
    "CountBucket",
    "DatasetAbsent",
    "DatasetError",
    "DatasetKind",
    "DatasetOk",
    "DatasetOutcome",
    "IngestionResult",
    "LedgerCostSheet",
    "LedgerCosts",
    "LedgerDataset",
    "LedgerSummary",
    "RawCell",
    "Row",
    "Sheet",
    "SheetTable",
    "SourceFormat",
    "SumBucket",
]
