"""
marketing_ingest/services package marker.
"""

from marketing_ingest.services.aggregation_service import AggregationService
from marketing_ingest.services.ingestion_pipeline import (
    SpreadsheetIngestionPipeline,
    UnknownDatasetError,
    get_ingestion_pipeline,
)

__all__ = [
    "AggregationService",
    "SpreadsheetIngestionPipeline",
    "UnknownDatasetError",
    "get_ingestion_pipeline",
]
