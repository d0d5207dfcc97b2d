"""
marketing_ingest/validators package marker.
"""

from marketing_ingest.validators.sheet_validator import DatasetMalformedError, SheetErrorDetail, SheetValidator

__all__ = [
    "DatasetMalformedError",
    "SheetErrorDetail",
    "SheetValidator",
]
