"""
marketing_ingest/readers package marker.
"""

from marketing_ingest.readers.spreadsheet_reader import (
    SUPPORTED_EXTENSIONS,
    SpreadsheetUnreadableError,
    detect_format,
    read_csv,
    read_upload,
    read_workbook,
)

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "SpreadsheetUnreadableError",
    "detect_format",
    "read_csv",
    "read_upload",
    "read_workbook",
]
