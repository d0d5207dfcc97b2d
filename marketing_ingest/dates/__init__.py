"""
marketing_ingest/dates package marker.
"""

from marketing_ingest.dates.date_resolver import (
    DateOrder,
    excel_serial_to_datetime,
    format_iso_date,
    format_timestamp,
    resolve_date,
    resolve_datetime,
    to_excel_serial,
)
from marketing_ingest.dates.period_labels import (
    Granularity,
    day_label,
    month_label,
    period_label,
    week_label,
)

__all__ = [
    "DateOrder",
    "Granularity",
    "day_label",
    "excel_serial_to_datetime",
    "format_iso_date",
    "format_timestamp",
    "month_label",
    "period_label",
    "resolve_date",
    "resolve_datetime",
    "to_excel_serial",
    "week_label",
]
