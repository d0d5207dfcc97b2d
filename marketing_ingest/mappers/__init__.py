"""
marketing_ingest/mappers package marker.
"""

from marketing_ingest.mappers.campaign_normalizer import (
    AD_CAMPAIGN_EXTRA_COLUMNS,
    CAMPAIGN_B_EXTRA_COLUMNS,
    CampaignNormalization,
    CampaignRowNormalizer,
    MetricColumn,
    MetricKind,
)
from marketing_ingest.mappers.field_values import first_present, normalize_header, to_float, to_int, to_text
from marketing_ingest.mappers.ledger_cost_normalizer import LedgerCostNormalizer
from marketing_ingest.mappers.ledger_normalizer import LEDGER_KNOWN_FIELDS, LedgerRowNormalizer
from marketing_ingest.mappers.notes_normalizer import NOTES_KNOWN_FIELDS, NotesRowNormalizer
from marketing_ingest.mappers.sheet_locator import DEFAULT_SHEET_RULES, SheetLocator, SheetMatch, SheetMatchRule

__all__ = [
    "AD_CAMPAIGN_EXTRA_COLUMNS",
    "CAMPAIGN_B_EXTRA_COLUMNS",
    "CampaignNormalization",
    "CampaignRowNormalizer",
    "DEFAULT_SHEET_RULES",
    "LEDGER_KNOWN_FIELDS",
    "LedgerCostNormalizer",
    "LedgerRowNormalizer",
    "MetricColumn",
    "MetricKind",
    "NOTES_KNOWN_FIELDS",
    "NotesRowNormalizer",
    "SheetLocator",
    "SheetMatch",
    "SheetMatchRule",
    "first_present",
    "normalize_header",
    "to_float",
    "to_int",
    "to_text",
]
