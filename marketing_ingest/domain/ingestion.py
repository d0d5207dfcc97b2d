"""
marketing_ingest/domain/ingestion.py

Dataset identifiers and per-dataset outcomes of one upload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Union


class DatasetKind:
    """
    Logical datasets recognised inside an uploaded workbook.
    """

    CONSULTATION = "consultation"
    AD_CAMPAIGN = "ad_campaign"
    NOTES_A = "notes_a"
    CAMPAIGN_B = "campaign_b"
    NOTES_B = "notes_b"

    ALL = (CONSULTATION, AD_CAMPAIGN, NOTES_A, CAMPAIGN_B, NOTES_B)
    NOTES = (NOTES_A, NOTES_B)
    CAMPAIGNS = (AD_CAMPAIGN, CAMPAIGN_B)


class LedgerCostSheet:
    """
    Auxiliary sheets carrying the spend behind the consultation ledger.

    They are never reported as datasets of their own; their costs are folded
    into the consultation buckets of the matching granularity.
    """

    MONTHLY = "ledger_cost_monthly"
    WEEKLY = "ledger_cost_weekly"
    DAILY = "ledger_cost_daily"

    ALL = (MONTHLY, WEEKLY, DAILY)


@dataclass(frozen=True)
class DatasetOk:
    dataset: str
    sheet_name: str
    payload: Any


@dataclass(frozen=True)
class DatasetAbsent:
    dataset: str


@dataclass(frozen=True)
class DatasetError:
    dataset: str
    sheet_name: str | None
    message: str


DatasetOutcome = Union[DatasetOk, DatasetAbsent, DatasetError]


@dataclass(frozen=True)
class IngestionResult:
    """
    Assembled result of one pipeline run.
    """

    outcomes: dict[str, DatasetOutcome]
    source_format: str
    sheet_names: list[str] = field(default_factory=list)
    processed_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))

    @property
    def processed(self) -> dict[str, bool]:
        return {
            dataset: isinstance(outcome, DatasetOk)
            for dataset, outcome in self.outcomes.items()
        }

    @property
    def errors(self) -> dict[str, str]:
        return {
            dataset: outcome.message
            for dataset, outcome in self.outcomes.items()
            if isinstance(outcome, DatasetError)
        }

    @property
    def data(self) -> dict[str, Any]:
        return {
            dataset: outcome.payload if isinstance(outcome, DatasetOk) else None
            for dataset, outcome in self.outcomes.items()
        }
