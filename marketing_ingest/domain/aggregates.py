"""
marketing_ingest/domain/aggregates.py

Bucket and per-dataset payload models assembled by the ingestion pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from marketing_ingest.domain.canonical_rows import (
    CanonicalCampaignRow,
    CanonicalLedgerRow,
    CanonicalNoteRow,
)


@dataclass
class CountBucket:
    """
    Record count for one day, week or month label.

    ``total_cost`` is the spend attributed to the label, so a bucket may
    carry cost with a zero ``record_count``.
    """

    label: str
    record_count: int = 0
    total_cost: float = 0.0
    derived_average: float = 0.0


@dataclass
class SumBucket:
    """
    Running metric sums for one day, week or month label.

    ``derived_average`` and ``cost_per`` are filled in after every row has
    been folded into the bucket.
    """

    label: str
    record_count: int = 0
    total_cost: float = 0.0
    metrics: dict[str, float] = field(default_factory=dict)
    derived_average: float = 0.0
    cost_per: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class CountAggregation:
    """
    Count buckets plus the number of rows whose date could not be resolved.
    """

    buckets: list[CountBucket]
    invalid_date_rows: int = 0


@dataclass(frozen=True)
class LedgerCosts:
    """
    Spend in AUD keyed by bucket label, one mapping per granularity.
    """

    daily: dict[str, float] = field(default_factory=dict)
    weekly: dict[str, float] = field(default_factory=dict)
    monthly: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class LedgerSummary:
    total_records: int
    unique_clients: int
    invalid_date_rows: int
    broker_counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CampaignSummary:
    total_rows: int
    dropped_rows: int
    total_cost: float
    totals: dict[str, float] = field(default_factory=dict)
    avg_click_rate: float = 0.0
    avg_conversion_cost: float = 0.0


@dataclass(frozen=True)
class LedgerDataset:
    """
    Normalized consultation ledger with its daily, weekly and monthly counts.
    """

    record_rows: list[CanonicalLedgerRow]
    daily_buckets: list[CountBucket]
    weekly_buckets: list[CountBucket]
    monthly_buckets: list[CountBucket]
    summary: LedgerSummary


@dataclass(frozen=True)
class CampaignDataset:
    """
    Normalized campaign rows with their daily, weekly and monthly sums.
    """

    record_rows: list[CanonicalCampaignRow]
    daily_buckets: list[SumBucket]
    weekly_buckets: list[SumBucket]
    monthly_buckets: list[SumBucket]
    summary: CampaignSummary


NotesDataset = list[CanonicalNoteRow]
