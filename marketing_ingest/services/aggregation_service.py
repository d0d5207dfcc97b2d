"""
marketing_ingest/services/aggregation_service.py

Time-bucket aggregation for normalized ledger and campaign rows.

Bucket labels
-------------
Every bucket is keyed by a sortable label:

    day     – ``YYYY-MM-DD``
    week    – ``YYYY/wkNN`` (Monday-anchored, see ``dates.period_labels``)
    month   – ``YYYY/MM``

Buckets are always returned sorted by label, which for these formats is
also chronological order.

Derived values
--------------
Averages and cost-per figures are computed only after every row has been
folded into its bucket. A zero denominator yields ``0.0``.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Iterable, Mapping, Sequence

from marketing_ingest.dates.date_resolver import resolve_date
from marketing_ingest.dates.period_labels import Granularity, period_label
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
    CAMPAIGN_SUMMED_METRICS,
    CanonicalCampaignRow,
    CanonicalLedgerRow,
)

logger = logging.getLogger(__name__)

UNASSIGNED_BROKER = "EMPTY"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def _sorted_buckets(buckets: dict[str, CountBucket] | dict[str, SumBucket]) -> list:
    return [buckets[label] for label in sorted(buckets)]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class AggregationService:
    """
    Folds canonical rows into day, week and month buckets and builds the
    per-dataset payloads returned to the dashboard.

    Parameters
    ----------
    summed_metrics:
        Campaign fields summed into every SumBucket. ``cost_aud`` is always
        summed separately into ``total_cost``.
    """

    def __init__(self, *, summed_metrics: Sequence[str] = CAMPAIGN_SUMMED_METRICS) -> None:
        self._summed_metrics = tuple(summed_metrics)

    # ------------------------------------------------------------------
    # Bucketing
    # ------------------------------------------------------------------

    def count_by(
        self,
        rows: Sequence[CanonicalLedgerRow],
        granularity: str,
        order: str,
        *,
        costs: Mapping[str, float] | None = None,
    ) -> CountAggregation:
        """
        Count ledger rows per period.

        Rows whose ``raw_date`` cannot be resolved with ``order`` are left out
        of every bucket and counted in ``invalid_date_rows`` instead, so that
        ``sum(bucket.record_count) + invalid_date_rows == len(rows)``.

        ``costs`` maps bucket labels to spend. Each cost is added to the
        bucket of the same label, which is created with a zero count when no
        row fell into it, and ``derived_average`` becomes cost per record.
        """

        buckets: dict[str, CountBucket] = {}
        invalid = 0
        for row in rows:
            resolved = resolve_date(row.raw_date, order)
            if resolved is None:
                invalid += 1
                continue
            label = period_label(resolved, granularity)
            bucket = buckets.get(label)
            if bucket is None:
                bucket = buckets[label] = CountBucket(label=label)
            bucket.record_count += 1

        for label, cost in (costs or {}).items():
            bucket = buckets.get(label)
            if bucket is None:
                bucket = buckets[label] = CountBucket(label=label)
            bucket.total_cost += cost

        for bucket in buckets.values():
            bucket.derived_average = _safe_ratio(bucket.total_cost, bucket.record_count)

        if invalid:
            logger.debug("count_by granularity=%s invalid_date_rows=%d", granularity, invalid)
        return CountAggregation(buckets=_sorted_buckets(buckets), invalid_date_rows=invalid)

    def sum_by(self, rows: Sequence[CanonicalCampaignRow], granularity: str) -> list[SumBucket]:
        """
        Sum campaign metrics per period.

        Returns
        -------
        list[SumBucket]
            One bucket per label, each with ``derived_average`` equal to
            ``total_cost / record_count`` and ``cost_per[metric]`` equal to
            ``total_cost / metrics[metric]``.
        """

        buckets: dict[str, SumBucket] = {}
        for row in rows:
            label = period_label(date.fromisoformat(row.date), granularity)
            bucket = buckets.get(label)
            if bucket is None:
                bucket = buckets[label] = SumBucket(
                    label=label,
                    metrics={metric: 0 for metric in self._summed_metrics},
                )
            bucket.record_count += 1
            bucket.total_cost += row.cost_aud
            for metric in self._summed_metrics:
                bucket.metrics[metric] += getattr(row, metric)

        for bucket in buckets.values():
            bucket.derived_average = _safe_ratio(bucket.total_cost, bucket.record_count)
            bucket.cost_per = {
                metric: _safe_ratio(bucket.total_cost, value)
                for metric, value in bucket.metrics.items()
            }
        return _sorted_buckets(buckets)

    # ------------------------------------------------------------------
    # Dataset payloads
    # ------------------------------------------------------------------

    def build_ledger_dataset(
        self,
        rows: Sequence[CanonicalLedgerRow],
        order: str,
        *,
        costs: LedgerCosts | None = None,
    ) -> LedgerDataset:
        costs = costs or LedgerCosts()
        daily = self.count_by(rows, Granularity.DAY, order, costs=costs.daily)
        weekly = self.count_by(rows, Granularity.WEEK, order, costs=costs.weekly)
        monthly = self.count_by(rows, Granularity.MONTH, order, costs=costs.monthly)
        return LedgerDataset(
            record_rows=list(rows),
            daily_buckets=daily.buckets,
            weekly_buckets=weekly.buckets,
            monthly_buckets=monthly.buckets,
            summary=self.summarize_ledger(rows, invalid_date_rows=daily.invalid_date_rows),
        )

    def build_campaign_dataset(
        self,
        rows: Sequence[CanonicalCampaignRow],
        *,
        dropped_rows: int = 0,
    ) -> CampaignDataset:
        return CampaignDataset(
            record_rows=list(rows),
            daily_buckets=self.sum_by(rows, Granularity.DAY),
            weekly_buckets=self.sum_by(rows, Granularity.WEEK),
            monthly_buckets=self.sum_by(rows, Granularity.MONTH),
            summary=self.summarize_campaign(rows, dropped_rows=dropped_rows),
        )

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------

    def summarize_ledger(
        self,
        rows: Sequence[CanonicalLedgerRow],
        *,
        invalid_date_rows: int = 0,
    ) -> LedgerSummary:
        """
        Headline ledger figures.

        Clients are counted by distinct record number; rows without one do
        not contribute a client.
        """

        unique_clients = {row.record_number for row in rows if row.record_number is not None}
        broker_counts = Counter(row.broker_name or UNASSIGNED_BROKER for row in rows)
        return LedgerSummary(
            total_records=len(rows),
            unique_clients=len(unique_clients),
            invalid_date_rows=invalid_date_rows,
            broker_counts=dict(broker_counts.most_common()),
        )

    def summarize_campaign(
        self,
        rows: Sequence[CanonicalCampaignRow],
        *,
        dropped_rows: int = 0,
    ) -> CampaignSummary:
        total_cost = sum(row.cost_aud for row in rows)
        totals = self._metric_totals(rows)
        return CampaignSummary(
            total_rows=len(rows),
            dropped_rows=dropped_rows,
            total_cost=total_cost,
            totals=totals,
            avg_click_rate=_safe_ratio(totals.get("clicks", 0), totals.get("impressions", 0)) * 100,
            avg_conversion_cost=_safe_ratio(total_cost, totals.get("conversions", 0)),
        )

    def _metric_totals(self, rows: Iterable[CanonicalCampaignRow]) -> dict[str, float]:
        totals: dict[str, float] = {metric: 0 for metric in self._summed_metrics}
        for row in rows:
            for metric in self._summed_metrics:
                totals[metric] += getattr(row, metric)
        return totals
