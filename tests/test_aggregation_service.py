"""
tests/test_aggregation_service.py

Pytest unit tests for AggregationService.

Coverage
--------
- Count buckets: conservation, same-bucket scenario, label ordering
- Sum buckets: additive folding, derived averages, zero guards
- Ledger and campaign summaries
"""

from __future__ import annotations

import pytest

from marketing_ingest.dates.date_resolver import DateOrder
from marketing_ingest.dates.period_labels import Granularity
from marketing_ingest.domain.canonical_rows import CanonicalCampaignRow, CanonicalLedgerRow
from marketing_ingest.services.aggregation_service import UNASSIGNED_BROKER, AggregationService


@pytest.fixture()
def svc() -> AggregationService:
    return AggregationService()


def _ledger(number, raw_date, broker: str = "Alice") -> CanonicalLedgerRow:
    return CanonicalLedgerRow(
        record_number=number,
        broker_name=broker,
        raw_date=raw_date,
        contact_handle="",
        source_channel="",
    )


class TestCountBy:
    def test_serial_and_text_dates_share_a_bucket(self, svc: AggregationService) -> None:
        rows = [_ledger(1, 45554), _ledger(2, "19/09/2024")]

        result = svc.count_by(rows, Granularity.WEEK, DateOrder.DMY)

        assert [(bucket.label, bucket.record_count) for bucket in result.buckets] == [("2024/wk38", 2)]
        assert result.invalid_date_rows == 0

    @pytest.mark.parametrize("granularity", list(Granularity.ALL))
    def test_conservation(self, svc: AggregationService, granularity: str) -> None:
        rows = [
            _ledger(1, 45554),
            _ledger(2, "01/10/2024"),
            _ledger(3, "bad date"),
            _ledger(4, None),
            _ledger(5, "2024-12-31"),
        ]

        result = svc.count_by(rows, granularity, DateOrder.DMY)

        assert sum(bucket.record_count for bucket in result.buckets) + result.invalid_date_rows == len(rows)
        assert result.invalid_date_rows == 2

    def test_buckets_are_sorted_and_zero_cost(self, svc: AggregationService) -> None:
        rows = [_ledger(1, "05/11/2024"), _ledger(2, "05/09/2024"), _ledger(3, "05/10/2024")]

        result = svc.count_by(rows, Granularity.MONTH, DateOrder.DMY)

        assert [bucket.label for bucket in result.buckets] == ["2024/09", "2024/10", "2024/11"]
        assert all(bucket.total_cost == 0.0 and bucket.derived_average == 0.0 for bucket in result.buckets)

    def test_costs_fold_into_matching_buckets(self, svc: AggregationService) -> None:
        rows = [_ledger(1, "05/09/2024"), _ledger(2, "20/09/2024"), _ledger(3, "05/10/2024")]
        costs = {"2024/09": 300.0, "2024/08": 120.0}

        result = svc.count_by(rows, Granularity.MONTH, DateOrder.DMY, costs=costs)

        by_label = {bucket.label: bucket for bucket in result.buckets}
        assert list(by_label) == ["2024/08", "2024/09", "2024/10"]
        assert (by_label["2024/09"].record_count, by_label["2024/09"].total_cost) == (2, 300.0)
        assert by_label["2024/09"].derived_average == 150.0
        assert (by_label["2024/08"].record_count, by_label["2024/08"].derived_average) == (0, 0.0)
        assert by_label["2024/08"].total_cost == 120.0
        assert (by_label["2024/10"].total_cost, by_label["2024/10"].derived_average) == (0.0, 0.0)
        assert sum(bucket.record_count for bucket in result.buckets) == len(rows)

    def test_order_hint_is_applied(self, svc: AggregationService) -> None:
        rows = [_ledger(1, "03/04/2024")]

        dmy = svc.count_by(rows, Granularity.DAY, DateOrder.DMY)
        mdy = svc.count_by(rows, Granularity.DAY, DateOrder.MDY)

        assert dmy.buckets[0].label == "2024-04-03"
        assert mdy.buckets[0].label == "2024-03-04"


class TestSumBy:
    def test_rows_fold_into_weekly_bucket(self, svc: AggregationService) -> None:
        rows = [
            CanonicalCampaignRow(date="2024-09-16", cost_aud=10.0, impressions=1000, clicks=20, conversions=2),
            CanonicalCampaignRow(date="2024-09-19", cost_aud=30.0, impressions=3000, clicks=20, conversions=0),
            CanonicalCampaignRow(date="2024-09-23", cost_aud=5.0, impressions=100, clicks=0),
        ]

        buckets = svc.sum_by(rows, Granularity.WEEK)

        assert [bucket.label for bucket in buckets] == ["2024/wk38", "2024/wk39"]
        first, second = buckets
        assert first.record_count == 2
        assert first.total_cost == 40.0
        assert first.metrics["impressions"] == 4000
        assert first.metrics["clicks"] == 40
        assert first.derived_average == 20.0
        assert first.cost_per["clicks"] == 1.0
        assert first.cost_per["conversions"] == 20.0
        assert second.cost_per["clicks"] == 0.0
        assert second.cost_per["likes"] == 0.0

    def test_empty_input(self, svc: AggregationService) -> None:
        assert svc.sum_by([], Granularity.DAY) == []


class TestSummaries:
    def test_ledger_summary(self, svc: AggregationService) -> None:
        rows = [
            _ledger(1, 45554, broker="Alice"),
            _ledger(1, 45555, broker="Alice"),
            _ledger(2, "bad", broker="Bob"),
            _ledger(None, 45556, broker=""),
        ]

        dataset = svc.build_ledger_dataset(rows, DateOrder.DMY)

        assert dataset.summary.total_records == 4
        assert dataset.summary.unique_clients == 2
        assert dataset.summary.invalid_date_rows == 1
        assert dataset.summary.broker_counts == {"Alice": 2, "Bob": 1, UNASSIGNED_BROKER: 1}
        assert len(dataset.record_rows) == 4
        assert sum(bucket.record_count for bucket in dataset.daily_buckets) == 3

    def test_campaign_summary(self, svc: AggregationService) -> None:
        rows = [
            CanonicalCampaignRow(date="2024-09-16", cost_aud=10.0, impressions=1000, clicks=20, conversions=2),
            CanonicalCampaignRow(date="2024-10-01", cost_aud=30.0, impressions=1000, clicks=30, conversions=3),
        ]

        dataset = svc.build_campaign_dataset(rows, dropped_rows=1)

        summary = dataset.summary
        assert summary.total_rows == 2
        assert summary.dropped_rows == 1
        assert summary.total_cost == 40.0
        assert summary.totals["clicks"] == 50
        assert summary.avg_click_rate == pytest.approx(2.5)
        assert summary.avg_conversion_cost == 8.0
        assert [bucket.label for bucket in dataset.monthly_buckets] == ["2024/09", "2024/10"]

    def test_campaign_summary_zero_guards(self, svc: AggregationService) -> None:
        summary = svc.summarize_campaign([])

        assert summary.avg_click_rate == 0.0
        assert summary.avg_conversion_cost == 0.0
