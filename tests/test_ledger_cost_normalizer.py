"""
tests/test_ledger_cost_normalizer.py

Pytest unit tests for reading the ledger spend sheets into label -> cost maps.
"""

from __future__ import annotations

import pytest

from marketing_ingest.dates.date_resolver import DateOrder
from marketing_ingest.mappers.ledger_cost_normalizer import LedgerCostNormalizer


@pytest.fixture()
def normalizer() -> LedgerCostNormalizer:
    return LedgerCostNormalizer(daily_divisor=4.72, date_order=DateOrder.DMY)


class TestMonthly:
    def test_text_and_date_months(self, normalizer: LedgerCostNormalizer) -> None:
        rows = [
            {"月份": "2024/09", "消费总额（aud)": 300},
            {"月份": "2024-8", "消费总额（aud)": "1,200.5"},
            {"月份": 45566, "消费总额（aud)": 50},
        ]

        assert normalizer.monthly(rows) == {"2024/09": 300.0, "2024/08": 1200.5, "2024/10": 50.0}

    def test_unreadable_months_are_skipped_and_repeats_summed(self, normalizer: LedgerCostNormalizer) -> None:
        rows = [
            {"month": "2024/09", "cost": 100},
            {"month": "2024/09", "cost": 20},
            {"month": "合计", "cost": 999},
            {"month": "2024/13", "cost": 5},
            {"cost": 7},
        ]

        assert normalizer.monthly(rows) == {"2024/09": 120.0}


class TestWeekly:
    def test_week_labels_are_zero_padded(self, normalizer: LedgerCostNormalizer) -> None:
        rows = [
            {"Week": "2024/wk38", "消费总额（aud)": 80, "Leads单价（aud）": 40},
            {"Week": "2024/WK5", "消费总额（aud)": 10},
            {"Week": "week 39", "消费总额（aud)": 999},
        ]

        assert normalizer.weekly(rows) == {"2024/wk38": 80.0, "2024/wk05": 10.0}


class TestDaily:
    def test_cost_is_converted_and_summed_per_day(self, normalizer: LedgerCostNormalizer) -> None:
        rows = [
            {"时间": 45554, "消费": 47.2},
            {"时间": "19/09/2024", "消费": 94.4},
            {"时间": "合计", "消费": 141.6},
        ]

        costs = normalizer.daily(rows)

        assert list(costs) == ["2024-09-19"]
        assert costs["2024-09-19"] == pytest.approx(30.0)

    def test_invalid_divisor(self) -> None:
        with pytest.raises(ValueError):
            LedgerCostNormalizer(daily_divisor=0, date_order=DateOrder.DMY)
