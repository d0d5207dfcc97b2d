"""
marketing_ingest/mappers/ledger_cost_normalizer.py

Turn the ledger's auxiliary spend sheets into ``{bucket label: cost}`` maps.

    monthly_data        月份 + 消费总额（aud)   already in AUD
    weekly_data         Week + 消费总额（aud)   already in AUD
    database_marketing  时间 + 消费             RMB, divided by the ledger rate

Rows whose label or date cannot be read are skipped. Repeated labels are
summed.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

from marketing_ingest.dates.date_resolver import resolve_date
from marketing_ingest.dates.period_labels import day_label, month_label
from marketing_ingest.domain.sheet_table import Row
from marketing_ingest.mappers.field_values import first_present, is_blank, to_float, to_text

LEDGER_COST_ALIASES: dict[str, tuple[str, ...]] = {
    "month": ("月份", "month"),
    "week": ("Week", "week"),
    "date": ("时间", "date"),
    "total_cost": ("消费总额（aud)", "totalCost", "cost"),
    "daily_cost": ("消费", "cost"),
}

_MONTH_TEXT = re.compile(r"^(\d{4})[/-](\d{1,2})$")
_WEEK_TEXT = re.compile(r"^(\d{4})/wk(\d{1,2})$", re.IGNORECASE)


class LedgerCostNormalizer:
    """
    Reads per-month, per-week and per-day spend for the consultation ledger.
    """

    def __init__(self, *, daily_divisor: float, date_order: str) -> None:
        if daily_divisor <= 0:
            raise ValueError("daily_divisor must be greater than zero.")
        self._daily_divisor = daily_divisor
        self._date_order = date_order

    def monthly(self, rows: Sequence[Row]) -> dict[str, float]:
        costs: dict[str, float] = {}
        for row in rows:
            label = self._month(first_present(row, LEDGER_COST_ALIASES["month"]))
            if label is not None:
                costs[label] = costs.get(label, 0.0) + to_float(
                    first_present(row, LEDGER_COST_ALIASES["total_cost"])
                )
        return costs

    def weekly(self, rows: Sequence[Row]) -> dict[str, float]:
        costs: dict[str, float] = {}
        for row in rows:
            match = _WEEK_TEXT.match(to_text(first_present(row, LEDGER_COST_ALIASES["week"])).strip())
            if match is None:
                continue
            label = f"{match.group(1)}/wk{int(match.group(2)):02d}"
            costs[label] = costs.get(label, 0.0) + to_float(first_present(row, LEDGER_COST_ALIASES["total_cost"]))
        return costs

    def daily(self, rows: Sequence[Row]) -> dict[str, float]:
        costs: dict[str, float] = {}
        for row in rows:
            resolved = resolve_date(first_present(row, LEDGER_COST_ALIASES["date"]), self._date_order)
            if resolved is None:
                continue
            label = day_label(resolved)
            cost = to_float(first_present(row, LEDGER_COST_ALIASES["daily_cost"])) / self._daily_divisor
            costs[label] = costs.get(label, 0.0) + cost
        return costs

    def _month(self, value: Any) -> str | None:
        if is_blank(value):
            return None
        if isinstance(value, str):
            match = _MONTH_TEXT.match(value.strip())
            if match is not None:
                month = int(match.group(2))
                return f"{match.group(1)}/{month:02d}" if 1 <= month <= 12 else None
        resolved = resolve_date(value, self._date_order)
        return month_label(resolved) if resolved is not None else None
