"""
marketing_ingest/mappers/sheet_locator.py

Locate the worksheet that holds each logical dataset.

Every dataset carries an ordered list of match rules. Rules are tried one
at a time against all sheet names, so an exact canonical name always wins
over a sheet that only matches by keyword, wherever it sits in the workbook.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from marketing_ingest.domain.ingestion import DatasetKind, LedgerCostSheet


class MatchStrategy:
    EXACT = "exact"
    CASE_INSENSITIVE = "case_insensitive"
    CONTAINS = "contains"


@dataclass(frozen=True)
class SheetMatchRule:
    """
    One sheet-name rule.

    For ``exact`` and ``case_insensitive`` any of ``values`` may match; for
    ``contains`` every keyword in ``values`` must appear (case-insensitive).
    """

    strategy: str
    values: tuple[str, ...]

    def matches(self, sheet_name: str) -> bool:
        if self.strategy == MatchStrategy.EXACT:
            return sheet_name in self.values
        lowered = sheet_name.lower()
        if self.strategy == MatchStrategy.CASE_INSENSITIVE:
            return any(lowered == value.lower() for value in self.values)
        if self.strategy == MatchStrategy.CONTAINS:
            return all(value.lower() in lowered for value in self.values)
        raise ValueError(f"Unknown sheet match strategy '{self.strategy}'.")


@dataclass(frozen=True)
class SheetMatch:
    sheet_name: str
    strategy: str


def _exact(*names: str) -> SheetMatchRule:
    return SheetMatchRule(strategy=MatchStrategy.EXACT, values=names)


def _case_insensitive(*names: str) -> SheetMatchRule:
    return SheetMatchRule(strategy=MatchStrategy.CASE_INSENSITIVE, values=names)


def _contains(*keywords: str) -> SheetMatchRule:
    return SheetMatchRule(strategy=MatchStrategy.CONTAINS, values=keywords)


DEFAULT_SHEET_RULES: dict[str, tuple[SheetMatchRule, ...]] = {
    DatasetKind.CONSULTATION: (
        _exact("Clients_info（new）", "client_info", "Clients_info", "clients_info"),
        _case_insensitive("client_info", "clients_info", "clients info"),
        _contains("client"),
        _contains("info"),
    ),
    DatasetKind.AD_CAMPAIGN: (
        _exact("小王投放", "小王 投放"),
        _contains("小王", "投放"),
    ),
    DatasetKind.NOTES_A: (
        _exact("小王笔记", "小王 笔记"),
        _contains("小王", "笔记"),
    ),
    DatasetKind.CAMPAIGN_B: (
        _exact("LifeCar 投放", "Lifecar 投放", "LifeCar投放", "Lifecar投放"),
        _contains("lifecar", "投放"),
    ),
    DatasetKind.NOTES_B: (
        _exact("LifeCar笔记", "Lifecar笔记", "LifeCar 笔记", "Lifecar 笔记"),
        _contains("lifecar", "笔记"),
    ),
    LedgerCostSheet.MONTHLY: (
        _exact("monthly_data"),
        _case_insensitive("monthly_data", "monthly data"),
    ),
    LedgerCostSheet.WEEKLY: (
        _exact("weekly_data"),
        _case_insensitive("weekly_data", "weekly data"),
    ),
    LedgerCostSheet.DAILY: (
        _exact("database_marketing"),
        _case_insensitive("database_marketing", "database marketing"),
    ),
}


class SheetLocator:
    """
    Resolves dataset identifiers to actual sheet names.
    """

    def __init__(self, *, rules: Mapping[str, Sequence[SheetMatchRule]] | None = None) -> None:
        self._rules: dict[str, tuple[SheetMatchRule, ...]] = {
            dataset: tuple(dataset_rules)
            for dataset, dataset_rules in (rules or DEFAULT_SHEET_RULES).items()
        }

    def resolve(self, sheet_names: Sequence[str], dataset: str) -> SheetMatch | None:
        """
        Return the best matching sheet and the rule strategy that found it.
        """

        rules = self._rules.get(dataset)
        if rules is None:
            allowed = ", ".join(sorted(self._rules))
            raise ValueError(f"Unsupported dataset '{dataset}'. Allowed datasets: {allowed}.")

        for rule in rules:
            for sheet_name in sheet_names:
                if rule.matches(sheet_name):
                    return SheetMatch(sheet_name=sheet_name, strategy=rule.strategy)
        return None

    def locate(self, sheet_names: Sequence[str], dataset: str) -> str | None:
        """
        Return the matching sheet name, or ``None`` when the dataset is absent.
        """

        match = self.resolve(sheet_names, dataset)
        return match.sheet_name if match is not None else None
