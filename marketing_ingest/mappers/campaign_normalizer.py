"""
marketing_ingest/mappers/campaign_normalizer.py

Map ad-platform daily export rows onto CanonicalCampaignRow.

Both campaign datasets share the core column table; each adds its own set of
rate and cost columns that end up in ``extra_metrics``. Every currency column
is converted from RMB to AUD by dividing by the configured rate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from marketing_ingest.dates.date_resolver import DateOrder, format_iso_date
from marketing_ingest.domain.canonical_rows import CanonicalCampaignRow
from marketing_ingest.domain.sheet_table import Row
from marketing_ingest.mappers.field_values import first_present, to_float, to_int

logger = logging.getLogger(__name__)


class MetricKind:
    COUNT = "count"
    RATE = "rate"
    CURRENCY = "currency"


@dataclass(frozen=True)
class MetricColumn:
    name: str
    aliases: tuple[str, ...]
    kind: str = MetricKind.COUNT


DATE_ALIASES: tuple[str, ...] = ("时间", "Date", "日期")

CORE_METRIC_COLUMNS: tuple[MetricColumn, ...] = (
    MetricColumn("cost_aud", ("消费", "Spend", "花费", "Cost"), MetricKind.CURRENCY),
    MetricColumn("impressions", ("展现量", "Impressions", "曝光")),
    MetricColumn("clicks", ("点击量", "Clicks", "点击")),
    MetricColumn("likes", ("点赞", "Likes")),
    MetricColumn("comments", ("评论", "Comments")),
    MetricColumn("favorites", ("收藏", "Saves", "保存", "Favorites")),
    MetricColumn("followers", ("关注", "Followers", "关注者")),
    MetricColumn("shares", ("分享", "Shares")),
    MetricColumn("interactions", ("互动量", "Interactions")),
    MetricColumn("conversions", ("多转化人数（添加企微+私信咨询）", "Multi Conversion 1", "Conversions")),
    MetricColumn(
        "conversion_cost_aud",
        ("多转化成本（添加企微+私信咨询）", "Multi Conversion Cost 1", "Conversion Cost"),
        MetricKind.CURRENCY,
    ),
)

AD_CAMPAIGN_EXTRA_COLUMNS: tuple[MetricColumn, ...] = (
    MetricColumn("click_rate", ("点击率", "Click Rate", "CTR"), MetricKind.RATE),
    MetricColumn("avg_click_cost", ("平均点击成本", "CPC", "单次点击成本"), MetricKind.CURRENCY),
    MetricColumn("avg_interaction_cost", ("平均互动成本", "Avg Interaction Cost"), MetricKind.CURRENCY),
    MetricColumn("action_clicks", ("行动按钮点击量", "Action Button Clicks")),
    MetricColumn("action_click_rate", ("行动按钮点击率", "Action Button Click Rate"), MetricKind.RATE),
    MetricColumn("cpm", ("平均千次展现费用", "CPM", "千次曝光成本"), MetricKind.CURRENCY),
)

CAMPAIGN_B_EXTRA_COLUMNS: tuple[MetricColumn, ...] = AD_CAMPAIGN_EXTRA_COLUMNS + (
    MetricColumn("screenshots", ("截图", "Screenshots")),
    MetricColumn("image_saves", ("图片保存", "Image Saves")),
    MetricColumn("search_clicks", ("搜索点击", "Search Clicks")),
    MetricColumn("search_conversion_rate", ("搜索转化率", "Search Conversion Rate"), MetricKind.RATE),
    MetricColumn(
        "avg_read_notes_after_search",
        ("搜索后平均阅读笔记数", "Avg Read Notes After Search"),
        MetricKind.RATE,
    ),
    MetricColumn("read_count_after_search", ("搜索后阅读数", "Read Count After Search")),
    MetricColumn("multi_conversions_2", ("多转化人数（添加企微成功+私信留资）", "Multi Conversion 2")),
    MetricColumn(
        "multi_conversion_cost_2",
        ("多转化成本（添加企微成功+私信留资）", "Multi Conversion Cost 2"),
        MetricKind.CURRENCY,
    ),
    MetricColumn("profile_views", ("主页访问", "Profile Views")),
    MetricColumn("engagement_rate", ("互动率", "Engagement Rate", "Interaction Rate"), MetricKind.RATE),
)


@dataclass(frozen=True)
class CampaignNormalization:
    """
    Normalized rows plus the count of rows dropped for lacking a valid date.
    """

    rows: list[CanonicalCampaignRow]
    dropped_rows: int = 0


class CampaignRowNormalizer:
    """
    Produces canonical campaign rows; rows without a resolvable date are dropped.
    """

    def __init__(
        self,
        *,
        currency_divisor: float,
        date_order: str = DateOrder.DMY,
        extra_columns: Sequence[MetricColumn] = (),
        core_columns: Sequence[MetricColumn] = CORE_METRIC_COLUMNS,
        date_aliases: Sequence[str] = DATE_ALIASES,
    ) -> None:
        if currency_divisor <= 0:
            raise ValueError("currency_divisor must be positive.")
        if date_order not in DateOrder.ALL:
            raise ValueError(f"Unsupported date order '{date_order}'.")
        self._currency_divisor = currency_divisor
        self._date_order = date_order
        self._core_columns = tuple(core_columns)
        self._extra_columns = tuple(extra_columns)
        self._date_aliases = tuple(date_aliases)

    @property
    def aliases(self) -> dict[str, tuple[str, ...]]:
        columns = {column.name: column.aliases for column in self._core_columns + self._extra_columns}
        return {"date": self._date_aliases, **columns}

    def normalize(self, rows: Sequence[Row]) -> CampaignNormalization:
        normalized: list[CanonicalCampaignRow] = []
        dropped = 0
        for index, row in enumerate(rows):
            canonical = self.normalize_row(row)
            if canonical is None:
                dropped += 1
                logger.debug("Campaign row dropped: unresolvable date row_index=%d", index)
                continue
            normalized.append(canonical)
        return CampaignNormalization(rows=normalized, dropped_rows=dropped)

    def normalize_row(self, row: Row) -> CanonicalCampaignRow | None:
        iso_date = format_iso_date(first_present(row, self._date_aliases), self._date_order)
        if iso_date is None:
            return None

        core = {column.name: self._read_metric(row, column) for column in self._core_columns}
        extra = {column.name: self._read_metric(row, column) for column in self._extra_columns}
        return CanonicalCampaignRow(date=iso_date, extra_metrics=extra, **core)

    def _read_metric(self, row: Row, column: MetricColumn) -> float | int:
        value = first_present(row, column.aliases)
        if column.kind == MetricKind.COUNT:
            return to_int(value)
        if column.kind == MetricKind.CURRENCY:
            return to_float(value) / self._currency_divisor
        return to_float(value)
