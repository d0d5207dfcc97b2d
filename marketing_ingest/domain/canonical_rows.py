"""
marketing_ingest/domain/canonical_rows.py

Canonical row shapes produced by the per-dataset row normalizers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from marketing_ingest.domain.sheet_table import RawCell


@dataclass(frozen=True)
class CanonicalLedgerRow:
    """
    One consultation/broker ledger entry.

    ``raw_date`` is passed through exactly as the source cell held it so the
    front end can display the original formatting; aggregation resolves it
    separately.
    """

    record_number: RawCell | None
    broker_name: str
    raw_date: RawCell | None
    contact_handle: str
    source_channel: str


@dataclass(frozen=True)
class CanonicalCampaignRow:
    """
    One day of ad-platform metrics, currency already converted to AUD.
    """

    date: str
    cost_aud: float = 0.0
    impressions: int = 0
    clicks: int = 0
    likes: int = 0
    comments: int = 0
    favorites: int = 0
    followers: int = 0
    shares: int = 0
    interactions: int = 0
    conversions: int = 0
    conversion_cost_aud: float = 0.0
    extra_metrics: dict[str, float] = field(default_factory=dict)


CAMPAIGN_SUMMED_METRICS: tuple[str, ...] = (
    "impressions",
    "clicks",
    "likes",
    "comments",
    "favorites",
    "followers",
    "shares",
    "interactions",
    "conversions",
)


@dataclass(frozen=True)
class CanonicalNoteRow:
    """
    One published note from a notes export.
    """

    published_at: str
    note_type: str
    title: str
    link: str
