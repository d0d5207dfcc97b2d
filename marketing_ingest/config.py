"""
marketing_ingest/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from marketing_ingest.dates.date_resolver import DateOrder

DEFAULT_CURRENCY_DIVISOR = 4.7
DEFAULT_LEDGER_COST_DIVISOR = 4.72
DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_date_order_env(name: str, default: str) -> str:
    """
    Read a date order ("dmy" or "mdy"), falling back when the value is unknown.
    """

    raw_value = _get_optional_str_env(name)
    if raw_value is None:
        return default
    normalized = raw_value.lower()
    if normalized not in DateOrder.ALL:
        return default
    return normalized


@dataclass(frozen=True)
class IngestionSettings:
    """
    Runtime settings for spreadsheet ingestion.
    """

    currency_divisor: float = DEFAULT_CURRENCY_DIVISOR
    ledger_cost_divisor: float = DEFAULT_LEDGER_COST_DIVISOR
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    consultation_date_order: str = DateOrder.DMY
    ad_campaign_date_order: str = DateOrder.MDY
    campaign_b_date_order: str = DateOrder.DMY
    notes_header_row: int = 2
    log_sample_rows: int = 5
    default_workbook_path: str | None = None


@lru_cache(maxsize=1)
def get_ingestion_settings() -> IngestionSettings:
    """
    Return cached ingestion settings from environment variables.
    """

    divisor = _get_float_env("CURRENCY_DIVISOR", DEFAULT_CURRENCY_DIVISOR)
    ledger_divisor = _get_float_env("LEDGER_COST_DIVISOR", DEFAULT_LEDGER_COST_DIVISOR)
    return IngestionSettings(
        currency_divisor=divisor if divisor > 0 else DEFAULT_CURRENCY_DIVISOR,
        ledger_cost_divisor=ledger_divisor if ledger_divisor > 0 else DEFAULT_LEDGER_COST_DIVISOR,
        max_upload_bytes=max(1, _get_int_env("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
        consultation_date_order=_get_date_order_env("CONSULTATION_DATE_ORDER", DateOrder.DMY),
        ad_campaign_date_order=_get_date_order_env("AD_CAMPAIGN_DATE_ORDER", DateOrder.MDY),
        campaign_b_date_order=_get_date_order_env("CAMPAIGN_B_DATE_ORDER", DateOrder.DMY),
        notes_header_row=max(1, _get_int_env("NOTES_HEADER_ROW", 2)),
        log_sample_rows=max(0, _get_int_env("LOG_SAMPLE_ROWS", 5)),
        default_workbook_path=_get_optional_str_env("DEFAULT_WORKBOOK_PATH"),
    )
