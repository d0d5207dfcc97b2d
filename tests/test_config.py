from __future__ import annotations

from collections.abc import Iterator

import pytest

from marketing_ingest.config import DEFAULT_CURRENCY_DIVISOR, DEFAULT_LEDGER_COST_DIVISOR, get_ingestion_settings
from marketing_ingest.main import _validate_env


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    get_ingestion_settings.cache_clear()
    yield
    get_ingestion_settings.cache_clear()


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CURRENCY_DIVISOR",
        "LEDGER_COST_DIVISOR",
        "AD_CAMPAIGN_DATE_ORDER",
        "NOTES_HEADER_ROW",
        "DEFAULT_WORKBOOK_PATH",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_ingestion_settings()

    assert settings.currency_divisor == DEFAULT_CURRENCY_DIVISOR
    assert settings.ad_campaign_date_order == "mdy"
    assert settings.ledger_cost_divisor == DEFAULT_LEDGER_COST_DIVISOR == 4.72
    assert settings.consultation_date_order == "dmy"
    assert settings.notes_header_row == 2
    assert settings.default_workbook_path is None


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CURRENCY_DIVISOR", "7.2")
    monkeypatch.setenv("AD_CAMPAIGN_DATE_ORDER", "DMY")
    monkeypatch.setenv("DEFAULT_WORKBOOK_PATH", " /data/book.xlsx ")

    settings = get_ingestion_settings()

    assert settings.currency_divisor == 7.2
    assert settings.ad_campaign_date_order == "dmy"
    assert settings.default_workbook_path == "/data/book.xlsx"


def test_malformed_values_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CURRENCY_DIVISOR", "-1")
    monkeypatch.setenv("LEDGER_COST_DIVISOR", "0")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "lots")
    monkeypatch.setenv("CAMPAIGN_B_DATE_ORDER", "ymd")

    settings = get_ingestion_settings()

    assert settings.currency_divisor == DEFAULT_CURRENCY_DIVISOR
    assert settings.max_upload_bytes == 20 * 1024 * 1024
    assert settings.ledger_cost_divisor == DEFAULT_LEDGER_COST_DIVISOR
    assert settings.campaign_b_date_order == "dmy"


def test_validate_env_reports_every_problem(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CURRENCY_DIVISOR", "abc")
    monkeypatch.setenv("LEDGER_COST_DIVISOR", "-4.72")
    monkeypatch.setenv("NOTES_HEADER_ROW", "0")
    monkeypatch.setenv("CONSULTATION_DATE_ORDER", "ymd")

    with pytest.raises(RuntimeError) as exc_info:
        _validate_env()

    message = str(exc_info.value)
    assert "CURRENCY_DIVISOR" in message
    assert "LEDGER_COST_DIVISOR must be greater than zero." in message
    assert "NOTES_HEADER_ROW" in message
    assert "CONSULTATION_DATE_ORDER" in message


def test_validate_env_accepts_clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CURRENCY_DIVISOR",
        "LEDGER_COST_DIVISOR",
        "NOTES_HEADER_ROW",
        "MAX_UPLOAD_BYTES",
        "CONSULTATION_DATE_ORDER",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "debug")

    _validate_env()
