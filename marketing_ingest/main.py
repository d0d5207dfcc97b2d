"""
marketing_ingest/main.py

FastAPI application factory for the spreadsheet ingestion service.
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI

from marketing_ingest.config import load_env_files
from marketing_ingest.dates.date_resolver import DateOrder

logger = logging.getLogger(__name__)

_DATE_ORDER_VARIABLES = (
    "CONSULTATION_DATE_ORDER",
    "AD_CAMPAIGN_DATE_ORDER",
    "CAMPAIGN_B_DATE_ORDER",
)
_POSITIVE_INT_VARIABLES = ("MAX_UPLOAD_BYTES", "NOTES_HEADER_ROW")
_POSITIVE_FLOAT_VARIABLES = ("CURRENCY_DIVISOR", "LEDGER_COST_DIVISOR")


def _validate_env() -> None:
    """
    Validate optional environment overrides at startup.

    Settings readers fall back to defaults on malformed values; here every
    malformed value set explicitly is collected and reported at once so the
    operator can fix all problems in one restart cycle.
    """

    load_env_files()

    errors: list[str] = []

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(getattr(logging, log_level, None), int):
        errors.append(f"LOG_LEVEL='{log_level}' is not a valid logging level.")

    for name in _POSITIVE_FLOAT_VARIABLES:
        raw_value = os.getenv(name)
        if raw_value is None:
            continue
        try:
            if float(raw_value) <= 0:
                errors.append(f"{name} must be greater than zero.")
        except ValueError:
            errors.append(f"{name}='{raw_value}' is not a number.")

    for name in _POSITIVE_INT_VARIABLES:
        raw_value = os.getenv(name)
        if raw_value is None:
            continue
        try:
            if int(raw_value) < 1:
                errors.append(f"{name} must be a positive integer.")
        except ValueError:
            errors.append(f"{name}='{raw_value}' is not an integer.")

    for name in _DATE_ORDER_VARIABLES:
        raw_value = os.getenv(name)
        if raw_value is not None and raw_value.strip().lower() not in DateOrder.ALL:
            allowed = sorted(DateOrder.ALL)
            errors.append(f"{name}='{raw_value}' is not valid. Allowed values: {allowed}.")

    if errors:
        raise RuntimeError(
            "Startup validation failed. Invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Marketing Ingest API",
        version="1.0.0",
    )

    from marketing_ingest.api.routers import notes_router, upload_router

    application.include_router(upload_router)
    application.include_router(notes_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("Application created")
    return application


app = create_app()
