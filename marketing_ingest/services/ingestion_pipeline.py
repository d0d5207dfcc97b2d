"""
marketing_ingest/services/ingestion_pipeline.py

Single entry point turning one uploaded spreadsheet into dashboard payloads.

Stages per upload:

    1. read       – bytes -> SheetTable (unreadable files abort the request)
    2. locate     – each dataset is matched to at most one sheet
    3. normalize  – validated sheet rows -> canonical rows
    4. aggregate  – canonical rows -> day/week/month buckets and summaries
    5. assemble   – per-dataset outcomes -> IngestionResult

Steps 3 and 4 run independently per dataset: a failure is logged at WARNING
level and recorded as a DatasetError without affecting the other datasets.
Notes datasets additionally replace the contents of their notes store.
The consultation ledger also picks up the spend sheets monthly_data,
weekly_data and database_marketing, when present, as bucket costs.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

from marketing_ingest.config import IngestionSettings, get_ingestion_settings
from marketing_ingest.domain.aggregates import LedgerCosts
from marketing_ingest.domain.canonical_rows import CanonicalNoteRow
from marketing_ingest.domain.ingestion import (
    DatasetAbsent,
    DatasetError,
    DatasetKind,
    DatasetOk,
    DatasetOutcome,
    IngestionResult,
    LedgerCostSheet,
)
from marketing_ingest.domain.sheet_table import Sheet, SheetTable
from marketing_ingest.logging_utils import log_event
from marketing_ingest.mappers.campaign_normalizer import (
    AD_CAMPAIGN_EXTRA_COLUMNS,
    CAMPAIGN_B_EXTRA_COLUMNS,
    CampaignRowNormalizer,
)
from marketing_ingest.mappers.ledger_cost_normalizer import LedgerCostNormalizer
from marketing_ingest.mappers.ledger_normalizer import (
    LEDGER_COLUMN_ALIASES,
    LEDGER_KNOWN_FIELDS,
    LedgerRowNormalizer,
)
from marketing_ingest.mappers.notes_normalizer import (
    NOTES_COLUMN_ALIASES,
    NOTES_KNOWN_FIELDS,
    NotesRowNormalizer,
)
from marketing_ingest.mappers.sheet_locator import SheetLocator
from marketing_ingest.readers.spreadsheet_reader import read_upload
from marketing_ingest.repositories.notes_store import NotesStoreRegistry, get_notes_stores
from marketing_ingest.services.aggregation_service import AggregationService
from marketing_ingest.validators.sheet_validator import DatasetMalformedError, SheetValidator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class UnknownDatasetError(ValueError):
    """
    Raised when a dataset hint does not name a known dataset.
    """


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class SpreadsheetIngestionPipeline:
    """
    Coordinates reading, locating, normalizing and aggregating one upload.
    """

    def __init__(
        self,
        *,
        settings: IngestionSettings | None = None,
        locator: SheetLocator | None = None,
        aggregation: AggregationService | None = None,
        notes_stores: NotesStoreRegistry | None = None,
    ) -> None:
        self._settings = settings or get_ingestion_settings()
        self._locator = locator or SheetLocator()
        self._aggregation = aggregation or AggregationService()
        self._notes_stores = notes_stores if notes_stores is not None else get_notes_stores()

        self._ledger_normalizer = LedgerRowNormalizer()
        self._ledger_cost_normalizer = LedgerCostNormalizer(
            daily_divisor=self._settings.ledger_cost_divisor,
            date_order=self._settings.consultation_date_order,
        )
        self._notes_normalizer = NotesRowNormalizer()
        self._campaign_normalizers = {
            DatasetKind.AD_CAMPAIGN: CampaignRowNormalizer(
                currency_divisor=self._settings.currency_divisor,
                date_order=self._settings.ad_campaign_date_order,
                extra_columns=AD_CAMPAIGN_EXTRA_COLUMNS,
            ),
            DatasetKind.CAMPAIGN_B: CampaignRowNormalizer(
                currency_divisor=self._settings.currency_divisor,
                date_order=self._settings.campaign_b_date_order,
                extra_columns=CAMPAIGN_B_EXTRA_COLUMNS,
            ),
        }

        notes_validator = SheetValidator(aliases=NOTES_COLUMN_ALIASES, known_fields=NOTES_KNOWN_FIELDS)
        self._validators: dict[str, SheetValidator] = {
            DatasetKind.CONSULTATION: SheetValidator(
                aliases=LEDGER_COLUMN_ALIASES,
                known_fields=LEDGER_KNOWN_FIELDS,
            ),
            DatasetKind.NOTES_A: notes_validator,
            DatasetKind.NOTES_B: notes_validator,
        }
        for dataset, normalizer in self._campaign_normalizers.items():
            self._validators[dataset] = SheetValidator(aliases=normalizer.aliases, required_fields=("date",))

    @property
    def notes_stores(self) -> NotesStoreRegistry:
        return self._notes_stores

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def ingest(
        self,
        content: bytes,
        filename: str | None,
        *,
        dataset_hint: str | None = None,
    ) -> IngestionResult:
        """
        Process one uploaded workbook or CSV file.

        Raises ``SpreadsheetUnreadableError`` when the bytes cannot be parsed
        and ``UnknownDatasetError`` for an unrecognised ``dataset_hint``.
        Every other failure is confined to the dataset it occurred in.
        """

        if dataset_hint is not None and dataset_hint not in DatasetKind.ALL:
            allowed = ", ".join(DatasetKind.ALL)
            raise UnknownDatasetError(f"Unknown dataset '{dataset_hint}'. Allowed datasets: {allowed}.")

        log_event(logger, logging.INFO, "ingestion_received", filename=filename, size_bytes=len(content))
        table = read_upload(content, filename)
        log_event(
            logger,
            logging.INFO,
            "ingestion_parsed",
            source_format=table.source_format,
            sheets=table.sheet_names,
        )

        assignments = self._assign_sheets(table, dataset_hint)
        outcomes: dict[str, DatasetOutcome] = {
            dataset: self._process_dataset(dataset, table, assignments[dataset])
            for dataset in DatasetKind.ALL
        }

        result = IngestionResult(
            outcomes=outcomes,
            source_format=table.source_format,
            sheet_names=table.sheet_names,
        )
        log_event(
            logger,
            logging.INFO,
            "ingestion_completed",
            processed=result.processed,
            errors=result.errors,
        )
        return result

    def ingest_notes_upload(
        self,
        store_name: str,
        content: bytes,
        filename: str | None,
    ) -> list[CanonicalNoteRow]:
        """
        Process a standalone notes export and replace the named store.

        The first sheet is used; its header sits on ``notes_header_row``
        because these exports carry a title row above the column names.
        """

        store = self._notes_stores.get(store_name)
        table = read_upload(content, filename, header_row=self._settings.notes_header_row)
        sheet = table.first()
        if sheet is None:
            raise DatasetMalformedError(message="Notes export contains no sheets.")

        self._validators[store_name].validate(sheet)
        rows = self._notes_normalizer.normalize(sheet.rows)
        store.set_data(rows)
        log_event(
            logger,
            logging.INFO,
            "notes_store_replaced",
            store=store_name,
            sheet=sheet.name,
            source_rows=len(sheet.rows),
            kept_rows=len(rows),
        )
        return rows

    def ingest_default_workbook(self) -> IngestionResult | None:
        """
        Process the configured default workbook, or return ``None`` when no
        readable file is configured.
        """

        configured = self._settings.default_workbook_path
        if not configured:
            return None
        path = Path(configured)
        if not path.is_file():
            logger.warning("Default workbook not found path=%s", path)
            return None
        return self.ingest(path.read_bytes(), path.name)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _assign_sheets(self, table: SheetTable, dataset_hint: str | None) -> dict[str, str | None]:
        sheet_names = table.sheet_names
        assignments: dict[str, str | None] = {}

        if dataset_hint is not None:
            first = table.first()
            if first is not None:
                assignments[dataset_hint] = first.name
                sheet_names = [name for name in sheet_names if name != first.name]

        for dataset in DatasetKind.ALL:
            if dataset not in assignments:
                assignments[dataset] = self._locator.locate(sheet_names, dataset)
        return assignments

    def _process_dataset(self, dataset: str, table: SheetTable, sheet_name: str | None) -> DatasetOutcome:
        sheet = table.get(sheet_name) if sheet_name is not None else None
        if sheet is None:
            log_event(logger, logging.DEBUG, "dataset_absent", dataset=dataset)
            return DatasetAbsent(dataset=dataset)

        try:
            self._validators[dataset].validate(sheet)
            self._log_sample_rows(dataset, sheet)
            payload = self._build_payload(dataset, sheet, table)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Dataset processing failed dataset=%s sheet=%r: %s",
                dataset,
                sheet.name,
                exc,
            )
            return DatasetError(dataset=dataset, sheet_name=sheet.name, message=str(exc))

        if dataset in DatasetKind.NOTES:
            self._notes_stores.get(dataset).set_data(payload)

        log_event(
            logger,
            logging.INFO,
            "dataset_processed",
            dataset=dataset,
            sheet=sheet.name,
            source_rows=len(sheet.rows),
        )
        return DatasetOk(dataset=dataset, sheet_name=sheet.name, payload=payload)

    def _build_payload(self, dataset: str, sheet: Sheet, table: SheetTable) -> Any:
        if dataset == DatasetKind.CONSULTATION:
            ledger_rows = self._ledger_normalizer.normalize(sheet.rows)
            return self._aggregation.build_ledger_dataset(
                ledger_rows,
                self._settings.consultation_date_order,
                costs=self._ledger_costs(table),
            )

        if dataset in DatasetKind.CAMPAIGNS:
            normalization = self._campaign_normalizers[dataset].normalize(sheet.rows)
            if normalization.dropped_rows:
                logger.info(
                    "Campaign rows dropped dataset=%s dropped=%d kept=%d",
                    dataset,
                    normalization.dropped_rows,
                    len(normalization.rows),
                )
            return self._aggregation.build_campaign_dataset(
                normalization.rows,
                dropped_rows=normalization.dropped_rows,
            )

        if dataset in DatasetKind.NOTES:
            return self._notes_normalizer.normalize(sheet.rows)

        raise UnknownDatasetError(f"Unknown dataset '{dataset}'.")

    def _ledger_costs(self, table: SheetTable) -> LedgerCosts:
        """
        Read the ledger spend sheets present in ``table``; absent sheets add no cost.
        """

        readers = {
            LedgerCostSheet.DAILY: self._ledger_cost_normalizer.daily,
            LedgerCostSheet.WEEKLY: self._ledger_cost_normalizer.weekly,
            LedgerCostSheet.MONTHLY: self._ledger_cost_normalizer.monthly,
        }
        costs: dict[str, dict[str, float]] = {kind: {} for kind in readers}
        for kind, read in readers.items():
            sheet_name = self._locator.locate(table.sheet_names, kind)
            sheet = table.get(sheet_name) if sheet_name is not None else None
            if sheet is None:
                continue
            costs[kind] = read(sheet.rows)
            log_event(
                logger,
                logging.INFO,
                "ledger_costs_loaded",
                sheet=sheet.name,
                kind=kind,
                labels=len(costs[kind]),
            )
        return LedgerCosts(
            daily=costs[LedgerCostSheet.DAILY],
            weekly=costs[LedgerCostSheet.WEEKLY],
            monthly=costs[LedgerCostSheet.MONTHLY],
        )

    def _log_sample_rows(self, dataset: str, sheet: Sheet) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        for index, row in enumerate(sheet.rows[: self._settings.log_sample_rows]):
            logger.debug("Sample row dataset=%s index=%d row=%s", dataset, index, _preview(row))


def _preview(row: Mapping[str, Any]) -> dict[str, Any]:
    return {header: row[header] for header in list(row)[:12]}


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_ingestion_pipeline() -> SpreadsheetIngestionPipeline:
    """
    Build and cache the pipeline with env-driven settings and the process notes stores.
    """

    return SpreadsheetIngestionPipeline(
        settings=get_ingestion_settings(),
        notes_stores=get_notes_stores(),
    )
