"""
tests/conftest.py

Shared fixtures: in-memory workbooks and a pipeline with fresh notes stores.
"""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable
from typing import Any

import pytest
from openpyxl import Workbook

from marketing_ingest.config import IngestionSettings
from marketing_ingest.repositories.notes_store import NotesStoreRegistry
from marketing_ingest.services.ingestion_pipeline import SpreadsheetIngestionPipeline


def build_workbook(sheets: dict[str, list[list[Any]]]) -> bytes:
    """Serialize ``{sheet name: rows}`` into .xlsx bytes."""
    workbook = Workbook()
    workbook.remove(workbook.active)
    for name, rows in sheets.items():
        worksheet = workbook.create_sheet(title=name)
        for row in rows:
            worksheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture()
def workbook_factory() -> Callable[[dict[str, list[list[Any]]]], bytes]:
    return build_workbook


@pytest.fixture()
def settings() -> IngestionSettings:
    return IngestionSettings()


@pytest.fixture()
def notes_stores() -> NotesStoreRegistry:
    """Fresh notes stores for each test."""
    return NotesStoreRegistry()


@pytest.fixture()
def pipeline(settings: IngestionSettings, notes_stores: NotesStoreRegistry) -> SpreadsheetIngestionPipeline:
    return SpreadsheetIngestionPipeline(settings=settings, notes_stores=notes_stores)


@pytest.fixture()
def damaged_workbook() -> bytes:
    """A notes workbook whose first worksheet XML is cut off halfway."""
    rows = [["笔记状态", "笔记名称", "笔记链接"]]
    rows += [["正常", f"note {i}", f"https://example.com/{i}"] for i in range(40)]
    source = zipfile.ZipFile(io.BytesIO(build_workbook({"小王笔记": rows})))
    buffer = io.BytesIO()
    with source, zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as target:
        for info in source.infolist():
            data = source.read(info.filename)
            if info.filename == "xl/worksheets/sheet1.xml":
                data = data[: len(data) // 2]
            target.writestr(info.filename, data)
    return buffer.getvalue()
