"""
tests/test_spreadsheet_reader.py

Pytest unit tests for workbook and CSV parsing into SheetTable.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from marketing_ingest.domain.sheet_table import SourceFormat
from marketing_ingest.readers.spreadsheet_reader import (
    SpreadsheetUnreadableError,
    detect_format,
    read_csv,
    read_upload,
)


class TestDetectFormat:
    @pytest.mark.parametrize(
        ("filename", "content", "expected"),
        [
            ("book.xlsx", b"", SourceFormat.WORKBOOK),
            ("BOOK.XLSM", b"", SourceFormat.WORKBOOK),
            ("export.csv", b"PK\x03\x04", SourceFormat.CSV),
            (None, b"PK\x03\x04rest", SourceFormat.WORKBOOK),
            ("upload", b"a,b\n1,2", SourceFormat.CSV),
        ],
    )
    def test_detection(self, filename, content, expected) -> None:
        assert detect_format(filename, content) == expected


class TestReadWorkbook:
    def test_sheets_headers_and_rows(self, workbook_factory) -> None:
        content = workbook_factory(
            {
                "Clients_info（new）": [
                    ["No.", "Broker", "日期"],
                    [1, "Alice", datetime(2024, 9, 19)],
                    [None, None, None],
                    [2, " Bob ", "19/09/2024"],
                ],
                "小王笔记": [["笔记名称"], ["first note"]],
            }
        )

        table = read_upload(content, "book.xlsx")

        assert table.source_format == SourceFormat.WORKBOOK
        assert table.sheet_names == ["Clients_info（new）", "小王笔记"]
        ledger = table.get("Clients_info（new）")
        assert ledger.headers == ("No.", "Broker", "日期")
        assert len(ledger.rows) == 2
        assert ledger.rows[0]["日期"] == 45554
        assert ledger.rows[1] == {"No.": 2, "Broker": "Bob", "日期": "19/09/2024"}

    def test_empty_cells_are_absent_and_headers_deduplicated(self, workbook_factory) -> None:
        content = workbook_factory({"Sheet": [["a", "a", None, "b"], [1, None, 3, 4]]})

        sheet = read_upload(content, "book.xlsx").first()

        assert sheet.headers == ("a", "a_1", "__EMPTY", "b")
        assert sheet.rows == ({"a": 1, "__EMPTY": 3, "b": 4},)

    def test_header_row_option(self, workbook_factory) -> None:
        content = workbook_factory({"Notes": [["Notes export 2024"], ["笔记名称", "笔记链接"], ["n1", "l1"]]})

        sheet = read_upload(content, "notes.xlsx", header_row=2).first()

        assert sheet.headers == ("笔记名称", "笔记链接")
        assert sheet.rows == ({"笔记名称": "n1", "笔记链接": "l1"},)

    def test_corrupt_workbook(self) -> None:
        with pytest.raises(SpreadsheetUnreadableError):
            read_upload(b"PK\x03\x04not really a zip", "broken.xlsx")

    def test_truncated_worksheet_is_unreadable(self, damaged_workbook: bytes) -> None:
        with pytest.raises(SpreadsheetUnreadableError):
            read_upload(damaged_workbook, "book.xlsx")

    def test_empty_upload(self) -> None:
        with pytest.raises(SpreadsheetUnreadableError):
            read_upload(b"", "book.xlsx")


class TestReadCsv:
    def test_bom_blank_lines_and_trimming(self) -> None:
        content = "\ufeff时间 , 消费\n\n 09/19/2024 , 47 \n,\n合计,470\n".encode("utf-8")

        table = read_upload(content, "小王投放.csv")

        assert table.source_format == SourceFormat.CSV
        assert table.sheet_names == ["小王投放"]
        sheet = table.first()
        assert sheet.headers == ("时间", "消费")
        assert sheet.rows == ({"时间": "09/19/2024", "消费": "47"}, {"时间": "合计", "消费": "470"})

    def test_ragged_rows(self) -> None:
        content = b"a,b,c\n1,2\n3,4,5,6\n"

        sheet = read_csv(content).first()

        assert sheet.name == "Sheet1"
        assert sheet.rows == ({"a": "1", "b": "2"}, {"a": "3", "b": "4", "c": "5"})

    def test_quoted_fields(self) -> None:
        content = b'name,link\n"Tips, part 1","https://example.com/?a=1"\n'

        sheet = read_csv(content).first()

        assert sheet.rows[0]["name"] == "Tips, part 1"

    def test_non_utf8_is_unreadable(self) -> None:
        with pytest.raises(SpreadsheetUnreadableError):
            read_csv(b"\xff\xfe\x00a,b\n")

    def test_whitespace_only_is_unreadable(self) -> None:
        with pytest.raises(SpreadsheetUnreadableError):
            read_csv(b"\n , \n")
