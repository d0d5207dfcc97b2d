"""
tests/test_field_values.py

Pytest unit tests for header fallback chains and cell coercion.
"""

from __future__ import annotations

import pytest

from marketing_ingest.mappers.field_values import (
    first_present,
    is_blank,
    normalize_header,
    to_float,
    to_int,
    to_text,
)


class TestFirstPresent:
    def test_alias_order_wins(self) -> None:
        row = {"broker": "second", "Broker": "first"}
        assert first_present(row, ("Broker", "broker")) == "first"

    def test_blank_values_fall_through(self) -> None:
        row = {"Broker": "   ", "broker": "Bob"}
        assert first_present(row, ("Broker", "broker")) == "Bob"

    def test_normalized_header_fallback(self) -> None:
        row = {" NO. ": 7}
        assert first_present(row, ("No.", "no")) == 7

    def test_missing_returns_none(self) -> None:
        assert first_present({"Other": 1}, ("No.", "no")) is None

    def test_zero_is_present(self) -> None:
        assert first_present({"消费": 0, "Spend": 5}, ("消费", "Spend")) == 0


def test_normalize_header() -> None:
    assert normalize_header(" Multi Conversion-1 ") == "multiconversion1"
    assert normalize_header("笔记 状态") == "笔记状态"


def test_is_blank() -> None:
    assert is_blank(None)
    assert is_blank("  ")
    assert not is_blank(0)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, 0.0),
        (12, 12.0),
        (12.5, 12.5),
        ("12.5%", 12.5),
        ("1,234.5", 1234.5),
        ("  3.2 % ", 3.2),
        ("12abc", 12.0),
        ("abc", 0.0),
        ("", 0.0),
        (float("nan"), 0.0),
    ],
)
def test_to_float(value, expected) -> None:
    assert to_float(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, 0),
        (12.7, 12),
        ("12.7", 12),
        ("1,000", 1000),
        ("-3", -3),
        ("7 clicks", 7),
        ("n/a", 0),
        (True, 0),
    ],
)
def test_to_int(value, expected) -> None:
    assert to_int(value) == expected


def test_to_text() -> None:
    assert to_text(None) == ""
    assert to_text(3.0) == "3"
    assert to_text(3.5) == "3.5"
    assert to_text("  wx_123 ") == "wx_123"
