from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from freight_baseline.excel.values import cell_label, coerce_text, is_blank, is_numeric_cell, parse_money


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("$1,234.50", Decimal("1234.50")),
        ("(12.50)", Decimal("-12.50")),
        ("12.50-", Decimal("-12.50")),
        ("USD 99", Decimal("99")),
        ("£5", Decimal("5")),
        (" 42 ", Decimal("42")),
        (12, Decimal("12")),
        (1.1, Decimal("1.1")),
    ],
)
def test_parse_money_accepts_currency_text(raw, expected):
    assert parse_money(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "abc", "A1", "01/02/2024", True, float("nan"), float("inf")])
def test_parse_money_rejects_non_amounts(raw):
    assert parse_money(raw) is None


def test_is_blank():
    assert is_blank(None)
    assert is_blank("   ")
    assert is_blank(float("nan"))
    assert not is_blank(0)
    assert not is_blank("x")


def test_is_numeric_cell_counts_plain_number_text():
    assert is_numeric_cell(3)
    assert is_numeric_cell("3.5")
    assert not is_numeric_cell(True)
    assert not is_numeric_cell("$3.50")
    assert not is_numeric_cell("Net Charge")


def test_cell_label():
    assert cell_label(2024.0) == "2024"
    assert cell_label(None) == ""
    assert cell_label("  Net Charge ") == "Net Charge"
    assert cell_label(datetime(2024, 1, 2)) == "2024-01-02"


def test_coerce_text_types_delimited_cells():
    assert coerce_text("42") == 42
    assert coerce_text("3.5") == 3.5
    assert coerce_text("00123") == "00123"
    assert coerce_text("  ") is None
    assert coerce_text("$5.00") == "$5.00"
