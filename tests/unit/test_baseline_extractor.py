from __future__ import annotations

from decimal import Decimal

import pytest

from freight_baseline.models.extraction import CarrierType, ExtractionMethod
from freight_baseline.services.baseline_extractor import (
    COST_KEYWORD_RE,
    extract_baseline,
    extract_multi_sheet_baseline,
    extract_sheet_baseline,
    format_currency,
    infer_carrier_type,
    sum_column,
)
from freight_baseline.services.cataloger import catalog_grids
from freight_baseline.services.column_classifier import classify


def _grids(**sheets):
    return {name: tuple(tuple(r) for r in rows) for name, rows in sheets.items()}


def _extract(grids, carrier, file_name="export.xlsx", **kwargs):
    catalog = catalog_grids(grids, file_name, 0)
    return extract_baseline(catalog, grids, carrier, **kwargs)


def test_exact_name_match_for_parcel(parcel_grid):
    grids = _grids(Invoice=parcel_grid)
    result = _extract(grids, CarrierType.PARCEL)
    assert result is not None
    assert result.method is ExtractionMethod.EXACT_NAME_MATCH
    assert result.column_name == "Net Charge"
    assert result.sheet_name == "Invoice"
    assert result.extracted_amount == Decimal("121.75")
    assert result.rows_processed == 3
    assert result.confidence == pytest.approx(0.95)


def test_carrier_given_as_string_alias(parcel_grid):
    result = _extract(_grids(Invoice=parcel_grid), "ups")
    assert result is not None
    assert result.method is ExtractionMethod.EXACT_NAME_MATCH


def test_truckload_rate_amount_resolved_by_keyword_tier(truckload_grid):
    result = _extract(_grids(Loads=truckload_grid), CarrierType.TRUCKLOAD)
    assert result is not None
    assert result.method is ExtractionMethod.FUZZY_KEYWORD_MATCH
    assert result.column_name == "Rate Amount"
    assert result.extracted_amount == Decimal("2000.00")
    expected = 0.85 * classify("Rate Amount", ["$1,200.00", "$800.00"], 3).confidence
    assert result.confidence == pytest.approx(expected)


def test_keyword_tier_is_whole_word():
    assert COST_KEYWORD_RE.search("Rate Amount")
    assert COST_KEYWORD_RE.search("Total Charges")
    assert not COST_KEYWORD_RE.search("Fuel Surcharge")
    assert not COST_KEYWORD_RE.search("Freight")


def test_largest_sum_fallback_without_cost_keywords():
    grid = [
        ["Ship Date", "Freight", "Price"],
        ["01/02/2024", "$100.00", "$5.00"],
        ["01/03/2024", "$200.00", "$6.00"],
    ]
    result = _extract(_grids(Sheet1=grid), None)
    assert result is not None
    assert result.method is ExtractionMethod.LARGEST_SUM_FALLBACK
    assert result.column_name == "Freight"
    assert result.extracted_amount == Decimal("300.00")
    assert result.confidence < 0.5


def test_zero_sum_canonical_column_falls_through():
    grid = [
        ["Ship Date", "Net Charge", "Total Cost"],
        ["01/02/2024", "$0.00", "$10.00"],
        ["01/03/2024", "$0.00", "$15.50"],
    ]
    result = _extract(_grids(Sheet1=grid), CarrierType.PARCEL)
    assert result is not None
    assert result.method is ExtractionMethod.FUZZY_KEYWORD_MATCH
    assert result.column_name == "Total Cost"
    assert result.extracted_amount == Decimal("25.50")


def test_no_monetary_column_is_undetermined():
    grid = [
        ["Customer Name", "Notes", "Shipper City"],
        ["Contoso", "left at dock", "Reno"],
        ["Fabrikam", "signed", "Dallas"],
    ]
    assert _extract(_grids(Sheet1=grid), CarrierType.LTL) is None


def test_empty_catalog_is_undetermined():
    assert _extract(_grids(Sheet1=[[1, 2], [3, 4]]), CarrierType.PARCEL) is None


def test_tiers_span_all_sheets(parcel_grid):
    summary = [
        ["Invoice Summary", None],
        ["Period", "Amount"],
        ["Jan", "$1.00"],
    ]
    grids = _grids(Summary=summary, Detail=parcel_grid)
    result = _extract(grids, CarrierType.PARCEL)
    assert result is not None
    assert result.sheet_name == "Detail"
    assert result.method is ExtractionMethod.EXACT_NAME_MATCH


def test_configured_canonical_names_extend_tier_one():
    grid = [
        ["Ship Date", "Billed Charge", "Total Cost"],
        ["01/02/2024", "$10.00", "$99.00"],
    ]
    result = _extract(
        _grids(Sheet1=grid),
        CarrierType.PARCEL,
        extra_canonical={CarrierType.PARCEL: ("billed  charge",)},
    )
    assert result is not None
    assert result.method is ExtractionMethod.EXACT_NAME_MATCH
    assert result.column_name == "Billed Charge"


def test_unparseable_values_are_counted_as_skipped():
    rows = (("$5.00",), ("n/a",), (None,), ("(1.00)",))
    total = sum_column(rows, 0)
    assert total.amount == Decimal("4.00")
    assert total.rows_processed == 2
    assert total.rows_skipped == 1


def test_extract_sheet_baseline_single_sheet(truckload_grid):
    grids = _grids(Loads=truckload_grid)
    catalog = catalog_grids(grids, "tl.xlsx", 0)
    result = extract_sheet_baseline(catalog.sheets[0], grids["Loads"], CarrierType.TRUCKLOAD, "tl.xlsx")
    assert result is not None
    assert result.file_name == "tl.xlsx"
    assert result.extracted_amount == Decimal("2000.00")


def test_multi_sheet_baseline_totals_each_tab(parcel_grid):
    grids = _grids(January=parcel_grid, February=parcel_grid, Notes=[["nothing here"]])
    catalog = catalog_grids(grids, "ups.xlsx", 0)
    multi = extract_multi_sheet_baseline(catalog, grids, CarrierType.PARCEL)
    assert multi is not None
    assert [s.sheet_name for s in multi.sheets] == ["January", "February"]
    assert multi.total_amount == Decimal("243.50")


def test_multi_sheet_baseline_none_when_nothing_found():
    grids = _grids(Sheet1=[[1, 2]])
    catalog = catalog_grids(grids, "x.xlsx", 0)
    assert extract_multi_sheet_baseline(catalog, grids, None) is None


@pytest.mark.parametrize(
    "file_name,expected",
    [
        ("UPS_2024.xlsx", CarrierType.PARCEL),
        ("fedex-march.csv", CarrierType.PARCEL),
        ("r&l_freight.csv", CarrierType.LTL),
        ("acme_ltl_q1.xlsx", CarrierType.LTL),
        ("acme_tl_lanes.csv", CarrierType.TRUCKLOAD),
        ("settlement.xlsx", None),
    ],
)
def test_infer_carrier_type_from_file_name(file_name, expected):
    assert infer_carrier_type(file_name) is expected


def test_configured_hints_checked_first():
    hints = {"estes": CarrierType.LTL, "ups": CarrierType.OTHER}
    assert infer_carrier_type("Estes_Q1.xlsx", hints) is CarrierType.LTL
    assert infer_carrier_type("ups_2024.xlsx", hints) is CarrierType.OTHER


def test_format_currency():
    assert format_currency(Decimal("1234567")) == "$1.23M"
    assert format_currency(45000) == "$45K"
    assert format_currency(512) == "$512.00"


def test_keyword_tier_matches_snake_and_camel_case_headers():
    grid = [
        ["Load_ID", "Origin", "Rate_Amount", "Declared Value"],
        ["TL001", "Reno", "$1,200.00", "$50,000.00"],
        ["TL002", "Dallas", "$800.00", "$75,000.00"],
    ]
    result = _extract(_grids(Loads=grid), CarrierType.TRUCKLOAD)
    assert result is not None
    assert result.method is ExtractionMethod.FUZZY_KEYWORD_MATCH
    assert result.column_name == "Rate_Amount"
    assert result.extracted_amount == Decimal("2000.00")


@pytest.mark.parametrize("header", ["freight_cost", "net_charge", "TotalCost", "lineHaulCost"])
def test_keyword_tier_header_spellings(header):
    grid = [[header, "Declared Value"], ["$10.00", "$900.00"], ["$15.00", "$800.00"]]
    result = _extract(_grids(Sheet1=grid), None)
    assert result is not None
    assert result.method is ExtractionMethod.FUZZY_KEYWORD_MATCH
    assert result.column_name == header
