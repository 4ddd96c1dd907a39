from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import PurePath
from typing import Any

from ..excel.reader import normalize_sheet
from ..excel.values import is_blank, parse_money
from ..models.catalog import ColumnClassification, ColumnRole, FileCatalog, RawGrid, SheetCatalog
from ..models.extraction import BaselineExtraction, CarrierType, ExtractionMethod, MultiSheetBaseline
from .column_classifier import normalize_header

"""Baseline cost extraction.

Locates the cost-bearing column of a catalogued file and sums it. Exact
column names are rare across carrier export formats, so resolution runs an
ordered list of independent strategies and stops at the first success:

1. exact name match against canonical cost column names for the carrier
2. fuzzy keyword match: a monetary column whose header contains a cost word
   (highest classifier confidence wins, then leftmost)
3. largest-sum fallback: the monetary column with the largest total

A strategy only succeeds with a strictly positive sum. When none succeeds the
result is None ("could not determine"), never zero.

Known limitation of tier 3: there is no lower bound, so a file whose true
cost column is small next to an unrelated large monetary column picks the
unrelated column.
"""

__all__ = [
    "CANONICAL_COST_COLUMNS",
    "COST_KEYWORD_RE",
    "ColumnTotal",
    "sum_column",
    "exact_name_match",
    "fuzzy_keyword_match",
    "largest_sum_fallback",
    "RESOLUTION_TIERS",
    "extract_baseline",
    "extract_sheet_baseline",
    "extract_multi_sheet_baseline",
    "infer_carrier_type",
    "format_currency",
]

logger = logging.getLogger(__name__)

CANONICAL_COST_COLUMNS: dict[CarrierType, tuple[str, ...]] = {
    CarrierType.PARCEL: ("Net Charge", "Net Charges", "Total Net Charge"),
    CarrierType.TRUCKLOAD: ("Gross Rate", "Total Rate", "Linehaul Cost"),
    CarrierType.LTL: ("Net Freight", "Customer Charge", "LTL Charge", "Total Charges"),
    CarrierType.OTHER: (),
}

COST_KEYWORD_RE = re.compile(r"\b(charge|cost|rate|amount|total|net)s?\b", re.IGNORECASE)

EXACT_CONFIDENCE = 0.95
FUZZY_CONFIDENCE_FACTOR = 0.85
FALLBACK_CONFIDENCE_FACTOR = 0.5

_FILE_NAME_HINTS: tuple[tuple[str, CarrierType], ...] = (
    ("r&l", CarrierType.LTL),
    ("ltl", CarrierType.LTL),
    ("ups", CarrierType.PARCEL),
    ("fedex", CarrierType.PARCEL),
    ("parcel", CarrierType.PARCEL),
    ("truckload", CarrierType.TRUCKLOAD),
    ("tl", CarrierType.TRUCKLOAD),
)


def _canonical(name: str) -> str:
    return " ".join(str(name).split()).lower()


def _has_cost_keyword(header: str) -> bool:
    # "Rate_Amount" and "TotalCost" are matched on their split words
    return COST_KEYWORD_RE.search(normalize_header(header)) is not None


@dataclass(frozen=True)
class ColumnTotal:
    amount: Decimal
    rows_processed: int
    rows_skipped: int


def sum_column(rows: Sequence[Sequence[Any]], ordinal: int) -> ColumnTotal:
    """Sum every parseable monetary value of a column.

    Blank cells are ignored; non-blank cells that fail to parse are counted
    as skipped.
    """
    amount = Decimal("0")
    processed = 0
    skipped = 0
    for row in rows:
        value = row[ordinal] if ordinal < len(row) else None
        if is_blank(value):
            continue
        parsed = parse_money(value)
        if parsed is None:
            skipped += 1
            continue
        amount += parsed
        processed += 1
    return ColumnTotal(amount=amount, rows_processed=processed, rows_skipped=skipped)


@dataclass(frozen=True)
class _Column:
    sheet: SheetCatalog
    column: ColumnClassification
    sheet_position: int


@dataclass(frozen=True)
class _Match:
    candidate: _Column
    total: ColumnTotal
    method: ExtractionMethod
    confidence: float


@dataclass
class _Context:
    """Per-request state shared by the strategies."""
    canonical_names: frozenset[str]
    data_rows: dict[str, tuple[tuple[Any, ...], ...]]
    _totals: dict[tuple[str, int], ColumnTotal] = field(default_factory=dict)

    def total(self, candidate: _Column) -> ColumnTotal:
        key = (candidate.sheet.sheet_name, candidate.column.ordinal)
        if key not in self._totals:
            rows = self.data_rows.get(candidate.sheet.sheet_name, ())
            self._totals[key] = sum_column(rows, candidate.column.ordinal)
        return self._totals[key]


Strategy = Callable[[Sequence[_Column], _Context], _Match | None]


def _first_positive(
    ordered: Sequence[_Column], ctx: _Context, method: ExtractionMethod, confidence: Callable[[_Column], float]
) -> _Match | None:
    for candidate in ordered:
        total = ctx.total(candidate)
        if total.amount > 0:
            return _Match(candidate, total, method, confidence(candidate))
    return None


def exact_name_match(columns: Sequence[_Column], ctx: _Context) -> _Match | None:
    if not ctx.canonical_names:
        return None
    hits = [c for c in columns if _canonical(c.column.raw_header) in ctx.canonical_names]
    return _first_positive(hits, ctx, ExtractionMethod.EXACT_NAME_MATCH, lambda _c: EXACT_CONFIDENCE)


def fuzzy_keyword_match(columns: Sequence[_Column], ctx: _Context) -> _Match | None:
    hits = [
        c for c in columns
        if c.column.guessed_role is ColumnRole.MONETARY_AMOUNT and _has_cost_keyword(c.column.raw_header)
    ]
    hits.sort(key=lambda c: (-c.column.confidence, c.sheet_position, c.column.ordinal))
    return _first_positive(
        hits,
        ctx,
        ExtractionMethod.FUZZY_KEYWORD_MATCH,
        lambda c: FUZZY_CONFIDENCE_FACTOR * c.column.confidence,
    )


def largest_sum_fallback(columns: Sequence[_Column], ctx: _Context) -> _Match | None:
    best: tuple[_Column, ColumnTotal] | None = None
    for candidate in columns:
        if candidate.column.guessed_role is not ColumnRole.MONETARY_AMOUNT:
            continue
        total = ctx.total(candidate)
        if total.amount <= 0:
            continue
        if best is None or total.amount > best[1].amount:
            best = (candidate, total)
    if best is None:
        return None
    candidate, total = best
    return _Match(
        candidate,
        total,
        ExtractionMethod.LARGEST_SUM_FALLBACK,
        FALLBACK_CONFIDENCE_FACTOR * candidate.column.confidence,
    )


RESOLUTION_TIERS: tuple[Strategy, ...] = (exact_name_match, fuzzy_keyword_match, largest_sum_fallback)


def _canonical_names(
    carrier_type: CarrierType | None, extra: Mapping[CarrierType, Sequence[str]] | None
) -> frozenset[str]:
    if carrier_type is None:
        return frozenset()
    names = list(CANONICAL_COST_COLUMNS.get(carrier_type, ()))
    if extra:
        names.extend(extra.get(carrier_type, ()))
    return frozenset(_canonical(n) for n in names)


def _resolve(
    file_name: str,
    sheets: Sequence[SheetCatalog],
    raw_rows_by_sheet: Mapping[str, RawGrid],
    carrier_type: CarrierType | str | None,
    extra_canonical: Mapping[CarrierType, Sequence[str]] | None,
) -> BaselineExtraction | None:
    carrier = CarrierType.from_hint(carrier_type)
    data_rows: dict[str, tuple[tuple[Any, ...], ...]] = {}
    columns: list[_Column] = []
    for position, sheet in enumerate(sheets):
        grid = raw_rows_by_sheet.get(sheet.sheet_name)
        if grid is None:
            logger.debug("file=%s sheet=%s no raw rows supplied, skipped", file_name, sheet.sheet_name)
            continue
        data_rows[sheet.sheet_name] = normalize_sheet(grid, sheet.sheet_name, sheet.header_row_index).rows
        columns.extend(_Column(sheet, c, position) for c in sheet.columns)

    ctx = _Context(canonical_names=_canonical_names(carrier, extra_canonical), data_rows=data_rows)
    for strategy in RESOLUTION_TIERS:
        match = strategy(columns, ctx)
        if match is None:
            continue
        c = match.candidate
        logger.debug(
            "file=%s sheet=%s column=%s method=%s amount=%s",
            file_name,
            c.sheet.sheet_name,
            c.column.raw_header,
            match.method.value,
            match.total.amount,
        )
        return BaselineExtraction(
            file_name=file_name,
            sheet_name=c.sheet.sheet_name,
            column_name=c.column.raw_header,
            extracted_amount=match.total.amount,
            confidence=min(1.0, max(0.0, match.confidence)),
            method=match.method,
            rows_processed=match.total.rows_processed,
            rows_skipped=match.total.rows_skipped,
            ordinal=c.column.ordinal,
        )
    return None


def extract_baseline(
    file_catalog: FileCatalog,
    raw_rows_by_sheet: Mapping[str, RawGrid],
    carrier_type: CarrierType | str | None,
    *,
    extra_canonical: Mapping[CarrierType, Sequence[str]] | None = None,
) -> BaselineExtraction | None:
    """Extract the baseline cost of a file; None when it cannot be determined.

    Each tier considers every catalogued sheet (in catalog order) before the
    next tier runs. An unrecognized or absent ``carrier_type`` skips tier 1.
    """
    return _resolve(
        file_catalog.file_name, file_catalog.sheets, raw_rows_by_sheet, carrier_type, extra_canonical
    )


def extract_sheet_baseline(
    sheet_catalog: SheetCatalog,
    grid: RawGrid,
    carrier_type: CarrierType | str | None,
    file_name: str,
    *,
    extra_canonical: Mapping[CarrierType, Sequence[str]] | None = None,
) -> BaselineExtraction | None:
    """Run the resolution tiers over a single sheet."""
    return _resolve(
        file_name, [sheet_catalog], {sheet_catalog.sheet_name: grid}, carrier_type, extra_canonical
    )


def extract_multi_sheet_baseline(
    file_catalog: FileCatalog,
    raw_rows_by_sheet: Mapping[str, RawGrid],
    carrier_type: CarrierType | str | None,
    *,
    extra_canonical: Mapping[CarrierType, Sequence[str]] | None = None,
) -> MultiSheetBaseline | None:
    """Extract one baseline per sheet and total them (multi-tab exports).

    Sheets without a determinable baseline are left out; None when no sheet
    yields one.
    """
    found: list[BaselineExtraction] = []
    for sheet in file_catalog.sheets:
        grid = raw_rows_by_sheet.get(sheet.sheet_name)
        if grid is None:
            continue
        extraction = extract_sheet_baseline(
            sheet, grid, carrier_type, file_catalog.file_name, extra_canonical=extra_canonical
        )
        if extraction is not None:
            found.append(extraction)
    if not found:
        return None
    return MultiSheetBaseline(file_name=file_catalog.file_name, sheets=tuple(found))


def infer_carrier_type(file_name: str, hints: Mapping[str, CarrierType] | None = None) -> CarrierType | None:
    """Guess the carrier type from a file name.

    Configured ``{substring: carrier}`` hints are checked first, then the
    built-in carrier name hints.
    """
    stem = PurePath(file_name).stem.lower()
    for needle, carrier in (hints or {}).items():
        if needle.lower() in stem:
            return carrier
    tokens = set(re.findall(r"[a-z0-9&]+", stem))
    for needle, carrier in _FILE_NAME_HINTS:
        if (needle in tokens) if len(needle) <= 3 else (needle in stem):
            return carrier
    return None


def format_currency(amount: Decimal | float) -> str:
    value = float(amount)
    if value > 1_000_000:
        return f"${value / 1_000_000:.2f}M"
    if value > 1000:
        return f"${value / 1000:.0f}K"
    return f"${value:,.2f}"
