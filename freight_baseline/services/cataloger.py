from __future__ import annotations

import logging
from collections.abc import Mapping

from ..excel.reader import normalize_sheet, read_grids
from ..excel.values import cell_label, is_blank
from ..models.catalog import ColumnClassification, ColumnSample, FileCatalog, RawGrid, SheetCatalog
from .column_classifier import classify
from .header_detector import DEFAULT_SCAN_ROWS, detect_header

"""Sheet cataloging: header detection + column classification per sheet.

Builds the structural catalog of an uploaded file without extracting values.
Sheets without a qualifying header row, or without any data below it, are
omitted from the catalog (counted in ``skipped_sheets``) rather than failing
the file. Apart from parsing the input bytes this is a pure function:
cataloging identical bytes always yields an identical FileCatalog.
"""

__all__ = [
    "DEFAULT_SAMPLE_ROWS",
    "catalog_file",
    "catalog_grids",
    "catalog_sheet",
    "column_samples",
]

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_ROWS = 500


def column_samples(
    header: tuple, rows: tuple[tuple, ...], sample_rows: int = DEFAULT_SAMPLE_ROWS
) -> list[ColumnSample]:
    """Build one ColumnSample per header column from the first ``sample_rows`` rows.

    Columns with a blank label and no sampled values are dropped.
    """
    sampled = rows[:sample_rows]
    samples: list[ColumnSample] = []
    for ordinal, raw_label in enumerate(header):
        label = cell_label(raw_label)
        values = tuple(row[ordinal] if ordinal < len(row) else None for row in sampled)
        if not label and all(is_blank(v) for v in values):
            continue
        samples.append(ColumnSample(header_label=label, ordinal_index=ordinal, values=values))
    return samples


def catalog_sheet(
    grid: RawGrid,
    sheet_name: str,
    *,
    max_header_rows: int = DEFAULT_SCAN_ROWS,
    sample_rows: int = DEFAULT_SAMPLE_ROWS,
) -> SheetCatalog | None:
    """Catalog one sheet; None when it has no header or no data rows."""
    candidate = detect_header(grid, max_header_rows)
    if candidate is None:
        logger.debug("sheet=%s no qualifying header row in first %d rows", sheet_name, max_header_rows)
        return None
    sheet = normalize_sheet(grid, sheet_name, candidate.row_index)
    if not sheet.rows:
        logger.debug("sheet=%s header at row %d but no data rows", sheet_name, candidate.row_index)
        return None

    columns: list[ColumnClassification] = [
        classify(s.header_label, s.values, s.ordinal_index)
        for s in column_samples(sheet.header, sheet.rows, sample_rows)
    ]
    logger.debug(
        "sheet=%s header_row=%d score=%d columns=%d rows=%d",
        sheet_name,
        candidate.row_index,
        candidate.score,
        len(columns),
        len(sheet.rows),
    )
    return SheetCatalog(
        sheet_name=sheet_name,
        header_row_index=candidate.row_index,
        columns=tuple(columns),
        row_count=len(sheet.rows),
        column_count=len(columns),
    )


def catalog_grids(
    grids: Mapping[str, RawGrid],
    file_name: str,
    file_size: int,
    *,
    max_header_rows: int = DEFAULT_SCAN_ROWS,
    sample_rows: int = DEFAULT_SAMPLE_ROWS,
) -> FileCatalog:
    """Catalog already-read grids, keeping sheet order."""
    sheets: list[SheetCatalog] = []
    skipped = 0
    for sheet_name, grid in grids.items():
        entry = catalog_sheet(grid, sheet_name, max_header_rows=max_header_rows, sample_rows=sample_rows)
        if entry is None:
            skipped += 1
            continue
        sheets.append(entry)
    return FileCatalog(file_name=file_name, file_size=file_size, sheets=tuple(sheets), skipped_sheets=skipped)


def catalog_file(
    file_bytes: bytes,
    file_name: str,
    *,
    max_header_rows: int = DEFAULT_SCAN_ROWS,
    sample_rows: int = DEFAULT_SAMPLE_ROWS,
) -> FileCatalog:
    """Catalog an uploaded file (delimited text or multi-sheet workbook).

    Raises:
        ReaderError: the extension is unsupported or the bytes cannot be parsed
    """
    grids = read_grids(file_bytes, file_name)
    return catalog_grids(
        grids, file_name, len(file_bytes), max_header_rows=max_header_rows, sample_rows=sample_rows
    )
