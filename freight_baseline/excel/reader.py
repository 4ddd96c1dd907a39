from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Any

import pandas as pd

from ..models.catalog import RawGrid
from .values import coerce_text, is_blank

"""Spreadsheet reader producing raw cell grids.

Files arrive as bytes plus a declared file name. The format variant is chosen
from the file extension only:

- delimited text (.csv, .tsv): one implicit sheet named ``default``
- multi-sheet workbook (.xlsx, .xlsm): every sheet read header-less via pandas

Grids are returned untouched apart from cell typing (NaN -> None, numpy
scalars -> Python scalars); header detection happens later.
"""

__all__ = [
    "FileFormat",
    "ReaderError",
    "UnsupportedFormatError",
    "WorkbookReadError",
    "SheetData",
    "DEFAULT_SHEET_NAME",
    "SUPPORTED_EXTENSIONS",
    "detect_format",
    "read_grids",
    "normalize_sheet",
]

DEFAULT_SHEET_NAME = "default"
LEGACY_ENCODING = "cp1252"


class FileFormat(Enum):
    DELIMITED = "delimited"
    WORKBOOK = "workbook"


class ReaderError(Exception):
    """Base class for file reading failures."""


class UnsupportedFormatError(ReaderError):
    """Raised when the file extension maps to no known format."""


class WorkbookReadError(ReaderError):
    """Raised when the file bytes cannot be parsed in the declared format."""


_EXTENSION_FORMATS: dict[str, FileFormat] = {
    ".csv": FileFormat.DELIMITED,
    ".tsv": FileFormat.DELIMITED,
    ".xlsx": FileFormat.WORKBOOK,
    ".xlsm": FileFormat.WORKBOOK,
}
_DELIMITERS = {".csv": ",", ".tsv": "\t"}

SUPPORTED_EXTENSIONS = frozenset(_EXTENSION_FORMATS)


@dataclass(frozen=True)
class SheetData:
    """A grid sliced at its header row."""
    sheet_name: str
    header_row_index: int
    header: tuple[Any, ...]
    rows: tuple[tuple[Any, ...], ...]  # non-empty data rows below the header


def detect_format(file_name: str) -> FileFormat:
    suffix = PurePath(file_name).suffix.lower()
    try:
        return _EXTENSION_FORMATS[suffix]
    except KeyError:
        raise UnsupportedFormatError(f"unsupported file extension '{suffix}' for {file_name}") from None


def read_grids(file_bytes: bytes, file_name: str) -> dict[str, RawGrid]:
    """Read every sheet of an uploaded file as a raw grid keyed by sheet name.

    Parameters
    ----------
    file_bytes: file content as uploaded
    file_name: declared file name; its extension selects the format
    """
    fmt = detect_format(file_name)
    if fmt is FileFormat.DELIMITED:
        delimiter = _DELIMITERS[PurePath(file_name).suffix.lower()]
        return {DEFAULT_SHEET_NAME: _read_delimited(file_bytes, file_name, delimiter)}
    return _read_workbook(file_bytes, file_name)


def _decode_text(file_bytes: bytes, file_name: str) -> str:
    """UTF-8 (BOM optional), else Windows-1252 as written by Excel "Save as CSV"."""
    try:
        return file_bytes.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass
    try:
        return file_bytes.decode(LEGACY_ENCODING)
    except UnicodeDecodeError as e:
        raise WorkbookReadError(f"cannot decode {file_name} as UTF-8 or {LEGACY_ENCODING}: {e}") from e


def _read_delimited(file_bytes: bytes, file_name: str, delimiter: str) -> RawGrid:
    # csv module instead of pandas: logo / title rows make the grid ragged
    text = _decode_text(file_bytes, file_name)
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    return tuple(tuple(coerce_text(cell) for cell in row) for row in reader)


def _read_workbook(file_bytes: bytes, file_name: str) -> dict[str, RawGrid]:
    try:
        frames = pd.read_excel(io.BytesIO(file_bytes), sheet_name=None, header=None, engine="openpyxl")
    except Exception as e:
        raise WorkbookReadError(f"cannot read workbook {file_name}: {e}") from e
    return {str(name): _frame_to_grid(df) for name, df in frames.items()}


def _frame_to_grid(df: pd.DataFrame) -> RawGrid:
    rows = []
    for raw in df.astype(object).itertuples(index=False, name=None):
        rows.append(tuple(_unbox(v) for v in raw))
    return tuple(rows)


def _unbox(value: Any) -> Any:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if hasattr(value, "item"):
        # numpy scalar
        return value.item()
    return value


def normalize_sheet(grid: RawGrid, sheet_name: str, header_row_index: int) -> SheetData:
    """Slice a grid at its header row.

    Rows below the header that are entirely blank are dropped.
    """
    if header_row_index < 0 or header_row_index >= len(grid):
        raise IndexError(f"sheet '{sheet_name}' has no row {header_row_index}")
    data_rows = tuple(
        row for row in grid[header_row_index + 1:] if not all(is_blank(v) for v in row)
    )
    return SheetData(
        sheet_name=sheet_name,
        header_row_index=header_row_index,
        header=grid[header_row_index],
        rows=data_rows,
    )
