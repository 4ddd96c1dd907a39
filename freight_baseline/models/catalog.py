from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""Structural catalog models for uploaded carrier spreadsheets.

A FileCatalog is the top-level result of cataloging one uploaded file. It owns
one SheetCatalog per usable sheet, each holding one ColumnClassification per
header column. Values are not extracted at this stage; the Baseline Extractor
works from the catalog plus the raw grids.
"""

__all__ = [
    "RawGrid",
    "ColumnRole",
    "ClassificationMethod",
    "HeaderCandidate",
    "ColumnSample",
    "ColumnClassification",
    "SheetCatalog",
    "FileCatalog",
]

# One sheet as read from the source file: rows of raw cell values
RawGrid = tuple[tuple[Any, ...], ...]


class ColumnRole(Enum):
    """Semantic role guessed for a spreadsheet column."""
    MONETARY_AMOUNT = "monetary-amount"
    DATE = "date"
    IDENTIFIER = "identifier"
    ZIP_CODE = "zip-code"
    QUANTITY = "quantity"
    WEIGHT = "weight"
    CARRIER = "carrier"
    FREE_TEXT = "free-text"


class ClassificationMethod(Enum):
    """Signal path that produced the winning role of a classification."""
    HEADER_TEXT_MATCH = "header-text-match"
    VALUE_SHAPE_MATCH = "value-shape-match"
    POSITIONAL_DEFAULT = "positional-default"


@dataclass(frozen=True)
class HeaderCandidate:
    row_index: int  # 0-based row within the grid
    score: int


@dataclass(frozen=True)
class ColumnSample:
    """Header label plus a bounded sample of the column's data values."""
    header_label: str
    ordinal_index: int
    values: tuple[Any, ...]


@dataclass(frozen=True)
class ColumnClassification:
    """Classifier verdict for one column.

    ``alternatives`` holds every other role that fired, sorted by descending
    score. Scores of the guess and the alternatives sum to 1.0 unless the
    column was unrecognized, in which case the guess is free-text with a low
    fixed confidence and no alternatives.
    """
    raw_header: str
    ordinal: int
    guessed_role: ColumnRole
    confidence: float  # [0, 1]
    alternatives: tuple[tuple[ColumnRole, float], ...] = ()
    method: ClassificationMethod = ClassificationMethod.POSITIONAL_DEFAULT

    def to_dict(self) -> dict[str, Any]:
        return {
            "raw_header": self.raw_header,
            "ordinal": self.ordinal,
            "guessed_role": self.guessed_role.value,
            "confidence": round(self.confidence, 4),
            "alternatives": [
                {"role": role.value, "score": round(score, 4)} for role, score in self.alternatives
            ],
            "method": self.method.value,
        }


@dataclass(frozen=True)
class SheetCatalog:
    sheet_name: str
    header_row_index: int  # grid row holding the detected header
    columns: tuple[ColumnClassification, ...]
    row_count: int  # non-empty data rows below the header
    column_count: int

    def __post_init__(self) -> None:
        if self.column_count != len(self.columns):
            raise ValueError(
                f"sheet '{self.sheet_name}' column_count={self.column_count} "
                f"does not match {len(self.columns)} columns"
            )

    @property
    def headers(self) -> list[str]:
        return [c.raw_header for c in self.columns]

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheet_name": self.sheet_name,
            "header_row_index": self.header_row_index,
            "row_count": self.row_count,
            "column_count": self.column_count,
            "columns": [c.to_dict() for c in self.columns],
        }


@dataclass(frozen=True)
class FileCatalog:
    """Catalog of one uploaded file. Never mutated after creation."""
    file_name: str
    file_size: int
    sheets: tuple[SheetCatalog, ...] = field(default_factory=tuple)
    skipped_sheets: int = 0  # sheets read but omitted (no header / no data)

    def sheet(self, name: str) -> SheetCatalog | None:
        for s in self.sheets:
            if s.sheet_name == name:
                return s
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "file_size": self.file_size,
            "skipped_sheets": self.skipped_sheets,
            "sheets": [s.to_dict() for s in self.sheets],
        }
