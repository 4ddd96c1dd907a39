from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

"""Baseline extraction models.

BaselineExtraction is a derived fact produced fresh per extraction request. It
is not owned by any catalog; callers either discard it or hand it to the
learning-store collaborator as an ExtractionRecord.
"""

__all__ = [
    "CarrierType",
    "ExtractionMethod",
    "BaselineExtraction",
    "MultiSheetBaseline",
]


class CarrierType(Enum):
    """Freight export format family, selects canonical cost column names."""
    PARCEL = "PARCEL"
    TRUCKLOAD = "TRUCKLOAD"
    LTL = "LTL"
    OTHER = "OTHER"

    @classmethod
    def from_hint(cls, value: Any) -> CarrierType | None:
        """Resolve an enum name or carrier alias; unknown hints give None."""
        if isinstance(value, CarrierType):
            return value
        if not isinstance(value, str):
            return None
        key = re.sub(r"[\s_\-]+", "", value).upper()
        return _CARRIER_ALIASES.get(key)


_CARRIER_ALIASES: dict[str, CarrierType] = {
    "PARCEL": CarrierType.PARCEL,
    "UPS": CarrierType.PARCEL,
    "FEDEX": CarrierType.PARCEL,
    "TRUCKLOAD": CarrierType.TRUCKLOAD,
    "TL": CarrierType.TRUCKLOAD,
    "FTL": CarrierType.TRUCKLOAD,
    "LTL": CarrierType.LTL,
    "RL": CarrierType.LTL,
    "R&L": CarrierType.LTL,
    "OTHER": CarrierType.OTHER,
}


class ExtractionMethod(Enum):
    """Resolution tier that located the cost-bearing column."""
    EXACT_NAME_MATCH = "exact-name-match"
    FUZZY_KEYWORD_MATCH = "fuzzy-keyword-match"
    LARGEST_SUM_FALLBACK = "largest-sum-fallback"


@dataclass(frozen=True)
class BaselineExtraction:
    file_name: str
    sheet_name: str
    column_name: str
    extracted_amount: Decimal  # always >= 0
    confidence: float  # [0, 1]
    method: ExtractionMethod
    rows_processed: int  # values actually summed
    rows_skipped: int = 0  # non-blank values that failed to parse
    ordinal: int = -1

    def __post_init__(self) -> None:
        if self.extracted_amount < 0:
            raise ValueError(f"extracted_amount must be >= 0, got {self.extracted_amount}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must lie in [0, 1], got {self.confidence}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "sheet_name": self.sheet_name,
            "column_name": self.column_name,
            "extracted_amount": str(self.extracted_amount),
            "confidence": round(self.confidence, 4),
            "method": self.method.value,
            "rows_processed": self.rows_processed,
            "rows_skipped": self.rows_skipped,
        }


@dataclass(frozen=True)
class MultiSheetBaseline:
    """Per-sheet baselines of one workbook and their total."""
    file_name: str
    sheets: tuple[BaselineExtraction, ...] = field(default_factory=tuple)

    @property
    def total_amount(self) -> Decimal:
        return sum((s.extracted_amount for s in self.sheets), Decimal("0"))
