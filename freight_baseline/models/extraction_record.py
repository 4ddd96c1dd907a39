from __future__ import annotations

import json
from dataclasses import asdict, dataclass

from .error_record import utc_timestamp
from .extraction import BaselineExtraction, CarrierType

"""ExtractionRecord: payload handed to the extraction learning store.

The learning store only logs extraction events for later offline analysis,
so the contract is a flat JSON line per successful extraction.
"""

__all__ = [
    "ExtractionRecord",
]


@dataclass(frozen=True)
class ExtractionRecord:
    timestamp: str
    file: str
    sheet: str
    carrier_type: str
    column: str
    extracted_amount: float
    confidence: float
    method: str
    rows_processed: int
    column_headers: list[str]

    @staticmethod
    def from_extraction(
        extraction: BaselineExtraction,
        carrier_type: CarrierType | None,
        column_headers: list[str],
    ) -> ExtractionRecord:
        return ExtractionRecord(
            timestamp=utc_timestamp(),
            file=extraction.file_name,
            sheet=extraction.sheet_name,
            carrier_type=(carrier_type or CarrierType.OTHER).value,
            column=extraction.column_name,
            extracted_amount=float(extraction.extracted_amount),
            confidence=round(extraction.confidence, 4),
            method=extraction.method.value,
            rows_processed=extraction.rows_processed,
            column_headers=list(column_headers),
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
