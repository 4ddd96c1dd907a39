from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for structured error logging.

Each record serializes to exactly one JSON line with a fixed key set. ``row``
uses -1 as a sentinel for file- or sheet-level errors where no data row
applies.
"""

__all__ = [
    "ErrorRecord",
    "utc_timestamp",
]


def utc_timestamp() -> str:
    """ISO8601 UTC timestamp with 'Z' suffix."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Source file name being processed
        sheet: Sheet name within the file, or ``<FILE_LEVEL>``
        row: Row number (1-based). Use -1 when no row applies
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str
    file: str
    sheet: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        return ErrorRecord(
            timestamp=utc_timestamp(),
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
