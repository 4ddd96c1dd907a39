from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Generic, Protocol, TypeVar

from ..models.error_record import ErrorRecord
from ..models.extraction_record import ExtractionRecord

"""JSON Lines run logs, buffered in memory and flushed once per run.

- fixed schemas (see ErrorRecord / ExtractionRecord)
- one file per run and kind: ``<log_dir>/<prefix>-YYYYMMDD-HHMMSS.log`` (UTC)
- the file is only created when there is something to write
"""

__all__ = [
    "LOGS_DIR",
    "TIMESTAMP_FMT",
    "JsonLinesBuffer",
    "ErrorLogBuffer",
    "ExtractionLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class _JsonLine(Protocol):
    def to_json_line(self) -> str: ...


R = TypeVar("R", bound=_JsonLine)


class JsonLinesBuffer(Generic[R]):
    """In-memory buffer of records; ``flush`` appends them as JSON Lines.

    The file path is fixed on first access. Not thread safe (runs are serial).
    """

    prefix = "records"

    def __init__(self, log_dir: Path | str | None = None) -> None:
        self._records: list[R] = []
        self._file_path: Path | None = None
        self._log_dir = Path(log_dir) if log_dir is not None else LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._log_dir / f"{self.prefix}-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> tuple[R, ...]:
        return tuple(self._records)

    def append(self, record: R) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the file path, or None if empty."""
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp


class ErrorLogBuffer(JsonLinesBuffer[ErrorRecord]):
    prefix = "errors"


class ExtractionLogBuffer(JsonLinesBuffer[ExtractionRecord]):
    prefix = "extractions"
