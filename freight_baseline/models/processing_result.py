from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

"""Processing result models for a directory run.

A run catalogs every supported file in the source directory and tries to
extract a baseline from each. These models aggregate the outcome for the
SUMMARY line and the exit code.
"""


class FileStatus(Enum):
    """Outcome of one file.

    - SUCCESS: catalogued and a baseline was determined
    - UNDETERMINED: catalogued but no tier yielded a usable sum
    - FAILED: the file could not be read
    """
    SUCCESS = "success"
    UNDETERMINED = "undetermined"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: FileStatus
    sheets: int  # catalogued sheets
    skipped_sheets: int
    elapsed_seconds: float
    baseline_amount: Decimal | None = None
    method: str | None = None  # extraction method value when found
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of a directory run."""
    success_files: int
    undetermined_files: int
    failed_files: int
    skipped_sheets: int
    total_baseline: Decimal
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.undetermined_files + self.failed_files
