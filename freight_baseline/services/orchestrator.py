from __future__ import annotations

import logging
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path

from ..excel.reader import SUPPORTED_EXTENSIONS, ReaderError, UnsupportedFormatError, read_grids
from ..logging.error_log import ErrorLogBuffer, ExtractionLogBuffer
from ..models.catalog import FileCatalog
from ..models.config_models import BaselineConfig
from ..models.error_record import ErrorRecord
from ..models.extraction import BaselineExtraction, CarrierType
from ..models.extraction_record import ExtractionRecord
from ..models.processing_result import FileStat, FileStatus, ProcessingResult
from .baseline_extractor import extract_baseline, format_currency, infer_carrier_type
from .cataloger import catalog_grids
from .progress import ProgressTracker

"""Run orchestration: catalog and extract a baseline for every file in a directory.

Each file is handled independently; a file that cannot be read or whose
baseline cannot be determined is recorded in the error log and the run moves
on. Only an unusable source directory is fatal.
"""

__all__ = [
    "ProcessingError",
    "FILE_LEVEL_SHEET",
    "scan_source_files",
    "process_file",
    "process_all",
]

logger = logging.getLogger(__name__)

FILE_LEVEL_SHEET = "<FILE_LEVEL>"


class ProcessingError(Exception):
    """Fatal error that prevents a run from starting."""


def scan_source_files(directory: Path) -> list[Path]:
    """Supported files directly inside ``directory``, sorted by name.

    Raises:
        ProcessingError: the directory does not exist or cannot be listed
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS),
            key=lambda p: p.name,
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _file_error(file_name: str, error_type: str, message: str) -> ErrorRecord:
    return ErrorRecord.create(file=file_name, sheet=FILE_LEVEL_SHEET, row=-1, error_type=error_type, message=message)


def _column_headers(catalog: FileCatalog, extraction: BaselineExtraction) -> list[str]:
    sheet = catalog.sheet(extraction.sheet_name)
    return list(sheet.headers) if sheet is not None else []


def process_file(
    file_path: Path,
    config: BaselineConfig,
    error_log: ErrorLogBuffer,
    extraction_log: ExtractionLogBuffer,
) -> FileStat:
    """Catalog one file and extract its baseline; never raises for file-level problems."""
    started = datetime.now(UTC)
    name = file_path.name

    def elapsed() -> float:
        return (datetime.now(UTC) - started).total_seconds()

    try:
        data = file_path.read_bytes()
        grids = read_grids(data, name)
    except (OSError, ReaderError) as e:
        error_type = "UNSUPPORTED_FORMAT" if isinstance(e, UnsupportedFormatError) else "FILE_READ_ERROR"
        error_log.append(_file_error(name, error_type, str(e)))
        logger.warning("file=%s read failed: %s", name, e)
        return FileStat(
            file_name=name,
            status=FileStatus.FAILED,
            sheets=0,
            skipped_sheets=0,
            elapsed_seconds=elapsed(),
            error=str(e),
        )

    catalog = catalog_grids(
        grids,
        name,
        len(data),
        max_header_rows=config.header_scan_rows,
        sample_rows=config.sample_rows,
    )
    carrier: CarrierType | None = infer_carrier_type(name, config.carrier_hints)
    extraction = extract_baseline(catalog, grids, carrier, extra_canonical=config.canonical_columns)

    if extraction is None:
        if catalog.sheets:
            message = "no cost column yielded a positive total"
        else:
            message = f"no header row detected in {len(grids)} sheet(s)"
        error_log.append(_file_error(name, "BASELINE_UNDETERMINED", message))
        logger.warning("file=%s baseline undetermined: %s", name, message)
        return FileStat(
            file_name=name,
            status=FileStatus.UNDETERMINED,
            sheets=len(catalog.sheets),
            skipped_sheets=catalog.skipped_sheets,
            elapsed_seconds=elapsed(),
            error=message,
        )

    extraction_log.append(
        ExtractionRecord.from_extraction(extraction, carrier, _column_headers(catalog, extraction))
    )
    logger.info(
        "file=%s carrier=%s sheet=%s column=%s baseline=%s method=%s confidence=%.2f",
        name,
        (carrier or CarrierType.OTHER).value,
        extraction.sheet_name,
        extraction.column_name,
        format_currency(extraction.extracted_amount),
        extraction.method.value,
        extraction.confidence,
    )
    return FileStat(
        file_name=name,
        status=FileStatus.SUCCESS,
        sheets=len(catalog.sheets),
        skipped_sheets=catalog.skipped_sheets,
        elapsed_seconds=elapsed(),
        baseline_amount=extraction.extracted_amount,
        method=extraction.method.value,
    )


def process_all(config: BaselineConfig) -> ProcessingResult:
    """Process every supported file in ``config.source_directory``.

    Error and extraction logs are flushed once at the end of the run.

    Raises:
        ProcessingError: the source directory is missing or unreadable
    """
    start_time = datetime.now(UTC)
    file_paths = scan_source_files(Path(config.source_directory))

    error_log = ErrorLogBuffer(config.log_directory)
    extraction_log = ExtractionLogBuffer(config.log_directory)

    file_stats: list[FileStat] = []
    counts = {status: 0 for status in FileStatus}
    skipped_sheets = 0
    total_baseline = Decimal("0")

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            stat = process_file(file_path, config, error_log, extraction_log)
            counts[stat.status] += 1
            skipped_sheets += stat.skipped_sheets
            if stat.baseline_amount is not None:
                total_baseline += stat.baseline_amount
            file_stats.append(stat)
            progress.set_postfix(
                success=counts[FileStatus.SUCCESS],
                undetermined=counts[FileStatus.UNDETERMINED],
                failed=counts[FileStatus.FAILED],
            )
            progress.finish_file()

    for buffer in (error_log, extraction_log):
        try:
            path = buffer.flush()
        except OSError as e:
            logger.warning("failed to write %s log: %s", buffer.prefix, e)
            continue
        if path is not None:
            logger.debug("wrote %s log: %s", buffer.prefix, path)

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=counts[FileStatus.SUCCESS],
        undetermined_files=counts[FileStatus.UNDETERMINED],
        failed_files=counts[FileStatus.FAILED],
        skipped_sheets=skipped_sheets,
        total_baseline=total_baseline,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
