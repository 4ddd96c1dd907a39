"""Domain models for the carrier baseline cataloging tool.

This package contains the catalog, extraction, inventory, logging record and
run result models used throughout the application.
"""

from .catalog import (
    ClassificationMethod,
    ColumnClassification,
    ColumnRole,
    ColumnSample,
    FileCatalog,
    HeaderCandidate,
    RawGrid,
    SheetCatalog,
)
from .config_models import BaselineConfig, InventoryConfig
from .error_record import ErrorRecord
from .extraction import BaselineExtraction, CarrierType, ExtractionMethod, MultiSheetBaseline
from .extraction_record import ExtractionRecord
from .inventory import (
    ForecastRow,
    InventoryKPIs,
    InventoryParams,
    InventoryResult,
    InventoryYearResult,
)
from .processing_result import FileStat, FileStatus, ProcessingResult

__all__ = [
    # Catalog models
    "ClassificationMethod",
    "ColumnClassification",
    "ColumnRole",
    "ColumnSample",
    "FileCatalog",
    "HeaderCandidate",
    "RawGrid",
    "SheetCatalog",
    # Extraction models
    "BaselineExtraction",
    "CarrierType",
    "ExtractionMethod",
    "MultiSheetBaseline",
    # Inventory models
    "ForecastRow",
    "InventoryKPIs",
    "InventoryParams",
    "InventoryResult",
    "InventoryYearResult",
    # Configuration models
    "BaselineConfig",
    "InventoryConfig",
    # Records and results
    "ErrorRecord",
    "ExtractionRecord",
    "FileStat",
    "FileStatus",
    "ProcessingResult",
]
