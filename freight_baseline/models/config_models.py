from __future__ import annotations

from dataclasses import dataclass, field

from .extraction import CarrierType
from .inventory import ForecastRow, InventoryParams

"""Config dataclasses for the baseline cataloging tool.

These are the typed form of ``config/baseline.yml`` after schema validation
by ``freight_baseline.config.loader``.
"""


@dataclass(frozen=True)
class InventoryConfig:
    """Policy plus forecast for an inventory optimization run."""
    params: InventoryParams
    forecast: tuple[ForecastRow, ...]
    unit_cost: float = 10.0  # $/unit, used for the investment KPI


@dataclass(frozen=True)
class BaselineConfig:
    """Root configuration object for a cataloging run."""
    source_directory: str  # Directory scanned for carrier exports
    header_scan_rows: int = 10  # Rows inspected for the header
    sample_rows: int = 500  # Data rows sampled per column for classification
    carrier_hints: dict[str, CarrierType] = field(default_factory=dict)  # file name substring -> carrier
    canonical_columns: dict[CarrierType, tuple[str, ...]] = field(default_factory=dict)  # extra tier-1 names
    inventory: InventoryConfig | None = None
    log_directory: str = "logs"
