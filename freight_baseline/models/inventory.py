from __future__ import annotations

from dataclasses import dataclass

"""Inventory optimization inputs and outputs.

ForecastRow and InventoryParams are supplied by the caller and read-only.
InventoryYearResult rows are pure function outputs, one per ForecastRow.
"""

__all__ = [
    "ForecastRow",
    "InventoryParams",
    "InventoryYearResult",
    "InventoryResult",
    "InventoryKPIs",
]


@dataclass(frozen=True)
class ForecastRow:
    year: int
    annual_units: float


@dataclass(frozen=True)
class InventoryParams:
    """Inventory policy record."""
    service_level: float  # target in-stock probability, strictly (0, 1)
    lead_time_days: float  # average replenishment lead time
    holding_cost_per_unit_per_year: float  # $/unit/year
    demand_cv: float  # coefficient of variation of daily demand (sigma/mean)
    operating_days: float  # operating days per year
    cycle_stock_days: float | None = None  # override, optimize_inventory only


@dataclass(frozen=True)
class InventoryYearResult:
    year: int
    daily_mean_demand: float
    safety_stock_units: float
    cycle_stock_units: float
    avg_inventory_units: float
    annual_holding_cost: float
    lead_time_demand_std: float = 0.0
    service_level: float = 0.0


@dataclass(frozen=True)
class InventoryResult:
    results: tuple[InventoryYearResult, ...]
    total_cost: float
    avg_inventory_units: float
    peak_inventory_units: float


@dataclass(frozen=True)
class InventoryKPIs:
    inventory_turns: float
    days_of_supply: int
    fill_rate_estimate: float  # percentage
    total_investment: int
