from __future__ import annotations

import math
from collections.abc import Sequence

from ..models.inventory import (
    ForecastRow,
    InventoryKPIs,
    InventoryParams,
    InventoryResult,
    InventoryYearResult,
)

"""Statistical inventory optimization (closed form, no solver).

Per forecast year:

    z           = inverse_standard_normal_cdf(service_level)
    daily_mean  = annual_units / operating_days
    sigma_daily = demand_cv * daily_mean
    sigma_lead  = sigma_daily * sqrt(lead_time_days)
    safety      = max(0, z * sigma_lead)
    cycle       = daily_mean * (lead_time_days / 2)
    avg_inv     = safety + cycle
    holding     = avg_inv * holding_cost_per_unit_per_year

Years are independent of each other. Parameters are validated up front;
invalid values raise InvalidPolicyError naming the offending field instead of
being replaced by defaults.
"""

__all__ = [
    "InvalidPolicyError",
    "inverse_standard_normal_cdf",
    "validate_params",
    "inventory_by_year",
    "optimize_inventory",
    "calculate_inventory_kpis",
]

# Acklam's rational approximation, relative error < 1.15e-9
_A = (
    -3.969683028665376e01,
    2.209460984245205e02,
    -2.759285104469687e02,
    1.383577518672690e02,
    -3.066479806614716e01,
    2.506628277459239e00,
)
_B = (
    -5.447609879822406e01,
    1.615858368580409e02,
    -1.556989798598866e02,
    6.680131188771972e01,
    -1.328068155288572e01,
)
_C = (
    -7.784894002430293e-03,
    -3.223964580411365e-01,
    -2.400758277161838e00,
    -2.549732539343734e00,
    4.374664141464968e00,
    2.938163982698783e00,
)
_D = (
    7.784695709041462e-03,
    3.224671290700398e-01,
    2.445134137142996e00,
    3.754408661907416e00,
)
_P_LOW = 0.02425
_P_HIGH = 1 - _P_LOW


class InvalidPolicyError(ValueError):
    """Raised for an invalid inventory policy or forecast value."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def inverse_standard_normal_cdf(p: float) -> float:
    """Inverse of the standard normal CDF; NaN outside the open interval (0, 1)."""
    if not (0.0 < p < 1.0):
        return math.nan
    a, b, c, d = _A, _B, _C, _D
    if p < _P_LOW:
        q = math.sqrt(-2 * math.log(p))
        return (((((c[0] * q + c[1]) * q + c[2]) * q + c[3]) * q + c[4]) * q + c[5]) / (
            (((d[0] * q + d[1]) * q + d[2]) * q + d[3]) * q + 1
        )
    if p > _P_HIGH:
        q = math.sqrt(-2 * math.log(1 - p))
        return -(((((c[0] * q + c[1]) * q + c[2]) * q + c[3]) * q + c[4]) * q + c[5]) / (
            (((d[0] * q + d[1]) * q + d[2]) * q + d[3]) * q + 1
        )
    q = p - 0.5
    r = q * q
    return (((((a[0] * r + a[1]) * r + a[2]) * r + a[3]) * r + a[4]) * r + a[5]) * q / (
        ((((b[0] * r + b[1]) * r + b[2]) * r + b[3]) * r + b[4]) * r + 1
    )


def _require_finite(field: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidPolicyError(field, f"must be a finite number, got {value!r}")


def validate_params(params: InventoryParams) -> None:
    """Check a policy record; raises InvalidPolicyError on the first bad field."""
    for name in (
        "service_level",
        "lead_time_days",
        "holding_cost_per_unit_per_year",
        "demand_cv",
        "operating_days",
    ):
        _require_finite(name, getattr(params, name))
    if not 0.0 < params.service_level < 1.0:
        raise InvalidPolicyError("service_level", f"must lie strictly within (0, 1), got {params.service_level}")
    if params.operating_days <= 0:
        raise InvalidPolicyError("operating_days", f"must be > 0, got {params.operating_days}")
    if params.lead_time_days < 0:
        raise InvalidPolicyError("lead_time_days", f"must be >= 0, got {params.lead_time_days}")
    if params.demand_cv < 0:
        raise InvalidPolicyError("demand_cv", f"must be >= 0, got {params.demand_cv}")
    if params.holding_cost_per_unit_per_year < 0:
        raise InvalidPolicyError(
            "holding_cost_per_unit_per_year", f"must be >= 0, got {params.holding_cost_per_unit_per_year}"
        )
    if params.cycle_stock_days is not None:
        _require_finite("cycle_stock_days", params.cycle_stock_days)
        if params.cycle_stock_days <= 0:
            raise InvalidPolicyError("cycle_stock_days", f"must be > 0, got {params.cycle_stock_days}")


def _validate_forecast(forecast: Sequence[ForecastRow]) -> None:
    for i, row in enumerate(forecast):
        _require_finite(f"forecast[{i}].annual_units", row.annual_units)
        if row.annual_units < 0:
            raise InvalidPolicyError(f"forecast[{i}].annual_units", f"must be >= 0, got {row.annual_units}")


def _year_result(
    params: InventoryParams, z: float, row: ForecastRow, cycle_stock_days: float | None
) -> InventoryYearResult:
    daily_mean = row.annual_units / params.operating_days
    sigma_daily = params.demand_cv * daily_mean
    sigma_lead = sigma_daily * math.sqrt(params.lead_time_days)
    safety_stock = max(0.0, z * sigma_lead)
    if cycle_stock_days is not None:
        cycle_stock = daily_mean * cycle_stock_days
    else:
        cycle_stock = daily_mean * (params.lead_time_days / 2)
    avg_inventory = safety_stock + cycle_stock
    return InventoryYearResult(
        year=row.year,
        daily_mean_demand=daily_mean,
        safety_stock_units=safety_stock,
        cycle_stock_units=cycle_stock,
        avg_inventory_units=avg_inventory,
        annual_holding_cost=avg_inventory * params.holding_cost_per_unit_per_year,
        lead_time_demand_std=sigma_lead,
        service_level=params.service_level,
    )


def inventory_by_year(params: InventoryParams, forecast: Sequence[ForecastRow]) -> list[InventoryYearResult]:
    """Safety stock, cycle stock and holding cost per forecast year.

    Duplicate years are not merged; each row maps to its own result.

    Raises:
        InvalidPolicyError: a policy field or forecast value is invalid
    """
    validate_params(params)
    _validate_forecast(forecast)
    z = inverse_standard_normal_cdf(params.service_level)
    return [_year_result(params, z, row, None) for row in forecast]


def optimize_inventory(params: InventoryParams, forecast: Sequence[ForecastRow]) -> InventoryResult:
    """Per-year results plus total holding cost, average and peak inventory.

    Unlike inventory_by_year, ``cycle_stock_days`` overrides the cycle stock
    cover when set.
    """
    validate_params(params)
    _validate_forecast(forecast)
    z = inverse_standard_normal_cdf(params.service_level)
    results = tuple(_year_result(params, z, row, params.cycle_stock_days) for row in forecast)
    if not results:
        return InventoryResult(results=(), total_cost=0.0, avg_inventory_units=0.0, peak_inventory_units=0.0)
    return InventoryResult(
        results=results,
        total_cost=sum(r.annual_holding_cost for r in results),
        avg_inventory_units=sum(r.avg_inventory_units for r in results) / len(results),
        peak_inventory_units=max(r.avg_inventory_units for r in results),
    )


def calculate_inventory_kpis(
    result: InventoryResult, forecast: Sequence[ForecastRow], unit_cost: float = 10.0
) -> InventoryKPIs:
    """Inventory turns, days of supply, fill-rate estimate and investment."""
    if forecast:
        avg_annual_demand = sum(f.annual_units for f in forecast) / len(forecast)
    else:
        avg_annual_demand = 0.0
    turns = avg_annual_demand / result.avg_inventory_units if result.avg_inventory_units > 0 else 0.0
    days_of_supply = 365 / turns if turns > 0 else 0.0
    service_level = result.results[0].service_level if result.results else 0.95
    fill_rate = min(0.999, 0.85 + service_level * 0.14)
    return InventoryKPIs(
        inventory_turns=round(turns, 2),
        days_of_supply=round(days_of_supply),
        fill_rate_estimate=round(fill_rate * 100, 2),
        total_investment=round(result.avg_inventory_units * unit_cost),
    )
