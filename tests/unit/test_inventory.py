from __future__ import annotations

import math
from dataclasses import replace

import pytest

from freight_baseline.models.inventory import ForecastRow, InventoryParams
from freight_baseline.services.inventory import (
    InvalidPolicyError,
    calculate_inventory_kpis,
    inventory_by_year,
    inverse_standard_normal_cdf,
    optimize_inventory,
    validate_params,
)

PARAMS = InventoryParams(
    service_level=0.95,
    lead_time_days=7,
    holding_cost_per_unit_per_year=2.0,
    demand_cv=0.3,
    operating_days=365,
)


def test_inverse_normal_center_and_known_quantiles():
    assert inverse_standard_normal_cdf(0.5) == pytest.approx(0.0, abs=1e-9)
    assert inverse_standard_normal_cdf(0.95) == pytest.approx(1.644854, abs=1e-6)
    assert inverse_standard_normal_cdf(0.975) == pytest.approx(1.959964, abs=1e-6)
    # tail regions
    assert inverse_standard_normal_cdf(0.01) == pytest.approx(-2.326348, abs=1e-6)
    assert inverse_standard_normal_cdf(0.999) == pytest.approx(3.090232, abs=1e-6)


def test_inverse_normal_is_symmetric_and_monotonic():
    ps = [i / 1000 for i in range(1, 1000)]
    zs = [inverse_standard_normal_cdf(p) for p in ps]
    assert all(a < b for a, b in zip(zs, zs[1:]))
    for p in (0.01, 0.2, 0.4):
        assert inverse_standard_normal_cdf(p) == pytest.approx(-inverse_standard_normal_cdf(1 - p), abs=1e-8)


@pytest.mark.parametrize("p", [0.0, 1.0, -0.5, 1.5])
def test_inverse_normal_outside_open_interval_is_nan(p):
    assert math.isnan(inverse_standard_normal_cdf(p))


def test_reference_scenario():
    (row,) = inventory_by_year(PARAMS, [ForecastRow(year=2025, annual_units=36500)])
    assert row.year == 2025
    assert row.daily_mean_demand == pytest.approx(100.0)
    assert row.lead_time_demand_std == pytest.approx(30 * math.sqrt(7))
    assert row.safety_stock_units == pytest.approx(130.556, abs=0.01)
    assert row.cycle_stock_units == pytest.approx(350.0)
    assert row.avg_inventory_units == pytest.approx(row.safety_stock_units + 350.0)
    assert row.annual_holding_cost == pytest.approx(961.11, abs=0.02)


def test_zero_lead_time_gives_zero_stock():
    (row,) = inventory_by_year(replace(PARAMS, lead_time_days=0), [ForecastRow(2025, 36500)])
    assert row.safety_stock_units == 0
    assert row.cycle_stock_units == 0
    assert row.annual_holding_cost == 0


def test_service_level_below_half_floors_safety_stock_at_zero():
    (row,) = inventory_by_year(replace(PARAMS, service_level=0.3), [ForecastRow(2025, 36500)])
    assert row.safety_stock_units == 0.0
    assert row.cycle_stock_units == pytest.approx(350.0)


def test_years_are_independent_and_not_merged():
    forecast = [ForecastRow(2025, 36500), ForecastRow(2025, 73000), ForecastRow(2026, 0)]
    rows = inventory_by_year(PARAMS, forecast)
    assert [r.year for r in rows] == [2025, 2025, 2026]
    assert rows[1].cycle_stock_units == pytest.approx(2 * rows[0].cycle_stock_units)
    assert rows[2].avg_inventory_units == 0


@pytest.mark.parametrize(
    "changes,field",
    [
        ({"service_level": 1.0}, "service_level"),
        ({"service_level": 0.0}, "service_level"),
        ({"operating_days": 0}, "operating_days"),
        ({"lead_time_days": -1}, "lead_time_days"),
        ({"demand_cv": float("nan")}, "demand_cv"),
        ({"holding_cost_per_unit_per_year": -0.5}, "holding_cost_per_unit_per_year"),
        ({"cycle_stock_days": 0}, "cycle_stock_days"),
    ],
)
def test_invalid_policy_names_the_field(changes, field):
    with pytest.raises(InvalidPolicyError) as exc:
        validate_params(replace(PARAMS, **changes))
    assert exc.value.field == field


def test_negative_forecast_rejected():
    with pytest.raises(InvalidPolicyError) as exc:
        inventory_by_year(PARAMS, [ForecastRow(2025, 100), ForecastRow(2026, -1)])
    assert exc.value.field == "forecast[1].annual_units"


def test_inventory_by_year_ignores_cycle_stock_days():
    (row,) = inventory_by_year(replace(PARAMS, cycle_stock_days=10), [ForecastRow(2025, 36500)])
    assert row.cycle_stock_units == pytest.approx(350.0)


def test_optimize_inventory_aggregates():
    forecast = [ForecastRow(2025, 36500), ForecastRow(2026, 73000)]
    result = optimize_inventory(replace(PARAMS, cycle_stock_days=10), forecast)
    assert [r.cycle_stock_units for r in result.results] == pytest.approx([1000.0, 2000.0])
    assert result.total_cost == pytest.approx(sum(r.annual_holding_cost for r in result.results))
    assert result.peak_inventory_units == pytest.approx(result.results[1].avg_inventory_units)
    assert result.avg_inventory_units == pytest.approx(
        (result.results[0].avg_inventory_units + result.results[1].avg_inventory_units) / 2
    )


def test_optimize_inventory_empty_forecast():
    result = optimize_inventory(PARAMS, [])
    assert result.results == ()
    assert result.total_cost == 0
    assert result.avg_inventory_units == 0
    assert result.peak_inventory_units == 0


def test_inventory_kpis():
    forecast = [ForecastRow(2025, 36500)]
    kpis = calculate_inventory_kpis(optimize_inventory(PARAMS, forecast), forecast)
    assert kpis.inventory_turns == pytest.approx(75.95, abs=0.01)
    assert kpis.days_of_supply == 5
    assert kpis.fill_rate_estimate == pytest.approx(98.3)
    assert kpis.total_investment == 4806


def test_inventory_kpis_empty_result():
    kpis = calculate_inventory_kpis(optimize_inventory(PARAMS, []), [])
    assert kpis.inventory_turns == 0
    assert kpis.days_of_supply == 0
    assert kpis.total_investment == 0
