from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import BaselineConfig, InventoryConfig
from ..models.extraction import CarrierType
from ..models.inventory import ForecastRow, InventoryParams

"""Config loader.

Responsibilities:
- Load the YAML config (``config/baseline.yml`` by default)
- Validate it against the bundled JSON schema
- Apply defaults and convert carrier names to CarrierType
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/baseline.yml")
SCHEMA_PATH = Path(__file__).parent / "config_schema.json"

DEFAULT_OPERATING_DAYS = 365


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: the schema file is missing or invalid, or the data fails
            validation (missing required keys, wrong types, unknown keys)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _carrier(value: str, where: str) -> CarrierType:
    carrier = CarrierType.from_hint(value)
    if carrier is None:
        raise ConfigError(f"{where}: unknown carrier type {value!r}")
    return carrier


def _inventory(raw: dict[str, Any] | None) -> InventoryConfig | None:
    if raw is None:
        return None
    policy = raw["policy"]
    params = InventoryParams(
        service_level=policy["service_level"],
        lead_time_days=policy["lead_time_days"],
        holding_cost_per_unit_per_year=policy["holding_cost_per_unit_per_year"],
        demand_cv=policy["demand_cv"],
        operating_days=policy.get("operating_days", DEFAULT_OPERATING_DAYS),
        cycle_stock_days=policy.get("cycle_stock_days"),
    )
    forecast = tuple(ForecastRow(year=f["year"], annual_units=f["annual_units"]) for f in raw["forecast"])
    return InventoryConfig(params=params, forecast=forecast, unit_cost=policy.get("unit_cost", 10.0))


def load_config(path: Path | str = DEFAULT_CONFIG_PATH) -> BaselineConfig:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    hints = {
        str(needle).lower(): _carrier(value, f"carrier_hints.{needle}")
        for needle, value in (data.get("carrier_hints") or {}).items()
    }
    canonical = {
        _carrier(key, "canonical_columns"): tuple(names)
        for key, names in (data.get("canonical_columns") or {}).items()
    }
    return BaselineConfig(
        source_directory=data["source_directory"],
        header_scan_rows=data.get("header_scan_rows", 10),
        sample_rows=data.get("sample_rows", 500),
        carrier_hints=hints,
        canonical_columns=canonical,
        inventory=_inventory(data.get("inventory")),
        log_directory=data.get("log_directory", "logs"),
    )
