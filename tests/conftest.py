# Shared pytest fixtures
from __future__ import annotations

import io
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

import pandas as pd
import pytest

from freight_baseline.logging.init import reset_logging

Grid = list[list[object]]


@pytest.fixture(autouse=True)
def _fresh_logging() -> Iterator[None]:
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Iterator[Path]:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        # setenv first so a value loaded from .env is rolled back too
        monkeypatch.setenv("FREIGHT_BASELINE_CONFIG", "")
        monkeypatch.delenv("FREIGHT_BASELINE_CONFIG")
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
header_scan_rows: 10
sample_rows: 500
carrier_hints:
  estes: LTL
canonical_columns:
  PARCEL: [Billed Charge]
log_directory: logs
inventory:
  policy:
    service_level: 0.95
    lead_time_days: 7
    holding_cost_per_unit_per_year: 2.0
    demand_cv: 0.3
    operating_days: 365
  forecast:
    - {year: 2025, annual_units: 36500}
    - {year: 2026, annual_units: 40150}
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "baseline.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def workbook_bytes(sheets: dict[str, Grid]) -> bytes:
    """Header-less multi-sheet workbook as bytes."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for sheet_name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return buf.getvalue()


@pytest.fixture()
def make_workbook() -> Callable[[Path, dict[str, Grid]], Path]:
    def _make(path: Path, sheets: dict[str, Grid]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(workbook_bytes(sheets))
        return path
    return _make


@pytest.fixture()
def parcel_grid() -> Grid:
    """Parcel export with a logo row above the header."""
    return [
        ["ACME Logistics", None, None, None],
        ["Tracking Number", "Ship Date", "Dest Zip", "Net Charge"],
        ["1Z001", "01/02/2024", "60601", "$12.50"],
        ["1Z002", "01/03/2024", "75201", "$8.00"],
        ["1Z003", "01/04/2024", "30301", "$101.25"],
    ]


@pytest.fixture()
def truckload_grid() -> Grid:
    return [
        ["Load ID", "Pickup Date", "Miles", "Rate Amount", "Fuel Surcharge"],
        ["TL001", "01/02/2024", 500, "$1,200.00", "$216.00"],
        ["TL002", "01/05/2024", 300, "$800.00", "$144.00"],
    ]


@pytest.fixture()
def to_workbook_bytes() -> Callable[[dict[str, Grid]], bytes]:
    return workbook_bytes
