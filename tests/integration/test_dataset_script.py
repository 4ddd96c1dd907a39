from __future__ import annotations

import importlib.util
from decimal import Decimal
from pathlib import Path

import pytest

from freight_baseline.excel.reader import read_grids
from freight_baseline.models.extraction import ExtractionMethod
from freight_baseline.services.baseline_extractor import extract_baseline, infer_carrier_type
from freight_baseline.services.cataloger import catalog_file

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "gen_carrier_dataset.py"


@pytest.fixture(scope="module")
def gen():
    spec = importlib.util.spec_from_file_location("gen_carrier_dataset", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_same_arguments_same_grid(gen):
    assert gen.build_sheet("parcel", 25, 7) == gen.build_sheet("parcel", 25, 7)
    assert gen.build_sheet("parcel", 25, 7) != gen.build_sheet("parcel", 25, 8)


@pytest.mark.parametrize(
    "flavour,file_name,method",
    [
        ("parcel", "ups_synthetic.xlsx", ExtractionMethod.EXACT_NAME_MATCH),
        ("truckload", "acme_tl_synthetic.csv", ExtractionMethod.FUZZY_KEYWORD_MATCH),
        ("ltl", "acme_ltl_synthetic.xlsx", ExtractionMethod.EXACT_NAME_MATCH),
    ],
)
def test_generated_exports_yield_a_baseline(gen, tmp_path: Path, flavour, file_name, method):
    path = tmp_path / file_name
    gen.write_dataset(path, flavour, 40, 3)
    data = path.read_bytes()
    catalog = catalog_file(data, file_name)
    (sheet,) = catalog.sheets
    assert sheet.row_count == 40
    result = extract_baseline(catalog, read_grids(data, file_name), infer_carrier_type(file_name))
    assert result is not None
    assert result.method is method
    assert result.rows_processed == 40
    assert result.extracted_amount > Decimal("0")
