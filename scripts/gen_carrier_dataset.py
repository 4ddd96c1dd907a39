#!/usr/bin/env python3
"""Generate reproducible synthetic carrier cost exports.

Each file mimics a carrier invoice export:
- Row 1-2: logo / report title rows
- Row 3: blank spacer
- Row 4: header row
- Row 5+: shipment rows

Flavours: parcel (cost in "Net Charge"), truckload ("Rate Amount" next to a
"Fuel Surcharge") and ltl ("Net Freight"). The same arguments always produce
the same file contents.
"""
from __future__ import annotations

import argparse
import csv
import sys
from collections.abc import Callable
from datetime import date, timedelta
from pathlib import Path
from typing import Any

import pandas as pd

from freight_baseline.services.seeded_rng import make_rng, seed_from, shuffled

CITIES = ["Chicago", "Dallas", "Atlanta", "Memphis", "Columbus", "Reno", "Newark", "Denver"]
SERVICES = ["Ground", "2Day", "Express Saver", "Priority Overnight"]
SHIPPERS = ["Northwind Traders", "Contoso Ltd", "Fabrikam Inc", "Tailspin Toys"]

FLAVOURS = ("parcel", "truckload", "ltl")


def _pick(rng: Callable[[], float], items: list[str]) -> str:
    return items[int(rng() * len(items))]


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _ship_date(rng: Callable[[], float]) -> str:
    return (date(2024, 1, 1) + timedelta(days=int(rng() * 365))).strftime("%m/%d/%Y")


def _parcel_rows(rng: Callable[[], float], rows: int) -> tuple[list[str], list[list[Any]]]:
    header = ["Tracking Number", "Ship Date", "Service", "Dest Zip", "Weight (lbs)", "Net Charge"]
    data = [
        [
            f"1Z{int(rng() * 1e9):09d}A{i:04d}",
            _ship_date(rng),
            _pick(rng, SERVICES),
            f"{10000 + int(rng() * 89999):05d}",
            round(1 + rng() * 69, 1),
            _money(8 + rng() * 120),
        ]
        for i in range(rows)
    ]
    return header, data


def _truckload_rows(rng: Callable[[], float], rows: int) -> tuple[list[str], list[list[Any]]]:
    header = ["Load ID", "Pickup Date", "Origin City", "Destination City", "Miles", "Rate Amount", "Fuel Surcharge"]
    data = []
    for i in range(rows):
        origin, destination = shuffled(CITIES, rng)[:2]
        miles = 150 + int(rng() * 1800)
        rate = miles * (2.1 + rng() * 1.2)
        data.append(
            [f"TL{i + 1:06d}", _ship_date(rng), origin, destination, miles, _money(rate), _money(rate * 0.18)]
        )
    return header, data


def _ltl_rows(rng: Callable[[], float], rows: int) -> tuple[list[str], list[list[Any]]]:
    header = ["PRO Number", "Ship Date", "Shipper", "Consignee City", "Weight", "Net Freight"]
    data = [
        [
            f"PRO-{700000 + i}",
            _ship_date(rng),
            _pick(rng, SHIPPERS),
            _pick(rng, CITIES),
            200 + int(rng() * 4800),
            round(95 + rng() * 900, 2),
        ]
        for i in range(rows)
    ]
    return header, data


_BUILDERS = {"parcel": _parcel_rows, "truckload": _truckload_rows, "ltl": _ltl_rows}


def build_sheet(flavour: str, rows: int, seed: int) -> list[list[Any]]:
    """Full sheet grid (title rows, spacer, header, data) for one flavour."""
    rng = make_rng(seed_from({"flavour": flavour, "rows": rows, "seed": seed}))
    header, data = _BUILDERS[flavour](rng, rows)
    width = len(header)
    title_rows = [
        ["ACME Logistics"] + [None] * (width - 1),
        [f"{flavour.upper()} Invoice Report"] + [None] * (width - 1),
        [None] * width,
    ]
    return title_rows + [header] + data


def write_dataset(output_path: Path, flavour: str, rows: int, seed: int) -> None:
    grid = build_sheet(flavour, rows, seed)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.suffix.lower() == ".csv":
        with output_path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            for row in grid:
                writer.writerow(["" if v is None else v for v in row])
    else:
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            pd.DataFrame(grid).to_excel(writer, sheet_name="Invoice", header=False, index=False)
    print(f"Created {flavour} export: {output_path} ({rows} rows)")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate synthetic carrier cost exports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/ups_2024.xlsx --flavour parcel --rows 500
  %(prog)s data/tl_lanes.csv --flavour truckload --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output file (.xlsx or .csv)")
    parser.add_argument("--flavour", choices=FLAVOURS, default="parcel")
    parser.add_argument("--rows", type=int, default=200)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.output.suffix.lower() not in (".xlsx", ".csv"):
        print("Error: output must end with .xlsx or .csv", file=sys.stderr)
        return 1

    write_dataset(args.output, args.flavour, args.rows, args.seed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
