from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..excel.reader import ReaderError
from ..logging.init import get_logger, log_summary, setup_logging
from ..models.config_models import BaselineConfig
from ..services.cataloger import catalog_file
from ..services.inventory import InvalidPolicyError, calculate_inventory_kpis, optimize_inventory
from ..services.orchestrator import ProcessingError, process_all, scan_source_files
from ..services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- load ``.env`` then the YAML config (``--config`` > $FREIGHT_BASELINE_CONFIG > default)
- default: catalog every file, extract baselines, print one SUMMARY line
- ``--inspect-data``: print each file's catalog as JSON and exit
- ``--inventory``: run the inventory optimizer from the config and exit
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

CONFIG_ENV_VAR = "FREIGHT_BASELINE_CONFIG"


def _load_env_file(path: Path) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="freight-baseline",
        description="Catalog carrier cost exports and extract baseline spend",
    )
    p.add_argument("--config", type=Path, default=None, help="Path to the YAML config")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print each file's catalog then exit")
    p.add_argument("--inventory", action="store_true", help="Run the inventory optimizer from the config")
    return p.parse_args(argv)


def _config_path(args: argparse.Namespace) -> Path:
    if args.config is not None:
        return args.config
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def _inspect_data(cfg: BaselineConfig) -> int:
    logger = get_logger()
    try:
        files = scan_source_files(Path(cfg.source_directory))
    except ProcessingError as e:
        logger.error(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        logger.info("inspect: no supported files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            catalog = catalog_file(
                f.read_bytes(),
                f.name,
                max_header_rows=cfg.header_scan_rows,
                sample_rows=cfg.sample_rows,
            )
        except (OSError, ReaderError) as e:
            print(f"  read_error: {e}")
            continue
        print(json.dumps(catalog.to_dict(), indent=2, ensure_ascii=False))
    return EXIT_SUCCESS_ALL


def _run_inventory(cfg: BaselineConfig) -> int:
    logger = get_logger()
    if cfg.inventory is None:
        logger.error("inventory: config has no 'inventory' section")
        return EXIT_FATAL
    inv = cfg.inventory
    try:
        result = optimize_inventory(inv.params, inv.forecast)
    except InvalidPolicyError as e:
        logger.error(f"inventory: invalid policy: {e}")
        return EXIT_FATAL
    for row in result.results:
        logger.info(
            f"year={row.year} daily_mean={row.daily_mean_demand:.2f} "
            f"safety_stock={row.safety_stock_units:.2f} cycle_stock={row.cycle_stock_units:.2f} "
            f"avg_inventory={row.avg_inventory_units:.2f} holding_cost={row.annual_holding_cost:.2f}"
        )
    kpis = calculate_inventory_kpis(result, inv.forecast, inv.unit_cost)
    log_summary(
        f"years={len(result.results)} total_cost={result.total_cost:.2f} "
        f"avg_inventory={result.avg_inventory_units:.2f} peak_inventory={result.peak_inventory_units:.2f} "
        f"turns={kpis.inventory_turns} days_of_supply={kpis.days_of_supply} "
        f"fill_rate={kpis.fill_rate_estimate} investment={kpis.total_investment}"
    )
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # Only read sys.argv when no argv is given; [] means "no arguments"
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    config_path = _config_path(args)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inventory:
        return _run_inventory(cfg)

    if args.inspect_data:
        return _inspect_data(cfg)

    logger.info(f"Processing files from: {cfg.source_directory}")
    try:
        result = process_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    summary_line = render_summary_line(result)
    # log_summary adds the SUMMARY label itself
    log_summary(summary_line.removeprefix("SUMMARY "))

    if result.failed_files > 0 or result.undetermined_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
