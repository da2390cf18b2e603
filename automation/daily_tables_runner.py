from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd
from pydantic import ValidationError

import settings
from astro_tables.aspect_sets import ALL_PLANETS_AND_ASTEROIDS, ASPECT_SETS, BODY_SETS, get_aspect_set
from astro_tables.config import PipelineConfig, load_config_from_yaml
from astro_tables.daily_aggregate import AggregationRules, daily_aspects_table_prepare
from astro_tables.definitions import expand_aspect_names
from astro_tables.loader import load_planets_position_table
from astro_tables.positions import daily_planets_position_table_prepare, daily_speeds_long
from astro_tables.schema import PositionDataError
from astro_tables.storage import expand_path, write_table

logger = logging.getLogger("daily_tables_runner")

_LEVEL_MAP = {"debug": logging.DEBUG, "info": logging.INFO, "warn": logging.WARN, "warning": logging.WARN}

TABLE_NAMES: Tuple[str, ...] = ("aspects", "positions", "speed")


@dataclass(frozen=True)
class ExportResult:
    table: str
    path: Path
    rows: int


def configure_logging(level_name: str = settings.LOG_LEVEL) -> None:
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        root.addHandler(handler)
    root.setLevel(_LEVEL_MAP.get(level_name.lower(), logging.INFO))


def resolve_body_ids(value: str) -> List[str]:
    """Body ids from a set name ('modern', 'all') or a comma separated list."""
    if value in BODY_SETS:
        return list(BODY_SETS[value])
    return [b.strip().upper() for b in value.split(",") if b.strip()]


def output_file_name(table: str, config: PipelineConfig) -> str:
    if table == "aspects":
        return f"aspects_{config.aspect_set}_daily_long.csv"
    if table == "positions":
        return "daily_planets_positions_long.csv"
    return "daily_planets_speed_long.csv"


def prepare_tables(
    config: PipelineConfig,
    tables: Sequence[str] = TABLE_NAMES,
    with_names: bool = False,
) -> Dict[str, pd.DataFrame]:
    """Compute every requested table; nothing is written here."""
    out: Dict[str, pd.DataFrame] = {}
    body_ids = list(config.body_ids or ALL_PLANETS_AND_ASTEROIDS)

    if "aspects" in tables:
        aspect_set = get_aspect_set(config.aspect_set)
        print(f"Preparing daily aspects table: {len(body_ids)} bodies, {aspect_set.name} aspects set...")
        hourly = load_planets_position_table("hourly", config)
        daily_aspects = daily_aspects_table_prepare(
            hourly, body_ids, aspect_set, AggregationRules.from_config(config)
        )
        out["aspects"] = expand_aspect_names(daily_aspects) if with_names else daily_aspects

    if "positions" in tables or "speed" in tables:
        daily = load_planets_position_table("daily", config)
        speeds = daily_speeds_long(
            daily,
            stationary_ratio=config.stationary_speed_ratio,
            constant_speed_bodies=config.constant_speed_bodies,
        )
        if "speed" in tables:
            print("Preparing daily planets speed table...")
            out["speed"] = speeds
        if "positions" in tables:
            print("Preparing daily planets position table...")
            out["positions"] = daily_planets_position_table_prepare(
                daily,
                speeds=speeds,
                sidereal_offset_deg=config.sidereal_offset_deg,
            )
    return out


def export_tables(tables: Dict[str, pd.DataFrame], config: PipelineConfig) -> List[ExportResult]:
    results: List[ExportResult] = []
    for name, table in tables.items():
        path = expand_path(output_file_name(name, config), config.output_dir)
        write_table(table, path)
        results.append(ExportResult(table=name, path=path, rows=len(table)))
    return results


def build_config(args: argparse.Namespace) -> PipelineConfig:
    config = load_config_from_yaml(args.config) if args.config else PipelineConfig()
    updates: Dict[str, object] = {}
    if args.data_dir is not None:
        updates["data_dir"] = args.data_dir
        if args.output_dir is None and not args.config:
            updates["output_dir"] = args.data_dir
    if args.output_dir is not None:
        updates["output_dir"] = args.output_dir
    if args.aspect_set is not None:
        updates["aspect_set"] = args.aspect_set
    if args.bodies is not None:
        updates["body_ids"] = resolve_body_ids(args.bodies)
    if updates:
        config = PipelineConfig.model_validate({**config.model_dump(), **updates})
    # Unknown aspect set names fail before any table is loaded.
    get_aspect_set(config.aspect_set)
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """
    Prepare and export the daily aspects, positions and speed tables.
    Sample command:
    python -m automation.daily_tables_runner --data-dir ./data --aspect-set pablo_cerda --bodies modern
    """
    parser = argparse.ArgumentParser(description="Prepare daily planet aspects / positions CSV tables.")
    parser.add_argument("--config", type=Path, default=None, help="Optional YAML config file")
    parser.add_argument("--data-dir", dest="data_dir", type=Path, default=None, help="Directory of the position TSV files")
    parser.add_argument("--output", dest="output_dir", type=Path, default=None, help="Directory to write CSV tables")
    parser.add_argument("--aspect-set", dest="aspect_set", choices=sorted(ASPECT_SETS), default=None)
    parser.add_argument(
        "--bodies",
        default=None,
        help="Body set name (modern, all) or comma separated body ids, e.g. MO,SU,ME",
    )
    parser.add_argument(
        "--tables",
        nargs="+",
        choices=TABLE_NAMES,
        default=list(TABLE_NAMES),
        help="Tables to prepare (default: all)",
    )
    parser.add_argument("--with-names", action="store_true", help="Add readable body / aspect names to aspects table")
    parser.add_argument("--log-level", dest="log_level", default=settings.LOG_LEVEL)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = build_config(args)
    except (ValidationError, KeyError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    try:
        tables = prepare_tables(config, tables=args.tables, with_names=args.with_names)
    except PositionDataError as exc:
        logger.error("Position data error: %s", exc)
        return 2

    results = export_tables(tables, config)
    for r in results:
        print(f"Exported {r.table}: {r.rows} row(s) -> {r.path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
