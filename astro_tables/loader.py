from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from .config import PipelineConfig, Resolution
from .schema import DATE_COL, HOUR_COL, PositionDataError, require_columns

logger = logging.getLogger(__name__)


def read_position_shard(path: Path) -> pd.DataFrame:
    """Read one tab separated position file; empty fields are NA."""
    if not path.exists():
        raise PositionDataError(f"position file not found: {path}")
    try:
        return pd.read_csv(path, sep="\t", na_values=[""], keep_default_na=False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        raise PositionDataError(f"unreadable position file {path}: {exc}") from exc


def normalize_position_dates(table: pd.DataFrame) -> pd.DataFrame:
    """Copy with Date parsed, Year and wday columns set, rows ordered by Date."""
    require_columns(table, [DATE_COL], "position table")
    out = table.copy()
    out[DATE_COL] = pd.to_datetime(out[DATE_COL], format="%Y-%m-%d", errors="coerce")
    if out[DATE_COL].isna().any():
        bad_count = int(out[DATE_COL].isna().sum())
        raise PositionDataError(f"Column 'Date' contains {bad_count} invalid values after parsing")
    out["Year"] = out[DATE_COL].dt.strftime("%Y")
    out["wday"] = out[DATE_COL].dt.strftime("%w")
    # Stable sort keeps the hourly order within each date.
    return out.sort_values(DATE_COL, kind="mergesort").reset_index(drop=True)


def load_position_files(paths: Iterable[Path]) -> pd.DataFrame:
    """Concatenate position shards in the given order."""
    frames: List[pd.DataFrame] = []
    for path in paths:
        frame = read_position_shard(path)
        logger.debug("Read %d rows from %s", len(frame), path)
        frames.append(frame)
    if not frames:
        raise PositionDataError("no position files given")
    return normalize_position_dates(pd.concat(frames, ignore_index=True))


def load_planets_position_table(
    resolution: Resolution = "hourly",
    config: Optional[PipelineConfig] = None,
) -> pd.DataFrame:
    """Load the planets position table with the indicated time resolution."""
    config = config or PipelineConfig()
    table = load_position_files(config.files_for(resolution))
    if resolution == "hourly":
        require_columns(table, [HOUR_COL], "hourly position table")
    logger.info("Loaded %s planets position table: %d rows", resolution, len(table))
    return table
