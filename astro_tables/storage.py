from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)


def expand_path(path: Union[str, Path], base_dir: Optional[Path] = None) -> Path:
    """Expand ~ and resolve relative paths against base_dir when given."""
    p = Path(path).expanduser()
    if not p.is_absolute() and base_dir is not None:
        p = Path(base_dir).expanduser() / p
    return p


def write_table(table: pd.DataFrame, path: Path) -> Path:
    """Write a table as CSV: dates as YYYY-MM-DD, NA as empty field."""
    path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(path, index=False, date_format="%Y-%m-%d", na_rep="")
    logger.info("Wrote %d rows to %s", len(table), path)
    return path
