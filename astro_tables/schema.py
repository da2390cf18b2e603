from __future__ import annotations

from typing import Iterable, Sequence, Tuple

import pandas as pd


class PositionDataError(ValueError):
    """Raised when a position or aspect table is missing required data."""


# Column suffixes of the wide ephemeris tables and derived pair columns.
LONGITUDE_SUFFIX = "LON"
SPEED_SUFFIX = "SP"
ASPECT_SUFFIX = "ASP"
ORB_SUFFIX = "ORB"

BODY_ID_WIDTH = 2

DATE_COL = "Date"
HOUR_COL = "Hour"
HOURLY_ID_COLS: Tuple[str, ...] = (DATE_COL, HOUR_COL)
DAILY_ID_COLS: Tuple[str, ...] = (DATE_COL,)

HOURLY_ASPECT_COLUMNS: Tuple[str, ...] = (DATE_COL, HOUR_COL, "origin", "aspect", "orb")

DAILY_ASPECT_COLUMNS: Tuple[str, ...] = (
    DATE_COL,
    "origin",
    "aspect",
    "meanOrb",
    "minOrb",
    "maxOrb",
    "startHour",
    "endHour",
    "exactHour",
    "effHours",
    "pX",
    "pY",
)

POSITION_COLUMNS: Tuple[str, ...] = (
    DATE_COL,
    "pID",
    "Lon",
    "ZodSignN",
    "ZodSignID",
    "ElementID",
    "QualityID",
    "PolarityID",
    "DecanID",
    "ArabMansionID",
    "SidLon",
    "VedicMansionID",
)

SPEED_COLUMNS: Tuple[str, ...] = (DATE_COL, "pID", "Speed", "SpeedPhaseID")


def require_columns(table: pd.DataFrame, columns: Iterable[str], what: str = "table") -> None:
    """Raise PositionDataError listing every expected column absent from table."""
    missing = [c for c in columns if c not in table.columns]
    if missing:
        raise PositionDataError(f"{what} missing required columns: {', '.join(missing)}")


def time_key_columns(table: pd.DataFrame, candidates: Sequence[str] = HOURLY_ID_COLS) -> list[str]:
    """Time key columns (Date, and Hour when present) found in table."""
    require_columns(table, [DATE_COL], "position table")
    return [c for c in candidates if c in table.columns]
