"""Daily planet positions with categorical derivatives.

Longitude is categorized into zodiac sign, element, quality, polarity, decan,
Arab moon mansion and (over sidereal longitude) Vedic moon mansion. Speed is
categorized into direct, stationary and retrograde phases.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from .definitions import ZOD_SIGN_IDS
from .schema import (
    DATE_COL,
    LONGITUDE_SUFFIX,
    POSITION_COLUMNS,
    SPEED_COLUMNS,
    SPEED_SUFFIX,
    BODY_ID_WIDTH,
    PositionDataError,
    require_columns,
)

logger = logging.getLogger(__name__)

# Average XXI century equinox precession.
SIDEREAL_OFFSET_DEG = -24.0
# Lon == 0 would fall out of the ceiling based sign index.
ZERO_LONGITUDE_SUBSTITUTE = 0.1
# Closes the last bucket above 360 so 360/0 wraparound is included.
LAST_EDGE = 360.99

ZOD_SIGNS: Sequence[str] = tuple(ZOD_SIGN_IDS)
ZOD_SIGN_INDEX: Sequence[str] = tuple(f"Z{i:02d}" for i in range(1, 13))

# https://www.astro.com/astrowiki/en/Zodiac_Sign
SIGN_BY_INDEX = dict(zip(ZOD_SIGN_INDEX, ZOD_SIGNS))
# https://www.astro.com/astrowiki/en/Element
ELEMENT_BY_INDEX = dict(zip(ZOD_SIGN_INDEX, ("FIR", "EAR", "AIR", "WAT") * 3))
# https://www.astro.com/astrowiki/en/Quality
QUALITY_BY_INDEX = dict(zip(ZOD_SIGN_INDEX, ("CAR", "FIX", "MUT") * 4))
# https://en.wikipedia.org/wiki/Polarity_(astrology)
POLARITY_BY_INDEX = dict(zip(ZOD_SIGN_INDEX, ("POS", "NEG") * 6))

# https://www.astro.com/astrowiki/en/Decan
DECAN_EDGES: List[float] = [float(d) for d in range(0, 360, 10)] + [LAST_EDGE]
DECAN_LABELS: List[str] = [f"{n}{sign}" for sign in ZOD_SIGNS for n in (1, 2, 3)]

# https://starsandstones.wordpress.com/mansions-of-the-moon/the-mansions-of-the-moon/
ARAB_MANSION_EDGES: List[float] = [
    0, 12.85, 25.70, 38.56, 51.41, 64.28, 77.28, 90, 102.85, 115.68, 128.56, 141.41, 154.28, 167.13, 180,
    192.85, 205.70, 218.56, 231.41, 244.28, 257.13, 270, 282.85, 295.70, 308.56, 321.41, 334.28, 347.13,
    LAST_EDGE,
]
ARAB_MANSION_LABELS: List[str] = [f"AM{i:02d}" for i in range(1, 29)]

# https://vedicastrology.net.au/blog/vedic-articles/the-lunar-mansions-of-vedic-astrology/
VEDIC_MANSION_EDGES: List[float] = [i * 360.0 / 27 for i in range(27)] + [LAST_EDGE]
VEDIC_MANSION_LABELS: List[str] = [f"VM{i:02d}" for i in range(1, 28)]


def tropical_to_sidereal(lon, offset_deg: float = SIDEREAL_OFFSET_DEG):
    """Shift tropical longitude by the precession offset, wrapped into [0, 360)."""
    return np.mod(lon + offset_deg, 360.0)


def _bucket(values: pd.Series, edges: Sequence[float], labels: Sequence[str]) -> pd.Series:
    # Lower boundary inclusive: [a, b)
    return pd.cut(values, bins=list(edges), labels=list(labels), right=False)


def zodiac_sign_index(lon: pd.Series) -> pd.Series:
    """Z01..Z12 from ceiling(lon / 30); NA outside (0, 360]."""
    by_number = {float(i): label for i, label in enumerate(ZOD_SIGN_INDEX, start=1)}
    return np.ceil(lon / 30.0).map(by_number)


def longitude_derivatives_augment(
    longitudes_long: pd.DataFrame,
    sidereal_offset_deg: float = SIDEREAL_OFFSET_DEG,
) -> pd.DataFrame:
    """Copy of a (Date, pID, Lon) table with sign, element, quality, polarity,
    decan, mansions and sidereal longitude columns."""
    require_columns(longitudes_long, ["Lon"], "longitude table")
    out = longitudes_long.copy()
    out["Lon"] = out["Lon"].astype("float64")
    out.loc[out["Lon"] == 0, "Lon"] = ZERO_LONGITUDE_SUBSTITUTE

    out["ZodSignN"] = zodiac_sign_index(out["Lon"])
    out["ZodSignID"] = out["ZodSignN"].map(SIGN_BY_INDEX)
    out["ElementID"] = out["ZodSignN"].map(ELEMENT_BY_INDEX)
    out["QualityID"] = out["ZodSignN"].map(QUALITY_BY_INDEX)
    out["PolarityID"] = out["ZodSignN"].map(POLARITY_BY_INDEX)

    out["DecanID"] = _bucket(out["Lon"], DECAN_EDGES, DECAN_LABELS)
    out["ArabMansionID"] = _bucket(out["Lon"], ARAB_MANSION_EDGES, ARAB_MANSION_LABELS)

    out["SidLon"] = tropical_to_sidereal(out["Lon"], sidereal_offset_deg)
    out["VedicMansionID"] = _bucket(out["SidLon"], VEDIC_MANSION_EDGES, VEDIC_MANSION_LABELS)
    return out


def speed_derivatives_augment(speeds_long: pd.DataFrame, stationary_ratio: float = 0.2) -> pd.DataFrame:
    """Copy of a (Date, pID, Speed) table with the SpeedPhaseID column.

    A body is stationary when its speed is between zero and a fraction of its
    mean speed: https://www.astro.com/astrowiki/en/Stationary_Phase
    """
    require_columns(speeds_long, ["pID", "Speed"], "speed table")
    out = speeds_long.copy()
    stationary = (out.groupby("pID")["Speed"].transform("mean") * stationary_ratio).round(2)
    speed = out["Speed"]
    out["SpeedPhaseID"] = np.select(
        [(speed < 0).to_numpy(), (speed <= stationary).to_numpy()],
        ["RET", "STA"],
        default="DIR",
    )
    return out


def _body_suffix_columns(positions: pd.DataFrame, suffix: str) -> List[str]:
    width = BODY_ID_WIDTH + len(suffix)
    return [c for c in positions.columns if len(c) == width and c.endswith(suffix)]


def _melt_body_columns(positions: pd.DataFrame, suffix: str, value_name: str) -> pd.DataFrame:
    require_columns(positions, [DATE_COL], "position table")
    cols = _body_suffix_columns(positions, suffix)
    if not cols:
        raise PositionDataError(f"position table has no body '{suffix}' columns")
    long = positions.melt(
        id_vars=[DATE_COL], value_vars=cols, var_name="pID", value_name=value_name
    )
    long["pID"] = long["pID"].str[:BODY_ID_WIDTH]
    return long.loc[:, [DATE_COL, "pID", value_name]]


def daily_positions_long(
    positions: pd.DataFrame,
    sidereal_offset_deg: float = SIDEREAL_OFFSET_DEG,
) -> pd.DataFrame:
    """Daily (Date, pID, Lon) rows with categorical derivatives."""
    long = _melt_body_columns(positions, LONGITUDE_SUFFIX, "Lon")
    return longitude_derivatives_augment(long, sidereal_offset_deg).loc[:, list(POSITION_COLUMNS)]


def daily_speeds_long(
    positions: pd.DataFrame,
    stationary_ratio: float = 0.2,
    constant_speed_bodies: Iterable[str] = ("NN", "SN"),
) -> pd.DataFrame:
    """Daily (Date, pID, Speed, SpeedPhaseID) rows."""
    long = _melt_body_columns(positions, SPEED_SUFFIX, "Speed")
    # Moon nodes are imaginary points so their speed is assumed constant.
    long.loc[long["pID"].isin(list(constant_speed_bodies)), "Speed"] = 1
    speeds = speed_derivatives_augment(long, stationary_ratio)
    return speeds.loc[:, list(SPEED_COLUMNS)]


def daily_planets_position_table_prepare(
    positions: pd.DataFrame,
    speeds: Optional[pd.DataFrame] = None,
    sidereal_offset_deg: float = SIDEREAL_OFFSET_DEG,
    stationary_ratio: float = 0.2,
    constant_speed_bodies: Iterable[str] = ("NN", "SN"),
) -> pd.DataFrame:
    """Daily positions with categorical derivatives merged with speed phases."""
    longitudes = daily_positions_long(positions, sidereal_offset_deg)
    if speeds is None:
        speeds = daily_speeds_long(positions, stationary_ratio, constant_speed_bodies)
    table = longitudes.merge(speeds, on=[DATE_COL, "pID"], how="inner")
    table = table.sort_values([DATE_COL, "pID"], kind="mergesort").reset_index(drop=True)
    logger.info("Prepared daily planets position table: %d rows", len(table))
    return table
