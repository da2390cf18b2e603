"""daily_aggregate
================================================================================
Hourly to daily aggregation of planet pair aspects.

Purpose
-------
Collapses the hourly aspects long table (one row per hour, pair and aspect in
effect) into one row per (Date, origin, aspect), discarding aspects that are
not in effect long enough during the day and locating the hour when the
aspect is exact.

Public API
----------
hourly_aspects_date_aggregate(hourly_long, rules) -> pd.DataFrame
    Daily aspects long table with meanOrb, minOrb, maxOrb, startHour,
    endHour, exactHour, effHours, pX, pY columns.
daily_aspects_table_prepare(positions, body_ids, aspect_set, rules) -> pd.DataFrame
    Full chain from an hourly position table: wide aspects table, long
    transform and daily aggregation.

Stages
------
1. Effect hours : number of hourly rows per (Date, origin, aspect).
2. Noise filter : keys with effHours <= 8 are dropped, <= 3 for Moon pairs.
                  Aspects should be in effect at least 1/3 of a day to be
                  measurable; the Moon's max daily duration within orb is
                  about 9 hours so its third is 3 hours.
3. Exact hour   : latest hour attaining the key's minimum orb, when that
                  minimum is within 1.0 deg (Moon) or 0.1 deg (others).
                  Keys never near exact get <NA>.
4. Aggregation  : one row per key; meanOrb rounded to 2 decimals.
5. Bodies       : pX (fast, first 2 chars of origin) is the activating body
                  approaching pY (slow, last 2 chars).

Notes
-----
exactHour is a nullable Int64 column; a missing exact hour is <NA> and never
a float sentinel. Results depend only on the input rows, not on their order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .aspect_table import aspects_wide_to_long, planet_aspects_table_prepare
from .config import AspectSet, PipelineConfig
from .schema import (
    DAILY_ASPECT_COLUMNS,
    HOURLY_ASPECT_COLUMNS,
    HOURLY_ID_COLS,
    require_columns,
)

logger = logging.getLogger(__name__)

KEY_COLS = ["Date", "origin", "aspect"]


@dataclass(frozen=True)
class AggregationRules:
    moon_id: str = "MO"
    min_effect_hours: int = 8          # must be exceeded
    moon_min_effect_hours: int = 3     # must be exceeded by Moon pairs
    exact_orb_tolerance: float = 0.1
    moon_exact_orb_tolerance: float = 1.0

    @classmethod
    def from_config(cls, config: PipelineConfig) -> "AggregationRules":
        return cls(
            moon_id=config.moon_id,
            min_effect_hours=config.min_effect_hours,
            moon_min_effect_hours=config.moon_min_effect_hours,
            exact_orb_tolerance=config.exact_orb_tolerance,
            moon_exact_orb_tolerance=config.moon_exact_orb_tolerance,
        )


def is_moon_pair(origin: pd.Series, moon_id: str = "MO") -> pd.Series:
    """True where either body of the pair id is the Moon."""
    return (origin.str[:2] == moon_id) | (origin.str[2:4] == moon_id)


def effect_hours_tally(hourly_long: pd.DataFrame) -> pd.DataFrame:
    """Copy with effHours: hourly rows per (Date, origin, aspect)."""
    out = hourly_long.copy()
    out["effHours"] = out.groupby(KEY_COLS, observed=True)["Hour"].transform("size")
    return out


def noise_filter(hourly_long: pd.DataFrame, rules: AggregationRules) -> pd.DataFrame:
    """Drop keys without enough daily effect hours."""
    moon = is_moon_pair(hourly_long["origin"], rules.moon_id)
    min_hours = np.where(moon, rules.moon_min_effect_hours, rules.min_effect_hours)
    keep = hourly_long["effHours"].to_numpy() > min_hours
    if logger.isEnabledFor(logging.DEBUG):
        dropped = hourly_long.loc[~keep, KEY_COLS].drop_duplicates()
        logger.debug("Noise filter dropped %d daily aspect keys", len(dropped))
    return hourly_long.loc[keep].copy()


def exact_hour_locate(hourly_long: pd.DataFrame, rules: AggregationRules) -> pd.Series:
    """Exact hour per (Date, origin, aspect) key, only for keys with one.

    The exact hour is the latest hour attaining the key's minimum orb, when
    that minimum is within the pair tolerance.
    """
    min_orb = hourly_long.groupby(KEY_COLS, observed=True)["orb"].transform("min")
    moon = is_moon_pair(hourly_long["origin"], rules.moon_id)
    tolerance = np.where(moon, rules.moon_exact_orb_tolerance, rules.exact_orb_tolerance)
    candidate = (min_orb.to_numpy() <= tolerance) & (hourly_long["orb"] == min_orb).to_numpy()
    exact = hourly_long.loc[candidate].groupby(KEY_COLS, observed=True)["Hour"].max()
    return exact.rename("exactHour")


def _empty_daily_table() -> pd.DataFrame:
    out = pd.DataFrame({c: pd.Series(dtype="object") for c in DAILY_ASPECT_COLUMNS})
    out["exactHour"] = out["exactHour"].astype("Int64")
    return out


def hourly_aspects_date_aggregate(
    hourly_long: pd.DataFrame,
    rules: Optional[AggregationRules] = None,
) -> pd.DataFrame:
    """Daily aggregate of the hourly aspects long table."""
    rules = rules or AggregationRules()
    require_columns(hourly_long, HOURLY_ASPECT_COLUMNS, "hourly aspects table")

    hourly = effect_hours_tally(hourly_long)
    hourly = noise_filter(hourly, rules)
    if hourly.empty:
        logger.info("No daily aspects left after noise filter")
        return _empty_daily_table()

    exact = exact_hour_locate(hourly, rules)

    daily = hourly.groupby(KEY_COLS, observed=True, sort=True).agg(
        meanOrb=("orb", "mean"),
        minOrb=("orb", "min"),
        maxOrb=("orb", "max"),
        startHour=("Hour", "min"),
        endHour=("Hour", "max"),
        effHours=("effHours", "mean"),
    )
    if exact.empty:
        daily["exactHour"] = pd.Series(pd.NA, index=daily.index, dtype="Int64")
    else:
        daily["exactHour"] = exact.reindex(daily.index).astype("Int64")
    daily = daily.reset_index()

    daily["meanOrb"] = daily["meanOrb"].round(2)
    daily["effHours"] = daily["effHours"].astype("int64")
    daily["pX"] = daily["origin"].str[:2]
    daily["pY"] = daily["origin"].str[2:4]

    logger.info(
        "Aggregated %d hourly observations into %d daily aspects (%d with exact hour)",
        len(hourly), len(daily), int(daily["exactHour"].notna().sum()),
    )
    return daily.loc[:, list(DAILY_ASPECT_COLUMNS)]


def daily_aspects_table_prepare(
    positions: pd.DataFrame,
    body_ids: Sequence[str],
    aspect_set: AspectSet,
    rules: Optional[AggregationRules] = None,
) -> pd.DataFrame:
    """Daily aspects long table from an hourly position table."""
    require_columns(positions, HOURLY_ID_COLS, "hourly position table")
    wide = planet_aspects_table_prepare(positions, body_ids, aspect_set)
    hourly_long = aspects_wide_to_long(wide, body_ids, id_cols=HOURLY_ID_COLS)
    return hourly_aspects_date_aggregate(hourly_long, rules)
