"""Planet pair aspects wide table and its long format transform."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import pandas as pd

from .angles import (
    aspect_label,
    aspect_orb,
    categorize_aspect,
    normalize_longitude_distance,
    pair_column_schema,
)
from .config import AspectSet
from .schema import (
    HOURLY_ID_COLS,
    LONGITUDE_SUFFIX,
    require_columns,
    time_key_columns,
)

logger = logging.getLogger(__name__)


def longitude_distance_augment(positions: pd.DataFrame, body_ids: Sequence[str]) -> pd.DataFrame:
    """Copy of positions with one normalized longitude distance column per pair."""
    schema = pair_column_schema(body_ids)
    require_columns(
        positions,
        [b + LONGITUDE_SUFFIX for b in body_ids],
        "position table",
    )
    out = positions.copy()
    distances = {}
    for cols in schema.values():
        lon1, lon2 = cols.source_longitudes
        distances[cols.longitude] = normalize_longitude_distance(out[lon1] - out[lon2])
    # One concat keeps the frame unfragmented with many pairs.
    return pd.concat([out, pd.DataFrame(distances, index=out.index)], axis=1)


def planet_aspects_calculate(
    positions: pd.DataFrame,
    body_ids: Sequence[str],
    aspect_set: AspectSet,
) -> pd.DataFrame:
    """Copy of positions augmented with aspect and orb columns for every pair.

    Expects the pair longitude distance columns from longitude_distance_augment.
    """
    schema = pair_column_schema(body_ids)
    require_columns(positions, [c.longitude for c in schema.values()], "longitude distance table")

    aspects = {}
    orbs = {}
    for cols in schema.values():
        aspects[cols.aspect] = categorize_aspect(positions[cols.longitude], aspect_set)
        orbs[cols.orb] = aspect_orb(positions[cols.longitude], aspect_set)

    return pd.concat(
        [
            positions.copy(),
            pd.DataFrame(aspects, index=positions.index),
            pd.DataFrame(orbs, index=positions.index),
        ],
        axis=1,
    )


def planet_aspects_table_prepare(
    positions: pd.DataFrame,
    body_ids: Sequence[str],
    aspect_set: AspectSet,
) -> pd.DataFrame:
    """Wide aspects table: time keys, the bodies' source columns and pair columns."""
    id_cols = time_key_columns(positions)
    bodies = set(body_ids)
    body_cols = [c for c in positions.columns if c[:2] in bodies and c not in id_cols]
    planets = positions.loc[:, id_cols + body_cols]
    planets = longitude_distance_augment(planets, body_ids)
    wide = planet_aspects_calculate(planets, body_ids, aspect_set)
    logger.info(
        "Prepared %s aspects wide table: %d rows, %d pairs",
        aspect_set.name, len(wide), len(pair_column_schema(body_ids)),
    )
    return wide


def _melt_pair_columns(
    wide: pd.DataFrame,
    id_cols: Sequence[str],
    column_to_pair: dict,
    value_name: str,
) -> pd.DataFrame:
    long = wide.melt(
        id_vars=list(id_cols),
        value_vars=list(column_to_pair),
        var_name="origin",
        value_name=value_name,
    )
    long = long.dropna(subset=[value_name]).copy()
    long["origin"] = long["origin"].map(column_to_pair)
    return long


def aspects_wide_to_long(
    wide: pd.DataFrame,
    body_ids: Sequence[str],
    id_cols: Sequence[str] = HOURLY_ID_COLS,
) -> pd.DataFrame:
    """One row per (time keys, pair) with an aspect in effect, orb attached.

    Rows without aspect are dropped. Aspect angles are labelled ``a<angle>``
    as a categorical to simplify grouping.
    """
    id_cols = list(id_cols)
    schema = pair_column_schema(body_ids)
    require_columns(
        wide,
        id_cols + [c.aspect for c in schema.values()] + [c.orb for c in schema.values()],
        "aspects wide table",
    )

    aspects_long = _melt_pair_columns(
        wide, id_cols, {c.aspect: c.pair_id for c in schema.values()}, "aspect"
    )
    labels = [aspect_label(a) for a in sorted(aspects_long["aspect"].unique())]
    aspects_long["aspect"] = pd.Categorical(
        aspects_long["aspect"].map(aspect_label), categories=labels
    )

    orbs_long = _melt_pair_columns(
        wide, id_cols, {c.orb: c.pair_id for c in schema.values()}, "orb"
    )
    orbs_long["orb"] = orbs_long["orb"].round(2)

    long = aspects_long.merge(orbs_long, on=id_cols + ["origin"], how="inner")
    long = long.sort_values(id_cols + ["origin"], kind="mergesort").reset_index(drop=True)
    logger.debug("Aspects long table: %d observations", len(long))
    return long


def longitude_distance_long(
    positions: pd.DataFrame,
    body_ids: Sequence[str],
    planet_id: Optional[str] = None,
) -> pd.DataFrame:
    """Pair longitude distances as (time keys, origin, distance) rows.

    When planet_id is given only pairs containing that body are kept.
    """
    schema = pair_column_schema(body_ids)
    if planet_id is not None and planet_id not in body_ids:
        raise ValueError(f"planet '{planet_id}' is not in the body set")

    distances = longitude_distance_augment(positions, body_ids)
    column_to_pair = {
        c.longitude: c.pair_id
        for c in schema.values()
        if planet_id is None or planet_id in (c.first, c.second)
    }
    id_cols = time_key_columns(distances)
    long = _melt_pair_columns(distances, id_cols, column_to_pair, "distance")
    return long.sort_values(id_cols + ["origin"], kind="mergesort").reset_index(drop=True)
