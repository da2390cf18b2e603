"""Longitude distance normalization, pair column naming and aspect classification."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Callable, Dict, List, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import AspectSet
from .schema import ASPECT_SUFFIX, LONGITUDE_SUFFIX, ORB_SUFFIX

PAIR_SUFFIXES = (LONGITUDE_SUFFIX, ASPECT_SUFFIX, ORB_SUFFIX)


def _as_float_array(values) -> np.ndarray:
    if isinstance(values, pd.Series):
        return values.to_numpy(dtype="float64", na_value=np.nan)
    return np.asarray(values, dtype="float64")


def _like_input(values, result: np.ndarray):
    """Return result shaped as the caller's input: Series, array or float."""
    if isinstance(values, pd.Series):
        return pd.Series(result, index=values.index, name=values.name, dtype="float64")
    if np.ndim(values) == 0:
        return float(result)
    return result


def normalize_longitude_distance(values):
    """Fold a signed longitude difference into the [0, 180] distance domain.

    Values above 180 fold to ``abs(v - 360)``, values below -180 to
    ``abs(v + 360)``, everything else to ``abs(v)``. NA values pass through.
    """
    x = np.fmod(_as_float_array(values), 360.0)
    x = np.where(x > 180.0, np.abs(x - 360.0), x)
    x = np.where(x < -180.0, np.abs(x + 360.0), x)
    return _like_input(values, np.abs(x))


# --------------------------- Pair columns ---------------------------
@dataclass(frozen=True)
class PairColumns:
    """Derived column roles of one body pair."""
    pair_id: str
    first: str
    second: str
    longitude: str
    aspect: str
    orb: str

    @property
    def source_longitudes(self) -> Tuple[str, str]:
        return self.first + LONGITUDE_SUFFIX, self.second + LONGITUDE_SUFFIX


def body_pairs(body_ids: Sequence[str]) -> List[Tuple[str, str]]:
    """All unordered body pairs in combination order of body_ids."""
    ids = list(body_ids)
    if len(ids) < 2:
        raise ValueError("at least two body ids are required to form pairs")
    if len(set(ids)) != len(ids):
        dupes = sorted({b for b in ids if ids.count(b) > 1})
        raise ValueError(f"duplicated body ids: {', '.join(dupes)}")
    return list(combinations(ids, 2))


def pair_column_names(body_ids: Sequence[str], suffix: str) -> List[str]:
    """Combined pair column names, e.g. MO + SU + LON -> MOSULON."""
    if suffix not in PAIR_SUFFIXES:
        raise ValueError(f"unknown pair column suffix '{suffix}'")
    return [f"{a}{b}{suffix}" for a, b in body_pairs(body_ids)]


def longitude_column_names(body_ids: Sequence[str]) -> List[str]:
    return pair_column_names(body_ids, LONGITUDE_SUFFIX)


def aspect_column_names(body_ids: Sequence[str]) -> List[str]:
    return pair_column_names(body_ids, ASPECT_SUFFIX)


def orb_column_names(body_ids: Sequence[str]) -> List[str]:
    return pair_column_names(body_ids, ORB_SUFFIX)


def pair_column_schema(body_ids: Sequence[str]) -> Dict[str, PairColumns]:
    """Ordered mapping pair id -> its longitude, aspect and orb column names."""
    schema: Dict[str, PairColumns] = {}
    for first, second in body_pairs(body_ids):
        pair_id = first + second
        schema[pair_id] = PairColumns(
            pair_id=pair_id,
            first=first,
            second=second,
            longitude=pair_id + LONGITUDE_SUFFIX,
            aspect=pair_id + ASPECT_SUFFIX,
            orb=pair_id + ORB_SUFFIX,
        )
    return schema


# ------------------------ Aspect classification ------------------------
def _match_aspects(
    distances,
    aspect_set: AspectSet,
    value_for: Callable[[np.ndarray, float], np.ndarray],
):
    x = _as_float_array(distances)
    out = np.full(x.shape, np.nan)
    for angle, orb in aspect_set.items():
        # NaN distances never match; later definitions overwrite earlier ones.
        idx = (x >= angle - orb) & (x <= angle + orb)
        out[idx] = value_for(x[idx], angle)
    return _like_input(distances, out)


def categorize_aspect(distances, aspect_set: AspectSet):
    """Map normalized distances to the matching aspect angle, NA when none."""
    return _match_aspects(distances, aspect_set, lambda x, angle: np.full(x.shape, angle))


def aspect_orb(distances, aspect_set: AspectSet):
    """Distance from the exact aspect angle for matching samples, NA when none."""
    return _match_aspects(distances, aspect_set, lambda x, angle: np.abs(x - angle))


def aspect_label(angle: float) -> str:
    """Categorical aspect label: 0 -> 'a0', 103 -> 'a103'."""
    return f"a{angle:g}"
