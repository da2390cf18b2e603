from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from astro_tables.angles import (
    aspect_column_names,
    aspect_label,
    aspect_orb,
    body_pairs,
    categorize_aspect,
    longitude_column_names,
    normalize_longitude_distance,
    orb_column_names,
    pair_column_names,
    pair_column_schema,
)
from astro_tables.aspect_sets import PTOLEMAIC_ASPECT_SET
from astro_tables.config import AspectSet

CONJUNCTION_ONLY = AspectSet(name="conj", aspects=[{"angle": 0, "orb": 8}])


def test_normalize_output_within_half_circle():
    values = np.array([-720.5, -359.0, -270.0, -181.0, -180.0, -90.0, 0.0, 5.0, 90.0, 180.0, 181.0, 270.0, 359.0, 725.0])
    out = normalize_longitude_distance(values)
    assert ((out >= 0) & (out <= 180)).all()


@pytest.mark.parametrize("x", [0.5, 10.0, 90.0, 179.0, 200.0, 359.5])
def test_normalize_is_symmetric(x):
    assert normalize_longitude_distance(x) == pytest.approx(normalize_longitude_distance(-x))


@pytest.mark.parametrize("x", [-300.0, -10.0, 0.0, 10.0, 170.0, 250.0])
def test_normalize_is_periodic(x):
    assert normalize_longitude_distance(x + 360) == pytest.approx(normalize_longitude_distance(x))


def test_normalize_folds_known_values():
    assert normalize_longitude_distance(5.0) == 5.0
    assert normalize_longitude_distance(-350.0) == 10.0
    assert normalize_longitude_distance(185.0) == 175.0
    assert normalize_longitude_distance(-180.0) == 180.0


def test_normalize_series_keeps_index_and_na():
    s = pd.Series([10.0, np.nan, 200.0], index=[3, 4, 5], name="MOSULON")
    out = normalize_longitude_distance(s)
    assert isinstance(out, pd.Series)
    assert list(out.index) == [3, 4, 5]
    assert out.name == "MOSULON"
    assert out.iloc[0] == 10.0
    assert pd.isna(out.iloc[1])
    assert out.iloc[2] == 160.0


def test_normalize_nullable_series():
    s = pd.Series([10.0, None], dtype="Float64")
    out = normalize_longitude_distance(s)
    assert out.iloc[0] == 10.0
    assert out.isna().iloc[1]


def test_body_pairs_combination_order():
    assert body_pairs(["MO", "SU", "ME"]) == [("MO", "SU"), ("MO", "ME"), ("SU", "ME")]


@pytest.mark.parametrize("n", [2, 3, 5, 8])
def test_pair_count(n):
    ids = [f"B{i}" for i in range(n)]
    assert len(body_pairs(ids)) == n * (n - 1) // 2
    assert len(set(longitude_column_names(ids))) == n * (n - 1) // 2


def test_pair_column_families_share_order():
    ids = ["MO", "ME", "VE", "SU"]
    lon = longitude_column_names(ids)
    asp = aspect_column_names(ids)
    orb = orb_column_names(ids)
    assert lon[0] == "MOMELON"
    assert asp[0] == "MOMEASP"
    assert orb[-1] == "VESUORB"
    assert [c[:4] for c in lon] == [c[:4] for c in asp] == [c[:4] for c in orb]


@pytest.mark.parametrize("ids", [["MO"], [], ["MO", "SU", "MO"]])
def test_body_pairs_rejects_bad_sets(ids):
    with pytest.raises(ValueError):
        body_pairs(ids)


def test_pair_column_names_rejects_unknown_suffix():
    with pytest.raises(ValueError):
        pair_column_names(["MO", "SU"], "DEC")


def test_pair_column_schema_roles():
    schema = pair_column_schema(["MO", "SU", "ME"])
    assert list(schema) == ["MOSU", "MOME", "SUME"]
    cols = schema["SUME"]
    assert (cols.first, cols.second) == ("SU", "ME")
    assert (cols.longitude, cols.aspect, cols.orb) == ("SUMELON", "SUMEASP", "SUMEORB")
    assert cols.source_longitudes == ("SULON", "MELON")


def test_exact_angle_classifies_with_zero_orb():
    for angle in PTOLEMAIC_ASPECT_SET.angles:
        assert categorize_aspect(angle, PTOLEMAIC_ASPECT_SET) == angle
        assert aspect_orb(angle, PTOLEMAIC_ASPECT_SET) == 0.0


def test_orb_boundary_is_inclusive():
    assert categorize_aspect(98.0, PTOLEMAIC_ASPECT_SET) == 90.0
    assert aspect_orb(98.0, PTOLEMAIC_ASPECT_SET) == 8.0
    assert np.isnan(categorize_aspect(98.0001, PTOLEMAIC_ASPECT_SET))
    assert np.isnan(aspect_orb(98.0001, PTOLEMAIC_ASPECT_SET))


def test_conjunction_example():
    distance = normalize_longitude_distance(5.0)
    assert categorize_aspect(distance, CONJUNCTION_ONLY) == 0.0
    assert aspect_orb(distance, CONJUNCTION_ONLY) == 5.0


def test_opposition_at_orb_edge():
    wide_opposition = AspectSet(name="x", aspects=[{"angle": 0, "orb": 8}, {"angle": 180, "orb": 10}])
    distance = normalize_longitude_distance(170.0)
    assert categorize_aspect(distance, wide_opposition) == 180.0
    assert aspect_orb(distance, wide_opposition) == 10.0
    narrow_opposition = AspectSet(name="y", aspects=[{"angle": 0, "orb": 8}, {"angle": 180, "orb": 8}])
    assert np.isnan(categorize_aspect(distance, narrow_opposition))


def test_overlapping_windows_last_definition_wins():
    forward = AspectSet(name="f", aspects=[{"angle": 0, "orb": 10}, {"angle": 30, "orb": 25}])
    backward = AspectSet(name="b", aspects=[{"angle": 30, "orb": 25}, {"angle": 0, "orb": 10}])
    assert categorize_aspect(8.0, forward) == 30.0
    assert aspect_orb(8.0, forward) == 22.0
    assert categorize_aspect(8.0, backward) == 0.0
    assert aspect_orb(8.0, backward) == 8.0


def test_classifier_vectorized_with_na():
    s = pd.Series([2.0, np.nan, 45.0, 121.0], index=list("abcd"))
    aspects = categorize_aspect(s, PTOLEMAIC_ASPECT_SET)
    orbs = aspect_orb(s, PTOLEMAIC_ASPECT_SET)
    assert list(aspects.index) == list("abcd")
    assert aspects["a"] == 0.0 and orbs["a"] == 2.0
    assert aspects[["b", "c"]].isna().all()
    assert orbs[["b", "c"]].isna().all()
    assert aspects["d"] == 120.0 and orbs["d"] == 1.0


def test_aspect_label():
    assert aspect_label(0.0) == "a0"
    assert aspect_label(103) == "a103"
    assert aspect_label(51.5) == "a51.5"
