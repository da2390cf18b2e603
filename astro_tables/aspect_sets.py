"""Named aspect definition sets and body id sets."""

from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping, Tuple

from .config import AspectDefinition, AspectSet


def _aspect_set(name: str, definitions: List[Tuple[float, float]]) -> AspectSet:
    return AspectSet(
        name=name,
        aspects=[AspectDefinition(angle=angle, orb=orb) for angle, orb in definitions],
    )


# Major aspects 4°, sextile 3°, minor aspects 2°; no overlapping windows.
PABLO_CERDA_ASPECT_SET = _aspect_set(
    "pablo_cerda",
    [
        (0, 4.0),
        (30, 2.0),
        (36, 2.0),
        (45, 2.0),
        (51, 2.0),
        (60, 3.0),
        (72, 2.0),
        (90, 4.0),
        (103, 2.0),
        (120, 4.0),
        (135, 2.0),
        (144, 2.0),
        (150, 2.0),
        (180, 4.0),
    ],
)

PTOLEMAIC_ASPECT_SET = _aspect_set(
    "ptolemaic",
    [
        (0, 8.0),
        (60, 6.0),
        (90, 8.0),
        (120, 8.0),
        (180, 8.0),
    ],
)

ASPECT_SETS: Mapping[str, AspectSet] = MappingProxyType({
    PABLO_CERDA_ASPECT_SET.name: PABLO_CERDA_ASPECT_SET,
    PTOLEMAIC_ASPECT_SET.name: PTOLEMAIC_ASPECT_SET,
})


def get_aspect_set(name: str) -> AspectSet:
    try:
        return ASPECT_SETS[name]
    except KeyError:
        known = ", ".join(sorted(ASPECT_SETS))
        raise KeyError(f"unknown aspect set '{name}' (known: {known})") from None


# --- Body sets (fastest body first, pairs inherit this order) ---
MODERN_PLANETS: Tuple[str, ...] = ("MO", "ME", "VE", "SU", "MA", "JU", "SA", "UR", "NE", "PL")

ALL_PLANETS_AND_ASTEROIDS: Tuple[str, ...] = (
    "MO", "ME", "VE", "SU", "MA", "VS", "JN", "CE", "PA",
    "JU", "NN", "SA", "CH", "UR", "PH", "NE", "PL",
)

BODY_SETS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "modern": MODERN_PLANETS,
    "all": ALL_PLANETS_AND_ASTEROIDS,
})
