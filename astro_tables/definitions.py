"""Short ids used in the data tables and their human readable names.

Tables map id -> name and are read-only. Use id_to_name_map() to expand the
short column values for contributors and plots.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, List, Mapping, Union

import pandas as pd


def _frozen(pairs: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(pairs))


PLANET_IDS = _frozen({
    "MO": "Moon",
    "ME": "Mercury",
    "VE": "Venus",
    "SU": "Sun",
    "MA": "Mars",
    "VS": "Vesta",
    "JN": "Juno",
    "CE": "Ceres",
    "PA": "Pallas",
    "JU": "Jupiter",
    "NN": "NNode",
    "SN": "SNode",
    "SA": "Saturn",
    "CH": "Chiron",
    "UR": "Uranus",
    "PH": "Pholus",
    "NE": "Neptune",
    "PL": "Pluto",
    "ES": "SUEclipse",
    "EM": "MOEclipse",
})

ASPECT_IDS = _frozen({
    "a0": "Conjunction",
    "a30": "SemiSextile",
    "a36": "SemiQuintile",
    "a45": "SemiSquare",
    "a51": "Septile",
    "a60": "Sextile",
    "a72": "Quintile",
    "a90": "Square",
    "a103": "BiSeptile",
    "a120": "Trine",
    "a135": "SesquiSquare",
    "a144": "BiQuintile",
    "a150": "Quincunx",
    "a180": "Opposition",
})

POLARITY_IDS = _frozen({"POS": "Positive", "NEG": "Negative"})

QUALITY_IDS = _frozen({"CAR": "Cardinal", "FIX": "Fixed", "MUT": "Mutable"})

ELEMENT_IDS = _frozen({"FIR": "Fire", "EAR": "Earth", "AIR": "Air", "WAT": "Water"})

ZOD_SIGN_IDS = _frozen({
    "ARI": "Aries",
    "TAU": "Taurus",
    "GEM": "Gemini",
    "CAN": "Cancer",
    "LEO": "Leo",
    "VIR": "Virgo",
    "LIB": "Libra",
    "SCO": "Scorpio",
    "SAG": "Sagittarius",
    "CAP": "Capricorn",
    "AQU": "Aquarius",
    "PIS": "Pisces",
})

_decans = {
    f"{n}{sign}": f"{name}D{n}"
    for sign, name in ZOD_SIGN_IDS.items()
    for n in (1, 2, 3)
}
# Published table names the third Leo decan "LeoD1"; kept until confirmed.
_decans["3LEO"] = "LeoD1"
DECAN_IDS = _frozen(_decans)

SPEED_PHASE_IDS = _frozen({"DIR": "Direct", "STA": "Stationary", "RET": "Retrograde"})

MOON_PHASE_IDS = _frozen({"F": "Full", "N": "New"})

ARAB_MANSION_IDS = _frozen({
    f"AM{i:02d}": name
    for i, name in enumerate(
        [
            "Saratan", "Butain", "Turaija", "Dabaran", "Haq'a", "Han'a", "Dira",
            "Natra", "Tarf(a)", "Gabha", "Zubra", "Sarfa", "Auwa", "Simak",
            "Gafr", "Zubana", "Iklik", "Qualb", "Saula", "Na'a'im", "Balda",
            "Dabih", "Bula", "Su'ud", "Ahbija", "Muqaddam", "Mu'ahhar", "Risa",
        ],
        start=1,
    )
})

VEDIC_MANSION_IDS = _frozen({
    f"VM{i:02d}": name
    for i, name in enumerate(
        [
            "Aswini", "Bharani", "Krittica", "Rohini", "Mrigashira", "Ardra",
            "Punavasu", "Pushya", "Ashlesha", "Magha", "PurvaPhalguni",
            "UttaraPhalguni", "Hasta", "Chitra", "Swati", "Vishakha", "Anuradha",
            "Jyeshtha", "Mula", "PurvaAshada", "UttaraAshada", "Shravana",
            "Danishtha", "Shatabhisha", "PurvaBhadrapada", "UttaraBhadrapada",
            "Revati",
        ],
        start=1,
    )
})


IdValues = Union[pd.Series, Iterable[str]]


def id_to_name_map(definition: Mapping[str, str], ids: IdValues) -> Union[pd.Series, List[str]]:
    """Map ids to names; ids missing from the definition are kept as-is."""
    if isinstance(ids, pd.Series):
        return ids.astype("object").map(lambda v: definition.get(v, v))
    return [definition.get(v, v) for v in ids]


def expand_aspect_names(daily_aspects: pd.DataFrame) -> pd.DataFrame:
    """Copy of a daily aspects table with pXName, pYName and aspectName columns."""
    out = daily_aspects.copy()
    out["pXName"] = id_to_name_map(PLANET_IDS, out["pX"])
    out["pYName"] = id_to_name_map(PLANET_IDS, out["pY"])
    out["aspectName"] = id_to_name_map(ASPECT_IDS, out["aspect"])
    return out
