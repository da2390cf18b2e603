from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, List, Literal, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator

import settings

from .schema import PositionDataError


class AspectDefinition(BaseModel):
    """Target angle and orb tolerance of a single aspect, in degrees."""

    angle: float = Field(..., ge=0.0, le=180.0)
    orb: float = Field(..., ge=0.0)


class AspectSet(BaseModel):
    """Ordered aspect definitions of one astrological tradition.

    Definition order matters: when two orb windows overlap the later
    definition wins.
    """

    name: str
    aspects: List[AspectDefinition] = Field(..., min_length=1)

    def items(self) -> Iterator[Tuple[float, float]]:
        for a in self.aspects:
            yield a.angle, a.orb

    @property
    def angles(self) -> List[float]:
        return [a.angle for a in self.aspects]


Resolution = Literal["daily", "hourly"]


class PipelineConfig(BaseModel):
    """Configuration of the daily tables preparation run."""

    data_dir: Path = Field(default_factory=lambda: settings.DATA_DIR)
    output_dir: Path = Field(default_factory=lambda: settings.OUTPUT_DIR)

    position_files: Dict[str, List[str]] = Field(
        default_factory=lambda: {
            "daily": ["planets_position_daily_1930-2029.tsv"],
            "hourly": [
                "planets_position_hourly_1980-2000.tsv",
                "planets_position_hourly_2001-2019.tsv",
                "planets_position_hourly_2020-2029.tsv",
            ],
        }
    )

    body_ids: List[str] = Field(default_factory=list, description="Empty means the full asteroid set")
    aspect_set: str = Field(default_factory=lambda: settings.ASPECT_SET)

    # Hourly to daily aggregation rules
    moon_id: str = "MO"
    min_effect_hours: int = 8
    moon_min_effect_hours: int = 3
    exact_orb_tolerance: float = 0.1
    moon_exact_orb_tolerance: float = 1.0

    # Categorical derivation
    sidereal_offset_deg: float = -24.0
    stationary_speed_ratio: float = 0.2
    constant_speed_bodies: List[str] = Field(default_factory=lambda: ["NN", "SN"])

    @field_validator("body_ids")
    @classmethod
    def _check_body_ids(cls, value: List[str]) -> List[str]:
        bad = [b for b in value if len(b) != 2 or not b.isalnum() or b.upper() != b]
        if bad:
            raise ValueError(f"body ids must be 2 uppercase characters: {', '.join(bad)}")
        if len(set(value)) != len(value):
            raise ValueError("body ids must be unique")
        if value and len(value) < 2:
            raise ValueError("at least two body ids are required to form pairs")
        return value

    def files_for(self, resolution: Resolution) -> List[Path]:
        try:
            names = self.position_files[resolution]
        except KeyError:
            raise PositionDataError(f"no position files configured for resolution '{resolution}'") from None
        return [self.data_dir / n for n in names]


def load_config_from_yaml(path: Path) -> PipelineConfig:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return PipelineConfig.model_validate(raw)
