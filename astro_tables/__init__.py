"""Planet aspects and positions daily tables from tabulated ephemeris data."""

from .aspect_sets import ASPECT_SETS, get_aspect_set
from .aspect_table import aspects_wide_to_long, planet_aspects_table_prepare
from .config import AspectDefinition, AspectSet, PipelineConfig, load_config_from_yaml
from .daily_aggregate import AggregationRules, daily_aspects_table_prepare, hourly_aspects_date_aggregate
from .positions import daily_planets_position_table_prepare, daily_speeds_long
from .schema import PositionDataError

__all__ = [
    "ASPECT_SETS",
    "AggregationRules",
    "AspectDefinition",
    "AspectSet",
    "PipelineConfig",
    "PositionDataError",
    "aspects_wide_to_long",
    "daily_aspects_table_prepare",
    "daily_planets_position_table_prepare",
    "daily_speeds_long",
    "get_aspect_set",
    "hourly_aspects_date_aggregate",
    "load_config_from_yaml",
    "planet_aspects_table_prepare",
]
