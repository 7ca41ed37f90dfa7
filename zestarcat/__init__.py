"""ZeStarCat: ADC star catalogue import and HEALPix area index."""

from .adc_parser import (
    ColumnDescriptor,
    ParsedCell,
    ParserError,
    UnitError,
    parse_adc_column_definition,
    parse_fixed_width,
)
from .angles import Angle
from .loader import CatalogSource, iter_rows, iter_stars, load_catalog
from .settings_store import (
    SETTINGS_PATH,
    PersistentSettings,
    load_persistent_settings,
    save_persistent_settings,
)
from .sky import DEFAULT_GRID, SkyGrid, pixel_ranges
from .star import Star
from .star_dao import StarDao

__all__ = [
    "Angle",
    "CatalogSource",
    "ColumnDescriptor",
    "DEFAULT_GRID",
    "ParsedCell",
    "ParserError",
    "PersistentSettings",
    "SETTINGS_PATH",
    "SkyGrid",
    "Star",
    "StarDao",
    "UnitError",
    "iter_rows",
    "iter_stars",
    "load_catalog",
    "load_persistent_settings",
    "parse_adc_column_definition",
    "parse_fixed_width",
    "pixel_ranges",
    "save_persistent_settings",
]
