"""
Domain models for calorimeter towers.

Pure data structures with validation, no business logic.
"""

from .towers import Tower, TowerAccessors, TOWER_FIELDS
from .regions import Region
from .errors import CaloError, InvalidArgument, SchemaError, SourceError
from .config import (
    CaloConfig,
    SourceConfig,
    GoodRegionConfig,
    GoodHBConfig,
    CalibrationConfig,
    DEFAULT_EB_HOT_CELLS,
    DEFAULT_EB_THRESHOLDS,
)

__all__ = [
    "Tower",
    "TowerAccessors",
    "TOWER_FIELDS",
    "Region",
    "CaloError",
    "InvalidArgument",
    "SchemaError",
    "SourceError",
    "CaloConfig",
    "SourceConfig",
    "GoodRegionConfig",
    "GoodHBConfig",
    "CalibrationConfig",
    "DEFAULT_EB_HOT_CELLS",
    "DEFAULT_EB_THRESHOLDS",
]
