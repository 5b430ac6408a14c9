"""
Filter factory.

Builds filters by name from an explicit configuration, replacing shared
global filter instances.
"""

from typing import Iterable, Optional

from domain.config import CaloConfig
from domain.regions import Region
from .base import AcceptAllFilter, TowerFilter
from .good import GoodRegionFilter
from .hb import GoodHBFilter
from .hot_cells import ColdRegionFilter
from .logic import all_of
from .regions import RegionFilter


FILTER_NAMES = ("all", "eb", "ee", "hb", "he", "hf", "coldeb", "goodeb", "goodhb")


def build_filter(name: str, config: Optional[CaloConfig] = None) -> TowerFilter:
    """
    Create the filter called ``name``.

    Args:
        name: One of FILTER_NAMES
        config: Configuration providing hot cells and thresholds; defaults
            are used when omitted

    Raises:
        ValueError: If the name is unknown, or ``goodhb`` is requested
            without an HB configuration
    """
    config = config or CaloConfig()
    name = name.lower()

    if name == "all":
        return AcceptAllFilter()
    if name in ("eb", "ee", "hb", "he", "hf"):
        return RegionFilter(Region.from_name(name))
    if name == "coldeb":
        return ColdRegionFilter(Region.EB, config.good_eb.hot_cells)
    if name == "goodeb":
        return GoodRegionFilter(config.good_eb)
    if name == "goodhb":
        if config.good_hb is None:
            raise ValueError("filter 'goodhb' requires a filters.goodhb configuration")
        return GoodHBFilter(config.good_hb)

    raise ValueError(f"Unknown filter '{name}', expected one of {', '.join(FILTER_NAMES)}")


def build_filters(names: Iterable[str], config: Optional[CaloConfig] = None) -> TowerFilter:
    """AND of the filters called ``names``."""
    return all_of(*(build_filter(name, config) for name in names))
