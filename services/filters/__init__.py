"""
Tower filters.

Predicates over towers and the boolean logic to combine them.
"""

from .base import TowerFilter, AcceptAllFilter, FunctionFilter
from .logic import AndFilter, OrFilter, NotFilter, all_of, any_of
from .regions import RegionFilter, eb_filter, ee_filter, hb_filter, he_filter, hf_filter
from .hot_cells import ColdRegionFilter, default_cold_eb_filter
from .good import GoodRegionFilter, default_good_eb_filter
from .hb import GoodHBFilter
from .factory import FILTER_NAMES, build_filter, build_filters

__all__ = [
    "TowerFilter",
    "AcceptAllFilter",
    "FunctionFilter",
    "AndFilter",
    "OrFilter",
    "NotFilter",
    "all_of",
    "any_of",
    "RegionFilter",
    "eb_filter",
    "ee_filter",
    "hb_filter",
    "he_filter",
    "hf_filter",
    "ColdRegionFilter",
    "default_cold_eb_filter",
    "GoodRegionFilter",
    "default_good_eb_filter",
    "GoodHBFilter",
    "FILTER_NAMES",
    "build_filter",
    "build_filters",
]
