"""Region membership filters."""

from domain.regions import Region
from .base import TowerFilter


class RegionFilter(TowerFilter):
    """Accepts towers built with at least one cell of ``region``."""

    __slots__ = ("_attr", "region")

    def __init__(self, region: Region):
        self.region = region
        self._attr = region.count_attr

    def __call__(self, tower) -> bool:
        return getattr(tower, self._attr) > 0

    def __repr__(self):
        return f"RegionFilter({self.region.name})"


def eb_filter() -> RegionFilter:
    return RegionFilter(Region.EB)


def ee_filter() -> RegionFilter:
    return RegionFilter(Region.EE)


def hb_filter() -> RegionFilter:
    return RegionFilter(Region.HB)


def he_filter() -> RegionFilter:
    return RegionFilter(Region.HE)


def hf_filter() -> RegionFilter:
    return RegionFilter(Region.HF)
