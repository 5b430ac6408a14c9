"""
Energy thresholds depending on the tower multiplicity.

Since towers can group several cells, the relevant variable is the mean
energy per cell, E/N. One threshold is defined per N; a tower strictly above
it is considered good. When N exceeds the number of thresholds, the last one
is used.

Default EB thresholds:

    Number of crystals | Threshold [GeV/crystal]
    -------------------|------------------------
             1         |          0.37
             2         |          0.28
             3         |          0.25
            >3         |          0.22
"""

from domain.config import GoodRegionConfig
from .base import TowerFilter
from .hot_cells import ColdRegionFilter


class GoodRegionFilter(TowerFilter):
    """Hot tower and noise removal for one region."""

    __slots__ = ("region", "_cold", "_attr", "_energy_attr", "_thresholds")

    def __init__(self, config: GoodRegionConfig):
        self.region = config.region
        self._cold = ColdRegionFilter(config.region, config.hot_cells)
        self._attr = config.region.count_attr
        self._energy_attr = config.region.energy_attr
        self._thresholds = tuple(config.thresholds)

    @property
    def thresholds(self) -> tuple[float, ...]:
        return self._thresholds

    def threshold(self, multiplicity: int) -> float:
        """Threshold per cell for a tower built from ``multiplicity`` cells (>= 1)."""
        return self._thresholds[min(multiplicity, len(self._thresholds)) - 1]

    def __call__(self, tower) -> bool:
        # The cold filter rejects towers outside the region, so multiplicity >= 1
        if not self._cold(tower):
            return False
        multiplicity = getattr(tower, self._attr)
        return getattr(tower, self._energy_attr) > self.threshold(multiplicity) * multiplicity


def default_good_eb_filter() -> GoodRegionFilter:
    """EB cleaning with the default hot cells and thresholds."""
    return GoodRegionFilter(GoodRegionConfig())
