"""
Hot cell removal.

Some towers are anomalously active ("hot"). Hot towers are addressed by
their logical coordinates

    ieta = floor(eta / 0.085)
    iphi = floor(36 phi / pi)

which correspond to the groups of 5 by 5 crystals towers are built from.
"""

from typing import Iterable

from domain.config import DEFAULT_EB_HOT_CELLS
from domain.geometry import eb_phi_bin, eta_bin
from domain.regions import Region
from .base import TowerFilter


class ColdRegionFilter(TowerFilter):
    """
    Accepts towers of ``region`` that are not hot.

    The hot cell list is short (tens of cells) and scanned linearly.
    """

    __slots__ = ("region", "_attr", "_hot_cells")

    def __init__(self, region: Region, hot_cells: Iterable[tuple[int, int]]):
        """
        Args:
            region: Region the towers must belong to
            hot_cells: (ieta, iphi) logical coordinates of the hot cells
        """
        self.region = region
        self._attr = region.count_attr
        self._hot_cells = tuple((int(ieta), int(iphi)) for ieta, iphi in hot_cells)

    @property
    def hot_cells(self) -> tuple[tuple[int, int], ...]:
        return self._hot_cells

    def __call__(self, tower) -> bool:
        if getattr(tower, self._attr) <= 0:
            return False
        return (eta_bin(tower.eta), eb_phi_bin(tower.phi)) not in self._hot_cells


def default_cold_eb_filter() -> ColdRegionFilter:
    """EB hot cell removal with the default hot cell list."""
    return ColdRegionFilter(Region.EB, DEFAULT_EB_HOT_CELLS)
