"""
Good HB towers.

HB uses one energy threshold and one hot cell list per eta bin. Eta bins
are 0.085 wide and cover the HB acceptance with 34 bins centered on
eta = 0; phi is split in 72 bins of 2 pi / 72.

Thresholds and hot cells are produced by the HB calibration
(``services.calibration``), which requires the phi distribution to be
uniform in every eta bin.
"""

from domain.config import GoodHBConfig
from domain.geometry import HB_ETA_DIVS, hb_eta_index, hb_phi_bin
from .base import TowerFilter


class GoodHBFilter(TowerFilter):
    """
    Accepts HB towers above their eta bin's hadronic energy threshold and
    outside its hot phi bins. Towers outside the HB eta acceptance are
    rejected.
    """

    __slots__ = ("_energies", "_hot_cells")

    def __init__(self, config: GoodHBConfig):
        self._energies = tuple(config.energies)
        self._hot_cells = tuple(tuple(cells) for cells in config.hot_cells)

    def __call__(self, tower) -> bool:
        if tower.hb_count <= 0:
            return False
        ieta = hb_eta_index(tower.eta)
        if not 0 <= ieta < HB_ETA_DIVS:
            return False
        if tower.had_energy < self._energies[ieta]:
            return False
        return hb_phi_bin(tower.phi) not in self._hot_cells[ieta]
