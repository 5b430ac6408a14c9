"""
HB calibration.

Derives per-eta-bin thresholds and hot cells for ``GoodHBFilter``. In every
eta bin, the phi distribution of HB towers should be uniform. The requested
number of hottest phi bins is removed, then the hadronic energy threshold is
raised until a chi-square test against a flat distribution reaches the target
p-value.

This is an offline batch job: it consumes the filtered iteration interface
over many entries and does not belong to the per-event data model.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import yaml
from scipy.optimize import brentq
from scipy.stats import chisquare
from tqdm import tqdm

from domain.config import CalibrationConfig, GoodHBConfig
from domain.geometry import (
    HB_ETA_DIVS,
    HB_PHI_DIVS,
    eta_bin_center,
    hb_eta_index,
    hb_phi_bin,
)
from domain.regions import Region
from services.filters.regions import RegionFilter
from services.towers.tower_set import TowerSet


# Threshold resolution in GeV
ENERGY_TOLERANCE = 1e-3


@dataclass(frozen=True)
class HBBinResult:
    """Calibration result for one eta bin."""

    ieta: int
    tower_count: int
    energy: float
    hot_cells: tuple[int, ...]
    pvalue: float

    @property
    def eta(self) -> float:
        """Center of the eta bin."""
        return eta_bin_center(self.ieta)


class HBCalibrator:
    """
    Collects HB towers over many entries and solves for thresholds.

    Stateful service: ``collect`` may be called several times (e.g. on
    several files) before ``calibrate``.
    """

    def __init__(self, config: CalibrationConfig, show_progress: bool = True):
        self.config = config
        self.show_progress = show_progress
        self.logger = logging.getLogger(self.__class__.__name__)
        self._filter = RegionFilter(Region.HB)
        self._energies: list[list[float]] = [[] for _ in range(HB_ETA_DIVS)]
        self._phi_bins: list[list[int]] = [[] for _ in range(HB_ETA_DIVS)]

    def collect(self, tower_set: TowerSet, start: int = 0, stop: Optional[int] = None) -> int:
        """
        Scan entries of ``tower_set`` and record HB towers.

        Returns:
            Number of towers recorded
        """
        if stop is None:
            stop = tower_set.size()

        recorded = 0
        entries = tqdm(
            tower_set.events(start, stop),
            total=max(stop - start, 0),
            desc="Scanning entries",
            disable=not self.show_progress
        )
        for _ in entries:
            for tower in tower_set.select(self._filter):
                index = hb_eta_index(tower.eta)
                if not 0 <= index < HB_ETA_DIVS:
                    continue
                phi_bin = hb_phi_bin(tower.phi) + HB_PHI_DIVS // 2
                self._energies[index].append(tower.had_energy)
                self._phi_bins[index].append(min(max(phi_bin, 0), HB_PHI_DIVS - 1))
                recorded += 1

        self.logger.info(f"Recorded {recorded} HB towers from entries {start} to {stop}")
        return recorded

    @staticmethod
    def _pvalue(phi_bins: np.ndarray, keep: np.ndarray) -> float:
        """Chi-square p-value of the kept phi bins against a flat distribution."""
        observed = np.bincount(phi_bins, minlength=HB_PHI_DIVS)[keep]
        if observed.sum() == 0 or len(observed) < 2:
            return 1.0
        return float(chisquare(observed).pvalue)

    def calibrate_bin(self, index: int) -> HBBinResult:
        """Find hot cells and the energy threshold of one eta bin."""
        ieta = index - HB_ETA_DIVS // 2
        energies = np.asarray(self._energies[index], dtype=float)
        phi_bins = np.asarray(self._phi_bins[index], dtype=int)
        numhot = self.config.hot_counts[index]
        target = self.config.pvalue

        counts = np.bincount(phi_bins, minlength=HB_PHI_DIVS)
        hottest = np.argsort(-counts, kind="stable")[:numhot]
        keep = np.ones(HB_PHI_DIVS, dtype=bool)
        keep[hottest] = False

        def pvalue_at(threshold: float) -> float:
            return self._pvalue(phi_bins[energies >= threshold], keep)

        threshold = 0.0
        if len(energies) > 0 and pvalue_at(threshold) < target:
            # Nothing passes above the maximum energy, which is trivially flat
            upper = float(energies.max()) + ENERGY_TOLERANCE
            threshold = brentq(lambda t: pvalue_at(t) - target, 0.0, upper, xtol=ENERGY_TOLERANCE)
            while pvalue_at(threshold) < target and threshold < upper:
                threshold += ENERGY_TOLERANCE

        hot_cells = tuple(sorted(int(b) - HB_PHI_DIVS // 2 for b in hottest))
        return HBBinResult(
            ieta=ieta,
            tower_count=len(energies),
            energy=float(threshold),
            hot_cells=hot_cells,
            pvalue=pvalue_at(threshold),
        )

    def calibrate(self) -> tuple[GoodHBConfig, list[HBBinResult]]:
        """
        Calibrate all eta bins.

        Returns:
            Tuple of (filter configuration, per-bin results)
        """
        results = []
        for index in range(HB_ETA_DIVS):
            result = self.calibrate_bin(index)
            self.logger.info(
                f"ieta {result.ieta:>3} (eta {result.eta:+.4f}): {result.tower_count} towers, "
                f"threshold {result.energy:.3f} GeV, {len(result.hot_cells)} hot cells, "
                f"p-value {result.pvalue:.3g}"
            )
            results.append(result)

        config = GoodHBConfig(
            energies=tuple(r.energy for r in results),
            hot_cells=tuple(r.hot_cells for r in results),
        )
        return config, results


def write_good_hb_config(config: GoodHBConfig, path: str):
    """Write ``config`` as a YAML ``filters.goodhb`` section."""
    with open(path, 'w') as f:
        yaml.safe_dump({"filters": {"goodhb": config.to_dict()}}, f, sort_keys=False)
    logging.info(f"Wrote HB filter configuration to {path}")
