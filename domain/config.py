"""
Configuration domain models.

Validated configuration objects for tower sources and filters. Defaults are
plain values here; filters are always built from an explicit configuration.
"""

from dataclasses import dataclass, field
from typing import Optional

from .geometry import HB_ETA_DIVS
from .regions import Region


# Default EB hot cells as (ieta, iphi) logical coordinates
DEFAULT_EB_HOT_CELLS: tuple[tuple[int, int], ...] = (
    (-16, -36), (-16, -35), (-15, -35), (-11, -35),
    (-18, 35), (-17, 35), (-16, 35), (-15, 35),
    (-17, -11), (-10, -7),
    (-9, 0), (8, -8),
    (2, 11), (0, 11),
    (-6, 24),
    (-18, 31),
    (11, 11), (13, 12), (14, 12), (14, 11), (15, 11), (16, 11),
)

# Default EB thresholds in GeV per crystal, indexed by crystal count - 1
DEFAULT_EB_THRESHOLDS: tuple[float, ...] = (0.37, 0.28, 0.25, 0.22)

DEFAULT_TREE_NAME = "CaloTree"
DEFAULT_CAPACITY = 1000


def _hot_cell_pairs(raw) -> tuple[tuple[int, int], ...]:
    return tuple((int(ieta), int(iphi)) for ieta, iphi in raw)


@dataclass(frozen=True)
class SourceConfig:
    """Configuration for binding a tower source."""

    tree_name: str = DEFAULT_TREE_NAME
    capacity: int = DEFAULT_CAPACITY

    def __post_init__(self):
        """Validate source configuration."""
        if not self.tree_name:
            raise ValueError("tree_name cannot be empty")
        if self.capacity <= 0:
            raise ValueError(f"capacity must be positive, got {self.capacity}")

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'SourceConfig':
        return cls(
            tree_name=config_dict.get("tree_name", DEFAULT_TREE_NAME),
            capacity=config_dict.get("capacity", DEFAULT_CAPACITY),
        )


@dataclass(frozen=True)
class GoodRegionConfig:
    """
    Hot cells and multiplicity thresholds for one region.

    ``thresholds[n - 1]`` is the energy per cell required from a tower built
    from ``n`` cells; the last value applies to all larger multiplicities.
    """

    region: Region = Region.EB
    hot_cells: tuple[tuple[int, int], ...] = DEFAULT_EB_HOT_CELLS
    thresholds: tuple[float, ...] = DEFAULT_EB_THRESHOLDS

    def __post_init__(self):
        """Validate region configuration."""
        if not self.thresholds:
            raise ValueError("thresholds cannot be empty")
        for cell in self.hot_cells:
            if len(cell) != 2:
                raise ValueError(f"hot cells must be (ieta, iphi) pairs, got {cell}")

    @classmethod
    def from_dict(cls, config_dict: dict, region: Region = Region.EB) -> 'GoodRegionConfig':
        """
        Create a GoodRegionConfig from a dictionary.

        Missing keys fall back to the EB defaults for EB. Other regions have
        no defaults and must give both keys.

        Args:
            config_dict: Dictionary with ``hot_cells`` (list of pairs) and
                ``thresholds`` (list of floats)
            region: Region used when the dictionary has no ``region`` key

        Raises:
            ValueError: If a non-EB region misses a key
        """
        if "region" in config_dict:
            region = Region.from_name(config_dict["region"])
        hot_cells = config_dict.get("hot_cells")
        thresholds = config_dict.get("thresholds")
        if region is not Region.EB:
            for key, value in (("hot_cells", hot_cells), ("thresholds", thresholds)):
                if value is None:
                    raise ValueError(f"{key} is required for region {region.value}")
        return cls(
            region=region,
            hot_cells=DEFAULT_EB_HOT_CELLS if hot_cells is None else _hot_cell_pairs(hot_cells),
            thresholds=DEFAULT_EB_THRESHOLDS if thresholds is None
            else tuple(float(t) for t in thresholds),
        )


@dataclass(frozen=True)
class GoodHBConfig:
    """
    Per-eta-bin HB thresholds and hot phi bins.

    Both tuples have one entry per HB eta bin, ordered from the most negative
    eta bin (ieta = -17) to the most positive one (ieta = 16).
    """

    energies: tuple[float, ...] = field(default_factory=lambda: (0.0,) * HB_ETA_DIVS)
    hot_cells: tuple[tuple[int, ...], ...] = field(default_factory=lambda: ((),) * HB_ETA_DIVS)

    def __post_init__(self):
        """Validate HB configuration."""
        if len(self.energies) != HB_ETA_DIVS:
            raise ValueError(f"energies must have {HB_ETA_DIVS} entries, got {len(self.energies)}")
        if len(self.hot_cells) != HB_ETA_DIVS:
            raise ValueError(f"hot_cells must have {HB_ETA_DIVS} entries, got {len(self.hot_cells)}")

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'GoodHBConfig':
        """
        Create a GoodHBConfig from a dictionary (e.g. loaded from YAML).

        ``hot_cells`` maps signed ieta to a list of phi bins; bins that are
        not mentioned have no hot cells.
        """
        energies = tuple(float(e) for e in config_dict.get("energies", (0.0,) * HB_ETA_DIVS))
        hot_cells = [()] * HB_ETA_DIVS
        for ieta, cells in (config_dict.get("hot_cells") or {}).items():
            index = int(ieta) + HB_ETA_DIVS // 2
            if not 0 <= index < HB_ETA_DIVS:
                raise ValueError(f"ieta {ieta} is out of bounds")
            hot_cells[index] = tuple(int(iphi) for iphi in cells)
        return cls(energies=energies, hot_cells=tuple(hot_cells))

    def to_dict(self) -> dict:
        """Inverse of ``from_dict``; only eta bins with hot cells are listed."""
        return {
            "energies": [float(e) for e in self.energies],
            "hot_cells": {
                index - HB_ETA_DIVS // 2: list(cells)
                for index, cells in enumerate(self.hot_cells)
                if cells
            },
        }


@dataclass(frozen=True)
class CalibrationConfig:
    """Target p-value and number of hot cells to remove in every HB eta bin."""

    pvalue: float = 0.01
    hot_counts: tuple[int, ...] = (0,) * HB_ETA_DIVS

    def __post_init__(self):
        """Validate calibration configuration."""
        if not 0 < self.pvalue <= 1:
            raise ValueError(f"pvalue must be in (0, 1], got {self.pvalue}")
        if len(self.hot_counts) != HB_ETA_DIVS:
            raise ValueError(f"hot_counts must have {HB_ETA_DIVS} entries, got {len(self.hot_counts)}")
        if any(count < 0 for count in self.hot_counts):
            raise ValueError("hot counts must be non-negative")

    def numhot(self, ieta: int) -> int:
        """Number of hot cells to remove in the signed eta bin ``ieta``."""
        return self.hot_counts[ieta + HB_ETA_DIVS // 2]


@dataclass(frozen=True)
class CaloConfig:
    """
    Complete configuration.

    Immutable configuration object validated at creation.
    """

    source: SourceConfig = field(default_factory=SourceConfig)
    good_eb: GoodRegionConfig = field(default_factory=GoodRegionConfig)
    good_hb: Optional[GoodHBConfig] = None

    @classmethod
    def from_dict(cls, config_dict: Optional[dict]) -> 'CaloConfig':
        """
        Create CaloConfig from a dictionary (e.g., loaded from YAML).

        Args:
            config_dict: Dictionary with ``source`` and ``filters`` sections

        Returns:
            Validated CaloConfig instance
        """
        config_dict = config_dict or {}
        filters_dict = config_dict.get("filters") or {}

        good_hb = None
        if filters_dict.get("goodhb"):
            good_hb = GoodHBConfig.from_dict(filters_dict["goodhb"])

        return cls(
            source=SourceConfig.from_dict(config_dict.get("source") or {}),
            good_eb=GoodRegionConfig.from_dict(filters_dict.get("goodeb") or {}),
            good_hb=good_hb,
        )
