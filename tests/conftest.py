"""Shared fixtures: in-memory tower sources and a mocked uproot tree."""

from unittest.mock import MagicMock

import numpy as np
import pytest

from domain.towers import Tower
from services import consts
from services.towers import AwkwardTowerSource, TowerSet


def eb_tower(eta=0.5, phi=0.25, crystals=1, energy=1.0, **kwargs) -> Tower:
    """An EB-only tower."""
    return Tower(eta=eta, phi=phi, eb_count=crystals, em_energy=energy,
                 total_energy=energy, **kwargs)


def hb_tower(eta=0.5, phi=0.25, cells=1, energy=1.0, **kwargs) -> Tower:
    """An HB-only tower."""
    return Tower(eta=eta, phi=phi, hb_count=cells, had_energy=energy,
                 total_energy=energy, **kwargs)


def make_mock_tree(entries):
    """Mock uproot TTree serving ``entries`` (lists of (eta, eb_count) pairs)."""
    tree = MagicMock()
    tree.keys.return_value = list(consts.REQUIRED_BRANCHES)
    tree.num_entries = len(entries)

    def mock_arrays(branches, entry_start, entry_stop, library):
        assert library == "np"
        towers = entries[entry_start]
        result = {}
        for branch in branches:
            if branch == consts.SIZE_BRANCH:
                result[branch] = np.array([len(towers)], dtype=np.int32)
                continue
            column = np.empty(1, dtype=object)
            if branch == "CaloEta":
                column[0] = np.array([eta for eta, _ in towers], dtype=np.float32)
            elif branch == "CaloEBHits":
                column[0] = np.array([count for _, count in towers], dtype=np.int32)
            else:
                column[0] = np.zeros(len(towers), dtype=np.float32)
            result[branch] = column
        return result

    tree.arrays.side_effect = mock_arrays
    return tree


@pytest.fixture
def make_tower_set():
    """Build a TowerSet over in-memory entries (lists of towers)."""
    def _make(entries, capacity=1000):
        return TowerSet(AwkwardTowerSource.from_towers(entries), capacity=capacity)
    return _make


@pytest.fixture
def three_towers():
    """EB, HB, EB towers; EB accepts indices 0 and 2."""
    return [
        eb_tower(eta=0.5, phi=0.25, crystals=1, energy=1.5),
        hb_tower(eta=-0.75, phi=1.5, cells=2, energy=3.0),
        eb_tower(eta=1.25, phi=-2.0, crystals=4, energy=0.75),
    ]
