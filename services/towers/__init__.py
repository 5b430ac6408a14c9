"""
Tower services.

Event buffer, zero-copy tower references, filtered iteration and the
adapters to the columnar tower store.
"""

from .sources import TowerSource, UprootTowerSource, AwkwardTowerSource
from .tower_ref import TowerRef
from .tower_set import TowerSet, TowerIterator, TowerColumns, distance

__all__ = [
    "TowerSource",
    "UprootTowerSource",
    "AwkwardTowerSource",
    "TowerRef",
    "TowerSet",
    "TowerIterator",
    "TowerColumns",
    "distance",
]
