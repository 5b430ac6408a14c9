"""
Calorimeter regions.

Each tower may aggregate hits from several sub-detector regions.
"""

from enum import Enum


class Region(Enum):
    """One of the five calorimeter sub-detector zones."""

    EB = "eb"
    EE = "ee"
    HB = "hb"
    HE = "he"
    HF = "hf"

    @property
    def count_attr(self) -> str:
        """Name of the hit count accessor for this region."""
        return f"{self.value}_count"

    @property
    def is_electromagnetic(self) -> bool:
        return self in (Region.EB, Region.EE)

    @property
    def energy_attr(self) -> str:
        """Name of the energy accessor relevant for this region."""
        return "em_energy" if self.is_electromagnetic else "had_energy"

    @classmethod
    def from_name(cls, name: str) -> 'Region':
        """Look up a region by case-insensitive name (e.g. "EB" or "eb")."""
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(f"Unknown region '{name}'") from None
