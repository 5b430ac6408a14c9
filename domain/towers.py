"""
Tower domain model.

A tower is one aggregated calorimeter measurement. ``Tower`` is the
immutable, self-contained value; the zero-copy view into an event buffer
lives in ``services.towers.tower_ref`` and shares the accessors defined here.
"""

from dataclasses import dataclass, fields

from .regions import Region


class TowerAccessors:
    """
    Derived accessors shared by ``Tower`` and ``TowerRef``.

    Subclasses provide ``eta``, ``phi``, the five ``*_count`` values and the
    three energies.
    """

    __slots__ = ()

    @property
    def is_eb(self) -> bool:
        return self.eb_count > 0

    @property
    def is_ee(self) -> bool:
        return self.ee_count > 0

    @property
    def is_hb(self) -> bool:
        return self.hb_count > 0

    @property
    def is_he(self) -> bool:
        return self.he_count > 0

    @property
    def is_hf(self) -> bool:
        return self.hf_count > 0

    def hit_count(self, region: Region) -> int:
        """Number of cells of ``region`` aggregated into this tower."""
        return getattr(self, region.count_attr)

    def uses(self, region: Region) -> bool:
        """True if ``region`` was used to build the tower."""
        return self.hit_count(region) > 0

    def energy_in(self, region: Region) -> float:
        """Electromagnetic energy for ECAL regions, hadronic energy otherwise."""
        return getattr(self, region.energy_attr)

    def same_values(self, other) -> bool:
        """Field-wise exact comparison, no tolerance."""
        return all(
            getattr(self, name) == getattr(other, name)
            for name in TOWER_FIELDS
        )

    def __str__(self) -> str:
        # Debugging aid, the format is not stable
        return (
            f"Tower{{ eta={self.eta}, phi={self.phi}, "
            f"em_energy={self.em_energy}, had_energy={self.had_energy}, "
            f"total_energy={self.total_energy} }}"
        )


@dataclass(frozen=True)
class Tower(TowerAccessors):
    """
    Immutable snapshot of one tower.

    In the barrel, a tower corresponds to a group of 5 by 5 ECAL crystals and
    one HCAL cell. Default construction gives an empty tower.
    """

    eta: float = 0.0
    phi: float = 0.0

    eb_count: int = 0
    ee_count: int = 0
    hb_count: int = 0
    he_count: int = 0
    hf_count: int = 0

    em_energy: float = 0.0
    had_energy: float = 0.0
    total_energy: float = 0.0

    def __post_init__(self):
        """Validate the tower."""
        for region in Region:
            count = getattr(self, region.count_attr)
            if count < 0:
                raise ValueError(f"{region.count_attr} must be non-negative, got {count}")

    @classmethod
    def from_ref(cls, ref) -> 'Tower':
        """Copy the values currently referenced by a ``TowerRef``."""
        return cls(**{name: getattr(ref, name) for name in TOWER_FIELDS})

    def __eq__(self, other):
        if isinstance(other, Tower):
            return self.same_values(other)
        if isinstance(other, TowerAccessors):
            return other == self
        return NotImplemented

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in TOWER_FIELDS))


TOWER_FIELDS = tuple(f.name for f in fields(Tower))
