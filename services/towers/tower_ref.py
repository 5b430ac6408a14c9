"""
Zero-copy tower view.

A ``TowerRef`` is a (TowerSet, index) pair reading its values straight from
the set's column buffers. It is only valid until the next ``TowerSet.load``;
snapshot it into a ``Tower`` to keep the values longer.
"""

from domain.towers import Tower, TowerAccessors


def _column(name: str, cast):
    def getter(self):
        assert self._index < self._set.count, "dereferencing past-the-end tower"
        return cast(getattr(self._set.columns, name)[self._index])

    getter.__name__ = name
    return property(getter)


class TowerRef(TowerAccessors):
    """
    Reference to one tower of a ``TowerSet``.

    You should normally get these from ``TowerSet`` iteration; keeping a
    reference across a ``load`` is undefined (it will silently read the new
    event's data, or stale data past the new end).
    """

    __slots__ = ("_set", "_index")

    def __init__(self, tower_set, index: int):
        assert tower_set is not None
        assert 0 <= index <= tower_set.count
        self._set = tower_set
        self._index = index

    @property
    def index(self) -> int:
        return self._index

    eta = _column("eta", float)
    phi = _column("phi", float)

    eb_count = _column("eb_count", int)
    ee_count = _column("ee_count", int)
    hb_count = _column("hb_count", int)
    he_count = _column("he_count", int)
    hf_count = _column("hf_count", int)

    em_energy = _column("em_energy", float)
    had_energy = _column("had_energy", float)
    total_energy = _column("total_energy", float)

    def snapshot(self) -> Tower:
        """Copy the referenced values into an independent ``Tower``."""
        return Tower.from_ref(self)

    def __eq__(self, other):
        if isinstance(other, TowerRef):
            return self._set is other._set and self._index == other._index
        if isinstance(other, Tower):
            return self.same_values(other)
        return NotImplemented

    # Equal to Towers by value but refers to mutable buffers
    __hash__ = None

    def __repr__(self):
        return f"TowerRef(index={self._index})"
