"""
TowerSet - all towers of the current event.

Owns one fixed-capacity numpy buffer per tower column, bound once to the
tower source. ``load`` refills the buffers in place.

Single writer, many readers: any number of iterators and ``TowerRef``
objects may read a set, but ``load`` invalidates all of them. This is not
detected at runtime; callers must not use iterators or references obtained
before the last ``load``.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from domain.config import DEFAULT_CAPACITY, SourceConfig
from domain.errors import InvalidArgument, SourceError
from domain.towers import Tower
from services import consts
from services.filters.base import AcceptAllFilter, TowerFilter
from .sources import TowerSource, UprootTowerSource
from .tower_ref import TowerRef


@dataclass
class TowerColumns:
    """Parallel column buffers; only the first ``TowerSet.count`` values are meaningful."""

    eta: np.ndarray
    phi: np.ndarray

    eb_count: np.ndarray
    ee_count: np.ndarray
    hb_count: np.ndarray
    he_count: np.ndarray
    hf_count: np.ndarray

    em_energy: np.ndarray
    had_energy: np.ndarray
    total_energy: np.ndarray

    @classmethod
    def allocate(cls, capacity: int) -> 'TowerColumns':
        return cls(**{
            column: np.zeros(capacity, dtype=dtype)
            for column, dtype in consts.TOWER_DTYPES.items()
        })


class TowerIterator:
    """
    Bidirectional cursor over the towers of a ``TowerSet``.

    Towers rejected by the filter are skipped in both directions, at
    construction and on every step. The cursor index is in [-1, count]:
    ``count`` is the past-the-end position and -1 the before-begin position
    reached by stepping back from the first accepted tower. Neither can be
    dereferenced.

    Two iterators are equal when they point to the same index of the same
    set; their filters are not compared, so ``it != tower_set.end()`` works
    for any filter.
    """

    __slots__ = ("_set", "_filter", "_index", "_ref")

    def __init__(self, tower_set: 'TowerSet', index: int, tower_filter: TowerFilter):
        self._set = tower_set
        self._filter = tower_filter
        self._index = index
        self._ref = TowerRef(tower_set, index)
        self._skip_forward()

    def _skip_forward(self):
        """Finds the next accepted index (current included)."""
        count = self._set.count
        accept = self._filter
        while self._index < count and not accept(self._ref):
            self._index += 1
            self._ref = TowerRef(self._set, self._index)

    def _skip_backward(self):
        """Finds the previous accepted index (current included)."""
        accept = self._filter
        while self._index >= 0:
            self._ref = TowerRef(self._set, self._index)
            if accept(self._ref):
                return
            self._index -= 1
        self._ref = None

    def next(self) -> 'TowerIterator':
        """Step to the next accepted tower, or to the end."""
        assert self._index < self._set.count, "incrementing past-the-end iterator"
        self._index += 1
        self._ref = TowerRef(self._set, self._index)
        self._skip_forward()
        return self

    def prev(self) -> 'TowerIterator':
        """Step to the previous accepted tower, or to the before-begin position."""
        assert self._index >= 0, "decrementing before-begin iterator"
        self._index -= 1
        self._skip_backward()
        return self

    @property
    def tower(self) -> TowerRef:
        """The referenced tower."""
        assert 0 <= self._index < self._set.count, "dereferencing iterator out of range"
        return self._ref

    @property
    def index(self) -> int:
        return self._index

    @property
    def at_end(self) -> bool:
        return self._index == self._set.count

    @property
    def before_begin(self) -> bool:
        return self._index < 0

    def copy(self) -> 'TowerIterator':
        other = TowerIterator.__new__(TowerIterator)
        other._set = self._set
        other._filter = self._filter
        other._index = self._index
        other._ref = self._ref
        return other

    def __eq__(self, other):
        if not isinstance(other, TowerIterator):
            return NotImplemented
        return self._set is other._set and self._index == other._index

    __hash__ = None

    def __repr__(self):
        return f"TowerIterator(index={self._index})"


def distance(first: TowerIterator, last: TowerIterator) -> int:
    """Number of ``next`` steps from ``first`` to ``last``."""
    it = first.copy()
    steps = 0
    while it != last:
        it.next()
        steps += 1
    return steps


class TowerSet:
    """
    A collection of all towers in an event.

    Usage::

        tower_set = TowerSet.from_file("data.root")
        for entry in tower_set.events():
            for tower in tower_set.select(good_eb):
                ...
    """

    def __init__(self, source: Optional[TowerSource], capacity: int = DEFAULT_CAPACITY):
        """
        Bind a tower set to a source.

        Args:
            source: Tower source; every required branch must be present
            capacity: Maximum number of towers in one entry

        Raises:
            InvalidArgument: If source is None or capacity is not positive
            SchemaError: If a required branch is missing
        """
        if source is None:
            raise InvalidArgument("TowerSet: source is None")
        if capacity <= 0:
            raise InvalidArgument(f"TowerSet: capacity must be positive, got {capacity}")

        self.logger = logging.getLogger(self.__class__.__name__)
        self._source = source
        self._capacity = capacity
        self._size = np.zeros(1, dtype=np.int64)
        self.columns = TowerColumns.allocate(capacity)
        self._count = 0
        self._entry: Optional[int] = None
        self._accept_all = AcceptAllFilter()

        self._bind_branches()

    @classmethod
    def from_file(cls, file_path: str, config: Optional[SourceConfig] = None) -> 'TowerSet':
        """
        Open the tower tree of a ROOT file.

        The file stays open until ``close()``; use the set as a context
        manager to scope it.
        """
        config = config or SourceConfig()
        source = UprootTowerSource.from_file(file_path, config.tree_name)
        try:
            return cls(source, capacity=config.capacity)
        except Exception:
            source.close()
            raise

    def close(self):
        """Close the underlying source."""
        self._source.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    def _bind_branches(self):
        self._source.bind(consts.SIZE_BRANCH, self._size)
        for column, branch in consts.TOWER_BRANCHES.items():
            self._source.bind(branch, getattr(self.columns, column))
        self.logger.debug(f"Bound {len(consts.REQUIRED_BRANCHES)} branches, capacity {self._capacity}")

    def load(self, entry: int):
        """
        Load the given entry from the source.

        Warning:
            This invalidates all iterators and tower references obtained from
            this set. Using them afterwards is undefined.

        Raises:
            SourceError: If the entry does not exist, cannot be read, or has
                more towers than the capacity. The set is left empty.
        """
        self._count = 0
        self._entry = None
        written = self._source.read_entry(entry)

        count = int(self._size[0])
        if count < 0 or count > self._capacity:
            raise SourceError(
                f"Entry {entry} has {count} towers, capacity is {self._capacity}"
            )
        for branch in consts.TOWER_BRANCHES.values():
            if written.get(branch, 0) < count:
                raise SourceError(
                    f"Branch {branch} has {written.get(branch, 0)} values in entry {entry}, "
                    f"expected {count}"
                )

        self._count = count
        self._entry = entry

    def size(self) -> int:
        """Number of entries available in the source."""
        return self._source.num_entries()

    @property
    def count(self) -> int:
        """Number of towers in the current entry."""
        return self._count

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def entry(self) -> Optional[int]:
        """Index of the loaded entry, or None."""
        return self._entry

    def begin(self, tower_filter: Optional[TowerFilter] = None) -> TowerIterator:
        """
        Returns an iterator referencing the first accepted tower.

        If ``tower_filter`` is given, the iterator only visits towers for
        which it returns True, otherwise it visits all towers.
        """
        if tower_filter is None:
            tower_filter = self._accept_all
        return TowerIterator(self, 0, tower_filter)

    def end(self, tower_filter: Optional[TowerFilter] = None) -> TowerIterator:
        """
        Returns a past-the-end iterator.

        ``tower_filter`` only matters when stepping backward from the end.
        """
        if tower_filter is None:
            tower_filter = self._accept_all
        return TowerIterator(self, self._count, tower_filter)

    def select(self, tower_filter: Optional[TowerFilter] = None) -> Iterator[TowerRef]:
        """Yield references to the accepted towers of the current entry."""
        it = self.begin(tower_filter)
        end = self.end()
        while it != end:
            yield it.tower
            it.next()

    def __iter__(self) -> Iterator[TowerRef]:
        return self.select()

    def towers(self, tower_filter: Optional[TowerFilter] = None) -> list[Tower]:
        """Snapshots of the accepted towers of the current entry."""
        return [ref.snapshot() for ref in self.select(tower_filter)]

    def events(self, start: int = 0, stop: Optional[int] = None) -> Iterator[int]:
        """
        Load entries ``start`` to ``stop`` (exclusive) one after another.

        Yields:
            The index of the entry that was just loaded
        """
        if stop is None:
            stop = self.size()
        for entry in range(start, stop):
            self.load(entry)
            yield entry
