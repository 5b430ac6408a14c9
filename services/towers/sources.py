"""
Tower sources - adapters for the external columnar store.

A source exposes named branches. ``TowerSet`` binds one fixed-capacity
buffer per branch once, and every ``read_entry`` fills those buffers in
place, the same way ROOT fills branch addresses.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import awkward as ak
import numpy as np
import uproot

from domain.errors import InvalidArgument, SchemaError, SourceError
from domain.config import DEFAULT_TREE_NAME
from services import consts


class TowerSource(ABC):
    """
    Base class for tower sources.

    Subclasses describe the available branches and return the raw values of
    one entry; binding and in-place filling are handled here.
    """

    def __init__(self):
        self._bound: dict[str, np.ndarray] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def branch_names(self) -> set[str]:
        """Names of all branches available in the source."""

    @abstractmethod
    def num_entries(self) -> int:
        """Total number of entries available."""

    @abstractmethod
    def _read_branches(self, entry: int, branches: list[str]) -> dict:
        """
        Read raw values of ``branches`` for one entry.

        Returns:
            Dict mapping branch name to a scalar (count branches) or a 1D
            array-like (tower branches)
        """

    def bind(self, branch: str, buffer: np.ndarray):
        """
        Bind ``buffer`` as the destination of ``branch``.

        Raises:
            SchemaError: If the branch does not exist
        """
        if branch not in self.branch_names():
            raise SchemaError(f'No branch named "{branch}" was found')
        self._bound[branch] = buffer

    def read_entry(self, entry: int) -> dict[str, int]:
        """
        Fill all bound buffers with the values of ``entry``.

        Args:
            entry: Entry index, 0 <= entry < num_entries()

        Returns:
            Dict mapping branch name to the number of values written

        Raises:
            SourceError: If the entry does not exist, cannot be read or does
                not fit in the bound buffers
        """
        n_entries = self.num_entries()
        if not 0 <= entry < n_entries:
            raise SourceError(f"Entry {entry} is out of range (source has {n_entries} entries)")

        try:
            values = self._read_branches(entry, list(self._bound))
        except Exception as e:
            raise SourceError(f"Failed to read entry {entry}: {e}") from e

        written = {}
        for branch, buffer in self._bound.items():
            data = np.asarray(values[branch])
            if data.ndim == 0:
                data = data.reshape(1)
            elif len(data) > len(buffer):
                raise SourceError(
                    f"Branch {branch} has {len(data)} values in entry {entry}, "
                    f"buffer capacity is {len(buffer)}"
                )
            buffer[:len(data)] = _exact_cast(data, buffer.dtype, branch, entry)
            written[branch] = len(data)
        return written

    def close(self):
        """Release resources held by the source."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False


def _exact_cast(data: np.ndarray, dtype: np.dtype, branch: str, entry: int) -> np.ndarray:
    """
    Convert ``data`` to ``dtype``, refusing conversions that change a value.

    Raises:
        SourceError: If a value does not fit in ``dtype`` (precision loss,
            integer overflow, fractional counts)
    """
    try:
        converted = data.astype(dtype)
    except (TypeError, ValueError) as e:
        raise SourceError(f"Branch {branch} in entry {entry} cannot be stored as {dtype}: {e}") from e

    equal_nan = converted.dtype.kind == "f" and data.dtype.kind == "f"
    if not np.array_equal(converted, data, equal_nan=equal_nan):
        raise SourceError(
            f"Branch {branch} in entry {entry} has values that cannot be stored "
            f"exactly as {dtype}"
        )
    return converted


class UprootTowerSource(TowerSource):
    """Tower source backed by a TTree read with uproot."""

    def __init__(self, tree, owned_file=None):
        """
        Initialize source.

        Args:
            tree: uproot TTree containing the tower branches
            owned_file: Optional opened file closed by ``close()``
        """
        super().__init__()
        if tree is None:
            raise InvalidArgument("UprootTowerSource: tree is None")
        self._tree = tree
        self._file = owned_file
        self._branches = set(tree.keys())

    @classmethod
    def from_file(cls, file_path: str, tree_name: str = DEFAULT_TREE_NAME) -> 'UprootTowerSource':
        """
        Open a ROOT file and use the tree named ``tree_name``.

        Raises:
            SourceError: If the file cannot be opened
            SchemaError: If the tree does not exist
        """
        try:
            root_file = uproot.open(file_path)
        except Exception as e:
            raise SourceError(f"Cannot open {file_path}: {e}") from e

        available_trees = [key[:-2] if key.endswith(';1') else key for key in root_file.keys()]
        if tree_name not in available_trees:
            root_file.close()
            raise SchemaError(f'No TTree named "{tree_name}" found in {file_path}')

        logging.info(f"Reading towers from {file_path}:{tree_name}")
        return cls(root_file[tree_name], owned_file=root_file)

    def branch_names(self) -> set[str]:
        return self._branches

    def num_entries(self) -> int:
        return self._tree.num_entries

    def _read_branches(self, entry: int, branches: list[str]) -> dict:
        arrays = self._tree.arrays(
            branches,
            entry_start=entry,
            entry_stop=entry + 1,
            library="np"
        )
        return {branch: arrays[branch][0] for branch in branches}

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None


class AwkwardTowerSource(TowerSource):
    """
    Tower source backed by an in-memory awkward record array.

    Each record is one entry, with one field per branch.
    """

    def __init__(self, events: Optional[ak.Array]):
        super().__init__()
        if events is None:
            raise InvalidArgument("AwkwardTowerSource: events is None")
        self._events = events
        self._branches = set(events.fields)

    @classmethod
    def from_towers(cls, entries: list) -> 'AwkwardTowerSource':
        """
        Build a source from lists of towers, one list per entry.

        Args:
            entries: List of entries, each a list of objects with the tower
                accessors (``Tower`` or ``TowerRef``)
        """
        sizes = np.array([len(towers) for towers in entries], dtype=np.int64)
        columns = {consts.SIZE_BRANCH: sizes}
        for column, branch in consts.TOWER_BRANCHES.items():
            values = np.array(
                [getattr(tower, column) for towers in entries for tower in towers],
                dtype=consts.TOWER_DTYPES[column]
            )
            columns[branch] = ak.unflatten(values, sizes)
        return cls(ak.zip(columns, depth_limit=1))

    def branch_names(self) -> set[str]:
        return self._branches

    def num_entries(self) -> int:
        return len(self._events)

    def _read_branches(self, entry: int, branches: list[str]) -> dict:
        record = self._events[entry]
        values = {}
        for branch in branches:
            value = record[branch]
            if isinstance(value, ak.Array):
                value = ak.to_numpy(value)
            values[branch] = value
        return values
