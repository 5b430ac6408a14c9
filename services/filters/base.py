"""
Base class for tower filters.

A filter is a pure predicate over a tower (``Tower`` or ``TowerRef``) that
returns True when the tower should be taken into account. Filters never
raise for a valid tower.

A simple custom filter::

    class PositiveEtaFilter(TowerFilter):
        def __call__(self, tower) -> bool:
            return tower.eta > 0

used as::

    for tower in tower_set.select(PositiveEtaFilter()):
        ...

Filters combine with ``&``, ``|`` and ``~``.
"""

from abc import ABC, abstractmethod
from typing import Callable


class TowerFilter(ABC):
    """Base class for tower filters."""

    __slots__ = ()

    @abstractmethod
    def __call__(self, tower) -> bool:
        """Returns True if the tower passes the filter."""

    def __and__(self, other: 'TowerFilter') -> 'TowerFilter':
        from .logic import AndFilter
        return AndFilter(self, other)

    def __or__(self, other: 'TowerFilter') -> 'TowerFilter':
        from .logic import OrFilter
        return OrFilter(self, other)

    def __invert__(self) -> 'TowerFilter':
        from .logic import NotFilter
        return NotFilter(self)


class AcceptAllFilter(TowerFilter):
    """A filter that lets every tower pass."""

    __slots__ = ()

    def __call__(self, tower) -> bool:
        return True


class FunctionFilter(TowerFilter):
    """Adapts a plain callable, e.g. ``FunctionFilter(lambda t: t.eta > 0)``."""

    __slots__ = ("_function",)

    def __init__(self, function: Callable[..., bool]):
        self._function = function

    def __call__(self, tower) -> bool:
        return bool(self._function(tower))
