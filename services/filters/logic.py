"""
Filters implementing boolean logic.

Combinators keep references to their operands; nothing is copied and no
allocation happens when a combined filter is evaluated. The operands must
stay usable for as long as the combinator is.
"""

from functools import reduce

from .base import AcceptAllFilter, TowerFilter


class AndFilter(TowerFilter):
    """True when both operands are True; ``rhs`` is not evaluated if ``lhs`` is False."""

    __slots__ = ("_lhs", "_rhs")

    def __init__(self, lhs: TowerFilter, rhs: TowerFilter):
        self._lhs = lhs
        self._rhs = rhs

    def __call__(self, tower) -> bool:
        return self._lhs(tower) and self._rhs(tower)


class OrFilter(TowerFilter):
    """True when at least one operand is True; ``rhs`` is not evaluated if ``lhs`` is True."""

    __slots__ = ("_lhs", "_rhs")

    def __init__(self, lhs: TowerFilter, rhs: TowerFilter):
        self._lhs = lhs
        self._rhs = rhs

    def __call__(self, tower) -> bool:
        return self._lhs(tower) or self._rhs(tower)


class NotFilter(TowerFilter):
    """Negates another filter."""

    __slots__ = ("_arg",)

    def __init__(self, arg: TowerFilter):
        self._arg = arg

    def __call__(self, tower) -> bool:
        return not self._arg(tower)


def all_of(*filters: TowerFilter) -> TowerFilter:
    """AND of all given filters, evaluated left to right. Accepts everything when empty."""
    if not filters:
        return AcceptAllFilter()
    return reduce(AndFilter, filters)


def any_of(*filters: TowerFilter) -> TowerFilter:
    """OR of all given filters, evaluated left to right. Rejects everything when empty."""
    if not filters:
        return NotFilter(AcceptAllFilter())
    return reduce(OrFilter, filters)
