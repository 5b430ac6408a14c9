"""
Tests for boolean filter logic.

Combinators are checked against plain boolean logic and for short-circuit
evaluation.
"""

import itertools

import pytest

from domain import Tower
from services.filters import (
    AcceptAllFilter,
    AndFilter,
    FunctionFilter,
    NotFilter,
    OrFilter,
    TowerFilter,
    all_of,
    any_of,
)


class ConstantFilter(TowerFilter):
    """Returns a fixed answer and counts evaluations."""

    __slots__ = ("answer", "calls")

    def __init__(self, answer: bool):
        self.answer = answer
        self.calls = 0

    def __call__(self, tower) -> bool:
        self.calls += 1
        return self.answer


TOWER = Tower(eta=0.5)


class TestCombinators:
    """Tests for AndFilter, OrFilter and NotFilter."""

    @pytest.mark.parametrize("lhs,rhs", list(itertools.product([False, True], repeat=2)))
    def test_truth_tables(self, lhs, rhs):
        p, q = ConstantFilter(lhs), ConstantFilter(rhs)
        assert AndFilter(p, q)(TOWER) == (lhs and rhs)
        assert OrFilter(p, q)(TOWER) == (lhs or rhs)
        assert NotFilter(p)(TOWER) == (not lhs)

    def test_and_short_circuits(self):
        """Test that rhs is not evaluated when lhs rejects."""
        p, q = ConstantFilter(False), ConstantFilter(True)
        assert not AndFilter(p, q)(TOWER)
        assert p.calls == 1
        assert q.calls == 0

    def test_or_short_circuits(self):
        """Test that rhs is not evaluated when lhs accepts."""
        p, q = ConstantFilter(True), ConstantFilter(False)
        assert OrFilter(p, q)(TOWER)
        assert p.calls == 1
        assert q.calls == 0

    def test_rhs_evaluated_when_needed(self):
        p, q = ConstantFilter(True), ConstantFilter(False)
        AndFilter(p, q)(TOWER)
        assert q.calls == 1

    def test_operands_are_referenced_not_copied(self):
        """Test that changing an operand changes the combination."""
        p = ConstantFilter(True)
        negated = NotFilter(p)
        assert not negated(TOWER)
        p.answer = False
        assert negated(TOWER)

    def test_nested_expression(self):
        positive_eta = FunctionFilter(lambda t: t.eta > 0)
        energetic = FunctionFilter(lambda t: t.total_energy > 1.0)
        expression = OrFilter(AndFilter(positive_eta, NotFilter(energetic)), energetic)

        assert expression(Tower(eta=0.5, total_energy=0.5))
        assert expression(Tower(eta=-0.5, total_energy=2.0))
        assert not expression(Tower(eta=-0.5, total_energy=0.5))


class TestOperators:
    """Tests for &, | and ~ on filters."""

    def test_operators_build_combinators(self):
        p, q = ConstantFilter(True), ConstantFilter(False)
        assert isinstance(p & q, AndFilter)
        assert isinstance(p | q, OrFilter)
        assert isinstance(~p, NotFilter)

    def test_operator_semantics(self):
        p, q = ConstantFilter(True), ConstantFilter(False)
        assert not (p & q)(TOWER)
        assert (p | q)(TOWER)
        assert (~q)(TOWER)
        assert (p & ~q)(TOWER)


class TestFolds:
    """Tests for all_of and any_of."""

    def test_all_of_empty_accepts(self):
        assert isinstance(all_of(), AcceptAllFilter)
        assert all_of()(TOWER)

    def test_any_of_empty_rejects(self):
        assert not any_of()(TOWER)

    def test_all_of_stops_at_first_rejection(self):
        filters = [ConstantFilter(True), ConstantFilter(False), ConstantFilter(True)]
        assert not all_of(*filters)(TOWER)
        assert [f.calls for f in filters] == [1, 1, 0]

    def test_any_of_stops_at_first_acceptance(self):
        filters = [ConstantFilter(False), ConstantFilter(True), ConstantFilter(False)]
        assert any_of(*filters)(TOWER)
        assert [f.calls for f in filters] == [1, 1, 0]

    def test_function_filter_returns_bool(self):
        assert FunctionFilter(lambda t: 1)(TOWER) is True
