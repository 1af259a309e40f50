"""
Unit tests for arrow operators: unit, zero, lift, when, unless, branch,
tap and closure.
"""

from itertools import islice

import pytest

from kleisli_iter import (
    NotAnArrowError,
    apply,
    apply_flat,
    branch,
    closure,
    kleisli_compose,
    lift,
    tap,
    unit,
    unless,
    when,
    zero,
)


class TestIdentityAndZero:

    def test_unit(self):
        assert list(unit(3)) == [3]

    def test_zero(self):
        assert list(zero(3)) == []

    def test_zero_annihilates(self):
        k = kleisli_compose(lambda a: [a, a + 1], zero)
        assert list(apply_flat(k, 1)) == []
        assert next(apply(k, 1), None) is None

    def test_lift(self):
        assert list(lift(str.upper)("abc")) == ["ABC"]

    def test_lift_is_lazy(self, exploding):
        arrow = lift(exploding("fn"))
        arrow(1)  # generator not started


class TestConditionalOperators:

    def test_when(self):
        even = when(lambda n: n % 2 == 0)
        assert list(even(2)) == [2]
        assert list(even(3)) == []

    def test_unless(self):
        odd = unless(lambda n: n % 2 == 0)
        assert list(odd(2)) == []
        assert list(odd(3)) == [3]

    def test_when_as_filter_stage(self):
        k = kleisli_compose(lambda n: range(n), when(lambda n: n > 2))
        assert list(apply_flat(k, 6)) == [3, 4, 5]
        assert next(apply(k, 6)) == 3

    def test_non_callable_predicate(self):
        with pytest.raises(NotAnArrowError):
            when(True)


class TestBranch:

    def test_alternatives_in_order(self):
        arrow = branch(lambda n: [n, n + 1], zero, lambda n: [-n])
        assert list(arrow(1)) == [1, 2, -1]

    def test_later_branches_entered_lazily(self, exploding):
        arrow = branch(unit, exploding("second"))
        assert next(iter(arrow(7))) == 7

    def test_head_only_sees_first_branch(self, exploding):
        k = kleisli_compose(branch(unit, exploding("second")), unit)
        assert list(islice(apply(k, "x"), 3)) == ["x", "x", "x"]

    def test_no_branches(self):
        assert list(branch()(1)) == []

    def test_rejects_non_callable(self):
        with pytest.raises(NotAnArrowError, match=r"arrows\[1\]"):
            branch(unit, "nope")


class TestTap:

    def test_side_effect_and_pass_through(self):
        seen = []
        k = kleisli_compose(lambda n: [n, n * 10], tap(seen.append))
        assert list(apply_flat(k, 2)) == [2, 20]
        assert seen == [2, 20]

    def test_side_effect_repeats_on_every_head_pull(self):
        seen = []
        k = kleisli_compose(lambda n: [n, n * 10], tap(seen.append))
        list(islice(apply(k, 2), 3))
        assert seen == [2, 2, 2]


class TestClosure:

    @pytest.fixture
    def edges(self):
        # a -> b -> d, a -> c -> d, d -> a (cycle)
        graph = {"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": ["a"]}
        return lambda n: graph.get(n, [])

    def test_reflexive_depth_first(self, edges):
        assert list(closure(edges)("a")) == ["a", "b", "d", "c"]

    def test_transitive_includes_start_on_cycle(self, edges):
        assert list(closure(edges, reflexive=False)("b")) == ["d", "a", "b", "c"]

    def test_transitive_without_cycle(self):
        tree = {1: [2, 3], 2: [4]}
        arrow = closure(lambda n: tree.get(n, []), reflexive=False)
        assert list(arrow(1)) == [2, 4, 3]

    def test_non_unique_on_dag(self):
        dag = {"a": ["b", "c"], "b": ["d"], "c": ["d"]}
        arrow = closure(lambda n: dag.get(n, []), unique=False)
        assert list(arrow("a")) == ["a", "b", "d", "c", "d"]

    def test_lazy_expansion(self):
        expanded = []

        def successors(n):
            expanded.append(n)
            return [n + 1]

        path = closure(successors)(0)
        assert list(islice(path, 3)) == [0, 1, 2]
        assert expanded == [0, 1]

    def test_composes_as_path_query(self, edges):
        reachable_from_b = kleisli_compose(unit, closure(edges, reflexive=False))
        assert set(apply_flat(reachable_from_b, "b")) == {"a", "b", "c", "d"}
        assert next(apply(reachable_from_b, "b")) == "d"
