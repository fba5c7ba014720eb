import pytest

from regolib.sets import difference, intersection, intersection_of, union, union_of
from regolib.values import RegoError

A = frozenset({1, 2, 3, "x"})
B = frozenset({2, 3, 4, "y"})


def test_intersection_members():
    r = intersection(A, B)
    assert r <= A and r <= B
    assert all(item in r for item in A if item in B)


def test_union_members():
    r = union(A, B)
    assert A <= r and B <= r
    assert all(item in A or item in B for item in r)


def test_difference_members():
    r = difference(A, B)
    assert r <= A
    assert r.isdisjoint(B)
    assert difference(A, B) | intersection(A, B) == A


def test_operators_require_sets():
    with pytest.raises(RegoError):
        union((1, 2), A)
    with pytest.raises(RegoError):
        intersection(A, "x")
    with pytest.raises(RegoError):
        difference(None, A)


def test_intersection_of_empty():
    assert intersection_of(frozenset(), True) == frozenset()


def test_intersection_of_matches_pairwise():
    c = frozenset({3, 4, 5})
    assert intersection_of(frozenset({A, B, c}), True) == intersection(intersection(A, B), c)


def test_union_of_matches_pairwise():
    assert union_of(frozenset({A, B}), True) == union(A, B)
    assert union_of(frozenset(), True) == frozenset()


def test_set_of_non_sets_fails():
    with pytest.raises(RegoError, match="set of sets"):
        union_of(frozenset({1, 2}), True)
    with pytest.raises(RegoError, match="set of sets"):
        intersection_of(frozenset({A, "x"}), True)