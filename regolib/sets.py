"""Set operators and set-of-sets builtins."""

from __future__ import annotations

from functools import reduce
from typing import Any

from .values import RegoError, ensure_set, format_value


def intersection(left: Any, right: Any) -> frozenset:
    return ensure_set("intersection", left) & ensure_set("intersection", right)


def union(left: Any, right: Any) -> frozenset:
    return ensure_set("union", left) | ensure_set("union", right)


def difference(left: Any, right: Any) -> frozenset:
    return ensure_set("difference", left) - ensure_set("difference", right)


def _members(name: str, sets: Any) -> list[frozenset]:
    outer = ensure_set(name, sets)
    members = []
    for member in outer:
        if not isinstance(member, (frozenset, set)):
            raise RegoError(f"`{name}` expects set of sets. Got `{format_value(sets)}`")
        members.append(frozenset(member))
    return members


def intersection_of(sets: Any, strict: bool) -> frozenset:
    """Intersection of all sets in a set; empty for an empty set."""
    members = _members("intersection", sets)
    if not members:
        return frozenset()
    return reduce(frozenset.intersection, members)


def union_of(sets: Any, strict: bool) -> frozenset:
    """Union of all sets in a set."""
    return frozenset().union(*_members("union", sets))