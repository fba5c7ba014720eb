"""Aggregate builtins: count, max, min, product, sort and sum."""

from __future__ import annotations

import math
from typing import Any

from frozendict import frozendict

from .values import UNDEFINED, RegoError, ensure_numeric, format_value, sort_key

_COLLECTIONS = (tuple, list, frozenset, set)


def _require_collection(name: str, value: Any) -> list:
    if isinstance(value, (tuple, list)):
        return list(value)
    if isinstance(value, (frozenset, set)):
        return sorted(value, key=sort_key)
    raise RegoError(f"`{name}` requires array/set argument. Got `{format_value(value)}`.")


def count(value: Any, strict: bool) -> Any:
    """Number of items in a collection, or UTF-16 units in a string."""
    if isinstance(value, _COLLECTIONS) or isinstance(value, (dict, frozendict)):
        return len(value)
    if isinstance(value, str):
        return len(value.encode("utf-16-le")) // 2
    if strict:
        raise RegoError(
            f"`count` requires array/object/set/string argument. Got `{format_value(value)}`."
        )
    return UNDEFINED


def max_of(value: Any, strict: bool) -> Any:
    items = _require_collection("max", value)
    return max(items, key=sort_key) if items else UNDEFINED


def min_of(value: Any, strict: bool) -> Any:
    items = _require_collection("min", value)
    return min(items, key=sort_key) if items else UNDEFINED


def product(value: Any, strict: bool) -> Any:
    items = _require_collection("product", value)
    return math.prod((ensure_numeric("product", item) for item in items), start=1)


def sort(value: Any, strict: bool) -> tuple:
    """Sorted array of the items of an array or set."""
    return tuple(sorted(_require_collection("sort", value), key=sort_key))


def sum_of(value: Any, strict: bool) -> Any:
    items = _require_collection("sum", value)
    return sum((ensure_numeric("sum", item) for item in items), start=0)