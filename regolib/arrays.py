"""Array builtins."""

from __future__ import annotations

from typing import Any

from .values import UNDEFINED, ensure_array, ensure_numeric

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def _as_index(number: int | float) -> int | None:
    if isinstance(number, float):
        if not number.is_integer():
            return None
        number = int(number)
    if not _I64_MIN <= number <= _I64_MAX:
        return None
    return number


def concat(left: Any, right: Any, strict: bool) -> tuple:
    name = "array.concat"
    return ensure_array(name, left) + ensure_array(name, right)


def reverse(array: Any, strict: bool) -> tuple:
    return ensure_array("array.reverse", array)[::-1]


def slice_array(array: Any, start: Any, stop: Any, strict: bool) -> Any:
    """Items from start (inclusive) to stop (exclusive), clamped to the array."""
    name = "array.slice"
    items = ensure_array(name, array)
    first = _as_index(ensure_numeric(name, start))
    last = _as_index(ensure_numeric(name, stop))
    if first is None or last is None:
        return UNDEFINED
    first = max(first, 0)
    last = min(max(last, 0), len(items))
    if first >= last:
        return ()
    return items[first:last]