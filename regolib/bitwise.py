"""Bitwise builtins on integers."""

from __future__ import annotations

import operator
from typing import Any, Callable

from .values import UNDEFINED, ensure_numeric


def _integer(number: int | float) -> int | None:
    if isinstance(number, float):
        return int(number) if number.is_integer() else None
    return number


def _binary(name: str, left: Any, right: Any, op: Callable[[int, int], int]) -> Any:
    a = _integer(ensure_numeric(name, left))
    b = _integer(ensure_numeric(name, right))
    if a is None or b is None:
        return UNDEFINED
    return op(a, b)


def _shift(name: str, left: Any, right: Any, op: Callable[[int, int], int]) -> Any:
    a = _integer(ensure_numeric(name, left))
    b = _integer(ensure_numeric(name, right))
    if a is None or b is None or b < 0:
        return UNDEFINED
    return op(a, b)


def bits_and(left: Any, right: Any, strict: bool) -> Any:
    return _binary("bits.and", left, right, operator.and_)


def bits_lsh(left: Any, right: Any, strict: bool) -> Any:
    return _shift("bits.lsh", left, right, operator.lshift)


def bits_negate(value: Any, strict: bool) -> Any:
    number = _integer(ensure_numeric("bits.negate", value))
    return UNDEFINED if number is None else ~number


def bits_or(left: Any, right: Any, strict: bool) -> Any:
    return _binary("bits.or", left, right, operator.or_)


def bits_rsh(left: Any, right: Any, strict: bool) -> Any:
    return _shift("bits.rsh", left, right, operator.rshift)


def bits_xor(left: Any, right: Any, strict: bool) -> Any:
    return _binary("bits.xor", left, right, operator.xor)