"""Arithmetic and numeric builtins."""

from __future__ import annotations

import math
import random
from typing import Any

from .ast import ArithOp
from .values import UNDEFINED, RegoError, ensure_numeric, ensure_string


def _is_integral(number: int | float) -> bool:
    return isinstance(number, int) or number.is_integer()


def _as_int(number: int | float) -> int:
    return number if isinstance(number, int) else int(number)


def _truncated_mod(a: int, b: int) -> int:
    remainder = abs(a) % abs(b)
    return -remainder if a < 0 else remainder


def _divide(a: int | float, b: int | float) -> int | float:
    if isinstance(a, int) and isinstance(b, int) and a % b == 0:
        return a // b
    return a / b


def arithmetic_operation(op: ArithOp, left: Any, right: Any, strict: bool) -> Any:
    """Apply an arithmetic operator to two numbers."""
    op_name = op.name.lower()
    a = ensure_numeric(op_name, left)
    b = ensure_numeric(op_name, right)

    if op is ArithOp.ADD:
        return a + b
    if op is ArithOp.SUB:
        return a - b
    if op is ArithOp.MUL:
        return a * b
    if op is ArithOp.DIV:
        if b == 0:
            if strict:
                raise RegoError("divide by zero")
            return UNDEFINED
        return _divide(a, b)
    if op is ArithOp.MOD:
        if b == 0:
            if strict:
                raise RegoError("modulo by zero")
            return UNDEFINED
        if not _is_integral(a) or not _is_integral(b):
            raise RegoError("modulo on floating-point number")
        return _truncated_mod(_as_int(a), _as_int(b))
    raise RegoError(f"unsupported arithmetic operator {op}")


def abs_value(value: Any, strict: bool) -> int | float:
    return abs(ensure_numeric("abs", value))


def ceil(value: Any, strict: bool) -> int:
    return math.ceil(ensure_numeric("ceil", value))


def floor(value: Any, strict: bool) -> int:
    return math.floor(ensure_numeric("floor", value))


def round_value(value: Any, strict: bool) -> int:
    """Round to the nearest integer, halves away from zero."""
    number = ensure_numeric("round", value)
    if isinstance(number, int):
        return number
    return int(math.copysign(math.floor(abs(number) + 0.5), number))


def _require_integer(number: int | float, strict: bool) -> int | None:
    if _is_integral(number):
        return _as_int(number)
    if strict:
        raise RegoError("operand must be integer")
    return None


def numbers_range(start: Any, stop: Any, strict: bool) -> Any:
    """Integers from start to stop inclusive, counting up or down."""
    name = "numbers.range"
    first = _require_integer(ensure_numeric(name, start), strict)
    if first is None:
        return UNDEFINED
    last = _require_integer(ensure_numeric(name, stop), strict)
    if last is None:
        return UNDEFINED
    step = 1 if last >= first else -1
    return tuple(range(first, last + step, step))


def range_step(start: Any, stop: Any, step: Any, strict: bool) -> Any:
    """Integers from start towards stop inclusive, moving by step."""
    name = "numbers.range_step"
    first = _require_integer(ensure_numeric(name, start), strict)
    if first is None:
        return UNDEFINED
    last = _require_integer(ensure_numeric(name, stop), strict)
    if last is None:
        return UNDEFINED
    increment = ensure_numeric(name, step)
    if not _is_integral(increment) or increment <= 0:
        if strict:
            raise RegoError("step must be a positive integer")
        return UNDEFINED
    increment = _as_int(increment)
    if last >= first:
        return tuple(range(first, last + 1, increment))
    return tuple(range(first, last - 1, -increment))


def intn(seed: Any, n: Any, strict: bool) -> Any:
    """A random integer in [0, n)."""
    name = "rand.intn"
    ensure_string(name, seed)
    bound = ensure_numeric(name, n)
    if not _is_integral(bound) or bound < 0:
        return UNDEFINED
    bound = _as_int(bound)
    if bound == 0:
        return 0
    return random.randrange(bound)