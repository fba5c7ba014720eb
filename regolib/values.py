"""The Rego value model.

Values are plain immutable Python data: ``None``, ``bool``, ``int``/``float``,
``str``, ``tuple`` for arrays, ``frozenset`` for sets and ``frozendict`` for
objects.  ``UNDEFINED`` stands for the absence of a value.
"""

from __future__ import annotations

import json
import math
import operator
from collections.abc import Mapping, Sequence
from collections.abc import Set as AbstractSet
from typing import Any

from frozendict import frozendict

from .ast import BoolOp

_MAPPINGS = (Mapping, frozendict)
_ARRAYS = (tuple, list)
_SETS = (frozenset, set)


class UndefinedType:
    """Singleton type of the undefined value."""

    _instance: "UndefinedType | None" = None

    def __new__(cls) -> "UndefinedType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (UndefinedType, ())


UNDEFINED = UndefinedType()


class RegoError(Exception):
    """Raised when a policy operation fails."""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def sort_key(value: Any) -> tuple:
    """Key that orders values: null, bool, number, string, array, object, set."""
    if value is None:
        return (0,)
    if isinstance(value, bool):
        return (1, value)
    if _is_number(value):
        return (2, value)
    if isinstance(value, str):
        return (3, value)
    if isinstance(value, _ARRAYS):
        return (4, tuple(sort_key(item) for item in value))
    if isinstance(value, _MAPPINGS):
        return (5, tuple(sorted((sort_key(k), sort_key(v)) for k, v in value.items())))
    if isinstance(value, _SETS):
        return (6, tuple(sorted(sort_key(item) for item in value)))
    if value is UNDEFINED:
        return (7,)
    raise TypeError(f"not a rego value: {value!r}")


_COMPARISONS = {
    BoolOp.EQ: operator.eq,
    BoolOp.NE: operator.ne,
    BoolOp.LT: operator.lt,
    BoolOp.LE: operator.le,
    BoolOp.GT: operator.gt,
    BoolOp.GE: operator.ge,
}


def compare(op: BoolOp, left: Any, right: Any) -> bool:
    """Compare two values with the total order used across kinds."""
    return _COMPARISONS[op](sort_key(left), sort_key(right))


def type_name(value: Any) -> str:
    """Name of the kind of a value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if _is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, _ARRAYS):
        return "array"
    if isinstance(value, _MAPPINGS):
        return "object"
    if isinstance(value, _SETS):
        return "set"
    if value is UNDEFINED:
        return "undefined"
    raise TypeError(f"not a rego value: {value!r}")


def from_python(value: Any) -> Any:
    """Convert ordinary Python data into an immutable value."""
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return value
    if isinstance(value, (bytes, bytearray)):
        raise TypeError("object cannot be converted to RegoValue")
    if isinstance(value, _MAPPINGS):
        return frozendict({from_python(k): from_python(v) for k, v in value.items()})
    if isinstance(value, AbstractSet):
        return frozenset(from_python(item) for item in value)
    if isinstance(value, Sequence):
        return tuple(from_python(item) for item in value)
    raise TypeError("object cannot be converted to RegoValue")


def _frozen(value: Any) -> Any:
    return from_python(to_python(value))


def to_python(value: Any) -> Any:
    """Convert a value into mutable Python data; undefined becomes None."""
    if value is UNDEFINED or value is None:
        return None
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, _MAPPINGS):
        return {_frozen(k): to_python(v) for k, v in value.items()}
    if isinstance(value, _SETS):
        return {_frozen(item) for item in value}
    if isinstance(value, _ARRAYS):
        return [to_python(item) for item in value]
    raise TypeError(f"not a rego value: {value!r}")


def _reject_constant(name: str) -> Any:
    raise RegoError(f"invalid json number `{name}`")


def from_json(text: str) -> Any:
    """Parse JSON text into a value."""
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise RegoError(f"invalid json: {exc}") from exc
    return from_python(data)


def _encode(value: Any, undefined: str | None) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise RegoError(f"cannot serialize non-finite number {value}")
        return json.dumps(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, _ARRAYS):
        return "[" + ",".join(_encode(item, undefined) for item in value) + "]"
    if isinstance(value, _MAPPINGS):
        parts = []
        for key in sorted(value, key=sort_key):
            key_text = key if isinstance(key, str) else _encode(key, undefined)
            parts.append(
                json.dumps(key_text, ensure_ascii=False) + ":" + _encode(value[key], undefined)
            )
        return "{" + ",".join(parts) + "}"
    if isinstance(value, _SETS):
        items = sorted(value, key=sort_key)
        return "[" + ",".join(_encode(item, undefined) for item in items) + "]"
    if value is UNDEFINED:
        if undefined is None:
            raise RegoError("cannot serialize undefined value")
        return undefined
    raise TypeError(f"not a rego value: {value!r}")


def to_json(value: Any) -> str:
    """Serialize a value as compact JSON; sets become arrays."""
    return _encode(value, None)


def format_value(value: Any) -> str:
    """Render a value for messages."""
    return _encode(value, "<undefined>")


def _fail(name: str, expected: str, value: Any):
    raise RegoError(f"`{name}` expects {expected} argument. Got `{format_value(value)}` instead")


def ensure_numeric(name: str, value: Any) -> int | float:
    if not _is_number(value):
        _fail(name, "numeric", value)
    return value


def ensure_string(name: str, value: Any) -> str:
    if not isinstance(value, str):
        _fail(name, "string", value)
    return value


def ensure_array(name: str, value: Any) -> tuple:
    if not isinstance(value, _ARRAYS):
        _fail(name, "array", value)
    return tuple(value)


def ensure_set(name: str, value: Any) -> frozenset:
    if not isinstance(value, _SETS):
        _fail(name, "set", value)
    return frozenset(value)


def ensure_object(name: str, value: Any) -> frozendict:
    if not isinstance(value, _MAPPINGS):
        _fail(name, "object", value)
    return value if isinstance(value, frozendict) else frozendict(value)


def ensure_string_collection(name: str, value: Any) -> list[str]:
    """Strings of an array (in order) or a set (in value order)."""
    if isinstance(value, _ARRAYS):
        items = list(value)
    elif isinstance(value, _SETS):
        items = sorted(value, key=sort_key)
    else:
        _fail(name, "array/set of strings", value)
    for item in items:
        if not isinstance(item, str):
            raise RegoError(
                f"`{name}` expects a collection of strings. "
                f"Element `{format_value(item)}` is not a string."
            )
    return items