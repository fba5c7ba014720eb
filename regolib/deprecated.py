"""Deprecated builtins kept for older policies."""

from __future__ import annotations

from typing import Any

from frozendict import frozendict

from .values import UNDEFINED, RegoError, ensure_set, format_value, sort_key


def _collection(name: str, value: Any) -> list:
    if isinstance(value, (tuple, list, frozenset, set)):
        return list(value)
    raise RegoError(f"`{name}` requires array/set argument. Got `{format_value(value)}`.")


def all_true(collection: Any, strict: bool) -> bool:
    """True when every item is the boolean true."""
    return all(item is True for item in _collection("all", collection))


def any_true(collection: Any, strict: bool) -> bool:
    """True when some item is the boolean true."""
    return any(item is True for item in _collection("any", collection))


def set_diff(left: Any, right: Any, strict: bool) -> frozenset:
    return ensure_set("set_diff", left) - ensure_set("set_diff", right)


def _reject(message: str, strict: bool) -> Any:
    if strict:
        raise RegoError(message)
    return UNDEFINED


def cast_array(value: Any, strict: bool) -> Any:
    if isinstance(value, (tuple, list)):
        return tuple(value)
    if isinstance(value, (frozenset, set)):
        return tuple(sorted(value, key=sort_key))
    return _reject("array required", strict)


def cast_boolean(value: Any, strict: bool) -> Any:
    if isinstance(value, bool):
        return value
    return _reject("boolean required", strict)


def cast_null(value: Any, strict: bool) -> Any:
    if value is None:
        return None
    return _reject("null required", strict)


def cast_object(value: Any, strict: bool) -> Any:
    if isinstance(value, (dict, frozendict)):
        return value
    return _reject("object required", strict)


def cast_set(value: Any, strict: bool) -> Any:
    if isinstance(value, (frozenset, set)):
        return frozenset(value)
    if isinstance(value, (tuple, list)):
        return frozenset(value)
    return _reject("set required", strict)


def cast_string(value: Any, strict: bool) -> Any:
    if isinstance(value, str):
        return value
    return _reject("string required", strict)