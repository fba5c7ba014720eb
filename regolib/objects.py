"""Object builtins: filtering, removal, lookup, subsets, unions and JSON schema."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

import jsonschema
from frozendict import frozendict

from .values import (
    UNDEFINED,
    RegoError,
    ensure_array,
    ensure_object,
    from_json,
    sort_key,
    to_json,
)

_ARRAYS = (tuple, list)
_SETS = (frozenset, set)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _index(value: Any, key: Any) -> Any:
    """Look up key in an array or object; undefined when absent."""
    if isinstance(value, _ARRAYS):
        if _is_number(key) and float(key).is_integer():
            position = int(key)
            if 0 <= position < len(value):
                return value[position]
        return UNDEFINED
    if isinstance(value, Mapping):
        try:
            return value[key]
        except (KeyError, TypeError):
            return UNDEFINED
    return UNDEFINED


def _sorted_items(mapping: Mapping) -> list[tuple[Any, Any]]:
    return [(key, mapping[key]) for key in sorted(mapping, key=sort_key)]


def _is_marker_only(filters: Mapping) -> bool:
    return len(filters) == 1 and None in filters and filters[None] is None


def _has_marker(filters: Mapping) -> bool:
    return None in filters and filters[None] is None


def _filter_value(value: Any, filters: Any) -> Any:
    if not isinstance(filters, Mapping) or not filters or _is_marker_only(filters):
        return value

    if isinstance(value, _ARRAYS):
        items = []
        for idx, sub_filter in _sorted_items(filters):
            if not isinstance(idx, str):
                continue
            try:
                position = from_json(idx)
            except RegoError:
                continue
            item = _filter_value(_index(value, position), sub_filter)
            if item is not UNDEFINED:
                items.append(item)
        return tuple(items)

    if isinstance(value, _SETS):
        members = set()
        for member, sub_filter in _sorted_items(filters):
            if member in value:
                item = _filter_value(member, sub_filter)
                if item is not UNDEFINED:
                    members.add(item)
        return frozenset(members)

    if isinstance(value, Mapping):
        fields = {}
        for key, sub_filter in _sorted_items(filters):
            item = _filter_value(_index(value, key), sub_filter)
            if item is not UNDEFINED:
                fields[key] = item
        return frozendict(fields)

    return UNDEFINED


def _remove_value(value: Any, filters: Any) -> Any:
    if not isinstance(filters, Mapping) or not filters:
        return value
    if _has_marker(filters):
        return UNDEFINED

    if isinstance(value, _ARRAYS):
        items = []
        for idx, item in enumerate(value):
            key = str(idx)
            if key in filters:
                kept = _remove_value(item, filters[key])
                if kept is not UNDEFINED:
                    items.append(kept)
            else:
                items.append(item)
        return tuple(items)

    if isinstance(value, _SETS):
        members = set()
        for item in value:
            if item in filters:
                kept = _remove_value(item, filters[item])
                if kept is not UNDEFINED:
                    members.add(kept)
            else:
                members.add(item)
        return frozenset(members)

    if isinstance(value, Mapping):
        fields = {}
        for key, item in value.items():
            if key in filters:
                kept = _remove_value(item, filters[key])
                if kept is not UNDEFINED:
                    fields[key] = kept
            else:
                fields[key] = item
        return frozendict(fields)

    return UNDEFINED


def _freeze(node: Any) -> Any:
    if isinstance(node, dict):
        return frozendict({key: _freeze(value) for key, value in node.items()})
    return node


def _insert_path(tree: dict, components: Iterable[Any]) -> None:
    node: Any = tree
    for component in components:
        if not isinstance(node, dict):
            break
        node = node.setdefault(component, {})
    if isinstance(node, dict):
        node[None] = None


def _merge_filters(name: str, paths: Iterable[Any]) -> frozendict:
    tree: dict = {}
    for path in paths:
        if isinstance(path, str):
            _insert_path(tree, path.split("/"))
        elif isinstance(path, _ARRAYS):
            _insert_path(tree, path)
        else:
            raise RegoError(
                f"`{name}` requires path to be '/' separated string "
                "or array of path components."
            )
    return _freeze(tree)


def _path_filters(name: str, paths: Any) -> frozendict:
    if isinstance(paths, _ARRAYS):
        return _merge_filters(name, paths)
    if isinstance(paths, _SETS):
        return _merge_filters(name, sorted(paths, key=sort_key))
    raise RegoError(f"`{name}` requires set/array argument")


def json_filter(obj: Any, paths: Any, strict: bool) -> Any:
    """Keep only the parts of an object named by the given paths."""
    name = "json.filter"
    obj = ensure_object(name, obj)
    filters = _path_filters(name, paths)
    if not filters:
        return frozendict()
    return _filter_value(obj, filters)


def json_remove(obj: Any, paths: Any, strict: bool) -> Any:
    """Drop the parts of an object named by the given paths."""
    name = "json.remove"
    obj = ensure_object(name, obj)
    filters = _path_filters(name, paths)
    return _remove_value(obj, filters)


def _key_selector(name: str, keys: Any) -> frozenset | Mapping:
    if isinstance(keys, _ARRAYS):
        return frozenset(keys)
    if isinstance(keys, _SETS):
        return frozenset(keys)
    if isinstance(keys, Mapping):
        return keys
    raise RegoError(f"`{name}` requires array/object/set argument")


def object_filter(obj: Any, keys: Any, strict: bool) -> frozendict:
    """Entries of an object whose keys are among the given keys."""
    name = "object.filter"
    obj = ensure_object(name, obj)
    selected = _key_selector(name, keys)
    return frozendict({k: v for k, v in obj.items() if k in selected})


def object_remove(obj: Any, keys: Any, strict: bool) -> frozendict:
    """Entries of an object whose keys are not among the given keys."""
    name = "object.remove"
    obj = ensure_object(name, obj)
    selected = _key_selector(name, keys)
    return frozendict({k: v for k, v in obj.items() if k not in selected})


def object_get(obj: Any, key: Any, default: Any, strict: bool) -> Any:
    """Value at key, or along an array of keys; default when missing."""
    obj = ensure_object("object.get", obj)
    if isinstance(key, _ARRAYS):
        current: Any = obj
        for component in key:
            current = _index(current, component)
            if current is UNDEFINED:
                return default
        return current
    try:
        return obj[key]
    except (KeyError, TypeError):
        return default


def object_keys(obj: Any, strict: bool) -> frozenset:
    return frozenset(ensure_object("object.keys", obj).keys())


def _same(left: Any, right: Any) -> bool:
    return sort_key(left) == sort_key(right)


def _is_subset(sup: Any, sub: Any) -> bool:
    if isinstance(sup, Mapping) and isinstance(sub, Mapping):
        return all(
            key in sup and _is_subset(sup[key], value) for key, value in sub.items()
        )
    if isinstance(sup, _SETS) and isinstance(sub, _SETS):
        return frozenset(sub) <= frozenset(sup)
    if isinstance(sup, _ARRAYS) and isinstance(sub, _ARRAYS):
        width = len(sub)
        if width == 0:
            return True
        return any(
            _same(tuple(sup[start : start + width]), tuple(sub))
            for start in range(len(sup) - width + 1)
        )
    if isinstance(sup, _ARRAYS) and isinstance(sub, _SETS):
        return _is_subset(frozenset(sup), sub)
    return _same(sup, sub)


def object_subset(sup: Any, sub: Any, strict: bool) -> bool:
    """True when sub is contained in sup, recursing into objects."""
    return _is_subset(sup, sub)


def _union(left: Any, right: Any) -> Any:
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        merged = dict(left)
        for key, value in right.items():
            merged[key] = _union(left[key], value) if key in left else value
        return frozendict(merged)
    return right


def object_union(left: Any, right: Any, strict: bool) -> Any:
    """Recursive merge of two objects; the right side wins on conflicts."""
    name = "object.union"
    ensure_object(name, left)
    ensure_object(name, right)
    return _union(left, right)


def object_union_n(objects: Any, strict: bool) -> Any:
    """Recursive merge of an array of objects, later ones winning."""
    name = "object.union_n"
    items = ensure_array(name, objects)
    result: Any = frozendict()
    for idx, item in enumerate(items):
        if not isinstance(item, Mapping):
            if strict:
                raise RegoError(f"item at index {idx} is not an object")
            return UNDEFINED
        result = _union(result, item)
    return result


def _compile_schema(schema: Any):
    text = schema if isinstance(schema, str) else to_json(schema)
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RegoError("not a valid json schema") from exc
    validator_cls = jsonschema.validators.validator_for(document)
    try:
        validator_cls.check_schema(document)
    except jsonschema.exceptions.SchemaError as exc:
        raise RegoError(exc.message) from exc
    return validator_cls(document)


def json_verify_schema(schema: Any, strict: bool) -> tuple:
    """(true, null) for a valid schema, else (false, reason)."""
    try:
        _compile_schema(schema)
    except RegoError as exc:
        if strict:
            raise RegoError(f"invalid schema: {exc}") from exc
        return (False, str(exc))
    return (True, None)


def json_match_schema(document: Any, schema: Any, strict: bool) -> tuple:
    """(true, null) when document satisfies schema, else (false, errors)."""
    instance = json.loads(to_json(document))
    try:
        validator = _compile_schema(schema)
    except RegoError as exc:
        if strict:
            raise RegoError(f"invalid schema: {exc}") from exc
        return (False, str(exc))
    errors = tuple(error.message for error in validator.iter_errors(instance))
    if not errors:
        return (True, None)
    return (False, errors)