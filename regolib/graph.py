"""Graph builtins: reachability, reachable paths and value walking."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .values import UNDEFINED, RegoError, ensure_object, format_value, sort_key

_ARRAYS = (tuple, list)
_SETS = (frozenset, set)
_MISSING = object()


def _initial_vertices(name: str, initial: Any, strict: bool) -> list | None:
    if isinstance(initial, _ARRAYS):
        return list(initial)
    if isinstance(initial, _SETS):
        return sorted(initial, key=sort_key)
    if strict:
        raise RegoError("initial vertices must be array/set")
    return None


def reachable(graph: Any, initial: Any, strict: bool) -> Any:
    """Set of vertices reachable from the initial ones."""
    name = "graph.reachable"
    graph = ensure_object(name, graph)
    worklist = _initial_vertices(name, initial, strict)
    if worklist is None:
        return UNDEFINED

    seen: set = set()
    while worklist:
        vertex = worklist.pop()
        if vertex in seen:
            continue
        neighbors = graph.get(vertex, _MISSING)
        if neighbors is _MISSING:
            continue
        if isinstance(neighbors, _ARRAYS):
            worklist.extend(neighbors)
        elif isinstance(neighbors, _SETS):
            worklist.extend(sorted(neighbors, key=sort_key))
        seen.add(vertex)
    return frozenset(seen)


def _visit(
    graph: Mapping, visited: set, node: Any, path: list, paths: set
) -> None:
    if isinstance(node, str) and node == "":
        if path:
            paths.add(tuple(path))
        return

    neighbors = graph.get(node, _MISSING)
    if neighbors is _MISSING:
        if path:
            paths.add(tuple(path))
        return

    if node in visited:
        paths.add(tuple(path))
        return

    path.append(node)
    visited.add(node)
    if isinstance(neighbors, _ARRAYS):
        children = list(neighbors)
    elif isinstance(neighbors, _SETS):
        children = sorted(neighbors, key=sort_key)
    elif neighbors is None:
        children = []
    else:
        raise RegoError(f"neighbors for node `{format_value(node)}` must be array/set.")

    for child in reversed(children):
        _visit(graph, visited, child, path, paths)
    if not children and path:
        paths.add(tuple(path))

    visited.remove(node)
    path.pop()


def reachable_paths(graph: Any, initial: Any, strict: bool) -> Any:
    """Set of maximal paths (as arrays) starting at the initial vertices."""
    name = "graph.reachable_paths"
    graph = ensure_object(name, graph)
    starts = _initial_vertices(name, initial, strict)
    if starts is None:
        return UNDEFINED

    paths: set = set()
    for node in starts:
        _visit(graph, set(), node, [], paths)
    return frozenset(paths)


def _walk(path: list, value: Any, out: list) -> None:
    out.append((tuple(path), value))
    if isinstance(value, _ARRAYS):
        children = list(enumerate(value))
    elif isinstance(value, _SETS):
        children = [(item, item) for item in sorted(value, key=sort_key)]
    elif isinstance(value, Mapping):
        children = [(key, value[key]) for key in sorted(value, key=sort_key)]
    else:
        return
    for key, child in children:
        path.append(key)
        _walk(path, child, out)
        path.pop()


def walk(value: Any, strict: bool) -> tuple:
    """Every (path, value) pair in a value, parents before children."""
    out: list = []
    _walk([], value, out)
    return tuple(out)