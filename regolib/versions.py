"""Semantic version builtins."""

from __future__ import annotations

from typing import Any

import semver

from .values import RegoError, ensure_string


def _parse(text: str) -> semver.Version:
    try:
        return semver.Version.parse(text)
    except (ValueError, TypeError) as exc:
        raise RegoError(f"invalid semantic version `{text}`") from exc


def semver_compare(left: Any, right: Any, strict: bool) -> int:
    """-1, 0 or 1 by version precedence; build metadata is ignored."""
    name = "semver.compare"
    first = _parse(ensure_string(name, left)).replace(build=None)
    second = _parse(ensure_string(name, right)).replace(build=None)
    return first.compare(second)


def semver_is_valid(value: Any, strict: bool) -> bool:
    if strict:
        text = ensure_string("semver.is_valid", value)
    elif isinstance(value, str):
        text = value
    else:
        return False
    try:
        _parse(text)
    except RegoError:
        return False
    return True