"""Regular-expression builtins."""

from __future__ import annotations

import re
from itertools import islice
from typing import Any

from .values import UNDEFINED, RegoError, ensure_numeric, ensure_string

_REPLACEMENT_REF = re.compile(r"\$(?:\$|\{([^}]*)\}|([0-9A-Za-z_]+))")


def _compile(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise RegoError("invalid regex") from exc


def _limit(n: int | float) -> int | None:
    if isinstance(n, float) and not n.is_integer():
        raise RegoError("n must be an integer")
    n = int(n)
    return None if n < 0 else n


def find_all_string_submatch_n(pattern: Any, value: Any, n: Any, strict: bool) -> tuple:
    """Up to n matches, each as the full match followed by its groups."""
    name = "regex.find_all_string_submatch_n"
    pattern = ensure_string(name, pattern)
    value = ensure_string(name, value)
    limit = ensure_numeric(name, n)
    compiled = _compile(pattern)
    limit = _limit(limit)
    return tuple(
        tuple(group or "" for group in (m.group(0), *m.groups()))
        for m in islice(compiled.finditer(value), limit)
    )


def find_n(pattern: Any, value: Any, n: Any, strict: bool) -> tuple:
    """Up to n matched substrings; all of them when n is negative."""
    name = "regex.find_n"
    pattern = ensure_string(name, pattern)
    value = ensure_string(name, value)
    limit = ensure_numeric(name, n)
    compiled = _compile(pattern)
    limit = _limit(limit)
    return tuple(m.group(0) for m in islice(compiled.finditer(value), limit))


def is_valid(pattern: Any, strict: bool) -> bool:
    if not isinstance(pattern, str):
        return False
    try:
        re.compile(pattern)
    except re.error:
        return False
    return True


def regex_match(pattern: Any, value: Any, strict: bool) -> bool:
    name = "regex.match"
    pattern = ensure_string(name, pattern)
    value = ensure_string(name, value)
    return _compile(pattern).search(value) is not None


def _expand(match: re.Match, template: str) -> str:
    def substitute(ref: re.Match) -> str:
        if ref.group(0) == "$$":
            return "$"
        name = ref.group(1) if ref.group(1) is not None else ref.group(2)
        key: int | str = int(name) if name.isdigit() else name
        try:
            return match.group(key) or ""
        except IndexError:
            return ""

    return _REPLACEMENT_REF.sub(substitute, template)


def regex_replace(s: Any, pattern: Any, value: Any, strict: bool) -> Any:
    """Replace every match; ``$1`` and ``${name}`` refer to groups."""
    name = "regex.replace"
    s = ensure_string(name, s)
    pattern = ensure_string(name, pattern)
    value = ensure_string(name, value)
    try:
        compiled = re.compile(pattern)
    except re.error:
        return UNDEFINED
    return compiled.sub(lambda m: _expand(m, value), s)


def regex_split(pattern: Any, value: Any, strict: bool) -> tuple:
    """Pieces of value between matches of pattern."""
    name = "regex.split"
    pattern = ensure_string(name, pattern)
    value = ensure_string(name, value)
    compiled = _compile(pattern)
    pieces = []
    last = 0
    for m in compiled.finditer(value):
        pieces.append(value[last : m.start()])
        last = m.end()
    pieces.append(value[last:])
    return tuple(pieces)


def template_match(
    template: Any, value: Any, delimiter_start: Any, delimiter_end: Any, strict: bool
) -> Any:
    """Match value against a template holding delimited regular expressions."""
    name = "regex.template_match"
    template = ensure_string(name, template)
    value = ensure_string(name, value)
    start_delim = ensure_string(name, delimiter_start)
    end_delim = ensure_string(name, delimiter_end)

    while True:
        start = template.find(start_delim)
        end = template.find(end_delim)
        if start < 0 or end < 0:
            break
        if start >= end:
            return UNDEFINED
        if template[:start] != value[:start]:
            return False
        compiled = _compile(template[start + len(start_delim) : end])
        value = value[start:]
        m = compiled.match(value)
        if m is None:
            return False
        value = value[m.end() :]
        template = template[end + len(end_delim) :]

    return template == value