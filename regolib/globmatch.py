"""Glob matching with configurable delimiters."""

from __future__ import annotations

import re
from typing import Any

from .values import RegoError, ensure_string, ensure_string_collection

_PLACEHOLDER = "\0"


class _InvalidGlob(Exception):
    pass


def _parse_class(p: str, pos: int) -> tuple[str, int]:
    negate = False
    if pos < len(p) and p[pos] in "!^":
        negate = True
        pos += 1
    items = []
    while pos < len(p) and p[pos] != "]":
        char = p[pos]
        if char == "\\":
            if pos + 1 >= len(p):
                raise _InvalidGlob
            char = p[pos + 1]
            pos += 2
        else:
            pos += 1
        if pos + 1 < len(p) and p[pos] == "-" and p[pos + 1] != "]":
            high = p[pos + 1]
            pos += 2
            if high < char:
                raise _InvalidGlob
            items.append(f"{re.escape(char)}-{re.escape(high)}")
        else:
            items.append(re.escape(char))
    if pos >= len(p) or not items:
        raise _InvalidGlob
    body = "".join(items)
    return (f"[^{body}/]" if negate else f"[{body}]"), pos + 1


def _parse(p: str, pos: int, nested: bool) -> tuple[str, int]:
    out: list[str] = []
    alternatives: list[str] = []
    while pos < len(p):
        char = p[pos]
        if nested and char == ",":
            alternatives.append("".join(out))
            out = []
            pos += 1
        elif nested and char == "}":
            alternatives.append("".join(out))
            return "(?:" + "|".join(alternatives) + ")", pos + 1
        elif char == "\\":
            if pos + 1 >= len(p):
                raise _InvalidGlob
            out.append(re.escape(p[pos + 1]))
            pos += 2
        elif char == "*":
            if p.startswith("**", pos):
                end = pos + 2
                if end < len(p) and p[end] == "*":
                    raise _InvalidGlob
                if pos > 0 and p[pos - 1] != "/":
                    raise _InvalidGlob
                if end < len(p) and p[end] != "/":
                    raise _InvalidGlob
                if end < len(p):
                    out.append("(?:.*/)?")
                    pos = end + 1
                else:
                    out.append(".*")
                    pos = end
            else:
                out.append("[^/]*")
                pos += 1
        elif char == "?":
            out.append("[^/]")
            pos += 1
        elif char == "[":
            cls, pos = _parse_class(p, pos + 1)
            out.append(cls)
        elif char == "{":
            alt, pos = _parse(p, pos + 1, True)
            out.append(alt)
        else:
            out.append(re.escape(char))
            pos += 1
    if nested:
        raise _InvalidGlob
    return "".join(out), pos


def _make_glob(pattern: str) -> re.Pattern:
    try:
        regex, _ = _parse(pattern, 0, False)
    except _InvalidGlob as exc:
        raise RegoError("invalid glob") from exc
    return re.compile(regex, re.DOTALL)


def _suppress_slash(text: str) -> str:
    return text.replace("/", _PLACEHOLDER)


def _unix_style(text: str, delimiters: list[str]) -> str:
    if _PLACEHOLDER in text:
        raise RegoError("string contains internal glob placeholder")
    if "/" not in delimiters:
        text = _suppress_slash(text)
    for delimiter in delimiters:
        if delimiter == ":":
            text = text.replace(delimiter, _PLACEHOLDER)
        elif delimiter != "/":
            text = text.replace(delimiter, f"/{delimiter}/")
    return text


def glob_match(pattern: Any, delimiters: Any, value: Any, strict: bool) -> bool:
    """Match value against a glob; wildcards stop at the delimiters."""
    name = "glob.match"
    pattern = ensure_string(name, pattern)
    value = ensure_string(name, value)

    if delimiters is None:
        glob = _make_glob(_suppress_slash(pattern))
        return glob.fullmatch(_suppress_slash(value)) is not None

    if not isinstance(delimiters, (tuple, list)):
        raise RegoError(f"{name} requires string array")
    names = ensure_string_collection(name, delimiters)
    if any(len(d.encode("utf-8")) > 1 for d in names):
        raise RegoError("delimiters must be single character")
    chars = [d for d in names if d] or ["."]

    glob = _make_glob(_unix_style(pattern, chars))
    return glob.fullmatch(_unix_style(value, chars)) is not None


def quote_meta(pattern: Any, strict: bool) -> str:
    """Escape the asterisks of a valid glob."""
    pattern = ensure_string("glob.quote_meta", pattern)
    _make_glob(pattern)
    return pattern.replace("*", "\\*")