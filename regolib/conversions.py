"""Conversion, debugging and HTTP builtins."""

from __future__ import annotations

import sys
from typing import Any

from .values import UNDEFINED, RegoError, format_value, from_json

_MAX_PRINT_ARGS = 255


def to_number(value: Any, strict: bool) -> Any:
    """Convert null, bool, number or numeric string to a number."""
    if value is None or value is False:
        return 0
    if value is True:
        return 1
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            parsed = from_json(value)
        except RegoError:
            parsed = None
        if isinstance(parsed, (int, float)) and not isinstance(parsed, bool):
            return parsed
        raise RegoError("could not parse string as number")
    raise RegoError("`to_number` expects bool/number/string/null argument.")


def print_values(*args: Any, strict: bool = False) -> bool:
    """Write the arguments, space separated, to standard error."""
    if len(args) > _MAX_PRINT_ARGS:
        raise RegoError("print supports up to 100 arguments")
    parts = []
    for arg in args:
        if arg is UNDEFINED:
            parts.append("<undefined>")
        elif isinstance(arg, str):
            parts.append(arg)
        else:
            parts.append(format_value(arg))
    if parts:
        print(" ".join(parts), file=sys.stderr)
    return True


def http_send(request: Any, strict: bool) -> Any:
    """HTTP requests are not performed; the result is always undefined."""
    return UNDEFINED