"""String builtins, including a Go-style ``sprintf``."""

from __future__ import annotations

import enum
import json
import math
import struct
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .values import (
    UNDEFINED,
    RegoError,
    ensure_array,
    ensure_numeric,
    ensure_object,
    ensure_string,
    ensure_string_collection,
    sort_key,
)

_DIGITS = "0123456789"
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_COLLECTIONS = (tuple, list, frozenset, set)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integral(number: int | float) -> bool:
    return isinstance(number, int) or number.is_integer()


def _as_i64(number: int | float) -> int | None:
    if isinstance(number, float):
        if not number.is_integer():
            return None
        number = int(number)
    if not _I64_MIN <= number <= _I64_MAX:
        return None
    return number


def _to_decimal(number: int | float) -> Decimal:
    return Decimal(number) if isinstance(number, int) else Decimal(repr(number))


def _format_decimal(number: int | float) -> str:
    """Plain decimal notation; integral values print without a fraction."""
    if isinstance(number, int):
        return str(number)
    if number.is_integer():
        return str(int(number))
    return format(_to_decimal(number), "f")


def _format_fixed(number: int | float, decimals: int) -> str:
    return f"{_to_decimal(number):.{decimals}f}"


def _format_scientific(number: int | float) -> str:
    """Shortest mantissa with a bare exponent, e.g. ``1.5e3``."""
    if isinstance(number, float) and not math.isfinite(number):
        return "NaN" if math.isnan(number) else ("-inf" if number < 0 else "inf")
    sign, digits, exponent = _to_decimal(number).as_tuple()
    prefix = "-" if sign else ""
    digits = list(digits)
    if not any(digits):
        return f"{prefix}0e0"
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    power = exponent + len(digits) - 1
    mantissa = str(digits[0])
    if len(digits) > 1:
        mantissa += "." + "".join(str(d) for d in digits[1:])
    return f"{prefix}{mantissa}e{power}"


def _to_string(value: Any, unescape: bool) -> str:
    if value is UNDEFINED:
        return "#undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False) if unescape else value
    if _is_number(value):
        return _format_decimal(value)
    if isinstance(value, (tuple, list)):
        return "[" + ", ".join(_to_string(item, True) for item in value) + "]"
    if isinstance(value, (frozenset, set)):
        items = sorted(value, key=sort_key)
        return "{" + ", ".join(_to_string(item, True) for item in items) + "}"
    if isinstance(value, Mapping):
        keys = sorted(value, key=sort_key)
        return (
            "{"
            + ", ".join(f"{_to_string(k, True)}: {_to_string(value[k], True)}" for k in keys)
            + "}"
        )
    raise RegoError(f"not a rego value: {value!r}")


def concat(delimiter: Any, collection: Any, strict: bool) -> str:
    name = "concat"
    delimiter = ensure_string(name, delimiter)
    return delimiter.join(ensure_string_collection(name, collection))


def contains(s: Any, sub: Any, strict: bool) -> bool:
    name = "contains"
    return ensure_string(name, sub) in ensure_string(name, s)


def endswith(s: Any, suffix: Any, strict: bool) -> bool:
    name = "endswith"
    return ensure_string(name, s).endswith(ensure_string(name, suffix))


def startswith(s: Any, prefix: Any, strict: bool) -> bool:
    name = "startswith"
    return ensure_string(name, s).startswith(ensure_string(name, prefix))


_BASES = {2: "b", 8: "o", 10: "d", 16: "x"}


def format_int(number: Any, base: Any, strict: bool) -> Any:
    """Render the floor of a number's magnitude in base 2, 8, 10 or 16."""
    name = "format_int"
    n = ensure_numeric(name, number)
    sign = ""
    if n < 0:
        n = abs(n)
        sign = "-"
    n = math.floor(n)
    base_value = ensure_numeric(name, base)
    spec = None
    if _is_integral(base_value) and base_value >= 0:
        spec = _BASES.get(int(base_value))
    if spec is None:
        if strict:
            raise RegoError(f"`{name}` expects base to be one of 2, 8, 10, 16")
        return UNDEFINED
    return sign + format(n, spec)


def indexof(s: Any, sub: Any, strict: bool) -> int:
    """Character position of the first occurrence of sub, or -1."""
    name = "indexof"
    s = ensure_string(name, s)
    sub = ensure_string(name, sub)
    return next((pos for pos in range(len(s)) if s.startswith(sub, pos)), -1)


def indexof_n(s: Any, sub: Any, strict: bool) -> tuple:
    """Character positions of every (possibly overlapping) occurrence of sub."""
    name = "indexof_n"
    s = ensure_string(name, s)
    sub = ensure_string(name, sub)
    return tuple(pos for pos in range(len(s)) if s.startswith(sub, pos))


def lower(s: Any, strict: bool) -> str:
    return ensure_string("lower", s).lower()


def upper(s: Any, strict: bool) -> str:
    return ensure_string("upper", s).upper()


def replace(s: Any, old: Any, new: Any, strict: bool) -> str:
    name = "replace"
    s = ensure_string(name, s)
    return s.replace(ensure_string(name, old), ensure_string(name, new))


def split(s: Any, delimiter: Any, strict: bool) -> tuple:
    """Pieces of s between delimiters; an empty delimiter splits into characters."""
    name = "split"
    s = ensure_string(name, s)
    delimiter = ensure_string(name, delimiter)
    if not delimiter:
        return ("", *s, "")
    return tuple(s.split(delimiter))


class _WidthKind(enum.Enum):
    LEADING_ZEROS = "zeros"
    CELL = "cell"
    DECIMALS = "decimals"


@dataclass(frozen=True)
class _Width:
    kind: _WidthKind
    size: int


def _apply_width(width: _Width | None, text: str) -> str:
    if width is None or width.size <= len(text):
        return text
    if width.kind is _WidthKind.LEADING_ZEROS:
        return "0" * (width.size - len(text)) + text
    if width.kind is _WidthKind.CELL:
        return " " * (width.size - len(text)) + text
    return text


class _Cursor:
    """Character iterator with one character of look-ahead."""

    _END = object()

    def __init__(self, text: str) -> None:
        self._chars: Iterator[str] = iter(text)
        self._ahead: Any = self._END

    def peek(self) -> str | None:
        if self._ahead is self._END:
            self._ahead = next(self._chars, None)
        return self._ahead

    def next(self) -> str | None:
        if self._ahead is not self._END:
            char, self._ahead = self._ahead, self._END
            return char
        return next(self._chars, None)


def _float_exponent_bits(value: float) -> int:
    return (struct.unpack("<Q", struct.pack("<d", value))[0] >> 52) & 0x7FF


def _format_general(magnitude: int | float, upper_case: bool) -> str:
    try:
        value = float(magnitude)
    except OverflowError as exc:
        raise RegoError("cannot print large float using g format specified") from exc
    if _float_exponent_bits(value) > 32:
        text = _format_scientific(value)
        return text.replace("e", "E") if upper_case else text
    if value == 0:
        return "0"
    return format(Decimal(repr(value)), "f")


def _format_number(
    verb: str, number: int | float, width: _Width | None, sign: str
) -> str | None:
    magnitude = abs(number)
    if _is_integral(number):
        n = int(magnitude)
        if verb == "b":
            return sign + format(n, "b")
        if verb == "c":
            code = int(number)
            if code < 0 or code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
                raise RegoError(
                    f"invalid value {_format_decimal(number)} for format verb c."
                )
            return chr(code)
        if verb == "d":
            return sign + _apply_width(width, str(n))
        if verb == "o":
            return sign + _apply_width(width, "0O" + format(n, "o"))
        if verb == "O":
            return sign + _apply_width(width, "0o" + format(n, "o"))
        if verb == "x":
            return sign + _apply_width(width, format(n, "x"))
        if verb == "X":
            return sign + _apply_width(width, format(n, "X"))
    if verb == "e":
        return _format_scientific(number)
    if verb == "E":
        return _format_scientific(number).replace("e", "E")
    if verb in "fF":
        if width is not None and width.kind is _WidthKind.DECIMALS:
            return _format_fixed(number, width.size)
        return _apply_width(width, _format_decimal(number))
    if verb == "g":
        return sign + _format_general(magnitude, False)
    if verb == "G":
        return sign + _format_general(magnitude, True)
    return None


def sprintf(fmt: Any, args: Any, strict: bool) -> str:
    """Format an array of values following Go's printing verbs."""
    name = "sprintf"
    fmt = ensure_string(name, fmt)
    items = ensure_array(name, args)

    out: list[str] = []
    chars = _Cursor(fmt)
    used = 0
    while (char := chars.next()) is not None:
        if char != "%":
            out.append(char)
            continue
        char = chars.next()
        if char is None:
            raise RegoError("missing format verb after `%` at end of format string")
        if char == "%":
            out.append("%")
            continue

        width: _Width | None = None
        if char == "." or char in _DIGITS:
            size = 0 if char == "." else int(char)
            while (ahead := chars.peek()) is not None and ahead in _DIGITS:
                size = size * 10 + int(chars.next())
            if char == "0":
                width = _Width(_WidthKind.LEADING_ZEROS, size)
            elif char == ".":
                width = _Width(_WidthKind.DECIMALS, size)
            else:
                width = _Width(_WidthKind.CELL, size)
            verb = chars.next()
            if verb is None:
                raise RegoError(
                    "missing format verb after `%width` at end of format string"
                )
        else:
            verb = char

        if used >= len(items):
            raise RegoError(f"no argument specified for format verb {used}")
        arg = items[used]
        used += 1

        flag = chars.peek()
        emit_sign = flag == "+"
        space_for_sign = flag == " "
        if emit_sign or space_for_sign:
            chars.next()

        if verb == "s":
            out.append(arg if isinstance(arg, str) else _to_string(arg, False))
            continue
        if verb == "v":
            out.append(_to_string(arg, False))
            continue
        if _is_number(arg):
            if arg < 0:
                sign = "-"
            elif emit_sign:
                sign = "+"
            elif space_for_sign:
                sign = " "
            else:
                sign = ""
            text = _format_number(verb, arg, width, sign)
            if text is None:
                raise RegoError(f"number specified for format verb {verb}.")
            out.append(text)
            continue
        if verb == "+" and chars.next() == "v":
            raise RegoError("Go-syntax fields names format verm %#v is not supported.")
        if verb in ("T", "#", "q", "p"):
            raise RegoError("Go-syntax format verbs %#v. %q, %p and %T are not supported.")

    if used < len(items):
        raise RegoError(
            f"extra arguments ({len(items)}) specified for {used} format verbs."
        )
    return "".join(out)


def _string_options(name: str, value: Any, strict: bool) -> list[str] | None:
    if isinstance(value, str):
        return [value]
    if isinstance(value, _COLLECTIONS):
        try:
            return ensure_string_collection(name, value)
        except RegoError:
            if strict:
                raise
            return None
    if strict:
        raise RegoError(f"`{name}` expects string/array[string]/set[string] argument.")
    return None


def any_prefix_match(search: Any, base: Any, strict: bool) -> Any:
    """True when some search string starts with some base string."""
    name = "strings.any_prefix_match"
    searches = _string_options(name, search, strict)
    if searches is None:
        return UNDEFINED
    bases = _string_options(name, base, strict)
    if bases is None:
        return UNDEFINED
    return any(s.startswith(b) for s in searches for b in bases)


def any_suffix_match(search: Any, base: Any, strict: bool) -> Any:
    """True when some search string ends with some base string."""
    name = "strings.any_suffix_match"
    searches = _string_options(name, search, strict)
    if searches is None:
        return UNDEFINED
    bases = _string_options(name, base, strict)
    if bases is None:
        return UNDEFINED
    return any(s.endswith(b) for s in searches for b in bases)


def replace_n(patterns: Any, s: Any, strict: bool) -> str:
    """Apply each old-to-new replacement of an object, in key order."""
    name = "strings.replace_n"
    obj = ensure_object(name, patterns)
    s = ensure_string(name, s)
    for key in sorted(obj, key=sort_key):
        value = obj[key]
        if not isinstance(key, str) or not isinstance(value, str):
            raise RegoError(f"`{name}` expects string keys and values in pattern object.")
        s = s.replace(key, value)
    return s


def reverse(s: Any, strict: bool) -> str:
    return ensure_string("strings.reverse", s)[::-1]


def substring(s: Any, offset: Any, length: Any, strict: bool) -> Any:
    """Up to length characters from offset; a negative length takes the rest."""
    name = "substring"
    s = ensure_string(name, s)
    start = _as_i64(ensure_numeric(name, offset))
    count = _as_i64(ensure_numeric(name, length))
    if start is not None and start < 0:
        if strict:
            raise RegoError("negative offset")
        return UNDEFINED
    if start is None or count is None:
        return ""
    if count < 0:
        return s[start:]
    return s[start : start + count]


def trim(s: Any, cutset: Any, strict: bool) -> str:
    name = "trim"
    return ensure_string(name, s).strip(ensure_string(name, cutset))


def trim_left(s: Any, cutset: Any, strict: bool) -> str:
    name = "trim_left"
    return ensure_string(name, s).lstrip(ensure_string(name, cutset))


def trim_right(s: Any, cutset: Any, strict: bool) -> str:
    name = "trim_right"
    return ensure_string(name, s).rstrip(ensure_string(name, cutset))


def trim_prefix(s: Any, prefix: Any, strict: bool) -> str:
    name = "trim_prefix"
    return ensure_string(name, s).removeprefix(ensure_string(name, prefix))


def trim_suffix(s: Any, suffix: Any, strict: bool) -> str:
    name = "trim_suffix"
    return ensure_string(name, s).removesuffix(ensure_string(name, suffix))


def trim_space(s: Any, strict: bool) -> str:
    return ensure_string("trim_space", s).strip()