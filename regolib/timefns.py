"""Time builtins working on nanoseconds since the Unix epoch."""

from __future__ import annotations

import calendar
import re
import time
from datetime import date as _date
from datetime import datetime, timedelta, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .values import UNDEFINED, RegoError, ensure_numeric, ensure_string, format_value

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_EPOCH_ORDINAL = _date(1970, 1, 1).toordinal()
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_NS_PER_SECOND = 10**9

_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))",
    re.ASCII,
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_i64(number: int | float) -> int | None:
    if isinstance(number, float):
        if not number.is_integer():
            return None
        number = int(number)
    if not _I64_MIN <= number <= _I64_MAX:
        return None
    return number


def _ensure_i32(name: str, value: Any) -> int:
    number = _as_i64(ensure_numeric(name, value))
    if number is None or not _I32_MIN <= number <= _I32_MAX:
        raise RegoError("could not convert to int32")
    return number


def _ns_of(number: Any) -> int:
    ns = _as_i64(number)
    if ns is None:
        raise RegoError("could not convert numeric value of `ns` to int64")
    return ns


def _fixed(dt: datetime) -> datetime:
    return dt.astimezone(timezone(dt.utcoffset()))


def _from_ns(ns: int, zone: str) -> tuple[datetime, int]:
    """Datetime (microsecond precision) in the zone, plus the leftover nanoseconds."""
    micros, nanos = divmod(ns, 1000)
    utc = _EPOCH + timedelta(microseconds=micros)
    if zone in ("UTC", ""):
        return utc, nanos
    if zone == "Local":
        return utc.astimezone(), nanos
    try:
        tzinfo = ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise RegoError(f"'{zone}' is not a valid timezone") from exc
    return _fixed(utc.astimezone(tzinfo)), nanos


def _parse_epoch(name: str, value: Any) -> tuple[datetime, int, str | None]:
    if _is_number(value):
        dt, nanos = _from_ns(_ns_of(value), "UTC")
        return dt, nanos, None
    if isinstance(value, (tuple, list)):
        if len(value) == 1 and _is_number(value[0]):
            dt, nanos = _from_ns(_ns_of(value[0]), "UTC")
            return dt, nanos, None
        if len(value) >= 2 and _is_number(value[0]) and isinstance(value[1], str):
            dt, nanos = _from_ns(_ns_of(value[0]), value[1])
            layout = None
            if len(value) >= 3:
                third = value[2]
                if not isinstance(third, str):
                    raise RegoError(
                        f"`{name}` expects 3rd element of `ns` to be a `string`. "
                        f"Got `{format_value(third)}` instead"
                    )
                layout = third
            return dt, nanos, layout
    raise RegoError(
        f"`{name}` expects `ns` to be a `number` or `array[number, string]`. "
        f"Got `{format_value(value)}` instead"
    )


def _safe_nanos(ns: int | None, strict: bool) -> Any:
    if ns is not None and _I64_MIN <= ns <= _I64_MAX:
        return ns
    if strict:
        raise RegoError("time outside of valid range")
    return UNDEFINED


def _to_ns(dt: datetime, nanos: int) -> int:
    return (dt - _EPOCH) // timedelta(microseconds=1) * 1000 + nanos


def _shift_months(dt: datetime, months: int) -> datetime | None:
    total = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(total, 12)
    month += 1
    if not 1 <= year <= 9999:
        return None
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def add_date(ns: Any, years: Any, months: Any, days: Any, strict: bool) -> Any:
    """Shift a time by years, months and days; month ends are clamped."""
    name = "time.add_date"
    dt, nanos, _ = _parse_epoch(name, ns)
    years = _ensure_i32(name, years)
    months = _ensure_i32(name, months)
    days = _ensure_i32(name, days)

    new_year = dt.year + years
    if not _I32_MIN <= new_year <= _I32_MAX:
        return UNDEFINED
    if not 1 <= new_year <= 9999:
        return _safe_nanos(None, strict)
    try:
        shifted = dt.replace(year=new_year)
    except ValueError:
        return UNDEFINED
    moved = _shift_months(shifted, months)
    if moved is None:
        return _safe_nanos(None, strict)
    try:
        moved = moved + timedelta(days=days)
    except OverflowError:
        return _safe_nanos(None, strict)
    return _safe_nanos(_to_ns(moved, nanos), strict)


def clock(ns: Any, strict: bool) -> tuple:
    """(hour, minute, second) of a time."""
    dt, _, _ = _parse_epoch("time.clock", ns)
    return (dt.hour, dt.minute, dt.second)


def date(ns: Any, strict: bool) -> tuple:
    """(year, month, day) of a time."""
    dt, _, _ = _parse_epoch("time.date", ns)
    return (dt.year, dt.month, dt.day)


def weekday(ns: Any, strict: bool) -> str:
    dt, _, _ = _parse_epoch("time.weekday", ns)
    return _WEEKDAYS[dt.weekday()]


def now_ns(strict: bool) -> Any:
    return _safe_nanos(time.time_ns(), strict)


def parse_rfc3339_ns(value: Any, strict: bool) -> Any:
    """Nanoseconds since the epoch of an RFC 3339 timestamp."""
    text = ensure_string("time.parse_rfc3339_ns", value)
    m = _RFC3339.fullmatch(text)
    if m is None:
        raise RegoError(f"invalid RFC 3339 timestamp `{text}`")
    year, month, day, hour, minute, second = (int(g) for g in m.group(1, 2, 3, 4, 5, 6))
    fraction = m.group(7) or ""
    if hour > 23 or minute > 59 or second > 60:
        raise RegoError(f"invalid RFC 3339 timestamp `{text}`")
    try:
        day_ordinal = _date(year, month, day).toordinal()
    except ValueError as exc:
        raise RegoError(f"invalid RFC 3339 timestamp `{text}`") from exc

    offset = 0
    if m.group(8) is None:
        off_hours, off_minutes = int(m.group(10)), int(m.group(11))
        if off_hours > 23 or off_minutes > 59:
            raise RegoError(f"invalid RFC 3339 timestamp `{text}`")
        offset = off_hours * 3600 + off_minutes * 60
        if m.group(9) == "-":
            offset = -offset

    leap = 0
    if second == 60:
        second = 59
        leap = _NS_PER_SECOND
    frac_ns = int(fraction[:9].ljust(9, "0")) if fraction else 0
    seconds = (day_ordinal - _EPOCH_ORDINAL) * 86400 + hour * 3600 + minute * 60 + second
    ns = (seconds - offset) * _NS_PER_SECOND + leap + frac_ns
    return _safe_nanos(ns, strict)